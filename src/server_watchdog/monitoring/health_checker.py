"""
Health Checker for endpoint monitoring.

Issues a single HTTP GET against an endpoint and classifies the outcome.
Every possible response maps to a CheckOutcome; nothing raised by the
network layer escapes a check.
"""
from __future__ import annotations

import logging
from enum import Enum
from typing import Optional

import httpx

from server_watchdog.monitoring.models import EndpointDescriptor

logger = logging.getLogger(__name__)

DEFAULT_REQUEST_TIMEOUT = 10.0  # seconds
BODY_LOG_LIMIT = 200  # characters


class CheckOutcome(Enum):
    """Result of one health check."""

    HEALTHY = "healthy"
    UNRESPONSIVE = "unresponsive"


class HealthChecker:
    """
    Checks whether an endpoint answers its health check.

    Classification:
    - 200 -> HEALTHY (body is logged, not inspected)
    - 408 -> UNRESPONSIVE
    - connection refused, DNS, TLS, timeout -> UNRESPONSIVE
    - malformed URL or host name -> UNRESPONSIVE
    - any other status -> UNRESPONSIVE, logged as unexpected

    Redirects are followed before classifying.

    Usage:
        checker = HealthChecker(timeout=10.0)
        outcome = await checker.check(endpoint)
    """

    def __init__(
        self,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        """
        Initialize the health checker.

        Args:
            timeout: Request timeout in seconds
            client: Shared HTTP client (a short-lived one is used per check if None)
        """
        self._timeout = timeout
        self._client = client

    async def check(self, endpoint: EndpointDescriptor) -> CheckOutcome:
        """
        Run one health check. No retries.

        Args:
            endpoint: Endpoint to check

        Returns:
            CheckOutcome for this check
        """
        try:
            if self._client is not None:
                response = await self._client.get(
                    endpoint.url,
                    timeout=self._timeout,
                    follow_redirects=True,
                )
            else:
                async with httpx.AsyncClient(
                    timeout=self._timeout,
                    follow_redirects=True,
                ) as client:
                    response = await client.get(endpoint.url)
        except (httpx.HTTPError, httpx.InvalidURL, OSError, ValueError) as e:
            logger.warning(f"Health check failed for {endpoint.name} ({endpoint.url}): {e!r}")
            return CheckOutcome.UNRESPONSIVE

        return self.classify(endpoint, response)

    def classify(self, endpoint: EndpointDescriptor, response: httpx.Response) -> CheckOutcome:
        """Map an HTTP response onto a CheckOutcome."""
        status = response.status_code

        if status == httpx.codes.OK:
            logger.debug(f"{endpoint.name} responded: {response.text[:BODY_LOG_LIMIT]!r}")
            return CheckOutcome.HEALTHY

        if status == httpx.codes.REQUEST_TIMEOUT:
            logger.warning(f"{endpoint.name} reported request timeout (408)")
            return CheckOutcome.UNRESPONSIVE

        logger.warning(f"{endpoint.name} returned unexpected status {status}")
        return CheckOutcome.UNRESPONSIVE
