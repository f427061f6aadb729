"""
Monitoring layer test fixtures.

Tests health checks, failure tracking, alerting, and the monitor loop.
No test touches the network: HTTP goes through httpx.MockTransport and
mail goes through an AsyncMock transport.
"""
import pytest
from typing import Callable, List
from unittest.mock import MagicMock, AsyncMock

import httpx

from server_watchdog.config import WatchdogConfig
from server_watchdog.monitoring.alerting import Notifier
from server_watchdog.monitoring.health_checker import CheckOutcome, HealthChecker
from server_watchdog.monitoring.models import EndpointDescriptor


HEALTHY = CheckOutcome.HEALTHY
UNRESPONSIVE = CheckOutcome.UNRESPONSIVE


# =============================================================================
# Endpoint / Config Fixtures
# =============================================================================

@pytest.fixture
def endpoint():
    """A single monitored endpoint."""
    return EndpointDescriptor(url="http://api.internal/health", name="api-1")


@pytest.fixture
def other_endpoint():
    """A second endpoint for concurrency tests."""
    return EndpointDescriptor(url="http://db.internal/health", name="db-1")


@pytest.fixture
def recipients():
    return ["ops@example.com", "oncall@example.com"]


@pytest.fixture
def config(recipients):
    """Config with no pause between checks."""
    emails = ", ".join(f'"{r}"' for r in recipients)
    return WatchdogConfig(
        sender_address="watchdog@example.com",
        smtp_relay_host="smtp.example.com",
        smtp_password="secret",
        recipient_source=f'{{"emails": [{emails}]}}',
        check_interval_seconds=0,
    )


# =============================================================================
# HTTP Fixtures
# =============================================================================

@pytest.fixture
def make_http_client() -> Callable[[Callable[[httpx.Request], httpx.Response]], httpx.AsyncClient]:
    """Build an AsyncClient whose requests are answered by a handler."""

    def _make(handler):
        return httpx.AsyncClient(transport=httpx.MockTransport(handler))

    return _make


@pytest.fixture
def make_checker(make_http_client):
    """HealthChecker backed by a mock transport."""

    def _make(handler):
        return HealthChecker(client=make_http_client(handler))

    return _make


# =============================================================================
# Scripted Checker Fixtures
# =============================================================================

def scripted_checker(outcomes: List[CheckOutcome]) -> MagicMock:
    """Checker that returns the given outcomes in order."""
    checker = MagicMock(spec=HealthChecker)
    checker.check = AsyncMock(side_effect=list(outcomes))
    return checker


@pytest.fixture
def make_scripted_checker():
    return scripted_checker


@pytest.fixture
def always_down_checker():
    return scripted_checker([UNRESPONSIVE] * 10)


@pytest.fixture
def always_up_checker():
    return scripted_checker([HEALTHY] * 10)


# =============================================================================
# Alerting Fixtures
# =============================================================================

@pytest.fixture
def mock_transport():
    """Mail transport that accepts every message."""
    transport = MagicMock()
    transport.send = AsyncMock(return_value=None)
    return transport


@pytest.fixture
def transport_factory(mock_transport):
    """Factory handing the shared mock transport to a monitor."""
    return MagicMock(return_value=mock_transport)


@pytest.fixture
def notifier(mock_transport):
    return Notifier(transport=mock_transport, sender="watchdog@example.com")
