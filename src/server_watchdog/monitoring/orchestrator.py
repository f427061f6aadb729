"""
Orchestrator - runs one EndpointMonitor per endpoint, concurrently.

Every monitor is wrapped in a supervisor that catches and logs its terminal
error, so one failing monitor never cancels or hides its siblings.
"""
from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Callable, List, Optional, Sequence

from server_watchdog.monitoring.failure_tracker import ObservationState
from server_watchdog.monitoring.models import EndpointDescriptor
from server_watchdog.monitoring.monitor import EndpointMonitor, MonitorReport

if TYPE_CHECKING:
    from server_watchdog.config import WatchdogConfig

logger = logging.getLogger(__name__)

MonitorFactory = Callable[[EndpointDescriptor, "WatchdogConfig"], EndpointMonitor]


class Orchestrator:
    """
    Fans out monitoring across all endpoints.

    Usage:
        orchestrator = Orchestrator(config)
        reports = await orchestrator.run(endpoints)
    """

    def __init__(
        self,
        config: "WatchdogConfig",
        monitor_factory: Optional[MonitorFactory] = None,
    ) -> None:
        """
        Initialize the orchestrator.

        Args:
            config: Configuration shared read-only by every monitor
            monitor_factory: Builds the monitor for one endpoint
        """
        self._config = config
        self._monitor_factory = monitor_factory or EndpointMonitor

    async def run(self, endpoints: Sequence[EndpointDescriptor]) -> List[MonitorReport]:
        """
        Monitor all endpoints and wait for every monitor to finish.

        Returns:
            One report per endpoint, in input order
        """
        if not endpoints:
            logger.warning("No endpoints configured, nothing to monitor")
            return []

        logger.info(f"Starting {len(endpoints)} monitors")
        tasks = [
            asyncio.create_task(self._supervise(endpoint), name=f"monitor:{endpoint.name}")
            for endpoint in endpoints
        ]
        reports = await asyncio.gather(*tasks)

        alerted = sum(1 for r in reports if r.alert_sent)
        failed = sum(1 for r in reports if r.error)
        logger.info(
            f"All monitors finished: {len(reports)} endpoints, "
            f"{alerted} alerted, {failed} failed"
        )
        return list(reports)

    async def _supervise(self, endpoint: EndpointDescriptor) -> MonitorReport:
        """Run one monitor, turning its terminal error into a report."""
        try:
            monitor = self._monitor_factory(endpoint, self._config)
            return await monitor.run()
        except Exception as e:
            logger.exception(f"Monitor for {endpoint.name} failed: {e}")
            return MonitorReport(
                endpoint=endpoint,
                state=ObservationState(),
                error=str(e),
            )
