"""
EndpointMonitor - drives one endpoint through its observation window.

Each iteration:
    1. check the endpoint
    2. log the outcome
    3. wait the check interval
    4. advance the failure tracker
    5. if the tracker fires, email the recipients and stop
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Optional

from server_watchdog.monitoring.alerting import MailTransport, Notifier, SmtpMailTransport
from server_watchdog.monitoring.failure_tracker import FailureTracker, ObservationState
from server_watchdog.monitoring.health_checker import CheckOutcome, HealthChecker
from server_watchdog.monitoring.models import EndpointDescriptor, parse_recipient_list

if TYPE_CHECKING:
    from server_watchdog.config import WatchdogConfig

logger = logging.getLogger(__name__)

TransportFactory = Callable[["WatchdogConfig"], MailTransport]


@dataclass
class MonitorReport:
    """What one monitor run produced."""

    endpoint: EndpointDescriptor
    state: ObservationState
    checks_performed: int = 0
    alert_sent: bool = False
    deliveries: int = 0
    error: Optional[str] = None


def smtp_transport_factory(config: "WatchdogConfig") -> MailTransport:
    """Build a dedicated SMTP transport for one monitor."""
    return SmtpMailTransport(
        relay_host=config.smtp_relay_host,
        username=config.sender_address,
        password=config.smtp_password,
        port=config.smtp_port,
    )


class EndpointMonitor:
    """
    Monitors a single endpoint until it alerts or its window runs out.

    The monitor owns its ObservationState and its mail transport; nothing
    is shared with monitors for other endpoints.

    Usage:
        monitor = EndpointMonitor(endpoint, config)
        report = await monitor.run()
    """

    def __init__(
        self,
        endpoint: EndpointDescriptor,
        config: "WatchdogConfig",
        checker: Optional[HealthChecker] = None,
        tracker: Optional[FailureTracker] = None,
        transport_factory: TransportFactory = smtp_transport_factory,
    ) -> None:
        """
        Initialize the monitor.

        Args:
            endpoint: Endpoint to watch
            config: Shared read-only configuration
            checker: Health checker (built from config if None)
            tracker: Failure tracker (built from config if None)
            transport_factory: Builds this monitor's mail transport at startup
        """
        self.endpoint = endpoint
        self._config = config
        self._checker = checker or HealthChecker(timeout=config.request_timeout_seconds)
        self._tracker = tracker or FailureTracker(
            max_iterations=config.max_iterations,
            failure_threshold=config.failure_threshold,
        )
        self._transport_factory = transport_factory

    async def run(self) -> MonitorReport:
        """
        Run the observation window to completion.

        Startup errors (bad recipient list, transport construction) propagate
        to the caller. Nothing after startup raises.

        Returns:
            MonitorReport describing the window
        """
        logger.info(f"Checking server: {self.endpoint.name}")

        recipients = parse_recipient_list(self._config.recipient_source).emails
        notifier = Notifier(
            transport=self._transport_factory(self._config),
            sender=self._config.sender_address,
        )

        state = ObservationState()
        report = MonitorReport(endpoint=self.endpoint, state=state)

        while self._tracker.should_continue(state):
            outcome = await self._checker.check(self.endpoint)
            report.checks_performed += 1
            self._log_outcome(state.iterations_run, outcome)

            await asyncio.sleep(self._config.check_interval_seconds)

            transition = self._tracker.advance(state, outcome)
            state = transition.state
            report.state = state

            if transition.fire_alert:
                logger.warning(
                    f"{self.endpoint.name} failed {state.failure_count} of "
                    f"{state.iterations_run} checks, sending alerts"
                )
                report.deliveries = await notifier.notify(self.endpoint, recipients)
                report.alert_sent = True
                break

        logger.info(
            f"Finished monitoring {self.endpoint.name}: "
            f"{report.checks_performed} checks, {state.failure_count} failures, "
            f"phase={self._tracker.phase(state).value}"
        )
        return report

    def _log_outcome(self, iteration: int, outcome: CheckOutcome) -> None:
        if outcome is CheckOutcome.HEALTHY:
            logger.info(f"Iteration {iteration}, server {self.endpoint.name}: healthy")
        else:
            logger.warning(f"Iteration {iteration}, server {self.endpoint.name}: unresponsive")
