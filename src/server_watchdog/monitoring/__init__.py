"""
Monitoring Layer - Health checks, failure tracking, and email alerts.

This module provides:
    - HealthChecker: One HTTP GET per check, classified into a CheckOutcome
    - CheckOutcome: Health check result enum (HEALTHY, UNRESPONSIVE)
    - FailureTracker: Pure state machine over an ObservationState
    - Notifier: One alert email per recipient
    - SmtpMailTransport: STARTTLS relay delivery
    - EndpointMonitor: Drives one endpoint's observation window
    - Orchestrator: Runs every EndpointMonitor concurrently

Alert Threshold:
    - An endpoint alerts once more than 5 of its checks have failed
    - A window is at most 10 checks; monitoring stops after an alert
    - Healthy checks do not reset the failure count
"""

from .models import (
    EndpointDescriptor,
    RecipientList,
    parse_endpoints,
    parse_recipient_list,
)
from .health_checker import CheckOutcome, HealthChecker
from .failure_tracker import (
    FailureTracker,
    ObservationState,
    TrackerPhase,
    Transition,
)
from .alerting import AlertMessage, MailTransport, Notifier, SmtpMailTransport
from .monitor import EndpointMonitor, MonitorReport
from .orchestrator import Orchestrator

__all__ = [
    # Models
    "EndpointDescriptor",
    "RecipientList",
    "parse_endpoints",
    "parse_recipient_list",
    # Health checking
    "HealthChecker",
    "CheckOutcome",
    # Failure tracking
    "FailureTracker",
    "ObservationState",
    "TrackerPhase",
    "Transition",
    # Alerting
    "AlertMessage",
    "MailTransport",
    "Notifier",
    "SmtpMailTransport",
    # Monitors
    "EndpointMonitor",
    "MonitorReport",
    "Orchestrator",
]
