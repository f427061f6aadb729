"""
Watchdog configuration.

Configuration is read once at startup, validated, and passed by reference
into the Orchestrator. No other component reads the environment.

Environment Variables:
    SMTP_USER                 Sender address, also the relay login (required)
    SMTP_RELAY                SMTP relay hostname (required)
    SMTP_PASSWORD             SMTP relay password (required)
    EMAIL_LIST                JSON recipient list, {"emails": [...]} (required)
    SMTP_PORT                 Relay submission port (default: 587)
    SERVER_LIST_PATH          Endpoint list file (default: data/server_list.json)
    REQUEST_TIMEOUT_SECONDS   Health check timeout (default: 10)
    CHECK_INTERVAL_SECONDS    Pause between checks (default: 2)
    MAX_ITERATIONS            Checks per observation window (default: 10)
    FAILURE_THRESHOLD         Alert once failures exceed this (default: 5)
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Mapping, Optional, TypeVar

from server_watchdog.errors import ConfigurationError
from server_watchdog.monitoring.alerting import DEFAULT_SMTP_PORT
from server_watchdog.monitoring.failure_tracker import (
    DEFAULT_FAILURE_THRESHOLD,
    DEFAULT_MAX_ITERATIONS,
)
from server_watchdog.monitoring.health_checker import DEFAULT_REQUEST_TIMEOUT
from server_watchdog.monitoring.models import EndpointDescriptor, parse_endpoints

logger = logging.getLogger(__name__)

DEFAULT_SERVER_LIST_PATH = "data/server_list.json"
DEFAULT_CHECK_INTERVAL = 2.0  # seconds

REQUIRED_VARIABLES = {
    "sender_address": "SMTP_USER",
    "smtp_relay_host": "SMTP_RELAY",
    "smtp_password": "SMTP_PASSWORD",
    "recipient_source": "EMAIL_LIST",
}

T = TypeVar("T")


@dataclass(frozen=True)
class WatchdogConfig:
    """Complete watchdog configuration. Read-only once built."""

    # Mail
    sender_address: str
    smtp_relay_host: str
    smtp_password: str
    recipient_source: str
    smtp_port: int = DEFAULT_SMTP_PORT

    # Endpoints
    server_list_path: str = DEFAULT_SERVER_LIST_PATH

    # Monitoring
    request_timeout_seconds: float = DEFAULT_REQUEST_TIMEOUT
    check_interval_seconds: float = DEFAULT_CHECK_INTERVAL
    max_iterations: int = DEFAULT_MAX_ITERATIONS
    failure_threshold: int = DEFAULT_FAILURE_THRESHOLD

    def __repr__(self) -> str:
        return (
            f"WatchdogConfig(sender_address={self.sender_address!r}, "
            f"smtp_relay_host={self.smtp_relay_host!r}, smtp_port={self.smtp_port}, "
            f"server_list_path={self.server_list_path!r}, "
            f"max_iterations={self.max_iterations}, "
            f"failure_threshold={self.failure_threshold})"
        )

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "WatchdogConfig":
        """
        Load configuration from environment variables.

        Args:
            environ: Mapping to read from (os.environ if None)

        Raises:
            ConfigurationError: If a required variable is missing or a
                numeric variable cannot be parsed
        """
        env = os.environ if environ is None else environ

        missing = [var for var in REQUIRED_VARIABLES.values() if not env.get(var)]
        if missing:
            raise ConfigurationError(
                f"Missing required configuration: {', '.join(missing)}"
            )

        config = cls(
            sender_address=env["SMTP_USER"],
            smtp_relay_host=env["SMTP_RELAY"],
            smtp_password=env["SMTP_PASSWORD"],
            recipient_source=env["EMAIL_LIST"],
            smtp_port=_parse(env, "SMTP_PORT", int, DEFAULT_SMTP_PORT),
            server_list_path=env.get("SERVER_LIST_PATH", DEFAULT_SERVER_LIST_PATH),
            request_timeout_seconds=_parse(
                env, "REQUEST_TIMEOUT_SECONDS", float, DEFAULT_REQUEST_TIMEOUT
            ),
            check_interval_seconds=_parse(
                env, "CHECK_INTERVAL_SECONDS", float, DEFAULT_CHECK_INTERVAL
            ),
            max_iterations=_parse(env, "MAX_ITERATIONS", int, DEFAULT_MAX_ITERATIONS),
            failure_threshold=_parse(env, "FAILURE_THRESHOLD", int, DEFAULT_FAILURE_THRESHOLD),
        )
        config.validate()
        return config

    def validate(self) -> None:
        """Check value ranges. Raises ConfigurationError."""
        if self.max_iterations < 1:
            raise ConfigurationError("MAX_ITERATIONS must be at least 1")
        if self.failure_threshold < 0:
            raise ConfigurationError("FAILURE_THRESHOLD must not be negative")
        if self.request_timeout_seconds <= 0:
            raise ConfigurationError("REQUEST_TIMEOUT_SECONDS must be positive")
        if self.check_interval_seconds < 0:
            raise ConfigurationError("CHECK_INTERVAL_SECONDS must not be negative")


def _parse(env: Mapping[str, str], key: str, convert: Callable[[str], T], default: T) -> T:
    raw = env.get(key)
    if raw is None or raw == "":
        return default
    try:
        return convert(raw)
    except ValueError as e:
        raise ConfigurationError(f"Invalid value for {key}: {raw!r}") from e


def load_env_file(path: str = ".env") -> None:
    """Load environment variables from .env file if it exists."""
    env_path = Path(path)
    if env_path.exists():
        logger.info(f"Loading environment from {env_path}")
        with open(env_path) as f:
            for line in f:
                line = line.strip()
                if line and not line.startswith("#") and "=" in line:
                    key, _, value = line.partition("=")
                    value = value.strip().strip('"').strip("'")
                    os.environ.setdefault(key.strip(), value)


def load_endpoints(path: str) -> List[EndpointDescriptor]:
    """
    Load the endpoint list from a JSON file.

    Raises:
        ConfigurationError: If the file is missing or not a valid server list
    """
    list_path = Path(path)
    try:
        raw = list_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigurationError(f"Cannot read server list {list_path}: {e}") from e

    endpoints = parse_endpoints(raw)
    logger.info(f"Loaded {len(endpoints)} endpoints from {list_path}")
    return endpoints
