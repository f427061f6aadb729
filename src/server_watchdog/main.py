"""
Server Watchdog - Main Entry Point

Checks every configured server over HTTP and emails the operators when a
server keeps failing its health checks.

Usage:
    python -m server_watchdog.main [--servers PATH] [--env-file PATH]
    server-watchdog --log-level DEBUG

Configuration:
    The watchdog reads configuration from:
    1. Environment variables (see server_watchdog.config)
    2. A .env file in the working directory (does not override the environment)
    3. Command line arguments

Exit Codes:
    0   All monitors finished (individual monitor failures are logged)
    1   Configuration error, nothing was monitored
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
from dataclasses import replace
from typing import List, Optional

# Configure logging before imports
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()
logging.basicConfig(
    level=getattr(logging, LOG_LEVEL, logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)

from server_watchdog.config import WatchdogConfig, load_endpoints, load_env_file  # noqa: E402
from server_watchdog.errors import ConfigurationError  # noqa: E402
from server_watchdog.monitoring import Orchestrator  # noqa: E402


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Server Watchdog",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--servers",
        type=str,
        help="Path to the server list JSON file (overrides SERVER_LIST_PATH)",
    )
    parser.add_argument(
        "--env-file",
        type=str,
        default=".env",
        help="Path to a .env file (default: .env)",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Override log level",
    )
    return parser.parse_args(argv)


async def main_async(args: argparse.Namespace) -> int:
    """Async main function."""
    try:
        config = WatchdogConfig.from_env()
        if args.servers:
            config = replace(config, server_list_path=args.servers)
        endpoints = load_endpoints(config.server_list_path)
    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        return 1

    logger.info("=" * 60)
    logger.info("SERVER WATCHDOG")
    logger.info("=" * 60)
    logger.info(f"Endpoints: {len(endpoints)}")
    logger.info(
        f"Window: {config.max_iterations} checks every {config.check_interval_seconds}s, "
        f"alert after more than {config.failure_threshold} failures"
    )
    logger.info("=" * 60)

    orchestrator = Orchestrator(config)
    await orchestrator.run(endpoints)
    return 0


def apply_log_level(cli_level: Optional[str] = None) -> None:
    """Set the root log level. --log-level wins over LOG_LEVEL (which may come from .env)."""
    level_name = (cli_level or os.environ.get("LOG_LEVEL", "")).upper()
    level = getattr(logging, level_name, None) if level_name else None
    if isinstance(level, int):
        logging.getLogger().setLevel(level)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    load_env_file(args.env_file)
    apply_log_level(args.log_level)

    try:
        return asyncio.run(main_async(args))
    except KeyboardInterrupt:
        logger.info("Interrupted")
        return 0


if __name__ == "__main__":
    sys.exit(main())
