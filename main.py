#!/usr/bin/env python3
"""Entry point for the Hyperliquid validator heartbeat monitor.

This module loads the TOML configuration, locates the validator log and
starts the poll loop that alerts through Slack and PagerDuty.
"""

import argparse
import asyncio
import logging
import os
import sys
import tomllib

# Configure logging before any other imports create loggers
def setup_logging(level: str = "INFO") -> None:
    """Configure logging for the application.

    Args:
        level: Logging level as string (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """
    log_level: int = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

# Get logger for this module
logger = logging.getLogger(__name__)

from hl_validator_monitor.config import DEFAULT_CONFIG_PATH, MonitorConfig
from hl_validator_monitor.heartbeat_monitor import HeartbeatMonitor
from hl_validator_monitor.log_locator import LogLocatorError


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse startup arguments."""
    parser: argparse.ArgumentParser = argparse.ArgumentParser(
        description="Hyperliquid validator heartbeat monitor - alert on missed heartbeats",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""Configuration file keys:
  slack_token           - Slack bot token
  slack_channel         - Slack channel for alerts
  pagerduty_api_key     - PagerDuty Events v2 routing key
  base_path             - Directory holding the dated log directories
  validator_address     - Validator to monitor
  check_interval        - Seconds between checks
        """
    )
    parser.add_argument(
        "--config",
        default=DEFAULT_CONFIG_PATH,
        help=f"Path to the TOML configuration file (default: {DEFAULT_CONFIG_PATH})"
    )
    parser.add_argument(
        "--log-level",
        default=os.environ.get("LOG_LEVEL", "INFO"),
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Set the logging level (default: INFO)"
    )
    return parser.parse_args(argv)


async def main(argv: list[str] | None = None) -> None:
    """Main entry point for the validator monitor.

    Raises:
        SystemExit: On configuration or startup errors
    """
    args: argparse.Namespace = parse_args(argv)
    setup_logging(args.log_level)

    logger.info("=== Validator Heartbeat Monitor Starting ===")
    logger.info(f"Loading configuration from {args.config}...")

    try:
        config: MonitorConfig = MonitorConfig.from_file(args.config)
    except (OSError, tomllib.TOMLDecodeError, ValueError) as e:
        logger.error(f"Error loading configuration: {e}")
        sys.exit(1)

    config.log_config()

    try:
        monitor: HeartbeatMonitor = HeartbeatMonitor.from_config(config)
        await monitor.run()

    except (LogLocatorError, OSError) as e:
        logger.error(f"Failed to find latest log file: {e}")
        sys.exit(1)

    except KeyboardInterrupt:
        logger.info("Received interrupt signal, shutting down...")
        sys.exit(0)

    except Exception as e:
        logger.error(f"Fatal Error: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    asyncio.run(main())
