#!/usr/bin/env python3
"""Configuration management for the validator heartbeat monitor.

This module provides type-safe configuration dataclasses with validation.
Configuration is read once at startup from a TOML file with the same flat
keys the node operators already use, plus an optional ``[thresholds]`` table.
"""

import logging
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

from web3 import Web3

from .alert_evaluator import AlertThresholds

# Get logger for this module
logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "config.toml"


def _mask(secret: str) -> str:
    if len(secret) <= 8:
        return "[CONFIGURED]"
    return f"{secret[:4]}...{secret[-4:]}"


@dataclass(frozen=True, slots=True)
class SlackConfig:
    """Configuration for the Slack alert channel.

    Attributes:
        token: Slack bot token
        channel: Channel ID or name alerts are posted to
    """

    token: str
    channel: str

    def __post_init__(self) -> None:
        """Validate Slack configuration."""
        if not self.token:
            raise ValueError("Slack token is required (slack_token)")
        if not self.channel:
            raise ValueError("Slack channel is required (slack_channel)")


@dataclass(frozen=True, slots=True)
class PagerDutyConfig:
    """Configuration for the PagerDuty paging channel.

    Attributes:
        routing_key: Events API v2 integration key
        service_id: PagerDuty service the key belongs to (informational)
    """

    routing_key: str
    service_id: str = ""

    def __post_init__(self) -> None:
        """Validate PagerDuty configuration."""
        if not self.routing_key:
            raise ValueError("PagerDuty routing key is required (pagerduty_api_key)")


@dataclass(frozen=True, slots=True)
class MonitoringConfig:
    """Configuration for log polling."""
    base_path: str
    check_interval: int = 60  # seconds between poll cycles
    request_timeout: float = 10.0  # HTTP timeout for notifications in seconds
    follow_rotation: bool = False  # re-locate the log file every cycle

    def __post_init__(self) -> None:
        """Validate monitoring configuration."""
        if not self.base_path:
            raise ValueError("Log base path is required (base_path)")

        # Validate check interval
        if self.check_interval <= 0:
            raise ValueError(f"Check interval must be positive, got {self.check_interval}")
        if self.check_interval > 3600:
            raise ValueError(f"Check interval too long (max 3600s), got {self.check_interval}")

        # Validate request timeout
        if self.request_timeout <= 0:
            raise ValueError(f"Request timeout must be positive, got {self.request_timeout}")
        if self.request_timeout > 120:
            raise ValueError(f"Request timeout too long (max 120s), got {self.request_timeout}")


@dataclass(frozen=True, slots=True)
class MonitorConfig:
    """Main configuration for the monitor.

    Attributes:
        validator_address: Address of the validator to watch
        slack: Slack channel configuration
        pagerduty: PagerDuty configuration
        monitoring: Log polling configuration
        thresholds: Liveness limits applied to each record
    """

    validator_address: str
    slack: SlackConfig
    pagerduty: PagerDutyConfig
    monitoring: MonitoringConfig
    thresholds: AlertThresholds = field(default_factory=AlertThresholds)

    def __post_init__(self) -> None:
        """Validate monitor configuration."""
        if not self.validator_address:
            raise ValueError("Validator address is required (validator_address)")

        # Kept verbatim (not checksummed): log keys are matched exactly
        if not Web3.is_address(self.validator_address):
            raise ValueError(f"Invalid validator address: {self.validator_address}")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "MonitorConfig":
        """Build configuration from a parsed TOML document.

        Args:
            data: Parsed configuration mapping

        Returns:
            MonitorConfig instance with loaded values

        Raises:
            ValueError: If required keys are missing or values are invalid
        """
        def required(key: str) -> Any:
            if key not in data:
                raise ValueError(f"Missing required configuration key: {key}")
            return data[key]

        slack_config = SlackConfig(
            token=str(required("slack_token")),
            channel=str(required("slack_channel"))
        )

        pagerduty_config = PagerDutyConfig(
            routing_key=str(required("pagerduty_api_key")),
            service_id=str(data.get("pagerduty_service_id", ""))
        )

        check_interval = required("check_interval")
        if not isinstance(check_interval, int) or isinstance(check_interval, bool):
            raise ValueError(f"check_interval must be an integer, got {check_interval!r}")

        try:
            request_timeout = float(data.get("request_timeout", 10.0))
        except (TypeError, ValueError) as e:
            raise ValueError(f"Invalid numeric configuration value: {e}") from e

        follow_rotation = data.get("follow_rotation", False)
        if not isinstance(follow_rotation, bool):
            raise ValueError(f"follow_rotation must be a boolean, got {follow_rotation!r}")

        monitoring_config = MonitoringConfig(
            base_path=str(required("base_path")),
            check_interval=check_interval,
            request_timeout=request_timeout,
            follow_rotation=follow_rotation
        )

        thresholds_raw = data.get("thresholds", {})
        if not isinstance(thresholds_raw, Mapping):
            raise ValueError("[thresholds] must be a table")

        defaults = AlertThresholds()
        try:
            thresholds = AlertThresholds(
                max_since_last_success=float(
                    thresholds_raw.get("max_since_last_success", defaults.max_since_last_success)
                ),
                max_last_ack_duration=float(
                    thresholds_raw.get("max_last_ack_duration", defaults.max_last_ack_duration)
                )
            )
        except TypeError as e:
            raise ValueError(f"Invalid threshold value: {e}") from e

        return cls(
            validator_address=str(required("validator_address")),
            slack=slack_config,
            pagerduty=pagerduty_config,
            monitoring=monitoring_config,
            thresholds=thresholds
        )

    @classmethod
    def from_file(cls, path: str | Path = DEFAULT_CONFIG_PATH) -> "MonitorConfig":
        """Load configuration from a TOML file.

        Raises:
            OSError: If the file cannot be read
            tomllib.TOMLDecodeError: If the file is not valid TOML
            ValueError: If required keys are missing or values are invalid
        """
        with open(path, "rb") as f:
            data = tomllib.load(f)
        return cls.from_dict(data)

    def log_config(self) -> None:
        """Log the configuration in a readable format for debugging."""
        logger.info("=" * 60)
        logger.info("Validator Monitor Configuration")
        logger.info("=" * 60)

        logger.info(f"Validator: {self.validator_address}")

        logger.info("Log Source:")
        logger.info(f"  Base Path: {self.monitoring.base_path}")
        logger.info(f"  Check Interval: {self.monitoring.check_interval} seconds")
        logger.info(f"  Follow Rotation: {self.monitoring.follow_rotation}")

        logger.info("Thresholds:")
        logger.info(f"  Max since_last_success: {self.thresholds.max_since_last_success} seconds")
        logger.info(f"  Max last_ack_duration: {self.thresholds.max_last_ack_duration} seconds")

        logger.info("Notifications:")
        logger.info(f"  Slack Channel: {self.slack.channel}")
        logger.info(f"  Slack Token: {_mask(self.slack.token)}")
        logger.info(f"  PagerDuty Routing Key: {_mask(self.pagerduty.routing_key)}")
        if self.pagerduty.service_id:
            logger.info(f"  PagerDuty Service: {self.pagerduty.service_id}")
        logger.info(f"  Request Timeout: {self.monitoring.request_timeout} seconds")

        logger.info("=" * 60)
