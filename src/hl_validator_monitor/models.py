#!/usr/bin/env python3
"""Data models for the validator heartbeat monitor.

This module provides immutable data classes for the heartbeat state decoded
from a single validator log record.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping


@dataclass(frozen=True, slots=True)
class HeartbeatStatus:
    """Liveness snapshot for one validator.

    Attributes:
        since_last_success: Seconds since the last acknowledged heartbeat
        last_ack_duration: Seconds the last acknowledgment took, or None
            when no acknowledgment has been observed yet
    """

    since_last_success: float
    last_ack_duration: float | None = None

    def format_last_ack_duration(self) -> str:
        """Render the acknowledgment duration for alert messages."""
        if self.last_ack_duration is None:
            return "none"
        return f"{self.last_ack_duration}"

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "since_last_success": self.since_last_success,
            "last_ack_duration": self.last_ack_duration
        }


@dataclass(frozen=True, slots=True)
class ValidatorSnapshot:
    """One decoded heartbeat record from the validator log.

    The pair-list encoding used on disk for ``heartbeat_statuses`` is
    resolved by the decoder; this class only ever holds the normalized,
    read-only mapping.

    Attributes:
        timestamp: Capture time of the log line, kept verbatim
        home_validator: Address of the validator that wrote the log
        validators_missing_heartbeat: Addresses reported as missing
        heartbeat_statuses: Validator address to heartbeat status
    """

    timestamp: str
    home_validator: str = ""
    validators_missing_heartbeat: tuple[str, ...] = ()
    heartbeat_statuses: Mapping[str, HeartbeatStatus] = field(
        default_factory=lambda: MappingProxyType({})
    )

    def __post_init__(self) -> None:
        """Freeze the container fields."""
        object.__setattr__(
            self, 'validators_missing_heartbeat', tuple(self.validators_missing_heartbeat)
        )
        if not isinstance(self.heartbeat_statuses, MappingProxyType):
            object.__setattr__(
                self, 'heartbeat_statuses', MappingProxyType(dict(self.heartbeat_statuses))
            )

    def __str__(self) -> str:
        """Human-readable string representation."""
        return (
            f"ValidatorSnapshot(timestamp={self.timestamp}, "
            f"home={self.home_validator[:10]}..., "
            f"statuses={len(self.heartbeat_statuses)}, "
            f"missing={len(self.validators_missing_heartbeat)})"
        )

    def status_for(self, address: str) -> HeartbeatStatus | None:
        """Look up the heartbeat status reported for a validator address."""
        return self.heartbeat_statuses.get(address)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "timestamp": self.timestamp,
            "home_validator": self.home_validator,
            "validators_missing_heartbeat": list(self.validators_missing_heartbeat),
            "heartbeat_statuses": {
                address: status.to_dict()
                for address, status in self.heartbeat_statuses.items()
            }
        }
