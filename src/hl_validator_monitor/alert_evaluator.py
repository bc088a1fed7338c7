#!/usr/bin/env python3
"""Alert decisions for a single validator.

The evaluator is a pure function of a decoded snapshot and the monitored
address. Sending the resulting message is left to the caller.
"""

from dataclasses import dataclass

from .models import HeartbeatStatus, ValidatorSnapshot


@dataclass(frozen=True, slots=True)
class AlertThresholds:
    """Liveness limits, in seconds.

    Attributes:
        max_since_last_success: Alert when the last success is older than this
        max_last_ack_duration: Alert when the last acknowledgment took longer
    """

    max_since_last_success: float = 40.0
    max_last_ack_duration: float = 0.02

    def __post_init__(self) -> None:
        """Validate threshold values."""
        if self.max_since_last_success <= 0:
            raise ValueError(
                f"max_since_last_success must be positive, got {self.max_since_last_success}"
            )
        if self.max_last_ack_duration <= 0:
            raise ValueError(
                f"max_last_ack_duration must be positive, got {self.max_last_ack_duration}"
            )


@dataclass(frozen=True, slots=True)
class AlertDecision:
    """Outcome of evaluating one snapshot.

    Attributes:
        validator_address: The monitored address
        timestamp: Timestamp of the evaluated record
        should_alert: Whether the alert must be sent
        reasons: Short descriptions of every breached condition
        message: Alert text, None when no alert is due
    """

    validator_address: str
    timestamp: str
    should_alert: bool
    reasons: tuple[str, ...] = ()
    message: str | None = None


def format_alert_message(
    validator_address: str,
    status: HeartbeatStatus | None,
    reasons: tuple[str, ...],
    timestamp: str
) -> str:
    """Build the human-readable alert text."""
    if status is None:
        since_last_success = "none"
        last_ack_duration = "none"
    else:
        since_last_success = f"{status.since_last_success}"
        last_ack_duration = status.format_last_ack_duration()

    return (
        f"Alert for HyperLiq validator {validator_address}:\n"
        f"since_last_success = {since_last_success}, last_ack_duration = {last_ack_duration}\n"
        f"reason: {'; '.join(reasons)} (log timestamp {timestamp})"
    )


def check_status(status: HeartbeatStatus, thresholds: AlertThresholds) -> tuple[str, ...]:
    """Return the breached conditions for a reported status."""
    reasons: list[str] = []

    if status.since_last_success < 0:
        reasons.append(f"since_last_success is negative ({status.since_last_success})")
    elif status.since_last_success > thresholds.max_since_last_success:
        reasons.append(
            f"since_last_success {status.since_last_success} > {thresholds.max_since_last_success}"
        )

    if status.last_ack_duration is None:
        reasons.append("no heartbeat acknowledgment recorded")
    elif status.last_ack_duration < 0:
        reasons.append(f"last_ack_duration is negative ({status.last_ack_duration})")
    elif status.last_ack_duration > thresholds.max_last_ack_duration:
        reasons.append(
            f"last_ack_duration {status.last_ack_duration} > {thresholds.max_last_ack_duration}"
        )

    return tuple(reasons)


def evaluate(
    snapshot: ValidatorSnapshot,
    validator_address: str,
    thresholds: AlertThresholds = AlertThresholds()
) -> AlertDecision:
    """Decide whether the monitored validator needs an alert.

    A validator that is absent from ``heartbeat_statuses`` always alerts,
    since it is not reporting at all.

    Args:
        snapshot: Decoded record to evaluate
        validator_address: Address of the monitored validator
        thresholds: Limits to apply

    Returns:
        AlertDecision carrying the message when an alert is due
    """
    status = snapshot.status_for(validator_address)

    if status is None:
        reasons: tuple[str, ...] = ("no decodable heartbeat status reported",)
    else:
        reasons = check_status(status, thresholds)

    if not reasons:
        return AlertDecision(
            validator_address=validator_address,
            timestamp=snapshot.timestamp,
            should_alert=False
        )

    return AlertDecision(
        validator_address=validator_address,
        timestamp=snapshot.timestamp,
        should_alert=True,
        reasons=reasons,
        message=format_alert_message(validator_address, status, reasons, snapshot.timestamp)
    )
