#!/usr/bin/env python3
"""Decoding of heartbeat records from the validator log.

Each log line is a JSON array ``[timestamp, validator_data]``. Inside
``validator_data`` the ``heartbeat_statuses`` field is written as a list of
``[address, status]`` pairs instead of an object. This module turns such a
line into a :class:`ValidatorSnapshot` with a proper mapping.

Failures of the outer structure raise :class:`RecordDecodeError` because they
mean the log format changed. Malformed heartbeat pairs are skipped quietly
since the log producer may add entries this monitor does not understand.
"""

import json
import logging
import math
from typing import Any

from .models import HeartbeatStatus, ValidatorSnapshot

# Get logger for this module
logger = logging.getLogger(__name__)


class RecordDecodeError(ValueError):
    """Raised when a log record does not have the expected outer shape."""


def _to_seconds(value: Any) -> float | None:
    # bool is an int subclass but never a valid duration
    if not isinstance(value, (int, float)) or isinstance(value, bool):
        return None
    try:
        seconds = float(value)
    except OverflowError:
        return None
    # NaN and Infinity are accepted by json but never valid durations
    if not math.isfinite(seconds):
        return None
    return seconds


def decode_heartbeat_status(value: Any) -> HeartbeatStatus | None:
    """Decode one heartbeat status object.

    Args:
        value: Parsed JSON value of the status object

    Returns:
        HeartbeatStatus, or None if the value cannot be decoded
    """
    if not isinstance(value, dict):
        return None

    since_last_success = _to_seconds(value.get("since_last_success"))
    if since_last_success is None:
        return None

    raw_duration = value.get("last_ack_duration")
    last_ack_duration = None
    if raw_duration is not None:
        last_ack_duration = _to_seconds(raw_duration)
        if last_ack_duration is None:
            return None

    return HeartbeatStatus(
        since_last_success=since_last_success,
        last_ack_duration=last_ack_duration
    )


def decode_heartbeat_statuses(pairs: list[Any]) -> dict[str, HeartbeatStatus]:
    """Convert the on-disk pair list into an address mapping.

    Pairs that are not two elements long, have a non-string key, or carry an
    undecodable status are left out; the remaining pairs are still returned.

    Args:
        pairs: The ``heartbeat_statuses`` list as parsed from JSON

    Returns:
        Mapping of validator address to HeartbeatStatus
    """
    statuses: dict[str, HeartbeatStatus] = {}

    for index, entry in enumerate(pairs):
        if not isinstance(entry, list) or len(entry) != 2:
            logger.debug(f"Skipping heartbeat entry {index}: not a [key, value] pair")
            continue

        key, raw_status = entry
        if not isinstance(key, str):
            logger.debug(f"Skipping heartbeat entry {index}: key is not a string")
            continue

        status = decode_heartbeat_status(raw_status)
        if status is None:
            logger.debug(f"Skipping heartbeat entry {index} for {key}: undecodable status")
            continue

        statuses[key] = status

    return statuses


def _decode_validator_data(timestamp: str, data: dict[str, Any]) -> ValidatorSnapshot:
    home_validator = data.get("home_validator")
    if home_validator is None:
        home_validator = ""
    elif not isinstance(home_validator, str):
        raise RecordDecodeError(
            f"Expected home_validator to be a string, got {type(home_validator).__name__}"
        )

    missing = data.get("validators_missing_heartbeat")
    if missing is None:
        missing = []
    elif not isinstance(missing, list) or not all(isinstance(item, str) for item in missing):
        raise RecordDecodeError("Expected validators_missing_heartbeat to be a list of strings")

    pairs = data.get("heartbeat_statuses")
    if pairs is None:
        pairs = []
    elif not isinstance(pairs, list):
        raise RecordDecodeError(
            f"Expected heartbeat_statuses to be a list of pairs, got {type(pairs).__name__}"
        )

    return ValidatorSnapshot(
        timestamp=timestamp,
        home_validator=home_validator,
        validators_missing_heartbeat=tuple(missing),
        heartbeat_statuses=decode_heartbeat_statuses(pairs)
    )


def decode_log_entry(entry: Any) -> ValidatorSnapshot:
    """Decode an already parsed log record.

    Args:
        entry: Parsed JSON value, expected to be ``[timestamp, validator_data]``

    Returns:
        The decoded ValidatorSnapshot

    Raises:
        RecordDecodeError: If the record does not have the expected shape
    """
    if not isinstance(entry, list):
        raise RecordDecodeError(f"Expected a JSON array, got {type(entry).__name__}")

    if len(entry) != 2:
        raise RecordDecodeError(f"Expected a 2-element array, got {len(entry)} elements")

    timestamp, validator_data = entry
    if not isinstance(timestamp, str):
        raise RecordDecodeError(f"Expected timestamp as first element, got: {timestamp!r}")

    if not isinstance(validator_data, dict):
        raise RecordDecodeError(
            f"Expected validator data object as second element, got {type(validator_data).__name__}"
        )

    return _decode_validator_data(timestamp, validator_data)


def decode_log_line(line: str | bytes) -> ValidatorSnapshot:
    """Decode one complete log line.

    Args:
        line: Raw line content

    Returns:
        The decoded ValidatorSnapshot

    Raises:
        RecordDecodeError: If the line is not valid JSON or has the wrong shape
    """
    try:
        entry = json.loads(line)
    except (ValueError, RecursionError) as e:
        # JSONDecodeError, UnicodeDecodeError and the integer digit limit are ValueErrors
        raise RecordDecodeError(f"Invalid JSON: {e}") from e

    return decode_log_entry(entry)
