"""
Hyperliquid validator heartbeat monitor.

Reads the newest heartbeat record from a validator node log and alerts
through Slack and PagerDuty when the monitored validator stops keeping up.
"""

from .alert_evaluator import AlertDecision, AlertThresholds, evaluate
from .config import MonitorConfig
from .heartbeat_monitor import HeartbeatMonitor
from .models import HeartbeatStatus, ValidatorSnapshot
from .record_decoder import RecordDecodeError, decode_log_line

__all__ = [
    "AlertDecision",
    "AlertThresholds",
    "HeartbeatMonitor",
    "HeartbeatStatus",
    "MonitorConfig",
    "RecordDecodeError",
    "ValidatorSnapshot",
    "decode_log_line",
    "evaluate",
]
__version__ = "0.1.0"
