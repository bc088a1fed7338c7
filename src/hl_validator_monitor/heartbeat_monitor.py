import asyncio
import json
import logging
from pathlib import Path
from typing import Any

from .alert_evaluator import AlertDecision, evaluate
from .config import MonitorConfig
from .log_locator import LogLocatorError, find_latest_log_file
from .record_decoder import RecordDecodeError, decode_log_entry
from .utils.pagerduty_utility import PagerDutyUtility
from .utils.slack_utility import SlackUtility

# Get logger for this module
logger = logging.getLogger(__name__)

# Fixed wait after the log file could not be opened or located
FILE_RETRY_DELAY: float = 30.0


class HeartbeatMonitor:
    """
    Monitor that reads the newest heartbeat record from the validator log,
    checks the configured validator against the liveness thresholds and
    alerts through Slack and PagerDuty.
    """

    def __init__(
        self,
        config: MonitorConfig,
        slack: SlackUtility,
        pagerduty: PagerDutyUtility
    ) -> None:
        """
        Initialize the HeartbeatMonitor.

        :param config: Monitor configuration object
        :param slack: Slack notifier, shared for the process lifetime
        :param pagerduty: PagerDuty notifier, shared for the process lifetime
        """
        self.config = config
        self.slack = slack
        self.pagerduty = pagerduty
        self.log_file: Path | None = None

    @classmethod
    def from_config(cls, config: MonitorConfig) -> "HeartbeatMonitor":
        """Create a monitor with notifiers built from the configuration."""
        timeout = config.monitoring.request_timeout
        return cls(
            config=config,
            slack=SlackUtility(config.slack.token, timeout=timeout),
            pagerduty=PagerDutyUtility(config.pagerduty.routing_key, timeout=timeout)
        )

    def locate_log_file(self) -> Path:
        """
        Find the current log file and remember it for the next cycles.

        :return: Path of the located log file
        :raises LogLocatorError: If no log directory or file exists
        """
        log_file = find_latest_log_file(self.config.monitoring.base_path)
        if log_file != self.log_file:
            logger.info(f"Monitoring log file: {log_file}")
        self.log_file = log_file
        return log_file

    def read_last_record(self, path: Path) -> list[Any] | None:
        """
        Read a log file and return its last line that parses as a JSON array.

        Lines that are not valid JSON are logged and skipped. Earlier array
        lines are discarded.

        :param path: Log file to read
        :return: The last array record, or None if the file holds none
        :raises OSError: If the file cannot be opened or read
        """
        last_record: list[Any] | None = None

        with open(path, "r", encoding="utf-8", errors="replace") as f:
            for line_number, line in enumerate(f, start=1):
                line = line.strip()
                if not line:
                    continue

                try:
                    entry = json.loads(line)
                except (ValueError, RecursionError) as e:
                    logger.warning(f"Error decoding JSON line {line_number}: {e}")
                    continue

                if isinstance(entry, list):
                    last_record = entry

        return last_record

    async def dispatch_alert(self, message: str) -> None:
        """
        Send an alert to Slack and PagerDuty, one after the other.

        Notifier failures are logged by the notifiers and not escalated.

        :param message: Alert text
        """
        await self.slack.post_message(self.config.slack.channel, message)
        await self.pagerduty.trigger(message)

    async def process_record(self, record: list[Any]) -> AlertDecision | None:
        """
        Decode and evaluate one raw record, alerting when needed.

        :param record: Parsed ``[timestamp, validator_data]`` array
        :return: The decision, or None if the record could not be decoded
        """
        logger.debug(f"Raw JSON content: {json.dumps(record)}")

        try:
            snapshot = decode_log_entry(record)
        except RecordDecodeError as e:
            logger.error(f"Error: Could not decode log record as expected array: {e}")
            return None

        logger.info(f"Timestamp: {snapshot.timestamp}")

        decision = evaluate(
            snapshot,
            self.config.validator_address,
            self.config.thresholds
        )

        if decision.should_alert and decision.message:
            logger.warning(f"Alerting: {'; '.join(decision.reasons)}")
            await self.dispatch_alert(decision.message)
        else:
            logger.debug(f"Validator {self.config.validator_address} healthy")

        return decision

    async def poll_once(self) -> float:
        """
        Run one poll cycle.

        :return: Seconds to wait before the next cycle
        """
        if self.config.monitoring.follow_rotation or self.log_file is None:
            try:
                self.locate_log_file()
            except (LogLocatorError, OSError) as e:
                logger.error(f"Failed to find latest log file: {e}")
                return FILE_RETRY_DELAY

        try:
            record = self.read_last_record(self.log_file)
        except OSError as e:
            logger.error(f"Error opening log file: {e}")
            return FILE_RETRY_DELAY

        if record is None:
            logger.warning(f"No heartbeat record found in {self.log_file}")
        else:
            await self.process_record(record)

        return float(self.config.monitoring.check_interval)

    async def run(self) -> None:
        """
        Main entry point for the HeartbeatMonitor.

        Locates the log file once, then polls until the process is stopped.

        :raises LogLocatorError: If no log file exists at startup
        """
        logger.info("Starting HeartbeatMonitor...")
        self.locate_log_file()

        logger.info(
            f"Watching validator {self.config.validator_address} "
            f"every {self.config.monitoring.check_interval} seconds"
        )

        while True:
            delay = await self.poll_once()
            await asyncio.sleep(delay)
