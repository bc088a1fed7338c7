import logging
from typing import Any

import httpx

logger = logging.getLogger(__name__)


class PagerDutyUtility:
    """Utility for triggering incidents through the PagerDuty Events API v2.

    Every event is sent as a critical trigger with a fixed source and
    component. Failures are logged and never raised.
    """

    EVENTS_URL: str = "https://events.pagerduty.com/v2/enqueue"
    SOURCE: str = "validator-monitoring-script"
    COMPONENT: str = "Validator Monitoring"
    SEVERITY: str = "critical"
    MAX_SUMMARY_LENGTH: int = 1024

    def __init__(self, routing_key: str, timeout: float = 10.0) -> None:
        """Initialize PagerDuty utility.

        Args:
            routing_key: Integration key of the target service
            timeout: HTTP request timeout in seconds
        """
        self.routing_key: str = routing_key
        self.timeout: float = timeout

    def build_event(self, description: str) -> dict[str, Any]:
        """Build the trigger event for a description."""
        return {
            "routing_key": self.routing_key,
            "event_action": "trigger",
            "payload": {
                "summary": description[:self.MAX_SUMMARY_LENGTH],
                "source": self.SOURCE,
                "severity": self.SEVERITY,
                "component": self.COMPONENT,
            },
        }

    async def _enqueue(self, event: dict[str, Any]) -> dict[str, Any]:
        """Send an event to the Events API.

        Raises:
            httpx.HTTPError: If the request fails or returns an error status
        """
        async with httpx.AsyncClient() as client:
            response: httpx.Response = await client.post(
                self.EVENTS_URL, json=event, timeout=self.timeout
            )
            response.raise_for_status()
            return response.json()

    async def trigger(self, description: str) -> bool:
        """Trigger a critical incident.

        Args:
            description: Incident summary

        Returns:
            True if PagerDuty accepted the event, False otherwise
        """
        try:
            response: dict[str, Any] = await self._enqueue(self.build_event(description))
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"PagerDuty API Error: {e}")
            return False

        dedup_key = response.get("dedup_key") if isinstance(response, dict) else None
        logger.info(f"PagerDuty incident triggered (dedup_key={dedup_key})")
        return True
