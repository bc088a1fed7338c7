import logging
from typing import Any

import httpx

logger = logging.getLogger(__name__)


class SlackUtility:
    """Utility for posting alert messages through the Slack Web API.

    Delivery failures are logged and reported through the return value;
    they never raise.
    """

    API_URL: str = "https://slack.com/api/chat.postMessage"

    def __init__(self, token: str, timeout: float = 10.0) -> None:
        """Initialize Slack utility.

        Args:
            token: Slack bot token used as Bearer credential
            timeout: HTTP request timeout in seconds
        """
        self.token: str = token
        self.timeout: float = timeout

    async def _api_post(self, payload: dict[str, Any]) -> dict[str, Any]:
        """Post a JSON payload to ``chat.postMessage``.

        Raises:
            httpx.HTTPError: If the request fails or returns an error status
        """
        headers: dict[str, str] = {"Authorization": f"Bearer {self.token}"}

        async with httpx.AsyncClient() as client:
            response: httpx.Response = await client.post(
                self.API_URL, json=payload, headers=headers, timeout=self.timeout
            )
            response.raise_for_status()
            return response.json()

    async def post_message(self, channel: str, text: str) -> bool:
        """Post a plain-text message to a channel.

        Args:
            channel: Channel ID or name
            text: Message body

        Returns:
            True if Slack accepted the message, False otherwise
        """
        payload: dict[str, Any] = {"channel": channel, "text": text}

        try:
            response: dict[str, Any] = await self._api_post(payload)
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Slack API Error: {e}")
            return False

        match response:
            case {"ok": True}:
                logger.info(f"Slack alert posted to {channel}")
                return True
            case {"error": error_msg}:
                logger.error(f"Slack API Error: {error_msg}")
                return False
            case _:
                logger.error(f"Unexpected Slack API response: {response}")
                return False
