"""
Webhook delivery.

Best-effort JSON POSTs to a configured URL. Delivery failures of any kind are
logged and never reach the transition engine.
"""

import logging
from typing import Any, Optional

import httpx

logger = logging.getLogger(__name__)


class WebhookSink:
    """Posts notification payloads to a single webhook URL."""

    def __init__(
        self,
        url: str,
        timeout: float = 5.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.url = url
        self._client = client or httpx.AsyncClient(timeout=timeout)

    async def send(self, payload: dict[str, Any]) -> bool:
        """POST ``payload`` as JSON. Returns False if delivery failed."""
        try:
            response = await self._client.post(self.url, json=payload)
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error(f"Error sending webhook to {self.url}: {e}")
            return False
        except Exception as e:
            # Malformed URLs and transport bugs are not HTTPError subclasses
            logger.error(f"Unexpected error sending webhook to {self.url}: {e!r}")
            return False

        logger.debug(f"Webhook delivered to {self.url}: {payload}")
        return True

    async def aclose(self) -> None:
        await self._client.aclose()
