"""Posts paid-event records to the downstream automation hook (e.g. Zapier)."""

import logging
from typing import Optional

import httpx

from paybridge.common.exceptions import ForwardError
from paybridge.webhooks.schemas import ForwardPayload

logger = logging.getLogger(__name__)


class Forwarder:
    """Single-shot JSON POST to the automation hook. Failures are logged, never raised."""

    def __init__(
        self,
        url: str = "",
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.url = url
        self.timeout = timeout
        self._transport = transport

    async def forward(self, payload: ForwardPayload) -> bool:
        """Send ``payload``; returns True on a 2xx response."""
        log_extra = {
            "event": payload.event,
            "payment_id": payload.payment_id,
            "subscription_id": payload.subscription_id,
        }
        if not self.url:
            logger.warning("Forward URL not set - skipping forward", extra=log_extra)
            return False

        try:
            await self._post(payload)
        except ForwardError as e:
            logger.error("Failed to forward paid event: %s", e.message, extra=log_extra)
            return False

        logger.info(
            "Forwarded paid event: %s %s",
            payload.event,
            payload.payment_id or payload.subscription_id,
            extra=log_extra,
        )
        return True

    async def _post(self, payload: ForwardPayload) -> None:
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self._transport,
            ) as client:
                resp = await client.post(self.url, json=payload.to_json_dict())
        except httpx.HTTPError as exc:
            raise ForwardError(str(exc) or exc.__class__.__name__) from exc

        if not 200 <= resp.status_code < 300:
            raise ForwardError(
                f"HTTP {resp.status_code}: {resp.text[:200]}",
                status_code=resp.status_code,
            )
