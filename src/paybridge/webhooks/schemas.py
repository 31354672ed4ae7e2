"""Pydantic schemas for inbound Razorpay webhooks and the forwarded record."""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class WebhookEvent(BaseModel):
    """Decoded webhook body: ``{"event": ..., "payload": {<kind>: {"entity": {...}}}}``."""

    event: str = ""
    payload: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_body(cls, body: Any) -> "WebhookEvent":
        if not isinstance(body, dict):
            return cls()
        payload = body.get("payload")
        return cls(
            event=str(body.get("event") or ""),
            payload=payload if isinstance(payload, dict) else {},
        )

    def entity(self, kind: str) -> Optional[dict[str, Any]]:
        """Return ``payload.<kind>.entity`` or None."""
        wrapper = self.payload.get(kind)
        if not isinstance(wrapper, dict):
            return None
        entity = wrapper.get("entity")
        return entity if isinstance(entity, dict) else None


class ForwardPayload(BaseModel):
    """Normalized paid-event record posted to the automation hook.

    Only the fields set for a given event type are serialized; ``email``
    and ``name`` are always set, possibly to None.
    """

    model_config = ConfigDict(coerce_numbers_to_str=True)

    event: str
    payment_id: Optional[str] = None
    subscription_id: Optional[str] = None
    order_id: Optional[str] = None
    plan_id: Optional[str] = None
    amount: Optional[int] = None
    currency: Optional[str] = None
    email: Optional[str] = None
    name: Optional[str] = None
    raw: dict[str, Any] = Field(default_factory=dict)

    def to_json_dict(self) -> dict[str, Any]:
        return self.model_dump(exclude_unset=True)
