"""Decide whether a Razorpay webhook is a paid event and build the forward record."""

import logging
from typing import Any, Callable, Optional

from paybridge.webhooks.schemas import ForwardPayload, WebhookEvent

logger = logging.getLogger(__name__)

CAPTURED = "captured"


def _text(value: Any) -> Optional[str]:
    """Return a non-empty string, stringified number, or None for anything else."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, str) and value:
        return value
    return None


def _amount(value: Any) -> Optional[int]:
    """Amounts are integer paise; any other shape is dropped."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


def _first(*values: Any) -> Optional[str]:
    for value in values:
        if isinstance(value, str) and value:
            return value
    return None


def resolve_identity(event: WebhookEvent) -> tuple[Optional[str], Optional[str]]:
    """Return (email, name) using subscription notes, then payment, then customer.

    Notes are written by us when the subscription is created, so they win
    over whatever Razorpay recorded on the payment or customer.
    """
    subscription = event.entity("subscription") or {}
    payment = event.entity("payment") or {}
    customer = event.entity("customer") or {}
    notes = subscription.get("notes")
    if not isinstance(notes, dict):
        notes = {}

    email = _first(notes.get("email"), payment.get("email"), customer.get("email"))
    name = _first(notes.get("name"), payment.get("name"), customer.get("name"))
    return email, name


def _captured_payment(event: WebhookEvent) -> Optional[dict[str, Any]]:
    payment = event.entity("payment")
    if payment and payment.get("status") == CAPTURED:
        return payment
    return None


def _payment_captured(event: WebhookEvent, raw: dict[str, Any]) -> Optional[ForwardPayload]:
    payment = _captured_payment(event)
    if payment is None:
        return None
    email, name = resolve_identity(event)
    return ForwardPayload(
        event=event.event,
        payment_id=_text(payment.get("id")),
        amount=_amount(payment.get("amount")),
        currency=_text(payment.get("currency")),
        email=email,
        name=name,
        raw=raw,
    )


def _subscription_paid(event: WebhookEvent, raw: dict[str, Any]) -> Optional[ForwardPayload]:
    # An activation without an attached captured payment is not revenue.
    payment = _captured_payment(event)
    if payment is None:
        return None
    subscription = event.entity("subscription") or {}
    email, name = resolve_identity(event)
    return ForwardPayload(
        event=event.event,
        payment_id=_text(payment.get("id")),
        subscription_id=_text(subscription.get("id")),
        plan_id=_text(subscription.get("plan_id")),
        amount=_amount(payment.get("amount")),
        currency=_text(payment.get("currency")),
        email=email,
        name=name,
        raw=raw,
    )


def _order_paid(event: WebhookEvent, raw: dict[str, Any]) -> Optional[ForwardPayload]:
    payment = _captured_payment(event)
    if payment is None:
        return None
    order = event.entity("order") or {}
    email, name = resolve_identity(event)
    return ForwardPayload(
        event=event.event,
        payment_id=_text(payment.get("id")),
        order_id=_text(order.get("id")),
        amount=_amount(payment.get("amount")),
        currency=_text(payment.get("currency")),
        email=email,
        name=name,
        raw=raw,
    )


BILLABLE_EVENTS: dict[str, Callable[[WebhookEvent, dict[str, Any]], Optional[ForwardPayload]]] = {
    "payment.captured": _payment_captured,
    "subscription.charged": _subscription_paid,
    "subscription.activated": _subscription_paid,
    "order.paid": _order_paid,
}


def classify(body: dict[str, Any]) -> Optional[ForwardPayload]:
    """Return the forward record for a paid event, or None if it is not billable."""
    event = WebhookEvent.from_body(body)
    builder = BILLABLE_EVENTS.get(event.event)
    if builder is None:
        logger.debug("Ignoring Razorpay event type: %s", event.event)
        return None
    return builder(event, body if isinstance(body, dict) else {})
