"""Inbound Razorpay webhook endpoint."""

import json
import logging

from fastapi import APIRouter, BackgroundTasks, Depends, Header, Request

from paybridge.common.exceptions import PaybridgeError, SignatureError, ValidationError
from paybridge.common.responses import error_response
from paybridge.common.schemas import OkResponse
from paybridge.common.signatures import verify_signature
from paybridge.deps import get_forwarder, get_webhook_secret
from paybridge.webhooks.classifier import classify
from paybridge.webhooks.forwarder import Forwarder

logger = logging.getLogger(__name__)

router = APIRouter(tags=["webhooks"])


@router.post("/razorpay-webhook", response_model=OkResponse)
async def razorpay_webhook(
    request: Request,
    background_tasks: BackgroundTasks,
    forwarder: Forwarder = Depends(get_forwarder),
    x_razorpay_signature: str = Header("", alias="X-Razorpay-Signature"),
):
    """Verify, classify and forward a Razorpay webhook.

    Any verified request is acknowledged with 200 whether or not it is
    billable, so Razorpay does not retry events we intentionally ignore.
    """
    # Raw bytes: a re-serialized body would not match what Razorpay signed.
    body = await request.body()

    try:
        secret = get_webhook_secret()
        if not verify_signature(secret, body, x_razorpay_signature):
            logger.warning(
                "Invalid webhook signature (present=%s)",
                bool(x_razorpay_signature),
                extra={"security_event": "webhook_signature_invalid"},
            )
            raise SignatureError()

        try:
            event_data = json.loads(body)
        except (json.JSONDecodeError, UnicodeDecodeError):
            raise ValidationError("Webhook body is not valid JSON", code="invalid_json")
        if not isinstance(event_data, dict):
            raise ValidationError("Webhook body must be a JSON object", code="invalid_json")
    except PaybridgeError as e:
        return error_response(e)

    forward_payload = classify(event_data)
    if forward_payload is None:
        logger.info(
            "Ignored event (not a paid event): %s",
            event_data.get("event"),
            extra={"event": event_data.get("event")},
        )
    else:
        background_tasks.add_task(forwarder.forward, forward_payload)

    return OkResponse()
