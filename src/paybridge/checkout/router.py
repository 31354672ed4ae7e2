"""Checkout verification endpoint."""

import json
import logging

from fastapi import APIRouter, Depends, Request

from paybridge.checkout.schemas import CheckoutVerifyRequest, CheckoutVerifyResponse
from paybridge.checkout.service import CheckoutVerifier
from paybridge.common.exceptions import PaybridgeError, ValidationError
from paybridge.common.responses import error_response
from paybridge.deps import get_checkout_verifier

logger = logging.getLogger(__name__)

router = APIRouter(tags=["checkout"])


@router.post("/verify-subscription", response_model=CheckoutVerifyResponse)
async def verify_subscription(
    request: Request,
    verifier: CheckoutVerifier = Depends(get_checkout_verifier),
):
    """Confirm the checkout callback maps to a captured payment and live subscription."""
    try:
        try:
            raw = await request.body()
            data = json.loads(raw) if raw.strip() else {}
        except (json.JSONDecodeError, UnicodeDecodeError):
            raise ValidationError("Request body is not valid JSON", code="missing_parameters")
        if not isinstance(data, dict):
            raise ValidationError("Request body must be a JSON object", code="missing_parameters")
        body = CheckoutVerifyRequest(
            razorpay_payment_id=_as_str(data.get("razorpay_payment_id")),
            razorpay_subscription_id=_as_str(data.get("razorpay_subscription_id")),
            razorpay_signature=_as_str(data.get("razorpay_signature")),
        )
        result = await verifier.verify(
            body.razorpay_payment_id,
            body.razorpay_subscription_id,
            body.razorpay_signature,
        )
    except PaybridgeError as e:
        return error_response(e)

    if not result.verified:
        error = ValidationError("", code=result.reason or "not_verified")
        return error_response(error, status=result.status)

    return CheckoutVerifyResponse(payment=result.payment)


def _as_str(value) -> str | None:
    if value is None:
        return None
    return str(value).strip() or None
