"""Subscription creation endpoint."""

import json
import logging

from fastapi import APIRouter, Depends, Request

from paybridge.common.exceptions import PaybridgeError, ValidationError
from paybridge.common.responses import error_response
from paybridge.deps import get_reconciler
from paybridge.subscriptions.schemas import SubscriptionResponse
from paybridge.subscriptions.service import SubscriptionReconciler, parse_request

logger = logging.getLogger(__name__)

router = APIRouter(tags=["subscriptions"])


@router.post("/start-subscription", response_model=SubscriptionResponse)
async def start_subscription(
    request: Request,
    reconciler: SubscriptionReconciler = Depends(get_reconciler),
):
    """Create a Razorpay subscription, or return a pending one for the same customer + plan."""
    try:
        try:
            raw = await request.body()
            data = json.loads(raw) if raw.strip() else {}
        except (json.JSONDecodeError, UnicodeDecodeError):
            raise ValidationError("Request body is not valid JSON", code="invalid_fields")
        result = await reconciler.reconcile(parse_request(data))
    except PaybridgeError as e:
        return error_response(e)

    return SubscriptionResponse(subscription=result.subscription, reused=result.reused)
