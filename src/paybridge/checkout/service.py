"""CheckoutVerifier: confirm a completed checkout maps to a captured payment."""

import logging
from typing import Optional

from paybridge.common.exceptions import ValidationError
from paybridge.common.signatures import payment_signature_message, verify_signature
from paybridge.checkout.schemas import PaymentSnapshot, VerificationResult
from paybridge.provider.client import RazorpayClient

logger = logging.getLogger(__name__)

ACTIVE_STATUSES: frozenset[str] = frozenset({"active", "authenticated"})


class CheckoutVerifier:
    """Checks the checkout signature, the payment and (optionally) the subscription."""

    def __init__(
        self,
        client: RazorpayClient,
        key_secret: str,
        check_subscription: bool = True,
    ):
        self.client = client
        self.key_secret = key_secret
        self.check_subscription = check_subscription

    async def verify(
        self,
        payment_id: Optional[str],
        subscription_id: Optional[str],
        signature: Optional[str] = None,
    ) -> VerificationResult:
        if not payment_id or not subscription_id:
            raise ValidationError(
                "razorpay_payment_id and razorpay_subscription_id are required",
                code="missing_parameters",
            )
        log_extra = {"payment_id": payment_id, "subscription_id": subscription_id}

        if signature:
            message = payment_signature_message(payment_id, subscription_id)
            if not verify_signature(self.key_secret, message, signature):
                logger.warning(
                    "Checkout signature mismatch",
                    extra={**log_extra, "security_event": "checkout_signature_mismatch"},
                )
                return VerificationResult(verified=False, reason="signature_mismatch")
        else:
            # Called by our own client right after checkout; the payment
            # status check below still applies.
            logger.warning("No checkout signature provided; continuing with payment check only", extra=log_extra)

        payment = await self.client.fetch_payment(payment_id)
        snapshot = PaymentSnapshot.from_payment(payment)

        if payment.get("status") != "captured":
            logger.warning(
                "Payment status not captured: %s",
                payment.get("status"),
                extra={**log_extra, "status": payment.get("status")},
            )
            return VerificationResult(
                verified=False,
                payment=snapshot,
                reason="payment_not_captured",
                status=payment.get("status"),
            )

        if self.check_subscription:
            subscription = await self.client.fetch_subscription(subscription_id)
            if subscription.get("status") not in ACTIVE_STATUSES:
                logger.warning(
                    "Subscription not active: %s",
                    subscription.get("status"),
                    extra={**log_extra, "status": subscription.get("status")},
                )
                return VerificationResult(
                    verified=False,
                    payment=snapshot,
                    reason="subscription_not_active",
                    status=subscription.get("status"),
                )

        logger.info("Payment verified", extra=log_extra)
        return VerificationResult(verified=True, payment=snapshot)
