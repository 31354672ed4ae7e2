"""Pydantic schemas for checkout verification."""

from typing import Any, Optional

from pydantic import BaseModel


class CheckoutVerifyRequest(BaseModel):
    razorpay_payment_id: Optional[str] = None
    razorpay_subscription_id: Optional[str] = None
    razorpay_signature: Optional[str] = None


class PaymentSnapshot(BaseModel):
    id: Optional[str] = None
    status: Optional[str] = None
    amount: Optional[int] = None

    @classmethod
    def from_payment(cls, payment: dict[str, Any]) -> "PaymentSnapshot":
        return cls(
            id=payment.get("id"),
            status=payment.get("status"),
            amount=payment.get("amount"),
        )


class VerificationResult(BaseModel):
    verified: bool
    payment: Optional[PaymentSnapshot] = None
    reason: Optional[str] = None
    status: Optional[str] = None


class CheckoutVerifyResponse(BaseModel):
    ok: bool = True
    message: str = "verified"
    payment: PaymentSnapshot
