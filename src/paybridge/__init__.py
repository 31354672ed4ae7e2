"""Paybridge: Razorpay webhook relay, subscription reconciliation and checkout verification."""

from paybridge.common.signatures import compute_signature, verify_signature
from paybridge.webhooks.classifier import classify, resolve_identity

__all__ = [
    "compute_signature",
    "verify_signature",
    "classify",
    "resolve_identity",
]
__version__ = "0.1.0"
