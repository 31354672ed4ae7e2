"""HMAC-SHA256 signing and verification for Razorpay payloads.

Two messages are signed by Razorpay:

- webhooks: the request body exactly as received, keyed with the webhook
  secret configured in the dashboard;
- checkout callbacks: ``"<payment_id>|<subscription_id>"``, keyed with the
  API key secret.
"""

import hashlib
import hmac
from typing import Optional, Union

Message = Union[bytes, str]


def _to_bytes(message: Message) -> bytes:
    if isinstance(message, str):
        return message.encode("utf-8")
    return message


def compute_signature(secret: str, message: Message) -> str:
    """Return the lowercase hex HMAC-SHA256 of ``message``."""
    return hmac.new(
        secret.encode("utf-8"),
        _to_bytes(message),
        hashlib.sha256,
    ).hexdigest()


def verify_signature(
    secret: Optional[str],
    message: Message,
    signature: Optional[str],
) -> bool:
    """Constant-time check of ``signature`` against ``message``.

    Returns False when either the secret or the signature is missing.
    """
    if not secret or not signature:
        return False

    computed = compute_signature(secret, message)
    return hmac.compare_digest(computed.encode("ascii"), signature.encode("utf-8"))


def payment_signature_message(payment_id: str, subscription_id: str) -> str:
    return f"{payment_id}|{subscription_id}"
