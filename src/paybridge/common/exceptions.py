"""Paybridge exception hierarchy."""

from typing import Any, Optional


class PaybridgeError(Exception):
    """Base exception for all Paybridge errors."""

    http_status = 500

    def __init__(self, message: str = "", code: str = "server_error"):
        self.message = message
        self.code = code
        super().__init__(message)


class ConfigError(PaybridgeError):
    """Raised when a required secret or credential is not configured."""

    http_status = 500

    def __init__(self, message: str = "Server configuration missing", code: str = "server_config_missing"):
        super().__init__(message, code=code)


class ValidationError(PaybridgeError):
    """Raised when caller input is missing or malformed."""

    http_status = 400

    def __init__(self, message: str = "Invalid request", code: str = "missing_fields"):
        super().__init__(message, code=code)


class SignatureError(PaybridgeError):
    """Raised when an HMAC signature is absent or does not match."""

    http_status = 400

    def __init__(self, message: str = "Invalid signature", code: str = "invalid_signature"):
        super().__init__(message, code=code)


class ProviderError(PaybridgeError):
    """Raised when Razorpay rejects a call or cannot be reached.

    ``description`` is the human-readable text from Razorpay's error
    envelope when one was returned, otherwise the transport error.
    """

    http_status = 502

    def __init__(
        self,
        message: str = "Payment provider request failed",
        status_code: int = 0,
        payload: Optional[Any] = None,
        code: str = "provider_error",
    ):
        super().__init__(message, code=code)
        self.status_code = status_code
        self.payload = payload
        self.description = self._extract_description() or message

    def _extract_description(self) -> Optional[str]:
        if not isinstance(self.payload, dict):
            return None
        error = self.payload.get("error")
        if isinstance(error, dict):
            return error.get("description") or error.get("reason") or error.get("code")
        if isinstance(error, str):
            return error
        return None


class ForwardError(PaybridgeError):
    """Raised when the downstream automation hook cannot be reached.

    Logged only; never surfaced to the webhook sender.
    """

    http_status = 502

    def __init__(self, message: str = "Forward failed", status_code: int = 0):
        super().__init__(message, code="forward_failed")
        self.status_code = status_code
