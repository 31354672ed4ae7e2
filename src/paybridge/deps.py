"""Dependency injection singletons for Paybridge."""

from paybridge.common.config import get_settings
from paybridge.checkout.service import CheckoutVerifier
from paybridge.provider.client import RazorpayClient
from paybridge.subscriptions.service import SubscriptionReconciler
from paybridge.webhooks.forwarder import Forwarder

_provider: RazorpayClient | None = None
_forwarder: Forwarder | None = None
_reconciler: SubscriptionReconciler | None = None
_checkout: CheckoutVerifier | None = None


def get_webhook_secret() -> str:
    """Raises ConfigError when the webhook secret is unset."""
    return get_settings().require_webhook_secret()


def get_provider_client() -> RazorpayClient:
    global _provider
    if _provider is None:
        settings = get_settings()
        key_id, key_secret = settings.require_provider_credentials()
        _provider = RazorpayClient(
            key_id=key_id,
            key_secret=key_secret,
            base_url=settings.razorpay_base_url,
            timeout=settings.provider_timeout,
        )
    return _provider


def get_forwarder() -> Forwarder:
    global _forwarder
    if _forwarder is None:
        settings = get_settings()
        _forwarder = Forwarder(
            url=settings.forward_webhook_url,
            timeout=settings.forward_timeout,
        )
    return _forwarder


def get_reconciler() -> SubscriptionReconciler:
    global _reconciler
    if _reconciler is None:
        settings = get_settings()
        _reconciler = SubscriptionReconciler(
            get_provider_client(),
            duration_years=settings.subscription_duration_years,
            default_total_count=settings.default_total_count,
            customer_lookup_pages=settings.customer_lookup_pages,
        )
    return _reconciler


def get_checkout_verifier() -> CheckoutVerifier:
    global _checkout
    if _checkout is None:
        settings = get_settings()
        client = get_provider_client()
        _checkout = CheckoutVerifier(
            client,
            key_secret=client.key_secret,
            check_subscription=settings.verify_subscription_status,
        )
    return _checkout


def reset_singletons() -> None:
    """Reset all singletons (for testing)."""
    global _provider, _forwarder, _reconciler, _checkout
    _provider = None
    _forwarder = None
    _reconciler = None
    _checkout = None
