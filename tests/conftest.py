"""Shared test fixtures for Paybridge."""

import itertools
from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient

from paybridge.common.exceptions import ProviderError
from paybridge.webhooks.forwarder import Forwarder
from paybridge.webhooks.schemas import ForwardPayload


WEBHOOK_SECRET = "test-webhook-secret"
KEY_ID = "rzp_test_key"
KEY_SECRET = "test-key-secret"

_CONFIG_ENV = (
    "RAZORPAY_WEBHOOK_SECRET",
    "RAZORPAY_KEY_ID",
    "RAZORPAY_KEY",
    "RAZORPAY_SECRET",
    "RAZORPAY_KEY_SECRET",
    "ZAPIER_WEBHOOK_URL",
    "CORS_ALLOW_ORIGIN",
    "SUBSCRIPTION_DURATION_YEARS",
    "PAYBRIDGE_WEBHOOK_SECRET",
    "PAYBRIDGE_RAZORPAY_KEY_ID",
    "PAYBRIDGE_RAZORPAY_KEY_SECRET",
    "PAYBRIDGE_FORWARD_WEBHOOK_URL",
    "PAYBRIDGE_CORS_ALLOW_ORIGIN",
    "PAYBRIDGE_SUBSCRIPTION_DURATION_YEARS",
)


class FakeRazorpay:
    """In-memory stand-in for RazorpayClient that records every call."""

    def __init__(self):
        self.customers: list[dict[str, Any]] = []
        self.subscriptions: list[dict[str, Any]] = []
        self.payments: dict[str, dict[str, Any]] = {}
        self.calls: list[tuple[str, Any]] = []
        self.fail: dict[str, ProviderError] = {}
        self.key_secret = KEY_SECRET
        self._ids = itertools.count(1)

    def _check(self, op: str, arg: Any = None) -> None:
        self.calls.append((op, arg))
        if op in self.fail:
            raise self.fail[op]

    def called(self, op: str) -> list[Any]:
        return [arg for name, arg in self.calls if name == op]

    async def find_customer(self, contact=None, email=None, max_pages=5):
        self._check("find_customer", {"contact": contact, "email": email})
        for c in self.customers:
            if contact and c.get("contact") == contact:
                return c
        for c in self.customers:
            if email and (c.get("email") or "").lower() == email.lower():
                return c
        return None

    async def create_customer(self, name, email, contact):
        self._check("create_customer", {"name": name, "email": email, "contact": contact})
        customer = {
            "id": f"cust_{next(self._ids)}",
            "entity": "customer",
            "name": name,
            "email": email,
            "contact": contact,
        }
        self.customers.append(customer)
        return customer

    async def update_customer(self, customer_id, **fields):
        self._check("update_customer", {"id": customer_id, **fields})
        for c in self.customers:
            if c["id"] == customer_id:
                c.update(fields)
                return dict(c)
        raise ProviderError("not found", status_code=404)

    async def list_subscriptions(self, plan_id=None, count=100, skip=0):
        self._check("list_subscriptions", {"plan_id": plan_id})
        return [s for s in self.subscriptions if plan_id is None or s["plan_id"] == plan_id]

    async def create_subscription(self, payload):
        self._check("create_subscription", payload)
        subscription = {
            "id": f"sub_{next(self._ids)}",
            "entity": "subscription",
            "status": "created",
            "customer_id": payload.get("customer_id"),
            **payload,
        }
        self.subscriptions.append(subscription)
        return subscription

    async def fetch_subscription(self, subscription_id):
        self._check("fetch_subscription", subscription_id)
        for s in self.subscriptions:
            if s["id"] == subscription_id:
                return s
        raise ProviderError(
            "not found",
            status_code=400,
            payload={"error": {"code": "BAD_REQUEST_ERROR", "description": "The id provided does not exist"}},
        )

    async def fetch_payment(self, payment_id):
        self._check("fetch_payment", payment_id)
        if payment_id in self.payments:
            return self.payments[payment_id]
        raise ProviderError(
            "not found",
            status_code=400,
            payload={"error": {"code": "BAD_REQUEST_ERROR", "description": "The id provided does not exist"}},
        )


class RecordingForwarder(Forwarder):
    """Forwarder that keeps payloads instead of posting them."""

    def __init__(self):
        super().__init__(url="https://hooks.example.com/catch")
        self.sent: list[dict[str, Any]] = []

    async def forward(self, payload: ForwardPayload) -> bool:
        self.sent.append(payload.to_json_dict())
        return True


@pytest.fixture
def webhook_secret():
    return WEBHOOK_SECRET


@pytest.fixture
def key_secret():
    return KEY_SECRET


@pytest.fixture
def fake_provider():
    return FakeRazorpay()


@pytest.fixture
def forwarder():
    return RecordingForwarder()


@pytest.fixture
def config_env(monkeypatch):
    """Fully configured environment; tests may delenv to simulate gaps."""
    for name in _CONFIG_ENV:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("RAZORPAY_WEBHOOK_SECRET", WEBHOOK_SECRET)
    monkeypatch.setenv("RAZORPAY_KEY_ID", KEY_ID)
    monkeypatch.setenv("RAZORPAY_SECRET", KEY_SECRET)

    from paybridge.common.config import get_settings
    get_settings.cache_clear()

    from paybridge.deps import reset_singletons
    reset_singletons()

    yield monkeypatch

    get_settings.cache_clear()
    reset_singletons()


@pytest.fixture
def app(config_env, fake_provider, forwarder):
    """Test app wired to the in-memory provider and recording forwarder."""
    from paybridge.app import create_app
    from paybridge.checkout.service import CheckoutVerifier
    from paybridge.deps import get_checkout_verifier, get_forwarder, get_reconciler
    from paybridge.subscriptions.service import SubscriptionReconciler

    application = create_app()
    application.dependency_overrides[get_forwarder] = lambda: forwarder
    application.dependency_overrides[get_reconciler] = lambda: SubscriptionReconciler(fake_provider)
    application.dependency_overrides[get_checkout_verifier] = lambda: CheckoutVerifier(
        fake_provider, key_secret=KEY_SECRET,
    )
    return application


@pytest.fixture
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

