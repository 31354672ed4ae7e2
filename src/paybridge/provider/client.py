"""Async HTTP client for the Razorpay REST API (customers, subscriptions, payments)."""

import logging
from typing import Any, Optional

import httpx

from paybridge.common.exceptions import ProviderError

logger = logging.getLogger(__name__)

PAGE_SIZE = 100  # Razorpay's maximum ``count`` for list endpoints


class RazorpayClient:
    """Thin wrapper over the Razorpay v1 API using basic auth."""

    def __init__(
        self,
        key_id: str,
        key_secret: str,
        base_url: str = "https://api.razorpay.com/v1",
        timeout: float = 15.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.key_id = key_id
        self.key_secret = key_secret
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    async def _request(
        self,
        method: str,
        path: str,
        json: Optional[dict[str, Any]] = None,
        params: Optional[dict[str, Any]] = None,
    ) -> dict[str, Any]:
        url = f"{self.base_url}{path}"
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                auth=(self.key_id, self.key_secret),
                transport=self._transport,
            ) as client:
                resp = await client.request(
                    method,
                    url,
                    json=json,
                    params=params,
                    headers={"Accept": "application/json"},
                )
        except httpx.HTTPError as exc:
            logger.warning("Razorpay request error: %s %s: %s", method, path, exc)
            raise ProviderError(
                f"Razorpay request failed: {exc}",
                code="provider_unreachable",
            ) from exc

        try:
            data = resp.json()
        except ValueError:
            logger.error(
                "Unparsable Razorpay response: %s %s status=%s",
                method, path, resp.status_code,
            )
            raise ProviderError(
                f"Invalid response from Razorpay: {resp.text[:200]}",
                status_code=resp.status_code,
                code="invalid_provider_response",
            )

        if resp.status_code >= 400:
            error = ProviderError(
                f"Razorpay returned HTTP {resp.status_code}",
                status_code=resp.status_code,
                payload=data,
            )
            logger.warning(
                "Razorpay request failed: %s %s status=%s description=%s",
                method, path, resp.status_code, error.description,
            )
            raise error

        return data

    # ── Customers ──

    async def create_customer(
        self, name: str, email: str, contact: str,
    ) -> dict[str, Any]:
        """Create a customer; with ``fail_existing=0`` Razorpay returns an existing match."""
        return await self._request(
            "POST",
            "/customers",
            json={
                "name": name,
                "email": email,
                "contact": contact,
                "fail_existing": "0",
            },
        )

    async def list_customers(self, count: int = PAGE_SIZE, skip: int = 0) -> list[dict[str, Any]]:
        data = await self._request(
            "GET", "/customers", params={"count": count, "skip": skip},
        )
        return data.get("items", [])

    async def find_customer(
        self,
        contact: Optional[str] = None,
        email: Optional[str] = None,
        max_pages: int = 5,
    ) -> Optional[dict[str, Any]]:
        """Scan customer pages for a contact match, falling back to email.

        Razorpay has no server-side customer search, so up to ``max_pages``
        pages are fetched and matched locally.
        """
        contact_key = normalize_contact(contact)
        email_key = (email or "").strip().lower()
        email_match = None

        for page in range(max_pages):
            items = await self.list_customers(count=PAGE_SIZE, skip=page * PAGE_SIZE)
            for item in items:
                if contact_key and normalize_contact(item.get("contact")) == contact_key:
                    return item
                if (
                    email_match is None
                    and email_key
                    and (item.get("email") or "").strip().lower() == email_key
                ):
                    email_match = item
            if len(items) < PAGE_SIZE:
                break

        return email_match

    async def fetch_customer(self, customer_id: str) -> dict[str, Any]:
        return await self._request("GET", f"/customers/{customer_id}")

    async def update_customer(self, customer_id: str, **fields: Any) -> dict[str, Any]:
        body = {k: v for k, v in fields.items() if v is not None}
        return await self._request("PUT", f"/customers/{customer_id}", json=body)

    # ── Subscriptions ──

    async def create_subscription(self, payload: dict[str, Any]) -> dict[str, Any]:
        return await self._request("POST", "/subscriptions", json=payload)

    async def list_subscriptions(
        self,
        plan_id: Optional[str] = None,
        count: int = PAGE_SIZE,
        skip: int = 0,
    ) -> list[dict[str, Any]]:
        params: dict[str, Any] = {"count": count, "skip": skip}
        if plan_id:
            params["plan_id"] = plan_id
        data = await self._request("GET", "/subscriptions", params=params)
        return data.get("items", [])

    async def fetch_subscription(self, subscription_id: str) -> dict[str, Any]:
        return await self._request("GET", f"/subscriptions/{subscription_id}")

    # ── Payments ──

    async def fetch_payment(self, payment_id: str) -> dict[str, Any]:
        return await self._request("GET", f"/payments/{payment_id}")


def normalize_contact(contact: Optional[str]) -> str:
    """Strip formatting so ``+91 98765-43210`` and ``+919876543210`` compare equal."""
    if not contact:
        return ""
    return "".join(ch for ch in str(contact) if ch.isdigit() or ch == "+")
