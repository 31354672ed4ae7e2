"""SubscriptionReconciler: reuse or create a Razorpay customer and subscription."""

import logging
import time
from typing import Any, Callable, Optional

from pydantic import ValidationError as PydanticValidationError

from paybridge.common.exceptions import ProviderError, ValidationError
from paybridge.provider.client import RazorpayClient, normalize_contact
from paybridge.subscriptions.schemas import ReconcileResult, SubscriptionRequest

logger = logging.getLogger(__name__)

# Subscriptions in these states have not been paid for yet; a retry should
# reuse them instead of opening a second billing schedule.
REUSABLE_STATUSES: frozenset[str] = frozenset({"created", "pending", "authenticated"})

SECONDS_PER_YEAR = 365 * 24 * 60 * 60


def parse_request(data: Any) -> SubscriptionRequest:
    """Build a SubscriptionRequest from a JSON body, raising ValidationError."""
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object", code="invalid_fields")
    try:
        return SubscriptionRequest.model_validate(data)
    except PydanticValidationError as exc:
        fields = sorted({str(err["loc"][0]) for err in exc.errors() if err.get("loc")})
        raise ValidationError(
            f"Invalid fields: {', '.join(fields)}", code="invalid_fields",
        ) from exc


class SubscriptionReconciler:
    """Finds or creates the customer, then reuses or creates a subscription."""

    def __init__(
        self,
        client: RazorpayClient,
        duration_years: Optional[float] = None,
        default_total_count: int = 12,
        customer_lookup_pages: int = 5,
        clock: Callable[[], float] = time.time,
    ):
        self.client = client
        self.duration_years = duration_years
        self.default_total_count = default_total_count
        self.customer_lookup_pages = customer_lookup_pages
        self.clock = clock

    async def reconcile(self, request: SubscriptionRequest) -> ReconcileResult:
        """Return an existing pending subscription or create a new one.

        Steps:
        1. Validate required identity fields and plan
        2. Find (by contact, then email), sync or create the customer
        3. Reuse a not-yet-active subscription for the same customer + plan
        4. Otherwise create a subscription with identity in notes
        """
        missing = request.missing_fields()
        if missing:
            raise ValidationError(
                f"Missing required fields: {', '.join(missing)}", code="missing_fields",
            )

        customer = await self._find_customer(request)
        if customer is not None:
            customer = await self._sync_customer(customer, request)
        else:
            customer = await self._create_customer(request)

        if customer is not None:
            existing = await self._find_reusable_subscription(customer["id"], request.plan_id)
            if existing is not None:
                logger.info(
                    "Reusing existing subscription %s",
                    existing.get("id"),
                    extra={
                        "subscription_id": existing.get("id"),
                        "customer_id": customer["id"],
                        "status": existing.get("status"),
                    },
                )
                return ReconcileResult(subscription=existing, reused=True)

        payload = self.build_subscription_payload(request, customer)
        try:
            subscription = await self.client.create_subscription(payload)
        except ProviderError as e:
            logger.error(
                "Subscription create failed: %s",
                e.description,
                extra={"plan_id": request.plan_id},
            )
            raise

        logger.info(
            "Created subscription %s",
            subscription.get("id"),
            extra={
                "subscription_id": subscription.get("id"),
                "plan_id": request.plan_id,
                "customer_id": payload.get("customer_id"),
            },
        )
        return ReconcileResult(subscription=subscription, reused=False)

    def build_subscription_payload(
        self,
        request: SubscriptionRequest,
        customer: Optional[dict[str, Any]],
    ) -> dict[str, Any]:
        """Subscription create body; sets exactly one of total_count / end_at."""
        payload: dict[str, Any] = {
            "plan_id": request.plan_id,
            "customer_notify": 1,
            "notes": request.notes(),
        }
        if customer and customer.get("id"):
            payload["customer_id"] = customer["id"]

        if request.total_count is not None and request.total_count >= 1:
            payload["total_count"] = request.total_count
        elif self.duration_years and self.duration_years > 0:
            payload["end_at"] = int(self.clock() + self.duration_years * SECONDS_PER_YEAR)
        else:
            payload["total_count"] = self.default_total_count
        return payload

    # ── Customers ──

    async def _find_customer(self, request: SubscriptionRequest) -> Optional[dict[str, Any]]:
        try:
            customer = await self.client.find_customer(
                contact=request.contact,
                email=request.email,
                max_pages=self.customer_lookup_pages,
            )
        except ProviderError as e:
            logger.warning("Customer lookup failed (continuing): %s", e.description)
            return None
        return customer if customer and customer.get("id") else None

    async def _sync_customer(
        self,
        customer: dict[str, Any],
        request: SubscriptionRequest,
    ) -> dict[str, Any]:
        """Overwrite stale name/email/contact with what the caller just sent."""
        wanted = {
            "name": request.name,
            "email": request.email,
            "contact": request.contact,
        }
        if (
            customer.get("name") == request.name
            and customer.get("email") == request.email
            and normalize_contact(customer.get("contact")) == normalize_contact(request.contact)
        ):
            return customer

        try:
            updated = await self.client.update_customer(customer["id"], **wanted)
        except ProviderError as e:
            logger.warning(
                "Customer update failed (continuing): %s",
                e.description,
                extra={"customer_id": customer["id"]},
            )
            return customer

        logger.info("Updated customer identity", extra={"customer_id": customer["id"]})
        return updated if updated.get("id") else customer

    async def _create_customer(self, request: SubscriptionRequest) -> Optional[dict[str, Any]]:
        try:
            customer = await self.client.create_customer(
                name=request.name, email=request.email, contact=request.contact,
            )
        except ProviderError as e:
            # Identity still travels in the subscription notes.
            logger.warning("Customer create failed (continuing): %s", e.description)
            return None
        return customer if customer.get("id") else None

    # ── Subscriptions ──

    async def _find_reusable_subscription(
        self, customer_id: str, plan_id: str,
    ) -> Optional[dict[str, Any]]:
        try:
            items = await self.client.list_subscriptions(plan_id=plan_id)
        except ProviderError as e:
            logger.warning(
                "Subscription lookup failed (continuing): %s",
                e.description,
                extra={"customer_id": customer_id, "plan_id": plan_id},
            )
            return None

        for item in items:
            if (
                item.get("customer_id") == customer_id
                and item.get("plan_id", plan_id) == plan_id
                and item.get("status") in REUSABLE_STATUSES
            ):
                return item
        return None
