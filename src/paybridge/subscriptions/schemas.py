"""Pydantic schemas for subscription creation."""

from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator

REQUIRED_FIELDS = ("name", "email", "contact", "plan_id")


class SubscriptionRequest(BaseModel):
    """Caller input for /start-subscription.

    Fields are optional at parse time so missing values surface as a
    single ``missing_fields`` error instead of a 422.
    """

    name: Optional[str] = None
    email: Optional[str] = None
    contact: Optional[str] = None
    plan_id: Optional[str] = None
    total_count: Optional[int] = None

    @field_validator("name", "email", "contact", "plan_id", mode="before")
    @classmethod
    def _strip(cls, v: Any) -> Any:
        if v is None:
            return None
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            v = str(v)
        if isinstance(v, str):
            return v.strip() or None
        return v

    @field_validator("total_count", mode="before")
    @classmethod
    def _total_count(cls, v: Any) -> Any:
        if v is None or (isinstance(v, str) and not v.strip()):
            return None
        if isinstance(v, bool):
            raise ValueError("total_count must be a positive integer")
        if isinstance(v, float) and not v.is_integer():
            raise ValueError("total_count must be a positive integer")
        try:
            count = int(str(v).strip()) if isinstance(v, str) else int(v)
        except (TypeError, ValueError):
            raise ValueError("total_count must be a positive integer")
        if count < 1:
            raise ValueError("total_count must be a positive integer")
        return count

    def missing_fields(self) -> list[str]:
        return [f for f in REQUIRED_FIELDS if not getattr(self, f)]

    def notes(self) -> dict[str, str]:
        return {
            "name": self.name or "",
            "email": self.email or "",
            "contact": self.contact or "",
        }


class ReconcileResult(BaseModel):
    subscription: dict[str, Any] = Field(default_factory=dict)
    reused: bool = False


class SubscriptionResponse(ReconcileResult):
    ok: bool = True
