"""Paybridge configuration via pydantic-settings."""

from functools import lru_cache
from typing import Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from paybridge.common.exceptions import ConfigError


class PaybridgeSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="PAYBRIDGE_", populate_by_name=True)

    environment: str = "development"
    log_level: str = "INFO"

    # API
    api_title: str = "Paybridge"
    api_version: str = "0.1.0"
    host: str = "0.0.0.0"
    port: int = 8080
    api_prefix: str = "/api"
    cors_allow_origin: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("PAYBRIDGE_CORS_ALLOW_ORIGIN", "CORS_ALLOW_ORIGIN"),
    )

    # Razorpay. The un-prefixed names are the ones the hosted dashboards use.
    webhook_secret: str = Field(
        default="",
        validation_alias=AliasChoices("PAYBRIDGE_WEBHOOK_SECRET", "RAZORPAY_WEBHOOK_SECRET"),
    )
    razorpay_key_id: str = Field(
        default="",
        validation_alias=AliasChoices(
            "PAYBRIDGE_RAZORPAY_KEY_ID", "RAZORPAY_KEY_ID", "RAZORPAY_KEY",
        ),
    )
    razorpay_key_secret: str = Field(
        default="",
        validation_alias=AliasChoices(
            "PAYBRIDGE_RAZORPAY_KEY_SECRET", "RAZORPAY_SECRET", "RAZORPAY_KEY_SECRET",
        ),
    )
    razorpay_base_url: str = "https://api.razorpay.com/v1"
    provider_timeout: float = 15.0
    customer_lookup_pages: int = 5  # x100 customers per page

    # Downstream automation hook
    forward_webhook_url: str = Field(
        default="",
        validation_alias=AliasChoices("PAYBRIDGE_FORWARD_WEBHOOK_URL", "ZAPIER_WEBHOOK_URL"),
    )
    forward_timeout: float = 10.0

    # Subscription billing bounds
    subscription_duration_years: Optional[float] = Field(
        default=None,
        validation_alias=AliasChoices(
            "PAYBRIDGE_SUBSCRIPTION_DURATION_YEARS", "SUBSCRIPTION_DURATION_YEARS",
        ),
    )
    default_total_count: int = 12

    # Checkout verification
    verify_subscription_status: bool = True

    @property
    def cors_origins(self) -> list[str]:
        return [self.cors_allow_origin] if self.cors_allow_origin else ["*"]

    def require_webhook_secret(self) -> str:
        """Return the webhook signing secret or raise ConfigError."""
        if not self.webhook_secret:
            raise ConfigError(
                "RAZORPAY_WEBHOOK_SECRET is not set",
                code="webhook_secret_not_configured",
            )
        return self.webhook_secret

    def require_provider_credentials(self) -> tuple[str, str]:
        """Return (key_id, key_secret) or raise ConfigError."""
        if not self.razorpay_key_id or not self.razorpay_key_secret:
            raise ConfigError(
                "Missing Razorpay credentials: set RAZORPAY_KEY_ID and "
                "RAZORPAY_SECRET (or RAZORPAY_KEY / RAZORPAY_KEY_SECRET)",
            )
        return self.razorpay_key_id, self.razorpay_key_secret


@lru_cache
def get_settings() -> PaybridgeSettings:
    return PaybridgeSettings()
