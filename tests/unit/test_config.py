"""Tests for settings loading and boundary validation."""

import pytest

from paybridge.common.config import PaybridgeSettings
from paybridge.common.exceptions import ConfigError, ProviderError


class TestSettings:
    def test_legacy_env_names(self, config_env):
        config_env.delenv("RAZORPAY_KEY_ID")
        config_env.setenv("RAZORPAY_KEY", "rzp_legacy")
        config_env.setenv("ZAPIER_WEBHOOK_URL", "https://hooks.example.com/x")
        config_env.setenv("SUBSCRIPTION_DURATION_YEARS", "2")
        settings = PaybridgeSettings()
        assert settings.razorpay_key_id == "rzp_legacy"
        assert settings.forward_webhook_url == "https://hooks.example.com/x"
        assert settings.subscription_duration_years == 2.0

    def test_prefixed_env_names(self, config_env):
        config_env.setenv("PAYBRIDGE_CORS_ALLOW_ORIGIN", "https://shop.example.com")
        settings = PaybridgeSettings()
        assert settings.cors_origins == ["https://shop.example.com"]

    def test_defaults(self, config_env):
        settings = PaybridgeSettings()
        assert settings.cors_origins == ["*"]
        assert settings.default_total_count == 12
        assert settings.subscription_duration_years is None

    def test_require_webhook_secret(self):
        with pytest.raises(ConfigError) as exc:
            PaybridgeSettings(webhook_secret="").require_webhook_secret()
        assert exc.value.code == "webhook_secret_not_configured"
        assert exc.value.http_status == 500

    def test_require_provider_credentials(self):
        settings = PaybridgeSettings(razorpay_key_id="id", razorpay_key_secret="")
        with pytest.raises(ConfigError):
            settings.require_provider_credentials()
        settings = PaybridgeSettings(razorpay_key_id="id", razorpay_key_secret="s")
        assert settings.require_provider_credentials() == ("id", "s")


class TestProviderErrorDetails:
    def test_description_from_envelope(self):
        err = ProviderError(payload={"error": {"code": "X", "description": "Plan not found"}})
        assert err.description == "Plan not found"

    def test_falls_back_to_message(self):
        err = ProviderError("Razorpay request failed: timeout", payload=None)
        assert err.description == "Razorpay request failed: timeout"
