"""Tests for HMAC-SHA256 signing and verification."""

import hashlib
import hmac
import json

import pytest

from paybridge.common.signatures import (
    compute_signature,
    payment_signature_message,
    verify_signature,
)

SECRET = "whsec-test-secret"


class TestComputeSignature:
    def test_matches_manual_hmac(self):
        body = b'{"event":"payment.captured"}'
        expected = hmac.new(SECRET.encode(), body, hashlib.sha256).hexdigest()
        assert compute_signature(SECRET, body) == expected

    def test_str_and_bytes_agree(self):
        assert compute_signature(SECRET, "pay_1|sub_1") == compute_signature(SECRET, b"pay_1|sub_1")

    def test_lowercase_hex(self):
        sig = compute_signature(SECRET, b"x")
        assert len(sig) == 64
        assert sig == sig.lower()


class TestVerifySignature:
    def test_roundtrip(self):
        body = b'{"a": 1}'
        assert verify_signature(SECRET, body, compute_signature(SECRET, body)) is True

    def test_wrong_secret(self):
        body = b'{"a": 1}'
        assert verify_signature("other-secret", body, compute_signature(SECRET, body)) is False

    def test_every_single_char_change_rejected(self):
        body = b'{"event":"order.paid"}'
        sig = compute_signature(SECRET, body)
        for i in range(len(sig)):
            replacement = "0" if sig[i] != "0" else "1"
            tampered = sig[:i] + replacement + sig[i + 1:]
            assert verify_signature(SECRET, body, tampered) is False

    def test_uppercase_variant_rejected(self):
        body = b"payload"
        sig = compute_signature(SECRET, body)
        if sig != sig.upper():
            assert verify_signature(SECRET, body, sig.upper()) is False

    def test_reserialized_body_does_not_verify(self):
        """Signing is over raw bytes; re-serializing changes whitespace."""
        raw = b'{"event": "payment.captured",  "payload": {}}'
        sig = compute_signature(SECRET, raw)
        reserialized = json.dumps(json.loads(raw), separators=(",", ":")).encode()
        assert verify_signature(SECRET, raw, sig) is True
        assert verify_signature(SECRET, reserialized, sig) is False

    @pytest.mark.parametrize("signature", ["", None])
    def test_missing_signature(self, signature):
        assert verify_signature(SECRET, b"body", signature) is False

    @pytest.mark.parametrize("secret", ["", None])
    def test_missing_secret(self, secret):
        assert verify_signature(secret, b"body", "abc") is False

    def test_non_ascii_signature_does_not_raise(self):
        assert verify_signature(SECRET, b"body", "é" * 64) is False


class TestPaymentSignatureMessage:
    def test_pipe_joined(self):
        assert payment_signature_message("pay_1", "sub_9") == "pay_1|sub_9"
