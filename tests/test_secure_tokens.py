"""Tests for scan token derivation."""
import base64
import hashlib

import pytest

from cardpass.core.exceptions import FormatError
from cardpass.services.secure_tokens import (
    build_progress_url,
    decode_customer_token,
    encrypt_customer_token,
    hash_offer_id,
    issue_scan_tokens,
    validate_customer_id,
    verify_offer_hash,
)

CUSTOMER_ID = "cust_1234567890abcdef"


class TestOfferHash:
    def test_pure(self):
        assert hash_offer_id("off_1", "biz_1") == hash_offer_id("off_1", "biz_1")

    def test_matches_verifier_digest(self):
        expected = hashlib.md5(b"off_1:biz_1:loyalty-platform").hexdigest()[:8]
        assert hash_offer_id("off_1", "biz_1") == expected

    def test_length_and_alphabet(self):
        digest = hash_offer_id("off_1", "biz_1")
        assert len(digest) == 8
        assert all(c in "0123456789abcdef" for c in digest)

    def test_depends_on_business(self):
        assert hash_offer_id("off_1", "biz_1") != hash_offer_id("off_1", "biz_2")

    def test_verify(self):
        digest = hash_offer_id("off_1", "biz_1")
        assert verify_offer_hash("off_1", "biz_1", digest)
        assert not verify_offer_hash("off_2", "biz_1", digest)


class TestCustomerToken:
    @pytest.mark.parametrize("customer_id", [None, "", "cust_short", "user_1234567890abcdef", 12345])
    def test_rejects_malformed_ids(self, customer_id):
        assert not validate_customer_id(customer_id)
        with pytest.raises(FormatError):
            encrypt_customer_token(customer_id, "biz_1", 1700000000000)

    def test_encodes_full_payload(self):
        token = encrypt_customer_token(CUSTOMER_ID, "biz_1", 1700000000000)
        assert base64.b64decode(token).decode() == f"{CUSTOMER_ID}:biz_1:1700000000000"

    def test_decode_round_trip(self):
        token = encrypt_customer_token(CUSTOMER_ID, "biz_1", 1700000000000)
        assert decode_customer_token(token) == {
            "customer_id": CUSTOMER_ID,
            "business_id": "biz_1",
            "timestamp": 1700000000000,
            "is_valid": True,
        }

    @pytest.mark.parametrize("token", ["not base64!", base64.b64encode(b"only:two").decode()])
    def test_decode_invalid(self, token):
        assert decode_customer_token(token)["is_valid"] is False


class TestScanTokens:
    def test_issue_uses_one_timestamp(self):
        tokens = issue_scan_tokens(CUSTOMER_ID, "biz_1", "off_1", timestamp=1700000000000)
        assert tokens.timestamp == 1700000000000
        assert decode_customer_token(tokens.customer_token)["timestamp"] == 1700000000000
        assert tokens.offer_hash == hash_offer_id("off_1", "biz_1")

    def test_serializes_camel_case(self):
        tokens = issue_scan_tokens(CUSTOMER_ID, "biz_1", "off_1", timestamp=1)
        assert set(tokens.model_dump(by_alias=True)) == {"customerToken", "offerHash", "timestamp"}

    def test_progress_url(self):
        tokens = issue_scan_tokens(CUSTOMER_ID, "biz_1", "off_1", timestamp=1700000000000)
        url = build_progress_url("https://loyalty.example.com/", tokens)
        assert url.startswith("https://loyalty.example.com/scan/")
        assert url.endswith(f"/{tokens.offer_hash}")
        assert url.isascii()
        assert "+" not in url and "=" not in url
