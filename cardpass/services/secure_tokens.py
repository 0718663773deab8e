"""
Scan tokens embedded in wallet pass barcodes.

The scan-verification backend recomputes these values itself, so the
templates, salt, digest and truncation below are fixed. Changing any of them
invalidates every pass already in customers' wallets.
"""

import base64
import binascii
import hashlib
import logging
import time
from urllib.parse import quote

from cardpass.core.exceptions import FormatError
from cardpass.domain.schemas import SecureToken

logger = logging.getLogger(__name__)

OFFER_HASH_SALT = "loyalty-platform"
OFFER_HASH_LENGTH = 8  # hex characters compared by the verifier

CUSTOMER_ID_PREFIX = "cust_"
CUSTOMER_ID_MIN_LENGTH = 20


def hash_offer_id(offer_id: str, business_id: str) -> str:
    """
    Hash an offer id for the progress barcode.

    MD5 over "{offer_id}:{business_id}:loyalty-platform", hex encoded and
    truncated to 8 characters. Pure: the same inputs always give the same hash.
    """
    data = f"{offer_id}:{business_id}:{OFFER_HASH_SALT}"
    return hashlib.md5(data.encode("utf-8")).hexdigest()[:OFFER_HASH_LENGTH]


def verify_offer_hash(offer_id: str, business_id: str, provided_hash: str) -> bool:
    return hash_offer_id(offer_id, business_id) == provided_hash


def validate_customer_id(customer_id: str | None) -> bool:
    """Customer ids must be 'cust_' prefixed and at least 20 characters."""
    if not customer_id or not isinstance(customer_id, str):
        return False
    return customer_id.startswith(CUSTOMER_ID_PREFIX) and len(customer_id) >= CUSTOMER_ID_MIN_LENGTH


def encrypt_customer_token(
    customer_id: str,
    business_id: str,
    timestamp: int | None = None,
) -> str:
    """
    Build the customer token for the progress barcode.

    Base64 of "{customer_id}:{business_id}:{timestamp_ms}". The whole string
    is encoded; the verifier decodes it in full.

    Raises:
        FormatError: if customer_id is not a 'cust_' id
    """
    if not validate_customer_id(customer_id):
        raise FormatError(
            f"Customer ID must be in {CUSTOMER_ID_PREFIX}* format. Received: {customer_id!r}"
        )

    if timestamp is None:
        timestamp = int(time.time() * 1000)

    data = f"{customer_id}:{business_id}:{timestamp}"
    return base64.b64encode(data.encode("utf-8")).decode("ascii")


def decode_customer_token(customer_token: str) -> dict:
    """
    Decode a customer token the way the verification backend does.

    Returns:
        Dict with 'customer_id', 'business_id', 'timestamp' and 'is_valid'
    """
    try:
        decoded = base64.b64decode(customer_token, validate=True).decode("utf-8")
        customer_id, business_id, timestamp = decoded.split(":")
        return {
            "customer_id": customer_id,
            "business_id": business_id,
            "timestamp": int(timestamp),
            "is_valid": True,
        }
    except (binascii.Error, UnicodeDecodeError, ValueError) as e:
        logger.debug(f"[SecureTokens] Could not decode customer token: {e}")
        return {
            "customer_id": None,
            "business_id": None,
            "timestamp": None,
            "is_valid": False,
        }


def issue_scan_tokens(
    customer_id: str,
    business_id: str,
    offer_id: str,
    timestamp: int | None = None,
) -> SecureToken:
    """
    Derive both barcode values for one encoding.

    Everything a pass embeds must come from a single call so that the
    barcodes carry the same timestamp.
    """
    if timestamp is None:
        timestamp = int(time.time() * 1000)

    return SecureToken(
        customer_token=encrypt_customer_token(customer_id, business_id, timestamp),
        offer_hash=hash_offer_id(offer_id, business_id),
        timestamp=timestamp,
    )


def build_progress_url(base_url: str, tokens: SecureToken) -> str:
    """URL scanned by the merchant app to record progress."""
    token = quote(tokens.customer_token, safe="")
    return f"{base_url.rstrip('/')}/scan/{token}/{tokens.offer_hash}"
