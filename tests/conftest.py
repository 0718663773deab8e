from datetime import date

import pytest

from cardpass.domain.schemas import CardDesign, Customer, Offer, ProgressSnapshot
from cardpass.services.wallets.apple import ApplePassEncoder
from cardpass.services.wallets.google import GooglePassEncoder

CUSTOMER_ID = "cust_1234567890abcdef"
BASE_URL = "https://loyalty.example.com"


@pytest.fixture
def design():
    return CardDesign(
        background_color="#1E40AF",
        foreground_color="#FFFFFF",
        label_color="#E0E7FF",
        logo_url="https://cdn.example.com/logo.png",
        hero_image_url="https://cdn.example.com/hero.png",
        stamp_icon="☕",
        progress_display_style="bar",
    )


@pytest.fixture
def offer():
    return Offer(
        offer_id="off_coffee",
        business_id="biz_42",
        title="Coffee Card",
        description="Buy 10 coffees, get one free",
        stamps_required=10,
        reward_description="Free Coffee",
        business_name="Bean There",
        branch_name="Downtown",
        expiration_date=date(2026, 12, 31),
    )


@pytest.fixture
def customer():
    return Customer(
        customer_id=CUSTOMER_ID,
        first_name="Sam",
        last_name="Rivera",
        joined_date=date(2025, 1, 5),
    )


@pytest.fixture
def progress():
    return ProgressSnapshot(stamps_earned=7, rewards_claimed=0)


@pytest.fixture
def apple_encoder():
    return ApplePassEncoder(
        pass_type_id="pass.com.example.loyalty",
        team_id="TEAM123456",
        base_url=BASE_URL,
    )


@pytest.fixture
def google_encoder():
    return GooglePassEncoder(issuer_id="3388000000012345", base_url=BASE_URL)
