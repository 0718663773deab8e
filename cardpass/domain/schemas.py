from datetime import date
from enum import Enum
from typing import Dict, Optional, List

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


# ============================================
# Enums
# ============================================

class WalletPlatform(str, Enum):
    """Wallet ecosystems a pass can be encoded for."""
    APPLE = "apple"
    GOOGLE = "google"


class StampDisplayType(str, Enum):
    ICON = "icon"
    LOGO = "logo"


class BarcodeFormat(str, Enum):
    QR_CODE = "QR_CODE"
    PDF417 = "PDF417"


class ApplePassType(str, Enum):
    STORE_CARD = "storeCard"
    GENERIC = "generic"


class OfferType(str, Enum):
    STAMPS = "stamps"
    POINTS = "points"


# ============================================
# Card Design Schemas
# ============================================

class CardDesign(BaseModel):
    """Merchant-authored visual configuration of a loyalty card.

    Colors are kept as raw strings so that malformed values reach the
    validation engine and are reported there instead of being rejected here.
    """
    model_config = ConfigDict(extra="ignore")

    # Colors (hex, "#RRGGBB" or "#RGB")
    background_color: Optional[str] = None
    foreground_color: Optional[str] = None
    label_color: Optional[str] = None

    # Asset URLs (produced by the upload service)
    logo_url: Optional[str] = None
    logo_apple_url: Optional[str] = None
    logo_google_url: Optional[str] = None
    hero_image_url: Optional[str] = None

    # Stamp and progress presentation
    stamp_icon: str = "⭐"
    stamp_display_type: str = StampDisplayType.ICON.value  # StampDisplayType value
    progress_display_style: Optional[str] = None  # 'bar' | 'grid' | 'circular'

    # Kept as raw strings so unknown values reach validation as errors
    barcode_preference: str = BarcodeFormat.QR_CODE.value  # BarcodeFormat value
    apple_pass_type: str = ApplePassType.STORE_CARD.value  # ApplePassType value

    @field_validator("barcode_preference", mode="before")
    @classmethod
    def _accept_short_qr(cls, value):
        if isinstance(value, str) and value.upper() == "QR":
            return BarcodeFormat.QR_CODE.value
        return value

    @field_validator("stamp_display_type", "barcode_preference", "apple_pass_type", mode="before")
    @classmethod
    def _choice_value(cls, value, info):
        if isinstance(value, Enum):
            return value.value
        return value or cls.model_fields[info.field_name].default

    @field_validator("stamp_icon", mode="before")
    @classmethod
    def _default_empty_icon(cls, value):
        return value or "⭐"

    @property
    def has_logo(self) -> bool:
        return bool(self.logo_url or self.logo_apple_url or self.logo_google_url)


# ============================================
# Offer / Customer / Progress Schemas
# ============================================

class OfferLocation(BaseModel):
    lat: float
    lng: float


class LoyaltyTier(BaseModel):
    """One rung of an offer's tier ladder, keyed on rewards claimed."""
    id: str
    name: str
    name_ar: Optional[str] = Field(default=None, alias="nameAr")
    min_rewards: int = Field(default=0, ge=0, alias="minRewards")
    max_rewards: Optional[int] = Field(default=None, alias="maxRewards")
    icon: str = ""
    color: str = "#000000"

    model_config = ConfigDict(populate_by_name=True)


class LoyaltyTierConfig(BaseModel):
    enabled: bool = False
    tiers: List[LoyaltyTier] = []


class Offer(BaseModel):
    """Loyalty program terms.

    title and stamps_required are optional here; the encoders reject offers
    missing them with a descriptive EncodingError.
    """
    model_config = ConfigDict(extra="ignore")

    offer_id: Optional[str] = None
    business_id: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    type: OfferType = OfferType.STAMPS
    stamps_required: Optional[int] = None
    reward_description: Optional[str] = None
    business_name: Optional[str] = None
    branch_name: Optional[str] = None
    business_phone: Optional[str] = None
    business_website: Optional[str] = None
    expiration_date: Optional[date] = None
    locations: List[OfferLocation] = []
    loyalty_tiers: Optional[LoyaltyTierConfig] = None


class Customer(BaseModel):
    model_config = ConfigDict(extra="ignore")

    customer_id: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    joined_date: Optional[date] = None
    auth_token: Optional[str] = None  # Apple web service authentication

    @property
    def full_name(self) -> str:
        name = " ".join(part for part in (self.first_name, self.last_name) if part)
        return name or "Customer"


class ProgressSnapshot(BaseModel):
    """Per-customer progress. stamps_earned may exceed stamps_required."""
    stamps_earned: int = Field(default=0, ge=0)
    rewards_claimed: int = Field(default=0, ge=0)


# ============================================
# Validation Schemas
# ============================================

class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ContrastCheck(_CamelModel):
    ratio: float
    meets_aa: bool
    meets_aaa: bool
    level: str  # 'AAA' | 'AA' | 'Fail'
    message: str


class ValidationResult(_CamelModel):
    is_valid: bool
    has_errors: bool
    has_warnings: bool
    errors: List[str] = []
    warnings: List[str] = []


class ProductionReadiness(_CamelModel):
    ready: bool
    blockers: List[str] = []


# ============================================
# Token / Encoding Schemas
# ============================================

class SecureToken(_CamelModel):
    customer_token: str  # base64
    offer_hash: str  # hex
    timestamp: int  # milliseconds embedded in customer_token


class CapabilityMismatch(BaseModel):
    """A requested design feature the target platform rendered differently."""
    platform: WalletPlatform
    feature: str
    requested: str
    applied: str
    message: str


class EncodedPass(BaseModel):
    """Logical pass structure handed to the packaging layer."""
    platform: WalletPlatform
    payload: dict
    progress_visual: dict
    scan_tokens: SecureToken
    substitutions: List[CapabilityMismatch] = []
    assets: dict = {}  # image URLs the packaging layer bundles (Apple)

    @property
    def disclaimers(self) -> List[str]:
        return [mismatch.message for mismatch in self.substitutions]


# ============================================
# Tier Schemas
# ============================================

class TierSummary(BaseModel):
    name: str
    name_ar: str
    icon: str = ""


class TierStatus(BaseModel):
    current_tier: LoyaltyTier
    rewards_claimed: int
    rewards_to_next_tier: Optional[int] = None
    next_tier: Optional[TierSummary] = None
    is_top_tier: bool = False


class PassBundle(BaseModel):
    """Result of encoding one customer's pass for several platforms."""
    validation: ValidationResult
    passes: Dict[WalletPlatform, EncodedPass] = {}
    errors: Dict[WalletPlatform, str] = {}

    @property
    def disclaimers(self) -> List[str]:
        return [message for encoded in self.passes.values() for message in encoded.disclaimers]


def coerce(model_cls, value):
    """Validate a raw dict into model_cls; model instances pass through."""
    if isinstance(value, model_cls):
        return value
    return model_cls.model_validate(value)
