"""
Apple Wallet pass encoder.

Builds the pass.json model for a store card (or generic pass) from the
canonical design, offer, customer and progress records. Signing and
.pkpass packaging happen downstream; image URLs are handed over in
EncodedPass.assets.
"""

import logging
from datetime import date
from typing import Optional

from cardpass.core.config import get_settings
from cardpass.domain.schemas import (
    ApplePassType,
    BarcodeFormat,
    CardDesign,
    Customer,
    EncodedPass,
    Offer,
    OfferType,
    ProgressSnapshot,
    SecureToken,
    StampDisplayType,
    WalletPlatform,
    coerce,
)
from cardpass.services.capabilities import (
    build_mismatch,
    get_capabilities,
    platform_logo,
    resolve_barcode_format,
    resolve_pass_style,
    resolve_progress_style,
    resolve_stamp_mode,
)
from cardpass.services.colors import hex_to_rgb_string
from cardpass.services.localization import get_system_string
from cardpass.services.secure_tokens import build_progress_url, issue_scan_tokens
from cardpass.services.tiers import calculate_customer_tier
from cardpass.services.wallets.progress import (
    DEFAULT_BUSINESS_NAME,
    ProgressState,
    compute_progress,
    require_ascii_barcode,
    require_colors,
    require_design_choices,
    require_offer_fields,
    reward_status_text,
)

logger = logging.getLogger(__name__)

PASS_FORMAT_VERSION = 1
BARCODE_ENCODING = "iso-8859-1"
GRID_COLUMNS = 5

_BARCODE_FORMATS = {
    BarcodeFormat.QR_CODE: "PKBarcodeFormatQR",
    BarcodeFormat.PDF417: "PKBarcodeFormatPDF417",
}

# Hero image slot per pass style
_HERO_SLOTS = {
    ApplePassType.STORE_CARD: "strip",
    ApplePassType.GENERIC: "thumbnail",
}


def _format_date(value: date) -> str:
    return f"{value:%b} {value.day}, {value.year}"


class ApplePassEncoder:
    """
    Encodes loyalty passes in Apple's pass.json layout.

    Field placement:
    - primary: stamp progress (or points balance)
    - secondary: reward and location
    - auxiliary: member since, expiry, completed cycles, tier
    - back: customer, customer ID, offer details, terms
    """

    platform = WalletPlatform.APPLE

    def __init__(
        self,
        pass_type_id: str,
        team_id: str,
        base_url: str,
        locale: str = "en",
    ):
        self.pass_type_id = pass_type_id
        self.team_id = team_id
        self.base_url = base_url.rstrip("/")
        self.locale = locale

    def encode(
        self,
        design: CardDesign | dict,
        offer: Offer | dict,
        customer: Customer | dict,
        progress: ProgressSnapshot | dict,
        tokens: Optional[SecureToken] = None,
        locale: Optional[str] = None,
    ) -> EncodedPass:
        """
        Build the Apple pass for one customer.

        Args:
            tokens: Scan tokens shared with other platforms. Issued here
                when omitted.
            locale: System string locale, defaults to the encoder's

        Raises:
            EncodingError: offer or design is missing required fields
            FormatError: malformed color or customer ID
        """
        design = coerce(CardDesign, design)
        offer = coerce(Offer, offer)
        customer = coerce(Customer, customer)
        progress = coerce(ProgressSnapshot, progress)
        locale = locale or self.locale

        require_offer_fields(offer, platform=self.platform.value)
        background, foreground, label = require_colors(design, platform=self.platform.value)
        require_design_choices(design, platform=self.platform.value)

        if tokens is None:
            tokens = issue_scan_tokens(customer.customer_id, offer.business_id, offer.offer_id)
        progress_url = build_progress_url(self.base_url, tokens)

        state = compute_progress(offer, progress)
        logo_url = platform_logo(design, self.platform)

        pass_style, style_mismatch = resolve_pass_style(self.platform, design.apple_pass_type)
        progress_style, progress_mismatch = resolve_progress_style(
            self.platform, design.progress_display_style
        )
        stamp_mode, stamp_mismatch = resolve_stamp_mode(
            self.platform, design.stamp_display_type, logo_url
        )
        barcode_format, barcode_mismatch = resolve_barcode_format(
            self.platform, design.barcode_preference
        )
        substitutions = [
            m for m in (style_mismatch, progress_mismatch, stamp_mismatch, barcode_mismatch) if m
        ]

        business_name = offer.business_name or DEFAULT_BUSINESS_NAME
        pass_json = {
            "formatVersion": PASS_FORMAT_VERSION,
            "passTypeIdentifier": self.pass_type_id,
            "serialNumber": f"{customer.customer_id}-{offer.offer_id}",
            "teamIdentifier": self.team_id,
            "organizationName": business_name,
            "description": offer.description or offer.title,
            "logoText": offer.title,
            "backgroundColor": hex_to_rgb_string(background),
            "foregroundColor": hex_to_rgb_string(foreground),
            "labelColor": hex_to_rgb_string(label),
            pass_style.value: self._build_fields(offer, customer, progress, state, locale),
        }

        barcodes = self._build_barcodes(customer, progress_url, barcode_format, locale)
        # Legacy single barcode key for iOS 8 and earlier
        pass_json["barcode"] = barcodes[0]
        pass_json["barcodes"] = barcodes

        locations, locations_mismatch = self._build_locations(offer, business_name, locale)
        if locations:
            pass_json["locations"] = locations
        if locations_mismatch:
            substitutions.append(locations_mismatch)

        if customer.auth_token:
            pass_json["webServiceURL"] = self.base_url
            pass_json["authenticationToken"] = customer.auth_token

        assets = {}
        if logo_url:
            assets["logo"] = logo_url
        if design.hero_image_url:
            assets[_HERO_SLOTS[pass_style]] = design.hero_image_url

        for mismatch in substitutions:
            logger.debug(f"[Apple Wallet] {mismatch.message}")
        logger.info(
            f"[Apple Wallet] Encoded {pass_style.value} pass for customer "
            f"{customer.customer_id} on offer {offer.offer_id}"
        )

        return EncodedPass(
            platform=self.platform,
            payload=pass_json,
            progress_visual=self._build_progress_visual(
                design, offer, state, progress_style, stamp_mode, logo_url
            ),
            scan_tokens=tokens,
            substitutions=substitutions,
            assets=assets,
        )

    def _build_fields(
        self,
        offer: Offer,
        customer: Customer,
        progress: ProgressSnapshot,
        state: ProgressState,
        locale: str,
    ) -> dict:
        """Field groups for the storeCard/generic key. Keys are unique per pass."""
        if offer.type == OfferType.POINTS:
            primary = {
                "key": "points",
                "label": get_system_string("points_label", locale),
                "value": state.earned,
            }
        else:
            primary = {
                "key": "progress",
                "label": get_system_string("progress_label", locale),
                "value": get_system_string(
                    "progress_value", locale, count=state.display_stamps, total=state.required
                ),
                "textAlignment": "PKTextAlignmentCenter",
            }

        fields = {
            "headerFields": [],
            "primaryFields": [primary],
            "secondaryFields": [
                {
                    "key": "reward",
                    "label": get_system_string("reward_label", locale),
                    "value": offer.reward_description or get_system_string("default_reward", locale),
                },
                {
                    "key": "location",
                    "label": get_system_string("location_label", locale),
                    "value": offer.branch_name or get_system_string("all_locations", locale),
                },
            ],
            "auxiliaryFields": [],
            "backFields": [],
        }

        status = reward_status_text(state, locale)
        if status:
            fields["headerFields"].append({
                "key": "reward_status",
                "label": get_system_string("reward_label", locale),
                "value": status,
            })

        auxiliary = fields["auxiliaryFields"]
        if customer.joined_date:
            auxiliary.append({
                "key": "member_since",
                "label": get_system_string("member_since_label", locale),
                "value": _format_date(customer.joined_date),
            })
        auxiliary.append({
            "key": "expires",
            "label": get_system_string("expires_label", locale),
            "value": (
                _format_date(offer.expiration_date) if offer.expiration_date
                else get_system_string("never_expires", locale)
            ),
        })
        if offer.type == OfferType.STAMPS:
            auxiliary.append({
                "key": "completed",
                "label": get_system_string("completed_label", locale),
                "value": get_system_string("completed_value", locale, count=progress.rewards_claimed),
            })

        tier = calculate_customer_tier(progress.rewards_claimed, offer.loyalty_tiers).current_tier
        tier_name = tier.name_ar if locale == "ar" and tier.name_ar else tier.name
        auxiliary.append({
            "key": "tier",
            "label": get_system_string("tier_label", locale),
            "value": f"{tier.icon} {tier_name}".strip(),
        })

        fields["backFields"] = [
            {
                "key": "customer_name",
                "label": get_system_string("customer_label", locale),
                "value": customer.full_name,
            },
            {
                "key": "customer_id",
                "label": get_system_string("customer_id_label", locale),
                "value": customer.customer_id,
            },
            {
                "key": "offer_details",
                "label": get_system_string("offer_details_label", locale),
                "value": offer.description or offer.title,
            },
            {
                "key": "terms",
                "label": get_system_string("terms_label", locale),
                "value": get_system_string("terms_value", locale),
            },
        ]
        return fields

    def _build_barcodes(
        self,
        customer: Customer,
        progress_url: str,
        barcode_format: BarcodeFormat,
        locale: str,
    ) -> list[dict]:
        """Customer ID first (manual lookup), progress URL second (scan)."""
        pk_format = _BARCODE_FORMATS[barcode_format]
        return [
            {
                "message": require_ascii_barcode(customer.customer_id, self.platform.value),
                "format": pk_format,
                "messageEncoding": BARCODE_ENCODING,
                "altText": get_system_string(
                    "customer_id_alt_text", locale, customer_id=customer.customer_id
                ),
            },
            {
                "message": require_ascii_barcode(progress_url, self.platform.value),
                "format": pk_format,
                "messageEncoding": BARCODE_ENCODING,
                "altText": get_system_string("scan_to_update", locale),
            },
        ]

    def _build_locations(self, offer: Offer, business_name: str, locale: str):
        if not offer.locations:
            return [], None

        caps = get_capabilities(self.platform)
        relevant_text = get_system_string("nearby_relevant_text", locale, business=business_name)
        locations = [
            {"latitude": loc.lat, "longitude": loc.lng, "relevantText": relevant_text}
            for loc in offer.locations[:caps.max_locations]
        ]

        mismatch = None
        if len(offer.locations) > len(locations):
            mismatch = build_mismatch(
                caps, "locations", str(len(offer.locations)), str(len(locations)),
                f"only the first {len(locations)} of {len(offer.locations)} locations "
                "trigger lock-screen notifications",
            )
        return locations, mismatch

    def _build_progress_visual(
        self,
        design: CardDesign,
        offer: Offer,
        state: ProgressState,
        style: str,
        stamp_mode: StampDisplayType,
        logo_url: str | None,
    ) -> dict:
        if offer.type == OfferType.POINTS:
            return {
                "style": "points",
                "balance": state.earned,
                "target": state.required or None,
            }

        visual = {
            "style": style,
            "filled": state.display_stamps,
            "total": state.required,
            "percentage": state.percentage,
            "reward_ready": state.reward_ready,
            "rewards_available": state.rewards_available,
        }
        if style == "grid":
            visual["columns"] = min(state.required, GRID_COLUMNS)
            visual["cells"] = [
                {
                    "position": position,
                    "earned": position <= state.display_stamps,
                    "mode": stamp_mode.value,
                    "icon": design.stamp_icon if stamp_mode == StampDisplayType.ICON else None,
                    "image": logo_url if stamp_mode == StampDisplayType.LOGO else None,
                }
                for position in range(1, state.required + 1)
            ]
        return visual


def create_apple_pass_encoder() -> ApplePassEncoder:
    """Factory function to create ApplePassEncoder from settings."""
    settings = get_settings()
    return ApplePassEncoder(
        pass_type_id=settings.apple_pass_type_id,
        team_id=settings.apple_team_id,
        base_url=settings.base_url,
        locale=settings.default_locale,
    )
