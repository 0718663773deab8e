"""
Google Wallet loyalty pass encoder.

Produces the LoyaltyClass (one per offer, shared by its customers) and the
LoyaltyObject (one per customer) payloads. Google has no native progress
styles, so progress is written as a star string in textModulesData.
Posting the payloads to the Wallet API happens downstream.
"""

import logging
import re
from typing import Optional

from cardpass.core.config import get_settings
from cardpass.domain.schemas import (
    BarcodeFormat,
    CardDesign,
    Customer,
    EncodedPass,
    Offer,
    OfferType,
    ProgressSnapshot,
    SecureToken,
    WalletPlatform,
    coerce,
)
from cardpass.services.capabilities import (
    build_mismatch,
    get_capabilities,
    platform_logo,
    resolve_barcode_format,
    resolve_progress_style,
    resolve_stamp_mode,
)
from cardpass.services.colors import get_contrasting_text_color, normalize_hex
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

STAR_FILLED = "⭐"
STAR_EMPTY = "☆"

_BARCODE_TYPES = {
    BarcodeFormat.QR_CODE: "QR_CODE",
    BarcodeFormat.PDF417: "PDF_417",
}

# Google IDs allow letters, digits, '.', '_' and '-'
_ID_UNSAFE = re.compile(r"[^\w.-]")


def _sanitize_id(value: str) -> str:
    return _ID_UNSAFE.sub("_", value)


def _localized(value: str, locale: str) -> dict:
    return {"defaultValue": {"language": locale, "value": value}}


def _image(uri: str, description: str, locale: str) -> dict:
    return {
        "sourceUri": {"uri": uri},
        "contentDescription": _localized(description, locale),
    }


def star_string(filled: int, total: int) -> str:
    """Text rendering of stamp progress, e.g. '⭐⭐⭐☆☆'."""
    filled = max(0, min(filled, total))
    return STAR_FILLED * filled + STAR_EMPTY * (total - filled)


class GooglePassEncoder:
    """
    Encodes loyalty passes as a Google Wallet class/object pair.

    Architecture:
    - One LoyaltyClass per OFFER (program name, logo, background color)
    - One LoyaltyObject per CUSTOMER (progress, barcode, account)
    """

    platform = WalletPlatform.GOOGLE

    def __init__(
        self,
        issuer_id: str,
        base_url: str,
        locale: str = "en",
    ):
        self.issuer_id = issuer_id
        self.base_url = base_url.rstrip("/")
        self.locale = locale

    def _get_class_id(self, offer_id: str) -> str:
        """Generate class ID for an offer."""
        return f"{self.issuer_id}.{_sanitize_id(offer_id)}"

    def _get_object_id(self, customer_id: str, offer_id: str) -> str:
        """Generate object ID for a customer's card on an offer."""
        return f"{self.issuer_id}.{_sanitize_id(f'{customer_id}_{offer_id}')}"

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
        Build the Google class and object payloads for one customer.

        Raises:
            EncodingError: offer or design is missing required fields
            FormatError: malformed color or customer ID
        """
        design = coerce(CardDesign, design)
        offer = coerce(Offer, offer)
        customer = coerce(Customer, customer)
        progress = coerce(ProgressSnapshot, progress)
        locale = locale or self.locale
        caps = get_capabilities(self.platform)

        require_offer_fields(offer, platform=self.platform.value)
        background, foreground, _ = require_colors(design, platform=self.platform.value)
        require_design_choices(design, platform=self.platform.value)

        if tokens is None:
            tokens = issue_scan_tokens(customer.customer_id, offer.business_id, offer.offer_id)
        progress_url = build_progress_url(self.base_url, tokens)

        state = compute_progress(offer, progress)
        logo_url = platform_logo(design, self.platform)

        substitutions = []
        progress_style, progress_mismatch = resolve_progress_style(
            self.platform, design.progress_display_style
        )
        _, stamp_mismatch = resolve_stamp_mode(self.platform, design.stamp_display_type, logo_url)
        barcode_format, barcode_mismatch = resolve_barcode_format(
            self.platform, design.barcode_preference
        )
        substitutions.extend(m for m in (progress_mismatch, stamp_mismatch, barcode_mismatch) if m)

        # Google picks the text color from the background itself
        text_color = get_contrasting_text_color(background)
        if normalize_hex(foreground) != text_color:
            substitutions.append(build_mismatch(
                caps, "foreground_color", normalize_hex(foreground), text_color,
                f"custom text colors are not supported; text is shown in {text_color}",
            ))

        if caps.max_barcodes < 2:
            substitutions.append(build_mismatch(
                caps, "barcodes", "customer ID + progress URL", "progress URL",
                "only one barcode is shown; the customer ID appears as the account ID "
                "and under the barcode",
            ))

        business_name = offer.business_name or DEFAULT_BUSINESS_NAME
        class_payload = self._build_class_payload(offer, business_name, background, logo_url, locale)
        object_payload = self._build_object_payload(
            design, offer, customer, progress, state, progress_url, barcode_format, business_name, locale
        )

        for mismatch in substitutions:
            logger.debug(f"[Google Wallet] {mismatch.message}")
        logger.info(
            f"[Google Wallet] Encoded loyalty object {object_payload['id']} "
            f"(class {class_payload['id']})"
        )

        return EncodedPass(
            platform=self.platform,
            payload={"loyaltyClass": class_payload, "loyaltyObject": object_payload},
            progress_visual=self._build_progress_visual(offer, state, progress_style),
            scan_tokens=tokens,
            substitutions=substitutions,
        )

    def _build_class_payload(
        self,
        offer: Offer,
        business_name: str,
        background: str,
        logo_url: str | None,
        locale: str,
    ) -> dict:
        """
        Build LoyaltyClass payload.

        The class is shared by all customers of an offer.
        """
        payload = {
            "id": self._get_class_id(offer.offer_id),
            "issuerName": business_name,
            "programName": offer.title,
            "hexBackgroundColor": normalize_hex(background),
            "programDetails": offer.description or offer.title,
            "reviewStatus": "UNDER_REVIEW",
        }

        # Only add logo if we have a valid URL
        if logo_url:
            payload["programLogo"] = _image(
                logo_url,
                get_system_string("logo_content_description", locale, business=business_name),
                locale,
            )

        if offer.business_website:
            payload["homepageUri"] = {
                "uri": offer.business_website,
                "description": get_system_string("business_website", locale),
            }

        return payload

    def _build_object_payload(
        self,
        design: CardDesign,
        offer: Offer,
        customer: Customer,
        progress: ProgressSnapshot,
        state: ProgressState,
        progress_url: str,
        barcode_format: BarcodeFormat,
        business_name: str,
        locale: str,
    ) -> dict:
        """
        Build LoyaltyObject payload.

        Each customer has their own object carrying their progress and the
        scan barcode.
        """
        if offer.type == OfferType.POINTS:
            loyalty_points = {
                "label": get_system_string("points_label", locale),
                "balance": {"int": state.earned},
            }
            progress_module = {
                "id": "progress",
                "header": get_system_string("points_label", locale),
                "body": str(state.earned),
            }
        else:
            loyalty_points = {
                "label": get_system_string("stamps_collected_label", locale),
                "balance": {"string": f"{state.display_stamps}/{state.required}"},
            }
            progress_module = {
                "id": "progress",
                "header": get_system_string("progress_label", locale),
                "body": "\n".join([
                    star_string(state.display_stamps, state.required),
                    get_system_string(
                        "progress_stamps_body", locale,
                        count=state.display_stamps, total=state.required,
                    ),
                ]),
            }

        reward = offer.reward_description or get_system_string("default_reward", locale)
        text_modules = [progress_module]

        status = reward_status_text(state, locale)
        if status:
            text_modules.append({"id": "reward_status", "header": status, "body": reward})

        text_modules.append({
            "id": "reward",
            "header": get_system_string("reward_label", locale),
            "body": reward,
        })
        text_modules.append({
            "id": "location",
            "header": get_system_string("valid_at_label", locale),
            "body": offer.branch_name or get_system_string("all_locations", locale),
        })

        tier = calculate_customer_tier(progress.rewards_claimed, offer.loyalty_tiers).current_tier
        tier_name = tier.name_ar if locale == "ar" and tier.name_ar else tier.name
        text_modules.append({
            "id": "tier",
            "header": get_system_string("tier_label", locale),
            "body": f"{tier.icon} {tier_name}".strip(),
        })

        links = [{
            "id": "account",
            "uri": progress_url,
            "description": get_system_string("view_account", locale),
        }]
        if offer.business_phone:
            links.append({
                "id": "phone",
                "uri": f"tel:{offer.business_phone}",
                "description": get_system_string("call_business", locale),
            })

        payload = {
            "id": self._get_object_id(customer.customer_id, offer.offer_id),
            "classId": self._get_class_id(offer.offer_id),
            "state": "ACTIVE",
            "accountId": customer.customer_id,
            "accountName": customer.full_name,
            "loyaltyPoints": loyalty_points,
            "textModulesData": text_modules,
            "linksModuleData": {"uris": links},
            "barcode": {
                "type": _BARCODE_TYPES[barcode_format],
                "value": require_ascii_barcode(progress_url, self.platform.value),
                "alternateText": get_system_string(
                    "customer_id_alt_text", locale, customer_id=customer.customer_id
                ),
            },
        }

        if offer.locations:
            payload["locations"] = [
                {"latitude": loc.lat, "longitude": loc.lng} for loc in offer.locations
            ]

        # Banner goes last, below the card details
        if design.hero_image_url:
            payload["heroImage"] = _image(
                design.hero_image_url,
                get_system_string("hero_content_description", locale, business=business_name),
                locale,
            )

        return payload

    def _build_progress_visual(self, offer: Offer, state: ProgressState, style: str) -> dict:
        if offer.type == OfferType.POINTS:
            return {"style": "points", "balance": state.earned, "target": state.required or None}
        return {
            "style": style,
            "text": star_string(state.display_stamps, state.required),
            "filled": state.display_stamps,
            "total": state.required,
            "reward_ready": state.reward_ready,
            "rewards_available": state.rewards_available,
        }


def create_google_pass_encoder() -> GooglePassEncoder:
    """Factory function to create GooglePassEncoder from settings."""
    settings = get_settings()
    if not settings.google_wallet_issuer_id:
        raise ValueError("Google Wallet issuer ID not configured")
    return GooglePassEncoder(
        issuer_id=settings.google_wallet_issuer_id,
        base_url=settings.base_url,
        locale=settings.default_locale,
    )
