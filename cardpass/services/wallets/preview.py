"""
Wallet card preview for the design editor.

A lightweight view of a customer's card that works on drafts: missing
colors and offer fields get placeholders instead of raising.
"""

import random
import string

from cardpass.domain.schemas import CardDesign, Customer, Offer, ProgressSnapshot, coerce
from cardpass.services.capabilities import describe_platform_limitations
from cardpass.services.colors import get_contrasting_text_color, is_valid_hex, normalize_hex
from cardpass.services.tiers import calculate_customer_tier
from cardpass.services.wallets.progress import compute_progress

DEFAULT_PREVIEW_BACKGROUND = "#3B82F6"
EMPTY_STAMP_ICON = "⚪"

# Stands in for the customer on drafts previewed before anyone has joined
PREVIEW_CUSTOMER_ID = "cust_preview"

BARCODE_BAR_COUNT = 15
BARCODE_MIN_HEIGHT = 30
BARCODE_MAX_HEIGHT = 60
BARCODE_LABEL_LENGTH = 8


def barcode_placeholder_bars(
    offer_id: str,
    count: int = BARCODE_BAR_COUNT,
    min_height: int = BARCODE_MIN_HEIGHT,
    max_height: int = BARCODE_MAX_HEIGHT,
) -> list[int]:
    """
    Bar heights for the fake barcode drawn on previews.

    Seeded by the offer ID so the same offer always renders the same bars.
    """
    rng = random.Random(f"barcode:{offer_id}")
    return [rng.randint(min_height, max_height) for _ in range(count)]


def barcode_placeholder_label(offer_id: str) -> str:
    rng = random.Random(f"label:{offer_id}")
    chars = string.ascii_uppercase + string.digits
    return "LOYALTY-" + "".join(rng.choices(chars, k=BARCODE_LABEL_LENGTH))


def _preview_colors(design: CardDesign) -> dict:
    background = (
        normalize_hex(design.background_color) if is_valid_hex(design.background_color)
        else DEFAULT_PREVIEW_BACKGROUND
    )
    foreground = (
        normalize_hex(design.foreground_color) if is_valid_hex(design.foreground_color)
        else get_contrasting_text_color(background)
    )
    label = normalize_hex(design.label_color) if is_valid_hex(design.label_color) else foreground
    return {"background": background, "foreground": foreground, "label": label}


def build_wallet_preview(
    design: CardDesign | dict,
    offer: Offer | dict,
    customer: Customer | dict | None,
    progress: ProgressSnapshot | dict,
) -> dict:
    """
    Build the preview model shown next to the card editor.

    Returns:
        Dict with progress numbers, per-stamp list, status ('reward_ready'
        or 'collecting'), colors, tier, platform notes and placeholder
        barcode
    """
    design = coerce(CardDesign, design)
    offer = coerce(Offer, offer)
    if not isinstance(customer, Customer):
        customer = dict(customer or {})
        customer["customer_id"] = customer.get("customer_id") or PREVIEW_CUSTOMER_ID
    customer = coerce(Customer, customer)
    progress = coerce(ProgressSnapshot, progress)

    state = compute_progress(offer, progress)
    tier = calculate_customer_tier(progress.rewards_claimed, offer.loyalty_tiers)
    offer_key = offer.offer_id or ""

    stamps = [
        {
            "position": position,
            "earned": position <= state.display_stamps,
            "icon": design.stamp_icon if position <= state.display_stamps else EMPTY_STAMP_ICON,
            "status": "earned" if position <= state.display_stamps else "pending",
        }
        for position in range(1, state.required + 1)
    ]

    return {
        "business_name": offer.business_name,
        "offer_title": offer.title,
        "customer_name": customer.full_name,
        "customer_id": customer.customer_id,
        "progress": {
            "current": state.display_stamps,
            "required": state.required,
            "percentage": state.percentage,
            "remaining": state.remaining,
            "rewards_available": state.rewards_available,
        },
        "stamps": stamps,
        "status": "reward_ready" if state.reward_ready else "collecting",
        "reward_description": offer.reward_description,
        "branch_name": offer.branch_name,
        "member_since": customer.joined_date.isoformat() if customer.joined_date else None,
        "tier": {
            "name": tier.current_tier.name,
            "icon": tier.current_tier.icon,
            "rewards_to_next_tier": tier.rewards_to_next_tier,
        },
        "colors": _preview_colors(design),
        "logo_url": design.logo_url,
        "hero_image_url": design.hero_image_url,
        "platform_notes": [m.message for m in describe_platform_limitations(design)],
        "barcode_bars": barcode_placeholder_bars(offer_key),
        "barcode_label": barcode_placeholder_label(offer_key),
    }
