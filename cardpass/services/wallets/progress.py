"""
Offer checks, pass colors and progress arithmetic shared by every pass encoder.
"""

from dataclasses import dataclass

from cardpass.core.exceptions import EncodingError
from cardpass.domain.schemas import CardDesign, Offer, OfferType, ProgressSnapshot
from cardpass.services.capabilities import design_choice_errors
from cardpass.services.colors import require_hex
from cardpass.services.localization import get_system_string

DEFAULT_BUSINESS_NAME = "Loyalty Program"


@dataclass(frozen=True)
class ProgressState:
    """Where a customer stands in the current reward cycle."""
    earned: int
    required: int
    cycles_completed: int  # full cycles in earned (rewards ready to redeem)
    cycle_progress: int  # earned mod required
    reward_ready: bool
    display_stamps: int  # stamps shown on the card, never above required

    @property
    def rewards_available(self) -> int:
        return self.cycles_completed

    @property
    def remaining(self) -> int:
        return max(0, self.required - self.earned)

    @property
    def percentage(self) -> int:
        if not self.required:
            return 0
        return round(self.display_stamps / self.required * 100)


def require_offer_fields(offer: Offer, platform: str | None = None) -> None:
    """
    Reject offers that cannot produce a structurally valid pass.

    Raises:
        EncodingError: listing every missing field
    """
    errors = []
    if not offer.offer_id:
        errors.append("Offer ID required")
    if not offer.business_id:
        errors.append("Business ID required")
    if not offer.title:
        errors.append("Offer title required")
    if offer.type == OfferType.STAMPS:
        if offer.stamps_required is None:
            errors.append("stamps_required is required for stamps offers")
        elif offer.stamps_required < 1:
            errors.append(f"stamps_required must be positive, got {offer.stamps_required}")

    if errors:
        raise EncodingError(f"Cannot encode offer: {'; '.join(errors)}", platform=platform, errors=errors)


def compute_progress(offer: Offer, snapshot: ProgressSnapshot) -> ProgressState:
    """
    Split a stamp count into completed cycles and current-cycle progress.

    Reward-ready means at least one full cycle is on the card. Extra stamps
    beyond the first cycle are reported through cycles_completed rather than
    clamped away.
    """
    earned = snapshot.stamps_earned
    required = offer.stamps_required or 0

    if required < 1:
        # Points offers without a target: the balance is the whole story
        return ProgressState(
            earned=earned, required=0, cycles_completed=0,
            cycle_progress=earned, reward_ready=False, display_stamps=earned,
        )

    reward_ready = earned >= required
    return ProgressState(
        earned=earned,
        required=required,
        cycles_completed=earned // required,
        cycle_progress=earned % required,
        reward_ready=reward_ready,
        display_stamps=required if reward_ready else earned,
    )


def require_ascii_barcode(message: str, platform: str | None = None) -> str:
    """Barcode payloads are read by scanners as Latin-1; keep them ASCII."""
    if not message.isascii():
        raise EncodingError(
            f"Barcode message must be ASCII: {message!r}",
            platform=platform,
            errors=["Barcode message must be ASCII"],
        )
    return message


def reward_status_text(state: ProgressState, locale: str) -> str | None:
    """'Reward ready!' or 'N rewards ready!', None while still collecting."""
    if not state.reward_ready:
        return None
    if state.rewards_available == 1:
        return get_system_string("reward_ready", locale)
    return get_system_string("rewards_ready", locale, count=state.rewards_available)


def require_colors(design: CardDesign, platform: str | None = None) -> tuple[str, str, str]:
    """
    Background, foreground and label colors for a pass.

    The label color defaults to the foreground.

    Raises:
        EncodingError: if background or foreground is missing
        FormatError: if any color is malformed
    """
    missing = [
        f"{name} is required"
        for name, value in (("background_color", design.background_color),
                            ("foreground_color", design.foreground_color))
        if not value
    ]
    if missing:
        raise EncodingError(f"Cannot encode design: {'; '.join(missing)}", platform=platform, errors=missing)

    background = require_hex(design.background_color, "background_color")
    foreground = require_hex(design.foreground_color, "foreground_color")
    label = require_hex(design.label_color, "label_color") if design.label_color else foreground
    return background, foreground, label


def require_design_choices(design: CardDesign, platform: str | None = None) -> None:
    """
    Reject stamp, barcode and pass type values no platform can map.

    Raises:
        EncodingError: listing every unknown value
    """
    errors = design_choice_errors(design)
    if errors:
        raise EncodingError(f"Cannot encode design: {'; '.join(errors)}", platform=platform, errors=errors)
