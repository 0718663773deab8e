"""
Card design validation.

Two levels of strictness:
- validate_card_design: can the design be saved? Errors block saving,
  warnings are advisory.
- is_design_production_ready: can the design go live? Adds requirements that
  are only warnings when saving a draft.

Problems are always returned as lists so the editor can show a full checklist.
"""

from cardpass.domain.schemas import CardDesign, ProductionReadiness, ValidationResult, coerce
from cardpass.services.capabilities import PROGRESS_STYLES, design_choice_errors
from cardpass.services.colors import is_valid_hex, validate_color_contrast

MAX_STAMP_ICON_LENGTH = 10

LOGO_REQUIRED_BLOCKER = "At least one logo is required for production"


def _utf16_length(text: str) -> int:
    """Length as the browser editor counts it (UTF-16 code units)."""
    return len(text.encode("utf-16-le")) // 2


def validate_text_length(text: str | None, max_length: int, field_name: str = "Text") -> list[str]:
    """Return an error if text is longer than max_length characters."""
    length = _utf16_length(text) if text else 0
    if length > max_length:
        return [f"{field_name} is too long ({length}/{max_length} characters)"]
    return []


def validate_color_scheme(
    background_color: str,
    foreground_color: str,
    label_color: str | None = None,
) -> tuple[list[str], list[str]]:
    """
    Check color formats and contrast.

    Contrast is only checked once every color is well formed.

    Returns:
        (errors, warnings)
    """
    errors = []
    warnings = []

    if not is_valid_hex(background_color):
        errors.append("Invalid background color format")
    if not is_valid_hex(foreground_color):
        errors.append("Invalid foreground color format")
    if label_color and not is_valid_hex(label_color):
        errors.append("Invalid label color format")

    if errors:
        return errors, warnings

    contrast = validate_color_contrast(background_color, foreground_color)
    if not contrast.meets_aa:
        errors.append(
            f"Poor contrast between background and foreground ({contrast.ratio}:1). "
            "Minimum 4.5:1 required for accessibility (WCAG AA)"
        )
    elif not contrast.meets_aaa:
        warnings.append(
            f"Contrast is acceptable ({contrast.ratio}:1 - AA level) but could be improved. "
            "AAA level requires 7:1 for enhanced accessibility"
        )

    if label_color:
        label_contrast = validate_color_contrast(background_color, label_color)
        if not label_contrast.meets_aa:
            warnings.append(
                f"Low contrast between background and labels ({label_contrast.ratio}:1). "
                "Consider using a lighter or darker label color"
            )

    return errors, warnings


def validate_card_design(design: CardDesign | dict) -> ValidationResult:
    """
    Validate a card design.

    Args:
        design: CardDesign or the raw design dict from the editor

    Returns:
        ValidationResult with every error and warning found
    """
    design = coerce(CardDesign, design)
    errors = []
    warnings = []

    if not design.background_color:
        errors.append("Background color is required")
    if not design.foreground_color:
        errors.append("Foreground color is required")

    if design.background_color and design.foreground_color:
        color_errors, color_warnings = validate_color_scheme(
            design.background_color,
            design.foreground_color,
            design.label_color,
        )
        errors.extend(color_errors)
        warnings.extend(color_warnings)

    if _utf16_length(design.stamp_icon) > MAX_STAMP_ICON_LENGTH:
        warnings.append("Stamp icon is too long. Use a single emoji or short text")

    if design.progress_display_style and design.progress_display_style not in PROGRESS_STYLES:
        errors.append(
            f"Invalid progress display style. Must be one of: {', '.join(PROGRESS_STYLES)}"
        )

    errors.extend(design_choice_errors(design))

    if not design.has_logo:
        warnings.append("No logo uploaded. Consider adding a logo for better branding")

    if not design.hero_image_url:
        warnings.append("No hero image. A banner image makes your card more visually appealing")

    return ValidationResult(
        is_valid=not errors,
        has_errors=bool(errors),
        has_warnings=bool(warnings),
        errors=errors,
        warnings=warnings,
    )


def is_design_production_ready(
    design: CardDesign | dict,
    validation: ValidationResult | None = None,
) -> ProductionReadiness:
    """
    Decide whether a design can be published.

    Blockers are the validation errors, verbatim, plus a logo requirement
    that validate_card_design only reports as a warning.
    """
    design = coerce(CardDesign, design)
    if validation is None:
        validation = validate_card_design(design)

    blockers = list(validation.errors)
    if not design.has_logo:
        blockers.append(LOGO_REQUIRED_BLOCKER)

    return ProductionReadiness(ready=not blockers, blockers=blockers)
