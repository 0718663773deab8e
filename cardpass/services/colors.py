"""
Color utilities for card designs.

WCAG contrast calculation, hex/RGB conversion and derived colors.
Luminance constants follow WCAG 2.x and must not be tuned.
"""

import re

from cardpass.core.exceptions import FormatError
from cardpass.domain.schemas import ContrastCheck


_HEX_PATTERN = re.compile(r"^#?([0-9A-Fa-f]{6}|[0-9A-Fa-f]{3})$")

WHITE = "#FFFFFF"
BLACK = "#000000"

# WCAG 2.1 thresholds for normal text
AA_THRESHOLD = 4.5
AAA_THRESHOLD = 7.0

# Industry color presets offered by the design editor
COLOR_PRESETS: dict[str, dict] = {
    "coffee": {
        "name": "Coffee Shop",
        "colors": ["#6F4E37", "#8B4513", "#A0522D", "#3E2723", "#795548"],
    },
    "restaurant": {
        "name": "Restaurant",
        "colors": ["#DC2626", "#EF4444", "#F97316", "#EA580C", "#C2410C"],
    },
    "retail": {
        "name": "Retail",
        "colors": ["#2563EB", "#3B82F6", "#60A5FA", "#1D4ED8", "#1E40AF"],
    },
    "beauty": {
        "name": "Beauty & Wellness",
        "colors": ["#EC4899", "#F472B6", "#A855F7", "#C026D3", "#DB2777"],
    },
    "fitness": {
        "name": "Fitness",
        "colors": ["#F97316", "#FB923C", "#EA580C", "#DC2626", "#EF4444"],
    },
    "professional": {
        "name": "Professional",
        "colors": ["#1E40AF", "#1E3A8A", "#312E81", "#1F2937", "#111827"],
    },
}


def is_valid_hex(hex_color: str | None) -> bool:
    """Check for a 3- or 6-digit hex color, with or without '#'."""
    if not isinstance(hex_color, str):
        return False
    return _HEX_PATTERN.match(hex_color) is not None


def require_hex(hex_color: str | None, field: str = "color") -> str:
    """Return hex_color unchanged, or raise FormatError if it is malformed."""
    if not is_valid_hex(hex_color):
        raise FormatError(f"Invalid {field} format: {hex_color!r}")
    return hex_color


def hex_to_rgb(hex_color: str) -> tuple[int, int, int]:
    """
    Convert a hex color to an (r, g, b) tuple.

    Accepts "#RRGGBB", "#RGB" and the same forms without '#'.
    Input is not validated; check is_valid_hex first.
    """
    clean = hex_color.lstrip("#")
    if len(clean) == 3:
        clean = "".join(c * 2 for c in clean)
    return (int(clean[0:2], 16), int(clean[2:4], 16), int(clean[4:6], 16))


def rgb_to_hex(r: float, g: float, b: float) -> str:
    """Convert RGB channels to an uppercase "#RRGGBB" string."""
    def channel(value: float) -> int:
        return max(0, min(255, round(value)))

    return f"#{channel(r):02X}{channel(g):02X}{channel(b):02X}"


def normalize_hex(hex_color: str) -> str:
    """Return a valid hex color as uppercase "#RRGGBB"."""
    return rgb_to_hex(*hex_to_rgb(require_hex(hex_color)))


def hex_to_rgb_string(hex_color: str) -> str:
    """Convert hex to the "rgb(r, g, b)" form used by Apple Wallet."""
    r, g, b = hex_to_rgb(require_hex(hex_color))
    return f"rgb({r}, {g}, {b})"


def relative_luminance(r: int, g: int, b: int) -> float:
    """WCAG relative luminance (0 = black, 1 = white) of sRGB channels."""
    def linear(channel: int) -> float:
        srgb = channel / 255
        if srgb <= 0.03928:
            return srgb / 12.92
        return ((srgb + 0.055) / 1.055) ** 2.4

    return 0.2126 * linear(r) + 0.7152 * linear(g) + 0.0722 * linear(b)


def _luminance_of(hex_color: str) -> float:
    return relative_luminance(*hex_to_rgb(require_hex(hex_color)))


def contrast_ratio(color_a: str, color_b: str) -> float:
    """WCAG contrast ratio between two hex colors, from 1 to 21."""
    lum_a = _luminance_of(color_a)
    lum_b = _luminance_of(color_b)
    lighter = max(lum_a, lum_b)
    darker = min(lum_a, lum_b)
    return (lighter + 0.05) / (darker + 0.05)


def contrast_level(ratio: float) -> str:
    """Map a contrast ratio to 'AAA', 'AA' or 'Fail'. Thresholds are inclusive."""
    if ratio >= AAA_THRESHOLD:
        return "AAA"
    if ratio >= AA_THRESHOLD:
        return "AA"
    return "Fail"


_LEVEL_MESSAGES = {
    "AAA": "Excellent contrast (AAA)",
    "AA": "Good contrast (AA)",
    "Fail": "Poor contrast - not accessible",
}


def validate_color_contrast(bg_color: str, fg_color: str) -> ContrastCheck:
    """
    Check a background/foreground pair against WCAG AA and AAA.

    The verdict uses the exact ratio; the reported ratio is rounded
    to two decimals for display.
    """
    ratio = contrast_ratio(bg_color, fg_color)
    level = contrast_level(ratio)
    return ContrastCheck(
        ratio=round(ratio, 2),
        meets_aa=ratio >= AA_THRESHOLD,
        meets_aaa=ratio >= AAA_THRESHOLD,
        level=level,
        message=_LEVEL_MESSAGES[level],
    )


def adjust_brightness(hex_color: str, percent: float) -> str:
    """Scale each channel by percent (-100 to 100)."""
    r, g, b = hex_to_rgb(require_hex(hex_color))
    factor = 1 + percent / 100
    return rgb_to_hex(r * factor, g * factor, b * factor)


def lighten_color(hex_color: str, percent: float) -> str:
    """Move each channel percent of the way towards white."""
    r, g, b = hex_to_rgb(require_hex(hex_color))
    return rgb_to_hex(*(c + (255 - c) * percent / 100 for c in (r, g, b)))


def darken_color(hex_color: str, percent: float) -> str:
    """Move each channel percent of the way towards black."""
    r, g, b = hex_to_rgb(require_hex(hex_color))
    return rgb_to_hex(*(c * (1 - percent / 100) for c in (r, g, b)))


def get_complementary_color(hex_color: str) -> str:
    """Invert a color (180 degree rotation on the RGB wheel)."""
    r, g, b = hex_to_rgb(require_hex(hex_color))
    return rgb_to_hex(255 - r, 255 - g, 255 - b)


def generate_palette(base_color: str) -> dict[str, str]:
    return {
        "primary": normalize_hex(base_color),
        "lighter": lighten_color(base_color, 30),
        "light": lighten_color(base_color, 15),
        "dark": darken_color(base_color, 15),
        "darker": darken_color(base_color, 30),
    }


def get_contrasting_text_color(bg_color: str) -> str:
    """
    Pick white or black text for a background.

    Returns whichever has the higher contrast ratio. The better of the two
    is always at least 4.58:1, so the result always meets AA.
    """
    if contrast_ratio(bg_color, WHITE) >= contrast_ratio(bg_color, BLACK):
        return WHITE
    return BLACK


def preset_colors(industry: str) -> list[dict[str, str]]:
    """Preset backgrounds for an industry, each with its readable text color."""
    preset = COLOR_PRESETS.get(industry)
    if preset is None:
        return []
    return [
        {"background": color, "foreground": get_contrasting_text_color(color)}
        for color in preset["colors"]
    ]


def suggest_accessible_foreground(bg_color: str, preferred_color: str | None = None) -> dict:
    """
    Suggest a foreground color that meets AA against bg_color.

    Keeps the preferred color when it already passes, then tries white,
    then black.

    Returns:
        Dict with 'color', 'is_original' and 'reason' keys
    """
    if preferred_color and is_valid_hex(preferred_color):
        contrast = validate_color_contrast(bg_color, preferred_color)
        if contrast.meets_aa:
            return {
                "color": preferred_color,
                "is_original": True,
                "reason": f"Original color has good contrast ({contrast.ratio}:1)",
            }

    for candidate, name in ((WHITE, "White"), (BLACK, "Black")):
        contrast = validate_color_contrast(bg_color, candidate)
        if contrast.meets_aa:
            return {
                "color": candidate,
                "is_original": False,
                "reason": f"{name} provides better contrast ({contrast.ratio}:1)",
            }

    return {
        "color": get_contrasting_text_color(bg_color),
        "is_original": False,
        "reason": "Using high-contrast alternative",
    }
