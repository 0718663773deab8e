"""
What each wallet platform can render.

Single source of truth for platform differences. Encoders ask the resolvers
below which value to apply instead of comparing platform names themselves;
adding a platform means adding one entry to PLATFORM_CAPABILITIES.
"""

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Optional

from cardpass.domain.schemas import (
    ApplePassType,
    BarcodeFormat,
    CapabilityMismatch,
    CardDesign,
    StampDisplayType,
    WalletPlatform,
)


# Progress styles a design may request. Anything else is a validation error.
PROGRESS_STYLES = ("bar", "grid", "circular")
DEFAULT_PROGRESS_STYLE = "bar"

# Rendering used by platforms without native progress styles
STAR_PROGRESS = "stars"

# Enumerated design fields, checked by value. The record keeps the raw string.
DESIGN_CHOICES = (
    ("stamp_display_type", "stamp display type", StampDisplayType),
    ("barcode_preference", "barcode format", BarcodeFormat),
    ("apple_pass_type", "Apple pass type", ApplePassType),
)


@dataclass(frozen=True)
class PlatformCapabilities:
    platform: WalletPlatform
    label: str
    supported_progress_styles: tuple[str, ...]
    progress_fallback: str
    supported_stamp_modes: tuple[StampDisplayType, ...]
    supported_barcode_formats: tuple[BarcodeFormat, ...]
    supported_pass_styles: tuple[ApplePassType, ...]
    hero_placement: str  # 'strip' (interleaved) or 'banner' (trailing)
    max_barcodes: int
    logo_field: str  # platform-specific logo variant on CardDesign
    max_locations: Optional[int] = None  # None = unlimited


PLATFORM_CAPABILITIES = MappingProxyType({
    WalletPlatform.APPLE: PlatformCapabilities(
        platform=WalletPlatform.APPLE,
        label="Apple Wallet",
        supported_progress_styles=("bar", "grid"),
        progress_fallback="bar",
        supported_stamp_modes=(StampDisplayType.ICON, StampDisplayType.LOGO),
        supported_barcode_formats=(BarcodeFormat.QR_CODE, BarcodeFormat.PDF417),
        supported_pass_styles=(ApplePassType.STORE_CARD, ApplePassType.GENERIC),
        hero_placement="strip",
        max_barcodes=2,
        logo_field="logo_apple_url",
        max_locations=10,
    ),
    WalletPlatform.GOOGLE: PlatformCapabilities(
        platform=WalletPlatform.GOOGLE,
        label="Google Wallet",
        supported_progress_styles=(),
        progress_fallback=STAR_PROGRESS,
        supported_stamp_modes=(StampDisplayType.ICON,),
        supported_barcode_formats=(BarcodeFormat.QR_CODE,),
        supported_pass_styles=(),
        hero_placement="banner",
        max_barcodes=1,
        logo_field="logo_google_url",
    ),
})


def get_capabilities(platform: WalletPlatform | str) -> PlatformCapabilities:
    """Look up a platform's capability entry.

    Raises:
        ValueError: if the platform is unknown
    """
    return PLATFORM_CAPABILITIES[WalletPlatform(platform)]


def platform_logo(design: CardDesign, platform: WalletPlatform) -> Optional[str]:
    """The platform's own logo variant, falling back to the shared logo."""
    caps = get_capabilities(platform)
    return getattr(design, caps.logo_field) or design.logo_url


def is_supported_choice(value, choices: type[Enum]) -> bool:
    return value in {member.value for member in choices}


def design_choice_errors(design: CardDesign) -> list[str]:
    """One error per enumerated design field holding an unknown value."""
    errors = []
    for field_name, label, choices in DESIGN_CHOICES:
        if not is_supported_choice(getattr(design, field_name), choices):
            allowed = ", ".join(member.value for member in choices)
            errors.append(f"Invalid {label}. Must be one of: {allowed}")
    return errors


def build_mismatch(
    caps: PlatformCapabilities,
    feature: str,
    requested: str,
    applied: str,
    message: str,
) -> CapabilityMismatch:
    return CapabilityMismatch(
        platform=caps.platform,
        feature=feature,
        requested=requested,
        applied=applied,
        message=f"{caps.label}: {message}",
    )


def resolve_progress_style(
    platform: WalletPlatform,
    requested: str | None,
) -> tuple[str, Optional[CapabilityMismatch]]:
    """Return the progress style to render and the substitution, if any."""
    caps = get_capabilities(platform)
    style = requested or DEFAULT_PROGRESS_STYLE

    if style in caps.supported_progress_styles:
        return style, None

    applied = caps.progress_fallback
    if applied == STAR_PROGRESS:
        message = (
            f"progress style '{style}' is not supported; "
            "progress is shown as text stars"
        )
    else:
        message = f"progress style '{style}' is not supported; using '{applied}'"
    return applied, build_mismatch(caps, "progress_display_style", style, applied, message)


def resolve_stamp_mode(
    platform: WalletPlatform,
    requested: StampDisplayType | str,
    logo_url: str | None,
) -> tuple[StampDisplayType, Optional[CapabilityMismatch]]:
    """Logo stamps need both platform support and an uploaded logo."""
    caps = get_capabilities(platform)
    requested = StampDisplayType(requested)

    if requested not in caps.supported_stamp_modes:
        return StampDisplayType.ICON, build_mismatch(
            caps, "stamp_display_type", requested.value, StampDisplayType.ICON.value,
            "logo stamps are not supported; stamps are shown as text glyphs",
        )
    if requested == StampDisplayType.LOGO and not logo_url:
        return StampDisplayType.ICON, build_mismatch(
            caps, "stamp_display_type", requested.value, StampDisplayType.ICON.value,
            "logo stamps need a logo; using the stamp icon",
        )
    return requested, None


def resolve_barcode_format(
    platform: WalletPlatform,
    requested: BarcodeFormat | str,
) -> tuple[BarcodeFormat, Optional[CapabilityMismatch]]:
    caps = get_capabilities(platform)
    requested = BarcodeFormat(requested)

    if requested in caps.supported_barcode_formats:
        return requested, None

    applied = caps.supported_barcode_formats[0]
    return applied, build_mismatch(
        caps, "barcode_preference", requested.value, applied.value,
        f"{requested.value} barcodes are not supported; using {applied.value}",
    )


def resolve_pass_style(
    platform: WalletPlatform,
    requested: ApplePassType | str,
) -> tuple[ApplePassType, Optional[CapabilityMismatch]]:
    caps = get_capabilities(platform)
    requested = ApplePassType(requested)

    if requested in caps.supported_pass_styles or not caps.supported_pass_styles:
        return requested, None

    applied = caps.supported_pass_styles[0]
    return applied, build_mismatch(
        caps, "apple_pass_type", requested.value, applied.value,
        f"pass type '{requested.value}' is not supported; using '{applied.value}'",
    )


def describe_platform_limitations(design: CardDesign) -> list[CapabilityMismatch]:
    """
    List every substitution a design would incur, across all platforms.

    Used by the design editor to warn about features that will not show
    on one of the wallets. Fields holding unknown values are skipped; they
    are validation errors, not substitutions.
    """
    mismatches = []
    for platform, caps in PLATFORM_CAPABILITIES.items():
        checks = []
        if design.progress_display_style in PROGRESS_STYLES or not design.progress_display_style:
            checks.append(resolve_progress_style(platform, design.progress_display_style))
        if is_supported_choice(design.stamp_display_type, StampDisplayType):
            checks.append(resolve_stamp_mode(
                platform, design.stamp_display_type, platform_logo(design, platform)
            ))
        if is_supported_choice(design.barcode_preference, BarcodeFormat):
            checks.append(resolve_barcode_format(platform, design.barcode_preference))
        if caps.supported_pass_styles and is_supported_choice(design.apple_pass_type, ApplePassType):
            checks.append(resolve_pass_style(platform, design.apple_pass_type))
        mismatches.extend(mismatch for _, mismatch in checks if mismatch)
    return mismatches
