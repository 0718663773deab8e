"""Tests for card design validation and production readiness."""
from cardpass.services.design_validation import (
    LOGO_REQUIRED_BLOCKER,
    is_design_production_ready,
    validate_card_design,
    validate_color_scheme,
    validate_text_length,
)


def _design(**overrides):
    data = {
        "background_color": "#1E40AF",
        "foreground_color": "#FFFFFF",
        "logo_url": "https://cdn.example.com/logo.png",
        "hero_image_url": "https://cdn.example.com/hero.png",
    }
    data.update(overrides)
    return data


class TestValidateCardDesign:
    def test_good_design_is_clean(self):
        result = validate_card_design(_design())
        assert result.is_valid
        assert not result.has_errors
        assert not result.has_warnings

    def test_missing_background_reports_one_error(self):
        """A missing background color gives exactly one background error."""
        result = validate_card_design(_design(background_color=None))
        assert not result.is_valid
        background_errors = [e for e in result.errors if "ackground" in e]
        assert background_errors == ["Background color is required"]

    def test_missing_both_colors(self):
        result = validate_card_design(_design(background_color="", foreground_color=""))
        assert result.errors == ["Background color is required", "Foreground color is required"]

    def test_aa_only_contrast_is_valid_with_warning(self):
        result = validate_card_design(_design(background_color="#767676", foreground_color="#FFFFFF"))
        assert result.is_valid
        assert result.has_warnings
        assert any("AA level" in w for w in result.warnings)

    def test_poor_contrast_is_an_error(self):
        result = validate_card_design(_design(background_color="#FFFFFF", foreground_color="#EEEEEE"))
        assert not result.is_valid
        assert any("Poor contrast" in e for e in result.errors)

    def test_malformed_color_is_reported_not_raised(self):
        result = validate_card_design(_design(foreground_color="white"))
        assert result.errors == ["Invalid foreground color format"]

    def test_low_label_contrast_only_warns(self):
        result = validate_card_design(_design(label_color="#2240B0"))
        assert result.is_valid
        assert any("labels" in w for w in result.warnings)

    def test_unknown_progress_style(self):
        result = validate_card_design(_design(progress_display_style="spiral"))
        assert not result.is_valid
        assert any("progress display style" in e for e in result.errors)

    def test_recognised_progress_styles(self):
        for style in ("bar", "grid", "circular"):
            assert validate_card_design(_design(progress_display_style=style)).is_valid

    def test_unknown_stamp_display_type_is_reported_not_raised(self):
        result = validate_card_design(_design(stamp_display_type="svg"))
        assert result.is_valid is False
        assert result.errors == ["Invalid stamp display type. Must be one of: icon, logo"]

    def test_unknown_barcode_format(self):
        result = validate_card_design(_design(barcode_preference="pdf417"))
        assert result.is_valid is False
        assert result.errors == ["Invalid barcode format. Must be one of: QR_CODE, PDF417"]

    def test_unknown_apple_pass_type(self):
        result = validate_card_design(_design(apple_pass_type="coupon"))
        assert result.is_valid is False
        assert result.errors == ["Invalid Apple pass type. Must be one of: storeCard, generic"]

    def test_known_choices(self):
        result = validate_card_design(
            _design(stamp_display_type="logo", barcode_preference="PDF417", apple_pass_type="generic")
        )
        assert result.is_valid

    def test_long_stamp_icon_warns(self):
        result = validate_card_design(_design(stamp_icon="x" * 11))
        assert result.is_valid
        assert any("Stamp icon" in w for w in result.warnings)

    def test_stamp_icon_length_counts_utf16_units(self):
        """Astral emoji count twice, as in the browser editor."""
        assert any("Stamp icon" in w for w in validate_card_design(_design(stamp_icon="🎁" * 6)).warnings)
        assert not any("Stamp icon" in w for w in validate_card_design(_design(stamp_icon="🎁" * 5)).warnings)

    def test_missing_assets_only_warn(self):
        result = validate_card_design(_design(logo_url=None, hero_image_url=None))
        assert result.is_valid
        assert len(result.warnings) == 2

    def test_camel_case_output(self):
        data = validate_card_design(_design()).model_dump(by_alias=True)
        assert set(data) == {"isValid", "hasErrors", "hasWarnings", "errors", "warnings"}


class TestProductionReadiness:
    def test_ready(self):
        readiness = is_design_production_ready(_design())
        assert readiness.ready
        assert readiness.blockers == []

    def test_no_logo_blocks_production_but_not_saving(self):
        design = _design(logo_url=None)
        assert validate_card_design(design).is_valid
        readiness = is_design_production_ready(design)
        assert not readiness.ready
        assert LOGO_REQUIRED_BLOCKER in readiness.blockers

    def test_platform_logo_counts(self):
        readiness = is_design_production_ready(
            _design(logo_url=None, logo_google_url="https://cdn.example.com/g.png")
        )
        assert readiness.ready

    def test_validation_errors_become_blockers_verbatim(self):
        design = _design(background_color="#FFFFFF", foreground_color="#EEEEEE")
        validation = validate_card_design(design)
        readiness = is_design_production_ready(design, validation)
        assert readiness.blockers == validation.errors

    def test_unknown_pass_type_blocks_production(self):
        readiness = is_design_production_ready(_design(apple_pass_type="coupon"))
        assert not readiness.ready
        assert readiness.blockers == ["Invalid Apple pass type. Must be one of: storeCard, generic"]


def test_validate_text_length():
    assert validate_text_length("short", 10) == []
    assert validate_text_length(None, 10) == []
    assert validate_text_length("x" * 12, 10, "Title") == ["Title is too long (12/10 characters)"]
    assert validate_text_length("🎁" * 6, 10, "Title") == ["Title is too long (12/10 characters)"]


def test_validate_color_scheme_skips_contrast_on_format_errors():
    errors, warnings = validate_color_scheme("#ZZZ", "#FFFFFF", "nope")
    assert errors == ["Invalid background color format", "Invalid label color format"]
    assert warnings == []
