"""Tests for the design editor's wallet preview."""
from cardpass.domain.schemas import ProgressSnapshot
from cardpass.services.wallets.preview import (
    PREVIEW_CUSTOMER_ID,
    barcode_placeholder_bars,
    build_wallet_preview,
)


class TestWalletPreview:
    def test_progress_and_stamps(self, design, offer, customer, progress):
        preview = build_wallet_preview(design, offer, customer, progress)

        assert preview["progress"] == {
            "current": 7, "required": 10, "percentage": 70, "remaining": 3, "rewards_available": 0,
        }
        assert len(preview["stamps"]) == 10
        assert preview["stamps"][6] == {"position": 7, "earned": True, "icon": "☕", "status": "earned"}
        assert preview["stamps"][7]["status"] == "pending"
        assert preview["status"] == "collecting"
        assert preview["customer_name"] == "Sam Rivera"

    def test_reward_ready(self, design, offer, customer):
        preview = build_wallet_preview(design, offer, customer, ProgressSnapshot(stamps_earned=10))
        assert preview["status"] == "reward_ready"
        assert preview["progress"]["remaining"] == 0

    def test_draft_design_gets_placeholder_colors(self, offer, customer, progress):
        preview = build_wallet_preview({}, offer, customer, progress)
        assert preview["colors"] == {"background": "#3B82F6", "foreground": "#000000", "label": "#000000"}

    def test_uses_design_colors(self, design, offer, customer, progress):
        colors = build_wallet_preview(design, offer, customer, progress)["colors"]
        assert colors == {"background": "#1E40AF", "foreground": "#FFFFFF", "label": "#E0E7FF"}

    def test_platform_notes(self, design, offer, customer, progress):
        preview = build_wallet_preview(design, offer, customer, progress)
        assert any(note.startswith("Google Wallet:") for note in preview["platform_notes"])

    def test_customer_id_not_validated(self, design, offer, progress):
        preview = build_wallet_preview(design, offer, {"customer_id": "draft"}, progress)
        assert preview["customer_name"] == "Customer"

    def test_draft_without_customer(self):
        preview = build_wallet_preview({}, {"title": "Draft"}, {}, {})
        assert preview["customer_id"] == PREVIEW_CUSTOMER_ID
        assert preview["customer_name"] == "Customer"
        assert preview["status"] == "collecting"
        assert preview["stamps"] == []

    def test_missing_customer(self, design, offer, progress):
        assert build_wallet_preview(design, offer, None, progress)["customer_id"] == PREVIEW_CUSTOMER_ID

    def test_unknown_stamp_display_type_does_not_raise(self):
        preview = build_wallet_preview({"stamp_display_type": "svg"}, {"title": "Draft"}, {}, {})
        assert not any("stamp" in note for note in preview["platform_notes"])

    def test_unknown_choices_skip_platform_notes(self, design, offer, customer, progress):
        design = design.model_copy(update={"barcode_preference": "pdf417", "apple_pass_type": "coupon"})
        notes = build_wallet_preview(design, offer, customer, progress)["platform_notes"]
        assert not any("barcode" in note or "pass type" in note for note in notes)


class TestPlaceholderBarcode:
    def test_deterministic(self):
        assert barcode_placeholder_bars("off_1") == barcode_placeholder_bars("off_1")

    def test_differs_between_offers(self):
        assert barcode_placeholder_bars("off_1") != barcode_placeholder_bars("off_2")

    def test_heights_in_range(self):
        bars = barcode_placeholder_bars("off_1", count=40, min_height=20, max_height=40)
        assert len(bars) == 40
        assert all(20 <= h <= 40 for h in bars)

    def test_preview_label_is_stable(self, design, offer, customer, progress):
        first = build_wallet_preview(design, offer, customer, progress)
        second = build_wallet_preview(design, offer, customer, progress)
        assert first["barcode_bars"] == second["barcode_bars"]
        assert first["barcode_label"] == second["barcode_label"]
        assert first["barcode_label"].startswith("LOYALTY-")
