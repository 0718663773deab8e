"""Tests for loyalty tiers and stamp progress arithmetic."""
import pytest

from cardpass.core.exceptions import EncodingError
from cardpass.domain.schemas import LoyaltyTierConfig, Offer, ProgressSnapshot
from cardpass.services.tiers import calculate_customer_tier
from cardpass.services.wallets.progress import (
    compute_progress,
    require_ascii_barcode,
    require_offer_fields,
    reward_status_text,
)


class TestCustomerTier:
    def test_new_member(self):
        status = calculate_customer_tier(0)
        assert status.current_tier.id == "new"
        assert status.rewards_to_next_tier == 1
        assert status.next_tier.name == "Bronze Member"

    @pytest.mark.parametrize("claimed,tier_id", [(1, "bronze"), (2, "bronze"), (3, "silver"), (5, "silver"), (6, "gold"), (60, "gold")])
    def test_default_ladder(self, claimed, tier_id):
        assert calculate_customer_tier(claimed).current_tier.id == tier_id

    def test_top_tier(self):
        status = calculate_customer_tier(6)
        assert status.is_top_tier
        assert status.next_tier is None
        assert status.rewards_to_next_tier is None

    def test_distance_to_next(self):
        status = calculate_customer_tier(4)
        assert status.rewards_to_next_tier == 2
        assert status.next_tier.name_ar == "عضو ذهبي"

    def test_custom_ladder_starting_at_zero(self):
        config = LoyaltyTierConfig(
            enabled=True,
            tiers=[
                {"id": "vip", "name": "VIP", "minRewards": 4},
                {"id": "regular", "name": "Regular", "minRewards": 0, "maxRewards": 3},
            ],
        )
        assert calculate_customer_tier(0, config).current_tier.id == "regular"
        assert calculate_customer_tier(9, config).current_tier.id == "vip"

    def test_disabled_ladder_uses_defaults(self):
        config = LoyaltyTierConfig(enabled=False, tiers=[{"id": "vip", "name": "VIP", "min_rewards": 0}])
        assert calculate_customer_tier(3, config).current_tier.id == "silver"


class TestProgress:
    def _offer(self, required=10, **kwargs):
        return Offer(offer_id="off_1", business_id="biz_1", title="Card", stamps_required=required, **kwargs)

    def test_collecting(self):
        state = compute_progress(self._offer(), ProgressSnapshot(stamps_earned=7))
        assert (state.display_stamps, state.remaining, state.percentage) == (7, 3, 70)
        assert not state.reward_ready
        assert reward_status_text(state, "en") is None

    def test_exactly_complete(self):
        state = compute_progress(self._offer(), ProgressSnapshot(stamps_earned=10))
        assert state.reward_ready
        assert state.rewards_available == 1
        assert reward_status_text(state, "en") == "Reward ready!"

    def test_over_completion_keeps_extra_cycles(self):
        state = compute_progress(self._offer(), ProgressSnapshot(stamps_earned=23))
        assert state.display_stamps == 10
        assert state.cycles_completed == 2
        assert state.cycle_progress == 3
        assert state.percentage == 100
        assert reward_status_text(state, "en") == "2 rewards ready!"

    def test_points_offer_without_target(self):
        offer = Offer(offer_id="off_1", business_id="biz_1", title="Points", type="points")
        state = compute_progress(offer, ProgressSnapshot(stamps_earned=250))
        assert state.required == 0
        assert state.percentage == 0
        assert not state.reward_ready

    def test_negative_stamps_rejected_by_schema(self):
        with pytest.raises(ValueError):
            ProgressSnapshot(stamps_earned=-1)


class TestOfferChecks:
    def test_lists_every_missing_field(self):
        with pytest.raises(EncodingError) as exc_info:
            require_offer_fields(Offer(), platform="apple")
        assert exc_info.value.platform == "apple"
        assert exc_info.value.errors == [
            "Offer ID required",
            "Business ID required",
            "Offer title required",
            "stamps_required is required for stamps offers",
        ]

    def test_non_positive_stamps(self):
        offer = Offer(offer_id="o", business_id="b", title="t", stamps_required=0)
        with pytest.raises(EncodingError, match="must be positive"):
            require_offer_fields(offer)

    def test_points_offer_needs_no_stamps(self):
        require_offer_fields(Offer(offer_id="o", business_id="b", title="t", type="points"))

    def test_non_ascii_barcode(self):
        assert require_ascii_barcode("cust_abc") == "cust_abc"
        with pytest.raises(EncodingError):
            require_ascii_barcode("cust_café")
