"""
Customer loyalty tiers.

A tier is earned from the number of rewards a customer has claimed on an
offer. Offers may define their own ladder; otherwise the default
Bronze/Silver/Gold ladder applies.
"""

import logging

from cardpass.domain.schemas import (
    LoyaltyTier,
    LoyaltyTierConfig,
    TierStatus,
    TierSummary,
)

logger = logging.getLogger(__name__)


DEFAULT_TIERS: tuple[LoyaltyTier, ...] = (
    LoyaltyTier(
        id="bronze", name="Bronze Member", name_ar="عضو برونزي",
        min_rewards=1, max_rewards=2, icon="🥉", color="#CD7F32",
    ),
    LoyaltyTier(
        id="silver", name="Silver Member", name_ar="عضو فضي",
        min_rewards=3, max_rewards=5, icon="🥈", color="#C0C0C0",
    ),
    LoyaltyTier(
        id="gold", name="Gold Member", name_ar="عضو ذهبي",
        min_rewards=6, max_rewards=None, icon="🥇", color="#FFD700",
    ),
)

# Shown to customers with no claimed rewards when the ladder starts at 1
NEW_MEMBER_TIER = LoyaltyTier(
    id="new", name="New Member", name_ar="عضو جديد",
    min_rewards=0, max_rewards=0, icon="👋", color="#6B7280",
)


def _summary(tier: LoyaltyTier) -> TierSummary:
    return TierSummary(name=tier.name, name_ar=tier.name_ar or tier.name, icon=tier.icon)


def _resolve_ladder(config: LoyaltyTierConfig | None) -> list[LoyaltyTier]:
    if config and config.enabled and config.tiers:
        return sorted(config.tiers, key=lambda tier: tier.min_rewards)
    if config and config.enabled:
        logger.warning("[Tiers] Tier ladder enabled but empty, using defaults")
    return list(DEFAULT_TIERS)


def calculate_customer_tier(
    rewards_claimed: int,
    loyalty_tiers: LoyaltyTierConfig | None = None,
) -> TierStatus:
    """
    Work out a customer's tier and the distance to the next one.

    Args:
        rewards_claimed: Completed reward cycles for this offer
        loyalty_tiers: Offer's custom ladder, if any

    Returns:
        TierStatus for the customer
    """
    tiers = _resolve_ladder(loyalty_tiers)
    first = tiers[0]

    if rewards_claimed == 0 and first.min_rewards > 0:
        return TierStatus(
            current_tier=NEW_MEMBER_TIER,
            rewards_claimed=0,
            rewards_to_next_tier=first.min_rewards,
            next_tier=_summary(first),
            is_top_tier=False,
        )

    index = next(
        (
            i for i, tier in enumerate(tiers)
            if rewards_claimed >= tier.min_rewards
            and (tier.max_rewards is None or rewards_claimed <= tier.max_rewards)
        ),
        len(tiers) - 1,
    )
    current = tiers[index]
    next_tier = tiers[index + 1] if index + 1 < len(tiers) else None

    return TierStatus(
        current_tier=current,
        rewards_claimed=rewards_claimed,
        rewards_to_next_tier=(next_tier.min_rewards - rewards_claimed) if next_tier else None,
        next_tier=_summary(next_tier) if next_tier else None,
        is_top_tier=next_tier is None,
    )
