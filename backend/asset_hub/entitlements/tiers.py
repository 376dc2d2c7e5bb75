"""
Fixed tier tables.

Entitlements are derived from subscription status alone: statuses in
ACTIVE_STATUSES get PRO_TIER, everything else gets FREE_TIER.
"""

from dataclasses import dataclass
from typing import Optional

from asset_hub.models.subscription import SubscriptionStatus


@dataclass(frozen=True)
class TierLimits:
    """Capabilities and limits for one plan tier."""
    name: str
    can_publish: bool
    max_public_assets: int
    max_code_size_kb: int
    daily_upload_limit: int

    def as_entitlement_values(self) -> dict:
        return {
            "can_publish": self.can_publish,
            "max_public_assets": self.max_public_assets,
            "max_code_size_kb": self.max_code_size_kb,
            "daily_upload_limit": self.daily_upload_limit,
        }


FREE_TIER = TierLimits(
    name="free",
    can_publish=False,
    max_public_assets=50,
    max_code_size_kb=256,
    daily_upload_limit=10,
)

PRO_TIER = TierLimits(
    name="pro",
    can_publish=True,
    max_public_assets=500,
    max_code_size_kb=1024,
    daily_upload_limit=50,
)

ACTIVE_STATUSES = frozenset({
    SubscriptionStatus.ACTIVE.value,
    SubscriptionStatus.TRIALING.value,
})


def is_active_status(status: Optional[str]) -> bool:
    """True only for statuses that grant the elevated tier."""
    return status in ACTIVE_STATUSES


def derive_tier(status: Optional[str]) -> TierLimits:
    """Map a provider subscription status to its tier table."""
    return PRO_TIER if is_active_status(status) else FREE_TIER


def tier_for_entitlement(can_publish: bool) -> str:
    """Display name of the tier an entitlement row corresponds to."""
    return PRO_TIER.name if can_publish else FREE_TIER.name
