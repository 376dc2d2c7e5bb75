"""
Plan tiers and entitlement derivation.

This module provides:
- TierLimits: numeric limits for one plan tier
- FREE_TIER / PRO_TIER: the two fixed tier tables
- ACTIVE_STATUSES: subscription statuses that map to the elevated tier
- derive_tier: subscription status -> tier table
- provision_user: create profile and free-tier entitlement at signup
"""

from asset_hub.entitlements.tiers import (
    ACTIVE_STATUSES,
    FREE_TIER,
    PRO_TIER,
    TierLimits,
    derive_tier,
    is_active_status,
    tier_for_entitlement,
)
from asset_hub.entitlements.provisioning import provision_user

__all__ = [
    "ACTIVE_STATUSES",
    "FREE_TIER",
    "PRO_TIER",
    "TierLimits",
    "derive_tier",
    "is_active_status",
    "tier_for_entitlement",
    "provision_user",
]
