"""
Database models for assets, profiles, subscriptions and entitlements.
"""

from asset_hub.models.base import TimestampMixin
from asset_hub.models.asset import Asset, AssetType
from asset_hub.models.profile import Profile
from asset_hub.models.entitlement import Entitlement
from asset_hub.models.subscription import Subscription, SubscriptionStatus

__all__ = [
    "TimestampMixin",
    "Asset",
    "AssetType",
    "Profile",
    "Entitlement",
    "Subscription",
    "SubscriptionStatus",
]
