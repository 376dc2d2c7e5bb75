"""
Public-asset quota queries.

Counts are always computed at call time against the database. Nothing here is
cached: the gate's decision and its conditional write must see the same state.
"""

from dataclasses import dataclass

from sqlalchemy import func
from sqlalchemy.orm import Query, Session

from asset_hub.entitlements.tiers import tier_for_entitlement
from asset_hub.models.asset import Asset
from asset_hub.models.entitlement import Entitlement
from asset_hub.publishing.errors import EntitlementMissingError


def public_asset_count_query(session: Session, owner_id: str, entity=Asset) -> Query:
    """
    Count of the owner's public, non-deleted assets.

    `entity` may be an aliased Asset so the query can be embedded as a
    subquery inside an UPDATE of the assets table.
    """
    return session.query(func.count(entity.id)).filter(
        entity.owner_id == owner_id,
        entity.is_public.is_(True),
        entity.deleted_at.is_(None),
    )


def count_public_assets(session: Session, owner_id: str) -> int:
    return public_asset_count_query(session, owner_id).scalar() or 0


@dataclass(frozen=True)
class PublishQuota:
    """Quota summary shown to the user before they try to publish."""
    current_public_count: int
    max_allowed: int
    can_publish_more: bool
    tier: str

    def to_dict(self) -> dict:
        return {
            "current_public_count": self.current_public_count,
            "max_allowed": self.max_allowed,
            "can_publish_more": self.can_publish_more,
            "tier": self.tier,
        }


def get_publish_quota(session: Session, user_id: str) -> PublishQuota:
    """
    Summarize the user's publishing headroom.

    Raises:
        EntitlementMissingError: If the user has no entitlement row
    """
    entitlement = session.get(Entitlement, user_id)
    if entitlement is None:
        raise EntitlementMissingError(user_id)

    current = count_public_assets(session, user_id)
    return PublishQuota(
        current_public_count=current,
        max_allowed=entitlement.max_public_assets,
        can_publish_more=bool(entitlement.can_publish) and current < entitlement.max_public_assets,
        tier=tier_for_entitlement(entitlement.can_publish),
    )
