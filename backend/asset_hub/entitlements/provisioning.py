"""
Account provisioning.

Creates the Profile and a free-tier Entitlement for a new user. Runs once at
signup; existing rows are left untouched so repeated calls are harmless.
"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from asset_hub.entitlements.tiers import FREE_TIER
from asset_hub.models.entitlement import Entitlement
from asset_hub.models.profile import Profile

logger = logging.getLogger(__name__)


def provision_user(
    session: Session,
    user_id: str,
    *,
    is_admin: bool = False,
    stripe_customer_id: Optional[str] = None,
) -> Entitlement:
    """
    Ensure a user has a profile and an entitlement row.

    Args:
        session: SQLAlchemy session (committed by this function)
        user_id: Internal user id
        is_admin: Administrative override flag for a new profile
        stripe_customer_id: Billing customer mapping for a new profile

    Returns:
        The user's Entitlement row
    """
    if not user_id:
        raise ValueError("user_id is required")

    profile = session.get(Profile, user_id)
    if profile is None:
        session.add(Profile(
            id=user_id,
            is_admin=is_admin,
            stripe_customer_id=stripe_customer_id,
        ))

    entitlement = session.get(Entitlement, user_id)
    if entitlement is None:
        entitlement = Entitlement(user_id=user_id, **FREE_TIER.as_entitlement_values())
        session.add(entitlement)

    session.commit()

    logger.info("User provisioned", extra={"user_id": user_id})
    return entitlement
