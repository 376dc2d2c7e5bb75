"""
Authorization predicate shared by the read-side check and the write-side
re-assertion of the publication gate.
"""

from dataclasses import dataclass

from sqlalchemy.orm import Session

from asset_hub.models.asset import Asset
from asset_hub.models.profile import Profile
from asset_hub.platform.auth import AuthenticatedUser


@dataclass(frozen=True)
class Caller:
    """Authenticated principal plus its database-backed admin flag."""
    user_id: str
    is_admin: bool = False


def resolve_caller(session: Session, user: AuthenticatedUser) -> Caller:
    """Attach the administrative override, read from the profiles table only."""
    profile = session.get(Profile, user.user_id)
    return Caller(user_id=user.user_id, is_admin=bool(profile and profile.is_admin))


def is_authorized_to_publish(caller: Caller, asset: Asset) -> bool:
    """Owner-or-admin."""
    return caller.is_admin or asset.owner_id == caller.user_id


def requires_entitlement_check(caller: Caller, asset: Asset, desired_public: bool) -> bool:
    """
    Only a non-admin turning a private asset public is subject to entitlement
    and quota checks. Unpublishing and re-publishing are always free.
    """
    return desired_public and not asset.is_public and not caller.is_admin
