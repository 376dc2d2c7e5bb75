"""
Publication gate.

The single authorized path for flipping an asset's visibility.

Decision order:
1. Credential -> UNAUTHORIZED
2. Live asset lookup -> NOT_FOUND (soft-deleted assets do not exist here)
3. Owner-or-admin -> FORBIDDEN
4. Non-admin publish of a private asset only:
   entitlement row -> ENTITLEMENT_MISSING, can_publish -> CANNOT_PUBLISH,
   fresh public count vs max_public_assets -> QUOTA_EXCEEDED
5. One conditional UPDATE re-asserting owner, liveness and (when checked)
   the quota condition

CONCURRENCY:
- The entitlement row is read FOR UPDATE, serializing publishes of the same
  user on databases with row locks
- The quota condition is repeated as a subquery inside the UPDATE, so a
  publish that lost a race matches zero rows instead of overrunning the quota

Every rejection rolls back and writes nothing. SQLAlchemy failures surface as
INTERNAL_ERROR and are safe to retry.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, aliased

from asset_hub.models.asset import Asset
from asset_hub.models.entitlement import Entitlement
from asset_hub.platform.auth import AuthenticatedUser, CredentialError, CredentialVerifier
from asset_hub.publishing.errors import (
    AssetNotFoundError,
    CannotPublishError,
    EntitlementMissingError,
    ForbiddenError,
    PublicationError,
    PublicationInternalError,
    QuotaExceededError,
    UnauthorizedError,
)
from asset_hub.publishing.policy import (
    Caller,
    is_authorized_to_publish,
    requires_entitlement_check,
    resolve_caller,
)
from asset_hub.publishing.quota import count_public_assets, public_asset_count_query

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VisibilityResult:
    """Final visibility of the asset after a successful call."""
    asset_id: str
    is_public: bool

    @property
    def message(self) -> str:
        if self.is_public:
            return "Asset published successfully"
        return "Asset unpublished successfully"

    def to_dict(self) -> dict:
        return {
            "success": True,
            "assetId": self.asset_id,
            "isPublic": self.is_public,
            "message": self.message,
        }


class PublicationGate:
    """Authorizes and applies asset visibility changes."""

    def __init__(self, session: Session, verifier: CredentialVerifier):
        self.session = session
        self.verifier = verifier

    def set_visibility(
        self,
        asset_id: str,
        desired_public: bool,
        credential: Optional[str],
    ) -> VisibilityResult:
        """
        Publish or unpublish an asset on behalf of the credential's holder.

        Raises:
            PublicationError: One of the closed set of rejection kinds
        """
        user = self._authenticate(credential)

        try:
            result = self._set_visibility(user, asset_id, desired_public)
        except PublicationError as e:
            self.session.rollback()
            logger.warning(
                "Visibility change rejected",
                extra={
                    "user_id": user.user_id,
                    "asset_id": asset_id,
                    "desired_public": desired_public,
                    "error_code": e.code,
                },
            )
            raise
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.exception(
                "Visibility change failed",
                extra={
                    "user_id": user.user_id,
                    "asset_id": asset_id,
                    "desired_public": desired_public,
                },
            )
            raise PublicationInternalError(cause=e) from e

        logger.info(
            "Asset visibility changed",
            extra={
                "user_id": user.user_id,
                "asset_id": asset_id,
                "is_public": result.is_public,
            },
        )
        return result

    def _authenticate(self, credential: Optional[str]) -> AuthenticatedUser:
        try:
            return self.verifier.verify(credential)
        except CredentialError as e:
            logger.warning("Credential rejected", extra={"reason": str(e)})
            raise UnauthorizedError() from e

    def _set_visibility(
        self,
        user: AuthenticatedUser,
        asset_id: str,
        desired_public: bool,
    ) -> VisibilityResult:
        caller = resolve_caller(self.session, user)

        asset = self._load_live_asset(asset_id)
        if asset is None:
            raise AssetNotFoundError(asset_id)

        if not is_authorized_to_publish(caller, asset):
            raise ForbiddenError(asset_id)

        quota_limit = None
        if requires_entitlement_check(caller, asset, desired_public):
            quota_limit = self._check_entitlement(caller.user_id)

        if not self._apply(asset, desired_public, quota_limit):
            self._raise_for_rejected_write(caller, asset_id, quota_limit)

        self.session.commit()
        return VisibilityResult(asset_id=asset_id, is_public=desired_public)

    def _load_live_asset(self, asset_id: str, refresh: bool = False) -> Optional[Asset]:
        query = self.session.query(Asset).filter(
            Asset.id == asset_id,
            Asset.deleted_at.is_(None),
        )
        if refresh:
            query = query.populate_existing()
        return query.first()

    def _check_entitlement(self, user_id: str) -> int:
        """Return the quota limit if the user may publish one more asset."""
        entitlement = self.session.query(Entitlement).filter(
            Entitlement.user_id == user_id,
        ).with_for_update().first()

        if entitlement is None:
            logger.error("Entitlement row missing for user", extra={"user_id": user_id})
            raise EntitlementMissingError(user_id)

        if not entitlement.can_publish:
            raise CannotPublishError(user_id)

        current = count_public_assets(self.session, user_id)
        if current >= entitlement.max_public_assets:
            raise QuotaExceededError(current=current, limit=entitlement.max_public_assets)

        return entitlement.max_public_assets

    def _apply(self, asset: Asset, desired_public: bool, quota_limit: Optional[int]) -> bool:
        """Conditional single-row UPDATE. Returns False if no row matched."""
        conditions = [
            Asset.id == asset.id,
            Asset.owner_id == asset.owner_id,
            Asset.deleted_at.is_(None),
        ]
        if quota_limit is not None:
            counted = aliased(Asset)
            current = public_asset_count_query(
                self.session, asset.owner_id, counted
            ).scalar_subquery()
            conditions.append(current < quota_limit)

        matched = self.session.query(Asset).filter(*conditions).update(
            {Asset.is_public: desired_public},
            synchronize_session=False,
        )
        return matched == 1

    def _raise_for_rejected_write(
        self,
        caller: Caller,
        asset_id: str,
        quota_limit: Optional[int],
    ) -> None:
        """Work out why the conditional write matched nothing and raise that."""
        asset = self._load_live_asset(asset_id, refresh=True)
        if asset is None:
            raise AssetNotFoundError(asset_id)
        if not is_authorized_to_publish(caller, asset):
            raise ForbiddenError(asset_id)
        if quota_limit is not None:
            current = count_public_assets(self.session, asset.owner_id)
            raise QuotaExceededError(current=current, limit=quota_limit)
        raise PublicationInternalError("Visibility update matched no rows")
