"""
Asset lifecycle: creation and soft delete.

Visibility is never written here; new assets are inserted private and only the
publication gate may flip them.

Plan limits enforced on create (administrators are exempt):
- max_code_size_kb: UTF-8 size of the asset code
- daily_upload_limit: assets created in the trailing 24 hours, soft-deleted
  ones included so delete-and-recreate does not reset the allowance
"""

import logging
from datetime import timedelta
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from asset_hub.models.asset import Asset, AssetType
from asset_hub.models.base import utcnow
from asset_hub.models.entitlement import Entitlement
from asset_hub.platform.errors import (
    NotFoundError,
    PayloadTooLargeError,
    PermissionDeniedError,
    RateLimitError,
)
from asset_hub.publishing.errors import EntitlementMissingError
from asset_hub.publishing.policy import Caller, is_authorized_to_publish

logger = logging.getLogger(__name__)

UPLOAD_WINDOW = timedelta(hours=24)


class CodeTooLargeError(PayloadTooLargeError):
    def __init__(self, size_kb: float, limit_kb: int):
        super().__init__(
            code="CODE_TOO_LARGE",
            message=f"Asset code is {size_kb:.1f} KB; your plan allows {limit_kb} KB",
            details={"size_kb": round(size_kb, 1), "limit_kb": limit_kb},
        )


class DailyUploadLimitError(RateLimitError):
    def __init__(self, current: int, limit: int):
        super().__init__(
            message=f"You've reached your limit of {limit} uploads in 24 hours",
            code="DAILY_UPLOAD_LIMIT",
            details={"current": current, "limit": limit},
        )


class AssetService:
    """Creates and soft-deletes assets on behalf of a caller."""

    def __init__(self, session: Session, caller: Caller):
        if not caller or not caller.user_id:
            raise ValueError("caller with user_id is required")
        self.session = session
        self.caller = caller

    def create_asset(
        self,
        title: str,
        asset_type: AssetType,
        code: str,
        description: Optional[str] = None,
        tags: Optional[List[str]] = None,
    ) -> Asset:
        """
        Insert a new private asset owned by the caller.

        Raises:
            EntitlementMissingError: Caller has no entitlement row
            CodeTooLargeError: Code exceeds max_code_size_kb
            DailyUploadLimitError: daily_upload_limit reached
        """
        if not self.caller.is_admin:
            self._check_upload_limits(code)

        asset = Asset(
            owner_id=self.caller.user_id,
            title=title,
            description=description,
            asset_type=asset_type,
            code=code,
            tags=list(tags or []),
            is_public=False,
        )
        self.session.add(asset)
        self.session.commit()

        logger.info(
            "Asset created",
            extra={
                "user_id": self.caller.user_id,
                "asset_id": asset.id,
                "asset_type": asset_type.value,
            },
        )
        return asset

    def soft_delete_asset(self, asset_id: str) -> Asset:
        """
        Mark an asset deleted. Deleted assets drop out of quota counts.

        Raises:
            NotFoundError: No live asset with this id
            PermissionDeniedError: Caller is neither owner nor admin
        """
        asset = self.session.query(Asset).filter(
            Asset.id == asset_id,
            Asset.deleted_at.is_(None),
        ).first()
        if asset is None:
            raise NotFoundError("Asset", asset_id)

        if not is_authorized_to_publish(self.caller, asset):
            raise PermissionDeniedError("You do not own this asset")

        asset.deleted_at = utcnow()
        self.session.commit()

        logger.info(
            "Asset soft-deleted",
            extra={"user_id": self.caller.user_id, "asset_id": asset_id},
        )
        return asset

    def _check_upload_limits(self, code: str) -> None:
        entitlement = self.session.get(Entitlement, self.caller.user_id)
        if entitlement is None:
            raise EntitlementMissingError(self.caller.user_id)

        size_kb = len(code.encode("utf-8")) / 1024
        if size_kb > entitlement.max_code_size_kb:
            raise CodeTooLargeError(size_kb, entitlement.max_code_size_kb)

        since = utcnow() - UPLOAD_WINDOW
        uploads = self.session.query(func.count(Asset.id)).filter(
            Asset.owner_id == self.caller.user_id,
            Asset.created_at >= since,
        ).scalar() or 0
        if uploads >= entitlement.daily_upload_limit:
            raise DailyUploadLimitError(uploads, entitlement.daily_upload_limit)
