"""
Entitlement model.

Per-user plan capabilities. Created with free-tier values at provisioning and
overwritten only by the billing reconciliation handler.
"""

from sqlalchemy import Column, String, Boolean, Integer

from asset_hub.db_base import Base
from asset_hub.models.base import TimestampMixin


class Entitlement(Base, TimestampMixin):
    """Capabilities and numeric limits granted by the user's current plan."""

    __tablename__ = "entitlements"

    user_id = Column(String(255), primary_key=True)

    can_publish = Column(
        Boolean,
        nullable=False,
        default=False,
        comment="Whether the tier allows any public assets"
    )

    max_public_assets = Column(
        Integer,
        nullable=False,
        default=0,
        comment="Ceiling on simultaneously public, non-deleted assets"
    )

    max_code_size_kb = Column(Integer, nullable=False, default=0)
    daily_upload_limit = Column(Integer, nullable=False, default=0)

    def __repr__(self) -> str:
        return (
            f"<Entitlement(user_id={self.user_id}, can_publish={self.can_publish}, "
            f"max_public_assets={self.max_public_assets})>"
        )
