"""
Asset model.

An asset is a reusable web-design block (template, section, CSS/JS snippet or
HTML block) owned by exactly one user.

Lifecycle:
1. Created private (is_public=False) by AssetService.create_asset
2. Visibility flipped only by the publication gate
3. Soft-deleted by setting deleted_at; soft-deleted rows are excluded from
   quota counts and listings and can never be made public
"""

import enum
import uuid

from sqlalchemy import Column, String, Boolean, DateTime, Text, Index, JSON, Enum as SAEnum

from asset_hub.db_base import Base
from asset_hub.models.base import TimestampMixin


class AssetType(str, enum.Enum):
    """Kinds of asset the page builder can import."""
    TEMPLATE = "template"
    SECTION = "section"
    CSS = "css"
    JS = "js"
    HTML = "html"


class Asset(Base, TimestampMixin):
    """A user-owned asset with a public/private visibility flag."""

    __tablename__ = "assets"

    id = Column(
        String(255),
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
        comment="Opaque asset identifier"
    )

    owner_id = Column(
        String(255),
        nullable=False,
        index=True,
        comment="User that owns the asset (immutable)"
    )

    title = Column(String(100), nullable=False)
    description = Column(String(500), nullable=True)

    asset_type = Column(
        SAEnum(
            AssetType,
            name="asset_type",
            create_constraint=True,
            values_callable=lambda e: [m.value for m in e],
        ),
        nullable=False,
    )

    code = Column(Text, nullable=False)
    tags = Column(JSON, nullable=False, default=list)

    is_public = Column(
        Boolean,
        nullable=False,
        default=False,
        comment="Visibility; written only by the publication gate"
    )

    deleted_at = Column(
        DateTime(timezone=True),
        nullable=True,
        comment="Soft-delete marker"
    )

    __table_args__ = (
        Index("ix_assets_owner_public_live", "owner_id", "is_public", "deleted_at"),
    )

    def __repr__(self) -> str:
        return f"<Asset(id={self.id}, owner_id={self.owner_id}, is_public={self.is_public})>"
