"""
Profile model.

One row per user. Holds the administrative override flag and the mapping from
the billing provider's customer id to the internal user id.

SECURITY:
- is_admin is resolved from this table only, never from token claims
- stripe_customer_id is written at checkout time by the checkout flow
"""

from sqlalchemy import Column, String, Boolean

from asset_hub.db_base import Base
from asset_hub.models.base import TimestampMixin


class Profile(Base, TimestampMixin):
    """Per-user profile record."""

    __tablename__ = "profiles"

    id = Column(
        String(255),
        primary_key=True,
        comment="User id (token subject)"
    )

    is_admin = Column(
        Boolean,
        nullable=False,
        default=False,
        comment="Administrative override: bypasses ownership and quota checks"
    )

    stripe_customer_id = Column(
        String(255),
        nullable=True,
        unique=True,
        index=True,
        comment="Stripe customer id mapped to this user"
    )

    def __repr__(self) -> str:
        return f"<Profile(id={self.id}, is_admin={self.is_admin})>"
