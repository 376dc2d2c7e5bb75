"""
Subscription model.

Mirror of the billing provider's subscription state, one row per user.
Upserted only by the billing reconciliation handler.
"""

import enum

from sqlalchemy import Column, String, DateTime

from asset_hub.db_base import Base
from asset_hub.models.base import TimestampMixin


class SubscriptionStatus(str, enum.Enum):
    """Stripe subscription statuses this service knows by name."""
    ACTIVE = "active"
    TRIALING = "trialing"
    PAST_DUE = "past_due"
    CANCELED = "canceled"
    INCOMPLETE = "incomplete"
    INCOMPLETE_EXPIRED = "incomplete_expired"
    UNPAID = "unpaid"
    PAUSED = "paused"


class Subscription(Base, TimestampMixin):
    """Per-user subscription state."""

    __tablename__ = "subscriptions"

    user_id = Column(String(255), primary_key=True)

    provider = Column(String(50), nullable=False, default="stripe")

    status = Column(
        String(50),
        nullable=True,
        comment="Provider status string, stored verbatim"
    )

    current_period_end = Column(DateTime(timezone=True), nullable=True)

    def __repr__(self) -> str:
        return f"<Subscription(user_id={self.user_id}, status={self.status})>"
