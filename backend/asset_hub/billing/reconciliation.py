"""
Billing reconciliation handler.

Sole writer of Subscription and Entitlement rows. Consumes Stripe webhook
deliveries and brings internal state into agreement with the provider.

SECURITY:
- Signature is verified against the raw body before anything is parsed
- The internal user is resolved from Profile.stripe_customer_id, never from
  payload metadata

Ack policy:
- Processed, acknowledged and ignored events -> 2xx
- Unmapped customer -> logged loudly, 2xx (redelivery cannot fix it)
- Invalid signature / malformed event -> 400 (permanent)
- Database failure -> rollback, 500 so Stripe redelivers; the upsert is
  idempotent so redelivery is safe
"""

import enum
import logging
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from asset_hub.billing.errors import (
    InvalidSignatureError,
    ReconciliationRetryableError,
    UnmappedCustomerError,
)
from asset_hub.billing.events import (
    BillingEvent,
    CheckoutCompleted,
    SubscriptionChanged,
    parse_event,
)
from asset_hub.billing.signature import DEFAULT_TOLERANCE_SECONDS, verify_stripe_signature
from asset_hub.config import Settings
from asset_hub.entitlements.tiers import TierLimits, derive_tier
from asset_hub.models.entitlement import Entitlement
from asset_hub.models.profile import Profile
from asset_hub.models.subscription import Subscription

logger = logging.getLogger(__name__)

PROVIDER = "stripe"


class ReconciliationOutcome(str, enum.Enum):
    PROCESSED = "processed"
    UNMAPPED_CUSTOMER = "unmapped_customer"
    ACKNOWLEDGED = "acknowledged"
    IGNORED = "ignored"


@dataclass(frozen=True)
class ReconciliationResult:
    outcome: ReconciliationOutcome
    event_id: str
    event_type: str
    user_id: Optional[str] = None
    tier: Optional[str] = None

    def to_dict(self) -> dict:
        return {"received": True}


class ReconciliationHandler:
    """Verifies, parses and applies one billing webhook delivery."""

    def __init__(
        self,
        session: Session,
        webhook_secret: Optional[str],
        tolerance_seconds: int = DEFAULT_TOLERANCE_SECONDS,
    ):
        self.session = session
        self.webhook_secret = webhook_secret
        self.tolerance_seconds = tolerance_seconds

    @classmethod
    def from_settings(cls, session: Session, settings: Settings) -> "ReconciliationHandler":
        return cls(
            session,
            webhook_secret=settings.stripe_webhook_secret,
            tolerance_seconds=settings.stripe_webhook_tolerance_seconds,
        )

    def handle_event(self, raw_body: bytes, signature_header: Optional[str]) -> ReconciliationResult:
        """
        Process one webhook delivery.

        Raises:
            InvalidSignatureError: Signature check failed; nothing was read
            MalformedEventError: Verified body is not a usable event
            ReconciliationRetryableError: Transient failure; nothing was written
        """
        try:
            body = verify_stripe_signature(
                raw_body,
                signature_header,
                self.webhook_secret,
                tolerance=self.tolerance_seconds,
            )
        except InvalidSignatureError as e:
            logger.warning("Invalid webhook signature", extra={"reason": e.reason})
            raise

        event = parse_event(body)
        return self._dispatch(event)

    def _dispatch(self, event: BillingEvent) -> ReconciliationResult:
        if isinstance(event, SubscriptionChanged):
            return self._reconcile_subscription(event)

        if isinstance(event, CheckoutCompleted):
            # Customer -> user mapping is written by the checkout flow itself.
            logger.info(
                "Checkout completed acknowledged",
                extra={"event_id": event.event_id, "customer": event.customer},
            )
            return ReconciliationResult(
                outcome=ReconciliationOutcome.ACKNOWLEDGED,
                event_id=event.event_id,
                event_type=event.event_type,
            )

        # Every other event type is acknowledged without action.
        logger.debug(
            "Ignoring billing event",
            extra={"event_id": event.event_id, "event_type": event.event_type},
        )
        return ReconciliationResult(
            outcome=ReconciliationOutcome.IGNORED,
            event_id=event.event_id,
            event_type=event.event_type,
        )

    def _reconcile_subscription(self, event: SubscriptionChanged) -> ReconciliationResult:
        log_context = {
            "event_id": event.event_id,
            "event_type": event.event_type,
            "customer": event.customer,
            "subscription_status": event.status,
        }

        try:
            user_id = self._resolve_user(event.customer)
            self._upsert_subscription(user_id, event)
            tier = self._upsert_entitlement(user_id, event.status)
            self.session.commit()
        except UnmappedCustomerError:
            self.session.rollback()
            logger.error("No user mapped to billing customer; acknowledging", extra=log_context)
            return ReconciliationResult(
                outcome=ReconciliationOutcome.UNMAPPED_CUSTOMER,
                event_id=event.event_id,
                event_type=event.event_type,
            )
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.exception("Subscription reconciliation failed", extra=log_context)
            raise ReconciliationRetryableError(event.event_type, event.event_id) from e

        logger.info(
            "Subscription reconciled",
            extra={**log_context, "user_id": user_id, "tier": tier.name},
        )
        return ReconciliationResult(
            outcome=ReconciliationOutcome.PROCESSED,
            event_id=event.event_id,
            event_type=event.event_type,
            user_id=user_id,
            tier=tier.name,
        )

    def _resolve_user(self, customer: str) -> str:
        profile = self.session.query(Profile).filter(
            Profile.stripe_customer_id == customer,
        ).first()
        if profile is None:
            raise UnmappedCustomerError(customer)
        return profile.id

    def _upsert_subscription(self, user_id: str, event: SubscriptionChanged) -> Subscription:
        subscription = self.session.get(Subscription, user_id)
        if subscription is None:
            subscription = Subscription(user_id=user_id)
            self.session.add(subscription)

        subscription.provider = PROVIDER
        subscription.status = event.status
        subscription.current_period_end = event.current_period_end
        return subscription

    def _upsert_entitlement(self, user_id: str, status: Optional[str]) -> TierLimits:
        """Full overwrite of the derived fields from the tier table."""
        tier = derive_tier(status)

        entitlement = self.session.get(Entitlement, user_id)
        if entitlement is None:
            entitlement = Entitlement(user_id=user_id)
            self.session.add(entitlement)

        for field, value in tier.as_entitlement_values().items():
            setattr(entitlement, field, value)
        return tier
