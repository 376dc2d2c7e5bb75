"""
Stripe billing reconciliation.

This module provides:
- ReconciliationHandler: verify, parse and apply webhook deliveries
- verify_stripe_signature: raw-body signature check
- parse_event and the typed event variants
- WebhookError hierarchy
"""

from asset_hub.billing.errors import (
    InvalidSignatureError,
    MalformedEventError,
    ReconciliationRetryableError,
    UnmappedCustomerError,
    WebhookError,
)
from asset_hub.billing.events import (
    BillingEvent,
    BillingEventType,
    CheckoutCompleted,
    IgnoredEvent,
    SubscriptionChanged,
    parse_event,
)
from asset_hub.billing.reconciliation import (
    ReconciliationHandler,
    ReconciliationOutcome,
    ReconciliationResult,
)
from asset_hub.billing.signature import STRIPE_SIGNATURE_HEADER, verify_stripe_signature

__all__ = [
    "ReconciliationHandler",
    "ReconciliationOutcome",
    "ReconciliationResult",
    "verify_stripe_signature",
    "STRIPE_SIGNATURE_HEADER",
    "parse_event",
    "BillingEvent",
    "BillingEventType",
    "SubscriptionChanged",
    "CheckoutCompleted",
    "IgnoredEvent",
    "WebhookError",
    "InvalidSignatureError",
    "MalformedEventError",
    "ReconciliationRetryableError",
    "UnmappedCustomerError",
]
