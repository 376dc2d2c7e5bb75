"""
Typed billing events.

A verified Stripe payload is parsed into one of three variants:
- SubscriptionChanged: customer.subscription.created/updated/deleted
- CheckoutCompleted: checkout.session.completed
- IgnoredEvent: every other type (forward-compatible, never an error)
"""

import enum
import json
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Optional, Union

from asset_hub.billing.errors import MalformedEventError


class BillingEventType(str, enum.Enum):
    """Stripe event types this service acts on or acknowledges by name."""
    CHECKOUT_SESSION_COMPLETED = "checkout.session.completed"
    SUBSCRIPTION_CREATED = "customer.subscription.created"
    SUBSCRIPTION_UPDATED = "customer.subscription.updated"
    SUBSCRIPTION_DELETED = "customer.subscription.deleted"


SUBSCRIPTION_EVENT_TYPES = frozenset({
    BillingEventType.SUBSCRIPTION_CREATED.value,
    BillingEventType.SUBSCRIPTION_UPDATED.value,
    BillingEventType.SUBSCRIPTION_DELETED.value,
})


@dataclass(frozen=True)
class SubscriptionChanged:
    event_id: str
    event_type: str
    customer: str
    status: Optional[str]
    current_period_end: Optional[datetime]


@dataclass(frozen=True)
class CheckoutCompleted:
    event_id: str
    customer: Optional[str]

    @property
    def event_type(self) -> str:
        return BillingEventType.CHECKOUT_SESSION_COMPLETED.value


@dataclass(frozen=True)
class IgnoredEvent:
    event_id: str
    event_type: str


BillingEvent = Union[SubscriptionChanged, CheckoutCompleted, IgnoredEvent]


def epoch_to_datetime(value: Any) -> Optional[datetime]:
    """Convert provider epoch seconds to an aware UTC datetime."""
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise MalformedEventError(f"Expected epoch seconds, got {type(value).__name__}")
    try:
        return datetime.fromtimestamp(value, tz=timezone.utc)
    except (OverflowError, OSError, ValueError) as e:
        raise MalformedEventError(f"Epoch seconds out of range: {value!r}") from e


def _customer_id(value: Any) -> Optional[str]:
    # Expanded objects carry the id inside.
    if isinstance(value, dict):
        value = value.get("id")
    if isinstance(value, str) and value:
        return value
    return None


def _period_end(subscription: dict) -> Optional[datetime]:
    period_end = subscription.get("current_period_end")
    if period_end is None:
        # Newer API versions moved the period onto subscription items.
        items = subscription.get("items")
        item_list = items.get("data") if isinstance(items, dict) else None
        if item_list and isinstance(item_list, list) and isinstance(item_list[0], dict):
            period_end = item_list[0].get("current_period_end")
    return epoch_to_datetime(period_end)


def parse_event(body: str) -> BillingEvent:
    """
    Parse a verified webhook body.

    Raises:
        MalformedEventError: If the body is not an event object or a
            subscription event lacks its customer reference
    """
    try:
        payload = json.loads(body)
    except json.JSONDecodeError:
        raise MalformedEventError("Payload is not valid JSON")

    if not isinstance(payload, dict):
        raise MalformedEventError("Payload is not an event object")

    event_type = payload.get("type")
    if not isinstance(event_type, str) or not event_type:
        raise MalformedEventError("Event type missing")

    event_id = str(payload.get("id") or "")
    data = payload.get("data")
    data_object = data.get("object") if isinstance(data, dict) else None

    if event_type in SUBSCRIPTION_EVENT_TYPES:
        if not isinstance(data_object, dict):
            raise MalformedEventError("Subscription object missing")
        customer = _customer_id(data_object.get("customer"))
        if customer is None:
            raise MalformedEventError("Missing customer id")
        status = data_object.get("status")
        return SubscriptionChanged(
            event_id=event_id,
            event_type=event_type,
            customer=customer,
            status=status if isinstance(status, str) else None,
            current_period_end=_period_end(data_object),
        )

    if event_type == BillingEventType.CHECKOUT_SESSION_COMPLETED.value:
        customer = None
        if isinstance(data_object, dict):
            customer = _customer_id(data_object.get("customer"))
        return CheckoutCompleted(event_id=event_id, customer=customer)

    return IgnoredEvent(event_id=event_id, event_type=event_type)
