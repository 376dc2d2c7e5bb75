"""
Stripe webhook endpoint.

SECURITY:
- The raw body is passed unmodified to signature verification
- No user authentication (deliveries come from Stripe, not users)
- The internal user is derived from the stored customer mapping, never
  from payload metadata
"""

import logging

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from asset_hub.billing.reconciliation import ReconciliationHandler
from asset_hub.billing.signature import STRIPE_SIGNATURE_HEADER
from asset_hub.config import Settings, get_settings
from asset_hub.database.session import get_db_session

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/webhooks", tags=["webhooks"])


@router.post("/stripe")
async def handle_stripe_webhook(
    request: Request,
    db: Session = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
):
    """
    Reconcile subscription and entitlement state from a Stripe event.

    Returns {"received": true} for every delivery that should not be retried,
    including unmapped customers and event types this service ignores.
    """
    body = await request.body()
    signature = request.headers.get(STRIPE_SIGNATURE_HEADER)

    handler = ReconciliationHandler.from_settings(db, settings)
    result = handler.handle_event(body, signature)

    logger.info("Stripe webhook handled", extra={
        "event_id": result.event_id,
        "event_type": result.event_type,
        "outcome": result.outcome.value,
    })
    return result.to_dict()
