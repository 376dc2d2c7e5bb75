"""
Stripe webhook signature verification.

The raw request body is checked against the Stripe-Signature header before any
field of it is read. Nothing downstream ever sees an unverified payload.
"""

import logging
from typing import Optional

import stripe

from asset_hub.billing.errors import InvalidSignatureError

logger = logging.getLogger(__name__)

STRIPE_SIGNATURE_HEADER = "Stripe-Signature"
DEFAULT_TOLERANCE_SECONDS = 300


def verify_stripe_signature(
    payload: bytes,
    signature_header: Optional[str],
    secret: Optional[str],
    tolerance: int = DEFAULT_TOLERANCE_SECONDS,
) -> str:
    """
    Verify a Stripe webhook delivery.

    Args:
        payload: Raw request body bytes, unmodified
        signature_header: Stripe-Signature header value
        secret: Endpoint signing secret (whsec_...)
        tolerance: Maximum accepted signature age in seconds

    Returns:
        The verified body decoded as UTF-8

    Raises:
        InvalidSignatureError: On any verification failure
    """
    if not secret:
        logger.error("STRIPE_WEBHOOK_SECRET not configured for webhook verification")
        raise InvalidSignatureError("Webhook secret not configured")

    if not signature_header:
        raise InvalidSignatureError("Missing Stripe-Signature header")

    try:
        body = payload.decode("utf-8")
    except UnicodeDecodeError:
        raise InvalidSignatureError("Payload is not valid UTF-8")

    try:
        stripe.WebhookSignature.verify_header(body, signature_header, secret, tolerance)
    except stripe.SignatureVerificationError as e:
        raise InvalidSignatureError(f"Signature verification failed: {e}") from e

    return body
