"""
Billing webhook error hierarchy.

Provides:
- WebhookError: base for failures reported back to the provider (non-2xx)
- InvalidSignatureError: signature check failed (permanent)
- MalformedEventError: verified body is not a usable event (permanent)
- ReconciliationRetryableError: transient failure, provider should redeliver
- UnmappedCustomerError: internal only; the handler acknowledges it
"""

from fastapi import status

from asset_hub.platform.errors import AppError


class WebhookError(AppError):
    """Base for webhook failures. Operational, never shown to end users."""

    title = "Webhook error"
    retryable = False

    def __init__(self, code: str, message: str, status_code: int):
        super().__init__(code=code, message=message, status_code=status_code)

    def to_dict(self) -> dict:
        return {
            "error": self.title,
            "code": self.code,
            "message": self.message,
        }


class InvalidSignatureError(WebhookError):
    title = "Invalid signature"

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__("INVALID_SIGNATURE", reason, status.HTTP_400_BAD_REQUEST)


class MalformedEventError(WebhookError):
    title = "Malformed event"

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__("MALFORMED_EVENT", reason, status.HTTP_400_BAD_REQUEST)


class ReconciliationRetryableError(WebhookError):
    title = "Processing failed"
    retryable = True

    def __init__(self, event_type: str, event_id: str = ""):
        self.event_type = event_type
        self.event_id = event_id
        super().__init__(
            "INTERNAL_ERROR",
            f"Failed to process {event_type}; retry delivery",
            status.HTTP_500_INTERNAL_SERVER_ERROR,
        )


class UnmappedCustomerError(Exception):
    """No internal user is mapped to the billing customer."""

    def __init__(self, customer: str):
        self.customer = customer
        self.error_code = "UNMAPPED_CUSTOMER"
        super().__init__(f"No profile mapped to customer {customer}")
