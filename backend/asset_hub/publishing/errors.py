"""
Publication gate error kinds.

Every rejection from the gate is one of these classes. Each carries a
machine-readable PublishErrorCode the client branches on, and only the fields
relevant to its kind (quota numbers exist only on QuotaExceededError).

Response shape:
    {"success": false, "error": "<title>", "code": "<CODE>", "message": "..."}
QuotaExceededError adds "quota": {"current": N, "limit": M}.
"""

import enum
from typing import Optional

from fastapi import status

from asset_hub.platform.errors import AppError


class PublishErrorCode(str, enum.Enum):
    """Closed set of gate rejection codes."""
    UNAUTHORIZED = "UNAUTHORIZED"
    NOT_FOUND = "NOT_FOUND"
    FORBIDDEN = "FORBIDDEN"
    ENTITLEMENT_MISSING = "ENTITLEMENT_MISSING"
    CANNOT_PUBLISH = "CANNOT_PUBLISH"
    QUOTA_EXCEEDED = "QUOTA_EXCEEDED"
    INTERNAL_ERROR = "INTERNAL_ERROR"


UPGRADE_MESSAGE = (
    "You need a Pro plan to publish assets publicly. "
    "Upgrade to Pro to unlock this feature."
)


class PublicationError(AppError):
    """Base class for gate rejections. Terminal for the request."""

    title = "Error"
    retryable = False

    def __init__(self, code: PublishErrorCode, message: str, status_code: int):
        super().__init__(code=code.value, message=message, status_code=status_code)
        self.error_code = code

    def to_dict(self) -> dict:
        return {
            "success": False,
            "error": self.title,
            "code": self.error_code.value,
            "message": self.message,
        }


class UnauthorizedError(PublicationError):
    title = "Unauthorized"

    def __init__(self, message: str = "Invalid or expired token"):
        super().__init__(PublishErrorCode.UNAUTHORIZED, message, status.HTTP_401_UNAUTHORIZED)


class AssetNotFoundError(PublicationError):
    title = "Not Found"

    def __init__(self, asset_id: str):
        self.asset_id = asset_id
        super().__init__(PublishErrorCode.NOT_FOUND, "Asset not found", status.HTTP_404_NOT_FOUND)


class ForbiddenError(PublicationError):
    title = "Forbidden"

    def __init__(self, asset_id: str):
        self.asset_id = asset_id
        super().__init__(PublishErrorCode.FORBIDDEN, "You do not own this asset", status.HTTP_403_FORBIDDEN)


class EntitlementMissingError(PublicationError):
    """The caller has no entitlement row: a provisioning fault, not retryable."""

    title = "Forbidden"

    def __init__(self, user_id: str):
        self.user_id = user_id
        super().__init__(
            PublishErrorCode.ENTITLEMENT_MISSING,
            "Entitlements are not configured for this account. Contact support.",
            status.HTTP_403_FORBIDDEN,
        )


class CannotPublishError(PublicationError):
    title = "Payment Required"

    def __init__(self, user_id: str):
        self.user_id = user_id
        super().__init__(PublishErrorCode.CANNOT_PUBLISH, UPGRADE_MESSAGE, status.HTTP_402_PAYMENT_REQUIRED)


class QuotaExceededError(PublicationError):
    title = "Quota Exceeded"

    def __init__(self, current: int, limit: int):
        self.current = current
        self.limit = limit
        super().__init__(
            PublishErrorCode.QUOTA_EXCEEDED,
            f"You've reached your limit of {limit} public assets. "
            "Delete some assets or upgrade your plan.",
            status.HTTP_403_FORBIDDEN,
        )

    def to_dict(self) -> dict:
        d = super().to_dict()
        d["quota"] = {"current": self.current, "limit": self.limit}
        return d


class PublicationInternalError(PublicationError):
    """Persistence failure. Nothing was written; the caller may retry."""

    title = "Internal Server Error"
    retryable = True

    def __init__(self, message: str = "An unexpected error occurred", cause: Optional[Exception] = None):
        self.cause = cause
        super().__init__(PublishErrorCode.INTERNAL_ERROR, message, status.HTTP_500_INTERNAL_SERVER_ERROR)
