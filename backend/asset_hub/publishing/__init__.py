"""
Asset publication gate.

This module provides:
- PublicationGate: authorizes and applies visibility changes
- VisibilityResult: successful outcome
- PublicationError and its closed set of subclasses (PublishErrorCode)
- get_publish_quota: read-only quota summary for the caller
"""

from asset_hub.publishing.errors import (
    AssetNotFoundError,
    CannotPublishError,
    EntitlementMissingError,
    ForbiddenError,
    PublicationError,
    PublicationInternalError,
    PublishErrorCode,
    QuotaExceededError,
    UnauthorizedError,
)
from asset_hub.publishing.gate import PublicationGate, VisibilityResult
from asset_hub.publishing.policy import Caller, is_authorized_to_publish, resolve_caller
from asset_hub.publishing.quota import PublishQuota, count_public_assets, get_publish_quota

__all__ = [
    # Gate
    "PublicationGate",
    "VisibilityResult",
    # Errors
    "PublishErrorCode",
    "PublicationError",
    "UnauthorizedError",
    "AssetNotFoundError",
    "ForbiddenError",
    "EntitlementMissingError",
    "CannotPublishError",
    "QuotaExceededError",
    "PublicationInternalError",
    # Policy
    "Caller",
    "is_authorized_to_publish",
    "resolve_caller",
    # Quota
    "PublishQuota",
    "count_public_assets",
    "get_publish_quota",
]
