"""
Asset API routes.

Handles:
- POST /api/publish-asset: publish/unpublish through the publication gate
- GET /api/assets/quota: caller's publishing headroom
- POST /api/assets: create a private asset
- DELETE /api/assets/{asset_id}: soft-delete an asset

SECURITY:
- Caller identity comes only from the bearer token
- owner_id is NEVER accepted from the request body
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from asset_hub.api.dependencies.auth import (
    get_bearer_credential,
    get_credential_verifier,
    get_current_caller,
)
from asset_hub.api.schemas.assets import (
    AssetResponse,
    CreateAssetRequest,
    PublishRequest,
    PublishResponse,
    QuotaResponse,
)
from asset_hub.database.session import get_db_session
from asset_hub.platform.auth import CredentialVerifier
from asset_hub.publishing.gate import PublicationGate
from asset_hub.publishing.policy import Caller
from asset_hub.publishing.quota import get_publish_quota
from asset_hub.services.asset_service import AssetService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["assets"])


@router.post("/api/publish-asset", response_model=PublishResponse)
def publish_asset(
    body: PublishRequest,
    credential: Optional[str] = Depends(get_bearer_credential),
    verifier: CredentialVerifier = Depends(get_credential_verifier),
    db: Session = Depends(get_db_session),
):
    """
    Publish or unpublish an asset.

    Only non-admin publishing of a private asset is checked against the
    caller's entitlement and public-asset quota.
    """
    gate = PublicationGate(db, verifier)
    result = gate.set_visibility(body.assetId, body.isPublic, credential)
    return result.to_dict()


@router.get("/api/assets/quota", response_model=QuotaResponse)
def publish_quota(
    caller: Caller = Depends(get_current_caller),
    db: Session = Depends(get_db_session),
):
    """Return current public count, limit and tier for the caller."""
    return get_publish_quota(db, caller.user_id).to_dict()


@router.post("/api/assets", response_model=AssetResponse, status_code=status.HTTP_201_CREATED)
def create_asset(
    body: CreateAssetRequest,
    caller: Caller = Depends(get_current_caller),
    db: Session = Depends(get_db_session),
):
    """Create a private asset owned by the caller."""
    service = AssetService(db, caller)
    return service.create_asset(
        title=body.title,
        asset_type=body.asset_type,
        code=body.code,
        description=body.description,
        tags=body.tags,
    )


@router.delete("/api/assets/{asset_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_asset(
    asset_id: str,
    caller: Caller = Depends(get_current_caller),
    db: Session = Depends(get_db_session),
):
    """Soft-delete an asset. It stops counting toward the public quota."""
    AssetService(db, caller).soft_delete_asset(asset_id)
