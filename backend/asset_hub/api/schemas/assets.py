"""
Pydantic schemas for the asset API.

Field names follow the client contract (camelCase where the client sends it).
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictBool, field_validator

from asset_hub.models.asset import AssetType

MAX_TAGS = 10
MAX_TAG_LENGTH = 30


class PublishRequest(BaseModel):
    """Request body for POST /api/publish-asset."""
    assetId: str = Field(..., min_length=1, max_length=255, description="Asset to change")
    isPublic: StrictBool = Field(..., description="Desired visibility")


class PublishResponse(BaseModel):
    success: bool
    assetId: str
    isPublic: bool
    message: str


class QuotaResponse(BaseModel):
    """Caller's publishing headroom."""
    current_public_count: int
    max_allowed: int
    can_publish_more: bool
    tier: str


class CreateAssetRequest(BaseModel):
    """Request body for POST /api/assets. New assets are always private."""
    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(..., min_length=3, max_length=100)
    description: Optional[str] = Field(None, max_length=500)
    asset_type: AssetType = Field(..., alias="type")
    code: str = Field(..., min_length=1)
    tags: List[str] = Field(default_factory=list, max_length=MAX_TAGS)

    @field_validator("tags")
    @classmethod
    def validate_tags(cls, v: List[str]) -> List[str]:
        for tag in v:
            if not tag or len(tag) > MAX_TAG_LENGTH:
                raise ValueError(f"Tags must be 1-{MAX_TAG_LENGTH} characters")
        return v


class AssetResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    owner_id: str
    title: str
    description: Optional[str]
    asset_type: AssetType
    tags: List[str]
    is_public: bool
    created_at: datetime
