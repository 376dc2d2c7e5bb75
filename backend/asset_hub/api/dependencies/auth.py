"""
Authentication dependencies.

The bearer token is threaded explicitly into the core operations; nothing
here stores caller identity in module or request-global state.
"""

import logging
from typing import Optional

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from asset_hub.config import Settings, get_settings
from asset_hub.database.session import get_db_session
from asset_hub.platform.auth import CredentialError, CredentialVerifier, extract_bearer_token
from asset_hub.platform.errors import AuthenticationError
from asset_hub.publishing.policy import Caller, resolve_caller

logger = logging.getLogger(__name__)


def get_credential_verifier(settings: Settings = Depends(get_settings)) -> CredentialVerifier:
    return CredentialVerifier.from_settings(settings)


def get_bearer_credential(authorization: Optional[str] = Header(None)) -> Optional[str]:
    """Raw access token from the Authorization header, or None."""
    return extract_bearer_token(authorization)


def get_current_caller(
    credential: Optional[str] = Depends(get_bearer_credential),
    verifier: CredentialVerifier = Depends(get_credential_verifier),
    db: Session = Depends(get_db_session),
) -> Caller:
    """Verify the bearer token and resolve the caller's admin flag."""
    try:
        user = verifier.verify(credential)
    except CredentialError as e:
        logger.warning("Credential rejected", extra={"reason": str(e)})
        raise AuthenticationError("Invalid or expired token") from e
    return resolve_caller(db, user)
