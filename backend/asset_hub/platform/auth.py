"""
Caller credential verification.

Access tokens are HS256 JWTs issued by the auth provider. The `sub` claim is
the internal user id.

SECURITY:
- Administrative privileges are NEVER read from token claims
- A missing verification secret fails closed (every credential is rejected)
"""

import logging
from dataclasses import dataclass
from typing import Optional

import jwt

from asset_hub.config import Settings

logger = logging.getLogger(__name__)

BEARER_PREFIX = "bearer "


class CredentialError(Exception):
    """Raised when a credential is missing, malformed, expired or not trusted."""
    pass


@dataclass(frozen=True)
class AuthenticatedUser:
    """Principal resolved from a verified credential."""
    user_id: str


def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Return the token from an `Authorization: Bearer <token>` header value."""
    if not authorization:
        return None
    if not authorization.lower().startswith(BEARER_PREFIX):
        return None
    token = authorization[len(BEARER_PREFIX):].strip()
    return token or None


class CredentialVerifier:
    """Verifies access tokens and resolves them to an AuthenticatedUser."""

    ALGORITHM = "HS256"

    def __init__(self, secret: Optional[str], audience: str = "authenticated"):
        self.secret = secret
        self.audience = audience

    @classmethod
    def from_settings(cls, settings: Settings) -> "CredentialVerifier":
        return cls(secret=settings.jwt_secret, audience=settings.jwt_audience)

    def verify(self, credential: Optional[str]) -> AuthenticatedUser:
        """
        Verify a raw access token.

        Raises:
            CredentialError: If the token is missing, invalid or expired
        """
        if not credential:
            raise CredentialError("Missing credential")

        if not self.secret:
            logger.error("SUPABASE_JWT_SECRET not configured for credential verification")
            raise CredentialError("Credential verification not configured")

        try:
            payload = jwt.decode(
                credential,
                self.secret,
                algorithms=[self.ALGORITHM],
                audience=self.audience,
                options={"require": ["sub", "exp"]},
            )
        except jwt.ExpiredSignatureError:
            raise CredentialError("Token has expired")
        except jwt.InvalidTokenError as e:
            raise CredentialError(f"Invalid token: {str(e)}")

        user_id = payload.get("sub")
        if not isinstance(user_id, str) or not user_id:
            raise CredentialError("Token subject missing")

        return AuthenticatedUser(user_id=user_id)
