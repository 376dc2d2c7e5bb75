"""
Shared pytest fixtures for Asset Hub tests.

Every test gets its own in-memory SQLite database. Tokens are minted with
PyJWT and webhook deliveries are signed exactly as Stripe signs them.
"""

import hashlib
import hmac
import json
import time
from datetime import datetime, timedelta, timezone

import jwt
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import asset_hub.models  # noqa: F401  registers models on Base.metadata
from asset_hub.config import Settings, get_settings
from asset_hub.database.session import get_db_session
from asset_hub.db_base import Base
from asset_hub.entitlements import PRO_TIER, provision_user
from asset_hub.models.asset import Asset, AssetType
from asset_hub.models.entitlement import Entitlement
from asset_hub.platform.auth import CredentialVerifier

JWT_SECRET = "test-jwt-secret-with-enough-length-for-hs256"
WEBHOOK_SECRET = "whsec_test_secret"


# ============================================================================
# DATABASE
# ============================================================================

@pytest.fixture
def engine():
    """In-memory SQLite shared across threads (TestClient runs sync routes in a pool)."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db_session(engine):
    Session = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    session = Session()
    yield session
    session.close()


# ============================================================================
# SETTINGS AND CREDENTIALS
# ============================================================================

@pytest.fixture
def settings():
    return Settings(
        database_url="sqlite://",
        jwt_secret=JWT_SECRET,
        stripe_webhook_secret=WEBHOOK_SECRET,
        log_level="DEBUG",
    )


@pytest.fixture
def verifier(settings):
    return CredentialVerifier.from_settings(settings)


def make_token(user_id, secret=JWT_SECRET, audience="authenticated", expires_in=3600, **claims):
    """Mint an access token the way the auth provider does."""
    now = datetime.now(timezone.utc)
    payload = {
        "sub": user_id,
        "aud": audience,
        "iat": now,
        "exp": now + timedelta(seconds=expires_in),
        **claims,
    }
    return jwt.encode(payload, secret, algorithm="HS256")


def sign_payload(body, secret=WEBHOOK_SECRET, timestamp=None):
    """Build a Stripe-Signature header for a raw body."""
    if isinstance(body, bytes):
        body = body.decode("utf-8")
    timestamp = int(time.time()) if timestamp is None else timestamp
    signed = f"{timestamp}.{body}".encode("utf-8")
    signature = hmac.new(secret.encode("utf-8"), signed, hashlib.sha256).hexdigest()
    return f"t={timestamp},v1={signature}"


def subscription_event(
    customer="cus_123",
    status="active",
    event_type="customer.subscription.updated",
    event_id="evt_1",
    current_period_end=1767225600,
    **overrides,
):
    """Serialized subscription event body."""
    subscription = {
        "id": "sub_123",
        "object": "subscription",
        "customer": customer,
        "status": status,
        "current_period_end": current_period_end,
    }
    subscription.update(overrides)
    return json.dumps({
        "id": event_id,
        "object": "event",
        "type": event_type,
        "data": {"object": subscription},
    })


# ============================================================================
# FACTORIES
# ============================================================================

@pytest.fixture
def make_user(db_session):
    """Provision a user on the free tier, optionally upgraded to pro."""
    def _make_user(user_id, tier="free", is_admin=False, customer=None, max_public_assets=None):
        entitlement = provision_user(
            db_session,
            user_id,
            is_admin=is_admin,
            stripe_customer_id=customer,
        )
        if tier == "pro":
            for field, value in PRO_TIER.as_entitlement_values().items():
                setattr(entitlement, field, value)
        if max_public_assets is not None:
            entitlement.max_public_assets = max_public_assets
        db_session.commit()
        return entitlement
    return _make_user


@pytest.fixture
def make_asset(db_session):
    def _make_asset(owner_id, is_public=False, deleted=False, title="Hero section", code="<div></div>"):
        asset = Asset(
            owner_id=owner_id,
            title=title,
            asset_type=AssetType.SECTION,
            code=code,
            tags=[],
            is_public=is_public,
            deleted_at=datetime.now(timezone.utc) if deleted else None,
        )
        db_session.add(asset)
        db_session.commit()
        return asset
    return _make_asset


def reload_asset(session, asset_id):
    """Fresh read of an asset, bypassing the identity map."""
    return session.query(Asset).filter(Asset.id == asset_id).populate_existing().one()


def reload_entitlement(session, user_id):
    return session.query(Entitlement).filter(
        Entitlement.user_id == user_id,
    ).populate_existing().one_or_none()


# ============================================================================
# HTTP
# ============================================================================

@pytest.fixture
def app(settings, db_session):
    """Application wired to the test database and settings."""
    from asset_hub.main import create_app

    app = create_app(settings)

    def _db():
        yield db_session

    app.dependency_overrides[get_db_session] = _db
    app.dependency_overrides[get_settings] = lambda: settings
    return app


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def auth_headers():
    def _headers(user_id, **claims):
        return {"Authorization": f"Bearer {make_token(user_id, **claims)}"}
    return _headers
