"""
HTTP tests for the Asset Hub API.

Drives the FastAPI app through TestClient against the per-test SQLite
database. Verifies status codes and the JSON shapes clients depend on.
"""

from unittest.mock import patch

import pytest
from sqlalchemy.exc import OperationalError

from asset_hub.tests.conftest import (
    reload_asset,
    reload_entitlement,
    sign_payload,
    subscription_event,
)


# ============================================================================
# PUBLISH
# ============================================================================

class TestPublishEndpoint:

    def test_publish_success(self, client, auth_headers, make_user, make_asset, db_session):
        make_user("owner", tier="pro")
        asset = make_asset("owner")

        response = client.post(
            "/api/publish-asset",
            json={"assetId": asset.id, "isPublic": True},
            headers=auth_headers("owner"),
        )

        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "assetId": asset.id,
            "isPublic": True,
            "message": "Asset published successfully",
        }
        assert reload_asset(db_session, asset.id).is_public is True

    def test_missing_bearer_token(self, client, make_user, make_asset):
        make_user("owner", tier="pro")
        asset = make_asset("owner")

        response = client.post("/api/publish-asset", json={"assetId": asset.id, "isPublic": True})

        assert response.status_code == 401
        body = response.json()
        assert body["success"] is False
        assert body["code"] == "UNAUTHORIZED"

    def test_cannot_publish_shape(self, client, auth_headers, make_user, make_asset):
        make_user("owner")
        asset = make_asset("owner")

        response = client.post(
            "/api/publish-asset",
            json={"assetId": asset.id, "isPublic": True},
            headers=auth_headers("owner"),
        )

        assert response.status_code == 402
        body = response.json()
        assert body["code"] == "CANNOT_PUBLISH"
        assert "Pro" in body["message"]
        assert "quota" not in body

    def test_quota_exceeded_shape(self, client, auth_headers, make_user, make_asset, db_session):
        make_user("owner", tier="pro", max_public_assets=2)
        make_asset("owner", is_public=True)
        make_asset("owner", is_public=True)
        third = make_asset("owner")

        response = client.post(
            "/api/publish-asset",
            json={"assetId": third.id, "isPublic": True},
            headers=auth_headers("owner"),
        )

        assert response.status_code == 403
        body = response.json()
        assert body["success"] is False
        assert body["error"] == "Quota Exceeded"
        assert body["code"] == "QUOTA_EXCEEDED"
        assert body["quota"] == {"current": 2, "limit": 2}
        assert reload_asset(db_session, third.id).is_public is False

    def test_not_found_and_forbidden(self, client, auth_headers, make_user, make_asset):
        make_user("owner", tier="pro")
        make_user("other", tier="pro")
        asset = make_asset("owner")

        missing = client.post(
            "/api/publish-asset",
            json={"assetId": "nope", "isPublic": True},
            headers=auth_headers("other"),
        )
        forbidden = client.post(
            "/api/publish-asset",
            json={"assetId": asset.id, "isPublic": True},
            headers=auth_headers("other"),
        )

        assert (missing.status_code, missing.json()["code"]) == (404, "NOT_FOUND")
        assert (forbidden.status_code, forbidden.json()["code"]) == (403, "FORBIDDEN")

    @pytest.mark.parametrize("body", [
        {},
        {"assetId": "a1"},
        {"isPublic": True},
        {"assetId": "", "isPublic": True},
        {"assetId": "a1", "isPublic": "yes"},
    ])
    def test_invalid_body_is_400(self, client, auth_headers, body):
        response = client.post("/api/publish-asset", json=body, headers=auth_headers("owner"))

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    @pytest.mark.parametrize("method", ["get", "put", "delete", "patch"])
    def test_other_methods_not_allowed(self, client, method):
        response = getattr(client, method)("/api/publish-asset")

        assert response.status_code == 405

    def test_internal_error(self, client, auth_headers, make_user, make_asset, db_session):
        make_user("owner", tier="pro")
        asset = make_asset("owner")

        with patch.object(
            db_session,
            "commit",
            side_effect=OperationalError("UPDATE assets", {}, Exception("connection lost")),
        ):
            response = client.post(
                "/api/publish-asset",
                json={"assetId": asset.id, "isPublic": True},
                headers=auth_headers("owner"),
            )

        assert response.status_code == 500
        assert response.json()["code"] == "INTERNAL_ERROR"
        assert "connection lost" not in response.text

    def test_correlation_id_echoed(self, client, auth_headers, make_user, make_asset):
        make_user("owner", tier="pro")
        asset = make_asset("owner")

        response = client.post(
            "/api/publish-asset",
            json={"assetId": asset.id, "isPublic": False},
            headers={**auth_headers("owner"), "X-Correlation-ID": "req-123"},
        )

        assert response.headers["X-Correlation-ID"] == "req-123"


# ============================================================================
# QUOTA AND ASSET LIFECYCLE
# ============================================================================

class TestQuotaEndpoint:

    def test_returns_summary(self, client, auth_headers, make_user, make_asset):
        make_user("owner", tier="pro")
        make_asset("owner", is_public=True)

        response = client.get("/api/assets/quota", headers=auth_headers("owner"))

        assert response.status_code == 200
        assert response.json() == {
            "current_public_count": 1,
            "max_allowed": 500,
            "can_publish_more": True,
            "tier": "pro",
        }

    def test_requires_auth(self, client):
        response = client.get("/api/assets/quota")

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "AUTHENTICATION_ERROR"


class TestAssetLifecycleEndpoints:

    def test_create_asset(self, client, auth_headers, make_user):
        make_user("owner")

        response = client.post(
            "/api/assets",
            json={
                "title": "Landing hero",
                "type": "section",
                "code": "<section></section>",
                "tags": ["hero", "landing"],
                "owner_id": "someone-else",
            },
            headers=auth_headers("owner"),
        )

        assert response.status_code == 201
        body = response.json()
        assert body["owner_id"] == "owner"
        assert body["is_public"] is False
        assert body["asset_type"] == "section"
        assert body["tags"] == ["hero", "landing"]

    @pytest.mark.parametrize("payload", [
        {"title": "ab", "type": "section", "code": "x"},
        {"title": "Valid title", "type": "widget", "code": "x"},
        {"title": "Valid title", "type": "css", "code": ""},
        {"title": "Valid title", "type": "css", "code": "x", "tags": ["t"] * 11},
        {"title": "Valid title", "type": "css", "code": "x", "tags": ["x" * 31]},
    ])
    def test_create_validation(self, client, auth_headers, make_user, payload):
        make_user("owner")

        response = client.post("/api/assets", json=payload, headers=auth_headers("owner"))

        assert response.status_code == 400

    def test_code_too_large(self, client, auth_headers, make_user):
        make_user("owner")

        response = client.post(
            "/api/assets",
            json={"title": "Huge", "type": "css", "code": "a" * (256 * 1024 + 10)},
            headers=auth_headers("owner"),
        )

        assert response.status_code == 413
        assert response.json()["error"]["code"] == "CODE_TOO_LARGE"

    def test_delete_asset(self, client, auth_headers, make_user, make_asset, db_session):
        make_user("owner", tier="pro")
        asset = make_asset("owner", is_public=True)

        response = client.delete(f"/api/assets/{asset.id}", headers=auth_headers("owner"))

        assert response.status_code == 204
        assert reload_asset(db_session, asset.id).deleted_at is not None

    def test_delete_someone_elses_asset(self, client, auth_headers, make_user, make_asset):
        make_user("other")
        asset = make_asset("owner")

        response = client.delete(f"/api/assets/{asset.id}", headers=auth_headers("other"))

        assert response.status_code == 403
        assert response.json()["error"]["code"] == "PERMISSION_DENIED"


# ============================================================================
# STRIPE WEBHOOK
# ============================================================================

class TestStripeWebhookEndpoint:

    def post_event(self, client, body, signature=None):
        return client.post(
            "/webhooks/stripe",
            content=body.encode("utf-8"),
            headers={
                "Content-Type": "application/json",
                "Stripe-Signature": sign_payload(body) if signature is None else signature,
            },
        )

    def test_active_subscription_upgrades(self, client, make_user, db_session):
        make_user("user-1", customer="cus_123")

        response = self.post_event(client, subscription_event(status="active"))

        assert response.status_code == 200
        assert response.json() == {"received": True}
        assert reload_entitlement(db_session, "user-1").can_publish is True

    def test_invalid_signature(self, client, make_user, db_session):
        make_user("user-1", customer="cus_123")

        response = self.post_event(client, subscription_event(status="active"), signature="t=1,v1=deadbeef")

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "Invalid signature"
        assert body["code"] == "INVALID_SIGNATURE"
        assert reload_entitlement(db_session, "user-1").can_publish is False

    def test_missing_signature_header(self, client):
        response = client.post("/webhooks/stripe", content=b"{}")

        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_SIGNATURE"

    def test_unmapped_customer_acknowledged(self, client):
        response = self.post_event(client, subscription_event(customer="cus_nobody"))

        assert response.status_code == 200
        assert response.json() == {"received": True}

    def test_malformed_event(self, client):
        response = self.post_event(client, '{"id": "evt_1"}')

        assert response.status_code == 400
        assert response.json()["code"] == "MALFORMED_EVENT"

    def test_out_of_range_period_end_is_not_retried(self, client, make_user):
        make_user("user-1", customer="cus_123")

        response = self.post_event(client, subscription_event(current_period_end=10**20))

        assert response.status_code == 400
        assert response.json()["code"] == "MALFORMED_EVENT"

    def test_database_failure_is_retryable(self, client, make_user, db_session):
        make_user("user-1", customer="cus_123")

        with patch.object(
            db_session,
            "commit",
            side_effect=OperationalError("UPDATE entitlements", {}, Exception("connection lost")),
        ):
            response = self.post_event(client, subscription_event(status="active"))

        assert response.status_code == 500
        assert response.json()["error"] == "Processing failed"
        assert response.json()["code"] == "INTERNAL_ERROR"


# ============================================================================
# HEALTH
# ============================================================================

class TestHealthEndpoint:

    def test_healthy(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "ok"

    def test_degraded_when_database_unreachable(self, client, db_session):
        with patch.object(
            db_session,
            "execute",
            side_effect=OperationalError("SELECT 1", {}, Exception("connection refused")),
        ):
            response = client.get("/health")

        assert response.status_code == 503
        assert response.json()["status"] == "degraded"
