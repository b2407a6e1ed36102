# =============================================================================
# tests/test_api.py - HTTP Surface Tests
# =============================================================================
# Cross-cutting behavior of the API layer:
# - error kinds map to status codes at the boundary
# - CORS headers and OPTIONS pre-flight on every handler
# - bearer token verification
# - catalog endpoints wired to the Spotify client
# =============================================================================

from uuid import uuid4

import pytest

from app.auth.dependencies import decode_access_token
from app.exceptions import STATUS_BY_KIND, status_for
from core.errors import (
    BadRequestError,
    ErrorKind,
    ForbiddenError,
    InvalidTokenError,
    NotFoundError,
    UnauthorizedError,
    UpstreamAuthError,
    UpstreamError,
)
from lib.supabase_client import SupabaseClientError
from tests.conftest import auth_header, make_token

HANDLER_PATHS = [
    "spotify-search",
    "get-track-metadata",
    "delete-song-suggestion",
    "upload-avatar",
    "calendar-feed",
    "diag-status",
    "fix-user-data",
]


# =============================================================================
# Error Mapping
# =============================================================================

class TestErrorMapping:

    @pytest.mark.parametrize("error,status", [
        (BadRequestError("x"), 400),
        (InvalidTokenError("x"), 400),
        (UnauthorizedError("x"), 401),
        (ForbiddenError("x"), 403),
        (NotFoundError("x"), 404),
        (UpstreamError("x"), 500),
        (UpstreamAuthError("x"), 500),
        (SupabaseClientError("x"), 500),
    ])
    def test_status_for_each_kind(self, error, status):
        assert status_for(error) == status

    def test_every_kind_has_a_status(self):
        assert set(STATUS_BY_KIND) == set(ErrorKind)

    def test_error_body(self):
        error = NotFoundError("Band not found", code="BAND_NOT_FOUND", details={"band_id": "b1"})

        assert error.to_dict() == {
            "error": "Band not found",
            "code": "BAND_NOT_FOUND",
            "details": {"band_id": "b1"},
        }

    def test_default_code(self):
        assert ForbiddenError("Forbidden").code == "FORBIDDEN"


# =============================================================================
# CORS
# =============================================================================

class TestCors:

    @pytest.mark.parametrize("path", HANDLER_PATHS)
    def test_options_preflight(self, api_client, path):
        response = api_client.options(f"/api/v1/{path}")

        assert response.status_code == 200
        assert response.content == b""
        assert response.headers["access-control-allow-origin"] == "*"

    def test_error_responses_carry_cors_headers(self, api_client):
        response = api_client.post("/api/v1/delete-song-suggestion", json={"song_id": "x"})

        assert response.status_code == 401
        assert response.headers["access-control-allow-origin"] == "*"
        assert "authorization" in response.headers["access-control-allow-headers"]

    def test_success_responses_carry_cors_headers(self, api_client):
        response = api_client.get("/api/v1/health")

        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == "*"

    def test_preflight_from_any_origin(self, api_client):
        response = api_client.options(
            "/api/v1/spotify-search",
            headers={
                "Origin": "https://elsewhere.example",
                "Access-Control-Request-Method": "POST",
                "Access-Control-Request-Headers": "authorization, content-type",
            },
        )

        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == "*"

    def test_cross_origin_request_gets_wildcard(self, api_client):
        response = api_client.get("/api/v1/health", headers={"Origin": "https://elsewhere.example"})

        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == "*"


# =============================================================================
# Token Verification
# =============================================================================

class TestDecodeAccessToken:

    def test_valid_token(self):
        user_id = str(uuid4())
        token = make_token(user_id, email="sam@example.com", user_metadata={"display_name": "Sam"})

        user = decode_access_token(token)

        assert str(user.id) == user_id
        assert user.email == "sam@example.com"
        assert user.user_metadata == {"display_name": "Sam"}

    def test_expired_token(self):
        token = make_token(str(uuid4()), expires_in=-60)

        with pytest.raises(UnauthorizedError) as exc_info:
            decode_access_token(token)
        assert exc_info.value.code == "TOKEN_EXPIRED"

    def test_wrong_secret(self):
        token = make_token(str(uuid4()), secret="some-other-secret-of-decent-length")

        with pytest.raises(UnauthorizedError):
            decode_access_token(token)

    def test_wrong_audience(self):
        token = make_token(str(uuid4()), audience="anon")

        with pytest.raises(UnauthorizedError):
            decode_access_token(token)

    def test_non_uuid_subject(self):
        token = make_token("not-a-uuid")

        with pytest.raises(UnauthorizedError):
            decode_access_token(token)

    def test_custom_error_class(self):
        with pytest.raises(InvalidTokenError):
            decode_access_token("garbage", error_cls=InvalidTokenError)


class TestAuthRoutes:

    def test_me_from_profile(self, api_client, band_setup):
        response = api_client.get("/api/v1/auth/me", headers=auth_header(band_setup.admin))

        assert response.status_code == 200
        assert response.json()["display_name"] == "Admin"

    def test_me_without_profile(self, api_client, fake_db):
        user_id = str(uuid4())

        response = api_client.get("/api/v1/auth/me", headers=auth_header(user_id, email="x@example.com"))

        assert response.status_code == 200
        assert response.json()["id"] == user_id
        assert response.json()["email"] == "x@example.com"

    def test_verify(self, api_client):
        user_id = str(uuid4())

        response = api_client.get("/api/v1/auth/verify", headers=auth_header(user_id))

        assert response.json()["valid"] is True
        assert response.json()["user_id"] == user_id

    def test_verify_rejects_bad_token(self, api_client):
        response = api_client.get("/api/v1/auth/verify", headers={"Authorization": "Bearer nope"})

        assert response.status_code == 401


# =============================================================================
# Catalog Endpoints
# =============================================================================

class TestCatalogEndpoints:

    def test_search(self, api_client):
        response = api_client.post("/api/v1/spotify-search", json={"query": "brightside", "limit": 5})

        assert response.status_code == 200
        [track] = response.json()["tracks"]
        assert track["spotify_track_id"] == "3n3Ppam7vgaVa1iaRUc9Lp"
        assert track["artist"] == "The Killers"

    def test_search_missing_query(self, api_client, spotify_stub):
        response = api_client.post("/api/v1/spotify-search", json={})

        assert response.status_code == 400
        assert response.json() == {"error": "Query parameter is required", "code": "MISSING_QUERY"}
        assert spotify_stub.api_requests == []

    def test_search_upstream_failure(self, api_client, spotify_stub):
        spotify_stub.api_status = 502

        response = api_client.post("/api/v1/spotify-search", json={"query": "brightside"})

        assert response.status_code == 500
        assert response.json()["code"] == "UPSTREAM_ERROR"

    def test_search_token_failure(self, api_client, spotify_stub):
        spotify_stub.token_status = 401

        response = api_client.post("/api/v1/spotify-search", json={"query": "brightside"})

        assert response.status_code == 500
        assert response.json()["code"] == "UPSTREAM_AUTH_FAILED"

    def test_track_metadata(self, api_client):
        response = api_client.post("/api/v1/get-track-metadata", json={"trackId": "3n3Ppam7vgaVa1iaRUc9Lp"})

        assert response.status_code == 200
        assert response.json()["track"]["title"] == "Mr. Brightside"

    def test_track_metadata_not_found(self, api_client):
        response = api_client.post("/api/v1/get-track-metadata", json={"trackId": "missing"})

        assert response.status_code == 404
        assert response.json()["code"] == "TRACK_NOT_FOUND"

    def test_track_metadata_missing_id(self, api_client):
        response = api_client.post("/api/v1/get-track-metadata", json={})

        assert response.status_code == 400
        assert response.json()["code"] == "MISSING_TRACK_ID"

    def test_malformed_json_body(self, api_client):
        response = api_client.post(
            "/api/v1/spotify-search",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"


class TestHealth:

    def test_health(self, api_client):
        body = api_client.get("/api/v1/health").json()

        assert body["status"] == "healthy"
        assert body["spotify_configured"] is True

    def test_ready(self, api_client):
        body = api_client.get("/api/v1/health/ready").json()

        assert body["status"] == "ready"
        assert body["checks"] == {"database": "healthy", "storage": "healthy", "spotify": "healthy"}

    def test_degraded_when_database_fails(self, api_client, fake_db):
        fake_db.failing_tables.add("rehearsals")

        body = api_client.get("/api/v1/health/ready").json()

        assert body["status"] == "degraded"
        assert body["checks"]["database"].startswith("unhealthy: rehearsals")

    def test_live(self, api_client):
        assert api_client.get("/api/v1/health/live").json()["status"] == "alive"
