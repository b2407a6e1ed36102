# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up mock environment variables before any imports
# - In-memory stand-in for the Supabase client (tables, storage, auth admin)
# - Supabase-style access tokens signed with the test JWT secret
# - A Spotify client wired to an httpx.MockTransport
# =============================================================================

import os
import time
from types import SimpleNamespace
from typing import Any, Callable
from uuid import UUID, uuid4

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# This must happen before importing app.config which loads settings immediately

TEST_JWT_SECRET = "test-jwt-secret-with-enough-length-for-hs256"

os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_ANON_KEY", "test-anon-key")
os.environ.setdefault("SUPABASE_SERVICE_KEY", "test-service-key")
os.environ["SUPABASE_JWT_SECRET"] = TEST_JWT_SECRET
os.environ.setdefault("SPOTIFY_CLIENT_ID", "test-spotify-id")
os.environ.setdefault("SPOTIFY_CLIENT_SECRET", "test-spotify-secret")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")

import httpx
import pytest
from jose import jwt


# =============================================================================
# In-memory Supabase
# =============================================================================

class FakeAPIError(Exception):
    """Mimics postgrest.APIError's string form."""


# Columns typed uuid in the database; filtering them with anything else fails
UUID_COLUMNS = {"id", "band_id", "user_id", "suggested_by"}


def _check_uuid(column: str, value: Any) -> None:
    if column not in UUID_COLUMNS:
        return
    try:
        UUID(str(value))
    except ValueError:
        raise FakeAPIError(
            "{'code': '22P02', 'message': 'invalid input syntax for type uuid: "
            f"\"{value}\"'}}"
        )


def _project(row: dict[str, Any], columns: str) -> dict[str, Any]:
    if columns.strip() == "*":
        return dict(row)
    wanted = [c.strip() for c in columns.split(",") if c.strip()]
    return {c: row.get(c) for c in wanted}


class FakeQuery:
    """Subset of the postgrest query builder used by the services."""

    def __init__(self, db: "FakeSupabase", table: str):
        self.db = db
        self.table = table
        self.action = "select"
        self.columns = "*"
        self.payload: Any = None
        self.on_conflict: str | None = None
        self.filters: list[Callable[[dict], bool]] = []
        self.filter_values: list[tuple[str, Any]] = []
        self.order_by: tuple[str, bool] | None = None
        self.max_rows: int | None = None
        self.single_row = False

    # --- actions -------------------------------------------------------------

    def select(self, columns: str = "*"):
        self.columns = columns
        return self

    def insert(self, data):
        self.action, self.payload = "insert", data
        return self

    def upsert(self, data, on_conflict: str = "id", **kwargs):
        self.action, self.payload, self.on_conflict = "upsert", data, on_conflict
        return self

    def update(self, data):
        self.action, self.payload = "update", data
        return self

    def delete(self):
        self.action = "delete"
        return self

    # --- filters -------------------------------------------------------------

    def eq(self, column, value):
        self.filter_values.append((column, value))
        self.filters.append(lambda r: r.get(column) == value)
        return self

    def gte(self, column, value):
        self.filters.append(lambda r: r.get(column) is not None and r[column] >= value)
        return self

    def in_(self, column, values):
        allowed = list(values)
        self.filter_values.extend((column, v) for v in allowed)
        self.filters.append(lambda r: r.get(column) in allowed)
        return self

    def order(self, column, desc: bool = False):
        self.order_by = (column, desc)
        return self

    def limit(self, count: int):
        self.max_rows = count
        return self

    def single(self):
        self.single_row = True
        return self

    # --- execution -----------------------------------------------------------

    def _matches(self, row: dict) -> bool:
        return all(f(row) for f in self.filters)

    def execute(self):
        self.db.calls.append((self.table, self.action))
        if self.table in self.db.failing_tables:
            raise FakeAPIError(f"connection refused while querying {self.table}")
        for column, value in self.filter_values:
            _check_uuid(column, value)

        rows = self.db.tables.setdefault(self.table, [])

        if self.action == "insert":
            new = [dict(r) for r in (self.payload if isinstance(self.payload, list) else [self.payload])]
            for row in new:
                row.setdefault("id", str(uuid4()))
            rows.extend(new)
            return SimpleNamespace(data=new)

        if self.action == "upsert":
            keys = [k.strip() for k in (self.on_conflict or "id").split(",")]
            payload = dict(self.payload)
            for row in rows:
                if all(row.get(k) == payload.get(k) for k in keys):
                    row.update(payload)
                    return SimpleNamespace(data=[dict(row)])
            payload.setdefault("id", str(uuid4()))
            rows.append(payload)
            return SimpleNamespace(data=[dict(payload)])

        if self.action == "update":
            updated = []
            for row in rows:
                if self._matches(row):
                    row.update(self.payload)
                    updated.append(dict(row))
            return SimpleNamespace(data=updated)

        if self.action == "delete":
            removed = [r for r in rows if self._matches(r)]
            self.db.tables[self.table] = [r for r in rows if not self._matches(r)]
            return SimpleNamespace(data=removed)

        result = [r for r in rows if self._matches(r)]
        if self.order_by:
            column, desc = self.order_by
            result.sort(key=lambda r: r.get(column), reverse=desc)
        if self.max_rows is not None:
            result = result[: self.max_rows]
        result = [_project(r, self.columns) for r in result]

        if self.single_row:
            if len(result) != 1:
                raise FakeAPIError(
                    "{'code': 'PGRST116', 'message': 'JSON object requested, multiple (or no) rows returned'}"
                )
            return SimpleNamespace(data=result[0])
        return SimpleNamespace(data=result)


class FakeBucket:
    def __init__(self, storage: "FakeStorage", name: str):
        self.storage = storage
        self.name = name

    def upload(self, path, file, file_options=None):
        if self.storage.fail_uploads:
            raise FakeAPIError("storage unavailable")
        self.storage.objects[(self.name, path)] = (file, dict(file_options or {}))
        return SimpleNamespace(path=path)

    def get_public_url(self, path):
        return f"https://test-project.supabase.co/storage/v1/object/public/{self.name}/{path}"

    def remove(self, paths):
        for path in paths:
            self.storage.objects.pop((self.name, path), None)
        return []


class FakeStorage:
    def __init__(self):
        self.objects: dict[tuple[str, str], tuple[bytes, dict]] = {}
        self.fail_uploads = False

    def from_(self, bucket):
        return FakeBucket(self, bucket)

    def list_buckets(self):
        return [SimpleNamespace(name="avatars")]


class FakeAuthAdmin:
    def __init__(self):
        self.users: list[SimpleNamespace] = []
        self.passwords: dict[str, str] = {}
        self.list_calls = 0

    def add_user(self, email: str, confirmed: bool = True, user_id: str | None = None):
        user = SimpleNamespace(
            id=user_id or str(uuid4()),
            email=email,
            email_confirmed_at="2026-01-01T00:00:00Z" if confirmed else None,
        )
        self.users.append(user)
        return user

    def list_users(self, page: int = 1, per_page: int = 50):
        self.list_calls += 1
        start = (page - 1) * per_page
        return list(self.users[start:start + per_page])

    def create_user(self, attributes):
        user = self.add_user(attributes["email"], confirmed=attributes.get("email_confirm", False))
        self.passwords[user.id] = attributes["password"]
        return SimpleNamespace(user=user)

    def update_user_by_id(self, uid, attributes):
        self.passwords[uid] = attributes["password"]
        return SimpleNamespace(user=next(u for u in self.users if u.id == uid))


class FakeSupabase:
    """Drop-in for supabase.Client backed by plain dicts."""

    def __init__(self):
        self.tables: dict[str, list[dict]] = {}
        self.failing_tables: set[str] = set()
        self.calls: list[tuple[str, str]] = []
        self.storage = FakeStorage()
        self.auth = SimpleNamespace(admin=FakeAuthAdmin())

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)

    def rows(self, name: str) -> list[dict]:
        return self.tables.get(name, [])

    def seed(self, name: str, *rows: dict) -> None:
        self.tables.setdefault(name, []).extend(dict(r) for r in rows)


@pytest.fixture
def fake_db():
    """Install an in-memory Supabase client for the duration of a test."""
    from lib.supabase_client import SupabaseClient

    db = FakeSupabase()
    previous = SupabaseClient._instance
    SupabaseClient._instance = db
    yield db
    SupabaseClient._instance = previous


# =============================================================================
# Auth
# =============================================================================

def make_token(
    user_id: str,
    email: str | None = "member@example.com",
    user_metadata: dict | None = None,
    expires_in: int = 3600,
    audience: str = "authenticated",
    secret: str = TEST_JWT_SECRET,
) -> str:
    """Mint a Supabase-style HS256 access token."""
    now = int(time.time())
    claims = {
        "sub": user_id,
        "aud": audience,
        "role": "authenticated",
        "iat": now,
        "exp": now + expires_in,
        "user_metadata": user_metadata or {},
    }
    if email is not None:
        claims["email"] = email
    return jwt.encode(claims, secret, algorithm="HS256")


def auth_header(user_id: str, **kwargs) -> dict[str, str]:
    return {"Authorization": f"Bearer {make_token(user_id, **kwargs)}"}


# =============================================================================
# Spotify
# =============================================================================

def spotify_track(
    track_id: str = "3n3Ppam7vgaVa1iaRUc9Lp",
    name: str = "Mr. Brightside",
    artists: tuple[str, ...] = ("The Killers",),
    album: str = "Hot Fuss",
    images: tuple[str, ...] = ("https://i.scdn.co/image/large",),
) -> dict[str, Any]:
    """A Spotify track object as returned by the Web API."""
    return {
        "id": track_id,
        "name": name,
        "artists": [{"id": f"artist-{i}", "name": a} for i, a in enumerate(artists)],
        "album": {
            "id": "album-1",
            "name": album,
            "images": [{"url": url, "height": 640, "width": 640} for url in images],
        },
        "duration_ms": 222075,
        "preview_url": None,
        "external_urls": {"spotify": f"https://open.spotify.com/track/{track_id}"},
        "popularity": 87,
    }


class SpotifyStub:
    """
    Routes for an httpx.MockTransport imitating Spotify.

    Counts token exchanges and API calls so tests can assert on caching.
    """

    def __init__(self):
        self.token_requests = 0
        self.api_requests: list[httpx.Request] = []
        self.token_status = 200
        self.expires_in = 3600
        self.search_items: list[dict] = [spotify_track()]
        self.tracks: dict[str, dict] = {"3n3Ppam7vgaVa1iaRUc9Lp": spotify_track()}
        self.api_status: int | None = None
        self.search_body: Any = None

    def __call__(self, request: httpx.Request) -> httpx.Response:
        if request.url.host == "accounts.spotify.com":
            self.token_requests += 1
            if self.token_status != 200:
                return httpx.Response(self.token_status, json={"error": "invalid_client"})
            return httpx.Response(200, json={
                "access_token": f"token-{self.token_requests}",
                "token_type": "Bearer",
                "expires_in": self.expires_in,
            })

        self.api_requests.append(request)
        if self.api_status is not None:
            return httpx.Response(self.api_status, json={"error": {"status": self.api_status}})

        if request.url.path == "/v1/search":
            body = self.search_body if self.search_body is not None else {
                "tracks": {"items": self.search_items, "total": len(self.search_items)}
            }
            return httpx.Response(200, json=body)

        if request.url.path.startswith("/v1/tracks/"):
            track_id = request.url.path.rsplit("/", 1)[-1]
            if track_id not in self.tracks:
                return httpx.Response(404, json={"error": {"status": 404, "message": "Non existing id"}})
            return httpx.Response(200, json=self.tracks[track_id])

        return httpx.Response(404)


@pytest.fixture
def spotify_stub():
    return SpotifyStub()


@pytest.fixture
def spotify_client(spotify_stub):
    from lib.spotify_client import SpotifyClient

    client = SpotifyClient(
        client_id="test-spotify-id",
        client_secret="test-spotify-secret",
        http_client=httpx.Client(transport=httpx.MockTransport(spotify_stub)),
    )
    yield client
    client.close()


# =============================================================================
# API client
# =============================================================================

@pytest.fixture
def api_client(fake_db, spotify_client):
    """TestClient with the fake Supabase and the stubbed Spotify client."""
    from fastapi.testclient import TestClient

    from app.dependencies import get_spotify_client
    from app.main import app

    app.dependency_overrides[get_spotify_client] = lambda: spotify_client
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()


# =============================================================================
# Sample data
# =============================================================================

@pytest.fixture
def band_setup(fake_db):
    """
    One band with an admin, a member and an outsider, plus one suggestion
    made by the member.
    """
    ids = SimpleNamespace(
        band=str(uuid4()),
        admin=str(uuid4()),
        member=str(uuid4()),
        outsider=str(uuid4()),
        song=str(uuid4()),
    )
    fake_db.seed(
        "bands",
        {"id": ids.band, "name": "The Rehearsals", "invite_code": "ABC123",
         "created_by": ids.admin, "shared_password": "band-secret"},
    )
    fake_db.seed(
        "band_members",
        {"id": str(uuid4()), "band_id": ids.band, "user_id": ids.admin, "role": "admin"},
        {"id": str(uuid4()), "band_id": ids.band, "user_id": ids.member, "role": "member"},
    )
    fake_db.seed(
        "profiles",
        {"id": ids.admin, "email": "admin@example.com", "display_name": "Admin"},
        {"id": ids.member, "email": "member@example.com", "display_name": "Member"},
    )
    fake_db.seed(
        "song_suggestions",
        {"id": ids.song, "band_id": ids.band, "suggested_by": ids.member,
         "title": "Mr. Brightside", "artist": "The Killers", "status": "suggested"},
    )
    return ids
