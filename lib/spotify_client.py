# =============================================================================
# lib/spotify_client.py - Spotify Catalog Client
# =============================================================================
# Thin client for the two Spotify Web API calls the service needs:
# - search tracks by free-text query
# - fetch one track by id
#
# Authentication uses the client-credentials flow. The access token is held
# in a TokenCache owned by the client instance, so one client per process
# means one cached token per process.
#
# Every upstream body is parsed through the pydantic models in
# core.models.track; anything that does not validate is an UpstreamError.
#
# Usage:
#   client = SpotifyClient(client_id="...", client_secret="...")
#   tracks = client.search("mr brightside", limit=5)
#   track = client.fetch_by_id("3n3Ppam7vgaVa1iaRUc9Lp")
# =============================================================================

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from core.errors import BadRequestError, NotFoundError, UpstreamAuthError, UpstreamError
from core.models.track import (
    SpotifySearchResponse,
    SpotifyTokenResponse,
    SpotifyTrack,
    TrackRecord,
)
from lib.token_cache import TokenCache

logger = logging.getLogger(__name__)

TOKEN_URL = "https://accounts.spotify.com/api/token"
API_BASE = "https://api.spotify.com/v1"

# Spotify rejects search limits outside this range
MIN_SEARCH_LIMIT = 1
MAX_SEARCH_LIMIT = 50


class SpotifyClient:
    """
    Spotify Web API client using the client-credentials flow.

    Args:
        client_id: Spotify application client id
        client_secret: Spotify application client secret
        market: Country code applied to searches
        token_cache: Cache for the access token (a fresh one by default)
        http_client: httpx.Client to use; tests pass one with a MockTransport
    """

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        market: str = "US",
        token_cache: TokenCache | None = None,
        http_client: httpx.Client | None = None,
    ):
        self.client_id = client_id
        self.client_secret = client_secret
        self.market = market
        self.token_cache = token_cache or TokenCache()
        self._http = http_client or httpx.Client()

    def close(self) -> None:
        self._http.close()

    # -------------------------------------------------------------------------
    # Authentication
    # -------------------------------------------------------------------------

    def get_token(self) -> str:
        """Return a valid access token, exchanging credentials if needed."""
        return self.token_cache.get_token(self._fetch_token)

    def _fetch_token(self) -> tuple[str, int]:
        if not self.client_id or not self.client_secret:
            raise UpstreamAuthError(
                "Spotify credentials not configured",
                suggestion="Set SPOTIFY_CLIENT_ID and SPOTIFY_CLIENT_SECRET",
            )

        try:
            response = self._http.post(
                TOKEN_URL,
                auth=(self.client_id, self.client_secret),
                data={"grant_type": "client_credentials"},
            )
        except httpx.HTTPError as e:
            logger.error(f"Spotify token request failed: {e}")
            raise UpstreamAuthError(f"Failed to get Spotify token: {e}")

        if not response.is_success:
            logger.error(f"Spotify token exchange rejected: {response.status_code} {response.text[:200]}")
            raise UpstreamAuthError(
                "Failed to get Spotify token",
                details={"status": response.status_code},
            )

        try:
            payload = SpotifyTokenResponse.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise UpstreamAuthError(f"Malformed Spotify token response: {e}")

        logger.info("Obtained new Spotify access token")
        return payload.access_token, payload.expires_in

    # -------------------------------------------------------------------------
    # Catalog
    # -------------------------------------------------------------------------

    def _get(self, path: str, params: dict[str, Any] | None = None) -> httpx.Response:
        token = self.get_token()
        try:
            response = self._http.get(
                f"{API_BASE}{path}",
                params=params,
                headers={"Authorization": f"Bearer {token}"},
            )
        except httpx.HTTPError as e:
            logger.error(f"Spotify request to {path} failed: {e}")
            raise UpstreamError(f"Spotify API request failed: {e}")

        if response.status_code == 401:
            # Revoked before its expiry; the next call fetches a new one
            self.token_cache.invalidate()
        return response

    def search(self, query: str, limit: int = 20) -> list[TrackRecord]:
        """
        Search the catalog for tracks.

        Returns an empty list when nothing matches. Track ids in the result
        are unique.

        Raises:
            BadRequestError: If query is empty or limit is out of range
            UpstreamError: If Spotify fails or returns an unexpected body
        """
        if not query or not query.strip():
            raise BadRequestError("Query parameter is required", code="MISSING_QUERY")
        if not MIN_SEARCH_LIMIT <= limit <= MAX_SEARCH_LIMIT:
            raise BadRequestError(
                f"limit must be between {MIN_SEARCH_LIMIT} and {MAX_SEARCH_LIMIT}",
                code="INVALID_LIMIT",
                details={"limit": limit},
            )

        response = self._get(
            "/search",
            params={
                "q": query,
                "type": "track",
                "limit": str(limit),
                "market": self.market,
            },
        )
        if not response.is_success:
            logger.error(f"Spotify search error: {response.status_code} {response.text[:200]}")
            raise UpstreamError(
                "Spotify API request failed",
                details={"status": response.status_code},
            )

        try:
            page = SpotifySearchResponse.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise UpstreamError(f"Malformed Spotify search response: {e}")

        tracks: list[TrackRecord] = []
        seen: set[str] = set()
        for item in page.tracks.items:
            if item.id in seen:
                continue
            seen.add(item.id)
            tracks.append(TrackRecord.from_spotify(item))

        logger.debug(f"Spotify search '{query}' returned {len(tracks)} tracks")
        return tracks

    def fetch_by_id(self, track_id: str) -> TrackRecord:
        """
        Fetch a single track.

        Raises:
            BadRequestError: If track_id is empty
            NotFoundError: If Spotify has no such track
            UpstreamError: On any other Spotify failure
        """
        if not track_id or not track_id.strip():
            raise BadRequestError("Track ID parameter is required", code="MISSING_TRACK_ID")

        response = self._get(f"/tracks/{quote(track_id.strip(), safe='')}")
        if response.status_code == 404:
            raise NotFoundError(
                "Track not found on Spotify",
                code="TRACK_NOT_FOUND",
                details={"track_id": track_id},
            )
        if not response.is_success:
            logger.error(f"Spotify track error: {response.status_code} {response.text[:200]}")
            raise UpstreamError(
                "Spotify API request failed",
                details={"status": response.status_code},
            )

        try:
            track = SpotifyTrack.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise UpstreamError(f"Malformed Spotify track response: {e}")

        return TrackRecord.from_spotify(track)
