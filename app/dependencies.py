# =============================================================================
# app/dependencies.py - Shared Dependencies
# =============================================================================
# FastAPI dependency injection for shared resources.
# These are injected into route handlers using Depends().
# =============================================================================

from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from app.config import settings
from lib.spotify_client import SpotifyClient
from lib.token_cache import TokenCache


@lru_cache
def get_spotify_client() -> SpotifyClient:
    """
    Get the process-wide Spotify client.

    Cached so every request shares one client and therefore one access
    token. Tests override this dependency with a client on a mock transport.
    """
    return SpotifyClient(
        client_id=settings.SPOTIFY_CLIENT_ID,
        client_secret=settings.SPOTIFY_CLIENT_SECRET,
        market=settings.SPOTIFY_MARKET,
        token_cache=TokenCache(margin_seconds=settings.SPOTIFY_TOKEN_MARGIN_SECONDS),
    )


# Type alias for dependency injection
SpotifyDep = Annotated[SpotifyClient, Depends(get_spotify_client)]
