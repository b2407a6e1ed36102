# =============================================================================
# lib/ - Standalone Utility Modules
# =============================================================================
# This package contains reusable utilities:
# - supabase_client.py: Typed Supabase wrapper for database operations
# - spotify_client.py: Spotify Web API client (client-credentials flow)
# - token_cache.py: Single-slot access token cache
# - ical.py: iCalendar (RFC 5545) rendering
# - utils.py: Shared utilities (UUID normalization, dates, filenames)
#
# These modules are self-contained and can be tested in isolation.
# =============================================================================

from lib.supabase_client import SupabaseClient, SupabaseClientError
from lib.spotify_client import SpotifyClient
from lib.token_cache import TokenCache
from lib.utils import normalize_uuid, sanitize_filename, utc_now

__all__ = [
    # Supabase
    "SupabaseClient",
    "SupabaseClientError",
    # Spotify
    "SpotifyClient",
    "TokenCache",
    # Utils
    "normalize_uuid",
    "sanitize_filename",
    "utc_now",
]
