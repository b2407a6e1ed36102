# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for the Rehearsalist API:
# - test_models.py: Unit tests for Pydantic model validation
# - test_token_cache.py / test_spotify_client.py: Catalog client
# - test_ical.py / test_calendar_feed.py: Rehearsal calendar export
# - test_songs.py, test_profiles.py, test_members.py, test_diagnostics.py:
#   Endpoint behavior against an in-memory Supabase
# - test_api.py: Error mapping, CORS, auth and catalog endpoints
#
# Run tests with: pytest
# =============================================================================
