# =============================================================================
# lib/supabase_client.py - Supabase Client Wrapper
# =============================================================================
# This module provides a typed wrapper for Supabase database operations.
# It implements the singleton pattern to reuse a single client connection
# and provides specialized fetch helpers for:
# - Profiles (by id or email)
# - Bands
# - Band memberships (for authorization)
# - Song suggestions
#
# Usage:
#   from lib.supabase_client import SupabaseClient
#   band = SupabaseClient.fetch_band(band_id)
# =============================================================================

from __future__ import annotations

import logging
from typing import Any
from uuid import UUID

from supabase import create_client, Client

from app.config import settings
from core.errors import UpstreamError
from lib.utils import normalize_uuid

# Set up logging for this module
logger = logging.getLogger(__name__)

# PostgREST code for ".single()" matching no rows
NO_ROWS_CODE = "PGRST116"

# Users requested per auth admin page
AUTH_USERS_PAGE_SIZE = 1000


class SupabaseClientError(UpstreamError):
    """Error during Supabase operations."""
    default_code = "SUPABASE_ERROR"


def is_no_rows_error(error: Exception) -> bool:
    """True when a postgrest error means "no matching row"."""
    return NO_ROWS_CODE in str(error)


class SupabaseClient:
    """
    Typed wrapper for Supabase database operations.

    Implements singleton pattern - one client instance is shared across
    the application. All methods are class methods for easy access without
    instantiation.

    Example:
        membership = SupabaseClient.fetch_membership(band_id, user_id)
        is_admin = membership is not None and membership["role"] == "admin"
    """

    _instance: Client | None = None

    @classmethod
    def get_client(cls) -> Client:
        """
        Get or create the singleton Supabase client.

        Uses service_role key which bypasses Row Level Security (RLS).
        Every handler performs its own authorization before touching data.

        Raises:
            SupabaseClientError: If client creation fails
        """
        if cls._instance is None:
            try:
                cls._instance = create_client(
                    settings.SUPABASE_URL,
                    settings.SUPABASE_SERVICE_KEY
                )
                logger.info("Supabase client initialized successfully")
            except Exception as e:
                raise SupabaseClientError(
                    message=f"Failed to create Supabase client: {e}",
                    code="CLIENT_INIT_FAILED",
                    suggestion="Check SUPABASE_URL and SUPABASE_SERVICE_KEY in your .env file"
                )
        return cls._instance

    @classmethod
    def _fetch_single(
        cls,
        table: str,
        columns: str,
        filters: dict[str, str],
        error_code: str,
    ) -> dict[str, Any] | None:
        """Fetch exactly one row matching all `filters`, or None."""
        client = cls.get_client()

        try:
            query = client.table(table).select(columns)
            for column, value in filters.items():
                query = query.eq(column, value)
            response = query.single().execute()
            return response.data

        except Exception as e:
            if is_no_rows_error(e):
                return None
            raise SupabaseClientError(
                message=f"Failed to fetch from {table}: {e}",
                code=error_code,
                details={"table": table, **filters}
            )

    # -------------------------------------------------------------------------
    # Profiles
    # -------------------------------------------------------------------------

    @classmethod
    def fetch_profile(cls, user_id: str | UUID) -> dict[str, Any] | None:
        """
        Fetch a profile by user id.

        Returns:
            Profile dict (id, email, display_name, avatar_url, ...) or None
        """
        return cls._fetch_single(
            "profiles", "*", {"id": normalize_uuid(user_id)}, "FETCH_PROFILE_FAILED"
        )

    @classmethod
    def fetch_profile_by_email(cls, email: str) -> dict[str, Any] | None:
        """Fetch a profile by email address, or None."""
        client = cls.get_client()

        try:
            response = (
                client.table("profiles")
                .select("*")
                .eq("email", email)
                .limit(1)
                .execute()
            )
            rows = response.data or []
            return rows[0] if rows else None

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to fetch profile by email: {e}",
                code="FETCH_PROFILE_FAILED",
                details={"email": email}
            )

    # -------------------------------------------------------------------------
    # Bands
    # -------------------------------------------------------------------------

    @classmethod
    def fetch_band(cls, band_id: str | UUID, columns: str = "*") -> dict[str, Any] | None:
        """Fetch a band by id, or None."""
        return cls._fetch_single(
            "bands", columns, {"id": normalize_uuid(band_id)}, "FETCH_BAND_FAILED"
        )

    @classmethod
    def fetch_bands(cls, band_ids: list[str]) -> list[dict[str, Any]]:
        """Fetch several bands (id, name, invite_code) by id."""
        if not band_ids:
            return []

        client = cls.get_client()

        try:
            response = (
                client.table("bands")
                .select("id, name, invite_code")
                .in_("id", band_ids)
                .execute()
            )
            return response.data or []

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to fetch bands: {e}",
                code="FETCH_BANDS_FAILED",
                details={"band_ids": band_ids}
            )

    # -------------------------------------------------------------------------
    # Memberships
    # -------------------------------------------------------------------------

    @classmethod
    def fetch_membership(
        cls,
        band_id: str | UUID,
        user_id: str | UUID,
    ) -> dict[str, Any] | None:
        """
        Fetch a user's membership row in one band.

        Returns:
            Dict with at least `role`, or None if the user is not a member
        """
        return cls._fetch_single(
            "band_members",
            "id, band_id, user_id, role",
            {"band_id": normalize_uuid(band_id), "user_id": normalize_uuid(user_id)},
            "FETCH_MEMBERSHIP_FAILED",
        )

    @classmethod
    def fetch_memberships_for_user(cls, user_id: str | UUID) -> list[dict[str, Any]]:
        """Fetch every membership row (band_id, role, joined_at) for a user."""
        client = cls.get_client()
        user_id_str = normalize_uuid(user_id)

        try:
            response = (
                client.table("band_members")
                .select("band_id, role, joined_at")
                .eq("user_id", user_id_str)
                .execute()
            )
            memberships = response.data or []
            logger.debug(f"Fetched {len(memberships)} memberships for user {user_id_str}")
            return memberships

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to fetch memberships: {e}",
                code="FETCH_MEMBERSHIPS_FAILED",
                details={"user_id": user_id_str}
            )

    # -------------------------------------------------------------------------
    # Song Suggestions
    # -------------------------------------------------------------------------

    @classmethod
    def fetch_song_suggestion(cls, song_id: str | UUID) -> dict[str, Any] | None:
        """Fetch a suggestion's id, band and suggester, or None."""
        return cls._fetch_single(
            "song_suggestions",
            "id, band_id, suggested_by",
            {"id": normalize_uuid(song_id)},
            "FETCH_SONG_FAILED",
        )

    # -------------------------------------------------------------------------
    # Auth Users
    # -------------------------------------------------------------------------

    @classmethod
    def list_auth_users(cls, per_page: int | None = None) -> list[Any]:
        """
        List every auth user, walking the admin API page by page.

        Stops at the first page shorter than `per_page`.

        Raises:
            SupabaseClientError: If any page request fails
        """
        client = cls.get_client()
        per_page = per_page or AUTH_USERS_PAGE_SIZE
        users: list[Any] = []
        page = 1

        while True:
            try:
                batch = client.auth.admin.list_users(page=page, per_page=per_page)
            except Exception as e:
                raise SupabaseClientError(
                    message=f"Failed to list auth users: {e}",
                    code="LIST_USERS_FAILED",
                    details={"page": page},
                )

            batch = list(batch or [])
            users.extend(batch)
            if len(batch) < per_page:
                break
            page += 1

        logger.debug(f"Listed {len(users)} auth users over {page} page(s)")
        return users
