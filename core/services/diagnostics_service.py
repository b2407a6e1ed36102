# =============================================================================
# core/services/diagnostics_service.py - Account and System Diagnostics
# =============================================================================
# Read-only reports used when a member cannot see their bands:
# - user_status: one user's memberships, bands and suggestion counts
# - system_status: project-wide counts and samples with recommendations
# =============================================================================

import logging
from typing import Any
from uuid import UUID

from app.config import settings
from core.errors import ForbiddenError, NotFoundError
from core.models.profile import DiagStatusResponse
from lib.supabase_client import SupabaseClient, SupabaseClientError
from lib.utils import is_uuid, normalize_uuid, utc_now

logger = logging.getLogger(__name__)


class DiagnosticsService:
    """Service for diagnostic reports."""

    # -------------------------------------------------------------------------
    # Per-user
    # -------------------------------------------------------------------------

    @staticmethod
    def resolve_target(
        caller_id: str | UUID,
        user_id: str | None = None,
        email: str | None = None,
    ) -> dict[str, Any]:
        """
        Find the profile a diagnostic request is about.

        Looks up `user_id` first, then `email`, defaulting to the caller.

        Raises:
            NotFoundError: If no profile matches (a user_id that is not a UUID never does)
            ForbiddenError: If the profile belongs to someone else
        """
        caller_id_str = normalize_uuid(caller_id)

        if user_id:
            profile = SupabaseClient.fetch_profile(user_id) if is_uuid(user_id) else None
        elif email:
            profile = SupabaseClient.fetch_profile_by_email(email)
        else:
            profile = SupabaseClient.fetch_profile(caller_id_str)

        if not profile:
            raise NotFoundError(
                "User not found",
                code="USER_NOT_FOUND",
                suggestion="Run fix-user-data to create a missing profile",
                details={k: v for k, v in {"user_id": user_id, "email": email}.items() if v},
            )

        if str(profile["id"]) != caller_id_str:
            logger.warning(f"User {caller_id_str} requested diagnostics for {profile['id']}")
            raise ForbiddenError("Diagnostics are only available for your own account")

        return profile

    @staticmethod
    def count_songs(band_ids: list[str]) -> dict[str, int]:
        """Number of song suggestions per band id (zero for bands with none)."""
        counts = {band_id: 0 for band_id in band_ids}
        if not band_ids:
            return counts

        client = SupabaseClient.get_client()
        try:
            response = (
                client.table("song_suggestions")
                .select("band_id")
                .in_("band_id", band_ids)
                .execute()
            )
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to count song suggestions: {e}",
                code="COUNT_SONGS_FAILED",
                details={"band_ids": band_ids},
            )

        for row in response.data or []:
            band_id = row.get("band_id")
            if band_id in counts:
                counts[band_id] += 1
        return counts

    @staticmethod
    def user_status(
        caller_id: str | UUID,
        user_id: str | None = None,
        email: str | None = None,
    ) -> DiagStatusResponse:
        profile = DiagnosticsService.resolve_target(caller_id, user_id=user_id, email=email)
        target_id = str(profile["id"])

        memberships = SupabaseClient.fetch_memberships_for_user(target_id)
        band_ids = [m["band_id"] for m in memberships]
        bands = SupabaseClient.fetch_bands(band_ids)

        return DiagStatusResponse(
            user_id=target_id,
            memberships=memberships,
            bands=bands,
            song_counts=DiagnosticsService.count_songs(band_ids),
        )

    # -------------------------------------------------------------------------
    # System-wide
    # -------------------------------------------------------------------------

    @staticmethod
    def _sample(table: str, columns: str) -> list[dict[str, Any]]:
        client = SupabaseClient.get_client()
        try:
            response = (
                client.table(table)
                .select(columns)
                .limit(settings.PROFILE_SAMPLE_SIZE)
                .execute()
            )
            return response.data or []
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to read {table}: {e}",
                code="DIAG_QUERY_FAILED",
                details={"table": table},
            )

    @staticmethod
    def system_status() -> dict[str, Any]:
        """
        Snapshot of auth users, profiles, bands and memberships.

        Shared band passwords are reported only as a count, never returned.
        """
        users = SupabaseClient.list_auth_users()

        confirmed = sum(1 for u in users if getattr(u, "email_confirmed_at", None))
        profiles = DiagnosticsService._sample("profiles", "id, email, display_name")
        bands = DiagnosticsService._sample("bands", "id, name, shared_password")
        members = DiagnosticsService._sample("band_members", "id, band_id, user_id, role")

        status: dict[str, Any] = {
            "timestamp": utc_now().isoformat(),
            "system": "operational",
            "auth": {
                "total_users": len(users),
                "confirmed_users": confirmed,
                "unconfirmed_users": len(users) - confirmed,
            },
            "profiles": {"total": len(profiles), "sample": profiles[:3]},
            "bands": {
                "total": len(bands),
                "with_shared_password": sum(1 for b in bands if b.get("shared_password")),
                "sample": [{"id": b["id"], "name": b.get("name")} for b in bands[:3]],
            },
            "band_members": {"total": len(members), "sample": members[:3]},
            "recommendations": [],
        }

        recommendations = status["recommendations"]
        if status["auth"]["unconfirmed_users"] > 0:
            recommendations.append("Some users have unconfirmed emails - this may cause login issues")
        if bands and status["bands"]["with_shared_password"] == 0:
            recommendations.append("No bands have shared passwords set - band members cannot be created")
        if len(profiles) < len(users) and len(profiles) < settings.PROFILE_SAMPLE_SIZE:
            recommendations.append("Some users are missing profiles - this will cause authentication issues")

        return status
