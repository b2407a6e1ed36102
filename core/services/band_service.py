# =============================================================================
# core/services/band_service.py - Band Lookups and Authorization
# =============================================================================
# Read-only access to bands and memberships, plus the role checks every
# band-scoped handler relies on.
# =============================================================================

import logging
from typing import Any
from uuid import UUID

from core.errors import ForbiddenError, NotFoundError
from core.models.band import BandMembership
from lib.supabase_client import SupabaseClient
from lib.utils import is_uuid, normalize_uuid

logger = logging.getLogger(__name__)


class BandService:
    """Service for band and membership queries."""

    @staticmethod
    def get_band(band_id: str | UUID, columns: str = "*") -> dict[str, Any]:
        """
        Get a band by ID.

        Raises:
            NotFoundError: If the band doesn't exist or band_id is not a UUID
        """
        band = SupabaseClient.fetch_band(band_id, columns=columns) if is_uuid(band_id) else None
        if not band:
            raise NotFoundError(
                "Band not found",
                code="BAND_NOT_FOUND",
                details={"band_id": normalize_uuid(band_id)},
            )
        return band

    @staticmethod
    def get_membership(
        band_id: str | UUID,
        user_id: str | UUID,
    ) -> BandMembership | None:
        """Return the user's membership in the band, or None."""
        row = SupabaseClient.fetch_membership(band_id, user_id)
        if not row:
            return None
        return BandMembership.model_validate(row)

    @staticmethod
    def is_admin(band_id: str | UUID, user_id: str | UUID) -> bool:
        membership = BandService.get_membership(band_id, user_id)
        return membership is not None and membership.is_admin

    @staticmethod
    def require_admin(band_id: str | UUID, user_id: str | UUID) -> None:
        """
        Raises:
            ForbiddenError: If the user is not an admin of the band
        """
        if not BandService.is_admin(band_id, user_id):
            logger.warning(f"User {user_id} is not an admin of band {band_id}")
            raise ForbiddenError(
                "Only band admins can perform this action",
                details={"band_id": normalize_uuid(band_id)},
            )

    @staticmethod
    def list_user_bands(user_id: str | UUID) -> list[dict[str, Any]]:
        """
        List a user's memberships, each joined with its band.

        Returns:
            [{"band_id": ..., "role": ..., "bands": {"id", "name", "invite_code"}}]
            `bands` is None when the membership points at a missing band.
        """
        memberships = SupabaseClient.fetch_memberships_for_user(user_id)
        band_ids = [m["band_id"] for m in memberships]
        bands_by_id = {b["id"]: b for b in SupabaseClient.fetch_bands(band_ids)}

        return [
            {
                "band_id": m["band_id"],
                "role": m.get("role"),
                "bands": bands_by_id.get(m["band_id"]),
            }
            for m in memberships
        ]
