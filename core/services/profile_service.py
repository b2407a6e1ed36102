# =============================================================================
# core/services/profile_service.py - Profile Business Logic
# =============================================================================
# Handles the self-service profile operations:
# - avatar upload (storage + profiles.avatar_url)
# - user-data repair (create a missing profile, report memberships)
#
# Callers pass the identity resolved from the bearer token; nothing here
# accepts a user id chosen by the client.
# =============================================================================

import logging
from typing import Any
from uuid import UUID, uuid4

from app.config import settings
from core.errors import BadRequestError
from core.models.profile import ProfileSample, RepairDebug, RepairResponse, UserBand
from core.services.band_service import BandService
from core.services.storage_service import StorageService
from lib.supabase_client import SupabaseClient, SupabaseClientError
from lib.utils import email_local_part, normalize_uuid, utc_now

logger = logging.getLogger(__name__)

DEFAULT_DISPLAY_NAME = "User"
DEFAULT_AVATAR_EXTENSION = "png"


def default_display_name(email: str | None, user_metadata: dict[str, Any] | None) -> str:
    """
    Display name for a profile created without user input.

    Order: metadata display_name, email local part, "User".
    """
    from_metadata = (user_metadata or {}).get("display_name")
    if isinstance(from_metadata, str) and from_metadata.strip():
        return from_metadata.strip()
    return email_local_part(email) or DEFAULT_DISPLAY_NAME


def _avatar_extension(filename: str | None) -> str:
    if filename and "." in filename:
        ext = filename.rsplit(".", 1)[1].lower()
        if ext.isalnum():
            return ext
    return DEFAULT_AVATAR_EXTENSION


class ProfileService:
    """Service for profile operations."""

    # -------------------------------------------------------------------------
    # Profiles
    # -------------------------------------------------------------------------

    @staticmethod
    def upsert_profile(
        user_id: str | UUID,
        email: str | None,
        display_name: str,
    ) -> dict[str, Any]:
        """
        Insert or update a profile keyed on id.

        Raises:
            SupabaseClientError: If the upsert fails
        """
        client = SupabaseClient.get_client()
        now = utc_now().isoformat()
        data = {
            "id": normalize_uuid(user_id),
            "email": email,
            "display_name": display_name,
            "updated_at": now,
        }

        try:
            response = (
                client.table("profiles")
                .upsert(data, on_conflict="id")
                .execute()
            )
            rows = response.data or []
            logger.info(f"Upserted profile for user {data['id']}")
            return rows[0] if rows else data

        except Exception as e:
            logger.error(f"Failed to upsert profile: {e}")
            raise SupabaseClientError(
                message=f"Failed to create profile: {e}",
                code="UPSERT_PROFILE_FAILED",
                details={"user_id": data["id"]},
            )

    @staticmethod
    def ensure_profile(
        user_id: str | UUID,
        email: str | None,
        user_metadata: dict[str, Any] | None = None,
    ) -> tuple[dict[str, Any], bool]:
        """
        Make sure the user has a profile row.

        Returns:
            (profile, created) - created is False when one already existed
        """
        existing = SupabaseClient.fetch_profile(user_id)
        if existing:
            return existing, False

        profile = ProfileService.upsert_profile(
            user_id,
            email,
            default_display_name(email, user_metadata),
        )
        return profile, True

    @staticmethod
    def sample_profiles(limit: int | None = None) -> list[dict[str, Any]]:
        """First few profiles (id, email, display_name) for diagnostics."""
        client = SupabaseClient.get_client()

        try:
            response = (
                client.table("profiles")
                .select("id, email, display_name")
                .limit(limit or settings.PROFILE_SAMPLE_SIZE)
                .execute()
            )
            return response.data or []

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to sample profiles: {e}",
                code="SAMPLE_PROFILES_FAILED",
            )

    @staticmethod
    def repair_user_data(
        user_id: str | UUID,
        email: str | None,
        user_metadata: dict[str, Any] | None = None,
    ) -> RepairResponse:
        """
        Create the caller's profile if missing and report their bands.

        Safe to call repeatedly: the profile is upserted on id, so a second
        call never creates a second row.
        """
        user_id_str = normalize_uuid(user_id)
        _, created = ProfileService.ensure_profile(user_id_str, email, user_metadata)
        if created:
            logger.info(f"Repaired missing profile for user {user_id_str}")

        bands = BandService.list_user_bands(user_id_str)
        sample = ProfileService.sample_profiles()

        return RepairResponse(
            user_id=user_id_str,
            email=email,
            has_profile=True,
            bands=[UserBand(**band) for band in bands],
            bands_count=len(bands),
            debug=RepairDebug(
                all_profiles_sample=[ProfileSample.model_validate(p) for p in sample]
            ),
        )

    # -------------------------------------------------------------------------
    # Avatars
    # -------------------------------------------------------------------------

    @staticmethod
    def upload_avatar(
        user_id: str | UUID,
        file_content: bytes,
        filename: str | None,
        content_type: str | None,
    ) -> str:
        """
        Store a new avatar and point the user's profile at it.

        Returns:
            Public URL of the uploaded image

        Raises:
            BadRequestError: If the file is empty, too large or not an image
            StorageUploadError: If the upload fails
            SupabaseClientError: If the profile update fails
        """
        if not file_content:
            raise BadRequestError("No file provided", code="NO_FILE")

        if len(file_content) > settings.max_avatar_size_bytes:
            size_mb = len(file_content) / (1024 * 1024)
            raise BadRequestError(
                f"File too large: {size_mb:.1f}MB (max: {settings.MAX_AVATAR_SIZE_MB}MB)",
                code="FILE_TOO_LARGE",
                suggestion=f"Upload an image smaller than {settings.MAX_AVATAR_SIZE_MB}MB",
            )

        content_type = content_type or "image/png"
        if not content_type.startswith("image/"):
            raise BadRequestError(
                f"Invalid file type: {content_type}",
                code="INVALID_FILE_TYPE",
                suggestion="Upload a PNG, JPEG, GIF or WebP image",
            )

        user_id_str = normalize_uuid(user_id)
        path = f"{user_id_str}/{uuid4().hex}.{_avatar_extension(filename)}"
        bucket = settings.AVATAR_BUCKET

        StorageService.upload_file(bucket, path, file_content, content_type)
        public_url = StorageService.get_public_url(bucket, path)

        client = SupabaseClient.get_client()
        try:
            (
                client.table("profiles")
                .update({"avatar_url": public_url, "updated_at": utc_now().isoformat()})
                .eq("id", user_id_str)
                .execute()
            )
        except Exception as e:
            logger.error(f"Profile update error: {e}")
            StorageService.delete_file(bucket, path)
            raise SupabaseClientError(
                message=f"Failed to update profile avatar: {e}",
                code="UPDATE_PROFILE_FAILED",
                details={"user_id": user_id_str},
            )

        logger.info(f"Updated avatar for user {user_id_str}: {path}")
        return public_url
