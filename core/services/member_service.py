# =============================================================================
# core/services/member_service.py - Band Member Provisioning
# =============================================================================
# Lets a band admin create (or re-key) an account for a new member:
# 1. Read the band's shared password
# 2. Find the auth user by email; reset its password or create it confirmed
# 3. Upsert the profile and the band membership
#
# New members log in with the band's shared password and change it later.
# =============================================================================

import logging
from typing import Any
from uuid import UUID

from core.errors import BadRequestError
from core.models.band import (
    CreateBandMemberRequest,
    CreateBandMemberResponse,
    LoginInstructions,
)
from core.services.band_service import BandService
from core.services.profile_service import ProfileService
from lib.supabase_client import SupabaseClient, SupabaseClientError

logger = logging.getLogger(__name__)


class MemberService:
    """Service for provisioning band member accounts."""

    @staticmethod
    def find_auth_user(email: str) -> Any | None:
        """Return the auth user with this email (case-insensitive), or None."""
        users = SupabaseClient.list_auth_users()

        wanted = email.lower()
        for user in users:
            if (getattr(user, "email", None) or "").lower() == wanted:
                return user
        return None

    @staticmethod
    def upsert_auth_user(email: str, password: str, display_name: str) -> str:
        """
        Create a confirmed auth user, or reset an existing one's password.

        Returns:
            The auth user id
        """
        client = SupabaseClient.get_client()
        existing = MemberService.find_auth_user(email)

        try:
            if existing is not None:
                client.auth.admin.update_user_by_id(existing.id, {"password": password})
                logger.info(f"Reset password for existing user {existing.id}")
                return str(existing.id)

            created = client.auth.admin.create_user({
                "email": email,
                "password": password,
                "email_confirm": True,
                "user_metadata": {"display_name": display_name},
            })
            logger.info(f"Created auth user {created.user.id} for {email}")
            return str(created.user.id)

        except Exception as e:
            logger.error(f"Failed to provision auth user for {email}: {e}")
            raise SupabaseClientError(
                message=f"Failed to create band member account: {e}",
                code="PROVISION_USER_FAILED",
                details={"email": email},
            )

    @staticmethod
    def upsert_membership(band_id: str, user_id: str, role: str) -> None:
        client = SupabaseClient.get_client()
        try:
            (
                client.table("band_members")
                .upsert(
                    {"band_id": band_id, "user_id": user_id, "role": role},
                    on_conflict="band_id,user_id",
                )
                .execute()
            )
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to add band member: {e}",
                code="UPSERT_MEMBER_FAILED",
                details={"band_id": band_id, "user_id": user_id},
            )

    @staticmethod
    def create_band_member(
        caller_id: str | UUID,
        request: CreateBandMemberRequest,
    ) -> CreateBandMemberResponse:
        """
        Provision a member account in a band the caller administers.

        Raises:
            BadRequestError: If a field is missing or the band has no shared password
            NotFoundError: If the band doesn't exist
            ForbiddenError: If the caller is not an admin of the band
            SupabaseClientError: If any data-store step fails
        """
        if not (request.p_email and request.p_band_id and request.p_role and request.p_display_name):
            raise BadRequestError("Missing required fields", code="MISSING_FIELDS")
        if "@" not in request.p_email:
            raise BadRequestError("Invalid email address", code="INVALID_EMAIL")

        band_id = request.p_band_id
        band = BandService.get_band(band_id, columns="id, shared_password")
        BandService.require_admin(band_id, caller_id)

        shared_password = band.get("shared_password")
        if not shared_password:
            raise BadRequestError(
                "Band does not have a shared password set",
                code="NO_SHARED_PASSWORD",
                suggestion="Set a shared password in the band settings first",
            )

        email = request.p_email.strip()
        user_id = MemberService.upsert_auth_user(email, shared_password, request.p_display_name)
        ProfileService.upsert_profile(user_id, email, request.p_display_name)
        MemberService.upsert_membership(band_id, user_id, request.p_role.value)

        logger.info(f"User {caller_id} added {user_id} to band {band_id} as {request.p_role.value}")
        return CreateBandMemberResponse(
            user_id=user_id,
            login_instructions=LoginInstructions(email=email),
        )
