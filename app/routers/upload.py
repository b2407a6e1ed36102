# =============================================================================
# app/routers/upload.py - Avatar Upload
# =============================================================================
# Handles profile picture uploads: validation, storage, profile update.
# The target profile is always the caller's own, taken from the token.
# =============================================================================

import asyncio
import logging
from typing import Annotated

from fastapi import APIRouter, Depends, File, UploadFile

from app.auth import get_token_user, AuthUser
from core.errors import BadRequestError
from core.models.profile import AvatarUploadResponse
from core.services.profile_service import ProfileService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/upload-avatar", response_model=AvatarUploadResponse)
async def upload_avatar(
    file: Annotated[UploadFile | None, File(description="Image file to use as avatar")] = None,
    user: AuthUser = Depends(get_token_user),
):
    """
    Upload a new avatar for the caller.

    This endpoint:
    1. Validates the file (present, non-empty, image, size)
    2. Uploads it to the avatars bucket under the caller's id
    3. Points profiles.avatar_url at the public URL

    Token problems are reported as 400.
    """
    if file is None:
        raise BadRequestError("No file provided", code="NO_FILE")

    content = await file.read()
    logger.info(f"Processing avatar upload for {user.id}: {file.filename} ({len(content)} bytes)")

    public_url = await asyncio.to_thread(
        ProfileService.upload_avatar,
        user.id,
        content,
        file.filename,
        file.content_type,
    )
    return AvatarUploadResponse(publicUrl=public_url)
