# =============================================================================
# app/routers/users.py - Self-Service Account Repair
# =============================================================================

from fastapi import APIRouter, Depends

from app.auth import get_token_user, AuthUser
from core.models.profile import RepairResponse
from core.services.profile_service import ProfileService

router = APIRouter()


@router.post("/fix-user-data", response_model=RepairResponse)
def fix_user_data(user: AuthUser = Depends(get_token_user)):
    """
    Create the caller's missing profile and list their bands.

    Idempotent. Token problems are reported as 400.
    """
    return ProfileService.repair_user_data(user.id, user.email, user.user_metadata)
