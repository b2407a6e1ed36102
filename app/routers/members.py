# =============================================================================
# app/routers/members.py - Band Member Provisioning
# =============================================================================

from fastapi import APIRouter, Depends

from app.auth import get_current_user, AuthUser
from core.models.band import CreateBandMemberRequest, CreateBandMemberResponse
from core.services.member_service import MemberService

router = APIRouter()


@router.post("/create-band-member", response_model=CreateBandMemberResponse)
def create_band_member(
    body: CreateBandMemberRequest,
    user: AuthUser = Depends(get_current_user),
):
    """
    Create or update a member account using the band's shared password.

    Caller must be an admin of `p_band_id`.
    """
    return MemberService.create_band_member(user.id, body)
