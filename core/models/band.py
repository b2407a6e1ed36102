# =============================================================================
# core/models/band.py - Band and Membership Schemas
# =============================================================================
# Bands are referenced (never created or deleted) by this service.
# Memberships are read to authorize actions and written only when an admin
# provisions a new member.
# =============================================================================

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class MemberRole(str, Enum):
    """Role of a user inside one band."""
    ADMIN = "admin"
    MEMBER = "member"


class BandMembership(BaseModel):
    """
    Link between a user and a band.

    Only `role` matters for authorization; a missing membership row means
    the user is not in the band at all.
    """
    model_config = ConfigDict(extra="ignore")

    band_id: str
    user_id: str | None = None
    role: MemberRole = MemberRole.MEMBER
    joined_at: datetime | None = None

    @property
    def is_admin(self) -> bool:
        return self.role == MemberRole.ADMIN


# =============================================================================
# Request / Response Bodies
# =============================================================================

class CreateBandMemberRequest(BaseModel):
    """
    Body for POST /create-band-member.

    Field names keep the `p_` prefix used by the web client.
    """
    p_email: str | None = None
    p_band_id: str | None = None
    p_role: MemberRole | None = None
    p_display_name: str | None = Field(default=None, max_length=100)


class LoginInstructions(BaseModel):
    email: str
    password: str = "Use your band's shared password"
    note: str = "You can change your password after logging in"


class CreateBandMemberResponse(BaseModel):
    user_id: str
    message: str = "Band member account created/updated successfully"
    login_instructions: LoginInstructions
