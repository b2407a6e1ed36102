# =============================================================================
# core/models/profile.py - User Profile Schemas
# =============================================================================
# Profiles mirror auth users in the public `profiles` table. This service
# creates them (repair / member provisioning) and updates avatar URLs; it
# never deletes them.
# =============================================================================

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ProfileSample(BaseModel):
    """Trimmed profile used in diagnostic samples."""
    model_config = ConfigDict(extra="ignore")

    id: str
    email: str | None = None
    display_name: str | None = None


class AvatarUploadResponse(BaseModel):
    publicUrl: str


# =============================================================================
# Repair / Diagnostics Bodies
# =============================================================================

class UserBand(BaseModel):
    """A membership joined with the band it points to."""
    band_id: str
    role: str
    bands: dict[str, Any] | None = None


class RepairDebug(BaseModel):
    all_profiles_sample: list[ProfileSample] = Field(default_factory=list)


class RepairResponse(BaseModel):
    """Body returned by POST /fix-user-data."""
    user_id: str
    email: str | None = None
    has_profile: bool
    bands: list[UserBand] = Field(default_factory=list)
    bands_count: int = 0
    debug: RepairDebug


class DiagStatusRequest(BaseModel):
    """Body for POST /diag-status. Both fields optional; defaults to the caller."""
    email: str | None = None
    user_id: str | None = None


class DiagStatusResponse(BaseModel):
    user_id: str
    memberships: list[dict[str, Any]] = Field(default_factory=list)
    bands: list[dict[str, Any]] = Field(default_factory=list)
    song_counts: dict[str, int] = Field(default_factory=dict)
