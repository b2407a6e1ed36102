# =============================================================================
# core/models/ - Pydantic Data Models
# =============================================================================
# This package contains Pydantic schemas for data validation:
# - band.py: Bands, memberships and member provisioning bodies
# - profile.py: Profiles, repair and diagnostics bodies
# - rehearsal.py: Rehearsals consumed by the calendar feed
# - song.py: Song suggestions
# - track.py: Spotify upstream shapes and the normalized TrackRecord
#
# These models define the "contract" between API and clients.
# =============================================================================

from .band import (
    BandMembership,
    CreateBandMemberRequest,
    CreateBandMemberResponse,
    LoginInstructions,
    MemberRole,
)
from .profile import (
    AvatarUploadResponse,
    DiagStatusRequest,
    DiagStatusResponse,
    ProfileSample,
    RepairDebug,
    RepairResponse,
    UserBand,
)
from .rehearsal import Rehearsal, RehearsalStatus
from .song import (
    DeleteSuggestionRequest,
    DeleteSuggestionResponse,
    SongSuggestion,
    SuggestionStatus,
)
from .track import (
    SpotifyAlbum,
    SpotifyArtist,
    SpotifyImage,
    SpotifySearchResponse,
    SpotifyTokenResponse,
    SpotifyTrack,
    TrackMetadataRequest,
    TrackMetadataResponse,
    TrackRecord,
    TrackSearchRequest,
    TrackSearchResponse,
)

__all__ = [
    # Bands
    "BandMembership",
    "CreateBandMemberRequest",
    "CreateBandMemberResponse",
    "LoginInstructions",
    "MemberRole",
    # Profiles
    "AvatarUploadResponse",
    "DiagStatusRequest",
    "DiagStatusResponse",
    "ProfileSample",
    "RepairDebug",
    "RepairResponse",
    "UserBand",
    # Rehearsals
    "Rehearsal",
    "RehearsalStatus",
    # Songs
    "DeleteSuggestionRequest",
    "DeleteSuggestionResponse",
    "SongSuggestion",
    "SuggestionStatus",
    # Tracks
    "SpotifyAlbum",
    "SpotifyArtist",
    "SpotifyImage",
    "SpotifySearchResponse",
    "SpotifyTokenResponse",
    "SpotifyTrack",
    "TrackMetadataRequest",
    "TrackMetadataResponse",
    "TrackRecord",
    "TrackSearchRequest",
    "TrackSearchResponse",
]
