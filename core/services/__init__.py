# =============================================================================
# core/services/__init__.py - Service Layer Exports
# =============================================================================

from .band_service import BandService
from .calendar_service import CalendarService, CalendarFeed
from .diagnostics_service import DiagnosticsService
from .member_service import MemberService
from .profile_service import ProfileService
from .song_service import SongService
from .storage_service import StorageService, StorageUploadError

__all__ = [
    "BandService",
    "CalendarService",
    "CalendarFeed",
    "DiagnosticsService",
    "MemberService",
    "ProfileService",
    "SongService",
    "StorageService",
    "StorageUploadError",
]
