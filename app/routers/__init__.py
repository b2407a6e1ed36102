# =============================================================================
# app/routers/ - API Route Definitions
# =============================================================================
# This package contains FastAPI routers organized by feature:
# - health.py: Health check endpoints
# - catalog.py: Spotify search and track metadata
# - songs.py: Song suggestion deletion
# - upload.py: Avatar upload
# - calendar_feed.py: Rehearsal iCalendar feed
# - users.py: Self-service account repair
# - members.py: Band member provisioning
# - diagnostics.py: Per-user and system diagnostics
#
# Each router is mounted in main.py with a URL prefix.
# =============================================================================

from . import health
from . import catalog
from . import songs
from . import upload
from . import calendar_feed
from . import users
from . import members
from . import diagnostics

__all__ = [
    "health",
    "catalog",
    "songs",
    "upload",
    "calendar_feed",
    "users",
    "members",
    "diagnostics",
]
