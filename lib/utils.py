# =============================================================================
# lib/utils.py - Shared Utilities
# =============================================================================
# Common utilities used across the application.
# =============================================================================

import re
from datetime import datetime, timezone
from uuid import UUID


# =============================================================================
# UUID Utilities
# =============================================================================

def normalize_uuid(value: str | UUID) -> str:
    """
    Normalize a UUID to string format.

    Handles both string and UUID objects, ensuring consistent string output.

    Example:
        band_id = normalize_uuid(uuid_obj)  # "550e8400-..."
        band_id = normalize_uuid("550e8400-...")  # "550e8400-..."
    """
    return str(value) if isinstance(value, UUID) else value


def is_uuid(value: str | UUID | None) -> bool:
    """
    True when `value` parses as a UUID.

    Ids that are not UUIDs can never match a row in a uuid column, so callers
    treat them as "not found" instead of sending them to Postgres.
    """
    if isinstance(value, UUID):
        return True
    if not value:
        return False
    try:
        UUID(str(value))
    except ValueError:
        return False
    return True


# =============================================================================
# Date Utilities
# =============================================================================

def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


# =============================================================================
# String Utilities
# =============================================================================

_NON_ALNUM = re.compile(r"[^A-Za-z0-9]")


def sanitize_filename(name: str) -> str:
    """
    Replace every character that is not an ASCII letter or digit with "_".

    Example:
        sanitize_filename("The Beat-Les!")  # "The_Beat_Les_"
    """
    return _NON_ALNUM.sub("_", name)


def email_local_part(email: str | None) -> str | None:
    """Return the part of an email address before "@", or None."""
    if not email:
        return None
    local = email.split("@", 1)[0]
    return local or None
