# =============================================================================
# lib/token_cache.py - Access Token Cache
# =============================================================================
# Holds one third-party access token together with its expiry time.
#
# The cache is lock-free: two callers that both see an expired token will both
# call the fetcher and the last write wins. A duplicate client-credentials
# exchange is cheap, so refreshes are not serialized.
#
# Usage:
#   cache = TokenCache(margin_seconds=60)
#   token = cache.get_token(fetch)   # fetch() -> (access_token, expires_in)
# =============================================================================

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable

logger = logging.getLogger(__name__)

# fetch() returns (access_token, expires_in_seconds)
TokenFetcher = Callable[[], tuple[str, int]]


@dataclass(frozen=True)
class CachedToken:
    """A token and the epoch time (seconds) after which it must be refreshed."""

    token: str
    expires_at: float

    def is_valid(self, now: float) -> bool:
        return now < self.expires_at


class TokenCache:
    """
    Single-slot, time-bounded token memo.

    Args:
        margin_seconds: Subtracted from the upstream lifetime so a token is
            never used right at its expiry.
        clock: Returns the current epoch time in seconds.
    """

    def __init__(
        self,
        margin_seconds: int = 60,
        clock: Callable[[], float] = time.time,
    ):
        self.margin_seconds = margin_seconds
        self._clock = clock
        self._slot: CachedToken | None = None

    @property
    def current(self) -> CachedToken | None:
        return self._slot

    def get_token(self, fetch: TokenFetcher) -> str:
        """
        Return the cached token, refreshing through `fetch` when expired.

        Exceptions raised by `fetch` propagate and leave the slot untouched.
        """
        slot = self._slot
        if slot is not None and slot.is_valid(self._clock()):
            return slot.token

        token, expires_in = fetch()
        expires_at = self._clock() + expires_in - self.margin_seconds
        self._slot = CachedToken(token=token, expires_at=expires_at)
        logger.debug(f"Cached new access token (valid for {expires_in - self.margin_seconds}s)")
        return token

    def invalidate(self) -> None:
        """Drop the cached token so the next call refreshes."""
        self._slot = None
