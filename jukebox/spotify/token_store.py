"""In-memory token state for the single shared Spotify identity.

The store is a process-wide singleton with no I/O and no locking: writes
are last-write-wins. Concurrent refreshes are serialised one level up, in
the gateway.
"""

from dataclasses import dataclass
import time
from typing import Callable, Optional

from jukebox.config import TOKEN_EXPIRY_MARGIN_SECONDS


@dataclass
class TokenRecord:
    access_token: str
    refresh_token: str
    expires_at: float


class TokenStore:
    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._clock = clock
        self._record: Optional[TokenRecord] = None

    def set_tokens(
        self, access_token: str, refresh_token: str, expires_in: float
    ) -> None:
        """Overwrite the record; expiry is computed from the current clock."""
        self._record = TokenRecord(
            access_token=access_token,
            refresh_token=refresh_token,
            expires_at=self._clock() + max(0, expires_in),
        )

    def get_access_token(self) -> Optional[str]:
        return self._record.access_token if self._record else None

    def get_refresh_token(self) -> Optional[str]:
        return self._record.refresh_token if self._record else None

    @property
    def expires_at(self) -> Optional[float]:
        return self._record.expires_at if self._record else None

    def has_token(self) -> bool:
        return bool(self._record and self._record.access_token)

    def is_expired(self) -> bool:
        """
        True when there is no token, or when it expires within the safety
        margin (refresh happens before the hard expiry so an in-flight
        request never carries a token that dies mid-way).
        """
        if self._record is None:
            return True
        return self._clock() >= self._record.expires_at - TOKEN_EXPIRY_MARGIN_SECONDS

    def clear(self) -> None:
        self._record = None
