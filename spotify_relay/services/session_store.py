import threading
import time
from typing import Optional, Dict


class SessionCredential:
    """
    Process-wide Spotify credential for the single local user.

    access_token / refresh_token are always written together. Sync FastAPI
    handlers run on a thread pool, so every access goes through the lock.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._access_token: Optional[str] = None
        self._refresh_token: Optional[str] = None
        self._expires_at: Optional[int] = None

    # --------------------------
    # Read
    # --------------------------
    @property
    def access_token(self) -> Optional[str]:
        with self._lock:
            return self._access_token

    @property
    def refresh_token(self) -> Optional[str]:
        with self._lock:
            return self._refresh_token

    @property
    def is_authenticated(self) -> bool:
        with self._lock:
            return bool(self._access_token)

    def snapshot(self) -> Dict:
        with self._lock:
            return {
                "access_token": self._access_token,
                "refresh_token": self._refresh_token,
                "expires_at": self._expires_at,
            }

    # --------------------------
    # Write
    # --------------------------
    def store(self, access_token: str, refresh_token: Optional[str], expires_in: Optional[int] = None):
        # expires_at is informational; tokens are never expired locally
        expires_at = int(time.time()) + expires_in if expires_in else None
        with self._lock:
            self._access_token = access_token
            self._refresh_token = refresh_token
            self._expires_at = expires_at


_session = SessionCredential()


def get_session() -> SessionCredential:
    """FastAPI dependency returning the process-wide credential."""
    return _session
