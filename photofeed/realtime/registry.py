"""Process-wide mapping from a user to their live Socket.IO connection.

One entry per user: a later connection from the same user replaces the
earlier one. Nothing is persisted, so after a restart every user is offline
until they reconnect.
"""

from __future__ import annotations

import threading


def _key(user_id: int | str) -> str:
    return str(user_id).strip()


class IdentityRegistry:
    """Thread-safe ``user_id -> sid`` map with reverse removal by ``sid``.

    Socket.IO handlers run on the event loop while Django views run in worker
    threads, so every access goes through one lock.
    """

    def __init__(self) -> None:
        self._sid_by_user: dict[str, str] = {}
        self._user_by_sid: dict[str, str] = {}
        self._lock = threading.Lock()

    def set(self, user_id: int | str, sid: str) -> str | None:
        """Register ``sid`` for ``user_id``; return the sid it replaced."""
        key = _key(user_id)
        with self._lock:
            previous = self._sid_by_user.get(key)
            if previous is not None and previous != sid:
                self._user_by_sid.pop(previous, None)
            stale_user = self._user_by_sid.get(sid)
            if stale_user is not None and stale_user != key:
                self._sid_by_user.pop(stale_user, None)
            self._sid_by_user[key] = sid
            self._user_by_sid[sid] = key
        return previous if previous != sid else None

    def get(self, user_id: int | str) -> str | None:
        with self._lock:
            return self._sid_by_user.get(_key(user_id))

    def remove(self, sid: str) -> str | None:
        """Drop whatever entry points at ``sid``; return the user it belonged to.

        A superseded connection no longer owns an entry, so its disconnect
        leaves the newer connection registered.
        """
        with self._lock:
            key = self._user_by_sid.pop(sid, None)
            if key is not None and self._sid_by_user.get(key) == sid:
                del self._sid_by_user[key]
        return key

    def online_user_ids(self) -> list[str]:
        with self._lock:
            return list(self._sid_by_user)

    def clear(self) -> None:
        with self._lock:
            self._sid_by_user.clear()
            self._user_by_sid.clear()

    def __contains__(self, user_id: object) -> bool:
        if not isinstance(user_id, (int, str)):
            return False
        return self.get(user_id) is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._sid_by_user)
