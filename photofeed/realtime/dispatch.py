from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from typing import Any

from asgiref.sync import async_to_sync

if TYPE_CHECKING:  # import for type checking only
    import socketio

    from .registry import IdentityRegistry

logger = logging.getLogger(__name__)


class EventDispatcher:
    """Best-effort push of a named event to one user's live connection.

    At most once, no queue, no retry and no acknowledgement. An offline
    recipient simply misses the event.
    """

    def __init__(self, server: socketio.AsyncServer, registry: IdentityRegistry):
        self.server = server
        self.registry = registry

    def notify(self, target_user_id: int | str, event: str, payload: Any) -> bool:
        """Emit ``event`` to ``target_user_id`` if connected.

        Safe to call from sync Django code (views, on_commit hooks). Returns
        whether the event was handed to the transport.
        """

        sid = self.registry.get(target_user_id)
        if sid is None:
            logger.debug("Skip %s for user %s: not connected", event, target_user_id)
            return False
        try:
            async_to_sync(self.server.emit)(event, payload, to=sid)
        except Exception:  # noqa: BLE001 - delivery failures never reach the caller
            logger.warning(
                "Failed to emit %s to user %s (sid=%s)",
                event,
                target_user_id,
                sid,
                exc_info=True,
            )
            return False
        return True
