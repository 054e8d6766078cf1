"""Socket.IO server for the frontend.

Frontend convention:
- URL base: ws://<host>:8000, default Socket.IO path `/socket.io/`
- Identity: the `token` session cookie, `query.token` or `auth.token`
  (JWT access token). `query.userId` is honoured only when
  ``REALTIME_TRUST_USER_ID_QUERY`` is enabled.

Only targeted events are emitted (`newMessage`, `notification`); nothing is
broadcast. A connection without an identity is accepted but never receives
targeted events.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable
from collections.abc import Callable
from typing import Any
from urllib.parse import parse_qs

import socketio
from channels.db import database_sync_to_async
from django.conf import settings
from django.contrib.auth import get_user_model
from django.http.cookie import parse_cookie
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.settings import api_settings as jwt_settings
from rest_framework_simplejwt.tokens import AccessToken
from socketio.exceptions import ConnectionRefusedError as ConnectionRefused

from .dispatch import EventDispatcher
from .registry import IdentityRegistry

logger = logging.getLogger(__name__)


sio = socketio.AsyncServer(
    async_mode="asgi",
    cors_allowed_origins="*",
    logger=False,
    engineio_logger=False,
)


class UnknownUserError(Exception):
    """Raised when a valid token names a missing or inactive user."""


@database_sync_to_async
def _get_user_id_from_access_token(token: str) -> int:
    access = AccessToken(token)
    user_id = access[jwt_settings.USER_ID_CLAIM]
    user_model = get_user_model()
    exists = user_model.objects.filter(
        **{jwt_settings.USER_ID_FIELD: user_id, "is_active": True}
    ).exists()
    if not exists:
        raise UnknownUserError(str(user_id))
    return int(user_id)


def _scope(environ: Any) -> Any:
    if isinstance(environ, dict) and "asgi.scope" in environ:
        inner = environ.get("asgi.scope")
        if isinstance(inner, dict):
            return inner
    return environ


def _query_params(scope: Any) -> dict[str, list[str]]:
    query_string: str | bytes = ""
    if isinstance(scope, dict) and "query_string" in scope:
        query_string = scope.get("query_string", b"")
    elif isinstance(scope, dict) and "QUERY_STRING" in scope:
        query_string = scope.get("QUERY_STRING", "")

    if isinstance(query_string, (bytes, bytearray)):
        query_string = query_string.decode(errors="ignore")
    return parse_qs(str(query_string))


def _cookies(scope: Any) -> dict[str, str]:
    if not isinstance(scope, dict):
        return {}
    raw = scope.get("HTTP_COOKIE", "")
    for name, value in scope.get("headers", []) or []:
        if name.lower() == b"cookie":
            raw = value.decode("latin-1")
            break
    return parse_cookie(raw) if raw else {}


def extract_token(environ: dict[str, Any], auth: Any | None) -> str | None:
    """Find the session token in query string, auth payload or cookie.

    Handles python-socketio environ shapes across ASGI/WSGI servers.
    """

    scope = _scope(environ)
    token = _query_params(scope).get("token", [None])[0]
    if isinstance(token, str) and token:
        return token

    if isinstance(auth, dict):
        auth_token = auth.get("token")
        if isinstance(auth_token, str) and auth_token:
            return auth_token

    cookie_token = _cookies(scope).get(settings.AUTH_COOKIE_NAME)
    if cookie_token:
        return cookie_token

    return None


def extract_claimed_user_id(environ: dict[str, Any]) -> str | None:
    value = _query_params(_scope(environ)).get("userId", [None])[0]
    if isinstance(value, str) and value.strip() and value.strip() != "undefined":
        return value.strip()
    return None


class PresenceGateway:
    """Bridges Socket.IO connection lifecycle to the identity registry.

    Identification awaits the database, and the transport may report the
    disconnect before it finishes. Such a connection is never registered.
    """

    def __init__(
        self,
        registry: IdentityRegistry,
        *,
        resolve_token: Callable[[str], Awaitable[int]] = _get_user_id_from_access_token,
    ):
        self.registry = registry
        self.resolve_token = resolve_token
        # sid -> closed while still identifying; touched only on the event loop
        self._pending: dict[str, bool] = {}

    async def identify(self, environ: dict[str, Any], auth: Any | None) -> str | None:
        token = extract_token(environ, auth)
        if token:
            try:
                user_id = await self.resolve_token(token)
            except TokenError as exc:
                # Frontend expects this exact string to trigger a fresh login.
                if "expired" in str(exc).lower():
                    msg = "jwt_expired"
                    raise ConnectionRefused(msg) from exc
                msg = "unauthorized"
                raise ConnectionRefused(msg) from exc
            except UnknownUserError as exc:
                msg = "unauthorized"
                raise ConnectionRefused(msg) from exc
            return str(user_id)

        if getattr(settings, "REALTIME_TRUST_USER_ID_QUERY", False):
            return extract_claimed_user_id(environ)
        return None

    async def connect(
        self,
        sid: str,
        environ: dict[str, Any],
        auth: Any | None = None,
    ) -> str | None:
        self._pending[sid] = False
        try:
            user_id = await self.identify(environ, auth)
        finally:
            closed = self._pending.pop(sid, False)
        if closed:
            logger.info("Socket %s closed before it was identified", sid)
            return None
        if user_id is None:
            logger.info("Socket %s connected without identity; not registered", sid)
            return None
        replaced = self.registry.set(user_id, sid)
        if replaced:
            logger.info("User %s reconnected: %s replaces %s", user_id, sid, replaced)
        else:
            logger.info("User %s connected as %s", user_id, sid)
        return user_id

    async def disconnect(self, sid: str) -> str | None:
        if sid in self._pending:
            self._pending[sid] = True
        user_id = self.registry.remove(sid)
        if user_id is not None:
            logger.info("User %s disconnected (%s)", user_id, sid)
        return user_id


registry = IdentityRegistry()
gateway = PresenceGateway(registry)
dispatcher = EventDispatcher(sio, registry)


@sio.event
async def connect(sid: str, environ: dict[str, Any], auth: Any | None = None):
    try:
        await gateway.connect(sid, environ, auth)
    except ConnectionRefused:
        raise
    except Exception as exc:
        logger.exception("Socket.IO connect error")
        msg = "server_error"
        raise ConnectionRefused(msg) from exc


@sio.event
async def disconnect(sid: str, reason: Any = None):
    await gateway.disconnect(sid)


def emit_event_to_user(user_id: int | str, event: str, payload: Any) -> bool:
    """Push ``event`` to the user's live connection, if any."""

    return dispatcher.notify(user_id, event, payload)
