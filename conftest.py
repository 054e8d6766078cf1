import pytest
from rest_framework.test import APIClient

from photofeed.realtime import socketio as realtime


class RecordingSocketServer:
    """Stands in for the Socket.IO server; keeps every targeted emit."""

    def __init__(self):
        self.emitted: list[dict] = []

    async def emit(self, event, data=None, to=None, **kwargs):
        self.emitted.append({"event": event, "data": data, "to": to})

    def events_for(self, sid: str) -> list[dict]:
        return [e for e in self.emitted if e["to"] == sid]


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def socket_server(monkeypatch):
    """Route realtime delivery into a recorder and start with nobody online."""

    server = RecordingSocketServer()
    monkeypatch.setattr(realtime.dispatcher, "server", server)
    realtime.registry.clear()
    yield server
    realtime.registry.clear()


@pytest.fixture
def connect_user(socket_server):
    """Register a live connection for a user, as the gateway would."""

    def _connect(user, sid: str | None = None) -> str:
        sid = sid or f"sid-{user.pk}"
        realtime.registry.set(user.pk, sid)
        return sid

    return _connect
