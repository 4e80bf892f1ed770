"""Pytest configuration and fixtures for relay server tests."""

from collections import defaultdict
from typing import Any, Dict, List, Optional, Set, Tuple

import pytest

from showrelay.common.config import Settings
from showrelay.server.controllers import RelayController, SessionController
from showrelay.server.models import SessionStore
from showrelay.server.utils.connection_registry import ConnectionRegistry
from showrelay.server.utils.metrics import RelayMetrics


class FakeChannel:
    """In-memory stand-in for SocketIOChannel.

    Resolves room membership at send time and appends ``(event, data)`` to
    each recipient's inbox, which is what a connected client would observe.
    """

    def __init__(self):
        self.rooms: Dict[str, Set[str]] = defaultdict(set)
        self.inbox: Dict[str, List[Tuple[str, Any]]] = defaultdict(list)
        self.closed_rooms: List[str] = []

    def send(self, sid: str, event: str, data: Any = None) -> None:
        self.inbox[sid].append((event, data))

    def broadcast(self, room: str, event: str, data: Any = None,
                  skip_sid: Optional[str] = None) -> None:
        for sid in sorted(self.rooms.get(room, ())):
            if sid != skip_sid:
                self.inbox[sid].append((event, data))

    def enter_room(self, sid: str, room: str) -> None:
        self.rooms[room].add(sid)

    def close_room(self, room: str) -> None:
        self.closed_rooms.append(room)
        self.rooms.pop(room, None)

    def drop(self, sid: str) -> None:
        """Forget a connection the way the transport does after a disconnect."""
        for members in self.rooms.values():
            members.discard(sid)

    def received(self, sid: str, event: Optional[str] = None) -> List[Any]:
        """Drain ``sid``'s inbox, keeping only ``event`` payloads when given."""
        messages = self.inbox.pop(sid, [])
        if event is None:
            return messages
        return [data for name, data in messages if name == event]


@pytest.fixture
def channel():
    return FakeChannel()


@pytest.fixture
def store():
    return SessionStore()


@pytest.fixture
def registry():
    return ConnectionRegistry()


@pytest.fixture
def metrics():
    return RelayMetrics()


@pytest.fixture
def session_controller(store, registry, channel, metrics):
    return SessionController(store, registry, channel, metrics)


@pytest.fixture
def relay_controller(store, channel, metrics):
    return RelayController(store, channel, metrics)


@pytest.fixture
def disconnect(session_controller, channel):
    """Simulate a transport-level disconnect for ``sid``."""

    def _disconnect(sid: str) -> None:
        session_controller.handle_disconnect(sid)
        channel.drop(sid)

    return _disconnect


# ---------------------------------------------------------------------------
# Full application fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def settings(tmp_path):
    """Settings for an in-process app: threading mode, bundle in a temp dir."""
    (tmp_path / "index.html").write_text("<html><body>relay</body></html>")
    return Settings.from_env({
        "SOCKETIO_ASYNC_MODE": "threading",
        "STATIC_FOLDER": str(tmp_path),
        "LOG_LEVEL": "DEBUG",
    })


@pytest.fixture
def app(settings):
    """Create application instance for testing via the real factory."""
    from showrelay.server.app import create_app

    application = create_app(settings)
    application.config['TESTING'] = True
    return application


@pytest.fixture
def client(app):
    """Create HTTP test client."""
    return app.test_client()


class RelayClient:
    """Socket.IO test client that remembers its own connection id."""

    def __init__(self, test_client):
        self.test_client = test_client
        greeting = [m for m in test_client.get_received() if m['name'] == 'connected']
        self.sid = greeting[0]['args'][0]['sid']

    def emit(self, event: str, *args: Any) -> None:
        self.test_client.emit(event, *args)

    def received(self, event: Optional[str] = None) -> List[Any]:
        """Drain pending messages; with ``event``, return just its payloads."""
        messages = self.test_client.get_received()
        if event is None:
            return messages
        return [m['args'][0] if m['args'] else None for m in messages if m['name'] == event]

    def disconnect(self) -> None:
        self.test_client.disconnect()


@pytest.fixture
def connect(app):
    """Factory fixture opening Socket.IO connections against ``app``."""
    socketio = app.extensions['socketio']
    opened: List[RelayClient] = []

    def _connect() -> RelayClient:
        relay_client = RelayClient(socketio.test_client(app))
        opened.append(relay_client)
        return relay_client

    yield _connect

    for relay_client in opened:
        if relay_client.test_client.is_connected():
            relay_client.disconnect()
