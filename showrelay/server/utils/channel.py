"""Socket.IO delivery channel used by the controllers.

Controllers only ever talk to a ``SocketIOChannel``; it is the single place
that knows about Flask-SocketIO rooms and namespaces. Sends are fire-and-forget.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from flask_socketio import SocketIO

logger = logging.getLogger(__name__)

NAMESPACE = "/"

_NO_PAYLOAD = object()


class SocketIOChannel:
    """Unicast and room broadcast on top of a ``SocketIO`` instance."""

    def __init__(self, socketio: SocketIO, namespace: str = NAMESPACE):
        self.socketio = socketio
        self.namespace = namespace

    def send(self, sid: str, event: str, data: Any = _NO_PAYLOAD) -> None:
        """Deliver ``event`` to a single connection."""
        self._emit(event, data, to=sid)

    def broadcast(
        self,
        room: str,
        event: str,
        data: Any = _NO_PAYLOAD,
        skip_sid: Optional[str] = None,
    ) -> None:
        """Deliver ``event`` to every member of ``room``, optionally minus one."""
        self._emit(event, data, to=room, skip_sid=skip_sid)

    def enter_room(self, sid: str, room: str) -> None:
        self.socketio.server.enter_room(sid, room, namespace=self.namespace)

    def close_room(self, room: str) -> None:
        self.socketio.close_room(room, namespace=self.namespace)

    def _emit(self, event: str, data: Any, **kwargs: Any) -> None:
        logger.debug("channel_emit event=%s target=%s", event, kwargs.get("to"))
        if data is _NO_PAYLOAD:
            self.socketio.emit(event, namespace=self.namespace, **kwargs)
        else:
            self.socketio.emit(event, data, namespace=self.namespace, **kwargs)
