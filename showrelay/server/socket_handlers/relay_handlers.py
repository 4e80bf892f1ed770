"""Socket.IO handlers for in-game traffic.

The host pushes full state snapshots and host actions; players buzz in and
act on the wall. Payloads are forwarded untouched.
"""

import logging
from flask import request, current_app

from showrelay.common.events import ClientEvent
from showrelay.server.utils.connection_guard import socket_bound

logger = logging.getLogger(__name__)


def register_handlers(socketio):
    """Register relay Socket.IO event handlers."""

    @socketio.on(ClientEvent.SYNC_STATE.value)
    @socket_bound
    def sync_state(binding, game_state=None):
        """Replace the stored snapshot and push it to the other clients.

        Expected data: the complete game state document (host only)
        """
        try:
            relay_controller = current_app.extensions['relay_controller']
            relay_controller.sync_state(request.sid, binding, game_state)
        except Exception as e:
            logger.error("sync_state_failed sid=%s error=%s", request.sid, e, exc_info=True)

    @socketio.on(ClientEvent.BUZZ_IN.value)
    @socket_bound
    def buzz_in(binding, *_ignored):
        """Announce a player's buzz to the whole game."""
        try:
            relay_controller = current_app.extensions['relay_controller']
            relay_controller.buzz_in(request.sid, binding)
        except Exception as e:
            logger.error("buzz_in_failed sid=%s error=%s", request.sid, e, exc_info=True)

    @socketio.on(ClientEvent.HOST_ACTION.value)
    @socket_bound
    def host_action(binding, action=None):
        """Broadcast a host action, sender included."""
        try:
            relay_controller = current_app.extensions['relay_controller']
            relay_controller.host_action(request.sid, binding, action)
        except Exception as e:
            logger.error("host_action_failed sid=%s error=%s", request.sid, e, exc_info=True)

    @socketio.on(ClientEvent.PLAYER_WALL_ACTION.value)
    @socket_bound
    def player_wall_action(binding, action=None):
        """Broadcast a player's connecting-wall move tagged with who made it.

        Expected data: opaque, e.g. {"type": "selectTile", "index": 4}
        """
        try:
            relay_controller = current_app.extensions['relay_controller']
            relay_controller.player_wall_action(request.sid, binding, action)
        except Exception as e:
            logger.error("player_wall_action_failed sid=%s error=%s", request.sid, e, exc_info=True)
