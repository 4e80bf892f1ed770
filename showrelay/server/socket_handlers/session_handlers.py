"""Socket.IO handlers for session membership.

Creating and joining a game bind the connection to a session; a disconnect
unbinds it and cleans up the session it belonged to.
"""

import logging
from flask import request, current_app
from flask_socketio import emit

from showrelay.common.events import ClientEvent, ServerEvent

logger = logging.getLogger(__name__)


def register_handlers(socketio):
    """Register session lifecycle Socket.IO event handlers."""

    @socketio.on('connect')
    def handle_connect(auth=None):
        """Handle client connection."""
        logger.info("client_connected sid=%s", request.sid)
        emit(ServerEvent.CONNECTED.value, {'sid': request.sid})

    @socketio.on(ClientEvent.CREATE_GAME.value)
    def handle_create_game(game_code=None):
        """Create a game hosted by the sender.

        Expected data: "ABCD" (the game code as a bare string)
        """
        try:
            session_controller = current_app.extensions['session_controller']
            session_controller.create_game(request.sid, game_code)
        except Exception as e:
            logger.error("create_game_failed sid=%s error=%s", request.sid, e, exc_info=True)

    @socketio.on(ClientEvent.JOIN_GAME.value)
    def handle_join_game(data=None):
        """Join an existing game as the next player.

        Expected data: {
            "gameCode": "ABCD",
            "playerName": "Alice"
        }
        """
        try:
            if not isinstance(data, dict):
                logger.warning("join_game_rejected reason=invalid_payload sid=%s", request.sid)
                return

            game_code = data.get('gameCode', data.get('code'))
            player_name = data.get('playerName')

            session_controller = current_app.extensions['session_controller']
            session_controller.join_game(request.sid, game_code, player_name)
        except Exception as e:
            logger.error("join_game_failed sid=%s error=%s", request.sid, e, exc_info=True)

    @socketio.on('disconnect')
    def handle_disconnect(reason=None):
        """Handle client disconnection.

        Host loss ends the session for everybody in it; player loss only
        updates the player list.
        """
        try:
            session_controller = current_app.extensions['session_controller']
            session_controller.handle_disconnect(request.sid)
        except Exception as e:
            logger.error("disconnect_handler_error sid=%s error=%s", request.sid, e, exc_info=True)
