"""Socket.IO event names exchanged between the relay and its clients.

The names match what the browser bundle emits and listens for, so they are
camelCase on the wire.
"""

from __future__ import annotations

from enum import Enum


class ClientEvent(str, Enum):
    """Events sent by clients to the relay."""

    CREATE_GAME = "createGame"
    JOIN_GAME = "joinGame"
    BUZZ_IN = "buzzIn"
    HOST_ACTION = "hostAction"
    SYNC_STATE = "syncState"
    PLAYER_WALL_ACTION = "playerWallAction"


class ServerEvent(str, Enum):
    """Events emitted by the relay."""

    CONNECTED = "connected"

    # Session replies (requesting connection only)
    GAME_CREATED = "gameCreated"
    GAME_CODE_EXISTS = "gameCodeExists"
    GAME_JOINED = "gameJoined"
    GAME_NOT_FOUND = "gameNotFound"

    # Session broadcasts
    PLAYERS_UPDATED = "playersUpdated"
    HOST_DISCONNECTED = "hostDisconnected"

    # Relayed state and actions
    SYNC_GAME_STATE = "syncGameState"
    PLAYER_BUZZED = "playerBuzzed"
    GAME_ACTION = "gameAction"
    WALL_ACTION = "wallAction"
