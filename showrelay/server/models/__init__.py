"""Session records and the in-memory store that owns them."""

from showrelay.server.models.session import (
    ActionPayload,
    GameState,
    Player,
    Session,
    default_game_state,
)
from showrelay.server.models.session_store import (
    SessionError,
    SessionExistsError,
    SessionNotFoundError,
    SessionStore,
)

__all__ = [
    "ActionPayload",
    "GameState",
    "Player",
    "Session",
    "default_game_state",
    "SessionError",
    "SessionExistsError",
    "SessionNotFoundError",
    "SessionStore",
]
