"""Session creation, joining and teardown on connection loss.

Owns the connection registry: a connection becomes bound here on a successful
``createGame`` or ``joinGame`` and is forgotten here when it disconnects.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Optional

from showrelay.common.events import ServerEvent
from showrelay.server.controllers.role_assignor import join_session
from showrelay.server.models.session import Player, Session
from showrelay.server.models.session_store import (
    SessionExistsError,
    SessionNotFoundError,
    SessionStore,
)
from showrelay.server.utils.channel import SocketIOChannel
from showrelay.server.utils.connection_registry import Binding, ConnectionRegistry, Role
from showrelay.server.utils.metrics import RelayMetrics

logger = logging.getLogger(__name__)


class SessionController:
    def __init__(
        self,
        store: SessionStore,
        registry: ConnectionRegistry,
        channel: SocketIOChannel,
        metrics: Optional[RelayMetrics] = None,
    ):
        self.store = store
        self.registry = registry
        self.channel = channel
        self.metrics = metrics

    def create_game(self, sid: str, code: Any) -> Optional[Session]:
        """Create session ``code`` with ``sid`` as its host.

        Replies ``gameCreated`` or ``gameCodeExists`` to the requester. A
        connection that already created or joined a game is ignored.
        """
        if not isinstance(code, str) or not code:
            logger.warning("create_game_rejected reason=invalid_code sid=%s", sid)
            self._rejected("createGame")
            return None
        if not self.registry.claim(sid):
            logger.info("create_game_rejected reason=already_bound sid=%s code=%s", sid, code)
            self._rejected("createGame")
            return None

        try:
            with self.store.created(code, sid) as session:
                if not self.registry.bind(sid, Binding(code=code, role=Role.HOST)):
                    # Host went away while the session was being set up.
                    self.store.delete_session(code)
                    self._refresh_gauges()
                    return None
                self.channel.enter_room(sid, code)
                self.channel.send(
                    sid,
                    ServerEvent.GAME_CREATED.value,
                    {"gameCode": code, "role": Role.HOST.value},
                )
        except SessionExistsError:
            self.registry.release(sid)
            logger.info("create_game_code_exists code=%s sid=%s", code, sid)
            self.channel.send(sid, ServerEvent.GAME_CODE_EXISTS.value)
            return None
        self._refresh_gauges()
        return session

    def join_game(self, sid: str, code: Any, player_name: Any) -> Optional[Player]:
        """Add ``sid`` as the next player of session ``code``.

        On success the joiner gets ``gameJoined`` followed by a one-off
        ``syncGameState`` catch-up, and the whole room gets ``playersUpdated``.
        An unknown code yields ``gameNotFound`` to the requester only.
        """
        if not self.registry.claim(sid):
            logger.info("join_game_rejected reason=already_bound sid=%s code=%s", sid, code)
            self._rejected("joinGame")
            return None

        name = "" if player_name is None else str(player_name)
        try:
            if not isinstance(code, str):
                raise SessionNotFoundError(str(code))
            with self.store.locked(code) as session:
                player = join_session(session, sid, name)
                if not self.registry.bind(sid, Binding(code=code, role=Role.PLAYER)):
                    session.remove_player(sid)
                    return None

                self.channel.enter_room(sid, code)
                self.channel.send(
                    sid,
                    ServerEvent.GAME_JOINED.value,
                    {
                        "gameCode": code,
                        "role": f"{Role.PLAYER.value}{player.number}",
                        "playerNumber": player.number,
                        "playerName": name,
                    },
                )
                self.channel.broadcast(
                    code,
                    ServerEvent.PLAYERS_UPDATED.value,
                    {"players": session.players_payload()},
                )
                self.channel.send(sid, ServerEvent.SYNC_GAME_STATE.value, session.game_state)
        except SessionNotFoundError:
            self.registry.release(sid)
            logger.info("join_game_not_found code=%s sid=%s", code, sid)
            self.channel.send(sid, ServerEvent.GAME_NOT_FOUND.value)
            return None

        logger.info(
            "player_joined code=%s sid=%s name=%s number=%d",
            code, sid, name, player.number,
        )
        self._refresh_gauges()
        return player

    def handle_disconnect(self, sid: str) -> None:
        """Tear down whatever ``sid`` was bound to.

        A host leaving ends the session for everyone; a player leaving is
        removed from the list without renumbering the others.
        """
        binding = self.registry.unbind(sid)
        if binding is None:
            logger.info("client_disconnected sid=%s bound=false", sid)
            return

        try:
            with self.store.locked(binding.code) as session:
                if binding.is_host:
                    self._end_session(sid, session)
                else:
                    self._remove_player(sid, session)
        except SessionNotFoundError:
            logger.info("client_disconnected sid=%s code=%s session=gone", sid, binding.code)
        self._refresh_gauges()

    def _end_session(self, sid: str, session: Session) -> None:
        if not session.is_host(sid):
            return
        self.channel.broadcast(session.code, ServerEvent.HOST_DISCONNECTED.value, skip_sid=sid)
        self.store.delete_session(session.code)
        self.channel.close_room(session.code)
        duration = (datetime.now() - session.created_at).total_seconds()
        logger.info(
            "game_ended code=%s reason=host_disconnected duration_seconds=%.0f",
            session.code, duration,
        )

    def _remove_player(self, sid: str, session: Session) -> None:
        player = session.remove_player(sid)
        if player is None:
            return
        self.channel.broadcast(
            session.code,
            ServerEvent.PLAYERS_UPDATED.value,
            {"players": session.players_payload()},
            skip_sid=sid,
        )
        logger.info(
            "player_left code=%s sid=%s name=%s number=%d remaining=%d",
            session.code, sid, player.name, player.number, len(session.players),
        )

    def _rejected(self, event: str) -> None:
        if self.metrics is not None:
            self.metrics.rejected(event)

    def _refresh_gauges(self) -> None:
        if self.metrics is not None:
            self.metrics.active_sessions.set(self.store.session_count())
            self.metrics.active_players.set(self.store.player_count())
