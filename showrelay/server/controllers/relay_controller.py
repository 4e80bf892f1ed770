"""Forwarding of host snapshots and player/host side-channel events.

The relay does not look inside snapshots or action payloads. Its only rule is
who may send what: the session's host owns the snapshot and host actions,
joined players own buzzes and wall actions. Anything else is dropped without a
reply.
"""

from __future__ import annotations

import logging
from typing import Optional

from showrelay.common.events import ClientEvent, ServerEvent
from showrelay.server.models.session import ActionPayload, GameState
from showrelay.server.models.session_store import SessionNotFoundError, SessionStore
from showrelay.server.utils.channel import SocketIOChannel
from showrelay.server.utils.connection_registry import Binding
from showrelay.server.utils.metrics import RelayMetrics

logger = logging.getLogger(__name__)


class RelayController:
    def __init__(
        self,
        store: SessionStore,
        channel: SocketIOChannel,
        metrics: Optional[RelayMetrics] = None,
    ):
        self.store = store
        self.channel = channel
        self.metrics = metrics

    def sync_state(self, sid: str, binding: Binding, game_state: GameState) -> bool:
        """Store the host's snapshot and forward it to everyone else."""
        event = ClientEvent.SYNC_STATE.value
        if not binding.is_host:
            return self._reject(event, sid, "not_host")
        try:
            with self.store.locked(binding.code) as session:
                if not session.is_host(sid):
                    return self._reject(event, sid, "stale_host")
                session.replace_game_state(game_state)
                self.channel.broadcast(
                    session.code,
                    ServerEvent.SYNC_GAME_STATE.value,
                    game_state,
                    skip_sid=sid,
                )
        except SessionNotFoundError:
            return self._reject(event, sid, "no_session")
        return self._relayed(event, binding.code)

    def buzz_in(self, sid: str, binding: Binding) -> bool:
        event = ClientEvent.BUZZ_IN.value
        if binding.is_host:
            return self._reject(event, sid, "host")
        try:
            with self.store.locked(binding.code) as session:
                player = session.find_player(sid)
                if player is None:
                    return self._reject(event, sid, "not_member")
                self.channel.broadcast(
                    session.code,
                    ServerEvent.PLAYER_BUZZED.value,
                    {"playerName": player.name, "playerId": sid},
                )
        except SessionNotFoundError:
            return self._reject(event, sid, "no_session")
        logger.info("player_buzzed code=%s sid=%s name=%s", binding.code, sid, player.name)
        return self._relayed(event, binding.code)

    def host_action(self, sid: str, binding: Binding, action: ActionPayload) -> bool:
        event = ClientEvent.HOST_ACTION.value
        if not binding.is_host:
            return self._reject(event, sid, "not_host")
        try:
            with self.store.locked(binding.code) as session:
                if not session.is_host(sid):
                    return self._reject(event, sid, "stale_host")
                self.channel.broadcast(session.code, ServerEvent.GAME_ACTION.value, action)
        except SessionNotFoundError:
            return self._reject(event, sid, "no_session")
        return self._relayed(event, binding.code)

    def player_wall_action(self, sid: str, binding: Binding, action: ActionPayload) -> bool:
        event = ClientEvent.PLAYER_WALL_ACTION.value
        if binding.is_host:
            return self._reject(event, sid, "host")
        try:
            with self.store.locked(binding.code) as session:
                player = session.find_player(sid)
                if player is None:
                    return self._reject(event, sid, "not_member")
                self.channel.broadcast(
                    session.code,
                    ServerEvent.WALL_ACTION.value,
                    {"playerId": sid, "playerName": player.name, "action": action},
                )
        except SessionNotFoundError:
            return self._reject(event, sid, "no_session")
        return self._relayed(event, binding.code)

    def _relayed(self, event: str, code: str) -> bool:
        logger.debug("event_relayed event=%s code=%s", event, code)
        if self.metrics is not None:
            self.metrics.relayed(event)
        return True

    def _reject(self, event: str, sid: str, reason: str) -> bool:
        logger.info("event_rejected event=%s reason=%s sid=%s", event, reason, sid)
        if self.metrics is not None:
            self.metrics.rejected(event)
        return False
