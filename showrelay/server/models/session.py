"""In-memory records for live game sessions."""

from __future__ import annotations

from copy import deepcopy
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

# Host-defined snapshot. The relay stores and forwards it without looking inside.
GameState = Dict[str, Any]
# Free-form host or wall action forwarded as received.
ActionPayload = Any


_INITIAL_GAME_STATE: GameState = {
    "score": 0,
    "view": "rounds",
    "currentRound": None,
    "currentQuestion": None,
    "cluesRevealed": 0,
    "answerRevealed": False,
    "completedQuestions": [],
    "timerStartTime": None,
    "timerStopped": False,
    "timerElapsedWhenStopped": 0,
    # Round 3: connecting wall
    "wallTiles": [],
    "selectedTiles": [],
    "solvedGroups": [],
    "wallLives": 3,
    "wallPhase": "solving",
    "connectionGuesses": [],
    "wallTimerReady": False,
    "showTimeUpModal": False,
    "showWallFrozenModal": False,
    # Round 4: missing vowels
    "vowelsCurrentCategory": 0,
    "vowelsCurrentClue": 0,
    "vowelsCategoryRevealed": False,
    "vowelsCategoryAnimating": False,
    "vowelsClueRevealed": False,
    "vowelsAnswerRevealed": False,
    "vowelsShowTimeUpModal": False,
}


def default_game_state() -> GameState:
    """Return a fresh copy of the state every new session starts from."""
    return deepcopy(_INITIAL_GAME_STATE)


@dataclass(frozen=True)
class Player:
    """A joined, non-host connection."""

    sid: str
    name: str
    number: int

    @property
    def role(self) -> str:
        return f"Player {self.number}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.sid,
            "name": self.name,
            "number": self.number,
            "role": self.role,
        }


@dataclass
class Session:
    """One running game: a fixed host, its players and the latest snapshot.

    Mutate only while holding the lock handed out by ``SessionStore.locked``.
    """

    code: str
    host_sid: str
    players: List[Player] = field(default_factory=list)
    game_state: GameState = field(default_factory=default_game_state)
    next_player_number: int = 1
    created_at: datetime = field(default_factory=datetime.now)

    def is_host(self, sid: str) -> bool:
        return sid == self.host_sid

    def find_player(self, sid: str) -> Optional[Player]:
        for player in self.players:
            if player.sid == sid:
                return player
        return None

    def remove_player(self, sid: str) -> Optional[Player]:
        """Drop the player bound to ``sid``; remaining numbers are left untouched."""
        player = self.find_player(sid)
        if player is not None:
            self.players = [p for p in self.players if p.sid != sid]
        return player

    def replace_game_state(self, game_state: GameState) -> None:
        # Single reference swap so readers see either the old or the new snapshot.
        self.game_state = game_state

    def players_payload(self) -> List[Dict[str, Any]]:
        return [player.to_dict() for player in self.players]
