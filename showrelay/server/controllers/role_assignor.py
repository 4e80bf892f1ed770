"""Player role assignment."""

from __future__ import annotations

from showrelay.server.models.session import Player, Session


def join_session(session: Session, connection_id: str, display_name: str) -> Player:
    """Append a new player to ``session`` and return it.

    Numbers come from the session's counter, which equals the current player
    count plus one until somebody leaves; after that it keeps climbing so a
    departed player's number is never handed out again. Display names are not
    checked for duplicates. Call with the session lock held.
    """
    player = Player(sid=connection_id, name=display_name, number=session.next_player_number)
    session.next_player_number += 1
    session.players.append(player)
    return player
