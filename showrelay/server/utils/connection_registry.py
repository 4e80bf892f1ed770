"""Side-table from connection id to the session role it holds.

The relay never stores protocol identity on transport objects; every event
handler resolves its sender here instead.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional


class Role(str, Enum):
    HOST = "host"
    PLAYER = "player"


@dataclass(frozen=True)
class Binding:
    """What a connection became after a successful create or join."""

    code: str
    role: Role

    @property
    def is_host(self) -> bool:
        return self.role is Role.HOST


# Placeholder while a create/join for the connection is in flight.
_PENDING = object()


class ConnectionRegistry:
    """Thread-safe connection id -> ``Binding`` table.

    A connection goes through ``claim`` exactly once; a second create or join
    from the same connection finds it claimed and is refused.
    """

    def __init__(self) -> None:
        self._entries: Dict[str, object] = {}
        self._lock = threading.Lock()

    def claim(self, sid: str) -> bool:
        """Reserve ``sid`` for binding. Returns False if it was ever claimed."""
        with self._lock:
            if sid in self._entries:
                return False
            self._entries[sid] = _PENDING
            return True

    def bind(self, sid: str, binding: Binding) -> bool:
        """Complete a claim. Returns False if ``sid`` disconnected meanwhile."""
        with self._lock:
            if self._entries.get(sid) is not _PENDING:
                return False
            self._entries[sid] = binding
            return True

    def release(self, sid: str) -> None:
        """Undo a ``claim`` whose create/join did not succeed."""
        with self._lock:
            if self._entries.get(sid) is _PENDING:
                del self._entries[sid]

    def lookup(self, sid: str) -> Optional[Binding]:
        with self._lock:
            entry = self._entries.get(sid)
        return entry if isinstance(entry, Binding) else None

    def unbind(self, sid: str) -> Optional[Binding]:
        """Forget ``sid`` entirely, returning its binding if it had one."""
        with self._lock:
            entry = self._entries.pop(sid, None)
        return entry if isinstance(entry, Binding) else None

    def __len__(self) -> int:
        with self._lock:
            return sum(1 for entry in self._entries.values() if isinstance(entry, Binding))
