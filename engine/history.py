"""Bounded undo stack of pre-mutation snapshots."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass

from engine.errors import InvalidStateError
from engine.state import GameState
from engine.state import Player
from engine.state import copy_players

DEFAULT_HISTORY_LIMIT = 10


@dataclass(slots=True, frozen=True)
class Snapshot:
    players: list[Player]
    state: GameState


class HistoryStack:
    """LIFO of independent copies; the oldest entry is evicted past `limit`."""

    def __init__(self, limit: int = DEFAULT_HISTORY_LIMIT) -> None:
        if limit < 1:
            raise ValueError("history limit must be >= 1")
        self._limit = limit
        self._entries: deque[Snapshot] = deque()

    def __len__(self) -> int:
        return len(self._entries)

    def snapshot(self, players: list[Player], state: GameState) -> None:
        self._entries.append(Snapshot(players=copy_players(players), state=state.copy()))
        while len(self._entries) > self._limit:
            self._entries.popleft()

    def pop(self) -> Snapshot:
        if not self._entries:
            raise InvalidStateError("nothing to undo")
        snapshot = self._entries.pop()
        # Hand out fresh copies so the caller never aliases stack contents.
        return Snapshot(players=copy_players(snapshot.players), state=snapshot.state.copy())

    def clear(self) -> None:
        self._entries.clear()


__all__ = ["DEFAULT_HISTORY_LIMIT", "HistoryStack", "Snapshot"]
