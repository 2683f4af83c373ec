"""Core game engine for one room."""

from __future__ import annotations

import random
from typing import Any

from engine.dice import DiceOutcome
from engine.dice import OPENING_ROLLS
from engine.dice import roll_pair
from engine.dice import validate_die
from engine.dice import validate_physical_total
from engine.errors import InvalidStateError
from engine.errors import NotFoundError
from engine.errors import OutOfTurnError
from engine.history import DEFAULT_HISTORY_LIMIT
from engine.history import HistoryStack
from engine.reducer import apply_bank
from engine.reducer import apply_dice
from engine.reducer import apply_manual_advance
from engine.reducer import can_settle_round
from engine.reducer import finish_or_next_round
from engine.reducer import remove_player_at
from engine.reducer import start_round
from engine.serializer import dump_state as serializer_dump_state
from engine.serializer import load_state as serializer_load_state
from engine.serializer import winner_ids
from engine.state import DEFAULT_TOTAL_ROUNDS
from engine.state import GameState
from engine.state import GameStatus
from engine.state import Player


class BankGameEngine:
    """Stateful rules engine facade.

    Owns the player sequence, the game state and the undo history of one
    room. Every public mutator validates first, then snapshots, then
    mutates, so a rejected action never touches state or history. Host
    privileges are enforced by the caller, which owns the host id.
    """

    def __init__(
        self,
        *,
        total_rounds: int = DEFAULT_TOTAL_ROUNDS,
        history_limit: int = DEFAULT_HISTORY_LIMIT,
        rng: random.Random | None = None,
        rng_seed: int | None = None,
    ) -> None:
        self._players: list[Player] = []
        self._state = GameState(total_rounds=self._validate_total_rounds(total_rounds))
        self._history = HistoryStack(limit=history_limit)
        self._rng = rng if rng is not None else random.Random(rng_seed)

    @property
    def players(self) -> list[Player]:
        return self._players

    @property
    def state(self) -> GameState:
        return self._state

    @property
    def history(self) -> HistoryStack:
        return self._history

    @staticmethod
    def _validate_total_rounds(total_rounds: Any) -> int:
        if type(total_rounds) is not int or total_rounds < 1:
            raise InvalidStateError(f"total_rounds must be a positive integer, got {total_rounds!r}")
        return total_rounds

    def _snapshot(self) -> None:
        self._history.snapshot(self._players, self._state)

    def _index_of(self, player_id: str) -> int:
        for idx, player in enumerate(self._players):
            if player.id == player_id:
                return idx
        raise NotFoundError(f"player {player_id} not found")

    def find_player(self, player_id: str) -> Player:
        return self._players[self._index_of(player_id)]

    def has_player(self, player_id: str) -> bool:
        return any(player.id == player_id for player in self._players)

    def current_player(self) -> Player | None:
        if not self._players:
            return None
        return self._players[self._state.current_turn_index]

    def _require_playing(self) -> None:
        if self._state.status != GameStatus.PLAYING:
            raise InvalidStateError(f"game is {self._state.status.value}, not playing")

    def _require_turn(self, player_id: str) -> Player:
        self._require_playing()
        self.find_player(player_id)
        current = self._players[self._state.current_turn_index]
        if current.id != player_id:
            raise OutOfTurnError("not your turn")
        if not self._state.round_active:
            raise InvalidStateError("round is over")
        return current

    def add_player(self, player_id: str, name: str) -> Player:
        if self.has_player(player_id):
            return self.find_player(player_id)
        if self._state.status != GameStatus.WAITING:
            raise InvalidStateError("game already started")
        player = Player(id=player_id, name=name, turn_order=len(self._players))
        self._players.append(player)
        self._history.clear()
        return player

    def remove_player(self, player_id: str) -> bool:
        """Remove a player; True means the round is now fully banked and due for settlement."""
        idx = self._index_of(player_id)
        settlement_due = remove_player_at(self._players, self._state, idx)
        # Snapshots hold the old roster and cannot be restored safely.
        self._history.clear()
        return settlement_due

    def configure_rounds(self, total_rounds: int) -> None:
        if self._state.status != GameStatus.WAITING:
            raise InvalidStateError("rounds can only be configured while waiting")
        total_rounds = self._validate_total_rounds(total_rounds)
        self._snapshot()
        self._state.total_rounds = total_rounds

    def start_game(self) -> None:
        if self._state.status != GameStatus.WAITING:
            raise InvalidStateError("game already started")
        if not self._players:
            raise InvalidStateError("cannot start a game without players")
        self._snapshot()
        self._state.status = GameStatus.PLAYING
        start_round(self._players, self._state)

    def roll_dice(self, player_id: str, die1: int | None = None, die2: int | None = None) -> DiceOutcome:
        """Roll for the turn holder; client-supplied dice are used when both are given."""
        if (die1 is None) != (die2 is None):
            raise InvalidStateError("die1 and die2 must be given together")
        if die1 is not None:
            die1 = validate_die(die1)
            die2 = validate_die(die2)
        self._require_turn(player_id)

        if die1 is None or die2 is None:
            die1, die2 = roll_pair(self._rng)
        self._snapshot()
        return apply_dice(
            self._players,
            self._state,
            total=die1 + die2,
            is_doubles=die1 == die2,
            die1=die1,
            die2=die2,
        )

    def submit_physical_dice(self, player_id: str, value: int, is_doubles: bool) -> DiceOutcome:
        """Apply a total read off real dice; faces are only known for doubles."""
        value = validate_physical_total(value, bool(is_doubles))
        self._require_turn(player_id)

        self._snapshot()
        current = self._players[self._state.current_turn_index]
        current.use_physical_dice = True
        die = value // 2 if is_doubles else None
        return apply_dice(
            self._players,
            self._state,
            total=value,
            is_doubles=bool(is_doubles),
            die1=die,
            die2=die,
        )

    def bank(self, player_id: str) -> bool:
        """Bank the shared score; True means every player has now banked."""
        self._require_playing()
        if not self._state.round_active:
            raise InvalidStateError("round is over")
        if self._state.roll_count < OPENING_ROLLS:
            raise InvalidStateError(f"cannot bank before roll {OPENING_ROLLS}")
        player = self.find_player(player_id)
        if player.banked_this_round:
            raise InvalidStateError("already banked this round")

        self._snapshot()
        return apply_bank(self._players, self._state, player)

    def advance_turn(self) -> bool:
        """Manual advance; True when the round was closed rather than rotated."""
        self._require_playing()
        self._snapshot()
        return apply_manual_advance(self._players, self._state)

    def undo(self) -> None:
        snapshot = self._history.pop()
        self._players = snapshot.players
        self._state = snapshot.state

    def settle_round(self, expected_round: int) -> bool:
        """Delayed all-banked transition; a no-op if the round changed meanwhile."""
        if not can_settle_round(self._players, self._state, expected_round):
            return False
        self._snapshot()
        finish_or_next_round(self._players, self._state)
        return True

    def winners(self) -> list[Player]:
        ids = set(winner_ids(self._players))
        return [player for player in self._players if player.id in ids]

    def dump_state(self) -> dict[str, Any]:
        return serializer_dump_state(self._players, self._state)

    def load_state(self, payload: dict[str, Any]) -> None:
        self._players, self._state = serializer_load_state(payload)
        self._history.clear()


__all__ = ["BankGameEngine"]
