"""Value types for one room's game state."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

DEFAULT_TOTAL_ROUNDS = 20


class GameStatus(str, Enum):
    WAITING = "waiting"
    PLAYING = "playing"
    FINISHED = "finished"


@dataclass(slots=True)
class Player:
    """One seated participant; `id` is the opaque connection identifier."""

    id: str
    name: str
    turn_order: int
    locked_score: int = 0
    banked_this_round: bool = False
    # Reserved: no transition sets this.
    eliminated: bool = False
    use_physical_dice: bool = False

    def copy(self) -> "Player":
        return Player(
            id=self.id,
            name=self.name,
            turn_order=self.turn_order,
            locked_score=self.locked_score,
            banked_this_round=self.banked_this_round,
            eliminated=self.eliminated,
            use_physical_dice=self.use_physical_dice,
        )


@dataclass(slots=True, frozen=True)
class DiceRoll:
    """Last dice outcome; faces are None for non-doubles physical submissions."""

    die1: int | None
    die2: int | None
    total: int


@dataclass(slots=True)
class GameState:
    status: GameStatus = GameStatus.WAITING
    current_round: int = 0
    total_rounds: int = DEFAULT_TOTAL_ROUNDS
    round_active: bool = False
    shared_round_score: int = 0
    roll_count: int = 0
    current_turn_index: int = 0
    last_roll: DiceRoll | None = None

    def copy(self) -> "GameState":
        # DiceRoll is frozen, so sharing the reference is safe.
        return GameState(
            status=self.status,
            current_round=self.current_round,
            total_rounds=self.total_rounds,
            round_active=self.round_active,
            shared_round_score=self.shared_round_score,
            roll_count=self.roll_count,
            current_turn_index=self.current_turn_index,
            last_roll=self.last_roll,
        )


def copy_players(players: Iterable[Player]) -> list[Player]:
    return [player.copy() for player in players]


__all__ = [
    "DEFAULT_TOTAL_ROUNDS",
    "DiceRoll",
    "GameState",
    "GameStatus",
    "Player",
    "copy_players",
]
