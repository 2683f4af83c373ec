"""Dice rolling and outcome resolution."""

from __future__ import annotations

from dataclasses import dataclass
import random

from engine.errors import InvalidStateError

OPENING_ROLLS = 3
LUCKY_SEVEN = 7
LUCKY_SEVEN_BONUS = 70
DIE_FACES = range(1, 7)
MIN_TOTAL = 2
MAX_TOTAL = 12


@dataclass(slots=True, frozen=True)
class DiceOutcome:
    new_score: int
    round_dead: bool
    is_doubles: bool


def is_opening_phase(roll_count: int) -> bool:
    return roll_count < OPENING_ROLLS


def resolve_dice(*, shared_score: int, roll_count: int, total: int, is_doubles: bool) -> DiceOutcome:
    """Resolve one dice action against the shared round score.

    During the opening phase a seven is worth 70 and everything else adds its
    face value; doubles do not matter. Afterwards a seven kills the round,
    doubles double the pot and any other total adds its face value. Totals of
    2 and 12 are not blocked in either phase.
    """

    if is_opening_phase(roll_count):
        bonus = LUCKY_SEVEN_BONUS if total == LUCKY_SEVEN else total
        return DiceOutcome(new_score=shared_score + bonus, round_dead=False, is_doubles=is_doubles)

    if total == LUCKY_SEVEN:
        return DiceOutcome(new_score=0, round_dead=True, is_doubles=is_doubles)
    if is_doubles:
        return DiceOutcome(new_score=shared_score * 2, round_dead=False, is_doubles=True)
    return DiceOutcome(new_score=shared_score + total, round_dead=False, is_doubles=False)


def roll_pair(rng: random.Random) -> tuple[int, int]:
    return rng.randint(1, 6), rng.randint(1, 6)


def validate_die(value: object) -> int:
    if type(value) is not int or value not in DIE_FACES:
        raise InvalidStateError(f"die value must be 1..6, got {value!r}")
    return value


def validate_physical_total(value: object, is_doubles: bool) -> int:
    if type(value) is not int or not MIN_TOTAL <= value <= MAX_TOTAL:
        raise InvalidStateError(f"dice total must be {MIN_TOTAL}..{MAX_TOTAL}, got {value!r}")
    if is_doubles and value % 2 != 0:
        raise InvalidStateError(f"doubles total must be even, got {value}")
    if not is_doubles and value in (MIN_TOTAL, MAX_TOTAL):
        raise InvalidStateError(f"a total of {value} is only possible as doubles")
    return value


__all__ = [
    "DiceOutcome",
    "LUCKY_SEVEN",
    "LUCKY_SEVEN_BONUS",
    "OPENING_ROLLS",
    "is_opening_phase",
    "resolve_dice",
    "roll_pair",
    "validate_die",
    "validate_physical_total",
]
