"""Round and turn transitions applied in-place to a room's players and state."""

from __future__ import annotations

from engine.dice import DiceOutcome
from engine.dice import resolve_dice
from engine.state import DiceRoll
from engine.state import GameState
from engine.state import GameStatus
from engine.state import Player


def all_banked(players: list[Player]) -> bool:
    return bool(players) and all(player.banked_this_round for player in players)


def start_round(players: list[Player], state: GameState) -> None:
    """Open the next round; turn order carries over from the previous round."""

    for player in players:
        player.banked_this_round = False
        player.use_physical_dice = False

    state.current_round += 1
    state.round_active = True
    state.shared_round_score = 0
    state.roll_count = 0
    state.last_roll = None
    state.current_turn_index = (state.current_turn_index + 1) % len(players)


def advance_turn(players: list[Player], state: GameState) -> None:
    """Move the turn to the next player who has not banked this round."""

    player_count = len(players)
    next_idx = (state.current_turn_index + 1) % player_count
    attempts = 0
    while players[next_idx].banked_this_round and attempts < player_count:
        next_idx = (next_idx + 1) % player_count
        attempts += 1

    state.current_turn_index = next_idx
    if all_banked(players):
        state.round_active = False


def rotate_turn(players: list[Player], state: GameState) -> None:
    """Raw one-step rotation, banked players are not skipped."""

    state.current_turn_index = (state.current_turn_index + 1) % len(players)


def apply_dice(
    players: list[Player],
    state: GameState,
    *,
    total: int,
    is_doubles: bool,
    die1: int | None,
    die2: int | None,
) -> DiceOutcome:
    state.last_roll = DiceRoll(die1=die1, die2=die2, total=total)
    outcome = resolve_dice(
        shared_score=state.shared_round_score,
        roll_count=state.roll_count,
        total=total,
        is_doubles=is_doubles,
    )
    state.shared_round_score = outcome.new_score
    state.roll_count += 1

    if outcome.round_dead:
        state.round_active = False
        # Banked players already hold their share; the dead pot is zero.
        for player in players:
            if player.banked_this_round:
                player.locked_score += outcome.new_score
    else:
        advance_turn(players, state)
    return outcome


def apply_bank(players: list[Player], state: GameState, player: Player) -> bool:
    """Lock the shared score for `player`; return True once everyone has banked."""

    player.locked_score += state.shared_round_score
    player.banked_this_round = True

    if all_banked(players):
        state.round_active = False
        return True

    if players[state.current_turn_index].id == player.id:
        advance_turn(players, state)
    return False


def finish_or_next_round(players: list[Player], state: GameState) -> GameStatus:
    if state.current_round < state.total_rounds:
        start_round(players, state)
    else:
        state.status = GameStatus.FINISHED
        state.round_active = False
    return state.status


def apply_manual_advance(players: list[Player], state: GameState) -> bool:
    """Host recovery: roll a dead/fully-banked round over, else rotate the turn.

    Returns True when the round was closed.
    """

    if not state.round_active or all_banked(players):
        if state.round_active:
            for player in players:
                if not player.banked_this_round:
                    player.locked_score += state.shared_round_score
        finish_or_next_round(players, state)
        return True

    rotate_turn(players, state)
    return False


def can_settle_round(players: list[Player], state: GameState, expected_round: int) -> bool:
    return (
        state.status == GameStatus.PLAYING
        and not state.round_active
        and state.current_round == expected_round
        and all_banked(players)
    )


def remove_player_at(players: list[Player], state: GameState, index: int) -> bool:
    """Drop one player and keep the turn pointer valid.

    Returns True when the removal leaves every remaining player banked in a
    live round, i.e. the round now needs settling.
    """

    turn_idx = state.current_turn_index
    players.pop(index)
    if not players:
        state.current_turn_index = 0
        return False

    if index < turn_idx:
        turn_idx -= 1
    turn_idx %= len(players)
    state.current_turn_index = turn_idx

    if state.status != GameStatus.PLAYING or not state.round_active:
        return False

    if all_banked(players):
        state.round_active = False
        return True

    if players[turn_idx].banked_this_round:
        # Step back one so the banked-skipping search starts at turn_idx.
        state.current_turn_index = (turn_idx - 1) % len(players)
        advance_turn(players, state)
    return False


__all__ = [
    "advance_turn",
    "all_banked",
    "apply_bank",
    "apply_dice",
    "apply_manual_advance",
    "can_settle_round",
    "finish_or_next_round",
    "remove_player_at",
    "rotate_turn",
    "start_round",
]
