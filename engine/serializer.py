"""State serializer helpers for room snapshots and broadcast payloads."""

from __future__ import annotations

from typing import Any

from engine.state import DiceRoll
from engine.state import GameState
from engine.state import GameStatus
from engine.state import Player

_PLAYER_FIELDS = (
    "id",
    "name",
    "locked_score",
    "banked_this_round",
    "eliminated",
    "turn_order",
    "use_physical_dice",
)
_STATE_FIELDS = (
    "status",
    "current_round",
    "total_rounds",
    "round_active",
    "shared_round_score",
    "roll_count",
    "current_turn_index",
    "last_roll",
)


def _assert_int(value: Any, path: str, *, minimum: int = 0) -> None:
    if type(value) is not int or value < minimum:
        raise AssertionError(f"{path} must be int >= {minimum}")


def _assert_bool(value: Any, path: str) -> None:
    if type(value) is not bool:
        raise AssertionError(f"{path} must be bool")


def _assert_players_canonical(players: Any) -> None:
    if not isinstance(players, list):
        raise AssertionError("players must be list")

    seen_ids: set[str] = set()
    for idx, player in enumerate(players):
        if not isinstance(player, dict):
            raise AssertionError(f"players[{idx}] must be object")
        for field in _PLAYER_FIELDS:
            if field not in player:
                raise AssertionError(f"players[{idx}].{field} is required")
        player_id = player["id"]
        if not isinstance(player_id, str) or not player_id:
            raise AssertionError(f"players[{idx}].id must be non-empty string")
        if player_id in seen_ids:
            raise AssertionError("players must not contain duplicate ids")
        seen_ids.add(player_id)
        _assert_int(player["locked_score"], f"players[{idx}].locked_score")
        _assert_int(player["turn_order"], f"players[{idx}].turn_order")
        for flag in ("banked_this_round", "eliminated", "use_physical_dice"):
            _assert_bool(player[flag], f"players[{idx}].{flag}")


def _assert_last_roll(value: Any) -> None:
    if value is None:
        return
    if not isinstance(value, dict):
        raise AssertionError("game_state.last_roll must be null or object")
    for face in ("die1", "die2"):
        die = value.get(face)
        if die is not None and (type(die) is not int or not 1 <= die <= 6):
            raise AssertionError(f"game_state.last_roll.{face} must be null or 1..6")
    total = value.get("total")
    if type(total) is not int or not 2 <= total <= 12:
        raise AssertionError("game_state.last_roll.total must be 2..12")


def _assert_state_canonical(state: Any, player_count: int) -> None:
    if not isinstance(state, dict):
        raise AssertionError("game_state must be object")
    for field in _STATE_FIELDS:
        if field not in state:
            raise AssertionError(f"game_state.{field} is required")

    try:
        status = GameStatus(state["status"])
    except ValueError as exc:
        raise AssertionError("game_state.status is unknown") from exc

    _assert_int(state["current_round"], "game_state.current_round")
    _assert_int(state["total_rounds"], "game_state.total_rounds", minimum=1)
    _assert_bool(state["round_active"], "game_state.round_active")
    _assert_int(state["shared_round_score"], "game_state.shared_round_score")
    _assert_int(state["roll_count"], "game_state.roll_count")
    _assert_int(state["current_turn_index"], "game_state.current_turn_index")
    _assert_last_roll(state["last_roll"])

    if status == GameStatus.PLAYING and state["current_turn_index"] >= player_count:
        raise AssertionError("game_state.current_turn_index must index into players")


def dump_player(player: Player) -> dict[str, Any]:
    return {field: getattr(player, field) for field in _PLAYER_FIELDS}


def dump_last_roll(last_roll: DiceRoll | None) -> dict[str, Any] | None:
    if last_roll is None:
        return None
    return {"die1": last_roll.die1, "die2": last_roll.die2, "total": last_roll.total}


def dump_game_state(state: GameState) -> dict[str, Any]:
    return {
        "status": state.status.value,
        "current_round": state.current_round,
        "total_rounds": state.total_rounds,
        "round_active": state.round_active,
        "shared_round_score": state.shared_round_score,
        "roll_count": state.roll_count,
        "current_turn_index": state.current_turn_index,
        "last_roll": dump_last_roll(state.last_roll),
    }


def dump_state(players: list[Player], state: GameState) -> dict[str, Any]:
    """Export players and game state as a JSON-ready dict."""

    return {
        "players": [dump_player(player) for player in players],
        "game_state": dump_game_state(state),
    }


def load_state(payload: dict[str, Any]) -> tuple[list[Player], GameState]:
    """Validate a dumped payload and rebuild independent value objects."""

    players_raw = payload.get("players")
    _assert_players_canonical(players_raw)
    state_raw = payload.get("game_state")
    _assert_state_canonical(state_raw, len(players_raw))

    players = [Player(**{field: player[field] for field in _PLAYER_FIELDS}) for player in players_raw]
    last_roll_raw = state_raw["last_roll"]
    last_roll = None
    if last_roll_raw is not None:
        last_roll = DiceRoll(
            die1=last_roll_raw.get("die1"),
            die2=last_roll_raw.get("die2"),
            total=last_roll_raw["total"],
        )
    state = GameState(
        status=GameStatus(state_raw["status"]),
        current_round=state_raw["current_round"],
        total_rounds=state_raw["total_rounds"],
        round_active=state_raw["round_active"],
        shared_round_score=state_raw["shared_round_score"],
        roll_count=state_raw["roll_count"],
        current_turn_index=state_raw["current_turn_index"],
        last_roll=last_roll,
    )
    return players, state


def winner_ids(players: list[Player]) -> list[str]:
    """Ids of every player tied for the highest locked score."""

    if not players:
        return []
    best = max(player.locked_score for player in players)
    return [player.id for player in players if player.locked_score == best]


__all__ = [
    "dump_game_state",
    "dump_last_roll",
    "dump_player",
    "dump_state",
    "load_state",
    "winner_ids",
]
