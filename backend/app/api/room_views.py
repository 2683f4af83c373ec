"""Room view builders used by REST and WS responses."""

from __future__ import annotations

from typing import Any

from app.rooms.registry import Room
from engine.serializer import winner_ids
from engine.state import GameStatus


def room_summary(room: Room) -> dict[str, object]:
    state = room.engine.state
    return {
        "room_code": room.code,
        "status": state.status.value,
        "player_count": len(room.engine.players),
        "current_round": state.current_round,
        "total_rounds": state.total_rounds,
    }


def room_detail(room: Room) -> dict[str, Any]:
    """Full room state broadcast to members after every accepted mutation."""
    snapshot = room.engine.dump_state()
    finished = room.status == GameStatus.FINISHED
    return {
        "room_code": room.code,
        "host_id": room.host_id,
        "players": snapshot["players"],
        "game_state": snapshot["game_state"],
        "can_undo": len(room.engine.history) > 0,
        "settlement_pending": room.settlement_task is not None and not room.settlement_task.done(),
        "winner_ids": winner_ids(room.engine.players) if finished else [],
    }
