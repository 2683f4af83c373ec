"""Per-connection sends and room-wide broadcasts."""

from __future__ import annotations

import logging
from typing import Any

import app.runtime as runtime
from app.api.room_views import room_detail
from app.rooms.registry import Room

from .protocol import ERROR
from .protocol import GAME_STATE_UPDATE
from .protocol import ws_send_event

logger = logging.getLogger(__name__)


async def send_to_player(player_id: str, event_type: str, payload: dict[str, Any]) -> bool:
    """Send to one connection; a failed send drops the stale socket."""
    websocket = runtime.connections.get(player_id)
    if websocket is None:
        return False
    try:
        await ws_send_event(websocket, event_type, payload)
    except Exception:
        logger.debug("dropping stale connection %s", player_id)
        runtime.connections.pop(player_id, None)
        return False
    return True


async def send_error(player_id: str, *, code: str, message: str) -> None:
    await send_to_player(player_id, ERROR, {"code": code, "message": message})


async def broadcast_room_state(room: Room) -> None:
    """Push the full room state to every current member."""
    payload = {"room": room_detail(room)}
    for player_id in room.player_ids():
        await send_to_player(player_id, GAME_STATE_UPDATE, payload)
