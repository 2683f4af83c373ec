"""WebSocket route handler for the room/game channel."""

from __future__ import annotations

from uuid import uuid4

from fastapi import APIRouter
from fastapi import WebSocket
from fastapi import WebSocketDisconnect

import app.runtime as runtime

from .gateway import handle_client_message
from .gateway import handle_disconnect
from .heartbeat import ws_message_loop

router = APIRouter()


@router.websocket("/ws")
async def ws_game(websocket: WebSocket) -> None:
    """One connection is one player id for its lifetime."""
    await websocket.accept()
    player_id = uuid4().hex
    runtime.connections[player_id] = websocket

    async def on_message(message: str) -> None:
        await handle_client_message(player_id, message)

    try:
        await ws_message_loop(
            websocket,
            on_message=on_message,
            interval_seconds=runtime.settings.bank_heartbeat_interval_seconds,
            pong_timeout_seconds=runtime.settings.bank_heartbeat_pong_timeout_seconds,
        )
    except WebSocketDisconnect:
        return
    finally:
        await handle_disconnect(player_id)
