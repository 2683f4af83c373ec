"""WebSocket heartbeat and message-loop utilities."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable
from collections.abc import Callable
from datetime import datetime
from datetime import timezone
import json
from typing import Any

from fastapi import WebSocketDisconnect

from .protocol import PING
from .protocol import PONG
from .protocol import ws_send_event

MessageHandler = Callable[[str], Awaitable[None]]


class HeartbeatState:
    """Track one websocket heartbeat ping/pong lifecycle."""

    def __init__(self) -> None:
        self.last_ping_at: float | None = None
        self.last_pong_at: float | None = None
        self.missed_pong_count = 0
        self._awaiting_pong = False
        self._pong_event = asyncio.Event()

    def mark_ping_sent(self) -> None:
        self.last_ping_at = datetime.now(timezone.utc).timestamp()
        self._awaiting_pong = True
        self._pong_event.clear()

    def mark_pong_received(self) -> None:
        self.last_pong_at = datetime.now(timezone.utc).timestamp()
        if not self._awaiting_pong:
            return
        self._awaiting_pong = False
        self.missed_pong_count = 0
        self._pong_event.set()

    async def wait_for_pong(self, *, timeout_seconds: float) -> bool:
        if not self._awaiting_pong:
            return True
        try:
            await asyncio.wait_for(self._pong_event.wait(), timeout=timeout_seconds)
        except TimeoutError:
            self._awaiting_pong = False
            self.missed_pong_count += 1
            return False
        return True


def heartbeat_kind(message: str) -> str | None:
    """Return PING/PONG for heartbeat frames, None for anything else."""
    if message in (PING, PONG):
        return message
    try:
        payload = json.loads(message)
    except json.JSONDecodeError:
        return None
    if not isinstance(payload, dict):
        return None
    kind = payload.get("type")
    if kind in (PING, PONG):
        return kind
    return None


async def send_heartbeat_ping(websocket: Any) -> None:
    await ws_send_event(websocket, PING, {})


async def reply_with_pong(websocket: Any) -> None:
    await ws_send_event(websocket, PONG, {})


async def heartbeat_loop(
    websocket: Any,
    *,
    heartbeat_state: HeartbeatState,
    interval_seconds: float = 30.0,
    pong_timeout_seconds: float = 10.0,
    max_missed_pongs: int = 2,
) -> None:
    sleep_after_probe = max(interval_seconds - pong_timeout_seconds, 0.0)
    while True:
        await send_heartbeat_ping(websocket)
        heartbeat_state.mark_ping_sent()
        pong_received = await heartbeat_state.wait_for_pong(timeout_seconds=pong_timeout_seconds)
        if (not pong_received) and heartbeat_state.missed_pong_count >= max_missed_pongs:
            await websocket.close(code=4408, reason="HEARTBEAT_TIMEOUT")
            return
        if sleep_after_probe > 0:
            await asyncio.sleep(sleep_after_probe)


async def ws_message_loop(
    websocket: Any,
    *,
    on_message: MessageHandler,
    interval_seconds: float = 30.0,
    pong_timeout_seconds: float = 10.0,
) -> None:
    """Read frames until disconnect; heartbeat frames never reach on_message."""
    heartbeat_state = HeartbeatState()
    heartbeat_task = asyncio.create_task(
        heartbeat_loop(
            websocket,
            heartbeat_state=heartbeat_state,
            interval_seconds=interval_seconds,
            pong_timeout_seconds=pong_timeout_seconds,
        )
    )
    try:
        while True:
            message = await websocket.receive_text()
            kind = heartbeat_kind(message)
            if kind == PING:
                await reply_with_pong(websocket)
            elif kind == PONG:
                heartbeat_state.mark_pong_received()
            else:
                await on_message(message)
    except WebSocketDisconnect:
        return
    finally:
        heartbeat_task.cancel()
        try:
            await heartbeat_task
        except asyncio.CancelledError:
            pass
