"""In-process websocket double for driving the /ws handler without a server."""

from __future__ import annotations

import asyncio
import json
from typing import Any

from fastapi import WebSocketDisconnect

FLUSH_SECONDS = 0.01


class FakeWebSocket:
    def __init__(self) -> None:
        self.sent: list[dict[str, Any]] = []
        self.close_code: int | None = None
        self.accepted = asyncio.Event()
        self._inbound: asyncio.Queue[str | None] = asyncio.Queue()

    async def accept(self) -> None:
        self.accepted.set()

    async def close(self, *, code: int = 1000, reason: str | None = None) -> None:
        self.close_code = code
        self._inbound.put_nowait(None)

    async def send_json(self, payload: Any) -> None:
        self.sent.append(payload)

    async def receive_text(self) -> str:
        item = await self._inbound.get()
        if item is None:
            raise WebSocketDisconnect(code=1000)
        return item

    def push_text(self, text: str) -> None:
        self._inbound.put_nowait(text)

    async def say(self, event_type: str, payload: dict[str, Any] | None = None) -> None:
        """Send one client frame and let the server finish handling it."""
        self.push_text(json.dumps({"v": 1, "type": event_type, "payload": payload or {}}))
        await flush()

    def disconnect(self) -> None:
        self._inbound.put_nowait(None)

    def events(self, event_type: str) -> list[dict[str, Any]]:
        return [message["payload"] for message in self.sent if message["type"] == event_type]

    def last_room(self) -> dict[str, Any]:
        return self.events("GAME_STATE_UPDATE")[-1]["room"]

    def error_codes(self) -> list[str]:
        return [payload["code"] for payload in self.events("ERROR")]


async def flush() -> None:
    await asyncio.sleep(FLUSH_SECONDS)


async def connect(runtime: Any) -> tuple[FakeWebSocket, asyncio.Task[None], str]:
    """Open a /ws session; returns the socket, its handler task and the assigned player id."""
    from app.ws.routers import ws_game

    websocket = FakeWebSocket()
    task = asyncio.create_task(ws_game(websocket))
    await websocket.accepted.wait()
    await asyncio.sleep(0)
    player_id = next(pid for pid, sock in runtime.connections.items() if sock is websocket)
    return websocket, task, player_id


async def hang_up(websocket: FakeWebSocket, task: asyncio.Task[None]) -> None:
    websocket.disconnect()
    await asyncio.wait_for(task, timeout=1.0)
    await flush()
