"""WebSocket wire protocol helpers."""

from __future__ import annotations

import json
from typing import Any

from pydantic import BaseModel
from pydantic import Field
from pydantic import ValidationError

WS_PROTOCOL_VERSION = 1

CREATE_ROOM = "CREATE_ROOM"
JOIN_ROOM = "JOIN_ROOM"
CONFIGURE_ROUNDS = "CONFIGURE_ROUNDS"
START_GAME = "START_GAME"
ROLL_DICE = "ROLL_DICE"
SUBMIT_PHYSICAL_DICE = "SUBMIT_PHYSICAL_DICE"
BANK = "BANK"
ADVANCE_TURN = "ADVANCE_TURN"
UNDO = "UNDO"
PING = "PING"
PONG = "PONG"

ROOM_CREATED = "ROOM_CREATED"
GAME_STATE_UPDATE = "GAME_STATE_UPDATE"
ERROR = "ERROR"

BAD_REQUEST = "BAD_REQUEST"


class ProtocolError(ValueError):
    """Raised when an inbound frame cannot be parsed into a client message."""


class ClientMessage(BaseModel):
    """Inbound envelope; the version field is optional for clients."""

    v: int = WS_PROTOCOL_VERSION
    type: str = Field(min_length=1)
    payload: dict[str, Any] = Field(default_factory=dict)


def ws_event(event_type: str, payload: dict[str, Any]) -> dict[str, Any]:
    return {"v": WS_PROTOCOL_VERSION, "type": event_type, "payload": payload}


async def ws_send_event(websocket: Any, event_type: str, payload: dict[str, Any]) -> None:
    message = ws_event(event_type, payload)
    if hasattr(websocket, "send_json"):
        await websocket.send_json(message)
        return
    if hasattr(websocket, "send_text"):
        await websocket.send_text(json.dumps(message))


def parse_client_message(raw: str) -> ClientMessage:
    """Parse one text frame; bare "PING"/"PONG" strings are accepted too."""
    if raw in (PING, PONG):
        return ClientMessage(type=raw)
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ProtocolError("message is not valid JSON") from exc
    if not isinstance(data, dict):
        raise ProtocolError("message must be a JSON object")
    try:
        return ClientMessage.model_validate(data)
    except ValidationError as exc:
        raise ProtocolError(f"malformed message: {exc.errors()[0]['msg']}") from exc


__all__ = [
    "BAD_REQUEST",
    "ClientMessage",
    "ERROR",
    "GAME_STATE_UPDATE",
    "ProtocolError",
    "ROOM_CREATED",
    "WS_PROTOCOL_VERSION",
    "parse_client_message",
    "ws_event",
    "ws_send_event",
]
