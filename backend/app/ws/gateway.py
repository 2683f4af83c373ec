"""Inbound action dispatch for the room/game websocket channel."""

from __future__ import annotations

from collections.abc import Awaitable
from collections.abc import Callable
import logging
from typing import Any

from pydantic import ValidationError

import app.runtime as runtime
from app.rooms.models import ConfigureRoundsRequest
from app.rooms.models import CreateRoomRequest
from app.rooms.models import JoinRoomRequest
from app.rooms.models import PhysicalDiceRequest
from app.rooms.models import RollDiceRequest
from app.rooms.registry import RemovalResult
from app.rooms.registry import Room
from app.rooms.settlement import schedule_settlement
from engine.errors import EngineError
from engine.state import GameStatus

from .broadcast import broadcast_room_state
from .broadcast import send_error
from .broadcast import send_to_player
from .protocol import ADVANCE_TURN
from .protocol import BAD_REQUEST
from .protocol import BANK
from .protocol import CONFIGURE_ROUNDS
from .protocol import CREATE_ROOM
from .protocol import JOIN_ROOM
from .protocol import ProtocolError
from .protocol import ROLL_DICE
from .protocol import ROOM_CREATED
from .protocol import START_GAME
from .protocol import SUBMIT_PHYSICAL_DICE
from .protocol import UNDO
from .protocol import parse_client_message

logger = logging.getLogger(__name__)

ActionHandler = Callable[[str, dict[str, Any]], Awaitable[None]]


def schedule_room_settlement(room: Room) -> None:
    schedule_settlement(
        room,
        on_settled=broadcast_room_state,
        delay_seconds=runtime.settings.bank_settlement_delay_seconds,
    )


def _log_if_finished(room: Room) -> None:
    if room.status == GameStatus.FINISHED:
        logger.info("room %s game finished", room.code)


async def _notify_departure(departure: RemovalResult | None) -> None:
    if departure is None or departure.room_deleted:
        return
    if departure.settlement_due:
        schedule_room_settlement(departure.room)
    await broadcast_room_state(departure.room)


async def handle_create_room(player_id: str, payload: dict[str, Any]) -> None:
    request = CreateRoomRequest.model_validate(payload)
    room, departure = runtime.room_registry.create_room(player_id, request.name)
    await _notify_departure(departure)
    await send_to_player(player_id, ROOM_CREATED, {"room_code": room.code, "player_id": player_id})
    await broadcast_room_state(room)


async def handle_join_room(player_id: str, payload: dict[str, Any]) -> None:
    request = JoinRoomRequest.model_validate(payload)
    room, departure = runtime.room_registry.join(request.room_code, player_id, request.name)
    await _notify_departure(departure)
    await broadcast_room_state(room)


async def handle_configure_rounds(player_id: str, payload: dict[str, Any]) -> None:
    request = ConfigureRoundsRequest.model_validate(payload)
    room = runtime.room_registry.configure_rounds(player_id, request.total_rounds)
    await broadcast_room_state(room)


async def handle_start_game(player_id: str, payload: dict[str, Any]) -> None:
    room = runtime.room_registry.start_game(player_id)
    await broadcast_room_state(room)


async def handle_roll_dice(player_id: str, payload: dict[str, Any]) -> None:
    request = RollDiceRequest.model_validate(payload)
    room = runtime.room_registry.room_for_player(player_id)
    outcome = room.engine.roll_dice(player_id, request.die1, request.die2)
    if outcome.round_dead:
        logger.info("room %s round %d died", room.code, room.engine.state.current_round)
    await broadcast_room_state(room)


async def handle_submit_physical_dice(player_id: str, payload: dict[str, Any]) -> None:
    request = PhysicalDiceRequest.model_validate(payload)
    room = runtime.room_registry.room_for_player(player_id)
    outcome = room.engine.submit_physical_dice(player_id, request.value, request.is_doubles)
    if outcome.round_dead:
        logger.info("room %s round %d died", room.code, room.engine.state.current_round)
    await broadcast_room_state(room)


async def handle_bank(player_id: str, payload: dict[str, Any]) -> None:
    room = runtime.room_registry.room_for_player(player_id)
    if room.engine.bank(player_id):
        schedule_room_settlement(room)
    await broadcast_room_state(room)


async def handle_advance_turn(player_id: str, payload: dict[str, Any]) -> None:
    room = runtime.room_registry.advance_turn(player_id)
    _log_if_finished(room)
    await broadcast_room_state(room)


async def handle_undo(player_id: str, payload: dict[str, Any]) -> None:
    room = runtime.room_registry.undo(player_id)
    await broadcast_room_state(room)


ACTION_HANDLERS: dict[str, ActionHandler] = {
    CREATE_ROOM: handle_create_room,
    JOIN_ROOM: handle_join_room,
    CONFIGURE_ROUNDS: handle_configure_rounds,
    START_GAME: handle_start_game,
    ROLL_DICE: handle_roll_dice,
    SUBMIT_PHYSICAL_DICE: handle_submit_physical_dice,
    BANK: handle_bank,
    ADVANCE_TURN: handle_advance_turn,
    UNDO: handle_undo,
}


async def handle_client_message(player_id: str, raw: str) -> None:
    """Route one inbound frame; rejections go back to the sender only."""
    try:
        message = parse_client_message(raw)
    except ProtocolError as exc:
        await send_error(player_id, code=BAD_REQUEST, message=str(exc))
        return

    handler = ACTION_HANDLERS.get(message.type)
    if handler is None:
        logger.debug("no handler for message type %s from %s", message.type, player_id)
        await send_error(player_id, code=BAD_REQUEST, message=f"unknown message type: {message.type}")
        return

    try:
        await handler(player_id, message.payload)
    except ValidationError as exc:
        await send_error(player_id, code=BAD_REQUEST, message=f"invalid payload: {exc.errors()[0]['msg']}")
    except EngineError as exc:
        logger.debug("rejected %s from %s: %s", message.type, player_id, exc.message)
        await send_error(player_id, code=exc.code, message=exc.message)


async def handle_disconnect(player_id: str) -> None:
    """Forget the connection and remove its player from any room."""
    runtime.connections.pop(player_id, None)
    departure = runtime.room_registry.remove(player_id)
    if departure is not None:
        logger.info("player %s left room %s", player_id, departure.room.code)
    await _notify_departure(departure)
