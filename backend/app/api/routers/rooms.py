"""Read-only room REST routes."""

from __future__ import annotations

from fastapi import APIRouter

import app.runtime as runtime
from app.api.errors import raise_api_error
from app.api.room_views import room_detail
from app.api.room_views import room_summary
from app.rooms.registry import RoomNotFoundError

router = APIRouter()


@router.get("/api/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/api/rooms")
def list_rooms() -> list[dict[str, object]]:
    """Return live room summary list."""
    return [room_summary(room) for room in runtime.room_registry.list_rooms()]


@router.get("/api/rooms/{room_code}")
def get_room_detail(room_code: str) -> dict[str, object]:
    """Return one room detail."""
    try:
        room = runtime.room_registry.get_room(room_code)
    except RoomNotFoundError:
        raise_api_error(
            status_code=404,
            code="ROOM_NOT_FOUND",
            message="room not found",
            detail={"room_code": room_code.upper()},
        )
    return room_detail(room)
