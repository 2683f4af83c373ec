"""Room domain package."""

from app.rooms.registry import NotInRoomError
from app.rooms.registry import RemovalResult
from app.rooms.registry import Room
from app.rooms.registry import RoomNotFoundError
from app.rooms.registry import RoomNotWaitingError
from app.rooms.registry import RoomRegistry
from app.rooms.settlement import cancel_settlement
from app.rooms.settlement import schedule_settlement

__all__ = [
    "NotInRoomError",
    "RemovalResult",
    "Room",
    "RoomNotFoundError",
    "RoomNotWaitingError",
    "RoomRegistry",
    "cancel_settlement",
    "schedule_settlement",
]
