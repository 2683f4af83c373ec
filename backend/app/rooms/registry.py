"""In-memory room domain models and registry."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
import logging
import random

from app.rooms.settlement import cancel_settlement
from engine.core import BankGameEngine
from engine.errors import InvalidStateError
from engine.errors import NotFoundError
from engine.errors import UnauthorizedError
from engine.history import DEFAULT_HISTORY_LIMIT
from engine.state import DEFAULT_TOTAL_ROUNDS
from engine.state import GameStatus
from engine.state import Player

logger = logging.getLogger(__name__)

ROOM_CODE_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
DEFAULT_ROOM_CODE_LENGTH = 4


class RoomNotFoundError(NotFoundError):
    """Raised when a room code does not match any live room."""


class RoomNotWaitingError(InvalidStateError):
    """Raised when joining a room whose game already started."""


class NotInRoomError(NotFoundError):
    """Raised when a connection acts without belonging to a room."""


@dataclass(slots=True)
class Room:
    """Room aggregate: one engine plus host and pending settlement."""

    code: str
    host_id: str
    engine: BankGameEngine
    settlement_task: asyncio.Task[None] | None = None

    @property
    def status(self) -> GameStatus:
        return self.engine.state.status

    def player_ids(self) -> list[str]:
        return [player.id for player in self.engine.players]


@dataclass(slots=True)
class RemovalResult:
    """Outcome of removing one connection from its room."""

    room: Room
    player: Player
    room_deleted: bool = False
    new_host_id: str | None = None
    settlement_due: bool = False


class RoomRegistry:
    """Explicitly owned store of live rooms keyed by code."""

    def __init__(
        self,
        *,
        code_length: int = DEFAULT_ROOM_CODE_LENGTH,
        history_limit: int = DEFAULT_HISTORY_LIMIT,
        default_total_rounds: int = DEFAULT_TOTAL_ROUNDS,
        rng: random.Random | None = None,
    ) -> None:
        if code_length < 1:
            raise ValueError("code_length must be >= 1")
        self._code_length = code_length
        self._history_limit = history_limit
        self._default_total_rounds = default_total_rounds
        self._rng = rng if rng is not None else random.Random()
        self._rooms: dict[str, Room] = {}
        self._member_room: dict[str, str] = {}

    def __len__(self) -> int:
        return len(self._rooms)

    def get_room(self, code: str) -> Room:
        """Return a live room by code (case-insensitive)."""
        room = self._rooms.get(code.upper())
        if room is None:
            raise RoomNotFoundError(f"room {code} not found")
        return room

    def has_room(self, code: str) -> bool:
        return code.upper() in self._rooms

    def list_rooms(self) -> list[Room]:
        """Return live rooms sorted by code."""
        return [self._rooms[code] for code in sorted(self._rooms)]

    def find_room_by_player(self, player_id: str) -> Room | None:
        code = self._member_room.get(player_id)
        if code is None:
            return None
        return self._rooms.get(code)

    def room_for_player(self, player_id: str) -> Room:
        room = self.find_room_by_player(player_id)
        if room is None:
            raise NotInRoomError("you are not in a room")
        return room

    def _generate_code(self) -> str:
        while True:
            code = "".join(self._rng.choice(ROOM_CODE_ALPHABET) for _ in range(self._code_length))
            if code not in self._rooms:
                return code

    def create_room(self, player_id: str, name: str) -> tuple[Room, RemovalResult | None]:
        """Create a room with the creator as sole player and host.

        A connection belongs to at most one room, so the creator first
        leaves any room it is currently in; that departure is returned so
        the caller can notify the old room.
        """
        departure = self.remove(player_id)
        code = self._generate_code()
        engine = BankGameEngine(
            total_rounds=self._default_total_rounds,
            history_limit=self._history_limit,
            rng=self._rng,
        )
        engine.add_player(player_id, name)
        room = Room(code=code, host_id=player_id, engine=engine)
        self._rooms[code] = room
        self._member_room[player_id] = code
        logger.info("room %s created by %s", code, player_id)
        return room, departure

    def join(self, code: str, player_id: str, name: str) -> tuple[Room, RemovalResult | None]:
        """Join a waiting room, with same-room idempotency and cross-room migration."""
        room = self.get_room(code)
        if self._member_room.get(player_id) == room.code:
            return room, None
        if room.status != GameStatus.WAITING:
            raise RoomNotWaitingError(f"room {room.code} is not accepting players")

        departure = self.remove(player_id)
        room.engine.add_player(player_id, name)
        self._member_room[player_id] = room.code
        logger.info("player %s joined room %s", player_id, room.code)
        return room, departure

    def remove(self, player_id: str) -> RemovalResult | None:
        """Remove a connection from its room; None when it was not in one."""
        code = self._member_room.pop(player_id, None)
        if code is None:
            return None
        room = self._rooms[code]
        player = room.engine.find_player(player_id)
        settlement_due = room.engine.remove_player(player_id)
        result = RemovalResult(room=room, player=player, settlement_due=settlement_due)

        if not room.engine.players:
            self._delete_room(room)
            result.room_deleted = True
            result.settlement_due = False
            return result

        if room.host_id == player_id:
            room.host_id = room.engine.players[0].id
            result.new_host_id = room.host_id
            logger.info("room %s host reassigned to %s", room.code, room.host_id)
        return result

    def _delete_room(self, room: Room) -> None:
        cancel_settlement(room)
        self._rooms.pop(room.code, None)
        logger.info("room %s deleted", room.code)

    @staticmethod
    def require_host(room: Room, player_id: str) -> None:
        if room.host_id != player_id:
            raise UnauthorizedError("only the host can do that")

    def _host_room(self, player_id: str) -> Room:
        room = self.room_for_player(player_id)
        self.require_host(room, player_id)
        return room

    def configure_rounds(self, player_id: str, total_rounds: int) -> Room:
        room = self._host_room(player_id)
        room.engine.configure_rounds(total_rounds)
        return room

    def start_game(self, player_id: str) -> Room:
        room = self._host_room(player_id)
        room.engine.start_game()
        logger.info("room %s started with %d players", room.code, len(room.engine.players))
        return room

    def advance_turn(self, player_id: str) -> Room:
        room = self._host_room(player_id)
        room.engine.advance_turn()
        cancel_settlement(room)
        return room

    def undo(self, player_id: str) -> Room:
        room = self._host_room(player_id)
        room.engine.undo()
        cancel_settlement(room)
        return room


__all__ = [
    "DEFAULT_ROOM_CODE_LENGTH",
    "NotInRoomError",
    "ROOM_CODE_ALPHABET",
    "RemovalResult",
    "Room",
    "RoomNotFoundError",
    "RoomNotWaitingError",
    "RoomRegistry",
]
