"""Pydantic models for inbound room and game action payloads."""

from __future__ import annotations

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field

PLAYER_NAME_MAX_LENGTH = 24


class CreateRoomRequest(BaseModel):
    """CREATE_ROOM payload."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(min_length=1, max_length=PLAYER_NAME_MAX_LENGTH)


class JoinRoomRequest(BaseModel):
    """JOIN_ROOM payload."""

    model_config = ConfigDict(str_strip_whitespace=True)

    room_code: str = Field(min_length=1)
    name: str = Field(min_length=1, max_length=PLAYER_NAME_MAX_LENGTH)


class ConfigureRoundsRequest(BaseModel):
    total_rounds: int


class RollDiceRequest(BaseModel):
    """ROLL_DICE payload; both dice omitted means a server-side roll."""

    die1: int | None = None
    die2: int | None = None


class PhysicalDiceRequest(BaseModel):
    value: int
    is_doubles: bool = False
