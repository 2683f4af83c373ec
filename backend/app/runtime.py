"""Process-wide runtime state shared by REST and WebSocket handlers."""

from __future__ import annotations

import logging
from typing import Any

from app.core.config import Settings
from app.core.config import load_settings
from app.rooms.registry import RoomRegistry

settings = load_settings()


def build_room_registry(current: Settings) -> RoomRegistry:
    return RoomRegistry(
        code_length=current.bank_room_code_length,
        history_limit=current.bank_history_limit,
        default_total_rounds=current.bank_default_total_rounds,
    )


room_registry = build_room_registry(settings)
connections: dict[str, Any] = {}


def configure_logging(current: Settings) -> None:
    logging.basicConfig(
        level=current.bank_log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger("app").setLevel(current.bank_log_level.upper())
    logging.getLogger("engine").setLevel(current.bank_log_level.upper())


def startup() -> None:
    """Reload settings and reset in-memory room/connection runtime state."""
    global settings, room_registry, connections
    settings = load_settings()
    configure_logging(settings)
    room_registry = build_room_registry(settings)
    connections = {}


__all__ = [
    "Settings",
    "build_room_registry",
    "configure_logging",
    "connections",
    "room_registry",
    "settings",
    "startup",
]
