"""Delayed round settlement after every player in a room has banked."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable
from collections.abc import Callable
import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from app.rooms.registry import Room

logger = logging.getLogger(__name__)

DEFAULT_SETTLEMENT_DELAY_SECONDS = 2.0

SettledCallback = Callable[["Room"], Awaitable[None]]


async def _settle_after(
    room: Room,
    *,
    delay_seconds: float,
    expected_round: int,
    on_settled: SettledCallback,
) -> None:
    await asyncio.sleep(delay_seconds)
    if room.settlement_task is asyncio.current_task():
        room.settlement_task = None

    if not room.engine.settle_round(expected_round):
        logger.info("room %s settlement for round %d skipped, state changed", room.code, expected_round)
        return
    state = room.engine.state
    logger.info(
        "room %s settled round %d, now %s round %d",
        room.code,
        expected_round,
        state.status.value,
        state.current_round,
    )
    await on_settled(room)


def schedule_settlement(
    room: Room,
    *,
    on_settled: SettledCallback,
    delay_seconds: float = DEFAULT_SETTLEMENT_DELAY_SECONDS,
) -> asyncio.Task[None]:
    """Schedule the all-banked transition for the room's current round.

    Must be called from a running event loop. A previously pending task is
    cancelled; the new task re-checks round preconditions when it fires.
    """
    cancel_settlement(room)
    task = asyncio.get_running_loop().create_task(
        _settle_after(
            room,
            delay_seconds=delay_seconds,
            expected_round=room.engine.state.current_round,
            on_settled=on_settled,
        )
    )
    room.settlement_task = task
    return task


def cancel_settlement(room: Room) -> bool:
    """Cancel a pending settlement; True when one was still running."""
    task = room.settlement_task
    room.settlement_task = None
    if task is None or task.done():
        return False
    task.cancel()
    return True


__all__ = [
    "DEFAULT_SETTLEMENT_DELAY_SECONDS",
    "cancel_settlement",
    "schedule_settlement",
]
