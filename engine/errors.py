"""Engine error taxonomy.

All errors are recoverable: the action is rejected and room state is left
untouched, because validation always runs before any snapshot or mutation.
"""

from __future__ import annotations


class EngineError(ValueError):
    """Base class for rejected actions."""

    code = "ENGINE_ERROR"

    def __init__(self, message: str, *, code: str | None = None) -> None:
        super().__init__(message)
        if code is not None:
            self.code = code
        self.message = message


class NotFoundError(EngineError):
    """Room or player is absent."""

    code = "NOT_FOUND"


class UnauthorizedError(EngineError):
    """Non-host attempted a host-only action."""

    code = "UNAUTHORIZED"


class InvalidStateError(EngineError):
    """Action is illegal for the current status/round/roll count."""

    code = "INVALID_STATE"


class OutOfTurnError(EngineError):
    """Actor is not the current turn holder."""

    code = "OUT_OF_TURN"


__all__ = [
    "EngineError",
    "InvalidStateError",
    "NotFoundError",
    "OutOfTurnError",
    "UnauthorizedError",
]
