"""Error taxonomy for the games service.

Every failure raised here is synchronous and caller-visible. Operations
check all of these before mutating anything, so a raised error means
nothing was written.
"""

from __future__ import annotations

from fastapi import Request, status
from fastapi.responses import JSONResponse


class GameError(Exception):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class GameNotFound(GameError):
    """Game is absent, or belongs to another template."""

    status_code = status.HTTP_404_NOT_FOUND


class GameForbidden(GameError):
    """Actor lacks permission, or the game is not published."""

    status_code = status.HTTP_403_FORBIDDEN


class GameConflict(GameError):
    """Game name already taken."""

    # Name collisions are answered with Bad Request, as clients already expect
    status_code = status.HTTP_400_BAD_REQUEST


class InvalidGameSettings(GameError):
    """Authoring parameters outside what the service accepts."""

    status_code = status.HTTP_400_BAD_REQUEST


class DocumentVersionError(GameError):
    """Stored game document carries a version this build cannot read."""


async def game_error_handler(request: Request, exc: Exception) -> JSONResponse:
    assert isinstance(exc, GameError)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


__all__ = [
    "GameError",
    "GameNotFound",
    "GameForbidden",
    "GameConflict",
    "InvalidGameSettings",
    "DocumentVersionError",
    "game_error_handler",
]
