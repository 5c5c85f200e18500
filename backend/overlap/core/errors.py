"""
Game error taxonomy and FastAPI error handlers
"""

import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class GameError(Exception):
    """Base class for every error a game operation reports to the caller"""

    code = "GAME_ERROR"
    status = 400
    message = "Game error"

    def __init__(self, message: Optional[str] = None, details: Optional[dict] = None):
        self.message = message or self.message
        self.details = details or {}
        super().__init__(self.message)


# ── Not found ────────────────────────────────────

class NotFoundError(GameError):
    code = "NOT_FOUND"
    status = 404
    message = "Resource not found"


# ── Validation ───────────────────────────────────

class InvalidInputError(GameError):
    code = "INVALID_INPUT"
    message = "Invalid input"


# ── Phase violations ─────────────────────────────

class PhaseViolation(GameError):
    code = "PHASE_VIOLATION"
    message = "Action not allowed right now"


class NotPlayingError(PhaseViolation):
    code = "NOT_PLAYING"
    message = "Game not started"


class WrongPhaseError(PhaseViolation):
    code = "WRONG_PHASE"
    message = "Action not allowed in the current phase"


class PhaseNotExpiredError(PhaseViolation):
    code = "PHASE_NOT_EXPIRED"
    message = "Phase time not elapsed yet"

    def __init__(self, time_remaining: int):
        self.time_remaining = time_remaining
        super().__init__(details={"timeRemaining": time_remaining})


class AlreadyAtTerminalPhaseError(PhaseViolation):
    code = "ALREADY_AT_TERMINAL_PHASE"
    message = "Already in results phase"


# ── Conflicts ────────────────────────────────────

class ConflictError(GameError):
    code = "CONFLICT"
    status = 409
    message = "Conflict"


class AlreadyStartedError(ConflictError):
    code = "ALREADY_STARTED"
    message = "Game already started"


class RoomFullError(ConflictError):
    code = "ROOM_FULL"
    message = "Game is full"


class JoinConflictError(ConflictError):
    code = "JOIN_CONFLICT"
    message = "Another player joined at the same time, please retry"


class AlreadyVotedError(ConflictError):
    code = "ALREADY_VOTED"
    status = 400
    message = "Already voted"


class SelfVoteError(ConflictError):
    code = "SELF_VOTE"
    status = 400
    message = "Cannot vote for your own answer"


class InvalidAnswerError(ConflictError):
    code = "INVALID_ANSWER"
    status = 400
    message = "Invalid answer"


class InsufficientPlayersError(ConflictError):
    code = "INSUFFICIENT_PLAYERS"
    status = 400
    message = "Need at least 1 player to start"


class TooManyPlayersError(ConflictError):
    code = "TOO_MANY_PLAYERS"
    status = 400
    message = "Too many players"


# ── Internal failures ────────────────────────────

class StoreFailure(GameError):
    code = "STORE_FAILURE"
    status = 500
    message = "Internal server error"


class NoPromptsError(GameError):
    code = "NO_PROMPTS"
    status = 500
    message = "No prompts available"


class AllocationExhaustedError(GameError):
    code = "ALLOCATION_EXHAUSTED"
    status = 500
    message = "Failed to generate unique room code"


def _error_response(exc: GameError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status,
        content={
            "error": {
                "code": exc.code,
                "message": exc.message,
                "details": exc.details,
            }
        },
    )


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(GameError)
    async def game_error_handler(request: Request, exc: GameError):
        return _error_response(exc)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        # Malformed bodies and params are bad input like any other
        errors = [
            {"loc": list(error["loc"]), "msg": error["msg"], "type": error["type"]}
            for error in exc.errors()
        ]
        return _error_response(InvalidInputError("Invalid request", details={"errors": errors}))

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        logger.exception("Unexpected error on %s", request.url.path)
        return JSONResponse(
            status_code=500,
            content={
                "error": {
                    "code": "INTERNAL_ERROR",
                    "message": str(exc) if app.debug else "Internal server error",
                    "details": {},
                }
            },
        )
