"""
Error taxonomy shared by both services.

Repositories raise these; the handlers registered by `register_error_handlers`
turn them into JSON bodies. The status code is the authoritative signal, the
body always carries an `error` string.
"""
import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class TodoAPIError(Exception):
    """Base exception for the todo services."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error"

    def __init__(self, message: str = ""):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(TodoAPIError):
    """A required field is missing or empty."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class AuthenticationError(TodoAPIError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Invalid credentials"


class NotFoundError(TodoAPIError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class ConflictError(TodoAPIError):
    """A unique key already exists in storage."""

    status_code = status.HTTP_409_CONFLICT
    default_message = "Already exists"


class InternalError(TodoAPIError):
    """Storage or other unexpected failure. Details stay in the server log."""


def _error_body(message: str, with_success_flag: bool) -> dict:
    if with_success_flag:
        return {"success": False, "error": message}
    return {"error": message}


# PUBLIC_INTERFACE
def register_error_handlers(app: FastAPI, with_success_flag: bool = False) -> None:
    """
    Install JSON error handlers on `app`.

    with_success_flag: also emit `"success": false` in error bodies (identity service).

    The catch-all `Exception` handler runs in Starlette's outermost
    ServerErrorMiddleware, outside CORSMiddleware, so its 500 responses carry
    no CORS headers. Expected failures raise `TodoAPIError` and are unaffected.
    """

    async def todo_api_error_handler(request: Request, exc: TodoAPIError) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(exc.message, with_success_flag),
        )

    async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        logger.debug("Rejected request to %s: %s", request.url.path, exc.errors())
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=_error_body("Invalid request", with_success_flag),
        )

    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=_error_body(InternalError.default_message, with_success_flag),
        )

    app.add_exception_handler(TodoAPIError, todo_api_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
