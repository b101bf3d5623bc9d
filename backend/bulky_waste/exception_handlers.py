"""Maps error kinds to HTTP responses with a uniform error body."""
import logging
from datetime import datetime, timezone
from http import HTTPStatus

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from bulky_waste.errors import ReservationError
from bulky_waste.schemas.reservation import ApiError

logger = logging.getLogger(__name__)

GENERIC_MESSAGE = "An unexpected error occurred"
METHOD_NOT_ALLOWED_MESSAGE = "HTTP method not supported for this endpoint"


def error_response(status_code: int, message: str, request: Request) -> JSONResponse:
    body = ApiError(
        timestamp=datetime.now(timezone.utc),
        status=status_code,
        error=HTTPStatus(status_code).phrase,
        message=message,
        path=request.url.path,
    )
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


async def reservation_error_handler(request: Request, exc: ReservationError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("Unhandled %s: %s", type(exc).__name__, exc.message, exc_info=exc)
        return error_response(exc.status_code, GENERIC_MESSAGE, request)
    logger.warning("%s %s -> %d: %s", request.method, request.url.path, exc.status_code, exc.message)
    return error_response(exc.status_code, exc.message, request)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    parts = []
    for err in exc.errors():
        location = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        parts.append(f"{location}: {err.get('msg')}" if location else str(err.get("msg")))
    message = "; ".join(parts) or "Invalid request"
    logger.warning("Invalid request %s %s: %s", request.method, request.url.path, message)
    return error_response(400, message, request)


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == 405:
        message = METHOD_NOT_ALLOWED_MESSAGE
    elif exc.status_code == 404 and exc.detail == "Not Found":
        message = "Requested resource not found"
    else:
        message = str(exc.detail)
    logger.warning("%s %s -> %d", request.method, request.url.path, exc.status_code)
    response = error_response(exc.status_code, message, request)
    if exc.headers:
        response.headers.update(exc.headers)
    return response


async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Unhandled exception on %s %s", request.method, request.url.path, exc_info=exc)
    return error_response(500, GENERIC_MESSAGE, request)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ReservationError, reservation_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)
