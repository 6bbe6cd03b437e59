"""
Domain errors and their HTTP rendering.

Handlers render every failure as ``{"error": message}`` so API consumers
have a single field to read.
"""
from fastapi import FastAPI
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from slowapi.errors import RateLimitExceeded
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from app.utils import get_logger


log = get_logger(__name__)


class ApplicationError(Exception):
    """Base class for errors raised by feature services."""
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ApplicationError):
    """A required field is missing or empty."""
    status_code = 400


class NotFoundError(ApplicationError):
    """A lookup by id or API key matched nothing."""
    status_code = 404


async def application_error_handler(_request: Request, exc: ApplicationError):
    log.info("%s: %s", type(exc).__name__, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def validation_exception_handler(_request: Request, exc: RequestValidationError):
    errors = dict()
    for error in exc.errors():
        if "loc" not in error or "msg" not in error:
            continue
        key = error["loc"][-1]
        if key == "__root__":
            key = "root"
        errors[key] = error["msg"]
    log.info("Request validation error %s", errors)
    message = next(iter(errors.values()), "Invalid request")
    return JSONResponse(status_code=400, content=jsonable_encoder({"error": message, "fields": errors}))


async def integrity_error_handler(_request: Request, exc: IntegrityError):
    log.warning("Constraint violation: %s", exc.orig)
    return JSONResponse(status_code=409, content={"error": "Constraint violation"})


async def database_error_handler(_request: Request, exc: SQLAlchemyError):
    log.error("Database error", exc_info=exc)
    return JSONResponse(status_code=500, content={"error": "Database error"})


def rate_limit_exceeded_handler(_request: Request, _exc: RateLimitExceeded) -> Response:
    return JSONResponse({"error": "You are going too fast"}, status_code=429)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApplicationError, application_error_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(IntegrityError, integrity_error_handler)
    app.add_exception_handler(SQLAlchemyError, database_error_handler)
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
