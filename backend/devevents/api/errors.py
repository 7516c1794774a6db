"""
Translation of failures into the response envelope.

Typed DevEventsError subclasses carry their own status code and public
message. Anything else raised inside a route is logged with its traceback and
replaced by an UnexpectedError whose message names the failed operation, so
driver or serialization details never reach the client.
"""

from contextlib import contextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from devevents.core.errors import (
    DatabaseConnectionError,
    DevEventsError,
    FieldValidationError,
    UnexpectedError,
)
from devevents.core.logging import get_logger
from devevents.schemas.envelope import ErrorEnvelope

logger = get_logger(__name__)


@contextmanager
def unexpected_errors(message: str, include_unavailable: bool = False):
    """
    Let typed errors through; wrap everything else in UnexpectedError(message).

    With *include_unavailable* a DatabaseConnectionError is folded into the
    same 500, for routes whose contract has no separate outage status.
    """
    try:
        yield
    except DatabaseConnectionError as e:
        if not include_unavailable:
            raise
        logger.error("database_unavailable", operation=message, error=e.message)
        raise UnexpectedError(message) from e
    except DevEventsError:
        raise
    except Exception as e:
        logger.exception("unexpected_error", operation=message, error_type=type(e).__name__)
        raise UnexpectedError(message) from e


async def devevents_error_handler(request: Request, exc: DevEventsError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("request_error", status_code=exc.status_code, error=exc.message)
    else:
        logger.info("request_rejected", status_code=exc.status_code, error=exc.message)

    body = ErrorEnvelope(error=exc.message, errors=exc.details())
    return JSONResponse(status_code=exc.status_code, content=body.model_dump(exclude_none=True))


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return await devevents_error_handler(request, FieldValidationError.from_pydantic(exc.errors()))


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DevEventsError, devevents_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
