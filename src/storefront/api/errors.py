"""Map domain and request errors to the API's JSON error envelope.

Every failure body carries ``errorMessage`` plus any structured details the
error provides, e.g. ``unavailableItems`` or ``available``.
"""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from protean.exceptions import ObjectNotFoundError, ValidationError
from starlette.exceptions import HTTPException

from storefront.shared.errors import StorefrontError
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def _first_message(messages) -> str:
    """First human-readable message out of a field -> [messages] mapping."""
    if isinstance(messages, dict):
        for field_name, errors in messages.items():
            if isinstance(errors, list) and errors:
                return f"{field_name}: {errors[0]}"
            return f"{field_name}: {errors}"
    return str(messages)


def error_body(message: str, **details) -> dict:
    return {"errorMessage": message, **details}


async def storefront_error_handler(request: Request, exc: StorefrontError):
    return JSONResponse(status_code=exc.status_code, content=error_body(exc.message, **exc.details))


async def validation_error_handler(request: Request, exc: ValidationError):
    return JSONResponse(
        status_code=400,
        content=error_body(_first_message(exc.messages), errors=exc.messages),
    )


async def not_found_handler(request: Request, exc: ObjectNotFoundError):
    return JSONResponse(status_code=404, content=error_body(str(exc) or "Resource not found"))


async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = [
        {"field": ".".join(str(part) for part in error["loc"][1:]), "message": error["msg"]} for error in exc.errors()
    ]
    message = f"{errors[0]['field']}: {errors[0]['message']}" if errors else "Invalid request"
    return JSONResponse(status_code=400, content=error_body(message, errors=errors))


async def http_error_handler(request: Request, exc: HTTPException):
    return JSONResponse(status_code=exc.status_code, content=error_body(str(exc.detail)), headers=exc.headers)


async def unexpected_error_handler(request: Request, exc: Exception):
    logger.error("Unhandled error", path=request.url.path, error=str(exc), exc_info=exc)
    return JSONResponse(status_code=500, content=error_body(str(exc) or "Internal server error"))


def register_error_handlers(app: FastAPI):
    app.add_exception_handler(StorefrontError, storefront_error_handler)
    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(ObjectNotFoundError, not_found_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(HTTPException, http_error_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)
