"""
Custom Exception Handlers for API Responses

Provides exception handlers that return JSON responses for API errors.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from prepflow.preprocessing.exceptions import PreprocessingException

logger = logging.getLogger(__name__)

_ERROR_TITLES = {
    400: "Bad Request",
    404: "Not Found",
    409: "Conflict",
    422: "Unprocessable Entity",
    502: "Bad Gateway",
}


async def preprocessing_exception_handler(
    request: Request, exc: Exception
) -> JSONResponse:
    """Handle validation and orchestration errors from the preprocessing step."""
    status_code = getattr(exc, "status_code", 500)
    if status_code >= 500:
        logger.error(f"{exc.__class__.__name__} on {request.url.path}: {exc}")
    else:
        logger.info(f"{exc.__class__.__name__} on {request.url.path}: {exc}")

    return JSONResponse(
        status_code=status_code,
        content={
            "success": False,
            "error": exc.__class__.__name__,
            "message": getattr(exc, "message", str(exc)),
            "details": getattr(exc, "details", {}),
            "request_id": getattr(request.state, "request_id", None),
        },
    )


async def validation_exception_handler(
    request: Request, exc: Exception
) -> JSONResponse:
    """Handle 422 request validation errors."""
    errors = exc.errors() if isinstance(exc, RequestValidationError) else []
    return JSONResponse(
        status_code=422,
        content={
            "success": False,
            "error": "Unprocessable Entity",
            "message": getattr(exc, "detail", "Validation error"),
            "details": {"errors": [str(e.get("msg")) for e in errors]},
            "request_id": getattr(request.state, "request_id", None),
        },
    )


async def generic_http_exception_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    """Generic handler for other HTTP exceptions."""
    status_code = getattr(exc, "status_code", 500)

    return JSONResponse(
        status_code=status_code,
        content={
            "success": False,
            "error": _ERROR_TITLES.get(status_code, f"HTTP {status_code}"),
            "message": getattr(exc, "detail", f"HTTP {status_code} error"),
            "status_code": status_code,
        },
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(PreprocessingException, preprocessing_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, generic_http_exception_handler)
