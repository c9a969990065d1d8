"""
Error rendering shared by the exception handlers and the catch-all middleware.

Every error response has the shape ``{"error": <message>, ...context}``.
"""

from __future__ import annotations

import logging

from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from results_service.errors import ResultsServiceError

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "Internal server error"


def error_handler(request: Request, exc: Exception) -> JSONResponse:
    if isinstance(exc, ResultsServiceError):
        if exc.status_code >= 500:
            logger.error("Service error on %s: %s", request.url.path, exc.message)
        else:
            logger.warning("%d on %s: %s", exc.status_code, request.url.path, exc.message)
        return JSONResponse(exc.to_dict(), status_code=exc.status_code)

    if isinstance(exc, RequestValidationError):
        details = [
            {"loc": [str(part) for part in err.get("loc", ())], "msg": err.get("msg", "")}
            for err in exc.errors()
        ]
        logger.warning("Rejected request body on %s: %s", request.url.path, details)
        return JSONResponse({"error": "Invalid request body", "details": details}, status_code=400)

    if isinstance(exc, StarletteHTTPException):
        body = {"error": exc.detail if isinstance(exc.detail, str) else "Request failed"}
        if exc.status_code == 404:
            body["path"] = request.url.path
        return JSONResponse(body, status_code=exc.status_code, headers=getattr(exc, "headers", None))

    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        {"error": INTERNAL_ERROR_MESSAGE, "details": str(exc)},
        status_code=500,
    )


async def handle_exception(request: Request, exc: Exception) -> JSONResponse:
    return error_handler(request, exc)


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """Turn anything a handler raises into a 500 response instead of a dropped connection."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        try:
            return await call_next(request)
        except Exception as exc:
            return error_handler(request, exc)
