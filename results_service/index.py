from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from .errors import ResultsServiceError
from .middleware.error_handler import ErrorHandlingMiddleware, handle_exception
from .results.router import router as results_router
from .results.store import ResultStore, seed_sample_results
from .routes.system import router as system_router

logger = logging.getLogger(__name__)

API_PREFIX = "/api"


class LoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        start = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.info(
            "%s %s -> %s (%.1f ms)",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
        )
        return response


@asynccontextmanager
async def lifespan(app: FastAPI):
    store: Optional[ResultStore] = getattr(app.state, "store", None)
    if store is None:
        store = ResultStore()
        app.state.store = store
    if getattr(app.state, "seed_sample_data", False):
        await seed_sample_results(store)
    logger.info("Results service started")
    try:
        yield
    finally:
        await store.clear_all_results()
        app.state.store = None
        logger.info("Results service stopped")


def create_app(
    store: Optional[ResultStore] = None,
    *,
    seed_sample_data: bool = True,
) -> FastAPI:
    """
    Build the application.

    ``store`` lets callers supply their own ``ResultStore``; otherwise one is
    created when the lifespan starts. The store is emptied on shutdown.
    """
    app = FastAPI(title="Student Results Service", version="1.0.0", lifespan=lifespan)
    app.state.store = store
    app.state.seed_sample_data = seed_sample_data

    app.add_exception_handler(ResultsServiceError, handle_exception)
    app.add_exception_handler(RequestValidationError, handle_exception)
    app.add_exception_handler(StarletteHTTPException, handle_exception)

    # Added first so it sits innermost and LoggingMiddleware sees the 500
    app.add_middleware(ErrorHandlingMiddleware)
    app.add_middleware(LoggingMiddleware)

    app.include_router(system_router, prefix=API_PREFIX)
    app.include_router(results_router, prefix=API_PREFIX)
    return app
