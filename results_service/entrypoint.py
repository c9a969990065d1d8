from __future__ import annotations

import os
import logging

from fastapi.middleware.cors import CORSMiddleware

from .index import create_app
from .logging_config import setup_logging
from .middleware.rate_limit import (
    DEFAULT_REQUESTS,
    DEFAULT_WINDOW_SECONDS,
    RateLimitMiddleware,
)
from .middleware.security_headers import SecurityHeadersMiddleware

logger = logging.getLogger(__name__)

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 3000


def env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def env_int(name: str, default: int, maximum: int | None = None) -> int:
    """Read a positive integer from the environment, falling back to ``default``."""
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        value = int(raw)
    except (ValueError, TypeError) as e:
        logger.warning(f"Invalid {name} value: {raw}. Error: {e}. Using default: {default}")
        return default
    if value <= 0:
        logger.warning(f"Invalid {name} value: {raw}. Must be positive. Using default: {default}")
        return default
    if maximum is not None and value > maximum:
        logger.warning(f"{name} value {value} exceeds maximum ({maximum}). Using default: {default}")
        return default
    return value


def cors_origins() -> list[str]:
    raw = os.getenv("CORS_ALLOW_ORIGINS", "*")
    origins = [part.strip() for part in raw.split(",") if part.strip()]
    return origins or ["*"]


def build_app():
    app = create_app(seed_sample_data=env_flag("SEED_SAMPLE_DATA", True))

    # Starlette runs the last-added middleware first. The rate limiter goes in
    # first so its 429s still pass through security headers and CORS.
    if env_flag("DISABLE_RATE_LIMIT", False):
        logger.warning("Rate limiting is DISABLED. Only use this in trusted environments.")
    else:
        requests = env_int("RATE_LIMIT_REQUESTS", DEFAULT_REQUESTS, maximum=10000)
        window = env_int("RATE_LIMIT_WINDOW_SECONDS", DEFAULT_WINDOW_SECONDS, maximum=3600)
        logger.info(f"Rate limiting enabled: {requests} requests per {window} seconds")
        app.add_middleware(RateLimitMiddleware, requests=requests, window_seconds=window)

    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins(),
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["Retry-After"],
    )
    return app


app = build_app()


def main() -> None:
    import uvicorn

    setup_logging()
    host = os.getenv("HOST", DEFAULT_HOST)
    port = env_int("PORT", DEFAULT_PORT, maximum=65535)
    logger.info(f"Server is running on http://{host}:{port}, API under /api")
    uvicorn.run(app, host=host, port=port, log_config=None)


if __name__ == "__main__":
    main()
