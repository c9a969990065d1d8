from __future__ import annotations

from fastapi import Request

from .store import ResultStore


def get_store(request: Request) -> ResultStore:
    """Return the store owned by the running application."""
    store = getattr(request.app.state, "store", None)
    if store is None:
        raise RuntimeError("Result store is not initialised; is the application lifespan running?")
    return store
