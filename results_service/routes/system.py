from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from results_service.results.dependencies import get_store
from results_service.results.schemas import HealthResponse, StatusResponse
from results_service.results.store import ResultStore

logger = logging.getLogger(__name__)

router = APIRouter(tags=["System"])


@router.get("/health", response_model=HealthResponse)
def health():
    return {"status": "OK", "message": "Server is running"}


@router.post("/reset", response_model=StatusResponse)
async def reset(store: ResultStore = Depends(get_store)):
    await store.clear_all_results()
    logger.info("Result store reset")
    return {"status": "ok"}


@router.delete("/reset", response_model=StatusResponse)
async def reset_delete(store: ResultStore = Depends(get_store)):
    return await reset(store)
