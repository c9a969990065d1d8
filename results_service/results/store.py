from __future__ import annotations

import asyncio
import logging
import uuid
from datetime import datetime, timezone
from typing import Any, List, Mapping, Optional

from ..grading import get_grade
from .schemas import ResultRecord

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = frozenset({"regno", "subject", "marks"})

SAMPLE_RESULTS = (
    ("2025IT01", "Mathematics", 85.0),
    ("2025IT02", "Science", 72.0),
    ("2025IT03", "ICT", 61.0),
)


def new_result_id() -> str:
    return uuid.uuid4().hex


def build_result(regno: str, subject: str, marks: float) -> ResultRecord:
    """Create a record with a fresh id, timestamp and grade derived from ``marks``."""
    return ResultRecord(
        id=new_result_id(),
        regno=regno.strip(),
        subject=subject.strip(),
        marks=marks,
        grade=get_grade(marks),
        created_at=datetime.now(timezone.utc),
    )


class ResultStore:
    """In-memory store of examination results, kept in insertion order."""

    def __init__(self) -> None:
        self._lock = asyncio.Lock()
        self._results: List[ResultRecord] = []

    async def add_result(self, record: ResultRecord) -> ResultRecord:
        async with self._lock:
            self._results.append(record)
            logger.debug("Stored result %s for %s", record.id, record.regno)
            return record.model_copy()

    async def get_all_results(self) -> List[ResultRecord]:
        async with self._lock:
            return [record.model_copy() for record in self._results]

    async def get_results_by_regno(self, regno: str) -> List[ResultRecord]:
        needle = regno.casefold()
        async with self._lock:
            return [
                record.model_copy()
                for record in self._results
                if record.regno.casefold() == needle
            ]

    async def get_result_by_id(self, result_id: str) -> Optional[ResultRecord]:
        async with self._lock:
            for record in self._results:
                if record.id == result_id:
                    return record.model_copy()
            return None

    async def update_result(
        self, result_id: str, fields: Mapping[str, Any]
    ) -> Optional[ResultRecord]:
        """
        Shallow-merge ``fields`` into the matching record.

        The stored grade is left untouched even when ``marks`` changes; grades
        are only derived when a record is created.
        """
        changes = {key: value for key, value in fields.items() if key in UPDATABLE_FIELDS}
        async with self._lock:
            for index, record in enumerate(self._results):
                if record.id == result_id:
                    updated = record.model_copy(update=changes)
                    self._results[index] = updated
                    logger.debug("Updated result %s fields=%s", result_id, sorted(changes))
                    return updated.model_copy()
            return None

    async def delete_result(self, result_id: str) -> bool:
        async with self._lock:
            for index, record in enumerate(self._results):
                if record.id == result_id:
                    del self._results[index]
                    logger.debug("Deleted result %s", result_id)
                    return True
            return False

    async def clear_all_results(self) -> None:
        async with self._lock:
            self._results.clear()
            logger.debug("Cleared all results")


async def seed_sample_results(store: ResultStore) -> None:
    for regno, subject, marks in SAMPLE_RESULTS:
        await store.add_result(build_result(regno, subject, marks))
    logger.info("Seeded %d sample results", len(SAMPLE_RESULTS))
