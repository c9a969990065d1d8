from __future__ import annotations

import logging
from typing import Dict, List

from fastapi import APIRouter, Body, Depends, Path, status

from ..errors import NotFoundError, ValidationError
from ..grading import best_grade, calculate_gpa, get_grade_point, is_valid_regno, parse_marks
from .dependencies import get_store
from .schemas import (
    DashboardResponse,
    GPAResponse,
    GradePointEntry,
    MessageResponse,
    ResultCreate,
    ResultListResponse,
    ResultRecord,
    ResultResponse,
    ResultUpdate,
    StudentResultsResponse,
)
from .store import ResultStore, build_result

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Results"])

MISSING_FIELDS_MESSAGE = "Missing required fields: regno, subject, and marks are required"
INVALID_MARKS_MESSAGE = "Invalid marks. Marks must be a number between 0 and 100"
NO_RESULTS_MESSAGE = "No results found for the given registration number"
RESULT_NOT_FOUND_MESSAGE = "Result not found"
RECENT_RESULTS_LIMIT = 5
NO_GRADE = "N/A"


def _is_blank(value) -> bool:
    return not isinstance(value, str) or not value.strip()


async def _require_student_results(store: ResultStore, regno: str) -> List[ResultRecord]:
    results = await store.get_results_by_regno(regno)
    if not results:
        raise NotFoundError(NO_RESULTS_MESSAGE, {"regno": regno})
    return results


@router.post(
    "/results",
    status_code=status.HTTP_201_CREATED,
    response_model=ResultResponse,
    summary="Add a result",
)
async def create_result(
    payload: ResultCreate = Body(...),
    store: ResultStore = Depends(get_store),
) -> ResultResponse:
    missing = []
    if not is_valid_regno(payload.regno):
        missing.append("regno")
    if _is_blank(payload.subject):
        missing.append("subject")
    if payload.marks is None:
        missing.append("marks")
    if missing:
        raise ValidationError(MISSING_FIELDS_MESSAGE, {"missing": missing})

    marks = parse_marks(payload.marks)
    if marks is None:
        raise ValidationError(INVALID_MARKS_MESSAGE)

    record = await store.add_result(build_result(payload.regno, payload.subject, marks))
    logger.info("Added result %s for %s (%s)", record.id, record.regno, record.grade)
    return ResultResponse(message="Result added successfully", result=record)


@router.get("/results", response_model=ResultListResponse, summary="List all results")
async def list_results(store: ResultStore = Depends(get_store)) -> ResultListResponse:
    results = await store.get_all_results()
    return ResultListResponse(results=results, count=len(results))


@router.get(
    "/results/{regno}",
    response_model=StudentResultsResponse,
    summary="List results for a student",
)
async def get_student_results(
    regno: str = Path(..., description="Student registration number (case-insensitive)."),
    store: ResultStore = Depends(get_store),
) -> StudentResultsResponse:
    results = await _require_student_results(store, regno)
    return StudentResultsResponse(regno=regno, results=results, count=len(results))


@router.patch(
    "/results/{result_id}",
    response_model=ResultResponse,
    summary="Update a result",
)
async def update_result(
    result_id: str = Path(..., description="Result identifier."),
    payload: ResultUpdate = Body(...),
    store: ResultStore = Depends(get_store),
) -> ResultResponse:
    fields = payload.model_dump(exclude_unset=True, exclude_none=True)
    if not fields:
        raise ValidationError("Nothing to update: provide regno, subject or marks")

    for name in ("regno", "subject"):
        if name in fields:
            if _is_blank(fields[name]):
                raise ValidationError(f"Invalid {name}. It must be a non-empty string", {"field": name})
            fields[name] = fields[name].strip()

    if "marks" in fields:
        marks = parse_marks(fields["marks"])
        if marks is None:
            raise ValidationError(INVALID_MARKS_MESSAGE)
        fields["marks"] = marks

    # grade keeps the value derived at creation, even when marks change
    updated = await store.update_result(result_id, fields)
    if updated is None:
        raise NotFoundError(RESULT_NOT_FOUND_MESSAGE, {"id": result_id})
    logger.info("Updated result %s", result_id)
    return ResultResponse(message="Result updated successfully", result=updated)


@router.delete(
    "/results/{result_id}",
    response_model=MessageResponse,
    summary="Delete a result",
)
async def delete_result(
    result_id: str = Path(..., description="Result identifier."),
    store: ResultStore = Depends(get_store),
) -> MessageResponse:
    deleted = await store.delete_result(result_id)
    if not deleted:
        raise NotFoundError(RESULT_NOT_FOUND_MESSAGE)
    logger.info("Deleted result %s", result_id)
    return MessageResponse(message="Result deleted successfully")


@router.get("/gpa/{regno}", response_model=GPAResponse, summary="GPA for a student")
async def get_gpa(
    regno: str = Path(..., description="Student registration number (case-insensitive)."),
    store: ResultStore = Depends(get_store),
) -> GPAResponse:
    results = await _require_student_results(store, regno)
    grade_points = [
        GradePointEntry(
            subject=record.subject,
            marks=record.marks,
            grade=record.grade,
            point=get_grade_point(record.marks),
        )
        for record in results
    ]
    return GPAResponse(
        regno=regno,
        gpa=f"{calculate_gpa(results):.2f}",
        total_subjects=len(results),
        grade_points=grade_points,
    )


@router.get("/dashboard", response_model=DashboardResponse, summary="Overall statistics")
async def get_dashboard(store: ResultStore = Depends(get_store)) -> DashboardResponse:
    # One snapshot for every figure so they agree with each other
    results = await store.get_all_results()

    by_student: Dict[str, List[ResultRecord]] = {}
    for record in results:
        by_student.setdefault(record.regno.casefold(), []).append(record)

    student_gpas = [calculate_gpa(student_results) for student_results in by_student.values()]
    average_gpa = round(sum(student_gpas) / len(student_gpas), 2) if student_gpas else 0.0

    return DashboardResponse(
        total_students=len(by_student),
        total_subjects=len(results),
        average_gpa=average_gpa,
        best_grade=best_grade(record.grade for record in results) or NO_GRADE,
        recent_results=list(reversed(results[-RECENT_RESULTS_LIMIT:])),
    )
