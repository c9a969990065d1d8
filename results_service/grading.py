"""
Grade and GPA calculations.

Marks are mapped to letter grades and grade points through the same set of
descending thresholds; the first band a mark reaches wins.
"""

from __future__ import annotations

import math
from typing import Any, Dict, Iterable, Optional, Sequence, Tuple

MIN_MARKS = 0.0
MAX_MARKS = 100.0

# (lower bound, grade, grade point), highest band first
GRADE_BANDS: Tuple[Tuple[float, str, float], ...] = (
    (85, "A+", 4.0),
    (75, "A", 3.7),
    (65, "B", 3.0),
    (55, "C", 2.0),
    (40, "D", 1.0),
)
FAIL_GRADE = "F"
FAIL_POINT = 0.0

GRADE_ORDER: Tuple[str, ...] = ("A+", "A", "B", "C", "D", "F")
GRADE_RANK: Dict[str, int] = {grade: rank for rank, grade in enumerate(GRADE_ORDER)}


def get_grade(marks: float) -> str:
    for lower, grade, _ in GRADE_BANDS:
        if marks >= lower:
            return grade
    return FAIL_GRADE


def get_grade_point(marks: float) -> float:
    for lower, _, point in GRADE_BANDS:
        if marks >= lower:
            return point
    return FAIL_POINT


def calculate_gpa(results: Optional[Sequence[Any]]) -> float:
    """Mean grade point over ``results``; anything with a ``marks`` attribute works.

    Returns 0.0 for an empty or missing sequence.
    """
    if not results:
        return 0.0
    total_points = sum(get_grade_point(result.marks) for result in results)
    return total_points / len(results)


def _is_number(value: Any) -> bool:
    # bool is an int subclass but never a mark
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_valid_marks(marks: Any) -> bool:
    if not _is_number(marks):
        return False
    # range first: isfinite() overflows on ints too large for a float
    if not MIN_MARKS <= marks <= MAX_MARKS:
        return False
    return math.isfinite(marks)


def is_valid_regno(regno: Any) -> bool:
    return isinstance(regno, str) and len(regno.strip()) > 0


def parse_marks(value: Any) -> Optional[float]:
    """
    Convert raw request input into marks.

    Accepts numbers and numeric strings (surrounding whitespace allowed).
    Returns None when the value is not numeric or falls outside 0-100.
    """
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            return None
    if not is_valid_marks(value):
        return None
    return float(value)


def best_grade(grades: Iterable[str]) -> Optional[str]:
    """Return the highest-ranked grade, ignoring anything not in GRADE_ORDER."""
    ranks = [GRADE_RANK[grade] for grade in grades if grade in GRADE_RANK]
    if not ranks:
        return None
    return GRADE_ORDER[min(ranks)]
