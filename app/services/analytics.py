# /app/services/analytics.py

"""
Percentage statistics over grade and attendance records.

Every function here is a pure reader: it takes already-fetched records and
returns numbers. The empty-input rules differ on purpose and are relied on by
the dashboard:

- `student_average([])` is the sentinel "N/A".
- `class_average([])` is 0.0.
- `attendance_rate([])` is 100.0 (optimistic default).
"""

import logging
import math
from numbers import Real
from typing import Any, Dict, Iterable, List, Mapping, Union

from .errors import InvalidInputError

logger = logging.getLogger(__name__)

NOT_AVAILABLE = "N/A"
PRESENT = "Present"
ABSENT = "Absent"
LATE = "Late"


# --- Validation ---

def _is_finite_number(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool) and math.isfinite(value)


def grade_validity(score: Any, max_score: Any) -> bool:
    """True iff both values are finite numbers and 0 <= score <= max_score."""
    if not (_is_finite_number(score) and _is_finite_number(max_score)):
        return False
    return 0 <= score <= max_score


# --- Grade Statistics ---

def grade_percentage(grade: Mapping) -> float:
    """Returns 100 * score / maxScore for a single grade record."""
    score = grade.get("score")
    max_score = grade.get("maxScore")
    if not (_is_finite_number(score) and _is_finite_number(max_score)):
        raise InvalidInputError(f"Grade {grade.get('Id')} has a non-numeric score or maxScore.")
    if max_score <= 0:
        raise InvalidInputError(f"Grade {grade.get('Id')} has a non-positive maxScore.")
    return 100 * score / max_score


def _percentages(grades: Iterable[Mapping]) -> List[float]:
    percentages = []
    for grade in grades:
        try:
            percentages.append(grade_percentage(grade))
        except InvalidInputError as e:
            logger.warning("Skipping grade in aggregate: %s", e)
    return percentages


def mean_grade_percentage(grades: Iterable[Mapping]) -> float:
    """Mean percentage across the given grades, 0.0 when there are none."""
    percentages = _percentages(grades)
    if not percentages:
        return 0.0
    return sum(percentages) / len(percentages)


def student_average(grades: Iterable[Mapping]) -> Union[float, str]:
    """
    Mean grade percentage for one student's grades.

    Returns "N/A" rather than a number when the student has no usable grades.
    """
    percentages = _percentages(grades)
    if not percentages:
        return NOT_AVAILABLE
    return sum(percentages) / len(percentages)


def class_average(grades: Iterable[Mapping]) -> float:
    """Mean grade percentage across a class; 0.0 when the class has no grades."""
    return mean_grade_percentage(grades)


# --- Attendance Statistics ---

def attendance_rate(records: Iterable[Mapping]) -> float:
    """Share of records marked Present, as a percentage. Empty input gives 100.0."""
    records = list(records)
    if not records:
        return 100.0
    present = sum(1 for record in records if record.get("status") == PRESENT)
    return 100 * present / len(records)


def attendance_breakdown(records: Iterable[Mapping]) -> Dict[str, int]:
    records = list(records)
    return {
        "total": len(records),
        "present": sum(1 for r in records if r.get("status") == PRESENT),
        "absent": sum(1 for r in records if r.get("status") == ABSENT),
        "late": sum(1 for r in records if r.get("status") == LATE),
    }


# --- Display Helpers ---

def format_percentage(value: Union[float, str]) -> str:
    """85 -> "85.0%". The "N/A" sentinel passes through unchanged."""
    if value == NOT_AVAILABLE:
        return NOT_AVAILABLE
    return f"{value:.1f}%"
