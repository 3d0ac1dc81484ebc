# /app/services/student_service.py

"""
Business logic for students: validated CRUD, roster search, and the
per-student detail and performance views.
"""

import asyncio
import logging
from datetime import date
from typing import Dict, List, Optional

from ..models import student_model
from .database_service import DatabaseService
from .errors import InvalidInputError
from .validation import validate_payload
from . import analytics
from .relations import filter_by_foreign_key, index_by_id, normalize_date, normalize_id_ref

logger = logging.getLogger(__name__)

RECENT_GRADES_LIMIT = 5
RECENT_ATTENDANCE_LIMIT = 10
UNKNOWN_ASSIGNMENT = "Unknown Assignment"


# --- Search ---

def matches_search(student: Dict, term: Optional[str]) -> bool:
    """Case-insensitive match on full name, grade level, or email."""
    if not term or not term.strip():
        return True
    needle = term.strip().lower()
    full_name = f"{student.get('firstName', '')} {student.get('lastName', '')}".lower()
    if needle in full_name:
        return True
    if needle in str(student.get("gradeLevel") or "").lower():
        return True
    return needle in (student.get("email") or "").lower()


async def list_students(db: DatabaseService, search: Optional[str] = None) -> List[Dict]:
    students = await db.student_repo.get_all()
    return [s for s in students if matches_search(s, search)]


# --- CRUD ---

async def get_student(db: DatabaseService, student_id: int) -> Dict:
    return await db.student_repo.get_by_id(student_id)


async def create_student(db: DatabaseService, student_data) -> Dict:
    record = validate_payload(student_model.StudentCreate, student_data)
    return await db.student_repo.create(record)


async def update_student(db: DatabaseService, student_id: int, student_update) -> Dict:
    changes = validate_payload(student_model.StudentUpdate, student_update, partial=True)
    if not changes:
        raise InvalidInputError("No update data provided.")
    return await db.student_repo.update(student_id, changes)


async def delete_student(db: DatabaseService, student_id: int) -> bool:
    return await db.student_repo.delete(student_id)


# --- Detail Views ---

def _by_date_desc(records: List[Dict]) -> List[Dict]:
    # Records without a readable date sort last.
    return sorted(records, key=lambda r: normalize_date(r.get("date")) or date.min, reverse=True)


def _assignment_name(assignments_by_id: Dict, grade: Dict) -> Optional[str]:
    assignment = assignments_by_id.get(normalize_id_ref(grade.get("assignmentId")))
    return assignment.get("name") if assignment else None


async def get_student_detail(db: DatabaseService, student_id: int) -> Dict:
    """
    Assembles the Student Detail page: the record itself, average grade,
    attendance rate, and the most recent grades and attendance entries.

    Unlike the dashboard, a student with no attendance records shows "N/A"
    here rather than the optimistic 100%.
    """
    student, grades, attendance, assignments = await asyncio.gather(
        db.student_repo.get_by_id(student_id),
        db.grade_repo.get_all(),
        db.attendance_repo.get_all(),
        db.assignment_repo.get_all(),
    )
    student_grades = filter_by_foreign_key(grades, "studentId", student_id)
    student_attendance = filter_by_foreign_key(attendance, "studentId", student_id)
    assignments_by_id = index_by_id(assignments)

    gpa = analytics.student_average(student_grades)
    rate = analytics.attendance_rate(student_attendance) if student_attendance else analytics.NOT_AVAILABLE

    recent_grades = [
        {**grade, "assignmentName": _assignment_name(assignments_by_id, grade)}
        for grade in _by_date_desc(student_grades)[:RECENT_GRADES_LIMIT]
    ]
    return {
        "student": student,
        "gpa": gpa,
        "gpaDisplay": analytics.format_percentage(gpa),
        "attendanceRate": rate,
        "attendanceDisplay": analytics.format_percentage(rate),
        "recentGrades": recent_grades,
        "recentAttendance": _by_date_desc(student_attendance)[:RECENT_ATTENDANCE_LIMIT],
    }


async def get_performance_series(db: DatabaseService, student_id: int) -> List[Dict]:
    """
    The student's grade percentages in date order, for the performance chart.
    Grades whose percentage cannot be computed are left out.
    """
    grades, assignments = await asyncio.gather(db.grade_repo.get_all(), db.assignment_repo.get_all())
    assignments_by_id = index_by_id(assignments)

    points = []
    for grade in filter_by_foreign_key(grades, "studentId", student_id):
        grade_date = normalize_date(grade.get("date"))
        try:
            percentage = analytics.grade_percentage(grade)
        except InvalidInputError as e:
            logger.warning("Skipping grade %s in performance series: %s", grade.get("Id"), e)
            continue
        points.append({
            "sortKey": grade_date or date.min,
            "date": grade_date.isoformat() if grade_date else "",
            "label": grade_date.strftime("%b %d") if grade_date else "",
            "percentage": round(percentage, 1),
            "assignmentName": _assignment_name(assignments_by_id, grade) or UNKNOWN_ASSIGNMENT,
            "score": grade["score"],
            "maxScore": grade["maxScore"],
        })
    points.sort(key=lambda p: p["sortKey"])
    for point in points:
        del point["sortKey"]
    return points
