# /app/services/attendance_service.py

"""
The daily attendance register for a class.

There is at most one attendance record per (student, class, date). Marking a
student again on the same day updates that record; the lookup and the write
happen under the attendance store's upsert lock so concurrent marks cannot
create a duplicate.
"""

import asyncio
import logging
from datetime import date
from typing import Dict, List, Optional

from ..models.attendance_model import AttendanceStatus
from .database_service import DatabaseService
from .errors import InvalidInputError
from . import analytics
from .class_service import enrolled_students
from .relations import filter_by_date, filter_by_foreign_key, normalize_date, normalize_id_ref

logger = logging.getLogger(__name__)


def _day(on_date) -> date:
    day = normalize_date(on_date)
    if day is None:
        raise InvalidInputError(f"{on_date!r} is not a valid date.")
    return day


def find_record(records: List[Dict], student_id: int, class_id: int, on_date) -> Optional[Dict]:
    """The record for (student, class, day), if one exists."""
    day = normalize_date(on_date)
    for record in records:
        if (normalize_id_ref(record.get("studentId")) == student_id
                and normalize_id_ref(record.get("classId")) == class_id
                and normalize_date(record.get("date")) == day):
            return record
    return None


async def load_register(db: DatabaseService, class_id: int, on_date) -> Dict:
    """Enrolled students, the day's records for the class, and the day's breakdown."""
    day = _day(on_date)
    cls = await db.class_repo.get_by_id(class_id)
    students, attendance = await asyncio.gather(
        db.student_repo.get_all(),
        db.attendance_repo.get_all(),
    )
    records = filter_by_date(filter_by_foreign_key(attendance, "classId", class_id), day)
    return {
        "classId": class_id,
        "date": day.isoformat(),
        "students": enrolled_students(cls, students),
        "records": records,
        "breakdown": analytics.attendance_breakdown(records),
        "attendanceRate": round(analytics.attendance_rate(records), 1),
    }


async def mark_attendance(
    db: DatabaseService,
    class_id: int,
    student_id: int,
    on_date,
    status,
    notes: str = "",
) -> Dict:
    """
    Sets a student's status for a class on a day, creating the record if needed.

    Raises:
        InvalidInputError: unknown status or unreadable date.
        NotFoundError: the class or student does not exist.
    """
    try:
        status = AttendanceStatus(status).value
    except ValueError:
        raise InvalidInputError(f"Status must be one of {[s.value for s in AttendanceStatus]}.")
    day = _day(on_date)
    await asyncio.gather(db.class_repo.get_by_id(class_id), db.student_repo.get_by_id(student_id))

    record_data = {
        "studentId": student_id,
        "classId": class_id,
        "date": day.isoformat(),
        "status": status,
        "notes": notes or "",
    }
    async with db.attendance_repo.upsert_lock:
        existing = find_record(await db.attendance_repo.get_all(), student_id, class_id, day)
        if existing:
            saved = await db.attendance_repo.update(existing["Id"], record_data)
        else:
            saved = await db.attendance_repo.create(record_data)
    logger.info("Marked student %s %s in class %s on %s", student_id, status, class_id, day)
    return saved


async def mark_all_present(db: DatabaseService, class_id: int, on_date) -> List[Dict]:
    """Marks every enrolled student Present for the day, one after another."""
    day = _day(on_date)
    cls = await db.class_repo.get_by_id(class_id)
    students = enrolled_students(cls, await db.student_repo.get_all())
    saved = []
    for student in students:
        saved.append(await mark_attendance(db, class_id, student["Id"], day, AttendanceStatus.PRESENT))
    return saved
