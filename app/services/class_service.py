# /app/services/class_service.py

"""
This service module is the business logic layer for classes and assignments.

It validates payloads before anything reaches the store, and assembles the
class list and roster views. A student is enrolled in a class when either
side records it: the class lists the student in `studentIds`, or the student
lists the class in `classIds`.
"""

import asyncio
import logging
from typing import Dict, List

from ..models import assignment_model, class_model
from .database_service import DatabaseService
from .errors import InvalidInputError
from .validation import validate_payload
from . import analytics
from .relations import filter_by_foreign_key, filter_by_membership, members_of, normalize_id_ref

logger = logging.getLogger(__name__)


# --- Class CRUD ---

async def list_classes(db: DatabaseService) -> List[Dict]:
    return await db.class_repo.get_all()


async def get_class(db: DatabaseService, class_id: int) -> Dict:
    return await db.class_repo.get_by_id(class_id)


async def create_class(db: DatabaseService, class_data) -> Dict:
    record = validate_payload(class_model.ClassCreate, class_data)
    return await db.class_repo.create(record)


async def update_class(db: DatabaseService, class_id: int, class_update) -> Dict:
    changes = validate_payload(class_model.ClassUpdate, class_update, partial=True)
    if not changes:
        raise InvalidInputError("No update data provided.")
    return await db.class_repo.update(class_id, changes)


async def delete_class_by_id(db: DatabaseService, class_id: int) -> bool:
    # Grades and attendance that reference the class are kept; joins simply stop matching them.
    return await db.class_repo.delete(class_id)


# --- Assignment CRUD ---

async def list_assignments(db: DatabaseService, class_id: int = None) -> List[Dict]:
    assignments = await db.assignment_repo.get_all()
    if class_id is None:
        return assignments
    return filter_by_foreign_key(assignments, "classId", class_id)


async def create_assignment(db: DatabaseService, assignment_data) -> Dict:
    record = validate_payload(assignment_model.AssignmentCreate, assignment_data)
    if normalize_id_ref(record.get("classId")) is None:
        raise InvalidInputError("Assignment classId must reference a class.")
    # Fails with NotFoundError if the class does not exist.
    await db.class_repo.get_by_id(normalize_id_ref(record["classId"]))
    return await db.assignment_repo.create(record)


async def update_assignment(db: DatabaseService, assignment_id: int, assignment_update) -> Dict:
    changes = validate_payload(assignment_model.AssignmentUpdate, assignment_update, partial=True)
    if not changes:
        raise InvalidInputError("No update data provided.")
    return await db.assignment_repo.update(assignment_id, changes)


async def delete_assignment(db: DatabaseService, assignment_id: int) -> bool:
    return await db.assignment_repo.delete(assignment_id)


# --- Data Assembly ---

def enrolled_students(cls: Dict, students: List[Dict]) -> List[Dict]:
    """Students listed in the class's `studentIds` or whose `classIds` include the class."""
    listed = {s["Id"] for s in members_of(cls, "studentIds", students)}
    enrolled = {s["Id"] for s in filter_by_membership(students, "classIds", cls["Id"])}
    return [s for s in students if s["Id"] in listed | enrolled]


async def get_all_classes_with_summary(db: DatabaseService) -> List[Dict]:
    """
    Retrieves all classes and enriches them with student counts and the class
    grade average (0 for a class without grades).
    """
    classes, students, grades = await asyncio.gather(
        db.class_repo.get_all(),
        db.student_repo.get_all(),
        db.grade_repo.get_all(),
    )
    summary_list = []
    for cls in classes:
        summary_list.append({
            **cls,
            "studentCount": len(enrolled_students(cls, students)),
            "classAverage": round(analytics.class_average(filter_by_foreign_key(grades, "classId", cls["Id"])), 1),
        })
    return summary_list


async def get_class_roster(db: DatabaseService, class_id: int) -> Dict:
    """The class record, its enrolled students, and each student's average within the class."""
    class_info, students, grades = await asyncio.gather(
        db.class_repo.get_by_id(class_id),
        db.student_repo.get_all(),
        db.grade_repo.get_all(),
    )
    enrolled = enrolled_students(class_info, students)
    class_grades = filter_by_foreign_key(grades, "classId", class_id)
    averages = {
        student["Id"]: analytics.student_average(filter_by_foreign_key(class_grades, "studentId", student["Id"]))
        for student in enrolled
    }
    return {"classInfo": class_info, "students": enrolled, "averages": averages}
