# /app/services/gradebook_service.py

"""
The grade grid: one row per enrolled student, one column per assignment of
the selected class, plus each student's running average.

`save_grade` is the only write path for grid edits. It range-checks the score
against the assignment before touching the store, and updates the existing
grade for a (student, assignment) pair instead of adding a second one.
"""

import asyncio
import logging
from datetime import date
from typing import Any, Dict, List, Optional

import pandas as pd

from .database_service import DatabaseService
from .errors import InvalidInputError
from . import analytics
from .class_service import enrolled_students
from .relations import filter_by_foreign_key, normalize_id_ref

logger = logging.getLogger(__name__)


# --- Lookups ---

def find_grade(grades: List[Dict], student_id: int, assignment_id: int) -> Optional[Dict]:
    """The grade a student holds for an assignment, if one has been entered."""
    for grade in grades:
        if (normalize_id_ref(grade.get("studentId")) == student_id
                and normalize_id_ref(grade.get("assignmentId")) == assignment_id):
            return grade
    return None


def _coerce_score(score: Any) -> Any:
    # Grid cells arrive as text from some clients; anything unparsable fails grade_validity.
    if isinstance(score, str):
        try:
            return float(score.strip())
        except ValueError:
            return None
    return score


def _build_rows(students: List[Dict], assignments: List[Dict], grades: List[Dict]) -> List[Dict]:
    rows = []
    for student in students:
        scores = {}
        for assignment in assignments:
            grade = find_grade(grades, student["Id"], assignment["Id"])
            scores[assignment["Id"]] = grade.get("score") if grade else None
        average = analytics.student_average(filter_by_foreign_key(grades, "studentId", student["Id"]))
        rows.append({
            "student": student,
            "scores": scores,
            "average": average,
            "averageDisplay": analytics.format_percentage(average),
        })
    return rows


# --- Core Public Functions ---

async def load_grade_grid(db: DatabaseService, class_id: int) -> Dict:
    """
    Joins students, assignments and grades for one class.

    Students are those enrolled in the class (see `enrolled_students`);
    assignments and grades are selected by their `classId` reference.
    """
    # Fails with NotFoundError for an unknown class.
    cls = await db.class_repo.get_by_id(class_id)
    students, assignments, grades = await asyncio.gather(
        db.student_repo.get_all(),
        db.assignment_repo.get_all(),
        db.grade_repo.get_all(),
    )
    class_students = enrolled_students(cls, students)
    class_assignments = filter_by_foreign_key(assignments, "classId", class_id)
    class_grades = filter_by_foreign_key(grades, "classId", class_id)

    return {
        "classId": class_id,
        "assignments": class_assignments,
        "rows": _build_rows(class_students, class_assignments, class_grades),
    }


async def save_grade(
    db: DatabaseService,
    class_id: int,
    student_id: int,
    assignment_id: int,
    score: Any,
    today: Optional[date] = None,
) -> Dict:
    """
    Records a student's score for an assignment.

    Raises:
        NotFoundError: the student or assignment does not exist.
        InvalidInputError: the assignment belongs to another class, or the
            score is not a number between 0 and the assignment's maxScore.
    """
    student, assignment = await asyncio.gather(
        db.student_repo.get_by_id(student_id),
        db.assignment_repo.get_by_id(assignment_id),
    )
    if normalize_id_ref(assignment.get("classId")) != class_id:
        raise InvalidInputError(f"Assignment {assignment_id} does not belong to class {class_id}.")

    max_score = assignment.get("maxScore")
    score = _coerce_score(score)
    if not analytics.grade_validity(score, max_score):
        raise InvalidInputError(f"Score must be between 0 and {max_score}")

    grade_data = {
        "studentId": student["Id"],
        "classId": class_id,
        "assignmentId": assignment["Id"],
        "score": score,
        "maxScore": max_score,
        "date": (today or date.today()).isoformat(),
    }

    async with db.grade_repo.upsert_lock:
        existing = find_grade(await db.grade_repo.get_all(), student["Id"], assignment["Id"])
        if existing:
            saved = await db.grade_repo.update(existing["Id"], grade_data)
        else:
            saved = await db.grade_repo.create(grade_data)
    logger.info("Saved grade %s for student %s on assignment %s", saved["Id"], student_id, assignment_id)
    return saved


async def export_grade_grid_csv(db: DatabaseService, class_id: int) -> str:
    """Renders the grade grid as CSV: a name column, one column per assignment, and the average."""
    grid = await load_grade_grid(db, class_id)
    assignment_names = [a.get("name") or f"Assignment {a['Id']}" for a in grid["assignments"]]
    columns = ["Student Name", *assignment_names, "Average"]

    export_data = []
    for row in grid["rows"]:
        student = row["student"]
        line = {"Student Name": f"{student.get('firstName', '')} {student.get('lastName', '')}".strip()}
        for assignment, name in zip(grid["assignments"], assignment_names):
            score = row["scores"].get(assignment["Id"])
            line[name] = score if score is not None else ""
        line["Average"] = row["averageDisplay"]
        export_data.append(line)

    df = pd.DataFrame(export_data, columns=columns) if export_data else pd.DataFrame(columns=columns)
    return df.to_csv(index=False)
