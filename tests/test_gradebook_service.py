# /tests/test_gradebook_service.py

import csv
import io
from datetime import date

import pytest

from app.services import gradebook_service
from app.services.errors import InvalidInputError, NotFoundError

TODAY = date(2026, 10, 19)

# --- Test Data Helpers ---

async def build_class(db):
    """
    One class with two enrolled students and two 100-point assignments, plus
    an unenrolled student and an assignment that belongs to another class.
    """
    cls = await db.class_repo.create({"name": "Algebra I", "subject": "Mathematics"})
    other = await db.class_repo.create({"name": "Biology", "subject": "Science"})
    alice = await db.student_repo.create({"firstName": "Alice", "lastName": "Adams", "classIds": [cls["Id"]]})
    bob = await db.student_repo.create({"firstName": "Bob", "lastName": "Baker", "classIds": f"{cls['Id']},{other['Id']}"})
    carl = await db.student_repo.create({"firstName": "Carl", "lastName": "Cole", "classIds": [other["Id"]]})
    quiz = await db.assignment_repo.create({"name": "Quiz", "classId": cls["Id"], "maxScore": 100})
    test = await db.assignment_repo.create({"name": "Test", "classId": {"Id": cls["Id"]}, "maxScore": 100})
    lab = await db.assignment_repo.create({"name": "Lab", "classId": other["Id"], "maxScore": 25})
    return {"class": cls, "other": other, "alice": alice, "bob": bob, "carl": carl,
            "quiz": quiz, "test": test, "lab": lab}

# --- End-to-End ---

@pytest.mark.asyncio
async def test_scores_for_one_student_average_while_the_other_has_none(db):
    """
    GIVEN: a class with two students and two 100-point assignments.
    WHEN:  Alice scores 80 and 90 and Bob has no grades.
    THEN:  Alice averages 85.0 and Bob shows "N/A".
    """
    s = await build_class(db)
    cid = s["class"]["Id"]
    await gradebook_service.save_grade(db, cid, s["alice"]["Id"], s["quiz"]["Id"], 80, today=TODAY)
    await gradebook_service.save_grade(db, cid, s["alice"]["Id"], s["test"]["Id"], 90, today=TODAY)

    grid = await gradebook_service.load_grade_grid(db, cid)
    rows = {row["student"]["Id"]: row for row in grid["rows"]}

    assert rows[s["alice"]["Id"]]["average"] == 85.0
    assert rows[s["alice"]["Id"]]["averageDisplay"] == "85.0%"
    assert rows[s["bob"]["Id"]]["average"] == "N/A"
    assert rows[s["bob"]["Id"]]["scores"] == {s["quiz"]["Id"]: None, s["test"]["Id"]: None}

# --- load_grade_grid ---

@pytest.mark.asyncio
async def test_grade_grid_joins_only_the_selected_class(db):
    s = await build_class(db)
    grid = await gradebook_service.load_grade_grid(db, s["class"]["Id"])

    assert [row["student"]["firstName"] for row in grid["rows"]] == ["Alice", "Bob"]
    assert [a["name"] for a in grid["assignments"]] == ["Quiz", "Test"]

@pytest.mark.asyncio
async def test_grade_grid_for_unknown_class_is_not_found(db):
    with pytest.raises(NotFoundError):
        await gradebook_service.load_grade_grid(db, 404)

# --- save_grade ---

@pytest.mark.asyncio
async def test_save_grade_updates_instead_of_duplicating(db):
    s = await build_class(db)
    cid = s["class"]["Id"]
    first = await gradebook_service.save_grade(db, cid, s["bob"]["Id"], s["quiz"]["Id"], 60, today=TODAY)
    second = await gradebook_service.save_grade(db, cid, s["bob"]["Id"], s["quiz"]["Id"], "75", today=TODAY)

    grades = await db.grade_repo.get_all()
    assert len(grades) == 1
    assert second["Id"] == first["Id"]
    assert grades[0]["score"] == 75.0
    assert grades[0]["maxScore"] == 100
    assert grades[0]["date"] == "2026-10-19"

@pytest.mark.asyncio
@pytest.mark.parametrize("score", [-1, 101, "abc", None, float("nan")])
async def test_save_grade_rejects_out_of_range_scores_before_writing(db, score):
    s = await build_class(db)
    with pytest.raises(InvalidInputError, match="Score must be between 0 and 100"):
        await gradebook_service.save_grade(db, s["class"]["Id"], s["alice"]["Id"], s["quiz"]["Id"], score)
    assert await db.grade_repo.get_all() == []

@pytest.mark.asyncio
async def test_save_grade_rejects_an_assignment_from_another_class(db):
    s = await build_class(db)
    with pytest.raises(InvalidInputError):
        await gradebook_service.save_grade(db, s["class"]["Id"], s["alice"]["Id"], s["lab"]["Id"], 10)

@pytest.mark.asyncio
async def test_save_grade_for_unknown_student_is_not_found(db):
    s = await build_class(db)
    with pytest.raises(NotFoundError):
        await gradebook_service.save_grade(db, s["class"]["Id"], 999, s["quiz"]["Id"], 50)

# --- export_grade_grid_csv ---

@pytest.mark.asyncio
async def test_export_grade_grid_csv(db):
    s = await build_class(db)
    await gradebook_service.save_grade(db, s["class"]["Id"], s["alice"]["Id"], s["quiz"]["Id"], 80, today=TODAY)

    csv_string = await gradebook_service.export_grade_grid_csv(db, s["class"]["Id"])
    rows = list(csv.DictReader(io.StringIO(csv_string)))

    assert list(rows[0].keys()) == ["Student Name", "Quiz", "Test", "Average"]
    assert rows[0]["Student Name"] == "Alice Adams"
    assert float(rows[0]["Quiz"]) == 80.0
    assert rows[0]["Test"] == ""
    assert rows[0]["Average"] == "80.0%"
    assert rows[1]["Average"] == "N/A"
