# /tests/test_attendance_service.py

import asyncio
from datetime import date

import pytest

from app.services import attendance_service
from app.services.database_service import DatabaseService, build_sql_repositories
from app.services.errors import InvalidInputError, NotFoundError

DAY = date(2026, 10, 19)

async def build_class(db):
    cls = await db.class_repo.create({"name": "World History", "subject": "History"})
    students = [
        await db.student_repo.create({"firstName": name, "lastName": "Test", "classIds": [cls["Id"]]})
        for name in ["Ana", "Ben", "Cal"]
    ]
    await db.student_repo.create({"firstName": "Outsider", "lastName": "Test", "classIds": []})
    return cls, students


@pytest.mark.asyncio
async def test_marking_twice_on_the_same_day_keeps_one_record(db):
    cls, students = await build_class(db)
    first = await attendance_service.mark_attendance(db, cls["Id"], students[0]["Id"], DAY, "Absent")
    second = await attendance_service.mark_attendance(db, cls["Id"], students[0]["Id"], "2026-10-19", "Late", notes="Bus")

    records = await db.attendance_repo.get_all()
    assert len(records) == 1
    assert second["Id"] == first["Id"]
    assert records[0]["status"] == "Late"
    assert records[0]["notes"] == "Bus"

@pytest.mark.asyncio
async def test_a_new_day_gets_a_new_record(db):
    cls, students = await build_class(db)
    await attendance_service.mark_attendance(db, cls["Id"], students[0]["Id"], DAY, "Present")
    await attendance_service.mark_attendance(db, cls["Id"], students[0]["Id"], date(2026, 10, 20), "Present")
    assert len(await db.attendance_repo.get_all()) == 2

@pytest.mark.asyncio
async def test_concurrent_marks_do_not_create_duplicates(db):
    cls, students = await build_class(db)
    await asyncio.gather(*(
        attendance_service.mark_attendance(db, cls["Id"], students[1]["Id"], DAY, status)
        for status in ["Present", "Absent", "Late", "Present"]
    ))
    assert len(await db.attendance_repo.get_all()) == 1

@pytest.mark.asyncio
async def test_concurrent_marks_through_separate_sql_services_do_not_create_duplicates(sql_db, sql_session):
    """
    GIVEN two SQL-backed services built the way each request builds its own
    WHEN both mark the same student for the same class and day at once
    THEN only one attendance record exists
    """
    cls, students = await build_class(sql_db)
    first = DatabaseService(repositories=build_sql_repositories(sql_session))
    second = DatabaseService(repositories=build_sql_repositories(sql_session))

    await asyncio.gather(
        attendance_service.mark_attendance(first, cls["Id"], students[0]["Id"], DAY, "Present"),
        attendance_service.mark_attendance(second, cls["Id"], students[0]["Id"], DAY, "Absent"),
    )

    records = await sql_db.attendance_repo.get_all()
    assert len(records) == 1
    assert records[0]["status"] in {"Present", "Absent"}

@pytest.mark.asyncio
async def test_invalid_status_and_date_are_rejected(db):
    cls, students = await build_class(db)
    with pytest.raises(InvalidInputError):
        await attendance_service.mark_attendance(db, cls["Id"], students[0]["Id"], DAY, "Sleeping")
    with pytest.raises(InvalidInputError):
        await attendance_service.mark_attendance(db, cls["Id"], students[0]["Id"], "not a date", "Present")
    with pytest.raises(NotFoundError):
        await attendance_service.mark_attendance(db, 999, students[0]["Id"], DAY, "Present")
    assert await db.attendance_repo.get_all() == []

@pytest.mark.asyncio
async def test_mark_all_present_and_register(db):
    cls, students = await build_class(db)
    await attendance_service.mark_attendance(db, cls["Id"], students[0]["Id"], DAY, "Absent")

    saved = await attendance_service.mark_all_present(db, cls["Id"], DAY)
    register = await attendance_service.load_register(db, cls["Id"], DAY)

    assert len(saved) == 3
    assert [s["firstName"] for s in register["students"]] == ["Ana", "Ben", "Cal"]
    assert register["breakdown"] == {"total": 3, "present": 3, "absent": 0, "late": 0}
    assert register["attendanceRate"] == 100.0
    assert register["date"] == "2026-10-19"

@pytest.mark.asyncio
async def test_register_for_an_unrecorded_day_is_optimistic(db):
    cls, _ = await build_class(db)
    register = await attendance_service.load_register(db, cls["Id"], DAY)
    assert register["records"] == []
    assert register["attendanceRate"] == 100.0
