# /tests/test_relations.py

import pytest
from datetime import date, datetime

from app.services import relations
from app.services.errors import MalformedReferenceError

# --- Test Data Fixtures ---

@pytest.fixture
def students():
    return [
        {"Id": 1, "firstName": "Ada", "classIds": [1, 2]},
        {"Id": 2, "firstName": "Ben", "classIds": "2,3"},
        {"Id": 3, "firstName": "Cy", "classIds": {"Id": 3}},
        {"Id": 4, "firstName": "Di"},
        {"Id": 5, "firstName": "Ed", "classIds": "not-a-list"},
    ]

# --- normalize_id_ref ---

@pytest.mark.parametrize("value, expected", [
    (7, 7),
    (7.0, 7),
    ({"Id": 4, "Name": "Algebra"}, 4),
    ("12", 12),
    (" 3, 9", 3),
    ([5, 6], 5),
    ([{"Id": 8}], 8),
])
def test_normalize_id_ref_resolves_supported_shapes(value, expected):
    assert relations.normalize_id_ref(value) == expected

@pytest.mark.parametrize("value", [None, "", "abc", "x,1", 0, -3, 2.5, True, {}, {"Id": None}, [], object()])
def test_normalize_id_ref_returns_none_for_malformed_values(value):
    assert relations.normalize_id_ref(value) is None

def test_parse_id_ref_raises_for_malformed_values():
    with pytest.raises(MalformedReferenceError):
        relations.parse_id_ref("abc")

# --- normalize_id_set ---

def test_normalize_id_set_shapes():
    assert relations.normalize_id_set("3,7,9") == {3, 7, 9}
    assert relations.normalize_id_set({"Id": 5}) == {5}
    assert relations.normalize_id_set(None) == set()
    assert relations.normalize_id_set([1, {"Id": 2}, "3,4"]) == {1, 2, 3, 4}
    assert relations.normalize_id_set(6) == {6}

def test_normalize_id_set_drops_bad_tokens():
    assert relations.normalize_id_set("1,,x,2") == {1, 2}
    assert relations.normalize_id_set([None, "bad", 0]) == set()

# --- Filter-Joins ---

def test_members_of_returns_exactly_the_listed_records():
    cls = {"Id": 10, "studentIds": [1, 2]}
    students = [{"Id": 1}, {"Id": 2}, {"Id": 3}]
    assert relations.members_of(cls, "studentIds", students) == [{"Id": 1}, {"Id": 2}]

@pytest.mark.parametrize("student_ids", ["2,1", [{"Id": 1}, "2"], [2, 1, "junk"]])
def test_members_of_accepts_loose_id_sets(student_ids):
    students = [{"Id": 1}, {"Id": 2}, {"Id": 3}]
    assert relations.members_of({"studentIds": student_ids}, "studentIds", students) == [{"Id": 1}, {"Id": 2}]

def test_members_of_with_no_id_set_is_empty():
    assert relations.members_of({"Id": 10}, "studentIds", [{"Id": 1}]) == []

def test_filter_by_membership_from_the_member_side():
    classes = [{"Id": 10, "studentIds": [1, 2]}, {"Id": 11, "studentIds": "2,3"}, {"Id": 12}]
    assert [c["Id"] for c in relations.filter_by_membership(classes, "studentIds", 1)] == [10]
    assert [c["Id"] for c in relations.filter_by_membership(classes, "studentIds", 2)] == [10, 11]

def test_filter_by_membership_over_mixed_shapes(students):
    in_class_2 = relations.filter_by_membership(students, "classIds", 2)
    in_class_3 = relations.filter_by_membership(students, "classIds", 3)
    assert [s["Id"] for s in in_class_2] == [1, 2]
    assert [s["Id"] for s in in_class_3] == [2, 3]

def test_filter_by_foreign_key_excludes_missing_and_malformed():
    grades = [
        {"Id": 1, "classId": 1},
        {"Id": 2, "classId": {"Id": 1}},
        {"Id": 3, "classId": 2},
        {"Id": 4},
        {"Id": 5, "classId": "garbage"},
        {"Id": 6, "classId": None},
    ]
    assert [g["Id"] for g in relations.filter_by_foreign_key(grades, "classId", 1)] == [1, 2]

def test_filters_never_match_a_missing_target():
    records = [{"Id": 1}, {"Id": 2, "classId": None}]
    assert relations.filter_by_foreign_key(records, "classId", None) == []
    assert relations.filter_by_membership(records, "classIds", None) == []

def test_filter_by_date_accepts_strings_and_dates():
    records = [
        {"Id": 1, "date": "2026-10-05"},
        {"Id": 2, "date": "2026-10-05T08:30:00Z"},
        {"Id": 3, "date": "2026-10-06"},
        {"Id": 4, "date": "yesterday"},
    ]
    assert [r["Id"] for r in relations.filter_by_date(records, date(2026, 10, 5))] == [1, 2]
    assert [r["Id"] for r in relations.filter_by_date(records, "2026-10-06")] == [3]

def test_normalize_date():
    assert relations.normalize_date(datetime(2026, 1, 2, 3, 4)) == date(2026, 1, 2)
    assert relations.normalize_date("2026-01-02") == date(2026, 1, 2)
    assert relations.normalize_date("02/01/2026") is None
    assert relations.normalize_date(None) is None

def test_index_and_find_by_id():
    records = [{"Id": 1, "name": "a"}, {"Id": "2", "name": "b"}, {"name": "no id"}]
    index = relations.index_by_id(records)
    assert set(index) == {1, 2}
    assert relations.find_by_id(records, {"Id": 2})["name"] == "b"
    assert relations.find_by_id(records, 99) is None
