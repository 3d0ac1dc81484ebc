# /app/services/relations.py

"""
Foreign-key normalization and filter-joins across entity collections.

Records reference each other loosely: a reference field may hold a raw id,
an embedded `{"Id": ...}` object, a comma-separated string of ids, or a list
of any of those. Everything is normalized here, at the boundary, so the
aggregation code only ever sees integer ids.

A record whose reference is missing or malformed never matches a filter and
never raises.
"""

import math
import re
from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Mapping, Optional, Set

from .errors import MalformedReferenceError

_DIGITS = re.compile(r"^\d+$")


# --- Strict Parsing ---

def parse_id_ref(value: Any) -> int:
    """
    Resolves a single reference to a positive integer id.

    Raises MalformedReferenceError when the value cannot be resolved. A string
    or list contributes only its first entry.
    """
    if value is None:
        raise MalformedReferenceError("Reference is missing.")
    if isinstance(value, bool):
        raise MalformedReferenceError(f"Boolean {value!r} is not an id.")
    if isinstance(value, int):
        if value > 0:
            return value
        raise MalformedReferenceError(f"Id {value} is not positive.")
    if isinstance(value, float):
        if math.isfinite(value) and value.is_integer() and value > 0:
            return int(value)
        raise MalformedReferenceError(f"Id {value} is not a positive integer.")
    if isinstance(value, Mapping):
        return parse_id_ref(value.get("Id"))
    if isinstance(value, str):
        tokens = [token.strip() for token in value.split(",") if token.strip()]
        if not tokens or not _DIGITS.match(tokens[0]):
            raise MalformedReferenceError(f"String {value!r} does not start with an id.")
        return parse_id_ref(int(tokens[0]))
    if isinstance(value, (list, tuple)):
        if not value:
            raise MalformedReferenceError("Reference list is empty.")
        return parse_id_ref(value[0])
    raise MalformedReferenceError(f"Unsupported reference type {type(value).__name__}.")


# --- Lenient Normalization ---

def normalize_id_ref(value: Any) -> Optional[int]:
    """Same as `parse_id_ref`, but returns None instead of raising."""
    try:
        return parse_id_ref(value)
    except MalformedReferenceError:
        return None


def normalize_id_set(value: Any) -> Set[int]:
    """
    Resolves a reference field that may name several records.

    "3,7,9" -> {3, 7, 9}; {"Id": 5} -> {5}; [1, {"Id": 2}] -> {1, 2};
    None -> set(). Tokens that cannot be resolved are dropped.
    """
    if value is None:
        return set()
    if isinstance(value, str):
        ids = set()
        for token in value.split(","):
            ref = normalize_id_ref(token)
            if ref is not None:
                ids.add(ref)
        return ids
    if isinstance(value, (list, tuple, set, frozenset)):
        ids = set()
        for item in value:
            ids |= normalize_id_set(item)
        return ids
    ref = normalize_id_ref(value)
    return {ref} if ref is not None else set()


def normalize_date(value: Any) -> Optional[date]:
    """Reduces a date, datetime or ISO string to a calendar date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip()[:10])
        except ValueError:
            return None
    return None


# --- Filter-Joins ---

def filter_by_foreign_key(collection: Iterable[Mapping], fk_field: str, target_id: Any) -> List[Mapping]:
    """Keeps the records whose single reference in `fk_field` points at `target_id`."""
    target = normalize_id_ref(target_id)
    if target is None:
        return []
    return [record for record in collection if normalize_id_ref(record.get(fk_field)) == target]


def filter_by_membership(collection: Iterable[Mapping], set_field: str, target_id: Any) -> List[Mapping]:
    """Keeps the records whose id set in `set_field` contains `target_id`."""
    target = normalize_id_ref(target_id)
    if target is None:
        return []
    return [record for record in collection if target in normalize_id_set(record.get(set_field))]


def members_of(owner: Mapping, set_field: str, collection: Iterable[Mapping]) -> List[Mapping]:
    """
    The records of `collection` whose Id appears in the owner's id set, in
    collection order. A class's `studentIds` against the students, for example.
    """
    member_ids = normalize_id_set(owner.get(set_field))
    return [record for record in collection if normalize_id_ref(record.get("Id")) in member_ids]


def filter_by_date(collection: Iterable[Mapping], on_date: Any, date_field: str = "date") -> List[Mapping]:
    """Keeps the records dated on the given calendar day."""
    target = normalize_date(on_date)
    if target is None:
        return []
    return [record for record in collection if normalize_date(record.get(date_field)) == target]


def index_by_id(collection: Iterable[Mapping]) -> Dict[int, Mapping]:
    """Maps each record's `Id` to the record. Records without a usable id are left out."""
    index = {}
    for record in collection:
        record_id = normalize_id_ref(record.get("Id"))
        if record_id is not None:
            index[record_id] = record
    return index


def find_by_id(collection: Iterable[Mapping], record_id: Any) -> Optional[Mapping]:
    target = normalize_id_ref(record_id)
    if target is None:
        return None
    for record in collection:
        if normalize_id_ref(record.get("Id")) == target:
            return record
    return None
