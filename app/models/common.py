# /app/models/common.py

from typing import Any, Dict, List, Union

# A foreign-key field as it arrives from clients and fixtures: a raw id, a
# comma-separated id string, an embedded {"Id": ...} object, or a list of these.
# Normalization happens in services/relations.py, never in the models.
IdRef = Union[int, str, Dict[str, Any], List[Any]]


def reject_null(value):
    """For partial updates: a required field may be omitted, but not cleared."""
    if value is None:
        raise ValueError("This field is required and cannot be null.")
    return value
