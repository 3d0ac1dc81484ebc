# /app/services/validation.py

from typing import Dict, Type

from pydantic import BaseModel, ValidationError

from .errors import InvalidInputError


def validate_payload(model: Type[BaseModel], data, partial: bool = False) -> Dict:
    """
    Validates a create/update payload and returns the plain record to store.

    `data` may be a dict or an already-built model instance. With
    `partial=True` only the fields the caller actually supplied are returned,
    so an update never overwrites a stored field with a default.
    """
    try:
        if isinstance(data, model):
            instance = data
        else:
            instance = model.model_validate(data.model_dump(exclude_unset=True) if isinstance(data, BaseModel) else data)
    except ValidationError as e:
        messages = "; ".join(f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors())
        raise InvalidInputError(f"Invalid {model.__name__} payload: {messages}", errors=e.errors()) from e
    return instance.model_dump(mode="json", exclude_unset=partial)
