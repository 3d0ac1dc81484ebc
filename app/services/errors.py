# /app/services/errors.py

"""
Domain error types shared by the store adapters and the business services.

Routers translate these into HTTP status codes; services never catch them
unless they have something better to do than propagate.
"""


class NotFoundError(LookupError):
    """An operation referenced an id that no record carries."""

    def __init__(self, entity: str, record_id=None):
        self.entity = entity
        self.record_id = record_id
        super().__init__(f"{entity.capitalize()} not found")


class InvalidInputError(ValueError):
    """A payload failed validation before it could be written."""

    def __init__(self, message: str, errors=None):
        self.errors = errors or []
        super().__init__(message)


class MalformedReferenceError(ValueError):
    """A foreign-key field could not be normalized to an integer id."""
