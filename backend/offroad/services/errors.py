"""Domain errors raised by the service layer.

Services never build HTTP responses. They raise one of these and the API
layer (see offroad.main) maps each class to its status code.
"""
from dataclasses import dataclass
from typing import List, Optional


@dataclass(frozen=True)
class FieldError:
    """A single violated field constraint."""
    field: str
    message: str

    def as_dict(self) -> dict:
        return {"field": self.field, "message": self.message}


class DomainError(Exception):
    """Base class for recoverable, caller-reportable failures."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(DomainError):
    """Malformed input or a failed business rule."""

    def __init__(self, message: str, errors: Optional[List[FieldError]] = None):
        super().__init__(message)
        self.errors = list(errors or [])


class NotFoundError(DomainError):
    """Referenced entity is absent or not visible to the caller."""

    def __init__(self, resource: str, resource_id: Optional[int] = None):
        message = f"{resource} not found"
        if resource_id is not None:
            message = f"{resource} with ID {resource_id} not found"
        super().__init__(message)
        self.resource = resource
        self.resource_id = resource_id


class ConflictError(DomainError):
    """Duplicate entity, delete-with-dependents or a lost concurrent update."""


class ForbiddenError(DomainError):
    """Caller may not act on another user's data."""
