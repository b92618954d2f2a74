"""Shared schema pieces."""
from typing import List
from pydantic import BaseModel

# Optional leading "+", no leading zero, up to 16 digits
PHONE_PATTERN = r"^[+]?[1-9]\d{0,15}$"


def normalize_tags(tags) -> List[str]:
    """Accept a list or a comma separated string; trim, lower-case, drop blanks."""
    if tags is None:
        return []
    if isinstance(tags, str):
        tags = tags.split(",")
    return [str(tag).strip().lower() for tag in tags if str(tag).strip()]


class MessageResponse(BaseModel):
    """Plain acknowledgement."""
    message: str


class FieldErrorResponse(BaseModel):
    field: str
    message: str


class ErrorResponse(BaseModel):
    """Body of every error response."""
    detail: str
    errors: List[FieldErrorResponse] = []
