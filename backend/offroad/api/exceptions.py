"""Standard HTTP exceptions for common cases."""
from typing import Optional
from fastapi import HTTPException, status

from offroad.services.errors import (
    DomainError,
    ValidationError,
    NotFoundError,
    ConflictError,
    ForbiddenError,
)


def not_found(resource: str = "Resource", resource_id: Optional[int] = None) -> HTTPException:
    """
    Return 404 Not Found exception.

    Examples:
        raise not_found("Event", 123)  # "Event with ID 123 not found"
        raise not_found("User")         # "User not found"
    """
    detail = f"{resource} not found"
    if resource_id:
        detail = f"{resource} with ID {resource_id} not found"
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=detail
    )


def forbidden(message: str = "Not authorized to perform this action") -> HTTPException:
    """Return 403 Forbidden exception."""
    return HTTPException(
        status_code=status.HTTP_403_FORBIDDEN,
        detail=message
    )


def bad_request(message: str) -> HTTPException:
    """
    Return 400 Bad Request exception.

    Examples:
        raise bad_request("Registration is closed for this event: Event is full")
    """
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail=message
    )


def conflict(message: str) -> HTTPException:
    """
    Return 409 Conflict exception.

    Examples:
        raise conflict("User with this email already exists")
        raise conflict("Cannot delete event with existing registrations")
    """
    return HTTPException(
        status_code=status.HTTP_409_CONFLICT,
        detail=message
    )


def unauthorized(message: str = "Invalid email or password") -> HTTPException:
    """Return 401 Unauthorized exception."""
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=message
    )


def server_error(message: str = "Internal server error") -> HTTPException:
    """Return 500 Internal Server Error exception."""
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=message
    )


def from_domain_error(error: DomainError) -> HTTPException:
    """
    Translate a service-layer error into its HTTP exception.

    Examples:
        from_domain_error(NotFoundError("Event", 7))  # 404 "Event with ID 7 not found"
        from_domain_error(ConflictError("..."))       # 409
    """
    if isinstance(error, ValidationError):
        return bad_request(error.message)
    if isinstance(error, NotFoundError):
        return not_found(error.resource, error.resource_id)
    if isinstance(error, ConflictError):
        return conflict(error.message)
    if isinstance(error, ForbiddenError):
        return forbidden(error.message)
    return server_error()
