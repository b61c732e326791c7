from __future__ import annotations

from typing import Optional


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class InvalidDateRange(ValidationError):
    """Start date is after end date."""


class ApproverNotAnEmployee(ValidationError):
    """The approving user has no employee record."""


class NotFoundError(DomainError):
    """Raised when an employee, leave request or record does not exist."""


class ConflictError(DomainError):
    """Raised when an action collides with existing state."""


class AlreadyCheckedIn(ConflictError):
    pass


class AlreadyCheckedOut(ConflictError):
    pass


class OverlappingLeaveRequest(ConflictError):
    pass


class DuplicateRecord(ConflictError):
    """A unique key was violated in storage."""


class InvalidStateTransition(DomainError):
    """Raised when acting on an entity in the wrong state.

    ``current_status`` carries the state the entity was actually in, when known.
    """

    def __init__(self, message: str, *, current_status: Optional[str] = None):
        super().__init__(message)
        self.current_status = current_status


class NoCheckInFound(InvalidStateTransition):
    pass


class MustCheckInFirst(InvalidStateTransition):
    pass


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""
