"""
core.domain.exceptions — Domain-specific exception hierarchy.

These exceptions represent business-rule violations inside service layers.
They are deliberately **not** DRF exceptions so that the domain layer stays
framework-agnostic.  The global DRF exception handler
(``core.domain.exception_handler``) maps them to HTTP responses carrying
both the human-readable message and the machine-readable ``code``.

Mapping cheatsheet
------------------
┌──────────────────────┬───────────────────────┬──────┐
│ Domain Exception     │ code                  │ HTTP │
├──────────────────────┼───────────────────────┼──────┤
│ DomainError          │ domain_error          │ 400  │
│ InvalidScore         │ invalid_score         │ 400  │
│ PermissionDenied     │ forbidden             │ 403  │
│ NotFound             │ not_found             │ 404  │
│ Conflict             │ conflict              │ 409  │
│ InvalidTransition    │ invalid_transition    │ 409  │
│ PreconditionNotMet   │ precondition_not_met  │ 409  │
│ TechnicianOverloaded │ technician_overloaded │ 409  │
│ NotResolvedYet       │ not_resolved_yet      │ 409  │
│ EditWindowExpired    │ edit_window_expired   │ 409  │
└──────────────────────┴───────────────────────┴──────┘

Recommended usage inside a service::

    from core.domain.exceptions import InvalidTransition

    if target not in ALLOWED_TRANSITIONS[current]:
        raise InvalidTransition(current=current, target=target)

Every exception is raised before any write, or inside a
``transaction.atomic`` block that is rolled back, so a rejected request
never leaves a partial write behind.
"""

from __future__ import annotations


class DomainError(Exception):
    """
    Base class for all domain / business-rule errors.

    Catch this at the view boundary and convert to a 400 Bad Request.
    """

    code = "domain_error"

    def __init__(self, message: str = "A business rule was violated.") -> None:
        self.message = message
        super().__init__(self.message)


class PermissionDenied(DomainError):
    """
    The authenticated user does not have the capability required for
    this operation on this complaint.

    Maps to HTTP 403.
    """

    code = "forbidden"

    def __init__(self, message: str = "You do not have permission to perform this action.") -> None:
        super().__init__(message)


class NotFound(DomainError):
    """
    The requested resource does not exist.

    Maps to HTTP 404.
    """

    code = "not_found"

    def __init__(self, message: str = "The requested resource was not found.") -> None:
        super().__init__(message)


class Conflict(DomainError):
    """
    The operation conflicts with the current state of the resource.

    Maps to HTTP 409.
    """

    code = "conflict"

    def __init__(self, message: str = "The operation conflicts with the current state.") -> None:
        super().__init__(message)


class InvalidTransition(Conflict):
    """
    A state-machine transition that is not allowed from the current status.

    Inherits from ``Conflict`` because an invalid transition IS a conflict
    with the resource's current state.  Maps to HTTP 409.

    Example::

        raise InvalidTransition(current="Fixed", target="Pending")
    """

    code = "invalid_transition"

    def __init__(
        self,
        message: str | None = None,
        *,
        current: str | None = None,
        target: str | None = None,
        reason: str | None = None,
    ) -> None:
        if message is None:
            parts = ["Invalid state transition"]
            if current and target:
                parts.append(f"from '{current}' to '{target}'")
            if reason:
                parts.append(f"({reason})")
            message = " ".join(parts) + "."
        super().__init__(message)
        self.current = current
        self.target = target
        self.reason = reason


class PreconditionNotMet(Conflict):
    """
    A transition is legal in the state table but a supporting
    precondition (e.g. the technician's work photos) is missing.
    """

    code = "precondition_not_met"

    def __init__(self, message: str = "A precondition for this operation is not met.") -> None:
        super().__init__(message)


class TechnicianOverloaded(Conflict):
    """The technician still holds Pending or InProgress work."""

    code = "technician_overloaded"

    def __init__(
        self,
        message: str | None = None,
        *,
        open_count: int | None = None,
    ) -> None:
        if message is None:
            message = (
                "Technician has pending work. "
                "Complete current tasks before assigning new ones."
            )
        super().__init__(message)
        self.open_count = open_count


class InvalidScore(DomainError):
    """Rating score outside the accepted range."""

    code = "invalid_score"

    def __init__(self, message: str = "Rating must be between 1 and 5.") -> None:
        super().__init__(message)


class NotResolvedYet(Conflict):
    """The complaint has not reached the Fixed state."""

    code = "not_resolved_yet"

    def __init__(self, message: str = "You can only rate fixed complaints.") -> None:
        super().__init__(message)


class EditWindowExpired(Conflict):
    """The rating can no longer be edited."""

    code = "edit_window_expired"

    def __init__(self, message: str = "You can only edit your rating within 24 hours.") -> None:
        super().__init__(message)
