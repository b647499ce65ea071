class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class NotFoundError(DomainError):
    """Raised when a student, staff member, invoice, slip or adjustment does not exist."""


class InvalidStateError(DomainError):
    """Raised when an operation is not allowed in the document's current state.

    e.g. paying an already-Paid invoice, refreshing a Paid slip, editing an Applied adjustment.
    """
