"""Custom exceptions for tiermem.

This module defines the exception hierarchy used throughout the system.
Domain errors carry a machine-readable ``code`` so the use-case layer can
hand them back inside a failed :class:`~tiermem.core.result.Result` and
callers can map them to transport-level statuses.
"""


class TierMemError(Exception):
    """Base exception for all tiermem errors.

    All custom exceptions in the tiermem system should inherit from this class.
    """

    pass


class DomainError(TierMemError):
    """Base exception for errors that cross the use-case boundary.

    Attributes:
        code: Machine-readable error code (e.g. ``VALIDATION_ERROR``).
        message: Human-readable description of the failure.
    """

    code: str = "DOMAIN_ERROR"

    def __init__(self, message: str, code: str | None = None):
        if code is not None:
            self.code = code
        self.message = message
        super().__init__(message)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r})"


class ValidationError(DomainError):
    """Raised when an invariant is violated on construction or mutation.

    Always recoverable by the caller correcting its input.
    """

    code = "VALIDATION_ERROR"


class NotFoundError(DomainError):
    """Raised when a requested record does not exist.

    Attributes:
        entity: Kind of record that was looked up.
        entity_id: Identifier that was looked up, if any.
    """

    code = "NOT_FOUND"

    def __init__(self, entity: str, entity_id: str | None = None):
        self.entity = entity
        self.entity_id = entity_id
        if entity_id:
            message = f"{entity} with id {entity_id} not found"
        else:
            message = f"{entity} not found"
        super().__init__(message)


class InvariantViolationError(DomainError):
    """Raised when a cross-aggregate invariant no longer holds."""

    code = "INVARIANT_VIOLATION"


class ConsolidationError(DomainError):
    """Raised when a consolidation phase fails.

    Attributes:
        phase: Name of the phase that failed.
    """

    code = "CONSOLIDATION_ERROR"

    def __init__(self, phase: str, message: str):
        self.phase = phase
        super().__init__(f"Consolidation phase '{phase}' failed: {message}")
