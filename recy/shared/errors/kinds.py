"""
Error kinds and classification results.

Every failure that reaches a caller is reduced to one ErrorKind.
The set is closed: anything not recognized is Unexpected.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping


class ErrorKind(Enum):
    """Closed category of a classified failure."""

    VALIDATION_FAILED = "ValidationFailed"
    NOT_FOUND = "NotFound"
    CONFLICT = "Conflict"
    FOREIGN_KEY_VIOLATION = "ForeignKeyViolation"
    UNEXPECTED = "Unexpected"

    @property
    def default_status(self) -> int:
        return _DEFAULT_STATUS[self]


_DEFAULT_STATUS = {
    ErrorKind.VALIDATION_FAILED: 400,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.CONFLICT: 409,
    ErrorKind.FOREIGN_KEY_VIOLATION: 400,
    ErrorKind.UNEXPECTED: 500,
}


@dataclass(frozen=True)
class ClassifiedError:
    """Outcome of classifying one failure.

    Attributes:
        kind: The error category.
        status_code: HTTP status to respond with.
        message: Public message; a string or a structured object.
        details: Optional public field-to-message mapping or step context.
        payload: Extra public fields merged into non-500 envelopes.
    """

    kind: ErrorKind
    status_code: int
    message: str | Mapping[str, Any]
    details: Mapping[str, Any] | None = None
    payload: Mapping[str, Any] | None = None


class ClassifiedFailure(ABC):
    """A failure value that was classified where it happened.

    Workflows classify the failing step once and carry the result;
    the taxonomy passes it through instead of classifying again.
    """

    cause: BaseException

    @abstractmethod
    def classified(self) -> ClassifiedError:
        """Return the public classification of this failure."""
        raise NotImplementedError
