"""
Failure classification.

Maps any raw failure to a ClassifiedError. Classification is a pure
function of the failure's type and attributes: no IO, no global state,
the same failure always yields the same result.

Classifiers run in precedence order and the first match wins:
    0. failures already classified at a workflow step boundary
    1. request-shape validation failures
    2. record store constraint failures
    3. failures carrying an explicit status (4xx only)
    4. everything else -> Unexpected
"""

from typing import Any, Callable, Iterable, Mapping, Optional

from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from recy.domain.audit.errors import AuditDomainError, StorageError, StorageErrorCode
from recy.shared.errors.kinds import ClassifiedError, ClassifiedFailure, ErrorKind

INTERNAL_ERROR_MESSAGE = "Internal server error, contact support and provide the errorId"
DATABASE_ERROR_MESSAGE = "Database error occurred"
RECORD_NOT_FOUND_MESSAGE = "Record not found for the specified operation."

# Request locations FastAPI prefixes to validation paths.
_BODY_LOCATION = "body"

Classifier = Callable[[object], Optional[ClassifiedError]]


def classify(failure: object) -> ClassifiedError:
    """Classify a raw failure.

    Args:
        failure: An exception or a failure value.

    Returns:
        The classification. Never raises.
    """
    for classifier in _CLASSIFIERS:
        result = classifier(failure)
        if result is not None:
            return result
    return unexpected()


def unexpected() -> ClassifiedError:
    """Return the fixed classification used for unrecognized failures."""
    return ClassifiedError(
        kind=ErrorKind.UNEXPECTED,
        status_code=ErrorKind.UNEXPECTED.default_status,
        message=INTERNAL_ERROR_MESSAGE,
    )


def _classify_classified_failure(failure: object) -> Optional[ClassifiedError]:
    if isinstance(failure, ClassifiedFailure):
        return failure.classified()
    return None


def _classify_validation(failure: object) -> Optional[ClassifiedError]:
    if not isinstance(failure, (RequestValidationError, ValidationError)):
        return None
    issues = failure.errors()

    errors = [
        {"message": str(issue.get("msg", "Invalid value")), "path": _issue_path(issue.get("loc", ()))}
        for issue in issues
    ]
    details: dict[str, str] = {}
    for error in errors:
        field = ".".join(error["path"])
        if field in details:
            details[field] = f"{details[field]}; {error['message']}"
        else:
            details[field] = error["message"]

    return ClassifiedError(
        kind=ErrorKind.VALIDATION_FAILED,
        status_code=ErrorKind.VALIDATION_FAILED.default_status,
        message={"errors": errors},
        details=details,
        payload={"errors": errors},
    )


def _issue_path(location: Iterable[Any]) -> list[str]:
    """Render a validation location as a non-empty list of path segments."""
    segments = [str(segment) for segment in location]
    if len(segments) > 1 and segments[0] == _BODY_LOCATION:
        segments = segments[1:]
    return segments or [_BODY_LOCATION]


def _classify_storage(failure: object) -> Optional[ClassifiedError]:
    if not isinstance(failure, StorageError):
        return None

    fields = ", ".join(failure.fields) or "unknown"
    if failure.code is StorageErrorCode.UNIQUE_VIOLATION:
        return ClassifiedError(
            kind=ErrorKind.CONFLICT,
            status_code=ErrorKind.CONFLICT.default_status,
            message=f"Unique constraint failed on the field: {fields}",
            details={"fields": list(failure.fields)},
        )
    if failure.code is StorageErrorCode.FOREIGN_KEY_VIOLATION:
        return ClassifiedError(
            kind=ErrorKind.FOREIGN_KEY_VIOLATION,
            status_code=ErrorKind.FOREIGN_KEY_VIOLATION.default_status,
            message=f"Foreign key constraint failed on the field: {fields}",
            details={"fields": list(failure.fields)},
        )
    if failure.code is StorageErrorCode.RECORD_NOT_FOUND:
        return ClassifiedError(
            kind=ErrorKind.NOT_FOUND,
            status_code=ErrorKind.NOT_FOUND.default_status,
            message=RECORD_NOT_FOUND_MESSAGE,
        )
    # Rejected writes that are not uniqueness violations answer 400, not 409.
    return ClassifiedError(
        kind=ErrorKind.CONFLICT,
        status_code=400,
        message=DATABASE_ERROR_MESSAGE,
    )


def _classify_explicit_status(failure: object) -> Optional[ClassifiedError]:
    if isinstance(failure, AuditDomainError):
        status_code = failure.status_code
        message: str | Mapping[str, Any] = failure.message
        details = None
        payload = None
    elif isinstance(failure, StarletteHTTPException):
        status_code = failure.status_code
        message, details, payload = _unpack_http_detail(failure.detail)
    else:
        return None

    if status_code >= 500:
        return None

    return ClassifiedError(
        kind=_kind_for_status(status_code),
        status_code=status_code,
        message=message,
        details=details,
        payload=payload,
    )


def _unpack_http_detail(
    detail: Any,
) -> tuple[str | Mapping[str, Any], Optional[Mapping[str, Any]], Optional[Mapping[str, Any]]]:
    """Split an HTTPException detail into message, details and payload."""
    if isinstance(detail, Mapping):
        if "message" in detail:
            details = detail.get("details")
            return (
                detail["message"],
                details if isinstance(details, Mapping) else None,
                None,
            )
        return dict(detail), None, dict(detail)
    return str(detail), None, None


def _kind_for_status(status_code: int) -> ErrorKind:
    if status_code == 404:
        return ErrorKind.NOT_FOUND
    if status_code == 409:
        return ErrorKind.CONFLICT
    # The kind set is closed: every other client-side rejection (400, 405,
    # 429, ...) is reported as ValidationFailed and keeps its own status.
    return ErrorKind.VALIDATION_FAILED


_CLASSIFIERS: tuple[Classifier, ...] = (
    _classify_classified_failure,
    _classify_validation,
    _classify_storage,
    _classify_explicit_status,
)
