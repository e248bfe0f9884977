"""
Error responder.

Turns any failure into an ErrorEnvelope and emits exactly one log
record per call. Unexpected failures get a correlation id, are logged at
ERROR with the original failure, and are reported to the caller with a
fixed message only. Every other kind is an expected, user-facing
outcome and is logged at WARNING.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Mapping

from recy.shared.errors.envelope import RESERVED_FIELDS, ErrorEnvelope
from recy.shared.errors.kinds import ClassifiedError, ClassifiedFailure, ErrorKind
from recy.shared.errors.taxonomy import classify
from recy.shared.identifiers import new_ulid


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _isoformat(moment: datetime) -> str:
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace(
        "+00:00", "Z"
    )


class ErrorResponder:
    """Builds error envelopes at the system boundary.

    Args:
        logger: Log sink, configured once at startup.
        id_generator: Produces correlation ids for unexpected failures.
        clock: Returns the current time for envelope timestamps.
    """

    def __init__(
        self,
        logger: logging.Logger,
        id_generator: Callable[[], str] = new_ulid,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._logger = logger
        self._id_generator = id_generator
        self._clock = clock

    def respond(self, failure: object, path: str) -> ErrorEnvelope:
        """Classify a failure and build its envelope.

        Args:
            failure: The raw failure (exception or workflow failure value).
            path: Request path the failure occurred on.

        Returns:
            The envelope to send to the caller.
        """
        classified = classify(failure)
        body: dict[str, Any] = {
            "statusCode": classified.status_code,
            "timestamp": _isoformat(self._clock()),
            "path": path,
            "message": _plain(classified.message),
            "details": _plain(classified.details),
        }

        if classified.kind is ErrorKind.UNEXPECTED:
            body["errorId"] = self._log_unexpected(failure, path)
            return ErrorEnvelope(**body)

        self._log_expected(classified, path)
        if classified.payload:
            for key, value in classified.payload.items():
                if key not in RESERVED_FIELDS:
                    body[key] = _plain(value)
        return ErrorEnvelope(**body)

    def _log_unexpected(self, failure: object, path: str) -> str:
        error_id = self._id_generator()
        original = failure.cause if isinstance(failure, ClassifiedFailure) else failure
        exc_info = (
            (type(original), original, original.__traceback__)
            if isinstance(original, BaseException)
            else None
        )
        self._logger.error(
            "Unexpected exception thrown [errorId=%s path=%s]: %r",
            error_id,
            path,
            original,
            exc_info=exc_info,
            extra={"errorId": error_id, "path": path, "failure_type": type(original).__name__},
        )
        return error_id

    def _log_expected(self, classified: ClassifiedError, path: str) -> None:
        summary = classified.message if isinstance(classified.message, str) else classified.kind.value
        self._logger.warning(
            "%s (%d) on %s: %s",
            classified.kind.value,
            classified.status_code,
            path,
            summary,
            extra={"path": path, "kind": classified.kind.value, "status_code": classified.status_code},
        )


def _plain(value: Any) -> Any:
    """Copy mappings and sequences into plain JSON-compatible containers."""
    if isinstance(value, Mapping):
        return {str(key): _plain(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(item) for item in value]
    return value
