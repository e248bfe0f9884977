"""
Domain-specific errors for the audit bounded context.

All errors raised from the domain layer must be defined here.
Business errors carry the HTTP status they are reported with;
they are turned into error envelopes at the interface layer.
No framework imports allowed.
"""

from enum import Enum


class AuditDomainError(Exception):
    """Base error for all audit domain errors."""

    status_code = 400

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(self.message)


class ReportNotFoundError(AuditDomainError):
    """Raised when an audit references a report that does not exist."""

    status_code = 404

    def __init__(self, report_id: str) -> None:
        super().__init__(
            "Audit creation failed because there is no valid report with this ID."
        )
        self.report_id = report_id


class AuditNotFoundError(AuditDomainError):
    """Raised when an audit cannot be found."""

    status_code = 404

    def __init__(self, audit_id: str) -> None:
        super().__init__(f"Audit not found: {audit_id}")
        self.audit_id = audit_id


class AuditNotApprovedError(AuditDomainError):
    """Raised when minting is requested for an audit that did not pass."""

    status_code = 400

    def __init__(self, audit_id: str) -> None:
        super().__init__(
            f"NFT minting requires an audited report; audit {audit_id} is not audited."
        )
        self.audit_id = audit_id


class MintingServiceError(AuditDomainError):
    """Raised when the minting service call fails or times out."""

    status_code = 502

    def __init__(self, reason: str) -> None:
        super().__init__(f"Minting service request failed: {reason}")
        self.reason = reason


class StorageErrorCode(Enum):
    """Constraint codes surfaced by record store adapters."""

    UNIQUE_VIOLATION = "unique_violation"
    FOREIGN_KEY_VIOLATION = "foreign_key_violation"
    RECORD_NOT_FOUND = "record_not_found"
    OTHER = "other"


class StorageError(Exception):
    """Raised by record store adapters when a write is rejected.

    Attributes:
        code: Which constraint rejected the statement.
        fields: Offending API field names, when the store reports them.
        table: Table the statement targeted.
    """

    def __init__(
        self,
        code: StorageErrorCode,
        fields: tuple[str, ...] = (),
        table: str | None = None,
    ) -> None:
        self.code = code
        self.fields = tuple(fields)
        self.table = table
        super().__init__(f"{code.value} on {table or 'unknown table'}: {', '.join(fields)}")
