"""
Port interfaces (ABCs) for the audit bounded context.

Ports define the contracts that the domain requires from the outside world.
Infrastructure adapters implement these interfaces.
The domain layer never depends on concrete implementations.

Record store contract: every method is atomic on its own; nothing
is promised across calls. Rejected writes raise StorageError.
"""

from abc import ABC, abstractmethod
from typing import Optional

from recy.domain.audit.entities import (
    AuditChanges,
    AuditRecord,
    MintReceipt,
    MintRequest,
    NewAudit,
    ReportRecord,
)


class ReportRepository(ABC):
    """Port for reading recycling reports and flagging them as audited."""

    @abstractmethod
    def get_by_id(self, report_id: str) -> Optional[ReportRecord]:
        """Return a report by its ID, or None if not found."""
        raise NotImplementedError

    @abstractmethod
    def set_audited(self, report_id: str, audited: bool) -> ReportRecord:
        """Update the report's audited flag and return the updated report.

        Raises:
            StorageError: RECORD_NOT_FOUND if the report no longer exists.
        """
        raise NotImplementedError


class AuditRepository(ABC):
    """Port for persisting and retrieving audits."""

    @abstractmethod
    def list_all(self) -> list[AuditRecord]:
        """Return every audit ordered by id (creation order)."""
        raise NotImplementedError

    @abstractmethod
    def get_by_id(self, audit_id: str) -> Optional[AuditRecord]:
        """Return an audit by its ID, or None if not found."""
        raise NotImplementedError

    @abstractmethod
    def create(self, audit: NewAudit) -> AuditRecord:
        """Persist a new audit.

        Raises:
            StorageError: UNIQUE_VIOLATION for a duplicate (auditorId, reportId)
                or id, FOREIGN_KEY_VIOLATION if the report does not exist.
        """
        raise NotImplementedError

    @abstractmethod
    def update(self, audit_id: str, changes: AuditChanges) -> AuditRecord:
        """Apply changes to an audit and return the updated record.

        Raises:
            StorageError: RECORD_NOT_FOUND if the audit no longer exists.
        """
        raise NotImplementedError

    @abstractmethod
    def delete(self, audit_id: str) -> AuditRecord:
        """Delete an audit and return the deleted record.

        Raises:
            StorageError: RECORD_NOT_FOUND if the audit no longer exists.
        """
        raise NotImplementedError


class MintingPort(ABC):
    """Port for triggering NFT minting for an audited report."""

    @abstractmethod
    def mint(self, request: MintRequest) -> MintReceipt:
        """Mint an NFT and return the service receipt."""
        raise NotImplementedError
