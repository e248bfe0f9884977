"""
Adapter: Process-local record store.

Implements ReportRepository and AuditRepository over dictionaries with
the same contract as the relational adapters: each call is atomic
(guarded by one lock), uniqueness and foreign keys are enforced, and
writes against missing rows raise RECORD_NOT_FOUND. Nothing is atomic
across calls.

Selected with STORAGE_BACKEND=memory; also used to seed tests.
"""

import threading
from dataclasses import replace
from datetime import datetime, timezone
from typing import Optional

from recy.domain.audit.entities import AuditChanges, AuditRecord, NewAudit, ReportRecord
from recy.domain.audit.errors import StorageError, StorageErrorCode
from recy.domain.audit.ports import AuditRepository, ReportRepository


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class InMemoryRecordStore:
    """Shared tables for the in-memory repositories."""

    def __init__(self) -> None:
        self.lock = threading.Lock()
        self.reports: dict[str, ReportRecord] = {}
        self.audits: dict[str, AuditRecord] = {}

    def add_report(
        self,
        report_id: str,
        submitted_by: str = "recycler",
        audited: bool = False,
        wallet_address: Optional[str] = None,
    ) -> ReportRecord:
        """Insert a report. Reports are created outside the audit context."""
        now = _utcnow()
        report = ReportRecord(
            id=report_id,
            submitted_by=submitted_by,
            wallet_address=wallet_address,
            audited=audited,
            created_at=now,
            updated_at=now,
        )
        with self.lock:
            self.reports[report_id] = report
        return report

    def remove_report(self, report_id: str) -> None:
        with self.lock:
            self.reports.pop(report_id, None)


class InMemoryReportRepository(ReportRepository):
    """ReportRepository over an InMemoryRecordStore."""

    def __init__(self, store: InMemoryRecordStore) -> None:
        self._store = store

    def get_by_id(self, report_id: str) -> Optional[ReportRecord]:
        with self._store.lock:
            return self._store.reports.get(report_id)

    def set_audited(self, report_id: str, audited: bool) -> ReportRecord:
        with self._store.lock:
            report = self._store.reports.get(report_id)
            if report is None:
                raise StorageError(StorageErrorCode.RECORD_NOT_FOUND, ("id",), "recycling_reports")
            updated = replace(report, audited=audited, updated_at=_utcnow())
            self._store.reports[report_id] = updated
            return updated


class InMemoryAuditRepository(AuditRepository):
    """AuditRepository over an InMemoryRecordStore."""

    def __init__(self, store: InMemoryRecordStore) -> None:
        self._store = store

    def list_all(self) -> list[AuditRecord]:
        with self._store.lock:
            return [self._store.audits[key] for key in sorted(self._store.audits)]

    def get_by_id(self, audit_id: str) -> Optional[AuditRecord]:
        with self._store.lock:
            return self._store.audits.get(audit_id)

    def create(self, audit: NewAudit) -> AuditRecord:
        with self._store.lock:
            if audit.id in self._store.audits:
                raise StorageError(StorageErrorCode.UNIQUE_VIOLATION, ("id",), "audits")
            for existing in self._store.audits.values():
                if (existing.auditor_id, existing.report_id) == (audit.auditor_id, audit.report_id):
                    raise StorageError(
                        StorageErrorCode.UNIQUE_VIOLATION, ("auditorId", "reportId"), "audits"
                    )
            if audit.report_id not in self._store.reports:
                raise StorageError(StorageErrorCode.FOREIGN_KEY_VIOLATION, ("reportId",), "audits")

            now = _utcnow()
            record = AuditRecord(
                id=audit.id,
                report_id=audit.report_id,
                audited=audit.audited,
                auditor_id=audit.auditor_id,
                comments=audit.comments,
                created_at=now,
                updated_at=now,
            )
            self._store.audits[record.id] = record
            return record

    def update(self, audit_id: str, changes: AuditChanges) -> AuditRecord:
        with self._store.lock:
            audit = self._store.audits.get(audit_id)
            if audit is None:
                raise StorageError(StorageErrorCode.RECORD_NOT_FOUND, ("id",), "audits")
            updated = replace(
                audit,
                audited=changes.audited,
                comments=changes.comments,
                updated_at=_utcnow(),
            )
            self._store.audits[audit_id] = updated
            return updated

    def delete(self, audit_id: str) -> AuditRecord:
        with self._store.lock:
            audit = self._store.audits.pop(audit_id, None)
            if audit is None:
                raise StorageError(StorageErrorCode.RECORD_NOT_FOUND, ("id",), "audits")
            return audit
