"""
Adapter: Relational report and audit repositories.

Implements the ReportRepository and AuditRepository ports on SQLAlchemy
Core. Every method runs in its own transaction; nothing spans calls.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import delete, insert, select, update
from sqlalchemy.engine import Engine, Row
from sqlalchemy.exc import IntegrityError

from recy.domain.audit.entities import AuditChanges, AuditRecord, NewAudit, ReportRecord
from recy.domain.audit.errors import StorageError, StorageErrorCode
from recy.domain.audit.ports import AuditRepository, ReportRepository
from recy.infrastructure.database import audits, recycling_reports
from recy.infrastructure.storage_errors import translate_integrity_error

logger = logging.getLogger(__name__)

AUDIT_FOREIGN_KEYS = ("reportId",)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _to_report(row: Row) -> ReportRecord:
    return ReportRecord(
        id=row.id,
        submitted_by=row.submitted_by,
        wallet_address=row.wallet_address,
        audited=row.audited,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _to_audit(row: Row) -> AuditRecord:
    return AuditRecord(
        id=row.id,
        report_id=row.report_id,
        audited=row.audited,
        auditor_id=row.auditor_id,
        comments=row.comments,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


class SqlReportRepository(ReportRepository):
    """Reads recycling reports and updates their audited flag."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def get_by_id(self, report_id: str) -> Optional[ReportRecord]:
        query = select(recycling_reports).where(recycling_reports.c.id == report_id)
        with self._engine.connect() as conn:
            row = conn.execute(query).first()
        return _to_report(row) if row is not None else None

    def set_audited(self, report_id: str, audited: bool) -> ReportRecord:
        statement = (
            update(recycling_reports)
            .where(recycling_reports.c.id == report_id)
            .values(audited=audited, updated_at=_utcnow())
        )
        with self._engine.begin() as conn:
            result = conn.execute(statement)
            if result.rowcount == 0:
                raise StorageError(StorageErrorCode.RECORD_NOT_FOUND, ("id",), "recycling_reports")
            row = conn.execute(
                select(recycling_reports).where(recycling_reports.c.id == report_id)
            ).one()
        logger.info("Report %s marked audited=%s", report_id, audited)
        return _to_report(row)


class SqlAuditRepository(AuditRepository):
    """Persists and retrieves audits."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def list_all(self) -> list[AuditRecord]:
        with self._engine.connect() as conn:
            rows = conn.execute(select(audits).order_by(audits.c.id)).fetchall()
        return [_to_audit(row) for row in rows]

    def get_by_id(self, audit_id: str) -> Optional[AuditRecord]:
        with self._engine.connect() as conn:
            row = conn.execute(select(audits).where(audits.c.id == audit_id)).first()
        return _to_audit(row) if row is not None else None

    def create(self, audit: NewAudit) -> AuditRecord:
        now = _utcnow()
        statement = insert(audits).values(
            id=audit.id,
            report_id=audit.report_id,
            audited=audit.audited,
            auditor_id=audit.auditor_id,
            comments=audit.comments,
            created_at=now,
            updated_at=now,
        )
        try:
            with self._engine.begin() as conn:
                conn.execute(statement)
                row = conn.execute(select(audits).where(audits.c.id == audit.id)).one()
        except IntegrityError as exc:
            raise translate_integrity_error(exc, "audits", AUDIT_FOREIGN_KEYS) from exc
        return _to_audit(row)

    def update(self, audit_id: str, changes: AuditChanges) -> AuditRecord:
        statement = (
            update(audits)
            .where(audits.c.id == audit_id)
            .values(audited=changes.audited, comments=changes.comments, updated_at=_utcnow())
        )
        try:
            with self._engine.begin() as conn:
                result = conn.execute(statement)
                if result.rowcount == 0:
                    raise StorageError(StorageErrorCode.RECORD_NOT_FOUND, ("id",), "audits")
                row = conn.execute(select(audits).where(audits.c.id == audit_id)).one()
        except IntegrityError as exc:
            raise translate_integrity_error(exc, "audits", AUDIT_FOREIGN_KEYS) from exc
        return _to_audit(row)

    def delete(self, audit_id: str) -> AuditRecord:
        with self._engine.begin() as conn:
            row = conn.execute(select(audits).where(audits.c.id == audit_id)).first()
            if row is None:
                raise StorageError(StorageErrorCode.RECORD_NOT_FOUND, ("id",), "audits")
            conn.execute(delete(audits).where(audits.c.id == audit_id))
        return _to_audit(row)
