"""
Tests for the SQLAlchemy repositories against an in-memory SQLite database,
and for integrity error translation.
"""

from datetime import datetime, timezone

import pytest
from sqlalchemy import insert
from sqlalchemy.exc import IntegrityError

from recy.application.audit.create_audit import REPORT_FLAG_UPDATED, CreateAuditUseCase
from recy.application.audit.dtos import CreateAuditCommand
from recy.application.workflow import WorkflowFailure, WorkflowSuccess
from recy.domain.audit.entities import AuditChanges, NewAudit
from recy.domain.audit.errors import StorageError, StorageErrorCode
from recy.infrastructure.audit.sql_repositories import SqlAuditRepository, SqlReportRepository
from recy.infrastructure.database import build_engine, create_schema, recycling_reports
from recy.infrastructure.storage_errors import translate_integrity_error
from recy.shared.errors.kinds import ErrorKind


@pytest.fixture
def engine():
    engine = build_engine("sqlite://")
    create_schema(engine)
    now = datetime(2024, 1, 1, tzinfo=timezone.utc)
    with engine.begin() as conn:
        conn.execute(
            insert(recycling_reports).values(
                id="r-1", submitted_by="recycler-1", audited=False, created_at=now, updated_at=now
            )
        )
    yield engine
    engine.dispose()


@pytest.fixture
def reports(engine) -> SqlReportRepository:
    return SqlReportRepository(engine)


@pytest.fixture
def audits(engine) -> SqlAuditRepository:
    return SqlAuditRepository(engine)


def _new_audit(audit_id: str = "01HXAUDIT", auditor_id: str = "a-1", report_id: str = "r-1"):
    return NewAudit(
        id=audit_id, report_id=report_id, audited=True, auditor_id=auditor_id, comments="ok"
    )


class TestSqlReportRepository:
    def test_get_existing_and_missing(self, reports: SqlReportRepository) -> None:
        report = reports.get_by_id("r-1")
        assert report is not None
        assert report.submitted_by == "recycler-1"
        assert report.audited is False
        assert reports.get_by_id("r-404") is None

    def test_set_audited(self, reports: SqlReportRepository) -> None:
        updated = reports.set_audited("r-1", True)
        assert updated.audited is True
        assert reports.get_by_id("r-1").audited is True

    def test_set_audited_on_missing_report(self, reports: SqlReportRepository) -> None:
        with pytest.raises(StorageError) as exc_info:
            reports.set_audited("r-404", True)
        assert exc_info.value.code is StorageErrorCode.RECORD_NOT_FOUND


class TestSqlAuditRepository:
    def test_create_and_read(self, audits: SqlAuditRepository) -> None:
        created = audits.create(_new_audit())

        assert created.id == "01HXAUDIT"
        assert created.audited is True
        assert created.comments == "ok"
        assert audits.get_by_id("01HXAUDIT") == created
        assert audits.list_all() == [created]

    def test_duplicate_auditor_and_report(self, audits: SqlAuditRepository) -> None:
        audits.create(_new_audit())
        with pytest.raises(StorageError) as exc_info:
            audits.create(_new_audit(audit_id="01HXOTHER"))

        assert exc_info.value.code is StorageErrorCode.UNIQUE_VIOLATION
        assert exc_info.value.fields == ("auditorId", "reportId")
        assert len(audits.list_all()) == 1

    def test_missing_report_is_foreign_key_violation(self, audits: SqlAuditRepository) -> None:
        with pytest.raises(StorageError) as exc_info:
            audits.create(_new_audit(report_id="r-404"))

        assert exc_info.value.code is StorageErrorCode.FOREIGN_KEY_VIOLATION
        assert exc_info.value.fields == ("reportId",)

    def test_update(self, audits: SqlAuditRepository) -> None:
        audits.create(_new_audit())
        updated = audits.update("01HXAUDIT", AuditChanges(audited=False, comments=None))
        assert updated.audited is False
        assert updated.comments is None

    def test_update_missing(self, audits: SqlAuditRepository) -> None:
        with pytest.raises(StorageError) as exc_info:
            audits.update("missing", AuditChanges(audited=False, comments=None))
        assert exc_info.value.code is StorageErrorCode.RECORD_NOT_FOUND

    def test_delete(self, audits: SqlAuditRepository) -> None:
        created = audits.create(_new_audit())
        assert audits.delete("01HXAUDIT") == created
        assert audits.get_by_id("01HXAUDIT") is None

    def test_delete_missing(self, audits: SqlAuditRepository) -> None:
        with pytest.raises(StorageError) as exc_info:
            audits.delete("missing")
        assert exc_info.value.code is StorageErrorCode.RECORD_NOT_FOUND


class TestCreateAuditOnSql:
    """The create-audit workflow against the relational store."""

    def test_happy_path(self, reports, audits) -> None:
        result = CreateAuditUseCase(reports, audits).execute(
            CreateAuditCommand(report_id="r-1", audited=True, auditor_id="a-1")
        )
        assert isinstance(result, WorkflowSuccess)
        assert reports.get_by_id("r-1").audited is True

    def test_duplicate_is_conflict(self, reports, audits) -> None:
        use_case = CreateAuditUseCase(reports, audits)
        command = CreateAuditCommand(report_id="r-1", audited=True, auditor_id="a-1")
        use_case.execute(command)

        result = use_case.execute(command)

        assert isinstance(result, WorkflowFailure)
        assert result.error.kind is ErrorKind.CONFLICT
        assert result.error.message == "Unique constraint failed on the field: auditorId, reportId"

    def test_flag_failure_leaves_audit_stored(self, engine, audits) -> None:
        class BrokenReports(SqlReportRepository):
            def set_audited(self, report_id, audited):
                raise TimeoutError("statement timeout")

        result = CreateAuditUseCase(BrokenReports(engine), audits).execute(
            CreateAuditCommand(report_id="r-1", audited=True, auditor_id="a-1")
        )

        assert isinstance(result, WorkflowFailure)
        assert result.step == REPORT_FLAG_UPDATED
        assert audits.get_by_id(result.references["auditId"]) is not None


class FakePgError(Exception):
    """Stands in for a psycopg2 error carrying a SQLSTATE."""

    def __init__(self, pgcode: str, message: str) -> None:
        super().__init__(message)
        self.pgcode = pgcode


def _integrity_error(orig: Exception) -> IntegrityError:
    return IntegrityError("INSERT INTO audits ...", {}, orig)


class TestTranslateIntegrityError:
    """Driver errors become StorageError with API field names."""

    def test_postgres_unique_violation(self) -> None:
        orig = FakePgError(
            "23505",
            'duplicate key value violates unique constraint "uq_audits_auditor_report"\n'
            "DETAIL:  Key (auditor_id, report_id)=(a-1, r-1) already exists.",
        )
        error = translate_integrity_error(_integrity_error(orig), "audits")
        assert error.code is StorageErrorCode.UNIQUE_VIOLATION
        assert error.fields == ("auditorId", "reportId")
        assert error.table == "audits"

    def test_postgres_foreign_key_violation(self) -> None:
        orig = FakePgError(
            "23503",
            'insert or update on table "audits" violates foreign key constraint\n'
            'DETAIL:  Key (report_id)=(r-404) is not present in table "recycling_reports".',
        )
        error = translate_integrity_error(_integrity_error(orig), "audits", ("reportId",))
        assert error.code is StorageErrorCode.FOREIGN_KEY_VIOLATION
        assert error.fields == ("reportId",)

    def test_postgres_foreign_key_without_detail_uses_known_keys(self) -> None:
        orig = FakePgError("23503", "violates foreign key constraint")
        error = translate_integrity_error(_integrity_error(orig), "audits", ("reportId",))
        assert error.fields == ("reportId",)

    def test_sqlite_unique_violation(self) -> None:
        orig = Exception("UNIQUE constraint failed: audits.auditor_id, audits.report_id")
        error = translate_integrity_error(_integrity_error(orig), "audits")
        assert error.code is StorageErrorCode.UNIQUE_VIOLATION
        assert error.fields == ("auditorId", "reportId")

    def test_other_integrity_error(self) -> None:
        orig = FakePgError("23502", 'null value in column "auditor_id" violates not-null constraint')
        error = translate_integrity_error(_integrity_error(orig), "audits")
        assert error.code is StorageErrorCode.OTHER
        assert error.fields == ()
