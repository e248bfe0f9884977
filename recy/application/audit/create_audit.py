"""
Use case: Create an audit for a recycling report.

Input: CreateAuditCommand (report_id, audited, auditor_id, comments)
Output: WorkflowResult[AuditRecord]
Side effects: inserts one audit, updates the report's audited flag.
Failure cases:
    ReportVerified     NotFound when the report does not exist.
    AuditPersisted     Conflict on a duplicate (auditorId, reportId),
                       ForeignKeyViolation if the report vanished,
                       Unexpected otherwise.
    ReportFlagUpdated  Partial failure: the audit is already stored and
                       is not rolled back. The failure carries its id.

Two runs against the same report are not serialized: both may create
their audit and the report flag ends with whichever update ran last.
"""

import logging
from functools import partial
from typing import Callable, Optional

from recy.application.audit.dtos import CreateAuditCommand
from recy.application.workflow import (
    CompensationPolicy,
    Workflow,
    WorkflowResult,
    WorkflowStep,
    WorkflowSuccess,
)
from recy.domain.audit.entities import AuditRecord, NewAudit, ReportRecord
from recy.domain.audit.errors import ReportNotFoundError
from recy.domain.audit.ports import AuditRepository, ReportRepository
from recy.shared.identifiers import new_ulid

logger = logging.getLogger(__name__)

REPORT_VERIFIED = "ReportVerified"
AUDIT_PERSISTED = "AuditPersisted"
REPORT_FLAG_UPDATED = "ReportFlagUpdated"

PARTIAL_FAILURE_MESSAGE = (
    "Audit was created, but marking the report as audited failed. "
    "Manual reconciliation is required."
)


class CreateAuditUseCase:
    """Orchestrates audit creation.

    Verifies the report exists, stores the audit under a freshly generated
    ULID, then copies the audit's verdict onto the report.
    """

    def __init__(
        self,
        report_repo: ReportRepository,
        audit_repo: AuditRepository,
        id_factory: Callable[[], str] = new_ulid,
    ) -> None:
        self._report_repo = report_repo
        self._audit_repo = audit_repo
        self._id_factory = id_factory

    def execute(self, command: CreateAuditCommand) -> WorkflowResult[AuditRecord]:
        """Run the audit creation workflow.

        Args:
            command: The audit to create.

        Returns:
            WorkflowSuccess with the created audit, or WorkflowFailure
            naming the failed step.
        """
        logger.info(
            "Starting audit creation for report=%s, auditor=%s",
            command.report_id,
            command.auditor_id,
        )

        workflow: Workflow[AuditRecord] = Workflow(
            name="create-audit",
            steps=[
                WorkflowStep(
                    name=REPORT_VERIFIED,
                    effect=partial(self._read_report, command),
                    precondition=partial(_require_report, command.report_id),
                ),
                WorkflowStep(
                    name=AUDIT_PERSISTED,
                    effect=partial(self._persist_audit, command),
                    compensation=CompensationPolicy.MANUAL_INTERVENTION_REQUIRED,
                ),
                WorkflowStep(
                    name=REPORT_FLAG_UPDATED,
                    effect=partial(self._flag_report, command),
                ),
            ],
            result_step=AUDIT_PERSISTED,
            partial_failure_message=PARTIAL_FAILURE_MESSAGE,
            references=_audit_reference,
        )
        result = workflow.run()

        if isinstance(result, WorkflowSuccess):
            logger.info("Audit created with ID: %s", result.value.id)
        return result

    def _read_report(self, command: CreateAuditCommand, _results) -> Optional[ReportRecord]:
        return self._report_repo.get_by_id(command.report_id)

    def _persist_audit(self, command: CreateAuditCommand, _results) -> AuditRecord:
        return self._audit_repo.create(
            NewAudit(
                id=self._id_factory(),
                report_id=command.report_id,
                audited=command.audited,
                auditor_id=command.auditor_id,
                comments=command.comments,
            )
        )

    def _flag_report(self, command: CreateAuditCommand, results) -> ReportRecord:
        audit: AuditRecord = results[AUDIT_PERSISTED]
        return self._report_repo.set_audited(command.report_id, audit.audited)


def _require_report(report_id: str, report: Optional[ReportRecord]) -> None:
    if report is None:
        raise ReportNotFoundError(report_id)


def _audit_reference(results) -> dict[str, str]:
    return {"auditId": results[AUDIT_PERSISTED].id}
