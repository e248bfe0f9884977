"""
Use case: Delete an audit.

Input: DeleteAuditCommand (audit_id)
Output: WorkflowResult[AuditRecord] (the deleted audit)
Side effects: deletes one audit row. The report's audited flag is left as is.
Failure cases:
    AuditVerified  NotFound when the audit does not exist.
    AuditDeleted   NotFound if the audit was deleted in between.
"""

import logging
from functools import partial

from recy.application.audit.dtos import DeleteAuditCommand
from recy.application.audit.steps import verify_audit_step
from recy.application.workflow import Workflow, WorkflowResult, WorkflowStep
from recy.domain.audit.entities import AuditRecord
from recy.domain.audit.ports import AuditRepository

logger = logging.getLogger(__name__)

AUDIT_DELETED = "AuditDeleted"


class DeleteAuditUseCase:
    """Read-then-delete of a single audit."""

    def __init__(self, audit_repo: AuditRepository) -> None:
        self._audit_repo = audit_repo

    def execute(self, command: DeleteAuditCommand) -> WorkflowResult[AuditRecord]:
        logger.info("Deleting audit with ID: %s", command.audit_id)
        workflow: Workflow[AuditRecord] = Workflow(
            name="delete-audit",
            steps=[
                verify_audit_step(self._audit_repo, command.audit_id),
                WorkflowStep(name=AUDIT_DELETED, effect=partial(self._delete, command)),
            ],
        )
        return workflow.run()

    def _delete(self, command: DeleteAuditCommand, _results) -> AuditRecord:
        return self._audit_repo.delete(command.audit_id)
