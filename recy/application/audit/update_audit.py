"""
Use case: Update an audit's verdict and comments.

Input: UpdateAuditCommand (audit_id, audited, comments)
Output: WorkflowResult[AuditRecord]
Side effects: updates one audit row.
Failure cases:
    AuditVerified  NotFound when the audit does not exist.
    AuditUpdated   NotFound if the audit was deleted in between,
                   Unexpected otherwise.
"""

import logging
from functools import partial

from recy.application.audit.dtos import UpdateAuditCommand
from recy.application.audit.steps import verify_audit_step
from recy.application.workflow import Workflow, WorkflowResult, WorkflowStep
from recy.domain.audit.entities import AuditChanges, AuditRecord
from recy.domain.audit.ports import AuditRepository

logger = logging.getLogger(__name__)

AUDIT_UPDATED = "AuditUpdated"


class UpdateAuditUseCase:
    """Read-modify-write of a single audit."""

    def __init__(self, audit_repo: AuditRepository) -> None:
        self._audit_repo = audit_repo

    def execute(self, command: UpdateAuditCommand) -> WorkflowResult[AuditRecord]:
        """Run the update.

        Args:
            command: The audit ID and its new field values.

        Returns:
            WorkflowSuccess with the updated audit, or WorkflowFailure.
        """
        logger.info("Updating audit with ID: %s", command.audit_id)
        workflow: Workflow[AuditRecord] = Workflow(
            name="update-audit",
            steps=[
                verify_audit_step(self._audit_repo, command.audit_id),
                WorkflowStep(name=AUDIT_UPDATED, effect=partial(self._apply, command)),
            ],
        )
        return workflow.run()

    def _apply(self, command: UpdateAuditCommand, _results) -> AuditRecord:
        return self._audit_repo.update(
            command.audit_id,
            AuditChanges(audited=command.audited, comments=command.comments),
        )
