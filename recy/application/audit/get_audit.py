"""
Use case: Retrieve a single audit.

Input: GetAuditQuery (audit_id)
Output: WorkflowResult[AuditRecord]
Side effects: None.
Failure cases: AuditVerified -> NotFound.
"""

import logging

from recy.application.audit.dtos import GetAuditQuery
from recy.application.audit.steps import verify_audit_step
from recy.application.workflow import Workflow, WorkflowResult
from recy.domain.audit.entities import AuditRecord
from recy.domain.audit.ports import AuditRepository

logger = logging.getLogger(__name__)


class GetAuditUseCase:
    """Looks up one audit by ID."""

    def __init__(self, audit_repo: AuditRepository) -> None:
        self._audit_repo = audit_repo

    def execute(self, query: GetAuditQuery) -> WorkflowResult[AuditRecord]:
        """Run the lookup.

        Args:
            query: The audit to retrieve.

        Returns:
            WorkflowSuccess with the audit, or WorkflowFailure (NotFound).
        """
        logger.info("Retrieving audit with ID: %s", query.audit_id)
        workflow: Workflow[AuditRecord] = Workflow(
            name="get-audit",
            steps=[verify_audit_step(self._audit_repo, query.audit_id)],
        )
        return workflow.run()
