"""
Use case: List every audit.

Input: None
Output: list[AuditRecord]
Side effects: None.
Failure cases: store failures propagate to the error handlers.
"""

import logging

from recy.domain.audit.entities import AuditRecord
from recy.domain.audit.ports import AuditRepository

logger = logging.getLogger(__name__)


class ListAuditsUseCase:
    """Returns all audits in creation order."""

    def __init__(self, audit_repo: AuditRepository) -> None:
        self._audit_repo = audit_repo

    def execute(self) -> list[AuditRecord]:
        logger.info("Retrieving all audits")
        audits = self._audit_repo.list_all()
        logger.info("Retrieved %d audits", len(audits))
        return audits
