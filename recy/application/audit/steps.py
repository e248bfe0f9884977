"""
Workflow steps shared by the single-record audit use cases.
"""

from functools import partial
from typing import Optional

from recy.application.workflow import WorkflowStep
from recy.domain.audit.entities import AuditRecord
from recy.domain.audit.errors import AuditNotApprovedError, AuditNotFoundError
from recy.domain.audit.ports import AuditRepository

AUDIT_VERIFIED = "AuditVerified"


def _read_audit(audit_repo: AuditRepository, audit_id: str, _results) -> Optional[AuditRecord]:
    return audit_repo.get_by_id(audit_id)


def _require_audit(audit_id: str, require_audited: bool, audit: Optional[AuditRecord]) -> None:
    if audit is None:
        raise AuditNotFoundError(audit_id)
    if require_audited and not audit.audited:
        raise AuditNotApprovedError(audit_id)


def verify_audit_step(
    audit_repo: AuditRepository, audit_id: str, require_audited: bool = False
) -> WorkflowStep:
    """Existence check that precedes every read-modify-write on an audit.

    Args:
        audit_repo: Store to read from.
        audit_id: Audit that must exist.
        require_audited: Also require the audit's verdict to be positive.
    """
    return WorkflowStep(
        name=AUDIT_VERIFIED,
        effect=partial(_read_audit, audit_repo, audit_id),
        precondition=partial(_require_audit, audit_id, require_audited),
    )
