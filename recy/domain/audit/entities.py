"""
Domain entities for the audit bounded context.

Entities represent core business objects with identity and lifecycle.
They contain no framework imports and no IO operations.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class ReportRecord:
    """A recycling report submitted by a recycler.

    Reports pre-exist any audit. The audit context only reads them
    and mutates the `audited` flag.
    """

    id: str
    submitted_by: str
    audited: bool
    created_at: datetime
    updated_at: datetime
    wallet_address: Optional[str] = None


@dataclass(frozen=True)
class AuditRecord:
    """An auditor's verdict on a recycling report.

    Owned by the record store once created.
    """

    id: str
    report_id: str
    audited: bool
    auditor_id: str
    created_at: datetime
    updated_at: datetime
    comments: Optional[str] = None


@dataclass(frozen=True)
class NewAudit:
    """Audit data to persist. The id is generated before persistence."""

    id: str
    report_id: str
    audited: bool
    auditor_id: str
    comments: Optional[str] = None


@dataclass(frozen=True)
class AuditChanges:
    """Mutable fields of an existing audit."""

    audited: bool
    comments: Optional[str]


@dataclass(frozen=True)
class MintRequest:
    """Request sent to the minting service for an audited report."""

    audit_id: str
    wallet_address: str
    metadata_uri: Optional[str] = None


@dataclass(frozen=True)
class MintReceipt:
    """Minting service acknowledgement."""

    transaction_hash: str
    token_id: Optional[str] = None
