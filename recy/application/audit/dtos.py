"""
Data Transfer Objects for the audit application layer.

DTOs carry data between the interface and application layers.
They are plain dataclasses with no behavior.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class CreateAuditCommand:
    """Input DTO for creating an audit.

    Attributes:
        report_id: ID of the recycling report being audited.
        audited: Auditor's verdict; copied onto the report.
        auditor_id: ID of the auditor.
        comments: Optional free-text comments.
    """

    report_id: str
    audited: bool
    auditor_id: str
    comments: Optional[str] = None


@dataclass(frozen=True)
class GetAuditQuery:
    """Input DTO for retrieving one audit."""

    audit_id: str


@dataclass(frozen=True)
class UpdateAuditCommand:
    """Input DTO for updating an audit.

    Attributes:
        audit_id: ID of the audit to update.
        audited: New verdict.
        comments: New comments; None clears them.
    """

    audit_id: str
    audited: bool
    comments: Optional[str]


@dataclass(frozen=True)
class DeleteAuditCommand:
    """Input DTO for deleting an audit."""

    audit_id: str


@dataclass(frozen=True)
class MintNftCommand:
    """Input DTO for minting an NFT for an audited report.

    Attributes:
        audit_id: ID of the audit backing the NFT.
        wallet_address: Recipient wallet.
        metadata_uri: Optional token metadata location.
    """

    audit_id: str
    wallet_address: str
    metadata_uri: Optional[str] = None
