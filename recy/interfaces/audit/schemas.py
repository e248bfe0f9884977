"""
Pydantic schemas for audit API request/response validation.

These schemas enforce input validation and define the API contract.
JSON field names are camelCase.
No business logic belongs here.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

ID_MAX_LEN = 64
WALLET_PATTERN = r"^0x[0-9a-fA-F]{40}$"


class CamelModel(BaseModel):
    """Base schema exposing camelCase JSON field names."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CreateAuditRequest(CamelModel):
    """Request schema for audit creation.

    Attributes:
        report_id: ID of the recycling report being audited.
        audited: Whether the report passes the audit.
        auditor_id: ID of the auditor.
        comments: Optional comments.
    """

    report_id: str = Field(..., min_length=1, max_length=ID_MAX_LEN)
    audited: bool = False
    auditor_id: str = Field(..., min_length=1, max_length=ID_MAX_LEN)
    comments: Optional[str] = None


class UpdateAuditRequest(CamelModel):
    """Request schema for audit update. `comments` is required but may be null."""

    audited: bool
    comments: Optional[str]


class MintNftRequest(CamelModel):
    """Request schema for NFT minting."""

    audit_id: str = Field(..., min_length=1, max_length=ID_MAX_LEN)
    wallet_address: str = Field(..., pattern=WALLET_PATTERN)
    metadata_uri: Optional[str] = Field(default=None, max_length=2048)


class AuditResponse(CamelModel):
    """An audit as returned by the API."""

    id: str
    report_id: str
    audited: bool
    auditor_id: str
    comments: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class MintNftResponse(CamelModel):
    """Minting service receipt."""

    transaction_hash: str
    token_id: Optional[str] = None


class HealthResponse(BaseModel):
    """Response schema for the health check endpoint."""

    status: str
    version: str
    storage: str

