"""
FastAPI router for the audit bounded context.

All routes delegate to use cases. No business logic here.
Input validation is handled by Pydantic schemas.
Workflow failures are turned into error envelopes through the
ErrorResponder; raised errors reach it via the centralized handlers.
"""

import logging
from typing import Callable, TypeVar

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from recy.application.audit.create_audit import CreateAuditUseCase
from recy.application.audit.delete_audit import DeleteAuditUseCase
from recy.application.audit.dtos import (
    CreateAuditCommand,
    DeleteAuditCommand,
    GetAuditQuery,
    MintNftCommand,
    UpdateAuditCommand,
)
from recy.application.audit.get_audit import GetAuditUseCase
from recy.application.audit.list_audits import ListAuditsUseCase
from recy.application.audit.mint_nft import MintNftUseCase
from recy.application.audit.update_audit import UpdateAuditUseCase
from recy.application.workflow import WorkflowFailure, WorkflowResult
from recy.domain.audit.entities import AuditRecord, MintReceipt
from recy.interfaces.audit.dependencies import (
    get_create_audit_use_case,
    get_delete_audit_use_case,
    get_error_responder,
    get_get_audit_use_case,
    get_list_audits_use_case,
    get_mint_nft_use_case,
    get_update_audit_use_case,
)
from recy.interfaces.audit.schemas import (
    AuditResponse,
    CreateAuditRequest,
    MintNftRequest,
    MintNftResponse,
    UpdateAuditRequest,
)
from recy.shared.errors.envelope import ErrorEnvelope
from recy.shared.errors.handlers import error_response
from recy.shared.errors.responder import ErrorResponder
from recy.shared.security.rate_limiting import heavy_limit, limiter

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/audits", tags=["audits"])

T = TypeVar("T")

ERROR_RESPONSES = {
    400: {"model": ErrorEnvelope},
    404: {"model": ErrorEnvelope},
    409: {"model": ErrorEnvelope},
    500: {"model": ErrorEnvelope},
}


def _to_audit_response(audit: AuditRecord) -> AuditResponse:
    return AuditResponse(
        id=audit.id,
        report_id=audit.report_id,
        audited=audit.audited,
        auditor_id=audit.auditor_id,
        comments=audit.comments,
        created_at=audit.created_at,
        updated_at=audit.updated_at,
    )


def _to_mint_response(receipt: MintReceipt) -> MintNftResponse:
    return MintNftResponse(
        transaction_hash=receipt.transaction_hash,
        token_id=receipt.token_id,
    )


def _resolve(
    result: WorkflowResult[T],
    request: Request,
    responder: ErrorResponder,
    to_response: Callable[[T], BaseModel],
) -> BaseModel | JSONResponse:
    """Return the success body, or the error envelope for a failed workflow."""
    if isinstance(result, WorkflowFailure):
        return error_response(responder, request, result)
    return to_response(result.value)


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=AuditResponse,
    responses=ERROR_RESPONSES,
    summary="Create an audit",
    description=(
        "Verify the report, store the audit and copy its verdict onto the report. "
        "If the last step fails the audit stays stored and the error names the step."
    ),
)
def create_audit(
    body: CreateAuditRequest,
    request: Request,
    use_case: CreateAuditUseCase = Depends(get_create_audit_use_case),
    responder: ErrorResponder = Depends(get_error_responder),
):
    """Create an audit for a recycling report."""
    command = CreateAuditCommand(
        report_id=body.report_id,
        audited=body.audited,
        auditor_id=body.auditor_id,
        comments=body.comments,
    )
    return _resolve(use_case.execute(command), request, responder, _to_audit_response)


@router.get(
    "",
    response_model=list[AuditResponse],
    summary="Retrieve all audits",
)
def list_audits(
    use_case: ListAuditsUseCase = Depends(get_list_audits_use_case),
) -> list[AuditResponse]:
    """List every audit."""
    return [_to_audit_response(audit) for audit in use_case.execute()]


@router.post(
    "/mint",
    response_model=MintNftResponse,
    responses={**ERROR_RESPONSES, 429: {"model": ErrorEnvelope}},
    summary="Mint an NFT for an audited report",
)
@limiter.limit(heavy_limit)
def mint_nft(
    body: MintNftRequest,
    request: Request,
    use_case: MintNftUseCase = Depends(get_mint_nft_use_case),
    responder: ErrorResponder = Depends(get_error_responder),
):
    """Trigger NFT minting for an audit that passed."""
    command = MintNftCommand(
        audit_id=body.audit_id,
        wallet_address=body.wallet_address,
        metadata_uri=body.metadata_uri,
    )
    return _resolve(use_case.execute(command), request, responder, _to_mint_response)


@router.get(
    "/{audit_id}",
    response_model=AuditResponse,
    responses=ERROR_RESPONSES,
    summary="Retrieve a specific audit by ID",
)
def get_audit(
    audit_id: str,
    request: Request,
    use_case: GetAuditUseCase = Depends(get_get_audit_use_case),
    responder: ErrorResponder = Depends(get_error_responder),
):
    """Return one audit."""
    result = use_case.execute(GetAuditQuery(audit_id=audit_id))
    return _resolve(result, request, responder, _to_audit_response)


@router.put(
    "/{audit_id}",
    response_model=AuditResponse,
    responses=ERROR_RESPONSES,
    summary="Update a specific audit by ID",
)
def update_audit(
    audit_id: str,
    body: UpdateAuditRequest,
    request: Request,
    use_case: UpdateAuditUseCase = Depends(get_update_audit_use_case),
    responder: ErrorResponder = Depends(get_error_responder),
):
    """Update an audit's verdict and comments."""
    command = UpdateAuditCommand(
        audit_id=audit_id,
        audited=body.audited,
        comments=body.comments,
    )
    return _resolve(use_case.execute(command), request, responder, _to_audit_response)


@router.delete(
    "/{audit_id}",
    response_model=AuditResponse,
    responses=ERROR_RESPONSES,
    summary="Delete a specific audit by ID",
)
def delete_audit(
    audit_id: str,
    request: Request,
    use_case: DeleteAuditUseCase = Depends(get_delete_audit_use_case),
    responder: ErrorResponder = Depends(get_error_responder),
):
    """Delete an audit and return it."""
    result = use_case.execute(DeleteAuditCommand(audit_id=audit_id))
    return _resolve(result, request, responder, _to_audit_response)
