"""
Dependency injection for the audit bounded context.

Provides FastAPI dependency functions that wire infrastructure
adapters into use cases via constructor injection.
These are the composition root for the audit context; tests replace
the repository and minting providers through `app.dependency_overrides`.
"""

from fastapi import Depends, Request

from recy.application.audit.create_audit import CreateAuditUseCase
from recy.application.audit.delete_audit import DeleteAuditUseCase
from recy.application.audit.get_audit import GetAuditUseCase
from recy.application.audit.list_audits import ListAuditsUseCase
from recy.application.audit.mint_nft import MintNftUseCase
from recy.application.audit.update_audit import UpdateAuditUseCase
from recy.core.config import Settings
from recy.domain.audit.ports import AuditRepository, MintingPort, ReportRepository
from recy.infrastructure.audit.in_memory import InMemoryAuditRepository, InMemoryReportRepository
from recy.infrastructure.audit.sql_repositories import (
    SqlAuditRepository,
    SqlReportRepository,
)
from recy.shared.errors.responder import ErrorResponder


def get_settings(request: Request) -> Settings:
    """Return the settings the application was built with."""
    return request.app.state.settings


def get_report_repository(request: Request) -> ReportRepository:
    """Provide the configured ReportRepository adapter."""
    state = request.app.state
    if state.settings.storage_backend == "memory":
        return InMemoryReportRepository(state.memory_store)
    return SqlReportRepository(state.db_engine)


def get_audit_repository(request: Request) -> AuditRepository:
    """Provide the configured AuditRepository adapter."""
    state = request.app.state
    if state.settings.storage_backend == "memory":
        return InMemoryAuditRepository(state.memory_store)
    return SqlAuditRepository(state.db_engine)


def get_minting_port(request: Request) -> MintingPort:
    """Provide the minting service client built at startup."""
    return request.app.state.minting_adapter


def get_error_responder(request: Request) -> ErrorResponder:
    """Return the responder installed on the application at startup."""
    return request.app.state.error_responder


def get_create_audit_use_case(
    report_repo: ReportRepository = Depends(get_report_repository),
    audit_repo: AuditRepository = Depends(get_audit_repository),
) -> CreateAuditUseCase:
    """Build CreateAuditUseCase with its infrastructure dependencies."""
    return CreateAuditUseCase(report_repo=report_repo, audit_repo=audit_repo)


def get_list_audits_use_case(
    audit_repo: AuditRepository = Depends(get_audit_repository),
) -> ListAuditsUseCase:
    """Build ListAuditsUseCase with its infrastructure dependencies."""
    return ListAuditsUseCase(audit_repo=audit_repo)


def get_get_audit_use_case(
    audit_repo: AuditRepository = Depends(get_audit_repository),
) -> GetAuditUseCase:
    """Build GetAuditUseCase with its infrastructure dependencies."""
    return GetAuditUseCase(audit_repo=audit_repo)


def get_update_audit_use_case(
    audit_repo: AuditRepository = Depends(get_audit_repository),
) -> UpdateAuditUseCase:
    """Build UpdateAuditUseCase with its infrastructure dependencies."""
    return UpdateAuditUseCase(audit_repo=audit_repo)


def get_delete_audit_use_case(
    audit_repo: AuditRepository = Depends(get_audit_repository),
) -> DeleteAuditUseCase:
    """Build DeleteAuditUseCase with its infrastructure dependencies."""
    return DeleteAuditUseCase(audit_repo=audit_repo)


def get_mint_nft_use_case(
    audit_repo: AuditRepository = Depends(get_audit_repository),
    minting_port: MintingPort = Depends(get_minting_port),
) -> MintNftUseCase:
    """Build MintNftUseCase with its infrastructure dependencies."""
    return MintNftUseCase(audit_repo=audit_repo, minting_port=minting_port)
