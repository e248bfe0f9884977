"""
Shared fixtures: an in-memory record store seeded with one report,
and an API client wired to it.
"""

import pytest
from fastapi.testclient import TestClient

from recy.core.config import Settings
from recy.domain.audit.entities import MintReceipt, MintRequest
from recy.domain.audit.ports import MintingPort
from recy.infrastructure.audit.in_memory import (
    InMemoryAuditRepository,
    InMemoryRecordStore,
    InMemoryReportRepository,
)
from recy.interfaces.audit.dependencies import (
    get_audit_repository,
    get_minting_port,
    get_report_repository,
)
from recy.main import create_app
from recy.shared.security.rate_limiting import limiter


class RecordingMintingPort(MintingPort):
    """Minting port that records requests instead of calling a service."""

    def __init__(self) -> None:
        self.requests: list[MintRequest] = []

    def mint(self, request: MintRequest) -> MintReceipt:
        self.requests.append(request)
        return MintReceipt(transaction_hash="0xabc123", token_id="7")


@pytest.fixture
def store() -> InMemoryRecordStore:
    """Record store holding report "r-1" (not yet audited)."""
    record_store = InMemoryRecordStore()
    record_store.add_report("r-1", submitted_by="recycler-1")
    return record_store


@pytest.fixture
def report_repo(store: InMemoryRecordStore) -> InMemoryReportRepository:
    return InMemoryReportRepository(store)


@pytest.fixture
def audit_repo(store: InMemoryRecordStore) -> InMemoryAuditRepository:
    return InMemoryAuditRepository(store)


@pytest.fixture
def minting_port() -> RecordingMintingPort:
    return RecordingMintingPort()


@pytest.fixture
def app(report_repo, audit_repo, minting_port):
    """Application with storage and minting replaced by in-process fakes."""
    limiter.reset()
    application = create_app(Settings(storage_backend="memory", _env_file=None))
    application.dependency_overrides[get_report_repository] = lambda: report_repo
    application.dependency_overrides[get_audit_repository] = lambda: audit_repo
    application.dependency_overrides[get_minting_port] = lambda: minting_port
    return application


@pytest.fixture
def client(app):
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client
