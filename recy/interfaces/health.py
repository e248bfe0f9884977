"""
Liveness endpoint. Reports the running version and which record store
backend the application was built with; it does not touch the store.
"""

from fastapi import APIRouter, Depends

from recy.core.config import Settings
from recy.interfaces.audit.dependencies import get_settings
from recy.interfaces.audit.schemas import HealthResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse, summary="Health check")
def health_check(app_settings: Settings = Depends(get_settings)) -> HealthResponse:
    return HealthResponse(
        status="ok",
        version=app_settings.version,
        storage=app_settings.storage_backend,
    )
