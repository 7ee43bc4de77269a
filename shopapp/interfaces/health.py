"""
Liveness endpoint for the shop API.

Public and unauthenticated; it touches neither the database nor the
token provider, so it answers while the store is unreachable.
"""

from fastapi import APIRouter

from shopapp.core.config import settings
from shopapp.interfaces.shop.schemas import HealthResponse

router = APIRouter(tags=["health"])


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Liveness probe",
    description="Reports that the process is serving and which build it runs.",
)
def health_check() -> HealthResponse:
    return HealthResponse(status="ok", version=settings.version)
