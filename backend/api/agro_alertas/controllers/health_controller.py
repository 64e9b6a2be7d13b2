from fastapi import APIRouter, status

from ..core.logging import get_logger
from ..dto.health import HealthStatusResponse


logger = get_logger("health_controller")

router = APIRouter(tags=["health"])


@router.get(
    "/health",
    response_model=HealthStatusResponse,
    status_code=status.HTTP_200_OK,
)
async def health_check() -> HealthStatusResponse:
    """Endpoint simple de salud del motor de alertas."""
    logger.debug("Health check solicitado")
    return HealthStatusResponse()
