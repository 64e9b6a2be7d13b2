"""Dependency injection para FastAPI."""
from __future__ import annotations

from fastapi import Depends

from .core.config import Settings, get_settings
from .db.repositories.alerta_repository import AlertaRepository
from .db.repositories.medicion_repository import MedicionRepository
from .db.session import get_session_factory
from .services.monitoreo_service import MonitoreoAlertasService
from .services.reglas import crear_reglas_pasturas, crear_reglas_suelo


def get_medicion_repository() -> MedicionRepository:
    """Repositorio de lectura de mediciones, con una sesión por operación."""
    return MedicionRepository(get_session_factory())


def get_alerta_repository() -> AlertaRepository:
    return AlertaRepository(get_session_factory())


def crear_monitoreo_service(
    mediciones, alertas, settings: Settings | None = None
) -> MonitoreoAlertasService:
    """Arma el servicio aplicando los plazos configurados por entorno."""
    settings = settings or get_settings()
    return MonitoreoAlertasService(
        mediciones,
        alertas,
        reglas_suelo=crear_reglas_suelo(dias_fertilizacion=settings.dias_fertilizacion),
        reglas_pasturas=crear_reglas_pasturas(dias_medicion=settings.dias_medicion_pastura),
    )


def get_monitoreo_service(
    mediciones: MedicionRepository = Depends(get_medicion_repository),
    alertas: AlertaRepository = Depends(get_alerta_repository),
) -> MonitoreoAlertasService:
    """Proporciona el servicio orquestador con los umbrales de la configuración."""
    return crear_monitoreo_service(mediciones, alertas)
