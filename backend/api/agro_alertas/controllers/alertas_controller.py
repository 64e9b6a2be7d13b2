from __future__ import annotations

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Path, Query, status

from ..core.logging import get_logger
from ..dependencies import get_monitoreo_service
from ..dto.alertas import (
    Alerta,
    AlertaListResponse,
    DescartarAlertaRequest,
    ResolverAlertaRequest,
    ResultadoVerificacionGeneral,
    VerificacionRequest,
)
from ..dto.resumen import CalidadSemilla, CalidadSemillaRequest, ResumenEstado
from ..exceptions import (
    AlertaEstadoInvalidoError,
    AlertaNoEncontradaError,
    EntidadNoEncontradaError,
)
from ..services.monitoreo_service import MonitoreoAlertasService


logger = get_logger("alertas_controller")

router = APIRouter(prefix="/api/v1/monitoreo", tags=["monitoreo"])


@router.post(
    "/verificaciones",
    response_model=ResultadoVerificacionGeneral,
    status_code=status.HTTP_200_OK,
)
async def verificar_todo(
    payload: VerificacionRequest,
    service: MonitoreoAlertasService = Depends(get_monitoreo_service),
) -> ResultadoVerificacionGeneral:
    """Ejecuta todas las verificaciones de la firma o de un predio."""
    logger.info(
        "Procesando verificación general",
        extra={"firm_id": str(payload.firm_id), "premise_id": str(payload.premise_id)},
    )

    try:
        return await service.verificar_todo(payload.firm_id, payload.premise_id)

    except ValueError as exc:
        logger.warning(
            "Error de validación en verificación general",
            extra={"error": str(exc), "firm_id": str(payload.firm_id)},
        )
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Error de validación: {exc}",
        ) from exc

    except Exception as exc:
        logger.exception(
            "Error inesperado en verificación general",
            extra={"firm_id": str(payload.firm_id)},
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="No se pudo completar la verificación de alertas",
        ) from exc


@router.post(
    "/verificaciones/{entidad_tipo}/{entidad_id}",
    response_model=ResultadoVerificacionGeneral,
    status_code=status.HTTP_200_OK,
)
async def verificar_entidad(
    entidad_tipo: str = Path(description="lote, variedad o predio"),
    entidad_id: UUID = Path(),
    firm_id: UUID = Query(description="Firma dueña de la entidad"),
    service: MonitoreoAlertasService = Depends(get_monitoreo_service),
) -> ResultadoVerificacionGeneral:
    """Verifica una entidad puntual, por ejemplo tras cargar un análisis nuevo."""

    try:
        return await service.verificar_entidad(entidad_tipo, entidad_id, firm_id)

    except EntidadNoEncontradaError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc

    except ValueError as exc:
        logger.warning(
            "Entidad inválida para verificación",
            extra={"error": str(exc), "entidad_tipo": entidad_tipo},
        )
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    except Exception as exc:
        logger.exception(
            "Error inesperado al verificar entidad",
            extra={"entidad_tipo": entidad_tipo, "entidad_id": str(entidad_id)},
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="No se pudo verificar la entidad",
        ) from exc


@router.get(
    "/resumen",
    response_model=ResumenEstado,
    status_code=status.HTTP_200_OK,
)
async def obtener_resumen(
    firm_id: UUID = Query(),
    premise_id: Optional[UUID] = Query(default=None, description="Limita el resumen a un predio"),
    lot_id: Optional[UUID] = Query(default=None, description="Resumen de un lote puntual"),
    service: MonitoreoAlertasService = Depends(get_monitoreo_service),
) -> ResumenEstado:
    """Devuelve alertas activas y últimas mediciones."""

    try:
        return await service.obtener_resumen(firm_id, premise_id=premise_id, lot_id=lot_id)

    except EntidadNoEncontradaError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc

    except Exception as exc:
        logger.exception("Error inesperado al generar resumen", extra={"firm_id": str(firm_id)})
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="No se pudo generar el resumen de estado",
        ) from exc


@router.get(
    "/alertas",
    response_model=AlertaListResponse,
    status_code=status.HTTP_200_OK,
)
async def listar_alertas(
    firm_id: UUID = Query(),
    premise_id: Optional[UUID] = Query(default=None),
    service: MonitoreoAlertasService = Depends(get_monitoreo_service),
) -> AlertaListResponse:
    """Alertas pendientes ordenadas por prioridad."""
    alertas = await service.listar_alertas(firm_id, premise_id)
    return AlertaListResponse(total=len(alertas), items=alertas)


async def _cerrar_alerta(accion, alerta_id: UUID, texto: Optional[str], descripcion: str) -> Alerta:
    try:
        return await accion(alerta_id, texto)

    except AlertaNoEncontradaError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc

    except AlertaEstadoInvalidoError as exc:
        logger.warning(
            f"Transición inválida al {descripcion} alerta",
            extra={"alerta_id": str(alerta_id), "estado": exc.estado},
        )
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc

    except Exception as exc:
        logger.exception(f"Error inesperado al {descripcion} alerta", extra={"alerta_id": str(alerta_id)})
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"No se pudo {descripcion} la alerta",
        ) from exc


@router.post(
    "/alertas/{alerta_id}/resolver",
    response_model=Alerta,
    status_code=status.HTTP_200_OK,
)
async def resolver_alerta(
    alerta_id: UUID,
    payload: Optional[ResolverAlertaRequest] = None,
    service: MonitoreoAlertasService = Depends(get_monitoreo_service),
) -> Alerta:
    notas = payload.notas if payload else None
    return await _cerrar_alerta(service.resolver_alerta, alerta_id, notas, "resolver")


@router.post(
    "/alertas/{alerta_id}/descartar",
    response_model=Alerta,
    status_code=status.HTTP_200_OK,
)
async def descartar_alerta(
    alerta_id: UUID,
    payload: Optional[DescartarAlertaRequest] = None,
    service: MonitoreoAlertasService = Depends(get_monitoreo_service),
) -> Alerta:
    motivo = payload.motivo if payload else None
    return await _cerrar_alerta(service.descartar_alerta, alerta_id, motivo, "descartar")


@router.post(
    "/semillas/calidad",
    response_model=CalidadSemilla,
    status_code=status.HTTP_200_OK,
)
async def calcular_calidad_semilla(payload: CalidadSemillaRequest) -> CalidadSemilla:
    """Calcula el puntaje de calidad sin persistir nada."""
    return MonitoreoAlertasService.calcular_calidad_semilla(
        payload.germinacion, payload.pureza, payload.humedad, payload.tetrazolio
    )
