"""Repository utilities for AlertaMonitoreo entities."""
from __future__ import annotations

from collections.abc import Callable, Sequence
from datetime import datetime, timezone
from typing import Optional, Union
from uuid import UUID

import sqlalchemy as sa
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from agro_alertas.core.logging import get_logger
from agro_alertas.db.models.alertas import AlertaMonitoreo
from agro_alertas.dto.alertas import Alerta, EstadoAlerta, NuevaAlerta
from agro_alertas.exceptions import AlertaEstadoInvalidoError, AlertaNoEncontradaError
from agro_alertas.utils.type_converters import coerce_uuid

logger = get_logger("alerta_repository")

ORIGEN_AUTOMATICA = "automatica"

_ORDEN_PRIORIDAD = sa.case(
    (AlertaMonitoreo.prioridad == "alta", 0),
    (AlertaMonitoreo.prioridad == "media", 1),
    else_=2,
)


class AlertaRepository:
    """Encapsula operaciones de persistencia para alertas de monitoreo.

    Cada operación abre su propia sesión, de modo que verificaciones
    concurrentes nunca comparten una ``AsyncSession``.
    """

    def __init__(self, session_factory: Callable[[], AsyncSession]) -> None:
        self._session_factory = session_factory

    @staticmethod
    def _pendiente_stmt(entidad_tipo: str, entidad_id: UUID, regla_aplicada: str) -> sa.Select:
        return (
            sa.select(AlertaMonitoreo)
            .where(AlertaMonitoreo.entidad_tipo == entidad_tipo)
            .where(AlertaMonitoreo.entidad_id == entidad_id)
            .where(AlertaMonitoreo.regla_aplicada == regla_aplicada)
            .where(AlertaMonitoreo.estado == EstadoAlerta.PENDIENTE.value)
            .limit(1)
        )

    async def buscar_pendiente(
        self,
        *,
        entidad_tipo: str,
        entidad_id: Union[str, UUID],
        regla_aplicada: str,
    ) -> Optional[Alerta]:
        """Recupera la alerta pendiente para la terna entidad/regla, si existe."""

        stmt = self._pendiente_stmt(
            entidad_tipo, coerce_uuid(entidad_id, field="entidad_id"), regla_aplicada
        )
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            entidad = result.scalars().first()
        return Alerta.model_validate(entidad) if entidad else None

    async def crear_si_no_existe(self, nueva: NuevaAlerta) -> Optional[Alerta]:
        """Inserta la alerta salvo que ya exista una pendiente equivalente.

        Returns:
            La alerta creada, o None si ya había una pendiente (incluida la
            carrera detectada por el índice único parcial).
        """

        async with self._session_factory() as session:
            result = await session.execute(
                self._pendiente_stmt(nueva.entidad_tipo, nueva.entidad_id, nueva.regla_aplicada)
            )
            if result.scalars().first() is not None:
                logger.debug(
                    "Alerta pendiente existente, se omite",
                    extra={
                        "regla": nueva.regla_aplicada,
                        "entidad_id": str(nueva.entidad_id),
                        "reason": "duplicate",
                    },
                )
                return None

            entidad = AlertaMonitoreo(
                firm_id=nueva.firm_id,
                premise_id=nueva.premise_id,
                entidad_tipo=nueva.entidad_tipo,
                entidad_id=nueva.entidad_id,
                tipo=nueva.tipo,
                regla_aplicada=nueva.regla_aplicada,
                prioridad=nueva.prioridad.value,
                estado=EstadoAlerta.PENDIENTE.value,
                origen=ORIGEN_AUTOMATICA,
                titulo=nueva.titulo,
                descripcion=nueva.descripcion,
                metadatos=dict(nueva.metadata),
                created_at=datetime.now(timezone.utc),
            )
            session.add(entidad)
            try:
                await session.flush()
                await session.commit()
            except IntegrityError:
                await session.rollback()
                logger.info(
                    "Alerta creada concurrentemente por otra verificación",
                    extra={
                        "regla": nueva.regla_aplicada,
                        "entidad_id": str(nueva.entidad_id),
                        "reason": "duplicate",
                    },
                )
                return None
            return Alerta.model_validate(entidad)

    async def _cerrar(
        self, alerta_id: Union[str, UUID], estado: EstadoAlerta, notas: Optional[str]
    ) -> Alerta:
        alerta_uuid = coerce_uuid(alerta_id, field="alerta_id")
        async with self._session_factory() as session:
            entidad = await session.get(AlertaMonitoreo, alerta_uuid)
            if entidad is None:
                raise AlertaNoEncontradaError(alerta_uuid)
            if entidad.estado != EstadoAlerta.PENDIENTE.value:
                raise AlertaEstadoInvalidoError(alerta_uuid, entidad.estado)
            entidad.estado = estado.value
            entidad.resolved_at = datetime.now(timezone.utc)
            entidad.resolved_notes = notas
            await session.commit()
            return Alerta.model_validate(entidad)

    async def resolver(self, alerta_id: Union[str, UUID], notas: Optional[str] = None) -> Alerta:
        """Marca una alerta pendiente como resuelta."""
        return await self._cerrar(alerta_id, EstadoAlerta.RESUELTA, notas)

    async def descartar(self, alerta_id: Union[str, UUID], motivo: Optional[str] = None) -> Alerta:
        """Marca una alerta pendiente como descartada."""
        return await self._cerrar(alerta_id, EstadoAlerta.DESCARTADA, motivo)

    async def listar_pendientes(
        self,
        *,
        firm_id: Union[str, UUID],
        premise_id: Optional[Union[str, UUID]] = None,
        tipos: Optional[Sequence[str]] = None,
        entidad_tipo: Optional[str] = None,
        entidad_id: Optional[Union[str, UUID]] = None,
    ) -> list[Alerta]:
        """Alertas pendientes ordenadas por prioridad (alta primero) y antigüedad."""

        query = (
            sa.select(AlertaMonitoreo)
            .where(AlertaMonitoreo.firm_id == coerce_uuid(firm_id, field="firm_id"))
            .where(AlertaMonitoreo.estado == EstadoAlerta.PENDIENTE.value)
            .order_by(_ORDEN_PRIORIDAD, AlertaMonitoreo.created_at.desc())
        )
        if premise_id:
            query = query.where(
                AlertaMonitoreo.premise_id == coerce_uuid(premise_id, field="premise_id")
            )
        if tipos:
            query = query.where(AlertaMonitoreo.tipo.in_(list(tipos)))
        if entidad_tipo:
            query = query.where(AlertaMonitoreo.entidad_tipo == entidad_tipo)
        if entidad_id:
            query = query.where(
                AlertaMonitoreo.entidad_id == coerce_uuid(entidad_id, field="entidad_id")
            )

        async with self._session_factory() as session:
            result = await session.execute(query)
            return [Alerta.model_validate(entidad) for entidad in result.scalars().all()]
