"""Read-only access to the latest monitoring measurements."""
from __future__ import annotations

from collections.abc import Callable
from datetime import date
from typing import Optional, Union
from uuid import UUID

import sqlalchemy as sa
from sqlalchemy.ext.asyncio import AsyncSession

from agro_alertas.db.models.entidades import Lote, Predio, VariedadSemilla
from agro_alertas.db.models.mediciones import (
    AnalisisSemillaVariedad,
    AnalisisSueloLote,
    MedicionPasturaLote,
    RegistroLluviaPredio,
)
from agro_alertas.dto.mediciones import (
    AnalisisSemilla,
    AnalisisSuelo,
    LoteInfo,
    MedicionPastura,
    PredioInfo,
    RegistroLluvia,
    VariedadInfo,
)
from agro_alertas.utils.type_converters import coerce_uuid

Identificador = Union[str, UUID]


class MedicionRepository:
    """Consultas de lectura usadas por los verificadores y el resumen."""

    def __init__(self, session_factory: Callable[[], AsyncSession]) -> None:
        self._session_factory = session_factory

    async def _primero(self, stmt: sa.Select):
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            return result.scalars().first()

    async def _todos(self, stmt: sa.Select) -> list:
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            return list(result.scalars().all())

    async def ultimo_analisis_suelo(self, lot_id: Identificador) -> Optional[AnalisisSuelo]:
        stmt = (
            sa.select(AnalisisSueloLote)
            .where(AnalisisSueloLote.lot_id == coerce_uuid(lot_id, field="lot_id"))
            .order_by(AnalisisSueloLote.fecha.desc(), AnalisisSueloLote.id.desc())
            .limit(1)
        )
        entidad = await self._primero(stmt)
        return AnalisisSuelo.model_validate(entidad) if entidad else None

    async def ultimo_analisis_semilla(
        self, seed_variety_id: Identificador
    ) -> Optional[AnalisisSemilla]:
        stmt = (
            sa.select(AnalisisSemillaVariedad)
            .where(
                AnalisisSemillaVariedad.seed_variety_id
                == coerce_uuid(seed_variety_id, field="seed_variety_id")
            )
            .order_by(AnalisisSemillaVariedad.fecha.desc(), AnalisisSemillaVariedad.id.desc())
            .limit(1)
        )
        entidad = await self._primero(stmt)
        return AnalisisSemilla.model_validate(entidad) if entidad else None

    async def ultima_medicion_pastura(self, lot_id: Identificador) -> Optional[MedicionPastura]:
        stmt = (
            sa.select(MedicionPasturaLote)
            .where(MedicionPasturaLote.lot_id == coerce_uuid(lot_id, field="lot_id"))
            .order_by(MedicionPasturaLote.fecha.desc(), MedicionPasturaLote.id.desc())
            .limit(1)
        )
        entidad = await self._primero(stmt)
        return MedicionPastura.model_validate(entidad) if entidad else None

    async def registros_lluvia(
        self,
        premise_id: Identificador,
        desde: Optional[date] = None,
        hasta: Optional[date] = None,
    ) -> list[RegistroLluvia]:
        """Registros de lluvia del predio en el rango (extremos inclusive)."""

        stmt = (
            sa.select(RegistroLluviaPredio)
            .where(RegistroLluviaPredio.premise_id == coerce_uuid(premise_id, field="premise_id"))
            .order_by(RegistroLluviaPredio.fecha.asc())
        )
        if desde is not None:
            stmt = stmt.where(RegistroLluviaPredio.fecha >= desde)
        if hasta is not None:
            stmt = stmt.where(RegistroLluviaPredio.fecha <= hasta)
        return [RegistroLluvia.model_validate(r) for r in await self._todos(stmt)]

    async def ultimo_registro_lluvia(self, premise_id: Identificador) -> Optional[RegistroLluvia]:
        stmt = (
            sa.select(RegistroLluviaPredio)
            .where(RegistroLluviaPredio.premise_id == coerce_uuid(premise_id, field="premise_id"))
            .order_by(RegistroLluviaPredio.fecha.desc())
            .limit(1)
        )
        entidad = await self._primero(stmt)
        return RegistroLluvia.model_validate(entidad) if entidad else None

    async def obtener_lote(self, lot_id: Identificador) -> Optional[LoteInfo]:
        entidad = await self._primero(
            sa.select(Lote).where(Lote.id == coerce_uuid(lot_id, field="lot_id"))
        )
        if entidad is None:
            return None
        return LoteInfo(
            id=entidad.id,
            nombre=entidad.name,
            firm_id=entidad.firm_id,
            premise_id=entidad.premise_id,
            uso_suelo=entidad.uso_suelo,
        )

    async def obtener_variedad(self, seed_variety_id: Identificador) -> Optional[VariedadInfo]:
        entidad = await self._primero(
            sa.select(VariedadSemilla).where(
                VariedadSemilla.id == coerce_uuid(seed_variety_id, field="seed_variety_id")
            )
        )
        if entidad is None:
            return None
        return VariedadInfo(id=entidad.id, nombre=entidad.name, firm_id=entidad.firm_id)

    async def obtener_predio(self, premise_id: Identificador) -> Optional[PredioInfo]:
        entidad = await self._primero(
            sa.select(Predio).where(Predio.id == coerce_uuid(premise_id, field="premise_id"))
        )
        if entidad is None:
            return None
        return PredioInfo(id=entidad.id, nombre=entidad.name, firm_id=entidad.firm_id)

    async def listar_lotes(self, premise_id: Identificador) -> list[LoteInfo]:
        """Lotes activos del predio, en orden alfabético."""

        stmt = (
            sa.select(Lote)
            .where(Lote.premise_id == coerce_uuid(premise_id, field="premise_id"))
            .where(Lote.activo.is_(True))
            .order_by(Lote.name.asc())
        )
        return [
            LoteInfo(
                id=lote.id,
                nombre=lote.name,
                firm_id=lote.firm_id,
                premise_id=lote.premise_id,
                uso_suelo=lote.uso_suelo,
            )
            for lote in await self._todos(stmt)
        ]

    async def listar_variedades(self, firm_id: Identificador) -> list[VariedadInfo]:
        stmt = (
            sa.select(VariedadSemilla)
            .where(VariedadSemilla.firm_id == coerce_uuid(firm_id, field="firm_id"))
            .order_by(VariedadSemilla.name.asc())
        )
        return [
            VariedadInfo(id=v.id, nombre=v.name, firm_id=v.firm_id)
            for v in await self._todos(stmt)
        ]

    async def listar_predios(self, firm_id: Identificador) -> list[PredioInfo]:
        stmt = (
            sa.select(Predio)
            .where(Predio.firm_id == coerce_uuid(firm_id, field="firm_id"))
            .order_by(Predio.name.asc())
        )
        return [PredioInfo(id=p.id, nombre=p.name, firm_id=p.firm_id) for p in await self._todos(stmt)]
