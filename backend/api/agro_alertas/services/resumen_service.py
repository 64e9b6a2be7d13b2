"""Construcción de resúmenes de estado de monitoreo (solo lectura)."""
from __future__ import annotations

import asyncio
from collections.abc import Callable, Iterable
from datetime import date, datetime, timezone
from typing import Optional
from uuid import UUID

from ..core.logging import get_logger
from ..dto.alertas import Alerta, Prioridad
from ..exceptions import EntidadNoEncontradaError
from ..dto.resumen import EstadoLluvia, EstadoSemilla, ResumenEstado
from . import lluvia_calculos as calculos
from .calidad_semilla import calidad_de_analisis
from .reglas.base import RegistroReglas
from .reglas.lluvia import REGLAS_LLUVIA

logger = get_logger("resumen_service")


def ordenar_alertas(alertas: Iterable[Alerta]) -> list[Alerta]:
    """Prioridad descendente y, dentro de cada prioridad, más nuevas primero."""

    def clave(alerta: Alerta):
        creada = alerta.created_at.timestamp() if alerta.created_at else 0.0
        return (-alerta.prioridad.rango, -creada)

    return sorted(alertas, key=clave)


def contar_por_prioridad(alertas: Iterable[Alerta]) -> dict[str, int]:
    conteo = {prioridad.value: 0 for prioridad in sorted(Prioridad, key=lambda p: -p.rango)}
    for alerta in alertas:
        conteo[alerta.prioridad.value] += 1
    return conteo


class ResumenEstadoService:
    """Arma la foto de estado de una firma, un predio o un lote."""

    def __init__(
        self,
        mediciones,
        alertas,
        *,
        reglas_lluvia: RegistroReglas = REGLAS_LLUVIA,
        reloj: Callable[[], date] = date.today,
    ) -> None:
        self._mediciones = mediciones
        self._alertas = alertas
        self._reglas_lluvia = reglas_lluvia
        self._reloj = reloj

    async def estado_lluvia(self, premise_id: UUID | str) -> Optional[EstadoLluvia]:
        """Estado hídrico actual del predio, o None si no registra lluvias."""

        if await self._mediciones.ultimo_registro_lluvia(premise_id) is None:
            return None

        hoy = self._reloj()
        campania = calculos.campania_de_fecha(hoy)
        df = calculos.a_dataframe(await self._mediciones.registros_lluvia(premise_id, None, hoy))

        reglas = self._reglas_lluvia
        dias_deficit = reglas["sequia_moderada"].umbrales["dias"]
        umbral_deficit = reglas["sequia_moderada"].umbrales["mm_minimo"]
        dias_exceso = reglas["exceso_agua"].umbrales["dias"]
        umbral_exceso = reglas["exceso_agua"].umbrales["mm_maximo"]

        acumulado_deficit = calculos.calcular_acumulado(df, *calculos.ventana(hoy, dias_deficit))
        acumulado_exceso = calculos.calcular_acumulado(df, *calculos.ventana(hoy, dias_exceso))
        acumulado_campania = calculos.calcular_acumulado(df, campania.fecha_inicio, hoy)
        promedio = calculos.promedio_historico(df, hoy)
        clasificacion, porcentaje = calculos.clasificar_campania(acumulado_campania, promedio)

        return EstadoLluvia(
            premise_id=premise_id,
            acumulado_30_dias=round(acumulado_deficit, 1),
            deficit=calculos.clasificar_deficit(acumulado_deficit, umbral_deficit),
            acumulado_7_dias=round(acumulado_exceso, 1),
            exceso=calculos.clasificar_exceso(acumulado_exceso, umbral_exceso),
            dias_sin_lluvia=calculos.calcular_dias_sin_lluvia(df, hoy),
            campania=campania.nombre,
            acumulado_campania=round(acumulado_campania, 1),
            promedio_historico=promedio,
            porcentaje_historico=porcentaje,
            clasificacion_campania=clasificacion,
            balance_hidrico=calculos.calcular_balance_hidrico(acumulado_deficit, dias=dias_deficit),
        )

    async def _agregar_lote(self, resumen: ResumenEstado, lot_id) -> None:
        suelo, pastura = await asyncio.gather(
            self._mediciones.ultimo_analisis_suelo(lot_id),
            self._mediciones.ultima_medicion_pastura(lot_id),
        )
        if suelo is not None:
            resumen.suelo[str(lot_id)] = suelo
        if pastura is not None:
            resumen.pasturas[str(lot_id)] = pastura

    async def _agregar_predio(self, resumen: ResumenEstado, premise_id) -> None:
        for lote in await self._mediciones.listar_lotes(premise_id):
            await self._agregar_lote(resumen, lote.id)
        estado = await self.estado_lluvia(premise_id)
        if estado is not None:
            resumen.lluvia[str(premise_id)] = estado

    async def _agregar_semillas(self, resumen: ResumenEstado, firm_id) -> None:
        for variedad in await self._mediciones.listar_variedades(firm_id):
            analisis = await self._mediciones.ultimo_analisis_semilla(variedad.id)
            if analisis is None:
                continue
            resumen.semillas[str(variedad.id)] = EstadoSemilla(
                analisis=analisis, calidad=calidad_de_analisis(analisis)
            )

    async def construir_resumen(
        self, firm_id: UUID | str, premise_id: Optional[UUID | str] = None
    ) -> ResumenEstado:
        """Resumen de firma (todos sus predios y semillas) o de un predio puntual.

        Las semillas dependen de la firma, por lo que solo se incluyen en el
        resumen sin predio.
        """

        pendientes = await self._alertas.listar_pendientes(firm_id=firm_id, premise_id=premise_id)
        alertas = ordenar_alertas(pendientes)
        resumen = ResumenEstado(
            firm_id=firm_id,
            premise_id=premise_id,
            generado_en=datetime.now(timezone.utc),
            alertas_activas=alertas,
            conteo_por_prioridad=contar_por_prioridad(alertas),
        )

        if premise_id is not None:
            await self._agregar_predio(resumen, premise_id)
        else:
            for predio in await self._mediciones.listar_predios(firm_id):
                await self._agregar_predio(resumen, predio.id)
            await self._agregar_semillas(resumen, firm_id)

        logger.info(
            "Resumen de estado generado",
            extra={
                "firm_id": str(firm_id),
                "premise_id": str(premise_id) if premise_id else None,
                "alertas_activas": len(alertas),
            },
        )
        return resumen

    async def resumen_lote(self, lot_id: UUID | str, firm_id: UUID | str) -> ResumenEstado:
        lote = await self._mediciones.obtener_lote(lot_id)
        if lote is None:
            raise EntidadNoEncontradaError("lote", lot_id)

        pendientes = await self._alertas.listar_pendientes(
            firm_id=firm_id, entidad_tipo="lote", entidad_id=lot_id
        )
        alertas = ordenar_alertas(pendientes)
        resumen = ResumenEstado(
            firm_id=firm_id,
            premise_id=lote.premise_id,
            lot_id=lote.id,
            generado_en=datetime.now(timezone.utc),
            alertas_activas=alertas,
            conteo_por_prioridad=contar_por_prioridad(alertas),
        )
        await self._agregar_lote(resumen, lote.id)
        return resumen
