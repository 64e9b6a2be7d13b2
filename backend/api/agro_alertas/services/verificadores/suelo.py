"""Verificación de análisis de suelo por lote y por predio."""
from __future__ import annotations

from collections.abc import Callable
from datetime import date
from typing import Optional
from uuid import UUID

from ...core.logging import get_logger
from ...dto.alertas import ResultadoAgregado
from ...dto.mediciones import AnalisisSuelo, LoteInfo
from ..reglas.base import RegistroReglas, porcentaje_del_objetivo
from ..reglas.suelo import DOMINIO, ORDEN_FERTILIZACION, REGLA_POR_NUTRIENTE, REGLAS_SUELO
from .base import ResultadoVerificacion, VerificadorBase

logger = get_logger("verificador_suelo")


class VerificadorSuelo(VerificadorBase):
    """Evalúa nutrientes, pH, materia orgánica y fertilizaciones pendientes."""

    dominio = DOMINIO
    entidad_tipo = "lote"

    def __init__(
        self,
        mediciones,
        alertas,
        reglas: RegistroReglas = REGLAS_SUELO,
        reloj: Callable[[], date] = date.today,
    ) -> None:
        super().__init__(mediciones, alertas, reglas, reloj)

    async def _contexto_lote(self, lot_id) -> tuple[Optional[UUID], str, Optional[LoteInfo]]:
        lote = await self._mediciones.obtener_lote(lot_id)
        if lote is None:
            return None, "Lote", None
        return lote.premise_id, lote.nombre, lote

    async def _verificar_deficit(self, codigo: str, lot_id, firm_id) -> ResultadoVerificacion:
        regla = self._regla(REGLA_POR_NUTRIENTE[codigo])
        if regla is None:
            return ResultadoVerificacion()

        analisis = await self._mediciones.ultimo_analisis_suelo(lot_id)
        if analisis is None:
            return ResultadoVerificacion()

        nutriente = analisis.nutriente(codigo)
        if not regla.validar(nutriente.resultado, nutriente.objetivo):
            return ResultadoVerificacion(medicion=analisis)

        premise_id, nombre_lote, _ = await self._contexto_lote(lot_id)
        mensaje = regla.generar_mensaje(
            nutriente.resultado,
            nutriente.objetivo,
            nutriente.fuente_recomendada,
            nutriente.kg_ha,
        )
        alertas = await self._registrar(
            regla,
            mensaje,
            firm_id=firm_id,
            entidad_id=lot_id,
            premise_id=premise_id,
            metadata={
                "lot_id": lot_id,
                "lot_name": nombre_lote,
                "parametro": codigo.upper(),
                "resultado": nutriente.resultado,
                "objetivo": nutriente.objetivo,
                "porcentaje_objetivo": round(
                    porcentaje_del_objetivo(nutriente.resultado, nutriente.objetivo), 1
                ),
                "deficit": round(nutriente.objetivo - nutriente.resultado, 1),
                "umbral": dict(regla.umbrales),
                "fuente": nutriente.fuente_recomendada,
                "kg_ha": nutriente.kg_ha,
                "fecha_analisis": analisis.fecha,
            },
        )
        return ResultadoVerificacion(alertas_creadas=alertas, medicion=analisis, disparada=True)

    async def verificar_deficit_fosforo(self, lot_id, firm_id) -> ResultadoVerificacion:
        return await self._verificar_deficit("p", lot_id, firm_id)

    async def verificar_deficit_potasio(self, lot_id, firm_id) -> ResultadoVerificacion:
        return await self._verificar_deficit("k", lot_id, firm_id)

    async def verificar_deficit_nitrogeno(self, lot_id, firm_id) -> ResultadoVerificacion:
        return await self._verificar_deficit("n", lot_id, firm_id)

    async def verificar_deficit_azufre(self, lot_id, firm_id) -> ResultadoVerificacion:
        return await self._verificar_deficit("s", lot_id, firm_id)

    async def verificar_ph(self, lot_id, firm_id) -> ResultadoVerificacion:
        regla = self._regla("ph_critico")
        if regla is None:
            return ResultadoVerificacion()

        analisis = await self._mediciones.ultimo_analisis_suelo(lot_id)
        if analisis is None:
            return ResultadoVerificacion()
        if not regla.validar(analisis.ph):
            return ResultadoVerificacion(medicion=analisis)

        premise_id, nombre_lote, _ = await self._contexto_lote(lot_id)
        alertas = await self._registrar(
            regla,
            regla.generar_mensaje(analisis.ph),
            firm_id=firm_id,
            entidad_id=lot_id,
            premise_id=premise_id,
            metadata={
                "lot_id": lot_id,
                "lot_name": nombre_lote,
                "ph": analisis.ph,
                "tipo": "ácido" if analisis.ph < regla.umbrales["min"] else "alcalino",
                "rango_optimo": dict(regla.umbrales),
                "fecha_analisis": analisis.fecha,
            },
        )
        return ResultadoVerificacion(alertas_creadas=alertas, medicion=analisis, disparada=True)

    async def verificar_materia_organica(self, lot_id, firm_id) -> ResultadoVerificacion:
        regla = self._regla("baja_materia_organica")
        if regla is None:
            return ResultadoVerificacion()

        analisis = await self._mediciones.ultimo_analisis_suelo(lot_id)
        if analisis is None:
            return ResultadoVerificacion()
        if not regla.validar(analisis.mo):
            return ResultadoVerificacion(medicion=analisis)

        premise_id, nombre_lote, _ = await self._contexto_lote(lot_id)
        alertas = await self._registrar(
            regla,
            regla.generar_mensaje(analisis.mo),
            firm_id=firm_id,
            entidad_id=lot_id,
            premise_id=premise_id,
            metadata={
                "lot_id": lot_id,
                "lot_name": nombre_lote,
                "mo": analisis.mo,
                "umbral": regla.umbrales["minimo"],
                "fecha_analisis": analisis.fecha,
            },
        )
        return ResultadoVerificacion(alertas_creadas=alertas, medicion=analisis, disparada=True)

    def _primer_deficit(self, analisis: AnalisisSuelo, porcentaje_minimo: float):
        for codigo in ORDEN_FERTILIZACION:
            nutriente = analisis.nutriente(codigo)
            porcentaje = porcentaje_del_objetivo(nutriente.resultado, nutriente.objetivo)
            if porcentaje is not None and porcentaje < porcentaje_minimo:
                return nutriente
        return None

    async def verificar_fertilizacion_pendiente(self, lot_id, firm_id) -> ResultadoVerificacion:
        """Déficit (P, luego K, luego N) sin aplicar pasado el plazo configurado."""

        regla = self._regla("fertilizacion_pendiente")
        if regla is None:
            return ResultadoVerificacion()

        analisis = await self._mediciones.ultimo_analisis_suelo(lot_id)
        if analisis is None or analisis.fecha is None:
            return ResultadoVerificacion(medicion=analisis)

        dias = (self._reloj() - analisis.fecha).days
        if not regla.validar(dias, analisis.aplicado):
            return ResultadoVerificacion(medicion=analisis)

        nutriente = self._primer_deficit(analisis, regla.umbrales["porcentaje_minimo"])
        if nutriente is None:
            return ResultadoVerificacion(medicion=analisis)

        premise_id, nombre_lote, _ = await self._contexto_lote(lot_id)
        alertas = await self._registrar(
            regla,
            regla.generar_mensaje(
                dias, nutriente.nombre, nutriente.fuente_recomendada, nutriente.kg_total
            ),
            firm_id=firm_id,
            entidad_id=lot_id,
            premise_id=premise_id,
            metadata={
                "lot_id": lot_id,
                "lot_name": nombre_lote,
                "dias_desde_analisis": dias,
                "parametro": nutriente.codigo.upper(),
                "fuente": nutriente.fuente_recomendada,
                "kg_total": nutriente.kg_total,
                "fecha_analisis": analisis.fecha,
            },
        )
        return ResultadoVerificacion(alertas_creadas=alertas, medicion=analisis, disparada=True)

    async def verificar_lote(self, lot_id, firm_id) -> ResultadoAgregado:
        """Ejecuta en paralelo las seis verificaciones de parámetros del lote."""

        return await self._ejecutar_concurrente(
            lot_id,
            {
                "deficit_fosforo": self.verificar_deficit_fosforo(lot_id, firm_id),
                "deficit_potasio": self.verificar_deficit_potasio(lot_id, firm_id),
                "deficit_nitrogeno": self.verificar_deficit_nitrogeno(lot_id, firm_id),
                "deficit_azufre": self.verificar_deficit_azufre(lot_id, firm_id),
                "ph_critico": self.verificar_ph(lot_id, firm_id),
                "baja_materia_organica": self.verificar_materia_organica(lot_id, firm_id),
            },
        )

    async def verificar_predio(self, premise_id, firm_id) -> ResultadoAgregado:
        """Recorre los lotes del predio uno por vez y luego las fertilizaciones pendientes."""

        agregado = ResultadoAgregado(dominio=self.dominio)
        lotes = await self._mediciones.listar_lotes(premise_id)
        for lote in lotes:
            agregado.incorporar(await self.verificar_lote(lote.id, firm_id))

        for lote in lotes:
            try:
                resultado = await self.verificar_fertilizacion_pendiente(lote.id, firm_id)
            except Exception as exc:
                self._registrar_error(agregado, "fertilizacion_pendiente", lote.id, exc)
                continue
            agregado.alertas_creadas.extend(resultado.alertas_creadas)
            clave = str(lote.id)
            agregado.por_entidad[clave] = agregado.por_entidad.get(clave, 0) + len(
                resultado.alertas_creadas
            )

        logger.info(
            "Verificación de suelo completada",
            extra={
                "premise_id": str(premise_id),
                "lotes": len(lotes),
                "alertas_creadas": agregado.total_alertas,
            },
        )
        return agregado
