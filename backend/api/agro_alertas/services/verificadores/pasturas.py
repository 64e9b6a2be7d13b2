"""Verificación de altura de pasturas por lote."""
from __future__ import annotations

from collections.abc import Callable
from datetime import date

from ...core.logging import get_logger
from ...dto.alertas import ResultadoAgregado
from ..reglas.base import RegistroReglas
from ..reglas.pasturas import DOMINIO, REGLAS_PASTURAS
from .base import ResultadoVerificacion, VerificadorBase

logger = get_logger("verificador_pasturas")


class VerificadorPasturas(VerificadorBase):
    dominio = DOMINIO
    entidad_tipo = "lote"

    def __init__(
        self,
        mediciones,
        alertas,
        reglas: RegistroReglas = REGLAS_PASTURAS,
        reloj: Callable[[], date] = date.today,
    ) -> None:
        super().__init__(mediciones, alertas, reglas, reloj)

    async def verificar_pastura_critica(self, lot_id, firm_id) -> ResultadoVerificacion:
        """Altura medida por debajo del remanente objetivo."""

        regla = self._regla("pastura_critica")
        if regla is None:
            return ResultadoVerificacion()

        medicion = await self._mediciones.ultima_medicion_pastura(lot_id)
        if medicion is None:
            return ResultadoVerificacion()
        if not regla.validar(medicion.altura_cm, medicion.remanente_objetivo_cm):
            return ResultadoVerificacion(medicion=medicion)

        lote = await self._mediciones.obtener_lote(lot_id)
        nombre = lote.nombre if lote else "Lote"
        alertas = await self._registrar(
            regla,
            regla.generar_mensaje(medicion.altura_cm, medicion.remanente_objetivo_cm, nombre),
            firm_id=firm_id,
            entidad_id=lot_id,
            premise_id=lote.premise_id if lote else None,
            metadata={
                "lot_id": lot_id,
                "lot_name": nombre,
                "altura_actual": medicion.altura_cm,
                "remanente_objetivo": medicion.remanente_objetivo_cm,
                "fecha_medicion": medicion.fecha,
            },
        )
        return ResultadoVerificacion(alertas_creadas=alertas, medicion=medicion, disparada=True)

    async def verificar_medicion_vencida(self, lot_id, firm_id) -> ResultadoVerificacion:
        """Lote ganadero o mixto sin medición o con la última medición vencida."""

        regla = self._regla("medicion_vencida")
        if regla is None:
            return ResultadoVerificacion()

        lote = await self._mediciones.obtener_lote(lot_id)
        if lote is None:
            return ResultadoVerificacion()

        medicion = await self._mediciones.ultima_medicion_pastura(lot_id)
        fecha = medicion.fecha if medicion else None
        dias = (self._reloj() - fecha).days if fecha else None
        if not regla.validar(lote.uso_suelo, dias):
            return ResultadoVerificacion(medicion=medicion)

        alertas = await self._registrar(
            regla,
            regla.generar_mensaje(dias, lote.nombre, fecha),
            firm_id=firm_id,
            entidad_id=lot_id,
            premise_id=lote.premise_id,
            metadata={
                "lot_id": lot_id,
                "lot_name": lote.nombre,
                "uso_suelo": lote.uso_suelo,
                "dias_sin_medicion": dias,
                "fecha_ultima_medicion": fecha,
                "umbral": regla.umbrales["dias"],
            },
        )
        return ResultadoVerificacion(alertas_creadas=alertas, medicion=medicion, disparada=True)

    async def verificar_lote(self, lot_id, firm_id) -> ResultadoAgregado:
        return await self._ejecutar_concurrente(
            lot_id,
            {
                "pastura_critica": self.verificar_pastura_critica(lot_id, firm_id),
                "medicion_vencida": self.verificar_medicion_vencida(lot_id, firm_id),
            },
        )

    async def verificar_predio(self, premise_id, firm_id) -> ResultadoAgregado:
        agregado = ResultadoAgregado(dominio=self.dominio)
        lotes = await self._mediciones.listar_lotes(premise_id)
        for lote in lotes:
            agregado.incorporar(await self.verificar_lote(lote.id, firm_id))
        logger.info(
            "Verificación de pasturas completada",
            extra={
                "premise_id": str(premise_id),
                "lotes": len(lotes),
                "alertas_creadas": agregado.total_alertas,
            },
        )
        return agregado
