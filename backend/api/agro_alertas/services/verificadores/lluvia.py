"""Verificación de precipitaciones por predio."""
from __future__ import annotations

from collections.abc import Callable
from datetime import date
from typing import Optional
from uuid import UUID

from ...core.logging import get_logger
from ...dto.alertas import ResultadoAgregado
from .. import lluvia_calculos as calculos
from ..reglas.base import RegistroReglas, ReglaUmbral
from ..reglas.lluvia import DOMINIO, REGLAS_LLUVIA
from .base import ResultadoVerificacion, VerificadorBase

logger = get_logger("verificador_lluvia")


class VerificadorLluvia(VerificadorBase):
    """Evalúa déficit, exceso, campaña seca y días sin lluvia de un predio."""

    dominio = DOMINIO
    entidad_tipo = "predio"

    def __init__(
        self,
        mediciones,
        alertas,
        reglas: RegistroReglas = REGLAS_LLUVIA,
        reloj: Callable[[], date] = date.today,
    ) -> None:
        super().__init__(mediciones, alertas, reglas, reloj)

    async def _acumulado_ventana(self, premise_id, dias: int) -> float:
        desde, hasta = calculos.ventana(self._reloj(), dias)
        registros = await self._mediciones.registros_lluvia(premise_id, desde, hasta)
        return round(calculos.calcular_acumulado(registros), 1)

    async def _crear(
        self, regla: ReglaUmbral, mensaje, premise_id, firm_id, metadata
    ) -> ResultadoVerificacion:
        alertas = await self._registrar(
            regla,
            mensaje,
            firm_id=firm_id,
            entidad_id=premise_id,
            premise_id=premise_id,
            metadata={"premise_id": premise_id, **metadata},
        )
        return ResultadoVerificacion(alertas_creadas=alertas, disparada=True)

    async def verificar_deficit_hidrico(self, premise_id, firm_id) -> ResultadoVerificacion:
        """Sequía severa primero; la moderada solo si la severa no aplica."""

        severa = self._regla("sequia_severa")
        moderada = self._regla("sequia_moderada")
        if severa is None and moderada is None:
            return ResultadoVerificacion()

        dias = (severa or moderada).umbrales["dias"]
        acumulado = await self._acumulado_ventana(premise_id, dias)

        for regla, severidad in ((severa, "SEVERA"), (moderada, "MODERADA")):
            if regla is None or not regla.validar(acumulado):
                continue
            resultado = await self._crear(
                regla,
                regla.generar_mensaje(acumulado, dias),
                premise_id,
                firm_id,
                {
                    "acumulado": acumulado,
                    "umbral": regla.umbrales["mm_minimo"],
                    "dias": dias,
                    "severidad": severidad,
                },
            )
            resultado.medicion = acumulado
            return resultado
        return ResultadoVerificacion(medicion=acumulado)

    async def verificar_exceso_agua(self, premise_id, firm_id) -> ResultadoVerificacion:
        regla = self._regla("exceso_agua")
        if regla is None:
            return ResultadoVerificacion()

        dias = regla.umbrales["dias"]
        acumulado = await self._acumulado_ventana(premise_id, dias)
        if not regla.validar(acumulado):
            return ResultadoVerificacion(medicion=acumulado)

        exceso = calculos.clasificar_exceso(acumulado, regla.umbrales["mm_maximo"])
        resultado = await self._crear(
            regla,
            regla.generar_mensaje(acumulado, dias),
            premise_id,
            firm_id,
            {
                "acumulado": acumulado,
                "umbral": regla.umbrales["mm_maximo"],
                "dias": dias,
                "severidad": exceso.severidad,
            },
        )
        resultado.medicion = acumulado
        return resultado

    async def verificar_campania_seca(self, premise_id, firm_id) -> ResultadoVerificacion:
        """Compara el tramo actual de campaña con el promedio de los cinco años previos."""

        regla = self._regla("campania_seca")
        if regla is None:
            return ResultadoVerificacion()

        hoy = self._reloj()
        campania = calculos.campania_de_fecha(hoy)
        desde = date(campania.anio_inicio - calculos.ANIOS_HISTORICO, campania.fecha_inicio.month, 1)
        registros = await self._mediciones.registros_lluvia(premise_id, desde, hoy)
        df = calculos.a_dataframe(registros)

        acumulado = round(calculos.calcular_acumulado(df, campania.fecha_inicio, hoy), 1)
        promedio: Optional[float] = calculos.promedio_historico(df, hoy)
        if not regla.validar(acumulado, promedio):
            return ResultadoVerificacion(medicion=acumulado)

        resultado = await self._crear(
            regla,
            regla.generar_mensaje(acumulado, promedio),
            premise_id,
            firm_id,
            {
                "acumulado_campania": acumulado,
                "promedio_historico": promedio,
                "porcentaje": round(acumulado / promedio * 100, 1),
                "campania": campania.nombre,
            },
        )
        resultado.medicion = acumulado
        return resultado

    async def verificar_dias_sin_lluvia(self, premise_id, firm_id) -> ResultadoVerificacion:
        regla = self._regla("dias_sin_lluvia")
        if regla is None:
            return ResultadoVerificacion()

        hoy = self._reloj()
        registros = await self._mediciones.registros_lluvia(premise_id, None, hoy)
        dias = calculos.calcular_dias_sin_lluvia(registros, hoy)
        if not regla.validar(dias):
            return ResultadoVerificacion(medicion=dias)

        resultado = await self._crear(
            regla,
            regla.generar_mensaje(dias),
            premise_id,
            firm_id,
            {"dias_sin_lluvia": dias, "umbral": regla.umbrales["dias"]},
        )
        resultado.medicion = dias
        return resultado

    async def verificar_predio(self, premise_id: UUID | str, firm_id: UUID | str) -> ResultadoAgregado:
        """Ejecuta en paralelo las verificaciones de lluvia del predio.

        Un predio sin ningún registro de lluvia no se evalúa.
        """

        if await self._mediciones.ultimo_registro_lluvia(premise_id) is None:
            logger.debug("Predio sin registros de lluvia", extra={"premise_id": str(premise_id)})
            return ResultadoAgregado(dominio=self.dominio, por_entidad={str(premise_id): 0})

        agregado = await self._ejecutar_concurrente(
            premise_id,
            {
                "deficit_hidrico": self.verificar_deficit_hidrico(premise_id, firm_id),
                "exceso_agua": self.verificar_exceso_agua(premise_id, firm_id),
                "campania_seca": self.verificar_campania_seca(premise_id, firm_id),
                "dias_sin_lluvia": self.verificar_dias_sin_lluvia(premise_id, firm_id),
            },
        )
        logger.info(
            "Verificación de lluvia completada",
            extra={"premise_id": str(premise_id), "alertas_creadas": agregado.total_alertas},
        )
        return agregado
