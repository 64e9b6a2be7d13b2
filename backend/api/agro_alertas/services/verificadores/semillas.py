"""Verificación de análisis de semillas por variedad."""
from __future__ import annotations

import enum
from collections.abc import Callable
from datetime import date
from uuid import UUID

from ...core.logging import get_logger
from ...dto.alertas import ResultadoAgregado
from ..reglas.base import RegistroReglas
from ..reglas.semillas import DOMINIO, REGLAS_SEMILLAS, problemas_detectados
from .base import ResultadoVerificacion, VerificadorBase

logger = get_logger("verificador_semillas")

# Campos del análisis que recibe ``validar`` de cada regla.
_CAMPOS_REGLA: dict[str, tuple[str, ...]] = {
    "baja_germinacion": ("germinacion",),
    "semilla_inviable": ("germinacion",),
    "baja_pureza": ("pureza",),
    "humedad_alta": ("humedad",),
    "baja_viabilidad_tetrazolio": ("tetrazolio",),
    "discrepancia_tests": ("germinacion", "tetrazolio"),
    "semilla_deteriorada": ("germinacion", "pureza", "humedad", "tetrazolio"),
}

_CAMPOS_MENSAJE_DETERIORADA = ("germinacion", "pureza", "humedad")


class EtapaSemilla(enum.Enum):
    CHECK_INVIABLE = "check_inviable"
    CHECK_DETERIORATED = "check_deteriorated"
    CHECK_INDIVIDUAL = "check_individual"
    FIN = "fin"


class VerificadorSemillas(VerificadorBase):
    """Evalúa la calidad de semillas con supresión jerárquica.

    Una semilla inviable no genera además alertas de deterioro ni
    individuales; una deteriorada no genera alertas individuales.
    """

    dominio = DOMINIO
    entidad_tipo = "variedad"

    def __init__(
        self,
        mediciones,
        alertas,
        reglas: RegistroReglas = REGLAS_SEMILLAS,
        reloj: Callable[[], date] = date.today,
    ) -> None:
        super().__init__(mediciones, alertas, reglas, reloj)

    async def _verificar(
        self, regla_id: str, seed_variety_id: UUID | str, firm_id: UUID | str
    ) -> ResultadoVerificacion:
        regla = self._regla(regla_id)
        if regla is None:
            return ResultadoVerificacion()

        analisis = await self._mediciones.ultimo_analisis_semilla(seed_variety_id)
        if analisis is None:
            return ResultadoVerificacion()

        campos = _CAMPOS_REGLA[regla_id]
        valores = {campo: getattr(analisis, campo) for campo in campos}
        if not regla.validar(*valores.values()):
            return ResultadoVerificacion(medicion=analisis)

        variedad = await self._mediciones.obtener_variedad(seed_variety_id)
        nombre = variedad.nombre if variedad else None

        metadata = {
            "seed_variety_id": seed_variety_id,
            "seed_variety_name": nombre,
            **valores,
            "umbral": dict(regla.umbrales),
            "fecha_analisis": analisis.fecha,
        }
        if regla_id == "semilla_deteriorada":
            mensaje = regla.generar_mensaje(
                *(getattr(analisis, campo) for campo in _CAMPOS_MENSAJE_DETERIORADA), nombre
            )
            limites = {
                clave: valor for clave, valor in regla.umbrales.items() if clave != "problemas_minimos"
            }
            metadata["problemas"] = problemas_detectados(*valores.values(), **limites)
        else:
            mensaje = regla.generar_mensaje(*valores.values(), nombre)
        if regla_id == "discrepancia_tests":
            metadata["diferencia"] = round(abs(analisis.germinacion - analisis.tetrazolio), 1)

        alertas = await self._registrar(
            regla,
            mensaje,
            firm_id=firm_id,
            entidad_id=seed_variety_id,
            premise_id=None,
            metadata=metadata,
        )
        return ResultadoVerificacion(alertas_creadas=alertas, medicion=analisis, disparada=True)

    async def verificar_baja_germinacion(self, seed_variety_id, firm_id) -> ResultadoVerificacion:
        return await self._verificar("baja_germinacion", seed_variety_id, firm_id)

    async def verificar_semilla_inviable(self, seed_variety_id, firm_id) -> ResultadoVerificacion:
        return await self._verificar("semilla_inviable", seed_variety_id, firm_id)

    async def verificar_baja_pureza(self, seed_variety_id, firm_id) -> ResultadoVerificacion:
        return await self._verificar("baja_pureza", seed_variety_id, firm_id)

    async def verificar_humedad_alta(self, seed_variety_id, firm_id) -> ResultadoVerificacion:
        return await self._verificar("humedad_alta", seed_variety_id, firm_id)

    async def verificar_baja_viabilidad_tetrazolio(
        self, seed_variety_id, firm_id
    ) -> ResultadoVerificacion:
        return await self._verificar("baja_viabilidad_tetrazolio", seed_variety_id, firm_id)

    async def verificar_discrepancia_tests(self, seed_variety_id, firm_id) -> ResultadoVerificacion:
        return await self._verificar("discrepancia_tests", seed_variety_id, firm_id)

    async def verificar_semilla_deteriorada(self, seed_variety_id, firm_id) -> ResultadoVerificacion:
        return await self._verificar("semilla_deteriorada", seed_variety_id, firm_id)

    async def verificar_variedad(
        self, seed_variety_id: UUID | str, firm_id: UUID | str
    ) -> ResultadoAgregado:
        """Recorre inviable -> deteriorada -> individuales para una variedad.

        Las dos primeras etapas son secuenciales y cortan la cadena cuando su
        regla se dispara, haya creado o no la alerta. Un error en ellas aborta
        el resto de la cadena para esta variedad.
        """

        agregado = ResultadoAgregado(dominio=self.dominio)
        etapa = EtapaSemilla.CHECK_INVIABLE

        while etapa is not EtapaSemilla.FIN:
            if etapa is EtapaSemilla.CHECK_INDIVIDUAL:
                agregado.incorporar(
                    await self._ejecutar_concurrente(
                        seed_variety_id,
                        {
                            "baja_germinacion": self.verificar_baja_germinacion(seed_variety_id, firm_id),
                            "baja_pureza": self.verificar_baja_pureza(seed_variety_id, firm_id),
                            "humedad_alta": self.verificar_humedad_alta(seed_variety_id, firm_id),
                            "baja_viabilidad_tetrazolio": self.verificar_baja_viabilidad_tetrazolio(
                                seed_variety_id, firm_id
                            ),
                            "discrepancia_tests": self.verificar_discrepancia_tests(
                                seed_variety_id, firm_id
                            ),
                        },
                    )
                )
                etapa = EtapaSemilla.FIN
                continue

            if etapa is EtapaSemilla.CHECK_INVIABLE:
                nombre, verificar, siguiente = (
                    "semilla_inviable",
                    self.verificar_semilla_inviable,
                    EtapaSemilla.CHECK_DETERIORATED,
                )
            else:
                nombre, verificar, siguiente = (
                    "semilla_deteriorada",
                    self.verificar_semilla_deteriorada,
                    EtapaSemilla.CHECK_INDIVIDUAL,
                )

            try:
                resultado = await verificar(seed_variety_id, firm_id)
            except Exception as exc:
                self._registrar_error(agregado, nombre, seed_variety_id, exc)
                break

            agregado.alertas_creadas.extend(resultado.alertas_creadas)
            etapa = EtapaSemilla.FIN if resultado.disparada else siguiente

        agregado.por_entidad[str(seed_variety_id)] = len(agregado.alertas_creadas)
        return agregado

    async def verificar_firma(self, firm_id: UUID | str) -> ResultadoAgregado:
        """Verifica todas las variedades de la firma, una por vez."""

        agregado = ResultadoAgregado(dominio=self.dominio)
        variedades = await self._mediciones.listar_variedades(firm_id)
        for variedad in variedades:
            agregado.incorporar(await self.verificar_variedad(variedad.id, firm_id))

        logger.info(
            "Verificación de semillas completada",
            extra={
                "firm_id": str(firm_id),
                "variedades": len(variedades),
                "alertas_creadas": agregado.total_alertas,
            },
        )
        return agregado
