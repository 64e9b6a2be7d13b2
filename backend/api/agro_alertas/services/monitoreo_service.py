"""Servicio orquestador del motor de alertas de monitoreo."""
from __future__ import annotations

import asyncio
from collections.abc import Callable
from datetime import date
from typing import Any, Optional
from uuid import UUID

from ..core.logging import get_logger
from ..dto.alertas import (
    Alerta,
    ErrorVerificacion,
    ResultadoAgregado,
    ResultadoVerificacionGeneral,
)
from ..dto.resumen import CalidadSemilla, ResumenEstado
from ..exceptions import EntidadNoEncontradaError, EntidadNoSoportadaError
from .calidad_semilla import calcular_calidad
from .reglas import REGLAS_LLUVIA, REGLAS_PASTURAS, REGLAS_SEMILLAS, REGLAS_SUELO
from .reglas.base import RegistroReglas
from .resumen_service import ResumenEstadoService
from .verificadores import (
    VerificadorLluvia,
    VerificadorPasturas,
    VerificadorSemillas,
    VerificadorSuelo,
)

logger = get_logger("monitoreo_service")

MENSAJE_INCOMPLETA = "verificación incompleta"


def _error_verificacion(
    dominio: str, verificacion: str, entidad_id, exc: Exception
) -> ErrorVerificacion:
    logger.warning(
        "Verificación fallida",
        extra={
            "dominio": dominio,
            "verificacion": verificacion,
            "entidad_id": str(entidad_id),
            "error": repr(exc),
        },
    )
    return ErrorVerificacion(
        dominio=dominio,
        verificacion=verificacion,
        entidad_id=str(entidad_id),
        error=str(exc) or exc.__class__.__name__,
    )


def _consolidar(agregados: list[ResultadoAgregado]) -> ResultadoVerificacionGeneral:
    alertas: list[Alerta] = []
    errores: list[ErrorVerificacion] = []
    por_dominio: dict[str, int] = {}
    for agregado in agregados:
        alertas.extend(agregado.alertas_creadas)
        errores.extend(agregado.errores)
        por_dominio[agregado.dominio] = por_dominio.get(agregado.dominio, 0) + agregado.total_alertas

    completa = not errores
    return ResultadoVerificacionGeneral(
        total_alertas=len(alertas),
        por_dominio=por_dominio,
        alertas_creadas=alertas,
        errores=errores,
        completa=completa,
        mensaje=None if completa else MENSAJE_INCOMPLETA,
    )


class MonitoreoAlertasService:
    """Punto de entrada de las verificaciones, resúmenes y transiciones de alertas.

    Los registros de reglas y el reloj son inyectables para permitir
    umbrales propios sin tocar el estado global del proceso.
    """

    def __init__(
        self,
        mediciones,
        alertas,
        *,
        reglas_semillas: RegistroReglas = REGLAS_SEMILLAS,
        reglas_suelo: RegistroReglas = REGLAS_SUELO,
        reglas_lluvia: RegistroReglas = REGLAS_LLUVIA,
        reglas_pasturas: RegistroReglas = REGLAS_PASTURAS,
        reloj: Callable[[], date] = date.today,
    ) -> None:
        """Inicializa los verificadores de cada dominio.

        Args:
            mediciones: Lector de mediciones y entidades (``MedicionRepository``)
            alertas: Almacén de alertas (``AlertaRepository``)
            reglas_semillas: Catálogo de reglas de semillas
            reglas_suelo: Catálogo de reglas de suelo
            reglas_lluvia: Catálogo de reglas de lluvia
            reglas_pasturas: Catálogo de reglas de pasturas
            reloj: Función que devuelve la fecha actual
        """
        self._mediciones = mediciones
        self._alertas = alertas
        self.semillas = VerificadorSemillas(mediciones, alertas, reglas_semillas, reloj)
        self.suelo = VerificadorSuelo(mediciones, alertas, reglas_suelo, reloj)
        self.lluvia = VerificadorLluvia(mediciones, alertas, reglas_lluvia, reloj)
        self.pasturas = VerificadorPasturas(mediciones, alertas, reglas_pasturas, reloj)
        self._resumen = ResumenEstadoService(
            mediciones, alertas, reglas_lluvia=reglas_lluvia, reloj=reloj
        )

    async def _por_predios(self, dominio: str, verificar, firm_id, premise_id) -> ResultadoAgregado:
        agregado = ResultadoAgregado(dominio=dominio)
        if premise_id is not None:
            predios = [premise_id]
        else:
            predios = [predio.id for predio in await self._mediciones.listar_predios(firm_id)]
        for predio in predios:
            try:
                agregado.incorporar(await verificar(predio, firm_id))
            except Exception as exc:
                agregado.errores.append(_error_verificacion(dominio, "predio", predio, exc))
        return agregado

    async def verificar_todo(
        self, firm_id: UUID | str, premise_id: Optional[UUID | str] = None
    ) -> ResultadoVerificacionGeneral:
        """Ejecuta todas las verificaciones de la firma (o de un predio).

        Los dominios corren en paralelo. Si uno falla, el resultado se marca
        incompleto pero conserva las alertas creadas por los demás.
        """

        logger.info(
            "Iniciando verificación general",
            extra={"firm_id": str(firm_id), "premise_id": str(premise_id) if premise_id else None},
        )
        dominios = {
            "lluvia": self._por_predios("lluvia", self.lluvia.verificar_predio, firm_id, premise_id),
            "suelo": self._por_predios("suelo", self.suelo.verificar_predio, firm_id, premise_id),
            "pasturas": self._por_predios(
                "pasturas", self.pasturas.verificar_predio, firm_id, premise_id
            ),
            "semillas": self.semillas.verificar_firma(firm_id),
        }
        resultados = await asyncio.gather(*dominios.values(), return_exceptions=True)

        agregados: list[ResultadoAgregado] = []
        for dominio, resultado in zip(dominios, resultados):
            if isinstance(resultado, BaseException):
                if not isinstance(resultado, Exception):
                    raise resultado
                logger.error(
                    "Dominio de verificación fallido",
                    exc_info=resultado,
                    extra={"dominio": dominio, "firm_id": str(firm_id)},
                )
                agregados.append(
                    ResultadoAgregado(
                        dominio=dominio,
                        errores=[
                            ErrorVerificacion(
                                dominio=dominio,
                                verificacion=dominio,
                                error=str(resultado) or resultado.__class__.__name__,
                            )
                        ],
                    )
                )
                continue
            agregados.append(resultado)

        general = _consolidar(agregados)
        logger.info(
            "Verificación general finalizada",
            extra={
                "firm_id": str(firm_id),
                "total_alertas": general.total_alertas,
                "por_dominio": general.por_dominio,
                "completa": general.completa,
            },
        )
        return general

    async def verificar_entidad(
        self, entidad_tipo: str, entidad_id: UUID | str, firm_id: UUID | str
    ) -> ResultadoVerificacionGeneral:
        """Verifica una entidad puntual tras cargar una medición nueva.

        ``lote`` evalúa suelo y pasturas, ``variedad`` la cadena de semillas y
        ``predio`` las lluvias.
        """

        if entidad_tipo == "lote":
            if await self._mediciones.obtener_lote(entidad_id) is None:
                raise EntidadNoEncontradaError("lote", entidad_id)
            suelo, pasturas = await asyncio.gather(
                self.suelo.verificar_lote(entidad_id, firm_id),
                self.pasturas.verificar_lote(entidad_id, firm_id),
            )
            try:
                fertilizacion = await self.suelo.verificar_fertilizacion_pendiente(
                    entidad_id, firm_id
                )
            except Exception as exc:
                suelo.errores.append(
                    _error_verificacion(
                        self.suelo.dominio, "fertilizacion_pendiente", entidad_id, exc
                    )
                )
            else:
                suelo.alertas_creadas.extend(fertilizacion.alertas_creadas)
                clave = str(entidad_id)
                suelo.por_entidad[clave] = suelo.por_entidad.get(clave, 0) + len(
                    fertilizacion.alertas_creadas
                )
            return _consolidar([suelo, pasturas])
        if entidad_tipo == "variedad":
            if await self._mediciones.obtener_variedad(entidad_id) is None:
                raise EntidadNoEncontradaError("variedad", entidad_id)
            return _consolidar([await self.semillas.verificar_variedad(entidad_id, firm_id)])
        if entidad_tipo == "predio":
            if await self._mediciones.obtener_predio(entidad_id) is None:
                raise EntidadNoEncontradaError("predio", entidad_id)
            return _consolidar([await self.lluvia.verificar_predio(entidad_id, firm_id)])
        raise EntidadNoSoportadaError(entidad_tipo)

    async def obtener_resumen(
        self,
        firm_id: UUID | str,
        premise_id: Optional[UUID | str] = None,
        lot_id: Optional[UUID | str] = None,
    ) -> ResumenEstado:
        if lot_id is not None:
            return await self._resumen.resumen_lote(lot_id, firm_id)
        return await self._resumen.construir_resumen(firm_id, premise_id)

    async def listar_alertas(
        self, firm_id: UUID | str, premise_id: Optional[UUID | str] = None
    ) -> list[Alerta]:
        return await self._alertas.listar_pendientes(firm_id=firm_id, premise_id=premise_id)

    async def resolver_alerta(self, alerta_id: UUID | str, notas: Optional[str] = None) -> Alerta:
        alerta = await self._alertas.resolver(alerta_id, notas)
        logger.info("Alerta resuelta", extra={"alerta_id": str(alerta_id)})
        return alerta

    async def descartar_alerta(self, alerta_id: UUID | str, motivo: Optional[str] = None) -> Alerta:
        alerta = await self._alertas.descartar(alerta_id, motivo)
        logger.info("Alerta descartada", extra={"alerta_id": str(alerta_id)})
        return alerta

    @staticmethod
    def calcular_calidad_semilla(
        germinacion: Any = None,
        pureza: Any = None,
        humedad: Any = None,
        tetrazolio: Any = None,
    ) -> CalidadSemilla:
        return calcular_calidad(germinacion, pureza, humedad, tetrazolio)
