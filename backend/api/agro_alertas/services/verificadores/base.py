"""Piezas comunes a los verificadores de cada dominio."""
from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Optional
from uuid import UUID

from ...core.logging import get_logger
from ...dto.alertas import Alerta, ErrorVerificacion, NuevaAlerta, ResultadoAgregado
from ..reglas.base import MensajeAlerta, RegistroReglas, ReglaUmbral

logger = get_logger("verificadores")


@dataclass
class ResultadoVerificacion:
    """Resultado de evaluar una regla sobre una entidad.

    ``disparada`` indica que la condición se cumplió aunque la alerta ya
    estuviera pendiente (y por lo tanto no se haya creado otra).
    """

    alertas_creadas: list[Alerta] = field(default_factory=list)
    medicion: Any = None
    disparada: bool = False


class VerificadorBase:
    """Evalúa reglas de un dominio y registra alertas sin duplicados."""

    dominio: str = ""
    entidad_tipo: str = ""

    def __init__(
        self,
        mediciones,
        alertas,
        reglas: RegistroReglas,
        reloj: Callable[[], date] = date.today,
    ) -> None:
        self._mediciones = mediciones
        self._alertas = alertas
        self._reglas = reglas
        self._reloj = reloj

    @property
    def reglas(self) -> RegistroReglas:
        return self._reglas

    def _regla(self, regla_id: str) -> Optional[ReglaUmbral]:
        regla = self._reglas.get(regla_id)
        if regla is None or not regla.enabled:
            return None
        return regla

    async def _registrar(
        self,
        regla: ReglaUmbral,
        mensaje: MensajeAlerta,
        *,
        firm_id: UUID | str,
        entidad_id: UUID | str,
        premise_id: UUID | str | None,
        metadata: Mapping[str, Any],
    ) -> list[Alerta]:
        """Pide al almacén crear la alerta y devuelve la lista de creadas (0 o 1)."""

        nueva = NuevaAlerta(
            firm_id=firm_id,
            premise_id=premise_id,
            entidad_tipo=self.entidad_tipo,
            entidad_id=entidad_id,
            tipo=regla.tipo,
            regla_aplicada=regla.id,
            prioridad=regla.prioridad,
            titulo=mensaje.titulo,
            descripcion=mensaje.descripcion,
            metadata={**_serializable(metadata), "recomendacion": mensaje.recomendacion},
        )
        alerta = await self._alertas.crear_si_no_existe(nueva)
        if alerta is None:
            logger.debug(
                "Regla disparada con alerta pendiente previa",
                extra={"regla": regla.id, "entidad_id": str(entidad_id)},
            )
            return []

        logger.info(
            "Alerta creada",
            extra={
                "regla": regla.id,
                "prioridad": regla.prioridad.value,
                "entidad_tipo": self.entidad_tipo,
                "entidad_id": str(entidad_id),
            },
        )
        return [alerta]

    async def _ejecutar_concurrente(
        self,
        entidad_id: UUID | str,
        verificaciones: Mapping[str, Awaitable[ResultadoVerificacion]],
    ) -> ResultadoAgregado:
        """Ejecuta verificaciones independientes en paralelo y junta los resultados.

        Un fallo no cancela a las demás; queda registrado en ``errores``.
        """

        nombres = list(verificaciones)
        resultados = await asyncio.gather(*verificaciones.values(), return_exceptions=True)

        agregado = ResultadoAgregado(dominio=self.dominio)
        for nombre, resultado in zip(nombres, resultados):
            if isinstance(resultado, BaseException):
                if not isinstance(resultado, Exception):
                    raise resultado
                self._registrar_error(agregado, nombre, entidad_id, resultado)
                continue
            agregado.alertas_creadas.extend(resultado.alertas_creadas)

        agregado.por_entidad[str(entidad_id)] = len(agregado.alertas_creadas)
        return agregado

    def _registrar_error(
        self,
        agregado: ResultadoAgregado,
        verificacion: str,
        entidad_id: UUID | str | None,
        exc: Exception,
    ) -> None:
        logger.warning(
            "Verificación fallida",
            extra={
                "dominio": self.dominio,
                "verificacion": verificacion,
                "entidad_id": str(entidad_id) if entidad_id else None,
                "error": repr(exc),
            },
        )
        agregado.errores.append(
            ErrorVerificacion(
                dominio=self.dominio,
                verificacion=verificacion,
                entidad_id=str(entidad_id) if entidad_id else None,
                error=str(exc) or exc.__class__.__name__,
            )
        )


def _serializable(metadata: Mapping[str, Any]) -> dict[str, Any]:
    """Normaliza fechas y UUID para almacenarlos en JSON."""
    resultado: dict[str, Any] = {}
    for clave, valor in metadata.items():
        if isinstance(valor, (date, UUID)):
            valor = valor.isoformat() if isinstance(valor, date) else str(valor)
        resultado[clave] = valor
    return resultado
