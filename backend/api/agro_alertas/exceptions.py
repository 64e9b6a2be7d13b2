"""Excepciones de dominio del motor de alertas."""
from __future__ import annotations


class MonitoreoError(Exception):
    """Error base del motor de monitoreo."""


class AlertaNoEncontradaError(MonitoreoError):
    """La alerta solicitada no existe."""

    def __init__(self, alerta_id: object) -> None:
        super().__init__(f"Alerta {alerta_id} no encontrada")
        self.alerta_id = alerta_id


class AlertaEstadoInvalidoError(MonitoreoError):
    """La alerta no está pendiente y no admite la transición pedida."""

    def __init__(self, alerta_id: object, estado: str) -> None:
        super().__init__(f"Alerta {alerta_id} está en estado '{estado}', se esperaba 'pendiente'")
        self.alerta_id = alerta_id
        self.estado = estado


class EntidadNoSoportadaError(MonitoreoError, ValueError):
    """Tipo de entidad sin verificador asociado."""

    def __init__(self, entidad_tipo: str) -> None:
        super().__init__(
            f"entidad_tipo debe ser uno de: lote, predio, variedad (recibido '{entidad_tipo}')"
        )
        self.entidad_tipo = entidad_tipo


class EntidadNoEncontradaError(MonitoreoError):
    """El lote, predio o variedad indicado no existe."""

    def __init__(self, entidad_tipo: str, entidad_id: object) -> None:
        super().__init__(f"No se encontró {entidad_tipo} {entidad_id}")
        self.entidad_tipo = entidad_tipo
        self.entidad_id = entidad_id
