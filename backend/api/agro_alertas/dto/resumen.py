"""Modelos de respuesta del resumen de estado."""
from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from ..utils.type_converters import as_float
from .alertas import Alerta
from .mediciones import AnalisisSemilla, AnalisisSuelo, MedicionPastura


class CalidadSemilla(BaseModel):
    """Puntaje de calidad 0-100 derivado de un análisis de semilla."""

    calidad: Optional[int] = None
    clasificacion: str
    color: str
    mensaje: str


class CalidadSemillaRequest(BaseModel):
    germinacion: Optional[float] = None
    pureza: Optional[float] = None
    humedad: Optional[float] = None
    tetrazolio: Optional[float] = None

    @field_validator("germinacion", "pureza", "humedad", "tetrazolio", mode="before")
    @classmethod
    def _coercionar(cls, value: Any) -> Optional[float]:
        return as_float(value)


class EstadoSemilla(BaseModel):
    analisis: AnalisisSemilla
    calidad: CalidadSemilla


class DeficitHidrico(BaseModel):
    deficit_mm: float
    porcentaje: float
    severidad: str


class ExcesoHidrico(BaseModel):
    exceso_mm: float
    porcentaje: float
    severidad: str


class BalanceHidrico(BaseModel):
    precipitacion_mm: float
    evapotranspiracion_mm: float
    balance_mm: float
    estado: str


class EstadoLluvia(BaseModel):
    """Estado hídrico actual de un predio."""

    premise_id: UUID
    acumulado_30_dias: float
    deficit: DeficitHidrico
    acumulado_7_dias: float
    exceso: ExcesoHidrico
    dias_sin_lluvia: int
    campania: str
    acumulado_campania: float
    promedio_historico: Optional[float] = None
    porcentaje_historico: Optional[float] = None
    clasificacion_campania: Optional[str] = None
    balance_hidrico: BalanceHidrico


class ResumenEstado(BaseModel):
    """Foto del estado de monitoreo de una firma, predio o lote."""

    firm_id: UUID
    premise_id: Optional[UUID] = None
    lot_id: Optional[UUID] = None
    generado_en: datetime
    alertas_activas: List[Alerta] = Field(default_factory=list)
    conteo_por_prioridad: Dict[str, int] = Field(default_factory=dict)
    suelo: Dict[str, AnalisisSuelo] = Field(default_factory=dict)
    semillas: Dict[str, EstadoSemilla] = Field(default_factory=dict)
    pasturas: Dict[str, MedicionPastura] = Field(default_factory=dict)
    lluvia: Dict[str, EstadoLluvia] = Field(default_factory=dict)
