"""Mediciones de monitoreo normalizadas.

Todos los campos numéricos se parsean una única vez en este límite: números,
strings numéricos, ``Decimal``, strings vacíos o nulos terminan como
``Optional[float]``. Un valor no parseable se trata como dato ausente y nunca
dispara una regla. El cero es un valor real.
"""
from __future__ import annotations

from datetime import date
from typing import Any, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, field_validator

from ..utils.type_converters import as_bool, as_date, as_float

NUTRIENTES: tuple[str, ...] = ("p", "k", "n", "s")

NOMBRES_NUTRIENTES: dict[str, str] = {
    "p": "Fósforo (P)",
    "k": "Potasio (K)",
    "n": "Nitrógeno (N)",
    "s": "Azufre (S)",
}


class _Medicion(BaseModel):
    model_config = ConfigDict(from_attributes=True, frozen=True)

    @field_validator("fecha", mode="before", check_fields=False)
    @classmethod
    def _normalizar_fecha(cls, value: Any) -> Optional[date]:
        return as_date(value)


class NutrienteSuelo(BaseModel):
    """Vista de un nutriente dentro de un análisis de suelo."""

    model_config = ConfigDict(frozen=True)

    codigo: str
    resultado: Optional[float] = None
    objetivo: Optional[float] = None
    fuente_recomendada: Optional[str] = None
    kg_ha: Optional[float] = None
    kg_total: Optional[float] = None

    @property
    def nombre(self) -> str:
        return NOMBRES_NUTRIENTES.get(self.codigo, self.codigo.upper())


class AnalisisSuelo(_Medicion):
    """Análisis de suelo más reciente de un lote."""

    id: Optional[UUID] = None
    lot_id: UUID
    fecha: Optional[date] = None
    ph: Optional[float] = None
    mo: Optional[float] = None
    aplicado: bool = False

    p_resultado: Optional[float] = None
    p_objetivo: Optional[float] = None
    p_fuente_recomendada: Optional[str] = None
    p_kg_ha: Optional[float] = None
    p_kg_total: Optional[float] = None

    k_resultado: Optional[float] = None
    k_objetivo: Optional[float] = None
    k_fuente_recomendada: Optional[str] = None
    k_kg_ha: Optional[float] = None
    k_kg_total: Optional[float] = None

    n_resultado: Optional[float] = None
    n_objetivo: Optional[float] = None
    n_fuente_recomendada: Optional[str] = None
    n_kg_ha: Optional[float] = None
    n_kg_total: Optional[float] = None

    s_resultado: Optional[float] = None
    s_objetivo: Optional[float] = None
    s_fuente_recomendada: Optional[str] = None
    s_kg_ha: Optional[float] = None
    s_kg_total: Optional[float] = None

    @field_validator(
        "ph",
        "mo",
        *(f"{n}_{campo}" for n in NUTRIENTES for campo in ("resultado", "objetivo", "kg_ha", "kg_total")),
        mode="before",
    )
    @classmethod
    def _coercionar_numeros(cls, value: Any) -> Optional[float]:
        return as_float(value)

    @field_validator(*(f"{n}_fuente_recomendada" for n in NUTRIENTES), mode="before")
    @classmethod
    def _normalizar_fuente(cls, value: Any) -> Optional[str]:
        if value is None:
            return None
        texto = str(value).strip()
        return texto or None

    @field_validator("aplicado", mode="before")
    @classmethod
    def _normalizar_aplicado(cls, value: Any) -> bool:
        return as_bool(value)

    def nutriente(self, codigo: str) -> NutrienteSuelo:
        """Agrupa los campos de un nutriente (p, k, n o s)."""
        codigo = codigo.lower()
        if codigo not in NUTRIENTES:
            raise ValueError(f"nutriente debe ser uno de: {', '.join(NUTRIENTES)}")
        return NutrienteSuelo(
            codigo=codigo,
            resultado=getattr(self, f"{codigo}_resultado"),
            objetivo=getattr(self, f"{codigo}_objetivo"),
            fuente_recomendada=getattr(self, f"{codigo}_fuente_recomendada"),
            kg_ha=getattr(self, f"{codigo}_kg_ha"),
            kg_total=getattr(self, f"{codigo}_kg_total"),
        )


class AnalisisSemilla(_Medicion):
    """Análisis de calidad más reciente de una variedad de semilla."""

    id: Optional[UUID] = None
    seed_variety_id: UUID
    fecha: Optional[date] = None
    germinacion: Optional[float] = None
    pureza: Optional[float] = None
    humedad: Optional[float] = None
    tetrazolio: Optional[float] = None

    @field_validator("germinacion", "pureza", "humedad", "tetrazolio", mode="before")
    @classmethod
    def _coercionar_porcentajes(cls, value: Any) -> Optional[float]:
        return as_float(value)


class RegistroLluvia(_Medicion):
    """Registro diario de precipitación de un predio."""

    premise_id: Optional[UUID] = None
    fecha: date
    mm: Optional[float] = None

    @field_validator("mm", mode="before")
    @classmethod
    def _coercionar_mm(cls, value: Any) -> Optional[float]:
        return as_float(value)


class MedicionPastura(_Medicion):
    """Última lectura de altura de pastura de un lote."""

    id: Optional[UUID] = None
    lot_id: UUID
    fecha: Optional[date] = None
    altura_cm: Optional[float] = None
    remanente_objetivo_cm: Optional[float] = None

    @field_validator("altura_cm", "remanente_objetivo_cm", mode="before")
    @classmethod
    def _coercionar_alturas(cls, value: Any) -> Optional[float]:
        return as_float(value)


class LoteInfo(BaseModel):
    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: UUID
    nombre: str
    firm_id: UUID
    premise_id: UUID
    uso_suelo: Optional[str] = None


class VariedadInfo(BaseModel):
    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: UUID
    nombre: str
    firm_id: UUID


class PredioInfo(BaseModel):
    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: UUID
    nombre: str
    firm_id: UUID
