from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

ENTIDADES_SOPORTADAS = ("lote", "predio", "variedad")


class Prioridad(str, Enum):
    """Prioridad de una alerta, ordenada baja < media < alta."""

    BAJA = "baja"
    MEDIA = "media"
    ALTA = "alta"

    @property
    def rango(self) -> int:
        return _RANGO_PRIORIDAD[self]


_RANGO_PRIORIDAD = {Prioridad.BAJA: 0, Prioridad.MEDIA: 1, Prioridad.ALTA: 2}


class EstadoAlerta(str, Enum):
    PENDIENTE = "pendiente"
    RESUELTA = "resuelta"
    DESCARTADA = "descartada"


class NuevaAlerta(BaseModel):
    """Datos necesarios para registrar una alerta automática."""

    firm_id: UUID
    premise_id: Optional[UUID] = None
    entidad_tipo: str
    entidad_id: UUID
    tipo: str
    regla_aplicada: str
    prioridad: Prioridad
    titulo: str
    descripcion: str
    metadata: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("entidad_tipo")
    @classmethod
    def validate_entidad_tipo(cls, value: str) -> str:
        if value not in ENTIDADES_SOPORTADAS:
            allowed = ", ".join(ENTIDADES_SOPORTADAS)
            raise ValueError(f"entidad_tipo debe ser uno de: {allowed}")
        return value


class Alerta(BaseModel):
    """Alerta persistida, tal como la exponen la API y los verificadores."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    firm_id: UUID
    premise_id: Optional[UUID] = None
    entidad_tipo: str
    entidad_id: UUID
    tipo: str
    regla_aplicada: str
    prioridad: Prioridad
    estado: EstadoAlerta = EstadoAlerta.PENDIENTE
    origen: str = "automatica"
    titulo: str
    descripcion: str
    metadata: Dict[str, Any] = Field(
        default_factory=dict,
        validation_alias=AliasChoices("metadatos", "metadata"),
    )
    created_at: Optional[datetime] = None
    resolved_at: Optional[datetime] = None
    resolved_notes: Optional[str] = None

    @field_validator("metadata", mode="before")
    @classmethod
    def _metadata_vacia(cls, value: Any) -> Dict[str, Any]:
        return dict(value or {})


class ErrorVerificacion(BaseModel):
    """Fallo aislado de una verificación dentro de un agregado."""

    dominio: str
    verificacion: str
    entidad_id: Optional[str] = None
    error: str


class ResultadoAgregado(BaseModel):
    """Resultado de un verificador agregado de un dominio."""

    dominio: str
    alertas_creadas: List[Alerta] = Field(default_factory=list)
    errores: List[ErrorVerificacion] = Field(default_factory=list)
    por_entidad: Dict[str, int] = Field(default_factory=dict)

    @property
    def total_alertas(self) -> int:
        return len(self.alertas_creadas)

    @property
    def completa(self) -> bool:
        return not self.errores

    def incorporar(self, otro: "ResultadoAgregado") -> None:
        """Suma los resultados de otro agregado del mismo dominio."""
        self.alertas_creadas.extend(otro.alertas_creadas)
        self.errores.extend(otro.errores)
        for entidad, cantidad in otro.por_entidad.items():
            self.por_entidad[entidad] = self.por_entidad.get(entidad, 0) + cantidad


class ResultadoVerificacionGeneral(BaseModel):
    """Respuesta de una pasada completa de verificación."""

    total_alertas: int
    por_dominio: Dict[str, int] = Field(default_factory=dict)
    alertas_creadas: List[Alerta] = Field(default_factory=list)
    errores: List[ErrorVerificacion] = Field(default_factory=list)
    completa: bool = True
    mensaje: Optional[str] = None


class VerificacionRequest(BaseModel):
    firm_id: UUID
    premise_id: Optional[UUID] = None


class ResolverAlertaRequest(BaseModel):
    notas: Optional[str] = Field(default=None, max_length=2000)


class DescartarAlertaRequest(BaseModel):
    motivo: Optional[str] = Field(default=None, max_length=2000)


class AlertaListResponse(BaseModel):
    total: int
    items: List[Alerta]
