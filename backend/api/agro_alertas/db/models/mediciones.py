"""Model definitions for monitoring measurement tables."""
from __future__ import annotations

import uuid

import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from agro_alertas.db.base import Base


class AnalisisSueloLote(Base):
    """Análisis de suelo de un lote con objetivos y fuentes recomendadas."""

    __tablename__ = "analisis_suelo"

    id = sa.Column(postgresql.UUID(as_uuid=True), primary_key=True, default=uuid.uuid4, nullable=False)
    firm_id = sa.Column(postgresql.UUID(as_uuid=True), nullable=False)
    lot_id = sa.Column(
        postgresql.UUID(as_uuid=True),
        sa.ForeignKey("lots.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    fecha = sa.Column(sa.Date(), nullable=False)
    ph = sa.Column(sa.Numeric(4, 2), nullable=True)
    mo = sa.Column(sa.Numeric(5, 2), nullable=True)
    aplicado = sa.Column(sa.Boolean, nullable=False, server_default=sa.text("false"))

    p_resultado = sa.Column(sa.Numeric(10, 2), nullable=True)
    p_objetivo = sa.Column(sa.Numeric(10, 2), nullable=True)
    p_fuente_recomendada = sa.Column(sa.String(100), nullable=True)
    p_kg_ha = sa.Column(sa.Numeric(10, 2), nullable=True)
    p_kg_total = sa.Column(sa.Numeric(12, 2), nullable=True)
    k_resultado = sa.Column(sa.Numeric(10, 2), nullable=True)
    k_objetivo = sa.Column(sa.Numeric(10, 2), nullable=True)
    k_fuente_recomendada = sa.Column(sa.String(100), nullable=True)
    k_kg_ha = sa.Column(sa.Numeric(10, 2), nullable=True)
    k_kg_total = sa.Column(sa.Numeric(12, 2), nullable=True)
    n_resultado = sa.Column(sa.Numeric(10, 2), nullable=True)
    n_objetivo = sa.Column(sa.Numeric(10, 2), nullable=True)
    n_fuente_recomendada = sa.Column(sa.String(100), nullable=True)
    n_kg_ha = sa.Column(sa.Numeric(10, 2), nullable=True)
    n_kg_total = sa.Column(sa.Numeric(12, 2), nullable=True)
    s_resultado = sa.Column(sa.Numeric(10, 2), nullable=True)
    s_objetivo = sa.Column(sa.Numeric(10, 2), nullable=True)
    s_fuente_recomendada = sa.Column(sa.String(100), nullable=True)
    s_kg_ha = sa.Column(sa.Numeric(10, 2), nullable=True)
    s_kg_total = sa.Column(sa.Numeric(12, 2), nullable=True)

    def __repr__(self) -> str:
        return f"AnalisisSueloLote(id={self.id!r}, lot_id={self.lot_id!r}, fecha={self.fecha!r})"


class AnalisisSemillaVariedad(Base):
    __tablename__ = "analisis_semillas"

    id = sa.Column(postgresql.UUID(as_uuid=True), primary_key=True, default=uuid.uuid4, nullable=False)
    firm_id = sa.Column(postgresql.UUID(as_uuid=True), nullable=False)
    seed_variety_id = sa.Column(
        postgresql.UUID(as_uuid=True),
        sa.ForeignKey("seed_varieties.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    fecha = sa.Column(sa.Date(), nullable=False)
    germinacion = sa.Column(sa.Numeric(5, 2), nullable=True)
    pureza = sa.Column(sa.Numeric(5, 2), nullable=True)
    humedad = sa.Column(sa.Numeric(5, 2), nullable=True)
    tetrazolio = sa.Column(sa.Numeric(5, 2), nullable=True)

    def __repr__(self) -> str:
        return (
            f"AnalisisSemillaVariedad(id={self.id!r}, seed_variety_id={self.seed_variety_id!r}, "
            f"fecha={self.fecha!r})"
        )


class RegistroLluviaPredio(Base):
    """Registro diario de lluvia en mm."""

    __tablename__ = "lluvias"
    __table_args__ = (sa.Index("ix_lluvias_premise_fecha", "premise_id", "fecha"),)

    id = sa.Column(postgresql.UUID(as_uuid=True), primary_key=True, default=uuid.uuid4, nullable=False)
    premise_id = sa.Column(
        postgresql.UUID(as_uuid=True),
        sa.ForeignKey("premises.id", ondelete="CASCADE"),
        nullable=False,
    )
    fecha = sa.Column(sa.Date(), nullable=False)
    mm = sa.Column(sa.Numeric(7, 2), nullable=True)

    def __repr__(self) -> str:
        return f"RegistroLluviaPredio(premise_id={self.premise_id!r}, fecha={self.fecha!r}, mm={self.mm!r})"


class MedicionPasturaLote(Base):
    __tablename__ = "mediciones_pastura"

    id = sa.Column(postgresql.UUID(as_uuid=True), primary_key=True, default=uuid.uuid4, nullable=False)
    lot_id = sa.Column(
        postgresql.UUID(as_uuid=True),
        sa.ForeignKey("lots.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    fecha = sa.Column(sa.Date(), nullable=False)
    altura_cm = sa.Column(sa.Numeric(6, 2), nullable=True)
    remanente_objetivo_cm = sa.Column(sa.Numeric(6, 2), nullable=True)

    def __repr__(self) -> str:
        return f"MedicionPasturaLote(lot_id={self.lot_id!r}, fecha={self.fecha!r})"
