"""Model definition for table alerts."""
from __future__ import annotations

import uuid

import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from agro_alertas.db.base import Base


class AlertaMonitoreo(Base):
    """Alerta automática generada por el motor de monitoreo."""

    __tablename__ = "alerts"
    __table_args__ = (
        # A lo sumo una alerta pendiente por entidad y regla.
        sa.Index(
            "uq_alerts_pendiente_entidad_regla",
            "entidad_tipo",
            "entidad_id",
            "regla_aplicada",
            unique=True,
            postgresql_where=sa.text("estado = 'pendiente'"),
        ),
        sa.Index("ix_alerts_firm_estado", "firm_id", "estado"),
    )

    id = sa.Column(postgresql.UUID(as_uuid=True), primary_key=True, default=uuid.uuid4, nullable=False)
    firm_id = sa.Column(postgresql.UUID(as_uuid=True), nullable=False)
    premise_id = sa.Column(postgresql.UUID(as_uuid=True), nullable=True)
    entidad_tipo = sa.Column(sa.String(20), nullable=False)
    entidad_id = sa.Column(postgresql.UUID(as_uuid=True), nullable=False)
    tipo = sa.Column(sa.String(50), nullable=False)
    regla_aplicada = sa.Column(sa.String(50), nullable=False)
    prioridad = sa.Column(sa.String(10), nullable=False)
    estado = sa.Column(sa.String(20), nullable=False, server_default=sa.text("'pendiente'"))
    origen = sa.Column(sa.String(20), nullable=False, server_default=sa.text("'automatica'"))
    titulo = sa.Column(sa.String(255), nullable=False)
    descripcion = sa.Column(sa.Text, nullable=False)
    metadatos = sa.Column("metadata", postgresql.JSONB, nullable=True)
    created_at = sa.Column(
        sa.DateTime(timezone=True),
        nullable=False,
        server_default=sa.text("CURRENT_TIMESTAMP"),
    )
    resolved_at = sa.Column(sa.DateTime(timezone=True), nullable=True)
    resolved_notes = sa.Column(sa.Text, nullable=True)

    def __repr__(self) -> str:
        return (
            f"AlertaMonitoreo(id={self.id!r}, regla={self.regla_aplicada!r}, "
            f"estado={self.estado!r})"
        )
