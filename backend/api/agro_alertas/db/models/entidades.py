"""Model definitions for tables premises, lots and seed_varieties."""
from __future__ import annotations

import uuid

import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from agro_alertas.db.base import Base


class Predio(Base):
    """Predio (establecimiento) de una firma."""

    __tablename__ = "premises"

    id = sa.Column(postgresql.UUID(as_uuid=True), primary_key=True, default=uuid.uuid4, nullable=False)
    firm_id = sa.Column(postgresql.UUID(as_uuid=True), nullable=False, index=True)
    name = sa.Column(sa.String(150), nullable=False)

    def __repr__(self) -> str:
        return f"Predio(id={self.id!r}, name={self.name!r})"


class Lote(Base):
    """Lote dentro de un predio."""

    __tablename__ = "lots"

    id = sa.Column(postgresql.UUID(as_uuid=True), primary_key=True, default=uuid.uuid4, nullable=False)
    firm_id = sa.Column(postgresql.UUID(as_uuid=True), nullable=False, index=True)
    premise_id = sa.Column(
        postgresql.UUID(as_uuid=True),
        sa.ForeignKey("premises.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name = sa.Column(sa.String(150), nullable=False)
    uso_suelo = sa.Column(sa.String(30), nullable=True)
    activo = sa.Column(sa.Boolean, nullable=False, server_default=sa.text("true"))

    def __repr__(self) -> str:
        return f"Lote(id={self.id!r}, name={self.name!r}, uso_suelo={self.uso_suelo!r})"


class VariedadSemilla(Base):
    __tablename__ = "seed_varieties"

    id = sa.Column(postgresql.UUID(as_uuid=True), primary_key=True, default=uuid.uuid4, nullable=False)
    firm_id = sa.Column(postgresql.UUID(as_uuid=True), nullable=False, index=True)
    name = sa.Column(sa.String(150), nullable=False)

    def __repr__(self) -> str:
        return f"VariedadSemilla(id={self.id!r}, name={self.name!r})"
