"""create monitoring entities, measurements and alerts tables"""
from __future__ import annotations

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision = "202603010001"
down_revision: str | None = None
branch_labels: tuple[str, ...] | None = None
depends_on: tuple[str, ...] | None = None


def _uuid_pk() -> sa.Column:
    return sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False)


def _nutriente(prefijo: str) -> list[sa.Column]:
    return [
        sa.Column(f"{prefijo}_resultado", sa.Numeric(10, 2), nullable=True),
        sa.Column(f"{prefijo}_objetivo", sa.Numeric(10, 2), nullable=True),
        sa.Column(f"{prefijo}_fuente_recomendada", sa.String(length=100), nullable=True),
        sa.Column(f"{prefijo}_kg_ha", sa.Numeric(10, 2), nullable=True),
        sa.Column(f"{prefijo}_kg_total", sa.Numeric(12, 2), nullable=True),
    ]


def upgrade() -> None:
    op.create_table(
        "premises",
        _uuid_pk(),
        sa.Column("firm_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("name", sa.String(length=150), nullable=False),
    )
    op.create_index("ix_premises_firm_id", "premises", ["firm_id"])

    op.create_table(
        "lots",
        _uuid_pk(),
        sa.Column("firm_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column(
            "premise_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("premises.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("name", sa.String(length=150), nullable=False),
        sa.Column("uso_suelo", sa.String(length=30), nullable=True),
        sa.Column("activo", sa.Boolean(), nullable=False, server_default=sa.text("true")),
    )
    op.create_index("ix_lots_firm_id", "lots", ["firm_id"])
    op.create_index("ix_lots_premise_id", "lots", ["premise_id"])

    op.create_table(
        "seed_varieties",
        _uuid_pk(),
        sa.Column("firm_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("name", sa.String(length=150), nullable=False),
    )
    op.create_index("ix_seed_varieties_firm_id", "seed_varieties", ["firm_id"])

    op.create_table(
        "analisis_suelo",
        _uuid_pk(),
        sa.Column("firm_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column(
            "lot_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("lots.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("fecha", sa.Date(), nullable=False),
        sa.Column("ph", sa.Numeric(4, 2), nullable=True),
        sa.Column("mo", sa.Numeric(5, 2), nullable=True),
        sa.Column("aplicado", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        *_nutriente("p"),
        *_nutriente("k"),
        *_nutriente("n"),
        *_nutriente("s"),
    )
    op.create_index("ix_analisis_suelo_lot_id", "analisis_suelo", ["lot_id"])

    op.create_table(
        "analisis_semillas",
        _uuid_pk(),
        sa.Column("firm_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column(
            "seed_variety_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("seed_varieties.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("fecha", sa.Date(), nullable=False),
        sa.Column("germinacion", sa.Numeric(5, 2), nullable=True),
        sa.Column("pureza", sa.Numeric(5, 2), nullable=True),
        sa.Column("humedad", sa.Numeric(5, 2), nullable=True),
        sa.Column("tetrazolio", sa.Numeric(5, 2), nullable=True),
    )
    op.create_index("ix_analisis_semillas_seed_variety_id", "analisis_semillas", ["seed_variety_id"])

    op.create_table(
        "lluvias",
        _uuid_pk(),
        sa.Column(
            "premise_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("premises.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("fecha", sa.Date(), nullable=False),
        sa.Column("mm", sa.Numeric(7, 2), nullable=True),
    )
    op.create_index("ix_lluvias_premise_fecha", "lluvias", ["premise_id", "fecha"])

    op.create_table(
        "mediciones_pastura",
        _uuid_pk(),
        sa.Column(
            "lot_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("lots.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("fecha", sa.Date(), nullable=False),
        sa.Column("altura_cm", sa.Numeric(6, 2), nullable=True),
        sa.Column("remanente_objetivo_cm", sa.Numeric(6, 2), nullable=True),
    )
    op.create_index("ix_mediciones_pastura_lot_id", "mediciones_pastura", ["lot_id"])

    op.create_table(
        "alerts",
        _uuid_pk(),
        sa.Column("firm_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("premise_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("entidad_tipo", sa.String(length=20), nullable=False),
        sa.Column("entidad_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("tipo", sa.String(length=50), nullable=False),
        sa.Column("regla_aplicada", sa.String(length=50), nullable=False),
        sa.Column("prioridad", sa.String(length=10), nullable=False),
        sa.Column("estado", sa.String(length=20), nullable=False, server_default=sa.text("'pendiente'")),
        sa.Column("origen", sa.String(length=20), nullable=False, server_default=sa.text("'automatica'")),
        sa.Column("titulo", sa.String(length=255), nullable=False),
        sa.Column("descripcion", sa.Text(), nullable=False),
        sa.Column("metadata", postgresql.JSONB(), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
        sa.Column("resolved_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("resolved_notes", sa.Text(), nullable=True),
        sa.CheckConstraint(
            "estado IN ('pendiente', 'resuelta', 'descartada')", name="ck_alerts_estado"
        ),
        sa.CheckConstraint("prioridad IN ('baja', 'media', 'alta')", name="ck_alerts_prioridad"),
    )
    op.create_index("ix_alerts_firm_estado", "alerts", ["firm_id", "estado"])
    op.create_index(
        "uq_alerts_pendiente_entidad_regla",
        "alerts",
        ["entidad_tipo", "entidad_id", "regla_aplicada"],
        unique=True,
        postgresql_where=sa.text("estado = 'pendiente'"),
    )


def downgrade() -> None:
    op.drop_index("uq_alerts_pendiente_entidad_regla", table_name="alerts")
    op.drop_index("ix_alerts_firm_estado", table_name="alerts")
    op.drop_table("alerts")
    op.drop_index("ix_mediciones_pastura_lot_id", table_name="mediciones_pastura")
    op.drop_table("mediciones_pastura")
    op.drop_index("ix_lluvias_premise_fecha", table_name="lluvias")
    op.drop_table("lluvias")
    op.drop_index("ix_analisis_semillas_seed_variety_id", table_name="analisis_semillas")
    op.drop_table("analisis_semillas")
    op.drop_index("ix_analisis_suelo_lot_id", table_name="analisis_suelo")
    op.drop_table("analisis_suelo")
    op.drop_index("ix_seed_varieties_firm_id", table_name="seed_varieties")
    op.drop_table("seed_varieties")
    op.drop_index("ix_lots_premise_id", table_name="lots")
    op.drop_index("ix_lots_firm_id", table_name="lots")
    op.drop_table("lots")
    op.drop_index("ix_premises_firm_id", table_name="premises")
    op.drop_table("premises")
