"""Initial schema — person tables and audit log.

Revision ID: 001
Revises: None
Create Date: 2025-09-15
"""
from __future__ import annotations

from typing import Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, tuple[str, ...], None] = None
depends_on: Union[str, tuple[str, ...], None] = None


def _timestamp_columns() -> list[sa.Column]:
    return [
        sa.Column("id", postgresql.UUID(as_uuid=True), server_default=sa.text("gen_random_uuid()"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
    ]


def _endereco_columns() -> list[sa.Column]:
    return [
        sa.Column("cep", sa.String(9), nullable=False),
        sa.Column("logradouro", sa.String(200), nullable=False),
        sa.Column("bairro", sa.String(100), nullable=False),
        sa.Column("cidade", sa.String(100), nullable=False),
        sa.Column("estado", sa.String(2), nullable=False),
        sa.Column("numero", sa.String(10), nullable=False),
        sa.Column("complemento", sa.String(100), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "pessoas_fisicas",
        sa.Column("nome", sa.String(100), nullable=False),
        sa.Column("cpf", sa.String(14), nullable=False, comment="Formatted NNN.NNN.NNN-NN"),
        sa.Column("tipo", sa.String(1), nullable=False),
        *_endereco_columns(),
        *_timestamp_columns(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_pessoas_fisicas_cpf", "pessoas_fisicas", ["cpf"], unique=True)

    op.create_table(
        "pessoas_juridicas",
        sa.Column("razao_social", sa.String(150), nullable=False),
        sa.Column("nome_fantasia", sa.String(150)),
        sa.Column("cnpj", sa.String(18), nullable=False, comment="Formatted NN.NNN.NNN/NNNN-NN"),
        sa.Column("tipo", sa.String(1), nullable=False),
        *_endereco_columns(),
        *_timestamp_columns(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_pessoas_juridicas_cnpj", "pessoas_juridicas", ["cnpj"], unique=True)

    op.create_table(
        "audit_log",
        sa.Column("event_type", sa.String(100), nullable=False),
        sa.Column("entity_id", postgresql.UUID(as_uuid=True)),
        sa.Column("actor_id", sa.String(100), comment="API client or 'system'"),
        sa.Column("source_module", sa.String(100)),
        sa.Column("data", postgresql.JSONB(astext_type=sa.Text())),
        *_timestamp_columns(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_audit_log_event_type", "audit_log", ["event_type"])
    op.create_index("ix_audit_log_entity_id", "audit_log", ["entity_id"])


def downgrade() -> None:
    op.drop_index("ix_audit_log_entity_id", table_name="audit_log")
    op.drop_index("ix_audit_log_event_type", table_name="audit_log")
    op.drop_table("audit_log")
    op.drop_index("ix_pessoas_juridicas_cnpj", table_name="pessoas_juridicas")
    op.drop_table("pessoas_juridicas")
    op.drop_index("ix_pessoas_fisicas_cpf", table_name="pessoas_fisicas")
    op.drop_table("pessoas_fisicas")
