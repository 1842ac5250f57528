"""SQLAlchemy declarative base and shared mixins.

Every table gets `id`, `created_at`, and `updated_at` via the TimestampMixin.
Person tables embed their postal address through EnderecoMixin (one address
per person, stored inline rather than in a separate table).
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, String, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

if TYPE_CHECKING:
    from src.integrations.viacep.schemas import Endereco


class Base(DeclarativeBase):
    """Declarative base for all ORM models."""

    pass


class TimestampMixin:
    """Mixin adding id (UUID), created_at, and updated_at to every model.

    Uses server-side defaults so timestamps are set by PostgreSQL.
    """

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        server_default=func.gen_random_uuid(),
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )


class EnderecoMixin:
    """Inline address columns, mirrored by the Endereco value object."""

    cep: Mapped[str] = mapped_column(String(9), nullable=False)
    logradouro: Mapped[str] = mapped_column(String(200), nullable=False, default="")
    bairro: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    cidade: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    estado: Mapped[str] = mapped_column(String(2), nullable=False, default="")
    numero: Mapped[str] = mapped_column(String(10), nullable=False, default="")
    complemento: Mapped[str] = mapped_column(String(100), nullable=False, default="")

    @property
    def endereco(self) -> Endereco:
        # Deferred: viacep.schemas imports src.models.enums, which loads this package
        from src.integrations.viacep.schemas import Endereco

        return Endereco(
            cep=self.cep,
            logradouro=self.logradouro,
            bairro=self.bairro,
            cidade=self.cidade,
            estado=self.estado,
            numero=self.numero,
            complemento=self.complemento,
        )

    def set_endereco(self, endereco: Endereco) -> None:
        """Replace every address column from an Endereco value."""
        self.cep = endereco.cep
        self.logradouro = endereco.logradouro
        self.bairro = endereco.bairro
        self.cidade = endereco.cidade
        self.estado = endereco.estado
        self.numero = endereco.numero
        self.complemento = endereco.complemento
