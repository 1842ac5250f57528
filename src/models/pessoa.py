"""Person models — individuals (CPF) and organizations (CNPJ).

Documents are stored formatted (``NNN.NNN.NNN-NN`` / ``NN.NNN.NNN/NNNN-NN``)
and are unique per table. A person's document never changes after creation.
"""

from __future__ import annotations

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from src.models.base import Base, EnderecoMixin, TimestampMixin
from src.models.enums import TipoPessoa


class PessoaFisica(TimestampMixin, EnderecoMixin, Base):
    """Individual registered by CPF."""

    __tablename__ = "pessoas_fisicas"

    nome: Mapped[str] = mapped_column(String(100), nullable=False)
    cpf: Mapped[str] = mapped_column(String(14), nullable=False, unique=True, index=True)
    tipo: Mapped[str] = mapped_column(String(1), nullable=False, default=TipoPessoa.FISICA.value)

    def __repr__(self) -> str:
        return f"<PessoaFisica id={self.id} cpf={self.cpf[:3]}...>"


class PessoaJuridica(TimestampMixin, EnderecoMixin, Base):
    """Organization registered by CNPJ."""

    __tablename__ = "pessoas_juridicas"

    razao_social: Mapped[str] = mapped_column(String(150), nullable=False)
    nome_fantasia: Mapped[str | None] = mapped_column(String(150))
    cnpj: Mapped[str] = mapped_column(String(18), nullable=False, unique=True, index=True)
    tipo: Mapped[str] = mapped_column(String(1), nullable=False, default=TipoPessoa.JURIDICA.value)

    def __repr__(self) -> str:
        return f"<PessoaJuridica id={self.id} cnpj={self.cnpj[:2]}...>"
