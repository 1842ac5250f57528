"""Request/response schemas for the person registry API.

Field limits follow the registry's column sizes. Documents and CEPs are
accepted with or without punctuation; validation happens in the services.
"""

from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from src.integrations.viacep.schemas import Endereco

# ── Commands (request bodies) ────────────────────────────────────────


class _Command(BaseModel):
    """Request body base; surrounding whitespace is stripped before length checks."""

    model_config = ConfigDict(str_strip_whitespace=True)


class CreatePessoaFisicaRequest(_Command):
    nome: str = Field(min_length=1, max_length=100)
    cpf: str = Field(min_length=1, max_length=14)
    cep: str = Field(min_length=1, max_length=9)
    numero: str = Field(default="", max_length=10)
    complemento: str = Field(default="", max_length=100)


class UpdatePessoaFisicaRequest(_Command):
    """Partial update — omitted fields keep their stored value."""

    nome: str | None = Field(default=None, min_length=1, max_length=100)
    cpf: str | None = Field(default=None, max_length=14)  # must match the stored CPF if sent
    cep: str | None = Field(default=None, max_length=9)
    numero: str | None = Field(default=None, max_length=10)
    complemento: str | None = Field(default=None, max_length=100)


class CreatePessoaJuridicaRequest(_Command):
    razao_social: str = Field(min_length=1, max_length=150)
    nome_fantasia: str | None = Field(default=None, max_length=150)
    cnpj: str = Field(min_length=1, max_length=18)
    cep: str = Field(min_length=1, max_length=9)
    numero: str = Field(default="", max_length=10)
    complemento: str = Field(default="", max_length=100)


class UpdatePessoaJuridicaRequest(_Command):
    """Partial update — omitted fields keep their stored value."""

    razao_social: str | None = Field(default=None, min_length=1, max_length=150)
    nome_fantasia: str | None = Field(default=None, max_length=150)
    cnpj: str | None = Field(default=None, max_length=18)  # must match the stored CNPJ if sent
    cep: str | None = Field(default=None, max_length=9)
    numero: str | None = Field(default=None, max_length=10)
    complemento: str | None = Field(default=None, max_length=100)


# ── Responses ────────────────────────────────────────────────────────


class PessoaFisicaResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    nome: str
    cpf: str
    tipo: str
    endereco: Endereco
    created_at: datetime | None = None


class PessoaJuridicaResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    razao_social: str
    nome_fantasia: str | None = None
    cnpj: str
    tipo: str
    endereco: Endereco
    created_at: datetime | None = None
