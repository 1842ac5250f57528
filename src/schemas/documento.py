"""Pydantic schemas for document (CPF/CNPJ) validation results."""

from __future__ import annotations

from pydantic import BaseModel

from src.models.enums import TipoDocumento, TipoPessoa


class DocumentoResult(BaseModel):
    """Result of validating a CPF or CNPJ of unknown kind."""

    valid: bool
    normalized: str
    formatted: str
    tipo_documento: TipoDocumento | None = None   # None when the length matches neither scheme
    tipo_pessoa: TipoPessoa | None = None
    error: str | None = None
