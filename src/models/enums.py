"""Domain enums used across SQLAlchemy models and Pydantic schemas.

All enums use str mixin for JSON serialization.
"""

from __future__ import annotations

from enum import Enum


class TipoPessoa(str, Enum):
    """Person kind — individual (CPF) or organization (CNPJ)."""

    FISICA = "F"
    JURIDICA = "J"


class TipoDocumento(str, Enum):
    """National tax ID scheme."""

    CPF = "cpf"
    CNPJ = "cnpj"


class LookupStatus(str, Enum):
    """Outcome of an address lookup."""

    FOUND = "found"
    NOT_FOUND = "not_found"
    UNAVAILABLE = "unavailable"
