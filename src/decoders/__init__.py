"""Deterministic document decoders — CPF and CNPJ validation/formatting."""

from src.decoders.documento import (
    format_cnpj,
    format_cpf,
    is_valid_cnpj,
    is_valid_cpf,
    normalize_digits,
    validate_documento,
)

__all__ = [
    "format_cnpj",
    "format_cpf",
    "is_valid_cnpj",
    "is_valid_cpf",
    "normalize_digits",
    "validate_documento",
]
