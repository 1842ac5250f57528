"""Brazilian tax ID (CPF / CNPJ) validation and formatting.

Pure Python — no I/O, no DB. Every function is stateless and safe to call
from any number of concurrent requests.

CPF format:  NNN.NNN.NNN-DD        (11 digits, individuals)
CNPJ format: NN.NNN.NNN/NNNN-DD    (14 digits, organizations)

Both schemes end with two check digits computed by a weighted modulo-11
sum over the preceding digits: remainder r = sum % 11, digit = 0 if r < 2
else 11 - r. The second check digit covers the first one as well.

Reference: Receita Federal, IN RFB 1.548/2015 (CPF) and 2.119/2022 (CNPJ).
"""

from __future__ import annotations

import re
import unicodedata

from src.exceptions import InvalidInputError
from src.models.enums import TipoDocumento, TipoPessoa
from src.schemas.documento import DocumentoResult

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

_NON_DIGITS = re.compile(r"[^0-9]")

CPF_LENGTH = 11
CNPJ_LENGTH = 14

CPF_WEIGHTS_FIRST = (10, 9, 8, 7, 6, 5, 4, 3, 2)
CPF_WEIGHTS_SECOND = (11, 10, 9, 8, 7, 6, 5, 4, 3, 2)

CNPJ_WEIGHTS_FIRST = (5, 4, 3, 2, 9, 8, 7, 6, 5, 4, 3, 2)
CNPJ_WEIGHTS_SECOND = (6, 5, 4, 3, 2, 9, 8, 7, 6, 5, 4, 3, 2)

_TIPO_PESSOA_ALIASES: dict[str, TipoPessoa] = {
    "F": TipoPessoa.FISICA,
    "PF": TipoPessoa.FISICA,
    "FISICA": TipoPessoa.FISICA,
    "PESSOAFISICA": TipoPessoa.FISICA,
    "J": TipoPessoa.JURIDICA,
    "PJ": TipoPessoa.JURIDICA,
    "JURIDICA": TipoPessoa.JURIDICA,
    "PESSOAJURIDICA": TipoPessoa.JURIDICA,
}


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _check_digit(digits: str, weights: tuple[int, ...]) -> int:
    """Weighted modulo-11 check digit over the leading ``len(weights)`` digits."""
    total = sum(int(d) * w for d, w in zip(digits, weights))
    remainder = total % 11
    return 0 if remainder < 2 else 11 - remainder


def _has_valid_check_digits(
    digits: str,
    weights_first: tuple[int, ...],
    weights_second: tuple[int, ...],
) -> bool:
    # Repeated sequences (000..., 111...) satisfy the arithmetic for some digits
    if len(set(digits)) == 1:
        return False
    first = _check_digit(digits, weights_first)
    second = _check_digit(digits[: len(weights_first)] + str(first), weights_second)
    return digits[-2:] == f"{first}{second}"


def _strip_diacritics(value: str) -> str:
    decomposed = unicodedata.normalize("NFD", value)
    return "".join(ch for ch in decomposed if unicodedata.category(ch) != "Mn")


def mask_documento(value: str | None) -> str:
    """Keep the first 3 digits for log lines, mask the rest."""
    digits = normalize_digits(value)
    return digits[:3] + "X" * max(len(digits) - 3, 0)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def normalize_digits(value: str | None) -> str:
    """Strip every non-digit character. Blank or None → empty string."""
    if value is None or not value.strip():
        return ""
    return _NON_DIGITS.sub("", value)


def is_valid_cpf(cpf: str | None) -> bool:
    """Validate a CPF (any punctuation accepted) by its two check digits."""
    digits = normalize_digits(cpf)
    if len(digits) != CPF_LENGTH:
        return False
    return _has_valid_check_digits(digits, CPF_WEIGHTS_FIRST, CPF_WEIGHTS_SECOND)


def is_valid_cnpj(cnpj: str | None) -> bool:
    """Validate a CNPJ (any punctuation accepted) by its two check digits."""
    digits = normalize_digits(cnpj)
    if len(digits) != CNPJ_LENGTH:
        return False
    return _has_valid_check_digits(digits, CNPJ_WEIGHTS_FIRST, CNPJ_WEIGHTS_SECOND)


def format_cpf(cpf: str | None) -> str:
    """Format as NNN.NNN.NNN-NN; wrong-length input is returned normalized, unformatted."""
    d = normalize_digits(cpf)
    if len(d) != CPF_LENGTH:
        return d
    return f"{d[:3]}.{d[3:6]}.{d[6:9]}-{d[9:]}"


def format_cnpj(cnpj: str | None) -> str:
    """Format as NN.NNN.NNN/NNNN-NN; wrong-length input is returned normalized, unformatted."""
    d = normalize_digits(cnpj)
    if len(d) != CNPJ_LENGTH:
        return d
    return f"{d[:2]}.{d[2:5]}.{d[5:8]}/{d[8:12]}-{d[12:]}"


def normalize_tipo_pessoa(tipo: str | None) -> TipoPessoa:
    """Map free-form person-type input ("pf", "Pessoa Física", "J", ...) to TipoPessoa.

    Raises:
        InvalidInputError: blank or unknown value.
    """
    if tipo is None or not tipo.strip():
        raise InvalidInputError("Tipo de pessoa não pode ser vazio.")

    key = _strip_diacritics("".join(tipo.split()).upper())
    try:
        return _TIPO_PESSOA_ALIASES[key]
    except KeyError:
        raise InvalidInputError(
            f"Tipo de pessoa desconhecido: '{tipo}'. Valores válidos: 'F' ou 'J'."
        ) from None


def is_valid_tipo_pessoa(tipo: str | None) -> bool:
    try:
        normalize_tipo_pessoa(tipo)
    except InvalidInputError:
        return False
    return True


def validate_documento(documento: str | None) -> DocumentoResult:
    """Detect CPF vs CNPJ by digit count and validate it.

    Args:
        documento: Raw document, with or without punctuation.

    Returns:
        DocumentoResult with validity, kind, normalized and formatted forms.
    """
    digits = normalize_digits(documento)

    if len(digits) == CPF_LENGTH:
        valid = is_valid_cpf(digits)
        return DocumentoResult(
            valid=valid,
            normalized=digits,
            formatted=format_cpf(digits),
            tipo_documento=TipoDocumento.CPF,
            tipo_pessoa=TipoPessoa.FISICA,
            error=None if valid else "CPF inválido.",
        )

    if len(digits) == CNPJ_LENGTH:
        valid = is_valid_cnpj(digits)
        return DocumentoResult(
            valid=valid,
            normalized=digits,
            formatted=format_cnpj(digits),
            tipo_documento=TipoDocumento.CNPJ,
            tipo_pessoa=TipoPessoa.JURIDICA,
            error=None if valid else "CNPJ inválido.",
        )

    return DocumentoResult(
        valid=False,
        normalized=digits,
        formatted=digits,
        error="Documento deve conter 11 (CPF) ou 14 (CNPJ) dígitos.",
    )
