"""Domain error taxonomy.

Services raise these; the exception handlers in src.api.errors map each
family to an HTTP status. Messages are user-facing (Portuguese).
"""

from __future__ import annotations


class DomainError(Exception):
    """Base class for every error the registry raises on purpose."""


class InvalidInputError(DomainError):
    """Malformed input: bad CEP, bad document, unknown person type."""


class DocumentoInvalidoError(InvalidInputError):
    """CPF/CNPJ failed checksum validation."""


class DocumentoImutavelError(InvalidInputError):
    """An update tried to change the document of an existing person."""


class AddressNotFoundError(InvalidInputError):
    """ViaCEP has no address for a well-formed CEP."""

    def __init__(self, cep: str) -> None:
        super().__init__("Endereço não encontrado para o CEP informado.")
        self.cep = cep


class NotFoundError(DomainError):
    """Requested record does not exist."""


class PessoaNotFoundError(NotFoundError):
    pass


class PessoaJaExisteError(DomainError):
    """A person with this document is already registered."""

    def __init__(self, documento: str) -> None:
        super().__init__(f"Pessoa com documento '{documento}' já existe.")
        self.documento = documento


class LookupUnavailableError(DomainError):
    """The postal lookup service could not be reached or failed transport-side."""
