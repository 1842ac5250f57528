"""Pydantic schemas for the ViaCEP postal-code lookup."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from src.exceptions import AddressNotFoundError, LookupUnavailableError
from src.models.enums import LookupStatus


class ViaCepPayload(BaseModel):
    """Successful ViaCEP JSON body. Unknown fields (ibge, gia, ddd, siafi) are ignored."""

    model_config = ConfigDict(extra="ignore")

    cep: str
    logradouro: str = ""
    complemento: str = ""
    bairro: str = ""
    localidade: str
    uf: str = Field(min_length=2, max_length=2)


class Endereco(BaseModel):
    """Postal address value. Rebuilt, never mutated."""

    model_config = ConfigDict(frozen=True)

    cep: str
    logradouro: str = ""
    bairro: str = ""
    cidade: str = ""
    estado: str = ""
    numero: str = ""        # never returned by ViaCEP
    complemento: str = ""   # never returned by ViaCEP

    @classmethod
    def from_payload(cls, payload: ViaCepPayload) -> Endereco:
        return cls(
            cep=payload.cep,
            logradouro=payload.logradouro,
            bairro=payload.bairro,
            cidade=payload.localidade,
            estado=payload.uf,
        )

    def with_numero_complemento(self, numero: str | None, complemento: str | None) -> Endereco:
        """Copy with caller-supplied house number / complement; None keeps the current value."""
        return self.model_copy(update={
            "numero": self.numero if numero is None else numero,
            "complemento": self.complemento if complemento is None else complemento,
        })


class AddressLookupResult(BaseModel):
    """Outcome of AddressLookupCache.resolve — found, not found, or unavailable."""

    status: LookupStatus
    cep: str
    address: Endereco | None = None
    error: str | None = None

    @property
    def found(self) -> bool:
        return self.status == LookupStatus.FOUND

    def unwrap(self) -> Endereco:
        """Return the address or raise the matching domain error."""
        if self.status == LookupStatus.FOUND and self.address is not None:
            return self.address
        if self.status == LookupStatus.NOT_FOUND:
            raise AddressNotFoundError(self.cep)
        raise LookupUnavailableError(self.error or "Serviço de CEP indisponível.")
