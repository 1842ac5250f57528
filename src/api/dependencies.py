"""FastAPI dependency providers for the registry services.

Tests swap these out via ``app.dependency_overrides``.
"""

from __future__ import annotations

from functools import lru_cache

from src.integrations.viacep.service import AddressLookupCache, address_lookup
from src.registry.pessoa_fisica import PessoaFisicaService
from src.registry.pessoa_juridica import PessoaJuridicaService


def get_address_lookup() -> AddressLookupCache:
    return address_lookup


@lru_cache(maxsize=1)
def get_pessoa_fisica_service() -> PessoaFisicaService:
    return PessoaFisicaService(get_address_lookup())


@lru_cache(maxsize=1)
def get_pessoa_juridica_service() -> PessoaJuridicaService:
    return PessoaJuridicaService(get_address_lookup())
