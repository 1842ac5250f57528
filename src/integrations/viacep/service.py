"""Address lookup service — normalizes a CEP, consults the cache, falls back to ViaCEP.

Per-CEP lifecycle: absent → fresh (successful fetch) → expired (TTL elapsed,
reads as absent) → fresh again on the next fetch. Not-found and unavailable
outcomes are never cached.
"""

from __future__ import annotations

import logging
import re

from pydantic import ValidationError

from src.config import settings
from src.exceptions import InvalidInputError, LookupUnavailableError
from src.integrations.viacep.cache import CacheStore, InMemoryTTLCache, RedisCacheStore
from src.integrations.viacep.client import ViaCepClient, viacep_client
from src.integrations.viacep.schemas import AddressLookupResult, Endereco
from src.models.enums import LookupStatus

logger = logging.getLogger(__name__)

CEP_LENGTH = 8

_CACHE_KEY_PREFIX = "viacep:"
_NON_DIGITS = re.compile(r"[^0-9]")


def _cache_key(cep: str) -> str:
    return f"{_CACHE_KEY_PREFIX}{cep}"


def normalize_cep(cep: str | None) -> str:
    """Return the 8-digit CEP or raise InvalidInputError."""
    if cep is None or not cep.strip():
        raise InvalidInputError("CEP não pode ser nulo ou vazio.")
    digits = _NON_DIGITS.sub("", cep)
    if len(digits) != CEP_LENGTH:
        raise InvalidInputError("CEP deve conter 8 dígitos.")
    return digits


class AddressLookupCache:
    """Resolve CEPs to addresses with a time-bounded cache in front of ViaCEP.

    Concurrent misses on the same CEP may each call ViaCEP; the lookup is
    idempotent so the duplicate fetch only costs latency.
    """

    def __init__(
        self,
        client: ViaCepClient,
        cache: CacheStore,
        ttl_seconds: int | None = None,
    ) -> None:
        self._client = client
        self._cache = cache
        self._ttl = settings.viacep.viacep_cache_ttl if ttl_seconds is None else ttl_seconds

    async def resolve(self, cep: str | None) -> AddressLookupResult:
        """Resolve a CEP (any punctuation) to an address.

        Steps:
        1. Normalize to 8 digits (InvalidInputError before any I/O)
        2. Cache hit → return it, no external call
        3. Miss → ViaCEP; not found → NOT_FOUND, nothing cached
        4. Found → cache with TTL and return
        5. Transport failure → UNAVAILABLE, nothing cached
        """
        normalized = normalize_cep(cep)
        key = _cache_key(normalized)

        cached_raw = await self._cache.get(key)
        if cached_raw:
            try:
                address = Endereco.model_validate_json(cached_raw)
            except ValidationError:
                logger.warning("Failed to deserialize cached address for CEP %s, re-fetching", normalized)
            else:
                logger.info("Endereço para CEP %s retornado do cache", normalized)
                return AddressLookupResult(status=LookupStatus.FOUND, cep=normalized, address=address)

        try:
            payload = await self._client.fetch(normalized)
        except LookupUnavailableError as exc:
            return AddressLookupResult(status=LookupStatus.UNAVAILABLE, cep=normalized, error=str(exc))

        if payload is None:
            logger.warning("CEP %s não encontrado na API ViaCEP", normalized)
            return AddressLookupResult(status=LookupStatus.NOT_FOUND, cep=normalized)

        address = Endereco.from_payload(payload)
        await self._cache.set(key, address.model_dump_json(), self._ttl)
        logger.info("Endereço para CEP %s obtido da API e armazenado em cache", normalized)

        return AddressLookupResult(status=LookupStatus.FOUND, cep=normalized, address=address)


def build_address_lookup() -> AddressLookupCache:
    """Wire the lookup with the cache backend selected in settings."""
    store: CacheStore
    if settings.viacep.viacep_cache_backend == "redis":
        from src.db.engine import redis_client

        store = RedisCacheStore(redis_client)
    else:
        store = InMemoryTTLCache()
    return AddressLookupCache(viacep_client, store)


# Module-level singleton
address_lookup = build_address_lookup()
