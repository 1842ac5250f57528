"""CEP lookup endpoint — /api/v1/cep/{cep}.

Exposes the cached ViaCEP lookup directly so clients can preview the
address before registering a person.
"""
# ruff: noqa: B008  — Depends() in function defaults is standard FastAPI

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status

from src.api.dependencies import get_address_lookup
from src.config import settings
from src.integrations.viacep.schemas import Endereco
from src.integrations.viacep.service import AddressLookupCache
from src.models.enums import LookupStatus

router = APIRouter(prefix=f"{settings.api_prefix}/cep", tags=["cep"])


@router.get("/{cep}", response_model=Endereco)
async def lookup_cep(
    cep: str,
    lookup: AddressLookupCache = Depends(get_address_lookup),
) -> Endereco:
    """Resolve a CEP; 404 when unknown, 503 when ViaCEP is unreachable."""
    result = await lookup.resolve(cep)
    if result.status == LookupStatus.NOT_FOUND:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="CEP não encontrado.")
    return result.unwrap()
