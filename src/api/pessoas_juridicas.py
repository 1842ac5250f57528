"""Pessoa jurídica HTTP endpoints — /api/v1/pessoas/juridicas.

Domain errors raised by the service are mapped to HTTP statuses by the
exception handlers registered in src.api.errors.
"""
# ruff: noqa: B008  — Depends() in function defaults is standard FastAPI

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.dependencies import get_pessoa_juridica_service
from src.config import settings
from src.db.engine import get_session
from src.registry.pessoa_juridica import PessoaJuridicaService
from src.schemas.pessoa import (
    CreatePessoaJuridicaRequest,
    PessoaJuridicaResponse,
    UpdatePessoaJuridicaRequest,
)

router = APIRouter(prefix=f"{settings.api_prefix}/pessoas/juridicas", tags=["pessoas-juridicas"])


@router.post("", response_model=PessoaJuridicaResponse, status_code=status.HTTP_201_CREATED)
async def create_pessoa_juridica(
    body: CreatePessoaJuridicaRequest,
    response: Response,
    db: AsyncSession = Depends(get_session),
    service: PessoaJuridicaService = Depends(get_pessoa_juridica_service),
) -> PessoaJuridicaResponse:
    """Register an organization; the address is filled from the CEP."""
    pessoa = await service.create(db, body)
    response.headers["Location"] = f"{router.prefix}/{pessoa.id}"
    return PessoaJuridicaResponse.model_validate(pessoa)


@router.get("", response_model=list[PessoaJuridicaResponse])
async def list_pessoas_juridicas(
    offset: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    db: AsyncSession = Depends(get_session),
    service: PessoaJuridicaService = Depends(get_pessoa_juridica_service),
) -> list[PessoaJuridicaResponse]:
    pessoas = await service.list_all(db, offset=offset, limit=limit)
    return [PessoaJuridicaResponse.model_validate(p) for p in pessoas]


@router.get("/cnpj/{cnpj}", response_model=PessoaJuridicaResponse)
async def get_pessoa_juridica_by_cnpj(
    cnpj: str,
    db: AsyncSession = Depends(get_session),
    service: PessoaJuridicaService = Depends(get_pessoa_juridica_service),
) -> PessoaJuridicaResponse:
    """Lookup by CNPJ, digits only (punctuation is stripped)."""
    return PessoaJuridicaResponse.model_validate(await service.get_by_cnpj(db, cnpj))


@router.get("/{pessoa_id}", response_model=PessoaJuridicaResponse)
async def get_pessoa_juridica(
    pessoa_id: uuid.UUID,
    db: AsyncSession = Depends(get_session),
    service: PessoaJuridicaService = Depends(get_pessoa_juridica_service),
) -> PessoaJuridicaResponse:
    return PessoaJuridicaResponse.model_validate(await service.get_by_id(db, pessoa_id))


@router.put("/{pessoa_id}", response_model=PessoaJuridicaResponse)
async def update_pessoa_juridica(
    pessoa_id: uuid.UUID,
    body: UpdatePessoaJuridicaRequest,
    db: AsyncSession = Depends(get_session),
    service: PessoaJuridicaService = Depends(get_pessoa_juridica_service),
) -> PessoaJuridicaResponse:
    """Partial update; the CNPJ cannot change."""
    return PessoaJuridicaResponse.model_validate(await service.update(db, pessoa_id, body))


@router.delete("/{pessoa_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_pessoa_juridica(
    pessoa_id: uuid.UUID,
    db: AsyncSession = Depends(get_session),
    service: PessoaJuridicaService = Depends(get_pessoa_juridica_service),
) -> Response:
    await service.delete(db, pessoa_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
