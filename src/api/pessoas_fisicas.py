"""Pessoa física HTTP endpoints — /api/v1/pessoas/fisicas.

Domain errors raised by the service are mapped to HTTP statuses by the
exception handlers registered in src.api.errors.
"""
# ruff: noqa: B008  — Depends() in function defaults is standard FastAPI

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.dependencies import get_pessoa_fisica_service
from src.config import settings
from src.db.engine import get_session
from src.registry.pessoa_fisica import PessoaFisicaService
from src.schemas.pessoa import (
    CreatePessoaFisicaRequest,
    PessoaFisicaResponse,
    UpdatePessoaFisicaRequest,
)

router = APIRouter(prefix=f"{settings.api_prefix}/pessoas/fisicas", tags=["pessoas-fisicas"])


@router.post("", response_model=PessoaFisicaResponse, status_code=status.HTTP_201_CREATED)
async def create_pessoa_fisica(
    body: CreatePessoaFisicaRequest,
    response: Response,
    db: AsyncSession = Depends(get_session),
    service: PessoaFisicaService = Depends(get_pessoa_fisica_service),
) -> PessoaFisicaResponse:
    """Register an individual; the address is filled from the CEP."""
    pessoa = await service.create(db, body)
    response.headers["Location"] = f"{router.prefix}/{pessoa.id}"
    return PessoaFisicaResponse.model_validate(pessoa)


@router.get("", response_model=list[PessoaFisicaResponse])
async def list_pessoas_fisicas(
    offset: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    db: AsyncSession = Depends(get_session),
    service: PessoaFisicaService = Depends(get_pessoa_fisica_service),
) -> list[PessoaFisicaResponse]:
    pessoas = await service.list_all(db, offset=offset, limit=limit)
    return [PessoaFisicaResponse.model_validate(p) for p in pessoas]


@router.get("/cpf/{cpf}", response_model=PessoaFisicaResponse)
async def get_pessoa_fisica_by_cpf(
    cpf: str,
    db: AsyncSession = Depends(get_session),
    service: PessoaFisicaService = Depends(get_pessoa_fisica_service),
) -> PessoaFisicaResponse:
    """Lookup by CPF, digits only (punctuation is stripped)."""
    return PessoaFisicaResponse.model_validate(await service.get_by_cpf(db, cpf))


@router.get("/{pessoa_id}", response_model=PessoaFisicaResponse)
async def get_pessoa_fisica(
    pessoa_id: uuid.UUID,
    db: AsyncSession = Depends(get_session),
    service: PessoaFisicaService = Depends(get_pessoa_fisica_service),
) -> PessoaFisicaResponse:
    return PessoaFisicaResponse.model_validate(await service.get_by_id(db, pessoa_id))


@router.put("/{pessoa_id}", response_model=PessoaFisicaResponse)
async def update_pessoa_fisica(
    pessoa_id: uuid.UUID,
    body: UpdatePessoaFisicaRequest,
    db: AsyncSession = Depends(get_session),
    service: PessoaFisicaService = Depends(get_pessoa_fisica_service),
) -> PessoaFisicaResponse:
    """Partial update; the CPF cannot change."""
    return PessoaFisicaResponse.model_validate(await service.update(db, pessoa_id, body))


@router.delete("/{pessoa_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_pessoa_fisica(
    pessoa_id: uuid.UUID,
    db: AsyncSession = Depends(get_session),
    service: PessoaFisicaService = Depends(get_pessoa_fisica_service),
) -> Response:
    await service.delete(db, pessoa_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
