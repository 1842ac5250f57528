"""Person persistence queries.

Plain async functions over an AsyncSession; the caller owns the
transaction (``get_session`` commits at the end of the request).
Documents are always passed already formatted.
"""

from __future__ import annotations

import uuid

from sqlalchemy import exists, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.models.pessoa import PessoaFisica, PessoaJuridica

# ── Pessoa física ────────────────────────────────────────────────────


async def add_pessoa_fisica(db: AsyncSession, pessoa: PessoaFisica) -> PessoaFisica:
    db.add(pessoa)
    await db.flush()
    await db.refresh(pessoa)
    return pessoa


async def get_pessoa_fisica_by_id(db: AsyncSession, pessoa_id: uuid.UUID) -> PessoaFisica | None:
    return await db.get(PessoaFisica, pessoa_id)


async def get_pessoa_fisica_by_cpf(db: AsyncSession, cpf: str) -> PessoaFisica | None:
    result = await db.execute(select(PessoaFisica).where(PessoaFisica.cpf == cpf))
    return result.scalar_one_or_none()


async def exists_pessoa_fisica_by_cpf(db: AsyncSession, cpf: str) -> bool:
    result = await db.execute(select(exists().where(PessoaFisica.cpf == cpf)))
    return bool(result.scalar())


async def list_pessoas_fisicas(db: AsyncSession, offset: int = 0, limit: int = 100) -> list[PessoaFisica]:
    result = await db.execute(
        select(PessoaFisica)
        .order_by(PessoaFisica.nome.asc(), PessoaFisica.created_at.asc())
        .offset(offset)
        .limit(limit)
    )
    return list(result.scalars().all())


# ── Pessoa jurídica ──────────────────────────────────────────────────


async def add_pessoa_juridica(db: AsyncSession, pessoa: PessoaJuridica) -> PessoaJuridica:
    db.add(pessoa)
    await db.flush()
    await db.refresh(pessoa)
    return pessoa


async def get_pessoa_juridica_by_id(db: AsyncSession, pessoa_id: uuid.UUID) -> PessoaJuridica | None:
    return await db.get(PessoaJuridica, pessoa_id)


async def get_pessoa_juridica_by_cnpj(db: AsyncSession, cnpj: str) -> PessoaJuridica | None:
    result = await db.execute(select(PessoaJuridica).where(PessoaJuridica.cnpj == cnpj))
    return result.scalar_one_or_none()


async def exists_pessoa_juridica_by_cnpj(db: AsyncSession, cnpj: str) -> bool:
    result = await db.execute(select(exists().where(PessoaJuridica.cnpj == cnpj)))
    return bool(result.scalar())


async def list_pessoas_juridicas(db: AsyncSession, offset: int = 0, limit: int = 100) -> list[PessoaJuridica]:
    result = await db.execute(
        select(PessoaJuridica)
        .order_by(PessoaJuridica.razao_social.asc(), PessoaJuridica.created_at.asc())
        .offset(offset)
        .limit(limit)
    )
    return list(result.scalars().all())


# ── Shared ───────────────────────────────────────────────────────────


async def save(db: AsyncSession, pessoa: PessoaFisica | PessoaJuridica) -> None:
    """Flush pending changes to an already-tracked person."""
    await db.flush()
    await db.refresh(pessoa)


async def delete(db: AsyncSession, pessoa: PessoaFisica | PessoaJuridica) -> None:
    await db.delete(pessoa)
    await db.flush()
