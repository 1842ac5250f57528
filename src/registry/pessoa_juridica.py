"""Pessoa jurídica use cases — create, read, update, delete organizations by CNPJ."""

from __future__ import annotations

import logging
import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from src.decoders.documento import CNPJ_LENGTH, format_cnpj, is_valid_cnpj, mask_documento, normalize_digits
from src.events import emit
from src.exceptions import (
    DocumentoImutavelError,
    DocumentoInvalidoError,
    InvalidInputError,
    PessoaJaExisteError,
    PessoaNotFoundError,
)
from src.integrations.viacep.service import AddressLookupCache
from src.models.enums import TipoPessoa
from src.models.pessoa import PessoaJuridica
from src.registry import repository
from src.schemas.events import EventType, SystemEvent
from src.schemas.pessoa import CreatePessoaJuridicaRequest, UpdatePessoaJuridicaRequest

logger = logging.getLogger(__name__)


class PessoaJuridicaService:
    """CRUD for organizations."""

    def __init__(self, address_lookup: AddressLookupCache) -> None:
        self._address_lookup = address_lookup

    async def create(self, db: AsyncSession, request: CreatePessoaJuridicaRequest) -> PessoaJuridica:
        logger.info(
            "Criando Pessoa Jurídica. CNPJ: %s, CEP: %s",
            mask_documento(request.cnpj),
            request.cep,
        )

        if not is_valid_cnpj(request.cnpj):
            raise DocumentoInvalidoError("CNPJ inválido.")
        cnpj = format_cnpj(request.cnpj)

        if await repository.exists_pessoa_juridica_by_cnpj(db, cnpj):
            raise PessoaJaExisteError(cnpj)

        lookup = await self._address_lookup.resolve(request.cep)
        endereco = lookup.unwrap().with_numero_complemento(request.numero, request.complemento)

        pessoa = PessoaJuridica(
            razao_social=request.razao_social.strip(),
            nome_fantasia=(request.nome_fantasia or "").strip() or None,
            cnpj=cnpj,
            tipo=TipoPessoa.JURIDICA.value,
        )
        pessoa.set_endereco(endereco)
        created = await repository.add_pessoa_juridica(db, pessoa)

        await emit(SystemEvent(
            event_type=EventType.PERSON_CREATED,
            entity_id=created.id,
            data={"tipo": TipoPessoa.JURIDICA.value, "cep": endereco.cep},
            source_module="registry.pessoa_juridica",
        ))
        logger.info("Pessoa Jurídica criada com id=%s", created.id)
        return created

    async def get_by_id(self, db: AsyncSession, pessoa_id: uuid.UUID) -> PessoaJuridica:
        pessoa = await repository.get_pessoa_juridica_by_id(db, pessoa_id)
        if pessoa is None:
            raise PessoaNotFoundError(f"Pessoa Jurídica com id {pessoa_id} não encontrada.")
        return pessoa

    async def get_by_cnpj(self, db: AsyncSession, cnpj: str) -> PessoaJuridica:
        if len(normalize_digits(cnpj)) != CNPJ_LENGTH:
            raise InvalidInputError("CNPJ inválido.")
        pessoa = await repository.get_pessoa_juridica_by_cnpj(db, format_cnpj(cnpj))
        if pessoa is None:
            raise PessoaNotFoundError("Pessoa Jurídica não encontrada.")
        return pessoa

    async def list_all(self, db: AsyncSession, offset: int = 0, limit: int = 100) -> list[PessoaJuridica]:
        return await repository.list_pessoas_juridicas(db, offset=offset, limit=limit)

    async def update(
        self,
        db: AsyncSession,
        pessoa_id: uuid.UUID,
        request: UpdatePessoaJuridicaRequest,
    ) -> PessoaJuridica:
        """Apply a partial update; the CNPJ itself can never change."""
        logger.info("Atualizando Pessoa Jurídica id=%s", pessoa_id)
        pessoa = await self.get_by_id(db, pessoa_id)

        if request.cnpj and request.cnpj.strip():
            if not is_valid_cnpj(request.cnpj):
                raise DocumentoInvalidoError("CNPJ inválido.")
            if format_cnpj(request.cnpj) != pessoa.cnpj:
                raise DocumentoImutavelError("Não é permitido alterar o CNPJ (documento).")

        current = pessoa.endereco
        if request.cep and request.cep.strip():
            lookup = await self._address_lookup.resolve(request.cep)
            endereco = lookup.unwrap().with_numero_complemento(
                current.numero if request.numero is None else request.numero,
                current.complemento if request.complemento is None else request.complemento,
            )
        else:
            endereco = current.with_numero_complemento(request.numero, request.complemento)

        if request.razao_social is not None and request.razao_social.strip():
            pessoa.razao_social = request.razao_social.strip()
        if request.nome_fantasia is not None:
            pessoa.nome_fantasia = request.nome_fantasia.strip() or None
        pessoa.set_endereco(endereco)
        await repository.save(db, pessoa)

        await emit(SystemEvent(
            event_type=EventType.PERSON_UPDATED,
            entity_id=pessoa.id,
            data={
                "tipo": TipoPessoa.JURIDICA.value,
                "fields": sorted(request.model_dump(exclude_none=True)),
            },
            source_module="registry.pessoa_juridica",
        ))
        logger.info("Pessoa Jurídica atualizada id=%s", pessoa.id)
        return pessoa

    async def delete(self, db: AsyncSession, pessoa_id: uuid.UUID) -> None:
        pessoa = await self.get_by_id(db, pessoa_id)
        await repository.delete(db, pessoa)

        await emit(SystemEvent(
            event_type=EventType.PERSON_DELETED,
            entity_id=pessoa_id,
            data={"tipo": TipoPessoa.JURIDICA.value},
            source_module="registry.pessoa_juridica",
        ))
        logger.info("Pessoa Jurídica excluída id=%s", pessoa_id)
