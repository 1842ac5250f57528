"""Pessoa física use cases — create, read, update, delete individuals by CPF.

The CPF is validated and stored formatted; the address comes from the
CEP lookup, with house number and complement supplied by the caller.
"""

from __future__ import annotations

import logging
import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from src.decoders.documento import CPF_LENGTH, format_cpf, is_valid_cpf, mask_documento, normalize_digits
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
from src.models.pessoa import PessoaFisica
from src.registry import repository
from src.schemas.events import EventType, SystemEvent
from src.schemas.pessoa import CreatePessoaFisicaRequest, UpdatePessoaFisicaRequest

logger = logging.getLogger(__name__)


class PessoaFisicaService:
    """CRUD for individuals."""

    def __init__(self, address_lookup: AddressLookupCache) -> None:
        self._address_lookup = address_lookup

    async def create(self, db: AsyncSession, request: CreatePessoaFisicaRequest) -> PessoaFisica:
        """Register an individual.

        Raises:
            DocumentoInvalidoError: CPF fails checksum validation.
            PessoaJaExisteError: CPF already registered.
            InvalidInputError / AddressNotFoundError: bad or unknown CEP.
            LookupUnavailableError: CEP service unreachable.
        """
        logger.info(
            "Criando Pessoa Física. CPF: %s, CEP: %s",
            mask_documento(request.cpf),
            request.cep,
        )

        if not is_valid_cpf(request.cpf):
            raise DocumentoInvalidoError("CPF inválido.")
        cpf = format_cpf(request.cpf)

        if await repository.exists_pessoa_fisica_by_cpf(db, cpf):
            raise PessoaJaExisteError(cpf)

        lookup = await self._address_lookup.resolve(request.cep)
        endereco = lookup.unwrap().with_numero_complemento(request.numero, request.complemento)

        pessoa = PessoaFisica(nome=request.nome.strip(), cpf=cpf, tipo=TipoPessoa.FISICA.value)
        pessoa.set_endereco(endereco)
        created = await repository.add_pessoa_fisica(db, pessoa)

        await emit(SystemEvent(
            event_type=EventType.PERSON_CREATED,
            entity_id=created.id,
            data={"tipo": TipoPessoa.FISICA.value, "cep": endereco.cep},
            source_module="registry.pessoa_fisica",
        ))
        logger.info("Pessoa Física criada com id=%s", created.id)
        return created

    async def get_by_id(self, db: AsyncSession, pessoa_id: uuid.UUID) -> PessoaFisica:
        pessoa = await repository.get_pessoa_fisica_by_id(db, pessoa_id)
        if pessoa is None:
            raise PessoaNotFoundError(f"Pessoa Física com id {pessoa_id} não encontrada.")
        return pessoa

    async def get_by_cpf(self, db: AsyncSession, cpf: str) -> PessoaFisica:
        """Find by CPF in any punctuation; wrong digit count is InvalidInputError."""
        if len(normalize_digits(cpf)) != CPF_LENGTH:
            raise InvalidInputError("CPF inválido.")
        pessoa = await repository.get_pessoa_fisica_by_cpf(db, format_cpf(cpf))
        if pessoa is None:
            raise PessoaNotFoundError("Pessoa Física não encontrada.")
        return pessoa

    async def list_all(self, db: AsyncSession, offset: int = 0, limit: int = 100) -> list[PessoaFisica]:
        return await repository.list_pessoas_fisicas(db, offset=offset, limit=limit)

    async def update(
        self,
        db: AsyncSession,
        pessoa_id: uuid.UUID,
        request: UpdatePessoaFisicaRequest,
    ) -> PessoaFisica:
        """Apply a partial update.

        A new CEP triggers a fresh lookup; without one the stored address is
        kept and only numero/complemento are replaced when sent.
        """
        logger.info("Atualizando Pessoa Física id=%s", pessoa_id)
        pessoa = await self.get_by_id(db, pessoa_id)

        if request.cpf and request.cpf.strip():
            if not is_valid_cpf(request.cpf):
                raise DocumentoInvalidoError("CPF inválido.")
            if format_cpf(request.cpf) != pessoa.cpf:
                raise DocumentoImutavelError("Não é permitido alterar o CPF (documento).")

        if request.cep and request.cep.strip():
            lookup = await self._address_lookup.resolve(request.cep)
            base = lookup.unwrap()
            current = pessoa.endereco
            endereco = base.with_numero_complemento(
                current.numero if request.numero is None else request.numero,
                current.complemento if request.complemento is None else request.complemento,
            )
        else:
            endereco = pessoa.endereco.with_numero_complemento(request.numero, request.complemento)

        if request.nome is not None and request.nome.strip():
            pessoa.nome = request.nome.strip()
        pessoa.set_endereco(endereco)
        await repository.save(db, pessoa)

        await emit(SystemEvent(
            event_type=EventType.PERSON_UPDATED,
            entity_id=pessoa.id,
            data={
                "tipo": TipoPessoa.FISICA.value,
                "fields": sorted(request.model_dump(exclude_none=True)),
            },
            source_module="registry.pessoa_fisica",
        ))
        logger.info("Pessoa Física atualizada id=%s", pessoa.id)
        return pessoa

    async def delete(self, db: AsyncSession, pessoa_id: uuid.UUID) -> None:
        pessoa = await self.get_by_id(db, pessoa_id)
        await repository.delete(db, pessoa)

        await emit(SystemEvent(
            event_type=EventType.PERSON_DELETED,
            entity_id=pessoa_id,
            data={"tipo": TipoPessoa.FISICA.value},
            source_module="registry.pessoa_fisica",
        ))
        logger.info("Pessoa Física excluída id=%s", pessoa_id)
