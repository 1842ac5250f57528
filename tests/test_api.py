"""HTTP tests for the registry API.

Services and the DB session are replaced through dependency_overrides;
these tests check routing, request validation, and the domain-error →
HTTP status mapping.
"""

from __future__ import annotations

import uuid
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from src.api.dependencies import get_address_lookup, get_pessoa_fisica_service, get_pessoa_juridica_service
from src.db.engine import get_session
from src.exceptions import (
    AddressNotFoundError,
    DocumentoImutavelError,
    DocumentoInvalidoError,
    InvalidInputError,
    LookupUnavailableError,
    PessoaJaExisteError,
    PessoaNotFoundError,
)
from src.integrations.viacep.schemas import AddressLookupResult, Endereco
from src.main import create_app
from src.models.enums import LookupStatus
from src.models.pessoa import PessoaFisica, PessoaJuridica

ENDERECO = Endereco(
    cep="04850-280",
    logradouro="Rua Doutor Ângelo Vita",
    bairro="Jardim Herculano",
    cidade="São Paulo",
    estado="SP",
    numero="100",
)

FISICAS = "/api/v1/pessoas/fisicas"
JURIDICAS = "/api/v1/pessoas/juridicas"


# ── Helpers ──────────────────────────────────────────────────────────


def _pessoa_fisica() -> PessoaFisica:
    pessoa = PessoaFisica(id=uuid.uuid4(), nome="Maria Silva", cpf="496.336.978-83", tipo="F")
    pessoa.set_endereco(ENDERECO)
    return pessoa


def _pessoa_juridica() -> PessoaJuridica:
    pessoa = PessoaJuridica(
        id=uuid.uuid4(),
        razao_social="Banco Exemplo S.A.",
        nome_fantasia=None,
        cnpj="59.285.411/0001-13",
        tipo="J",
    )
    pessoa.set_endereco(ENDERECO)
    return pessoa


async def _fake_session():
    yield AsyncMock()


@pytest.fixture()
def fisica_service():
    return AsyncMock()


@pytest.fixture()
def juridica_service():
    return AsyncMock()


@pytest.fixture()
def address_lookup():
    lookup = MagicMock()
    lookup.resolve = AsyncMock()
    return lookup


@pytest.fixture()
def client(fisica_service, juridica_service, address_lookup):
    app = create_app(use_lifespan=False)
    app.dependency_overrides[get_session] = _fake_session
    app.dependency_overrides[get_pessoa_fisica_service] = lambda: fisica_service
    app.dependency_overrides[get_pessoa_juridica_service] = lambda: juridica_service
    app.dependency_overrides[get_address_lookup] = lambda: address_lookup
    with TestClient(app) as test_client:
        yield test_client


# ── Pessoas físicas ──────────────────────────────────────────────────


class TestPessoasFisicas:
    def test_create_returns_201_with_location(self, client, fisica_service):
        pessoa = _pessoa_fisica()
        fisica_service.create.return_value = pessoa

        resp = client.post(FISICAS, json={
            "nome": "Maria Silva",
            "cpf": "49633697883",
            "cep": "04850-280",
            "numero": "100",
        })

        assert resp.status_code == 201
        assert resp.headers["location"] == f"{FISICAS}/{pessoa.id}"
        body = resp.json()
        assert body["cpf"] == "496.336.978-83"
        assert body["endereco"]["cidade"] == "São Paulo"
        assert body["endereco"]["numero"] == "100"

    def test_create_missing_field_is_422(self, client, fisica_service):
        resp = client.post(FISICAS, json={"cpf": "49633697883"})

        assert resp.status_code == 422
        fisica_service.create.assert_not_awaited()

    def test_create_blank_nome_is_422(self, client, fisica_service):
        resp = client.post(FISICAS, json={"nome": "   ", "cpf": "49633697883", "cep": "04850280"})

        assert resp.status_code == 422
        fisica_service.create.assert_not_awaited()

    @pytest.mark.parametrize(
        ("error", "expected"),
        [
            (DocumentoInvalidoError("CPF inválido."), 400),
            (AddressNotFoundError("99999999"), 400),
            (PessoaJaExisteError("496.336.978-83"), 409),
            (LookupUnavailableError("Serviço de CEP indisponível."), 503),
        ],
    )
    def test_create_error_mapping(self, client, fisica_service, error, expected):
        fisica_service.create.side_effect = error

        resp = client.post(FISICAS, json={"nome": "Maria", "cpf": "49633697883", "cep": "04850280"})

        assert resp.status_code == expected
        assert resp.json()["detail"] == str(error)

    def test_get_by_id(self, client, fisica_service):
        pessoa = _pessoa_fisica()
        fisica_service.get_by_id.return_value = pessoa

        resp = client.get(f"{FISICAS}/{pessoa.id}")

        assert resp.status_code == 200
        assert resp.json()["id"] == str(pessoa.id)

    def test_get_by_id_not_found(self, client, fisica_service):
        fisica_service.get_by_id.side_effect = PessoaNotFoundError("Pessoa Física não encontrada.")

        resp = client.get(f"{FISICAS}/{uuid.uuid4()}")

        assert resp.status_code == 404

    def test_get_by_id_malformed_uuid(self, client):
        assert client.get(f"{FISICAS}/not-a-uuid").status_code == 422

    def test_get_by_cpf(self, client, fisica_service):
        fisica_service.get_by_cpf.return_value = _pessoa_fisica()

        resp = client.get(f"{FISICAS}/cpf/49633697883")

        assert resp.status_code == 200
        assert fisica_service.get_by_cpf.await_args.args[1] == "49633697883"

    def test_list_passes_pagination(self, client, fisica_service):
        fisica_service.list_all.return_value = [_pessoa_fisica(), _pessoa_fisica()]

        resp = client.get(FISICAS, params={"offset": 10, "limit": 5})

        assert resp.status_code == 200
        assert len(resp.json()) == 2
        assert fisica_service.list_all.await_args.kwargs == {"offset": 10, "limit": 5}

    def test_update_immutable_cpf_is_400(self, client, fisica_service):
        fisica_service.update.side_effect = DocumentoImutavelError("Não é permitido alterar o CPF (documento).")

        resp = client.put(f"{FISICAS}/{uuid.uuid4()}", json={"cpf": "52998224725"})

        assert resp.status_code == 400

    def test_delete_returns_204(self, client, fisica_service):
        pessoa_id = uuid.uuid4()

        resp = client.delete(f"{FISICAS}/{pessoa_id}")

        assert resp.status_code == 204
        assert resp.content == b""
        assert fisica_service.delete.await_args.args[1] == pessoa_id


# ── Pessoas jurídicas ────────────────────────────────────────────────


class TestPessoasJuridicas:
    def test_create(self, client, juridica_service):
        juridica_service.create.return_value = _pessoa_juridica()

        resp = client.post(JURIDICAS, json={
            "razao_social": "Banco Exemplo S.A.",
            "cnpj": "59285411000113",
            "cep": "04850280",
        })

        assert resp.status_code == 201
        assert resp.json()["cnpj"] == "59.285.411/0001-13"
        assert resp.json()["nome_fantasia"] is None

    def test_get_by_cnpj_not_found(self, client, juridica_service):
        juridica_service.get_by_cnpj.side_effect = PessoaNotFoundError("Pessoa Jurídica não encontrada.")

        resp = client.get(f"{JURIDICAS}/cnpj/59285411000113")

        assert resp.status_code == 404


# ── CEP ──────────────────────────────────────────────────────────────


class TestCepLookup:
    def test_found(self, client, address_lookup):
        address_lookup.resolve.return_value = AddressLookupResult(
            status=LookupStatus.FOUND, cep="04850280", address=ENDERECO
        )

        resp = client.get("/api/v1/cep/04850280")

        assert resp.status_code == 200
        assert resp.json()["logradouro"] == "Rua Doutor Ângelo Vita"

    def test_not_found_is_404(self, client, address_lookup):
        address_lookup.resolve.return_value = AddressLookupResult(status=LookupStatus.NOT_FOUND, cep="99999999")

        assert client.get("/api/v1/cep/99999999").status_code == 404

    def test_unavailable_is_503(self, client, address_lookup):
        address_lookup.resolve.return_value = AddressLookupResult(
            status=LookupStatus.UNAVAILABLE, cep="04850280", error="Tempo esgotado ao consultar o serviço de CEP."
        )

        resp = client.get("/api/v1/cep/04850280")

        assert resp.status_code == 503
        assert "Tempo esgotado" in resp.json()["detail"]

    def test_invalid_cep_is_400(self, client, address_lookup):
        address_lookup.resolve.side_effect = InvalidInputError("CEP deve conter 8 dígitos.")

        assert client.get("/api/v1/cep/123").status_code == 400
