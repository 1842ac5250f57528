"""Async httpx client for the ViaCEP postal-code API."""

from __future__ import annotations

import logging

import httpx
from pydantic import ValidationError

from src.config import settings
from src.events import emit
from src.exceptions import LookupUnavailableError
from src.integrations.resilience import CircuitBreaker, CircuitOpenError, retrying
from src.integrations.viacep.schemas import ViaCepPayload
from src.schemas.events import EventType, SystemEvent

logger = logging.getLogger(__name__)

# ViaCEP marks unknown CEPs with {"erro": true} on a 200 response
_FIELD_ERROR = "erro"

# Errors that are retried and counted by the circuit breaker
_TRANSIENT_ERRORS: tuple[type[BaseException], ...] = (httpx.TransportError, httpx.HTTPStatusError)


class ViaCepClient:
    """Thin async wrapper around ViaCEP.

    Endpoint: GET {base_url}/{cep}/json/

    Applies its own retry (tenacity) and circuit-breaker policy; callers only
    see a payload, ``None`` for not-found, or LookupUnavailableError.
    """

    def __init__(
        self,
        base_url: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        breaker: CircuitBreaker | None = None,
        retry_attempts: int | None = None,
        retry_wait: float | None = None,
    ) -> None:
        cfg = settings.viacep
        self._base_url = (base_url or cfg.viacep_base_url).rstrip("/")
        self._timeout = httpx.Timeout(cfg.viacep_timeout, connect=cfg.viacep_connect_timeout)
        self._transport = transport
        self._retry_attempts = cfg.viacep_retry_attempts if retry_attempts is None else retry_attempts
        self._retry_wait = cfg.viacep_retry_wait if retry_wait is None else retry_wait
        self._breaker = breaker or CircuitBreaker(
            "viacep",
            failure_threshold=cfg.viacep_breaker_threshold,
            reset_timeout=cfg.viacep_breaker_reset_timeout,
            failure_exceptions=_TRANSIENT_ERRORS,
        )

    async def fetch(self, cep: str) -> ViaCepPayload | None:
        """Look up an 8-digit, already-normalized CEP.

        Returns:
            The parsed payload, or None when ViaCEP has no data for the CEP
            (explicit ``erro`` marker, 4xx, or an unusable body).

        Raises:
            LookupUnavailableError: timeout, connection failure, 5xx after
                retries, or open circuit.
        """
        await emit(SystemEvent(
            event_type=EventType.EXTERNAL_API_CALL,
            data={"integration": "viacep", "cep": cep},
            source_module="integrations.viacep.client",
        ))

        try:
            response = await self._breaker.call(self._get_with_retry, cep)
        except CircuitOpenError as exc:
            logger.warning("ViaCEP circuit open, skipping lookup for CEP %s", cep)
            await self._emit_error(cep, "circuit_open")
            raise LookupUnavailableError("Serviço de CEP temporariamente indisponível.") from exc
        except httpx.TimeoutException as exc:
            logger.warning("ViaCEP timeout for CEP %s", cep)
            await self._emit_error(cep, "timeout")
            raise LookupUnavailableError("Tempo esgotado ao consultar o serviço de CEP.") from exc
        except httpx.HTTPStatusError as exc:
            logger.error("ViaCEP HTTP error %s for CEP %s", exc.response.status_code, cep)
            await self._emit_error(cep, f"http_{exc.response.status_code}")
            raise LookupUnavailableError("Serviço de CEP retornou erro.") from exc
        except httpx.TransportError as exc:
            logger.error("ViaCEP transport error for CEP %s: %s", cep, exc)
            await self._emit_error(cep, "transport")
            raise LookupUnavailableError("Falha de comunicação com o serviço de CEP.") from exc

        if response.status_code >= 400:
            # 4xx: ViaCEP rejects the CEP itself (e.g. 400 for a bad format)
            logger.warning("ViaCEP HTTP %s for CEP %s, treating as not found", response.status_code, cep)
            payload = None
        else:
            payload = self._parse_response(cep, response)

        await emit(SystemEvent(
            event_type=EventType.EXTERNAL_API_RESPONSE,
            data={"integration": "viacep", "cep": cep, "found": payload is not None},
            source_module="integrations.viacep.client",
        ))
        return payload

    async def _get_with_retry(self, cep: str) -> httpx.Response:
        async for attempt in retrying(self._retry_attempts, self._retry_wait, _TRANSIENT_ERRORS):
            with attempt:
                return await self._get(cep)
        raise AssertionError("unreachable: tenacity reraises the last error")

    async def _get(self, cep: str) -> httpx.Response:
        async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
            response = await client.get(f"{self._base_url}/{cep}/json/")
        if response.status_code >= 500:
            response.raise_for_status()
        return response

    def _parse_response(self, cep: str, response: httpx.Response) -> ViaCepPayload | None:
        """Parse the ViaCEP body; anything unusable counts as not found."""
        try:
            body = response.json()
        except ValueError:
            logger.warning("ViaCEP returned non-JSON body for CEP %s", cep)
            return None

        if not isinstance(body, dict):
            logger.warning("ViaCEP returned unexpected body type for CEP %s", cep)
            return None

        if body.get(_FIELD_ERROR):
            logger.info("CEP %s not found on ViaCEP", cep)
            return None

        try:
            return ViaCepPayload.model_validate(body)
        except ValidationError:
            logger.warning("ViaCEP payload for CEP %s missing required fields", cep)
            return None

    async def _emit_error(self, cep: str, error: str) -> None:
        await emit(SystemEvent(
            event_type=EventType.EXTERNAL_API_RESPONSE,
            data={"integration": "viacep", "cep": cep, "error": error},
            source_module="integrations.viacep.client",
        ))


# Module-level singleton
viacep_client = ViaCepClient()
