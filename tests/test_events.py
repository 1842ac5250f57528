"""Tests for the event bus and the audit subscriber.

Covers:
- Global and typed subscribers receive matching events
- A failing handler does not prevent delivery to the others
- emit → background worker → dispatch, drained by stop()
- audit_on_event persists an AuditLog row and never raises
"""

from __future__ import annotations

import uuid
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from src.events import EventBus
from src.models.audit import AuditLog
from src.schemas.events import EventType, SystemEvent
from src.security.audit import audit_on_event


def _event(event_type: EventType = EventType.PERSON_CREATED, **kwargs) -> SystemEvent:
    return SystemEvent(event_type=event_type, source_module="tests", **kwargs)


def _handler(name: str = "handler", **kwargs) -> AsyncMock:
    handler = AsyncMock(**kwargs)
    handler.__name__ = name
    return handler


class TestDispatch:
    @pytest.mark.asyncio()
    async def test_global_subscriber_receives_everything(self):
        bus = EventBus()
        handler = _handler()
        bus.subscribe(handler)

        event = _event()
        await bus.dispatch(event)

        handler.assert_awaited_once_with(event)

    @pytest.mark.asyncio()
    async def test_typed_subscriber_filters(self):
        bus = EventBus()
        handler = _handler()
        bus.subscribe(handler, event_types=[EventType.PERSON_DELETED])

        await bus.dispatch(_event(EventType.PERSON_CREATED))
        handler.assert_not_awaited()

        await bus.dispatch(_event(EventType.PERSON_DELETED))
        handler.assert_awaited_once()

    @pytest.mark.asyncio()
    async def test_failing_handler_is_isolated(self):
        bus = EventBus()
        broken = _handler("broken", side_effect=RuntimeError("boom"))
        healthy = _handler("healthy")
        bus.subscribe(broken)
        bus.subscribe(healthy)

        await bus.dispatch(_event())

        healthy.assert_awaited_once()

    @pytest.mark.asyncio()
    async def test_unsubscribe(self):
        bus = EventBus()
        handler = _handler()
        bus.subscribe(handler)
        bus.subscribe(handler, event_types=[EventType.PERSON_CREATED])
        bus.unsubscribe(handler)

        await bus.dispatch(_event())

        handler.assert_not_awaited()


class TestWorker:
    @pytest.mark.asyncio()
    async def test_emit_is_delivered_before_stop_returns(self):
        bus = EventBus()
        handler = _handler()
        bus.subscribe(handler)
        await bus.start()

        event = _event(EventType.EXTERNAL_API_CALL, data={"cep": "04850280"})
        await bus.emit(event)
        await bus.stop()

        handler.assert_awaited_once_with(event)

    @pytest.mark.asyncio()
    async def test_emit_without_start_starts_worker(self):
        bus = EventBus()
        handler = _handler()
        bus.subscribe(handler)

        await bus.emit(_event())
        await bus.stop()

        handler.assert_awaited_once()


class TestAuditSubscriber:
    @staticmethod
    def _session_factory(db):
        session_cm = MagicMock()
        session_cm.__aenter__ = AsyncMock(return_value=db)
        session_cm.__aexit__ = AsyncMock(return_value=False)
        return MagicMock(return_value=session_cm)

    @pytest.mark.asyncio()
    async def test_persists_audit_row(self):
        db = AsyncMock()
        db.add = MagicMock()
        entity_id = uuid.uuid4()
        event = _event(entity_id=entity_id, data={"tipo": "F"})

        with patch("src.security.audit.async_session_factory", self._session_factory(db)):
            await audit_on_event(event)

        row = db.add.call_args.args[0]
        assert isinstance(row, AuditLog)
        assert row.event_type == "person.created"
        assert row.entity_id == entity_id
        assert row.data == {"tipo": "F"}
        assert row.source_module == "tests"
        db.commit.assert_awaited_once()

    @pytest.mark.asyncio()
    async def test_db_failure_is_swallowed(self):
        db = AsyncMock()
        db.add = MagicMock()
        db.commit.side_effect = RuntimeError("db down")

        with patch("src.security.audit.async_session_factory", self._session_factory(db)):
            await audit_on_event(_event())
