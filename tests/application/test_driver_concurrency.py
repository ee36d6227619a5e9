"""Eventos concorrentes: mesma sessão serializada, sessões distintas isoladas."""

from __future__ import annotations

import asyncio

import pytest

from connect_volunteers.application.session_driver import SessionDriver
from connect_volunteers.domain.dialogue import CollectingRecordState, texts
from connect_volunteers.domain.enums import RequestCategory
from connect_volunteers.domain.models import InboundEvent
from connect_volunteers.infra.ledger_memory import InMemoryLedgerSink
from tests.helpers.fakes import RecordingTransport, SlowInMemoryDialogueStore


@pytest.mark.asyncio
async def test_two_captures_for_same_session_both_apply():
    store = SlowInMemoryDialogueStore()
    driver = SessionDriver(store, RecordingTransport(), InMemoryLedgerSink())
    await store.atomic_update(
        "7", lambda _: CollectingRecordState(category=RequestCategory.NEED_EVACUATION)
    )

    await asyncio.gather(
        driver.handle(InboundEvent(session_key="7", text="Романенко Віра")),
        driver.handle(InboundEvent(session_key="7", text="+380501234567")),
    )

    record = (await store.load("7")).record
    assert record.full_name == "Романенко Віра"
    assert record.phone_numbers == "+380501234567"


@pytest.mark.asyncio
async def test_interleaved_sessions_do_not_leak():
    store = SlowInMemoryDialogueStore()
    transport = RecordingTransport()
    sink = InMemoryLedgerSink()
    driver = SessionDriver(store, transport, sink)

    flows = {
        "a": [texts.OFFER_HELP_TOKEN, "Я водій з власним авто", "A", "1", "x", "-"],
        "b": [texts.REQUEST_HELP_TOKEN, "Евакуація", "B", "2", "y", "-"],
    }
    for step in range(6):
        await asyncio.gather(
            *(
                driver.handle(InboundEvent(session_key=key, text=messages[step]))
                for key, messages in flows.items()
            )
        )
    await asyncio.gather(
        driver.handle(InboundEvent(session_key="a", text=texts.CONFIRM_TOKEN)),
        driver.handle(InboundEvent(session_key="b", text=texts.CONFIRM_TOKEN)),
    )

    driver_rows = sink.rows_for(RequestCategory.PROVIDING_DRIVER)
    evacuation_rows = sink.rows_for(RequestCategory.NEED_EVACUATION)
    assert [r.record.full_name for r in driver_rows] == ["A"]
    assert [r.record.full_name for r in evacuation_rows] == ["B"]
    assert {r.session_key for r in transport.sent} == {"a", "b"}
