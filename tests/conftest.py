from __future__ import annotations

import pytest

from connect_volunteers.application.session_driver import SessionDriver
from connect_volunteers.config.settings import Settings, get_settings
from connect_volunteers.infra.dialogue_store_memory import InMemoryDialogueStore
from connect_volunteers.infra.ledger_memory import InMemoryLedgerSink
from tests.helpers.fakes import FIXED_NOW, RecordingTransport


@pytest.fixture()
def settings() -> Settings:
    get_settings.cache_clear()
    return Settings(
        environment="development",
        telegram_bot_token="123456:TEST-TOKEN",
        telegram_webhook_secret=None,
        dialogue_store_backend="memory",
        dedupe_backend="memory",
        ledger_backend="memory",
    )


@pytest.fixture()
def store() -> InMemoryDialogueStore:
    return InMemoryDialogueStore()


@pytest.fixture()
def transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture()
def sink() -> InMemoryLedgerSink:
    return InMemoryLedgerSink()


@pytest.fixture()
def driver(
    store: InMemoryDialogueStore,
    transport: RecordingTransport,
    sink: InMemoryLedgerSink,
) -> SessionDriver:
    return SessionDriver(store, transport, sink, clock=lambda: FIXED_NOW)
