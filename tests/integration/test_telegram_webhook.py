"""Testes de integração do webhook Telegram (FastAPI TestClient)."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from connect_volunteers.api.app import create_app
from connect_volunteers.bootstrap import build_runtime
from connect_volunteers.config.settings import Settings
from connect_volunteers.domain.dialogue import texts
from connect_volunteers.domain.enums import RequestCategory
from connect_volunteers.domain.protocols import DialogueStoreError
from tests.helpers.fakes import RecordingTransport

SECRET_HEADER = "X-Telegram-Bot-Api-Secret-Token"


def _update(update_id: int, text: str, chat_id: int = 4242) -> dict:
    return {
        "update_id": update_id,
        "message": {
            "message_id": update_id,
            "date": 1646136000,
            "chat": {"id": chat_id, "type": "private"},
            "text": text,
        },
    }


@pytest.fixture()
def runtime(settings: Settings):
    settings.telegram_webhook_secret = "hook-secret"
    rt = build_runtime(settings)
    rt.transport = RecordingTransport()
    rt.driver._transport = rt.transport
    return rt


@pytest.fixture()
def client(settings: Settings, runtime):
    app = create_app(settings, runtime=runtime)
    with TestClient(app) as test_client:
        yield test_client


def _post(client: TestClient, payload, secret: str | None = "hook-secret"):
    headers = {SECRET_HEADER: secret} if secret else {}
    return client.post("/webhooks/telegram", json=payload, headers=headers)


def test_health(client: TestClient):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "service": "connect_volunteers", "version": "0.1.0"}


def test_missing_secret_is_401(client: TestClient):
    assert _post(client, _update(1, "x"), secret=None).status_code == 401


def test_wrong_secret_is_401(client: TestClient):
    assert _post(client, _update(1, "x"), secret="nope").status_code == 401


def test_malformed_json_is_400(client: TestClient):
    response = client.post(
        "/webhooks/telegram",
        content=b"{not json",
        headers={SECRET_HEADER: "hook-secret", "content-type": "application/json"},
    )
    assert response.status_code == 400


def test_full_registration_through_webhook(client: TestClient, runtime):
    messages = [
        texts.REQUEST_HELP_TOKEN,
        "Потрібна гуманітарна допомога",
        "Литвиненко Галина",
        "+380661234567",
        "Суми",
        "Потрібні ліки",
        texts.CONFIRM_TOKEN,
    ]
    for update_id, text in enumerate(messages, start=1000):
        response = _post(client, _update(update_id, text))
        assert response.status_code == 200
        assert response.json()["status"] == "processed"

    rows = runtime.sink.rows_for(RequestCategory.NEED_HUMANITARIAN_HELP)
    assert len(rows) == 1
    assert rows[0].record.comments == "Потрібні ліки"
    assert runtime.transport.sent[-1].text == texts.SUBMITTED_TEXT
    assert runtime.transport.sent[-1].suggested_replies == texts.START_MENU


def test_duplicate_update_is_acknowledged(client: TestClient, runtime):
    _post(client, _update(7, texts.OFFER_HELP_TOKEN))
    response = _post(client, _update(7, texts.OFFER_HELP_TOKEN))

    assert response.status_code == 200
    assert response.json()["status"] == "duplicate"
    assert len(runtime.transport.sent) == 1


def test_store_failure_is_503_and_retry_is_accepted(client: TestClient, runtime):
    original = runtime.store.atomic_update
    runtime.store.atomic_update = AsyncMock(side_effect=DialogueStoreError("down"))

    failed = _post(client, _update(50, texts.OFFER_HELP_TOKEN))
    assert failed.status_code == 503

    runtime.store.atomic_update = original
    retried = _post(client, _update(50, texts.OFFER_HELP_TOKEN))
    assert retried.status_code == 200
    assert retried.json()["status"] == "processed"


def test_correlation_id_is_echoed(client: TestClient):
    response = client.get("/health", headers={"X-Correlation-ID": "abc-123"})
    assert response.headers["x-correlation-id"] == "abc-123"


def test_invalid_configuration_refuses_to_start():
    with pytest.raises(ValueError, match="Configuração inválida"):
        create_app(Settings(telegram_bot_token="t", dialogue_store_backend="redis"))
