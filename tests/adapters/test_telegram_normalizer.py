"""Testes da normalização de Updates do Telegram."""

from __future__ import annotations

from connect_volunteers.adapters.telegram.normalizer import normalize_update, parse_update


def _update(text: str | None = "Я можу допомогти", chat_type: str = "private") -> dict:
    message: dict = {
        "message_id": 10,
        "date": 1646136000,
        "chat": {"id": 555123, "type": chat_type, "first_name": "Олена"},
        "from": {"id": 555123, "is_bot": False, "first_name": "Олена"},
    }
    if text is not None:
        message["text"] = text
    return {"update_id": 9001, "message": message}


def test_private_text_message_becomes_event():
    event = normalize_update(parse_update(_update()))

    assert event.session_key == "555123"
    assert event.text == "Я можу допомогти"
    assert event.event_id == "9001"


def test_text_is_not_trimmed():
    event = normalize_update(parse_update(_update("  Київ  ")))
    assert event.text == "  Київ  "


def test_message_without_text_is_empty_event():
    payload = _update(text=None)
    payload["message"]["sticker"] = {"file_id": "abc"}

    event = normalize_update(parse_update(payload))

    assert event is not None
    assert event.is_empty


def test_group_chat_is_skipped():
    assert normalize_update(parse_update(_update(chat_type="group"))) is None


def test_edited_message_is_skipped():
    payload = _update()
    payload["edited_message"] = payload.pop("message")

    assert normalize_update(parse_update(payload)) is None


def test_callback_only_update_is_skipped():
    update = parse_update({"update_id": 1, "callback_query": {"id": "x"}})
    assert update is not None
    assert normalize_update(update) is None


def test_invalid_payload_returns_none():
    assert parse_update({"message": {"text": "no update id"}}) is None
    assert parse_update({"update_id": "not-a-number"}) is None
