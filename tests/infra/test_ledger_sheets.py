"""Testes do ledger Google Sheets e do ledger em memória."""

from __future__ import annotations

import json
from datetime import UTC, datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from connect_volunteers.config.destinations import LedgerDestinations
from connect_volunteers.domain.enums import RequestCategory
from connect_volunteers.domain.models import CompletedRecord
from connect_volunteers.domain.protocols import LedgerSinkError
from connect_volunteers.infra.google_auth import ServiceAccountTokenProvider
from connect_volunteers.infra.http import HttpClient, HttpClientConfig
from connect_volunteers.infra.ledger_memory import InMemoryLedgerSink
from connect_volunteers.infra.ledger_sheets import GoogleSheetsLedgerSink, format_timestamp

KYIV = timezone(timedelta(hours=3))

RECORD = CompletedRecord(
    full_name="Іваненко Іван",
    phone_numbers="+380501234567",
    address="Київ",
    comments="-",
)


def _destinations() -> LedgerDestinations:
    return LedgerDestinations.from_mapping(
        {category: f"sheet-{category.value}" for category in RequestCategory}
    )


def _tokens(token: str = "ya29.test") -> MagicMock:
    provider = MagicMock(spec=ServiceAccountTokenProvider)
    provider.get_token = AsyncMock(return_value=token)
    return provider


def _sink(handler, tokens=None) -> GoogleSheetsLedgerSink:
    http = HttpClient(HttpClientConfig(max_retries=0))
    http._client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return GoogleSheetsLedgerSink(
        http,
        tokens or _tokens(),
        _destinations(),
        base_url="https://sheets.test/v4",
        sheet_range="Sheet1",
    )


def test_format_timestamp_uses_offset_with_colon():
    ts = datetime(2022, 3, 1, 12, 30, 15, tzinfo=KYIV)
    assert format_timestamp(ts) == "2022-03-01 12:30:15+03:00"


def test_format_timestamp_negative_offset():
    ts = datetime(2022, 3, 1, 1, 2, 3, tzinfo=timezone(timedelta(hours=-5)))
    assert format_timestamp(ts) == "2022-03-01 01:02:03-05:00"


@pytest.mark.asyncio
async def test_append_posts_row_to_category_spreadsheet():
    captured: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        return httpx.Response(200, json={"updates": {"updatedRange": "Sheet1!A5:E5"}})

    sink = _sink(handler)
    await sink.append(
        RequestCategory.NEED_EVACUATION,
        RECORD,
        datetime(2022, 3, 1, 12, 30, 15, tzinfo=KYIV),
    )

    request = captured[0]
    assert request.method == "POST"
    assert request.url.path == "/v4/spreadsheets/sheet-need_evacuation/values/Sheet1:append"
    assert request.url.params["valueInputOption"] == "USER_ENTERED"
    assert request.headers["Authorization"] == "Bearer ya29.test"
    body = json.loads(request.content)
    assert body == {
        "majorDimension": "ROWS",
        "values": [["Іваненко Іван", "+380501234567", "Київ", "-", "2022-03-01 12:30:15+03:00"]],
    }


@pytest.mark.asyncio
async def test_http_failure_raises_ledger_error():
    sink = _sink(lambda request: httpx.Response(403, json={"error": {}}))

    with pytest.raises(LedgerSinkError):
        await sink.append(RequestCategory.PROVIDING_DRIVER, RECORD, datetime.now(UTC))


@pytest.mark.asyncio
async def test_token_failure_raises_ledger_error():
    tokens = MagicMock(spec=ServiceAccountTokenProvider)
    tokens.get_token = AsyncMock(side_effect=RuntimeError("refresh failed"))
    sink = _sink(lambda request: httpx.Response(200, json={}), tokens=tokens)

    with pytest.raises(LedgerSinkError):
        await sink.append(RequestCategory.PROVIDING_DRIVER, RECORD, datetime.now(UTC))


def test_destinations_require_every_category():
    mapping = {category: "id" for category in RequestCategory}
    mapping[RequestCategory.NEED_HUMANITARIAN_HELP] = None

    with pytest.raises(ValueError, match="need_humanitarian_help"):
        LedgerDestinations.from_mapping(mapping)


def test_destinations_are_immutable():
    destinations = _destinations()
    with pytest.raises(TypeError):
        destinations.spreadsheet_ids[RequestCategory.NEED_EVACUATION] = "other"  # type: ignore[index]


@pytest.mark.asyncio
async def test_token_provider_refreshes_only_when_invalid():
    credentials = MagicMock()
    credentials.valid = False
    credentials.token = "fresh"

    def refresh(_request):
        credentials.valid = True

    credentials.refresh.side_effect = refresh
    provider = ServiceAccountTokenProvider(credentials)

    with patch("connect_volunteers.infra.google_auth.Request"):
        assert await provider.get_token() == "fresh"
        assert await provider.get_token() == "fresh"

    assert credentials.refresh.call_count == 1


@pytest.mark.asyncio
async def test_in_memory_sink_records_rows():
    sink = InMemoryLedgerSink()
    ts = datetime(2022, 3, 1, tzinfo=KYIV)

    await sink.append(RequestCategory.PROVIDING_USEFUL_CONTACT, RECORD, ts)

    rows = sink.rows_for(RequestCategory.PROVIDING_USEFUL_CONTACT)
    assert len(rows) == 1
    assert rows[0].record == RECORD
    assert rows[0].timestamp == ts
    assert sink.rows_for(RequestCategory.NEED_EVACUATION) == []
