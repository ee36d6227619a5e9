"""Rotas HTTP: healthcheck e webhook do Telegram."""

from __future__ import annotations

import json
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Request, status

from connect_volunteers.adapters.telegram.signature import verify_telegram_secret
from connect_volunteers.api.dependencies import (
    get_dedupe_store,
    get_session_driver,
    get_settings,
)
from connect_volunteers.application.inbound import process_update
from connect_volunteers.application.session_driver import SessionDriver
from connect_volunteers.config.settings import Settings
from connect_volunteers.domain.protocols import DedupeError, DedupeStore, DialogueStoreError
from connect_volunteers.observability.logging import get_logger
from connect_volunteers.observability.middleware import get_correlation_id

logger = get_logger(__name__)

router = APIRouter()


@router.get("/health")
def health(settings: Settings = Depends(get_settings)) -> dict[str, str]:
    """Healthcheck simples para Cloud Run."""
    return {"status": "ok", "service": settings.service_name, "version": settings.version}


@router.post("/webhooks/telegram")
async def telegram_webhook(
    request: Request,
    settings: Settings = Depends(get_settings),
    dedupe_store: DedupeStore = Depends(get_dedupe_store),
    driver: SessionDriver = Depends(get_session_driver),
) -> dict[str, Any]:
    """Processa o update inline; só devolve não-200 quando o Telegram deve reenviar."""
    secret_result = verify_telegram_secret(request.headers, settings.telegram_webhook_secret)
    if not secret_result.valid:
        logger.warning("telegram_webhook_rejected", extra={"reason": secret_result.error})
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="invalid_secret_token")

    raw_body = await request.body()
    try:
        payload = json.loads(raw_body or b"{}")
    except json.JSONDecodeError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="invalid_json") from exc
    if not isinstance(payload, dict):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="invalid_json")

    correlation_id = get_correlation_id()
    try:
        result = await process_update(payload, dedupe_store, driver)
    except (DialogueStoreError, DedupeError) as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail={"error": "state_unavailable", "correlation_id": correlation_id},
        ) from exc

    response: dict[str, Any] = {
        "ok": True,
        "status": result.status.value,
        "update_id": result.update_id,
        "correlation_id": correlation_id,
        "secret_validated": not secret_result.skipped,
    }
    if result.outcome is not None:
        response["outcome"] = result.outcome.outcome.value
        response["reply_delivered"] = result.outcome.reply_delivered
    return response
