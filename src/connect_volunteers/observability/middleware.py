"""Correlation id por request HTTP ou por update do long polling."""

from __future__ import annotations

import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

CORRELATION_HEADER = "x-correlation-id"

_correlation_id: ContextVar[str] = ContextVar("correlation_id", default="")


def get_correlation_id() -> str:
    return _correlation_id.get()


def bind_correlation_id(correlation_id: str | None = None) -> str:
    """Fixa o correlation_id do contexto atual; gera um novo se não vier."""
    value = correlation_id or uuid.uuid4().hex
    _correlation_id.set(value)
    return value


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """Propaga o X-Correlation-ID recebido (ou um novo) e o devolve na resposta."""

    async def dispatch(self, request: Request, call_next) -> Response:  # type: ignore[override]
        correlation_id = request.headers.get(CORRELATION_HEADER) or uuid.uuid4().hex
        token = _correlation_id.set(correlation_id)
        try:
            response = await call_next(request)
        finally:
            _correlation_id.reset(token)
        response.headers[CORRELATION_HEADER] = correlation_id
        return response
