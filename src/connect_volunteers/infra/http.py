"""Cliente HTTP centralizado com retry, timeout e logging.

Usado pelo transporte Telegram e pelo ledger Google Sheets:
- Retry com backoff exponencial (429, 5xx, timeout, conexão)
- Timeout obrigatório por requisição
- Logging estruturado sem tokens (URL do Bot API carrega o token)
"""

from __future__ import annotations

import asyncio
import logging
import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import httpx

from connect_volunteers.observability.logging import get_logger

if TYPE_CHECKING:
    from connect_volunteers.config.settings import Settings

logger: logging.Logger = get_logger(__name__)

_BOT_TOKEN_PATTERN = re.compile(r"/bot[^/]+/")
_ACCESS_TOKEN_PATTERN = re.compile(r"access_token=[^&]+")


def _sanitize_url(url: str) -> str:
    """Remove tokens da URL para logging seguro."""
    url = _BOT_TOKEN_PATTERN.sub("/bot***/", url)
    return _ACCESS_TOKEN_PATTERN.sub("access_token=***", url)


@dataclass
class HttpClientConfig:
    """Configuração do cliente HTTP.

    Valores padrão são seguros e conservadores.
    """

    timeout_seconds: float = 10.0
    max_retries: int = 2
    backoff_base_seconds: float = 1.0
    backoff_max_seconds: float = 10.0
    default_headers: dict[str, str] = field(default_factory=dict)


class HttpError(Exception):
    """Erro de requisição HTTP sem expor informações sensíveis."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        is_retryable: bool = False,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.is_retryable = is_retryable


def _is_retryable_status(status_code: int) -> bool:
    """Determina se status HTTP permite retry (429 ou 5xx)."""
    return status_code == 429 or 500 <= status_code < 600


def _calculate_backoff(attempt: int, base_seconds: float, max_seconds: float) -> float:
    """Calcula tempo de espera com backoff exponencial."""
    backoff = (2**attempt) * base_seconds
    return min(backoff, max_seconds)


def _handle_transient_exception(
    exc: Exception,
    method: str,
    url: str,
    attempt: int,
) -> HttpError:
    """Trata exceções transitórias (timeout, conexão) e retorna HttpError."""
    if isinstance(exc, httpx.TimeoutException):
        logger.warning(
            "Timeout em requisição HTTP",
            extra={"method": method, "url": _sanitize_url(url), "attempt": attempt + 1},
        )
        return HttpError("Timeout", is_retryable=True)

    if isinstance(exc, httpx.TransportError):
        logger.warning(
            "Erro de conexão HTTP",
            extra={
                "method": method,
                "url": _sanitize_url(url),
                "attempt": attempt + 1,
                "error_type": type(exc).__name__,
            },
        )
        return HttpError("Erro de conexão", is_retryable=True)

    logger.error(
        "Erro inesperado em requisição HTTP",
        extra={"method": method, "url": _sanitize_url(url), "error_type": type(exc).__name__},
    )
    raise HttpError(f"Erro inesperado: {type(exc).__name__}") from exc


class HttpClient:
    """Cliente HTTP assíncrono com retry e logging.

    Uso típico:
        async with HttpClient(config) as client:
            response = await client.post(url, json=payload)
    """

    def __init__(self, config: HttpClientConfig | None = None) -> None:
        self._config = config or HttpClientConfig()
        self._client: httpx.AsyncClient | None = None

    @property
    def config(self) -> HttpClientConfig:
        return self._config

    async def _get_client(self) -> httpx.AsyncClient:
        """Retorna cliente httpx (lazy loading)."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self._config.timeout_seconds),
                headers=self._config.default_headers,
            )
        return self._client

    async def close(self) -> None:
        """Fecha o cliente e libera recursos."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> HttpClient:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        """Executa requisição com retry automático.

        Raises:
            HttpError: status não retentável ou todas as tentativas falharam
        """
        client = await self._get_client()
        last_error: HttpError | None = None
        cfg = self._config

        for attempt in range(cfg.max_retries + 1):
            logger.debug(
                "Executando requisição HTTP",
                extra={"method": method, "url": _sanitize_url(url), "attempt": attempt + 1},
            )

            try:
                response = await client.request(method, url, **kwargs)
            except Exception as exc:
                last_error = _handle_transient_exception(exc, method, url, attempt)
            else:
                if response.is_success:
                    return response
                if not _is_retryable_status(response.status_code):
                    logger.warning(
                        "Requisição HTTP falhou (não retryable)",
                        extra={
                            "method": method,
                            "url": _sanitize_url(url),
                            "status_code": response.status_code,
                        },
                    )
                    raise HttpError(
                        f"HTTP {response.status_code}",
                        status_code=response.status_code,
                        is_retryable=False,
                    )
                last_error = HttpError(
                    f"HTTP {response.status_code}",
                    status_code=response.status_code,
                    is_retryable=True,
                )

            if attempt < cfg.max_retries:
                backoff = _calculate_backoff(
                    attempt, cfg.backoff_base_seconds, cfg.backoff_max_seconds
                )
                logger.info(
                    "Aguardando backoff antes de retry",
                    extra={"backoff_seconds": backoff, "next_attempt": attempt + 2},
                )
                await asyncio.sleep(backoff)

        logger.error(
            "Esgotou tentativas de retry",
            extra={"method": method, "url": _sanitize_url(url), "total_attempts": cfg.max_retries + 1},
        )
        raise last_error or HttpError("Falha após todos os retries")

    async def get(self, url: str, **kwargs: Any) -> httpx.Response:
        """Executa GET com retry."""
        return await self._request("GET", url, **kwargs)

    async def post(
        self,
        url: str,
        json: dict[str, Any] | None = None,
        **kwargs: Any,
    ) -> httpx.Response:
        """Executa POST com retry."""
        return await self._request("POST", url, json=json, **kwargs)


def create_http_client(
    settings: Settings,
    *,
    timeout_seconds: float,
    max_retries: int,
    backoff_base_seconds: float,
) -> HttpClient:
    """Factory para criar cliente HTTP com User-Agent do serviço."""
    config = HttpClientConfig(
        timeout_seconds=timeout_seconds,
        max_retries=max_retries,
        backoff_base_seconds=backoff_base_seconds,
        default_headers={"User-Agent": f"{settings.service_name}/{settings.version}"},
    )

    logger.info(
        "Cliente HTTP criado",
        extra={"timeout_seconds": config.timeout_seconds, "max_retries": config.max_retries},
    )
    return HttpClient(config)
