"""Latência das portas do driver (store, transporte, ledger)."""

from __future__ import annotations

import contextlib
import time
from collections.abc import Iterator

from connect_volunteers.observability.logging import get_logger

logger = get_logger(__name__)


@contextlib.contextmanager
def timed(component: str) -> Iterator[None]:
    """Loga `component_latency` com o tempo gasto e se o bloco levantou."""
    start = time.perf_counter()
    failed = False
    try:
        yield
    except BaseException:
        failed = True
        raise
    finally:
        logger.info(
            "component_latency",
            extra={
                "component": component,
                "elapsed_ms": round((time.perf_counter() - start) * 1000, 2),
                "failed": failed,
            },
        )
