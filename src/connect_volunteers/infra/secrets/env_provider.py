from __future__ import annotations

import os


class EnvSecretProvider:
    """Segredos em variáveis de ambiente (development)."""

    def read(self, name: str) -> str | None:
        # vazio conta como ausente
        return os.getenv(name) or None
