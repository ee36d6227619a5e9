from __future__ import annotations

from typing import Protocol


class SecretProvider(Protocol):
    """Fonte dos segredos do bot (token, secret do webhook, credencial Sheets).

    `read(name)` devolve None quando o segredo não existe e levanta
    RuntimeError quando a fonte não pode ser consultada. Valores nunca são
    logados.
    """

    def read(self, name: str) -> str | None: ...
