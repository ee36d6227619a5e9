"""Tabela imutável categoria → planilha de destino.

Construída uma vez no startup e injetada no ledger; os IDs são configuração,
a tabela (uma planilha por categoria) é fixa.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType

from connect_volunteers.domain.enums import RequestCategory


@dataclass(frozen=True, slots=True)
class LedgerDestinations:
    """Destino do ledger para cada RequestCategory."""

    spreadsheet_ids: Mapping[RequestCategory, str]

    @classmethod
    def from_mapping(cls, mapping: Mapping[RequestCategory, str | None]) -> LedgerDestinations:
        """Valida que toda categoria tem destino e congela a tabela."""
        missing = [c.value for c in RequestCategory if not mapping.get(c)]
        if missing:
            raise ValueError(f"Sem planilha de destino para: {', '.join(missing)}")
        return cls(spreadsheet_ids=MappingProxyType({c: mapping[c] for c in RequestCategory}))

    def for_category(self, category: RequestCategory) -> str:
        return self.spreadsheet_ids[category]
