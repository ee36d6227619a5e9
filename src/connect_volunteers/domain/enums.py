"""Enums de domínio do bot de voluntários.

Categorias fechadas em tempo de build; a categoria escolhida decide apenas o
destino no ledger e o menu exibido, nunca a lógica de coleta de campos.
"""

from __future__ import annotations

from enum import StrEnum


class RequestCategory(StrEnum):
    """Propósitos de cadastro suportados pelo fluxo."""

    # === Oferta de ajuda ===
    PROVIDING_DRIVER = "providing_driver"
    """Motorista com carro próprio (transporte/evacuação)."""

    PROVIDING_COLLECTING_HUMANITARIAN_HELP = "providing_collecting_humanitarian_help"
    """Pode arrecadar ajuda humanitária ou financeira."""

    PROVIDING_USEFUL_CONTACT = "providing_useful_contact"
    """Contato útil para a coordenação."""

    # === Pedido de ajuda ===
    NEED_EVACUATION = "need_evacuation"
    """Pedido de evacuação."""

    NEED_HUMANITARIAN_HELP = "need_humanitarian_help"
    """Pedido de ajuda humanitária."""


PROVIDING_CATEGORIES = (
    RequestCategory.PROVIDING_DRIVER,
    RequestCategory.PROVIDING_COLLECTING_HUMANITARIAN_HELP,
    RequestCategory.PROVIDING_USEFUL_CONTACT,
)
"""Categorias de oferta, na ordem do menu."""

REQUESTING_CATEGORIES = (
    RequestCategory.NEED_EVACUATION,
    RequestCategory.NEED_HUMANITARIAN_HELP,
)
"""Categorias de pedido, na ordem do menu."""


class TransitionOutcome(StrEnum):
    """Classificação do resultado de uma transição (para logs e métricas)."""

    ADVANCED = "ADVANCED"
    """Estado avançou (menu escolhido ou campo capturado)."""

    REPROMPTED = "REPROMPTED"
    """Entrada não reconhecida; mesmo estado, mesmo prompt."""

    IGNORED = "IGNORED"
    """Evento vazio ou sem texto; sem mudança e sem resposta."""

    COMMITTED = "COMMITTED"
    """Usuário confirmou; registro deve ir ao ledger."""

    DECLINED = "DECLINED"
    """Usuário recusou; registro descartado."""

    INTERNAL_ERROR = "INTERNAL_ERROR"
    """Registro parcial malformado; sessão reiniciada."""


class RecordField(StrEnum):
    """Campos do registro, na ordem estrita de coleta."""

    FULL_NAME = "full_name"
    PHONE_NUMBERS = "phone_numbers"
    ADDRESS = "address"
    COMMENTS = "comments"


RECORD_FIELD_ORDER = (
    RecordField.FULL_NAME,
    RecordField.PHONE_NUMBERS,
    RecordField.ADDRESS,
    RecordField.COMMENTS,
)
