"""Estados do diálogo de cadastro.

União etiquetada (campo `kind`) com exatamente quatro variantes:
- IdleState: sem cadastro ativo; estado inicial e terminal
- SelectingProvideCategoryState: usuário quer ajudar, escolhendo categoria
- SelectingRequestCategoryState: usuário precisa de ajuda, escolhendo categoria
- CollectingRecordState: coletando campos para uma categoria

Serialização JSON via pydantic TypeAdapter (persistência em Redis).
"""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from connect_volunteers.domain.enums import RequestCategory
from connect_volunteers.domain.models import ContactRecord


class IdleState(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["idle"] = "idle"


class SelectingProvideCategoryState(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["selecting_provide_category"] = "selecting_provide_category"


class SelectingRequestCategoryState(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["selecting_request_category"] = "selecting_request_category"


class CollectingRecordState(BaseModel):
    """Coleta ativa; `record` é None até o primeiro campo ser capturado."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["collecting_record"] = "collecting_record"
    category: RequestCategory
    record: ContactRecord | None = None


DialogueState = Annotated[
    IdleState
    | SelectingProvideCategoryState
    | SelectingRequestCategoryState
    | CollectingRecordState,
    Field(discriminator="kind"),
]

INITIAL_STATE = IdleState()
"""Estado de toda sessão nunca vista (ausência equivale a Idle)."""

_STATE_ADAPTER: TypeAdapter[DialogueState] = TypeAdapter(DialogueState)


def dump_state(state: DialogueState) -> str:
    """Serializa estado para JSON."""
    return _STATE_ADAPTER.dump_json(state).decode("utf-8")


def load_state(payload: str | bytes) -> DialogueState:
    """Desserializa estado de JSON; levanta pydantic.ValidationError se inválido."""
    return _STATE_ADAPTER.validate_json(payload)


def is_idle(state: DialogueState) -> bool:
    return isinstance(state, IdleState)
