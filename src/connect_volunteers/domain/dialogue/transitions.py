"""Função de transição do diálogo, pura e determinística.

Dado (estado atual, evento) retorna (próximo estado, resposta, commit?):
- Sem I/O e sem estado compartilhado (apenas logs estruturados)
- Mesma entrada → mesma saída
- Entrada não reconhecida → mesmo estado, mesmo prompt
- Evento vazio → ignorado (sem mudança, sem resposta)
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

from connect_volunteers.domain.dialogue import texts
from connect_volunteers.domain.dialogue.states import (
    INITIAL_STATE,
    CollectingRecordState,
    DialogueState,
    IdleState,
    SelectingProvideCategoryState,
    SelectingRequestCategoryState,
)
from connect_volunteers.domain.enums import (
    PROVIDING_CATEGORIES,
    RECORD_FIELD_ORDER,
    REQUESTING_CATEGORIES,
    RecordField,
    RequestCategory,
    TransitionOutcome,
)
from connect_volunteers.domain.models import (
    CommitAction,
    ContactRecord,
    InboundEvent,
    OutboundReply,
)
from connect_volunteers.observability.logging import get_logger, mask_session_key

logger: logging.Logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class Transition:
    """Resultado de uma transição.

    Contém:
    - next_state: estado a persistir
    - outcome: classificação do resultado
    - reply: resposta ao usuário (None = não responder)
    - commit: registro a gravar no ledger (apenas na confirmação)
    """

    next_state: DialogueState
    outcome: TransitionOutcome
    reply: OutboundReply | None = None
    commit: CommitAction | None = None


def _reply(session_key: str, text: str, suggested: tuple[str, ...] = ()) -> OutboundReply:
    return OutboundReply(session_key=session_key, text=text, suggested_replies=suggested)


def _start_category_collection(
    category: RequestCategory, session_key: str
) -> Transition:
    return Transition(
        next_state=CollectingRecordState(category=category, record=None),
        outcome=TransitionOutcome.ADVANCED,
        reply=_reply(session_key, texts.FULL_NAME_PROMPT),
    )


def _from_idle(state: IdleState, text: str, session_key: str) -> Transition:
    if text == texts.OFFER_HELP_TOKEN:
        return Transition(
            next_state=SelectingProvideCategoryState(),
            outcome=TransitionOutcome.ADVANCED,
            reply=_reply(
                session_key,
                texts.PROVIDE_MENU_TEXT,
                texts.category_menu(PROVIDING_CATEGORIES),
            ),
        )
    if text == texts.REQUEST_HELP_TOKEN:
        return Transition(
            next_state=SelectingRequestCategoryState(),
            outcome=TransitionOutcome.ADVANCED,
            reply=_reply(
                session_key,
                texts.REQUEST_MENU_TEXT,
                texts.category_menu(REQUESTING_CATEGORIES),
            ),
        )
    return Transition(
        next_state=state,
        outcome=TransitionOutcome.REPROMPTED,
        reply=_reply(session_key, texts.START_REPROMPT_TEXT, texts.START_MENU),
    )


def _from_selecting_provide(
    state: SelectingProvideCategoryState, text: str, session_key: str
) -> Transition:
    category = texts.category_for_token(text, PROVIDING_CATEGORIES)
    if category is not None:
        return _start_category_collection(category, session_key)
    return Transition(
        next_state=state,
        outcome=TransitionOutcome.REPROMPTED,
        reply=_reply(
            session_key,
            texts.PROVIDE_MENU_TEXT,
            texts.category_menu(PROVIDING_CATEGORIES),
        ),
    )


def _from_selecting_request(
    state: SelectingRequestCategoryState, text: str, session_key: str
) -> Transition:
    category = texts.category_for_token(text, REQUESTING_CATEGORIES)
    if category is not None:
        return _start_category_collection(category, session_key)
    return Transition(
        next_state=state,
        outcome=TransitionOutcome.REPROMPTED,
        reply=_reply(
            session_key,
            texts.REQUEST_MENU_TEXT,
            texts.category_menu(REQUESTING_CATEGORIES),
        ),
    )


# Prompt seguinte a cada campo capturado; o comentário leva ao resumo
_PROMPT_AFTER_FIELD: dict[RecordField, str] = {
    RecordField.FULL_NAME: texts.PHONE_NUMBERS_PROMPT,
    RecordField.PHONE_NUMBERS: texts.ADDRESS_PROMPT,
    RecordField.ADDRESS: texts.COMMENTS_PROMPT,
}


def _capture_field(
    state: CollectingRecordState,
    record: ContactRecord,
    field: RecordField,
    text: str,
    session_key: str,
) -> Transition:
    updated = record.with_field(field, text)
    next_state = CollectingRecordState(category=state.category, record=updated)

    if field is RecordField.COMMENTS:
        reply = _reply(
            session_key,
            texts.render_summary(updated.to_completed()),
            texts.CONFIRM_MENU,
        )
    else:
        reply = _reply(session_key, _PROMPT_AFTER_FIELD[field])

    return Transition(next_state=next_state, outcome=TransitionOutcome.ADVANCED, reply=reply)


def _confirm(
    state: CollectingRecordState,
    record: ContactRecord,
    text: str,
    session_key: str,
) -> Transition:
    if text == texts.CONFIRM_TOKEN:
        return Transition(
            next_state=INITIAL_STATE,
            outcome=TransitionOutcome.COMMITTED,
            reply=_reply(session_key, texts.SUBMITTED_TEXT, texts.START_MENU),
            commit=CommitAction(category=state.category, record=record.to_completed()),
        )
    if text == texts.DECLINE_TOKEN:
        return Transition(
            next_state=INITIAL_STATE,
            outcome=TransitionOutcome.DECLINED,
            reply=_reply(session_key, texts.CANCELLED_TEXT, texts.START_MENU),
        )
    return Transition(
        next_state=state,
        outcome=TransitionOutcome.REPROMPTED,
        reply=_reply(session_key, texts.CONFIRM_REPROMPT_TEXT, texts.CONFIRM_MENU),
    )


def _from_collecting(
    state: CollectingRecordState, text: str, session_key: str
) -> Transition:
    record = state.record
    if record is None:
        return _capture_field(
            state, ContactRecord(), RecordField.FULL_NAME, text, session_key
        )

    filled = record.filled_prefix_length()
    if filled is None or filled == 0:
        logger.error(
            "dialogue_record_invariant_violated",
            extra={
                "session_key": mask_session_key(session_key),
                "category": state.category.value,
                "populated_fields": [f.value for f in record.populated_fields()],
            },
        )
        return Transition(next_state=INITIAL_STATE, outcome=TransitionOutcome.INTERNAL_ERROR)

    if filled == len(RECORD_FIELD_ORDER):
        return _confirm(state, record, text, session_key)

    return _capture_field(state, record, RECORD_FIELD_ORDER[filled], text, session_key)


_HANDLERS: dict[type, Callable[..., Transition]] = {
    IdleState: _from_idle,
    SelectingProvideCategoryState: _from_selecting_provide,
    SelectingRequestCategoryState: _from_selecting_request,
    CollectingRecordState: _from_collecting,
}


def transition(state: DialogueState, event: InboundEvent) -> Transition:
    """Aplica um evento ao estado atual.

    Contrato:
    - Nunca lança exceção para entradas do usuário
    - Commit apenas na confirmação afirmativa com registro completo
    - Após commit ou recusa, próximo estado é sempre Idle
    """
    if event.is_empty:
        return Transition(next_state=state, outcome=TransitionOutcome.IGNORED)

    handler = _HANDLERS[type(state)]
    result = handler(state, event.text, event.session_key)

    logger.debug(
        "dialogue_transition",
        extra={
            "session_key": mask_session_key(event.session_key),
            "from_state": state.kind,
            "to_state": result.next_state.kind,
            "outcome": result.outcome.value,
        },
    )
    return result
