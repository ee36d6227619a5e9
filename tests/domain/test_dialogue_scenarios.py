"""Cenários completos do diálogo e propriedades sobre estados alcançáveis."""

from __future__ import annotations

from collections import deque

from connect_volunteers.domain.dialogue import (
    INITIAL_STATE,
    CollectingRecordState,
    DialogueState,
    IdleState,
    Transition,
    transition,
)
from connect_volunteers.domain.dialogue import texts
from connect_volunteers.domain.enums import RequestCategory, TransitionOutcome
from connect_volunteers.domain.models import InboundEvent

KEY = "42"


def _run(messages: list[str | None], state: DialogueState = INITIAL_STATE) -> list[Transition]:
    results: list[Transition] = []
    for text in messages:
        result = transition(state, InboundEvent(session_key=KEY, text=text))
        results.append(result)
        state = result.next_state
    return results


def test_driver_offer_is_committed_to_driver_ledger():
    results = _run(
        [
            texts.OFFER_HELP_TOKEN,
            "Я водій з власним авто",
            "Коваль Олег Петрович",
            "+380931234567",
            "Львів",
            "-",
            texts.CONFIRM_TOKEN,
        ]
    )

    commits = [r.commit for r in results if r.commit is not None]
    assert len(commits) == 1
    assert commits[0].category is RequestCategory.PROVIDING_DRIVER
    assert commits[0].record.as_row("ts") == [
        "Коваль Олег Петрович",
        "+380931234567",
        "Львів",
        "-",
        "ts",
    ]
    assert results[-1].next_state == IdleState()
    assert results[-1].reply.text == texts.SUBMITTED_TEXT


def test_evacuation_request_is_committed():
    results = _run(
        [
            texts.REQUEST_HELP_TOKEN,
            "Евакуація",
            "Бондаренко Марія",
            "+380501112233, +380672223344",
            "Ірпінь, вул. Соборна 5",
            "Двоє дітей",
            texts.CONFIRM_TOKEN,
        ]
    )

    assert results[-1].outcome is TransitionOutcome.COMMITTED
    assert results[-1].commit.category is RequestCategory.NEED_EVACUATION
    assert results[-1].commit.record.comments == "Двоє дітей"


def test_declined_request_writes_nothing():
    results = _run(
        [
            texts.REQUEST_HELP_TOKEN,
            "Потрібна гуманітарна допомога",
            "Мельник Анна",
            "+380991234567",
            "Буча",
            "-",
            texts.DECLINE_TOKEN,
        ]
    )

    assert all(r.commit is None for r in results)
    assert results[-1].outcome is TransitionOutcome.DECLINED
    assert results[-1].next_state == IdleState()


def test_unrecognized_confirmation_then_confirm():
    results = _run(
        [
            texts.OFFER_HELP_TOKEN,
            "Корисні контакти",
            "Ткаченко Юрій",
            "+380631234567",
            "Одеса",
            "Маю контакти перевізників",
            "так",
            texts.CONFIRM_TOKEN,
        ]
    )

    assert results[-2].outcome is TransitionOutcome.REPROMPTED
    assert results[-2].reply.text == texts.CONFIRM_REPROMPT_TEXT
    assert results[-2].commit is None
    assert results[-1].commit.category is RequestCategory.PROVIDING_USEFUL_CONTACT


def test_empty_messages_mid_flow_do_not_advance():
    results = _run(
        [
            texts.OFFER_HELP_TOKEN,
            "Можу збирати гуманітарну чи фінансову допомогу",
            None,
            "Савченко Ольга",
            "   ",
            "+380671234567",
            "Дніпро",
            "",
            "-",
            texts.CONFIRM_TOKEN,
        ]
    )

    ignored = [r for r in results if r.outcome is TransitionOutcome.IGNORED]
    assert len(ignored) == 3
    assert all(r.reply is None for r in ignored)
    commit = results[-1].commit
    assert commit.category is RequestCategory.PROVIDING_COLLECTING_HUMANITARIAN_HELP
    assert commit.record.full_name == "Савченко Ольга"
    assert commit.record.phone_numbers == "+380671234567"


def test_new_session_can_start_after_commit():
    first = _run(
        [
            texts.REQUEST_HELP_TOKEN,
            "Евакуація",
            "А",
            "Б",
            "В",
            "Г",
            texts.CONFIRM_TOKEN,
        ]
    )
    second = _run([texts.OFFER_HELP_TOKEN], state=first[-1].next_state)

    assert second[0].outcome is TransitionOutcome.ADVANCED


_TOKENS: list[str | None] = [
    texts.OFFER_HELP_TOKEN,
    texts.REQUEST_HELP_TOKEN,
    texts.CONFIRM_TOKEN,
    texts.DECLINE_TOKEN,
    *texts.CATEGORY_TOKENS.values(),
    "довільний текст",
    "",
    None,
]

# durante a coleta todo texto vira dado; dois valores bastam
_FIELD_VALUES: list[str | None] = ["довільний текст", texts.CONFIRM_TOKEN, "", None]


def _alphabet(state: DialogueState) -> list[str | None]:
    if isinstance(state, CollectingRecordState) and not (
        state.record is not None and state.record.is_complete()
    ):
        return _FIELD_VALUES
    return _TOKENS


def test_reachable_states_keep_record_prefix():
    """Busca em largura sobre entradas representativas a partir de Idle.

    Em todo estado alcançável o registro é None ou um prefixo não vazio da
    ordem de campos, e INTERNAL_ERROR nunca ocorre.
    """
    seen: set[str] = set()
    queue: deque[DialogueState] = deque([INITIAL_STATE])
    commits = 0

    while queue:
        state = queue.popleft()
        marker = state.model_dump_json()
        if marker in seen:
            continue
        seen.add(marker)

        if isinstance(state, CollectingRecordState) and state.record is not None:
            assert state.record.filled_prefix_length() not in (None, 0)

        for text in _alphabet(state):
            result = transition(state, InboundEvent(session_key=KEY, text=text))
            assert result.outcome is not TransitionOutcome.INTERNAL_ERROR
            if result.commit is not None:
                commits += 1
                assert result.next_state == IdleState()
                assert result.commit.record.full_name is not None
            queue.append(result.next_state)

    assert commits > 0
    # Idle + 2 menus + 5 categorias x (sem registro + 2 + 4 + 8 + 16 registros)
    assert len(seen) == 1 + 2 + 5 * 31


def test_field_sequence_from_fresh_collection_ends_in_summary():
    results = _run(
        ["Jane Doe", "555-0100", "12 Main St", "-"],
        state=CollectingRecordState(category=RequestCategory.PROVIDING_DRIVER),
    )

    final = results[-1].next_state
    assert final.record.is_complete()
    summary = results[-1].reply.text
    for value in ("Jane Doe", "555-0100", "12 Main St", "Коментар: -"):
        assert value in summary
    assert results[-1].reply.suggested_replies == texts.CONFIRM_MENU


def test_unrecognized_input_is_a_no_op_in_every_menu_state():
    complete = _run(
        ["Jane Doe", "555-0100", "12 Main St", "-"],
        state=CollectingRecordState(category=RequestCategory.NEED_EVACUATION),
    )[-1].next_state
    menu_states = [
        INITIAL_STATE,
        _run([texts.OFFER_HELP_TOKEN])[0].next_state,
        _run([texts.REQUEST_HELP_TOKEN])[0].next_state,
        complete,
    ]

    for state in menu_states:
        first = transition(state, InboundEvent(session_key=KEY, text="???"))
        second = transition(first.next_state, InboundEvent(session_key=KEY, text="???"))

        assert first.next_state == state
        assert first.outcome is TransitionOutcome.REPROMPTED
        assert first.commit is None
        assert first.reply == second.reply
