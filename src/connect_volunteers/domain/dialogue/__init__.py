"""Diálogo de cadastro: estados, textos e função de transição.

Exporta:
- DialogueState e suas quatro variantes
- transition: função pura (estado, evento) → Transition
"""

from connect_volunteers.domain.dialogue.states import (
    INITIAL_STATE,
    CollectingRecordState,
    DialogueState,
    IdleState,
    SelectingProvideCategoryState,
    SelectingRequestCategoryState,
    dump_state,
    is_idle,
    load_state,
)
from connect_volunteers.domain.dialogue.transitions import Transition, transition

__all__ = [
    "DialogueState",
    "IdleState",
    "SelectingProvideCategoryState",
    "SelectingRequestCategoryState",
    "CollectingRecordState",
    "INITIAL_STATE",
    "Transition",
    "transition",
    "dump_state",
    "load_state",
    "is_idle",
]
