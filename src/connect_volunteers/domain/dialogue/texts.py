"""Textos e tokens do diálogo (ucraniano, idênticos aos botões do bot).

Tokens são comparados por igualdade exata com o texto recebido.
"""

from __future__ import annotations

from connect_volunteers.domain.enums import RequestCategory
from connect_volunteers.domain.models import CompletedRecord

# -----------------------------------------------------------------------------
# Menu principal
# -----------------------------------------------------------------------------
OFFER_HELP_TOKEN = "Я можу допомогти"
REQUEST_HELP_TOKEN = "Я потребую допомоги"

START_MENU = (OFFER_HELP_TOKEN, REQUEST_HELP_TOKEN)
START_REPROMPT_TEXT = f'Оберіть "{OFFER_HELP_TOKEN}" чи "{REQUEST_HELP_TOKEN}"'

# -----------------------------------------------------------------------------
# Menus de categoria
# -----------------------------------------------------------------------------
CATEGORY_TOKENS: dict[RequestCategory, str] = {
    RequestCategory.PROVIDING_DRIVER: "Я водій з власним авто",
    RequestCategory.PROVIDING_COLLECTING_HUMANITARIAN_HELP: (
        "Можу збирати гуманітарну чи фінансову допомогу"
    ),
    RequestCategory.PROVIDING_USEFUL_CONTACT: "Корисні контакти",
    RequestCategory.NEED_EVACUATION: "Евакуація",
    RequestCategory.NEED_HUMANITARIAN_HELP: "Потрібна гуманітарна допомога",
}

PROVIDE_MENU_TEXT = (
    "Наразі в нас є можливість координувати водіїв, що допомогають з евакуацією, "
    "надавати гуманітарну допомогу, та ми завжди відкриті до корисних контактів. "
    "Оберіть один з варіантів."
)
REQUEST_MENU_TEXT = "Наразі ми координуємо запити на евакуацію та гуманітарну допомогу."

# -----------------------------------------------------------------------------
# Coleta de campos
# -----------------------------------------------------------------------------
FULL_NAME_PROMPT = "Ваше ПІБ? (призвіще, імʼя, побатькові)"
PHONE_NUMBERS_PROMPT = "Контактні номери телефону?"
ADDRESS_PROMPT = "Адреса?"
COMMENT_PLACEHOLDER = "-"
COMMENTS_PROMPT = (
    "Додатковий коментар? "
    f'(якшо нема, відправте повідомлення з текстом "{COMMENT_PLACEHOLDER}")'
)

# -----------------------------------------------------------------------------
# Confirmação
# -----------------------------------------------------------------------------
CONFIRM_TOKEN = "Так, відправити інформацію волонтерам"
DECLINE_TOKEN = "Ні, почати спочатку"
CONFIRM_MENU = (CONFIRM_TOKEN, DECLINE_TOKEN)

CONFIRM_QUESTION = "Ви бажаєте відправити цей запит волонтерам?"
CONFIRM_REPROMPT_TEXT = (
    "Ви бажаєте відправити запит волонтерам? "
    f'(відправте лише "{CONFIRM_TOKEN}" або "{DECLINE_TOKEN}")'
)

SUBMITTED_TEXT = (
    "Дякуємо! Вашу інформацію відправлено волонтерам.\n\n"
    "Чекайте коли з вами звʼяжуться. Також можете надіслати іншу заявку."
)
CANCELLED_TEXT = "Добре, вашу заявку скасовано. Можете почати знову."


def category_menu(categories: tuple[RequestCategory, ...]) -> tuple[str, ...]:
    """Botões de um menu de categorias, na ordem dada."""
    return tuple(CATEGORY_TOKENS[c] for c in categories)


def category_for_token(
    text: str, categories: tuple[RequestCategory, ...]
) -> RequestCategory | None:
    """Categoria cujo token é exatamente `text`, restrita a `categories`."""
    for category in categories:
        if CATEGORY_TOKENS[category] == text:
            return category
    return None


def render_summary(record: CompletedRecord) -> str:
    """Resumo legível do registro completo + pergunta de confirmação."""
    return (
        "Ось таку інформацію ми зібрали:\n"
        f"ПІБ: {record.full_name}\n"
        f"Контактні номери телефону: {record.phone_numbers}\n"
        f"Адреса: {record.address}\n"
        f"Коментар: {record.comments}\n\n"
        f"{CONFIRM_QUESTION}"
    )
