"""Configurações centralizadas do connect_volunteers.

Uso típico:
    from connect_volunteers.config import get_settings
"""

from connect_volunteers.config.destinations import LedgerDestinations
from connect_volunteers.config.settings import (
    SHEETS_API_BASE_URL,
    TELEGRAM_API_BASE_URL,
    Settings,
    get_settings,
)

__all__ = [
    "Settings",
    "get_settings",
    "LedgerDestinations",
    "TELEGRAM_API_BASE_URL",
    "SHEETS_API_BASE_URL",
]
