"""Dependências injetadas nas rotas."""

from __future__ import annotations

from fastapi import Request

from connect_volunteers.application.session_driver import SessionDriver
from connect_volunteers.config.settings import Settings
from connect_volunteers.domain.protocols import DedupeStore


def get_settings(request: Request) -> Settings:
    """Retorna settings da aplicação."""

    return request.app.state.settings


def get_dedupe_store(request: Request) -> DedupeStore:
    """Retorna o store de dedupe ativo."""

    return request.app.state.runtime.dedupe


def get_session_driver(request: Request) -> SessionDriver:
    return request.app.state.runtime.driver
