"""Camada de aplicação: driver de sessão e processamento inbound."""

from connect_volunteers.application.inbound import (
    InboundResult,
    InboundStatus,
    process_update,
)
from connect_volunteers.application.session_driver import DriverOutcome, SessionDriver

__all__ = [
    "SessionDriver",
    "DriverOutcome",
    "process_update",
    "InboundResult",
    "InboundStatus",
]
