"""Modelos de domínio: registro de contato, eventos e respostas.

Todos imutáveis: o registro é substituído por inteiro a cada transição,
nunca alterado campo a campo.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from connect_volunteers.domain.enums import RECORD_FIELD_ORDER, RecordField, RequestCategory


class ContactRecord(BaseModel):
    """Registro parcial em construção (quatro campos opcionais)."""

    model_config = ConfigDict(frozen=True)

    full_name: str | None = None
    phone_numbers: str | None = None
    address: str | None = None
    comments: str | None = None

    def populated_fields(self) -> tuple[RecordField, ...]:
        """Campos preenchidos, na ordem canônica."""
        return tuple(f for f in RECORD_FIELD_ORDER if getattr(self, f.value) is not None)

    def filled_prefix_length(self) -> int | None:
        """Quantidade de campos preenchidos se formarem um prefixo da ordem.

        Retorna None quando há lacuna (ex.: telefone sem nome), o que viola
        o invariante de coleta em ordem.
        """
        populated = self.populated_fields()
        if populated != RECORD_FIELD_ORDER[: len(populated)]:
            return None
        return len(populated)

    def is_complete(self) -> bool:
        return self.filled_prefix_length() == len(RECORD_FIELD_ORDER)

    def with_field(self, field: RecordField, value: str) -> ContactRecord:
        """Retorna novo registro com `field` preenchido."""
        return self.model_copy(update={field.value: value})

    def to_completed(self) -> CompletedRecord:
        """Converte para registro completo; falha se algum campo faltar."""
        if not self.is_complete():
            raise ValueError("record is incomplete or out of order")
        return CompletedRecord(
            full_name=self.full_name,
            phone_numbers=self.phone_numbers,
            address=self.address,
            comments=self.comments,
        )


class CompletedRecord(BaseModel):
    """Registro com os quatro campos definidos, pronto para o ledger."""

    model_config = ConfigDict(frozen=True)

    full_name: str
    phone_numbers: str
    address: str
    comments: str

    def as_row(self, timestamp: str) -> list[str]:
        """Linha do ledger: nome, telefone, endereço, comentário, timestamp."""
        return [self.full_name, self.phone_numbers, self.address, self.comments, timestamp]


class InboundEvent(BaseModel):
    """Evento recebido do transporte de chat (apenas o texto importa)."""

    model_config = ConfigDict(frozen=True)

    session_key: str
    text: str | None = None
    event_id: str | None = None

    @property
    def is_empty(self) -> bool:
        """True para eventos sem texto ou só com espaços."""
        return self.text is None or not self.text.strip()


class OutboundReply(BaseModel):
    """Resposta a enviar; `suggested_replies` vazio remove o teclado."""

    model_config = ConfigDict(frozen=True)

    session_key: str
    text: str
    suggested_replies: tuple[str, ...] = ()


class CommitAction(BaseModel):
    """Sinal de que um registro completo deve ser gravado no ledger."""

    model_config = ConfigDict(frozen=True)

    category: RequestCategory
    record: CompletedRecord
