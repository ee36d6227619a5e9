"""connect_volunteers: bot de cadastro de voluntários e pedidos de ajuda."""

__version__ = "0.1.0"
