"""Domínio: enums, modelos, diálogo e protocolos."""
