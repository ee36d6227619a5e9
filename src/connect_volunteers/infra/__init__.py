"""Infraestrutura: stores, ledger, HTTP e secrets."""
