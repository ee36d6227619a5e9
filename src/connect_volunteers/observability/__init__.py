"""Observabilidade: logging JSON, correlation id e latência."""
