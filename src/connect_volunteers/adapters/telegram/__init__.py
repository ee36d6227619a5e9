"""Adapter do Telegram Bot API (webhook, polling e sendMessage)."""
