"""Telegram entrypoint: conversation graph, dispatcher and transport."""
