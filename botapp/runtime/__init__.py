"""Runtime helpers for the bot and submission API."""

from .bot_application import BotApplication

__all__ = ['BotApplication']
