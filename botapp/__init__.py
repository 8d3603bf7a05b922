"""Telegram application layer with lazy exports to avoid heavy imports."""
from tracking import t

__all__ = ["BotApplication", "main"]


def __getattr__(name):
    t('botapp.__getattr__')
    if name == "main":
        from .app import main as _main

        return _main
    if name == "BotApplication":
        from .runtime.bot_application import BotApplication as _BotApplication

        return _BotApplication
    raise AttributeError(f"module 'botapp' has no attribute {name!r}")
