"""Telegram command registration."""

from .handlers import register_core_handlers

__all__ = ['register_core_handlers']
