"""Bootstrap helpers for wiring runtime components."""

from .container import BotDependencies, DependencyContainer

__all__ = [
    'BotDependencies',
    'DependencyContainer',
]
