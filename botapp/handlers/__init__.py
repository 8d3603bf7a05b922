"""
Handlers package for telegram bot
Contains the operator decision flow
"""

from .callback_handlers import CallbackHandler
from .decision_dispatcher import DecisionDispatcher, DecisionEvent, DispatchResult

__all__ = ['CallbackHandler', 'DecisionDispatcher', 'DecisionEvent', 'DispatchResult']
