"""Callback entrypoint translating Telegram button presses into decisions."""

from __future__ import annotations
from tracking import t

import logging
from typing import Optional

from telegram import Update
from telegram.ext import ContextTypes

from botapp.handlers.decision_dispatcher import DecisionDispatcher, DecisionEvent, DispatchResult
from reservations.models import MessageRef


class CallbackHandler:
    """Main entrypoint invoked by Telegram callback queries.

    The query is not answered here; the dispatcher sends the single answer
    once the outcome is known.
    """

    def __init__(self, dispatcher: DecisionDispatcher) -> None:
        t('botapp.handlers.callback_handlers.CallbackHandler.__init__')
        self.logger = logging.getLogger('CallbackHandler')
        self.dispatcher = dispatcher

    @staticmethod
    def to_event(update: Update) -> Optional[DecisionEvent]:
        t('botapp.handlers.callback_handlers.CallbackHandler.to_event')
        query = update.callback_query
        if query is None:
            return None

        ref = None
        message = query.message
        if message is not None and message.chat is not None:
            ref = MessageRef(chat_id=message.chat.id, message_id=message.message_id)

        operator = None
        if query.from_user is not None:
            operator = query.from_user.username or str(query.from_user.id)

        return DecisionEvent(event_id=query.id, token=query.data, message_ref=ref, operator=operator)

    async def handle_callback(
        self, update: Update, context: ContextTypes.DEFAULT_TYPE
    ) -> Optional[DispatchResult]:
        t('botapp.handlers.callback_handlers.CallbackHandler.handle_callback')
        event = self.to_event(update)
        if event is None:
            return None

        self.logger.info("Callback %s received: %r", event.event_id, event.token)
        result = await self.dispatcher.handle(event)
        self.logger.debug("Callback %s handled: %s", event.event_id, result.value)
        return result


__all__ = ["CallbackHandler"]
