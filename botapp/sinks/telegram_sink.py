"""Telegram implementation of the operator channel."""

from __future__ import annotations
from tracking import t

import logging
from typing import Optional, Sequence

from telegram import InlineKeyboardButton, InlineKeyboardMarkup, LinkPreviewOptions
from telegram.constants import ParseMode
from telegram.error import BadRequest, TelegramError

from botapp.sinks.base import OperatorAction
from reservations.errors import NotificationSendError
from reservations.models import MessageRef

# Telegram caps callback answers at 200 characters
CALLBACK_ANSWER_MAX_CHARS = 200


class TelegramOperatorSink:
    """Post alerts with inline buttons, edit them, and answer button clicks."""

    def __init__(
        self,
        bot,
        chat_id: int | str,
        *,
        parse_mode: str = ParseMode.MARKDOWN,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        t('botapp.sinks.telegram_sink.TelegramOperatorSink.__init__')
        self.bot = bot
        self.chat_id = chat_id
        self.parse_mode = parse_mode
        self.logger = logger or logging.getLogger('TelegramOperatorSink')
        self._link_preview = LinkPreviewOptions(is_disabled=True)

    @staticmethod
    def build_keyboard(actions: Sequence[OperatorAction]) -> Optional[InlineKeyboardMarkup]:
        t('botapp.sinks.telegram_sink.TelegramOperatorSink.build_keyboard')
        if not actions:
            return None
        row = [InlineKeyboardButton(action.label, callback_data=action.token) for action in actions]
        return InlineKeyboardMarkup([row])

    async def post_operator_alert(self, text: str, actions: Sequence[OperatorAction]) -> MessageRef:
        t('botapp.sinks.telegram_sink.TelegramOperatorSink.post_operator_alert')
        try:
            message = await self.bot.send_message(
                chat_id=self.chat_id,
                text=text,
                parse_mode=self.parse_mode,
                reply_markup=self.build_keyboard(actions),
                link_preview_options=self._link_preview,
            )
        except TelegramError as exc:
            self.logger.error("Failed to post operator alert to %s: %s", self.chat_id, exc)
            raise NotificationSendError('telegram', str(exc)) from exc

        self.logger.debug("Operator alert posted as message %s", message.message_id)
        return MessageRef(chat_id=message.chat_id, message_id=message.message_id)

    async def edit_operator_message(self, ref: MessageRef, text: str) -> None:
        """Replace an alert's text; the inline keyboard is dropped."""
        t('botapp.sinks.telegram_sink.TelegramOperatorSink.edit_operator_message')
        try:
            await self.bot.edit_message_text(
                text=text,
                chat_id=ref.chat_id,
                message_id=ref.message_id,
                parse_mode=self.parse_mode,
                reply_markup=None,
                link_preview_options=self._link_preview,
            )
        except BadRequest as exc:
            if "message is not modified" in str(exc).lower():
                self.logger.debug("Message %s already shows the final text", ref.message_id)
                return
            raise NotificationSendError('telegram', str(exc)) from exc
        except TelegramError as exc:
            raise NotificationSendError('telegram', str(exc)) from exc

    async def acknowledge(self, event_id: str, text: str) -> None:
        t('botapp.sinks.telegram_sink.TelegramOperatorSink.acknowledge')
        try:
            await self.bot.answer_callback_query(
                callback_query_id=event_id,
                text=text[:CALLBACK_ANSWER_MAX_CHARS],
            )
        except TelegramError as exc:
            raise NotificationSendError('telegram', str(exc)) from exc


__all__ = ["CALLBACK_ANSWER_MAX_CHARS", "TelegramOperatorSink"]
