"""
Centralized error handling for the operator bot
Logs failures raised while processing Telegram updates and tells the operator
what happened
"""
from tracking import t

import logging
from typing import Optional
from telegram import Update
from telegram.error import TelegramError
from telegram.ext import ContextTypes


class ErrorHandler:
    """
    Centralized error handling for the operator bot

    Provides static methods registered with the Telegram application
    """

    RETRY_TEXT = "Something went wrong while processing this action. Please try again."

    @staticmethod
    async def handle_telegram_error(update: object, context: ContextTypes.DEFAULT_TYPE) -> None:
        """
        Global error callback for the Telegram application

        Harmless "message is not modified" errors are logged as warnings. Anything
        else is logged with its traceback; for button presses the operator gets
        a short answer so the spinner does not hang.

        Args:
            update: The update that caused the error (may be None)
            context: The callback context carrying ``context.error``
        """
        t('botapp.error_handler.ErrorHandler.handle_telegram_error')
        logger = logging.getLogger('ErrorHandler')
        error = context.error

        if error is not None and "message is not modified" in str(error).lower():
            logger.warning("Telegram message not modified (button clicked repeatedly): %s", error)
            return

        logger.error(
            "Telegram error occurred: %s: %s",
            type(error).__name__,
            error,
            exc_info=error,
        )

        if update is None or not hasattr(update, "effective_user"):
            logger.warning("No update object available - cannot notify operator")
            return

        ErrorHandler.log_error_context(update, 'telegram_update')

        try:
            if update.callback_query:
                await update.callback_query.answer(ErrorHandler.RETRY_TEXT)
            elif update.effective_message:
                await update.effective_message.reply_text(ErrorHandler.RETRY_TEXT)
        except TelegramError as send_error:
            logger.error("Failed to send error message to operator: %s", send_error)

    @staticmethod
    def log_error_context(update: Update, operation: str, additional_context: Optional[dict] = None) -> None:
        """Log user, chat and callback data for the failing update."""
        t('botapp.error_handler.ErrorHandler.log_error_context')
        logger = logging.getLogger('ErrorHandler')

        context_info = {
            'operation': operation,
            'user_id': update.effective_user.id if update.effective_user else None,
            'chat_id': update.effective_chat.id if update.effective_chat else None,
            'callback_data': update.callback_query.data if update.callback_query else None,
        }
        if additional_context:
            context_info.update(additional_context)

        logger.debug("Error context: %s", context_info)
