"""Telegram bot and submission API runtime wiring."""

from __future__ import annotations
from tracking import t

import logging
from typing import List, Optional

import uvicorn
from telegram import Update
from telegram.constants import ParseMode
from telegram.ext import Application, ContextTypes

from botapp.bootstrap.container import DependencyContainer
from botapp.commands import register_core_handlers
from botapp.config import BotAppConfig, load_bot_config
from botapp.error_handler import ErrorHandler
from reservations.errors import StoreUnavailableError
from reservations.models import Request, RequestKind
from webapp import create_app


class BotApplication:
    """Assemble dependencies, Telegram handlers and the HTTP intake server."""

    def __init__(
        self,
        config: Optional[BotAppConfig] = None,
        *,
        container: Optional[DependencyContainer] = None,
    ) -> None:
        t('botapp.runtime.bot_application.BotApplication.__init__')
        self.logger = logging.getLogger('BotApplication')
        self.config = config or load_bot_config()
        self.token = self.config.telegram.token
        if not self.token:
            raise RuntimeError("TELEGRAM_TOKEN is not set")
        if not self.config.telegram.operator_chat_id:
            self.logger.warning("CHAT_ID is not set; send /start to the bot to find it")

        self.application = Application.builder().token(self.token).concurrent_updates(True).build()

        self.container = container or DependencyContainer(self.config)
        self.container.bind_bot(self.application.bot)
        dependencies = self.container.build_dependencies()

        self.store = dependencies.store
        self.workflow = dependencies.workflow
        self.admission = dependencies.admission
        self.notifications = dependencies.notifications
        self.callback_handler = dependencies.callback_handler

        self.web_app = create_app(
            self.admission,
            store=self.store,
            frontend_url=self.config.http.frontend_url,
            business_name=self.config.workflow.business_name,
        )
        register_core_handlers(self.application, self)

    async def start_command(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """Handle /start command by reporting the chat id to configure."""
        t('botapp.runtime.bot_application.BotApplication.start_command')

        chat = update.effective_chat
        if chat is None or update.effective_message is None:
            return
        await update.effective_message.reply_text(
            f"👋 Operator bot is running.\n\nThis chat id is `{chat.id}`; "
            "set it as CHAT_ID to receive reservation and order alerts here.",
            parse_mode=ParseMode.MARKDOWN,
        )

    async def pending_command(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """Handle /pending command listing undecided requests."""
        t('botapp.runtime.bot_application.BotApplication.pending_command')

        if update.effective_message is None:
            return

        pending: List[Request] = []
        try:
            for kind in RequestKind:
                pending.extend(await self.workflow.list_pending(kind))
        except StoreUnavailableError as exc:
            self.logger.error("Could not list pending requests: %s", exc)
            await update.effective_message.reply_text(self.notifications.retry_ack())
            return

        pending.sort(key=lambda request: request.submitted_at)
        await update.effective_message.reply_text(
            self.notifications.pending_summary(pending),
            parse_mode=ParseMode.MARKDOWN,
        )

    async def error_handler(self, update: object, context: ContextTypes.DEFAULT_TYPE) -> None:
        """Central error handler for Telegram exceptions."""
        t('botapp.runtime.bot_application.BotApplication.error_handler')
        await ErrorHandler.handle_telegram_error(update, context)

    def build_server(self) -> uvicorn.Server:
        t('botapp.runtime.bot_application.BotApplication.build_server')
        server_config = uvicorn.Config(
            self.web_app,
            host=self.config.http.host,
            port=self.config.http.port,
            log_config=None,
        )
        return uvicorn.Server(server_config)

    async def run_async(self) -> None:
        """Poll Telegram and serve HTTP in the same event loop until stopped."""
        t('botapp.runtime.bot_application.BotApplication.run_async')

        server = self.build_server()
        async with self.application:
            await self.application.start()
            await self.application.updater.start_polling(allowed_updates=Update.ALL_TYPES)
            self.logger.info(
                "Bot polling; submission API on %s:%s (store sizes %s)",
                self.config.http.host,
                self.config.http.port,
                self.store.sizes(),
            )
            try:
                await server.serve()
            finally:
                self.logger.info("🔴 Stopping Telegram polling...")
                await self.application.updater.stop()
                await self.application.stop()
                self.logger.info("✅ Telegram application stopped")


__all__ = ['BotApplication']
