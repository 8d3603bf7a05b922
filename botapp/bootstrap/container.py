"""Dependency container wiring workflow, channels and handlers together."""

from __future__ import annotations
from tracking import t

from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from botapp.config import BotAppConfig
from botapp.handlers.callback_handlers import CallbackHandler
from botapp.handlers.decision_dispatcher import DecisionDispatcher
from botapp.notifications import NotificationBuilder
from botapp.operator_alerts import OperatorAlerts
from botapp.sinks import EmailChannel, OperatorChannel, SmtpEmailSink, TelegramOperatorSink
from reservations.services import AdmissionController, KeyedLockTable, WorkflowEngine
from reservations.store import RecordStore


@dataclass(frozen=True)
class BotDependencies:
    """Concrete dependency snapshot for the runtime."""

    config: BotAppConfig
    store: RecordStore
    workflow: WorkflowEngine
    admission: AdmissionController
    dispatcher: DecisionDispatcher
    callback_handler: CallbackHandler
    notifications: NotificationBuilder

    def as_dict(self) -> Dict[str, Any]:
        """Return dependencies as a mapping keyed by attribute name."""
        t('botapp.bootstrap.container.BotDependencies.as_dict')

        return {
            'config': self.config,
            'store': self.store,
            'workflow': self.workflow,
            'admission': self.admission,
            'dispatcher': self.dispatcher,
            'callback_handler': self.callback_handler,
            'notifications': self.notifications,
        }


class DependencyContainer:
    """Lazy dependency container with optional override support.

    The Telegram bot object only exists once the application is built, so it
    is supplied through :meth:`bind_bot` (or an ``operator_channel`` override).
    """

    def __init__(
        self,
        config: BotAppConfig,
        overrides: Optional[Dict[str, Any]] = None,
    ) -> None:
        t('botapp.bootstrap.container.DependencyContainer.__init__')
        self.config = config
        self._cache: Dict[str, Any] = {}
        if overrides:
            self._cache.update(overrides)

    # ------------------------------------------------------------------
    # Internal helpers
    def _resolve(self, key: str, factory: Callable[[], Any]) -> Any:
        t('botapp.bootstrap.container.DependencyContainer._resolve')
        if key not in self._cache:
            self._cache[key] = factory()
        return self._cache[key]

    def bind_bot(self, bot) -> None:
        t('botapp.bootstrap.container.DependencyContainer.bind_bot')
        self._cache['bot'] = bot

    # ------------------------------------------------------------------
    # Core dependencies
    @property
    def store(self) -> RecordStore:
        t('botapp.bootstrap.container.DependencyContainer.store')
        return self._resolve('store', lambda: RecordStore(self.config.paths.store_file))

    @property
    def locks(self) -> KeyedLockTable:
        return self._resolve('locks', KeyedLockTable)

    @property
    def workflow(self) -> WorkflowEngine:
        t('botapp.bootstrap.container.DependencyContainer.workflow')
        return self._resolve('workflow', lambda: WorkflowEngine(self.store, self.locks))

    @property
    def notifications(self) -> NotificationBuilder:
        t('botapp.bootstrap.container.DependencyContainer.notifications')

        def factory() -> NotificationBuilder:
            t('botapp.bootstrap.container.DependencyContainer.notifications.factory')
            return NotificationBuilder(
                business_name=self.config.workflow.business_name,
                country_code=self.config.workflow.whatsapp_country_code,
            )

        return self._resolve('notifications', factory)

    @property
    def operator_channel(self) -> OperatorChannel:
        t('botapp.bootstrap.container.DependencyContainer.operator_channel')

        if 'operator_channel' not in self._cache and 'bot' not in self._cache:
            raise RuntimeError(
                "Telegram bot has not been bound; call bind_bot() before "
                "requesting the operator channel."
            )

        def factory() -> OperatorChannel:
            t('botapp.bootstrap.container.DependencyContainer.operator_channel.factory')
            return TelegramOperatorSink(self._cache['bot'], self.config.telegram.operator_chat_id)

        return self._resolve('operator_channel', factory)

    @property
    def email_channel(self) -> Optional[EmailChannel]:
        t('botapp.bootstrap.container.DependencyContainer.email_channel')

        def factory() -> Optional[EmailChannel]:
            t('botapp.bootstrap.container.DependencyContainer.email_channel.factory')
            email = self.config.email
            if not email.enabled:
                return None
            return SmtpEmailSink(
                email.host,
                email.port,
                sender=email.sender,
                username=email.username or None,
                password=email.password or None,
                secure=email.secure,
                timeout=email.timeout,
            )

        return self._resolve('email_channel', factory)

    @property
    def admission(self) -> AdmissionController:
        t('botapp.bootstrap.container.DependencyContainer.admission')

        def factory() -> AdmissionController:
            t('botapp.bootstrap.container.DependencyContainer.admission.factory')
            alerts = OperatorAlerts(self.operator_channel, self.workflow, self.notifications)
            return AdmissionController(
                self.workflow,
                capacity_limit=self.config.workflow.capacity_limit,
                on_admitted=alerts,
            )

        return self._resolve('admission', factory)

    @property
    def dispatcher(self) -> DecisionDispatcher:
        t('botapp.bootstrap.container.DependencyContainer.dispatcher')

        def factory() -> DecisionDispatcher:
            t('botapp.bootstrap.container.DependencyContainer.dispatcher.factory')
            return DecisionDispatcher(
                self.workflow,
                self.operator_channel,
                self.email_channel,
                builder=self.notifications,
                email_kinds=self.config.workflow.email_notify_kinds,
            )

        return self._resolve('dispatcher', factory)

    @property
    def callback_handler(self) -> CallbackHandler:
        t('botapp.bootstrap.container.DependencyContainer.callback_handler')
        return self._resolve('callback_handler', lambda: CallbackHandler(self.dispatcher))

    # ------------------------------------------------------------------
    def build_dependencies(self) -> BotDependencies:
        """Materialise and return all core dependencies."""

        t('botapp.bootstrap.container.DependencyContainer.build_dependencies')

        return BotDependencies(
            config=self.config,
            store=self.store,
            workflow=self.workflow,
            admission=self.admission,
            dispatcher=self.dispatcher,
            callback_handler=self.callback_handler,
            notifications=self.notifications,
        )


__all__ = ['BotDependencies', 'DependencyContainer']
