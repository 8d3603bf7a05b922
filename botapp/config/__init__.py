"""Structured configuration loaders for the bot and submission API runtime."""

from __future__ import annotations
from tracking import t

from dataclasses import dataclass
from typing import FrozenSet, Optional

from infrastructure.settings import AppSettings, get_settings
from reservations.models import RequestKind


@dataclass(frozen=True)
class TelegramConfig:
    """Telegram-specific settings for the bot runtime."""

    token: str
    operator_chat_id: str
    production_mode: bool


@dataclass(frozen=True)
class WorkflowConfig:
    """Admission and customer messaging parameters."""

    capacity_limit: int
    business_name: str
    whatsapp_country_code: str
    email_notify_kinds: FrozenSet[RequestKind]


@dataclass(frozen=True)
class EmailConfig:
    """SMTP relay settings; ``enabled`` is False when no host is set."""

    host: str
    port: int
    secure: bool
    username: str
    password: str
    sender: str
    timeout: float

    @property
    def enabled(self) -> bool:
        return bool(self.host and self.sender)


@dataclass(frozen=True)
class HttpConfig:
    """Submission API listener and redirect target."""

    host: str
    port: int
    frontend_url: str


@dataclass(frozen=True)
class PathsConfig:
    """File-system locations for persisted state."""

    store_file: str
    log_directory: str


@dataclass(frozen=True)
class BotAppConfig:
    """Aggregated configuration snapshot for the runtime."""

    telegram: TelegramConfig
    workflow: WorkflowConfig
    email: EmailConfig
    http: HttpConfig
    paths: PathsConfig

    @property
    def capacity_limit(self) -> int:
        return self.workflow.capacity_limit

    @property
    def production_mode(self) -> bool:
        return self.telegram.production_mode


def _parse_kinds(values) -> FrozenSet[RequestKind]:
    kinds = set()
    for value in values:
        try:
            kinds.add(RequestKind(value))
        except ValueError as exc:
            raise ValueError(f"EMAIL_NOTIFY_KINDS contains unknown kind {value!r}") from exc
    return frozenset(kinds)


def _build_config_from_settings(settings: AppSettings) -> BotAppConfig:
    """Translate :class:`AppSettings` values into runtime config objects."""
    t('botapp.config._build_config_from_settings')

    telegram = TelegramConfig(
        token=settings.bot_token,
        operator_chat_id=settings.operator_chat_id,
        production_mode=settings.production_mode,
    )

    workflow = WorkflowConfig(
        capacity_limit=settings.capacity_limit,
        business_name=settings.business_name,
        whatsapp_country_code=settings.whatsapp_country_code,
        email_notify_kinds=_parse_kinds(settings.email_notify_kinds),
    )

    email = EmailConfig(
        host=settings.smtp_host,
        port=settings.smtp_port,
        secure=settings.smtp_secure,
        username=settings.smtp_user,
        password=settings.smtp_password,
        sender=settings.email_from,
        timeout=settings.smtp_timeout,
    )

    http = HttpConfig(
        host=settings.http_host,
        port=settings.http_port,
        frontend_url=settings.frontend_url,
    )

    paths = PathsConfig(
        store_file=settings.store_file,
        log_directory=settings.log_directory,
    )

    return BotAppConfig(
        telegram=telegram,
        workflow=workflow,
        email=email,
        http=http,
        paths=paths,
    )


def load_bot_config(settings: Optional[AppSettings] = None) -> BotAppConfig:
    """Load the runtime configuration from shared application settings."""
    t('botapp.config.load_bot_config')

    if settings is None:
        settings = get_settings()
    return _build_config_from_settings(settings)


__all__ = [
    'BotAppConfig',
    'EmailConfig',
    'HttpConfig',
    'PathsConfig',
    'TelegramConfig',
    'WorkflowConfig',
    'load_bot_config',
]
