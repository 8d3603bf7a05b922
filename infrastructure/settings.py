"""Centralized application settings.

All runtime configuration is read here, once, from the process environment
(optionally seeded from a ``.env`` file). Components receive the resulting
immutable snapshot through the dependency container instead of calling
``os.getenv`` themselves.
"""

from __future__ import annotations
from tracking import t

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import FrozenSet, Mapping, Optional

from dotenv import load_dotenv

from . import constants as app_constants


def _to_bool(value: Optional[str], default: bool = False) -> bool:
    """Normalize environment strings such as "true"/"1" into booleans."""
    t('infrastructure.settings._to_bool')

    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _to_int(env: Mapping[str, str], key: str, default: int) -> int:
    raw = env.get(key)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{key} must be an integer, got {raw!r}") from exc


def _to_float(env: Mapping[str, str], key: str, default: float) -> float:
    raw = env.get(key)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ValueError(f"{key} must be a number, got {raw!r}") from exc


def _to_kinds(raw: Optional[str]) -> FrozenSet[str]:
    """Parse ``EMAIL_NOTIFY_KINDS`` ("reservation,order") into a set."""
    if raw is None:
        return frozenset({"reservation"})
    return frozenset(part.strip().lower() for part in raw.split(",") if part.strip())


@dataclass(frozen=True)
class AppSettings:
    """Immutable snapshot of high-level configuration values."""

    bot_token: str
    operator_chat_id: str
    production_mode: bool
    capacity_limit: int
    store_file: str
    log_directory: str
    frontend_url: str
    whatsapp_country_code: str
    business_name: str
    email_notify_kinds: FrozenSet[str]
    smtp_host: str
    smtp_port: int
    smtp_secure: bool
    smtp_user: str
    smtp_password: str
    email_from: str
    smtp_timeout: float
    http_host: str
    http_port: int


def load_settings(env: Optional[Mapping[str, str]] = None) -> AppSettings:
    """Load configuration from the environment and fall back to defaults."""
    t('infrastructure.settings.load_settings')

    if env is None:
        load_dotenv(override=False)
        env = os.environ

    bot_token = env.get("TELEGRAM_TOKEN") or env.get("TELEGRAM_BOT_TOKEN", "")
    operator_chat_id = env.get("CHAT_ID", "").strip()

    capacity_limit = _to_int(env, "CAPACITY_LIMIT", app_constants.DEFAULT_CAPACITY_LIMIT)
    if capacity_limit < 0:
        raise ValueError(f"CAPACITY_LIMIT must not be negative, got {capacity_limit}")

    smtp_user = env.get("SMTP_USER", "")

    return AppSettings(
        bot_token=bot_token,
        operator_chat_id=operator_chat_id,
        production_mode=_to_bool(env.get("PRODUCTION_MODE"), default=False),
        capacity_limit=capacity_limit,
        store_file=env.get("STORE_FILE", app_constants.DEFAULT_STORE_FILE),
        log_directory=env.get("LOG_DIRECTORY", app_constants.DEFAULT_LOG_DIRECTORY),
        frontend_url=env.get("FRONTEND_URL", app_constants.DEFAULT_FRONTEND_URL).rstrip("/"),
        whatsapp_country_code=env.get(
            "WHATSAPP_COUNTRY_CODE", app_constants.DEFAULT_WHATSAPP_COUNTRY_CODE
        ),
        business_name=env.get("BUSINESS_NAME", app_constants.DEFAULT_BUSINESS_NAME),
        email_notify_kinds=_to_kinds(env.get("EMAIL_NOTIFY_KINDS")),
        smtp_host=env.get("SMTP_HOST", "").strip(),
        smtp_port=_to_int(env, "SMTP_PORT", app_constants.DEFAULT_SMTP_PORT),
        smtp_secure=_to_bool(env.get("SMTP_SECURE"), default=False),
        smtp_user=smtp_user,
        smtp_password=env.get("SMTP_PASS", ""),
        email_from=env.get("EMAIL_FROM", "") or smtp_user,
        smtp_timeout=_to_float(env, "SMTP_TIMEOUT", app_constants.DEFAULT_SMTP_TIMEOUT_SECONDS),
        http_host=env.get("HOST", app_constants.DEFAULT_HTTP_HOST),
        http_port=_to_int(env, "PORT", app_constants.DEFAULT_HTTP_PORT),
    )


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    """Return a cached :class:`AppSettings` instance."""
    t('infrastructure.settings.get_settings')

    return load_settings()
