"""Shared fakes and utilities for unit tests."""

from __future__ import annotations
from tracking import t

import asyncio
import itertools
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence, Tuple

from botapp.sinks.base import OperatorAction
from reservations.errors import NotificationSendError, StoreUnavailableError
from reservations.models import MessageRef
from reservations.store import RecordStore

FIXED_NOW = datetime(2025, 5, 17, 18, 30, tzinfo=timezone.utc)


def fixed_clock() -> datetime:
    return FIXED_NOW


def reservation_fields(**overrides: Any) -> Dict[str, Any]:
    fields = {
        'name': 'Ana',
        'contact_phone': '11 98765-4321',
        'contact_email': 'ana@example.com',
        'reservation_date': '2025-05-20',
        'reservation_time': '19:00',
        'party_size': 2,
    }
    fields.update(overrides)
    return fields


def order_fields(**overrides: Any) -> Dict[str, Any]:
    fields = {
        'name': 'Bruno',
        'contact_phone': '11 91234-5678',
        'items': '2x Margherita, 1x Tiramisu',
        'total': 'R$ 120,00',
        'pickup_time': '20:15',
    }
    fields.update(overrides)
    return fields


class DummyLogger:
    """Lightweight stand-in for ``logging.Logger`` that records calls."""

    def __init__(self) -> None:
        t('tests.helpers.DummyLogger.__init__')
        self.records: List[Tuple[str, Tuple[Any, ...], Dict[str, Any]]] = []

    def _record(self, level: str, *args: Any, **kwargs: Any) -> None:
        self.records.append((level, args, kwargs))

    def debug(self, *args: Any, **kwargs: Any) -> None:
        self._record("debug", *args, **kwargs)

    def info(self, *args: Any, **kwargs: Any) -> None:
        self._record("info", *args, **kwargs)

    def warning(self, *args: Any, **kwargs: Any) -> None:
        self._record("warning", *args, **kwargs)

    def error(self, *args: Any, **kwargs: Any) -> None:
        self._record("error", *args, **kwargs)

    def critical(self, *args: Any, **kwargs: Any) -> None:
        self._record("critical", *args, **kwargs)

    def exception(self, *args: Any, **kwargs: Any) -> None:
        self._record("exception", *args, **kwargs)

    @property
    def messages(self) -> List[Tuple[str, Any]]:
        """Return formatted messages for quick assertions."""
        t('tests.helpers.DummyLogger.messages')

        formatted: List[Tuple[str, Any]] = []
        for level, args, kwargs in self.records:
            message: Any = kwargs.get("msg")
            if args:
                template = args[0]
                if isinstance(template, str) and len(args) > 1:
                    try:
                        message = template % args[1:]
                    except (TypeError, ValueError):
                        message = template
                else:
                    message = template
            formatted.append((level, message))
        return formatted

    def levels(self) -> List[str]:
        return [level for level, _args, _kwargs in self.records]


class RecordingOperatorChannel:
    """Operator channel that keeps every post, edit and acknowledgement."""

    def __init__(self, chat_id: int = -1001) -> None:
        self.chat_id = chat_id
        self.posts: List[Tuple[str, Sequence[OperatorAction], MessageRef]] = []
        self.edits: List[Tuple[MessageRef, str]] = []
        self.acks: List[Tuple[str, str]] = []
        self.fail_post = False
        self.fail_edit = False
        self.fail_ack = False
        self._message_ids = itertools.count(100)

    async def post_operator_alert(self, text: str, actions: Sequence[OperatorAction]) -> MessageRef:
        if self.fail_post:
            raise NotificationSendError('telegram', 'post failed')
        ref = MessageRef(chat_id=self.chat_id, message_id=next(self._message_ids))
        self.posts.append((text, list(actions), ref))
        return ref

    async def edit_operator_message(self, ref: MessageRef, text: str) -> None:
        if self.fail_edit:
            raise NotificationSendError('telegram', 'edit failed')
        self.edits.append((ref, text))

    async def acknowledge(self, event_id: str, text: str) -> None:
        self.acks.append((event_id, text))
        if self.fail_ack:
            raise NotificationSendError('telegram', 'ack failed')

    def acks_for(self, event_id: str) -> List[str]:
        return [text for ack_id, text in self.acks if ack_id == event_id]


class RecordingEmailChannel:
    def __init__(self, fail: bool = False) -> None:
        self.sent: List[Tuple[str, str, str]] = []
        self.fail = fail

    async def send_email(self, to: str, subject: str, body: str) -> None:
        if self.fail:
            raise NotificationSendError('email', 'relay refused')
        self.sent.append((to, subject, body))


class SuspendingStore(RecordStore):
    """In-memory store that yields to the event loop before every read.

    Makes interleavings between concurrent coroutines likely, so missing locks
    show up as lost updates or over-admission.
    """

    async def count(self, collection, predicate=None):
        await asyncio.sleep(0)
        result = await super().count(collection, predicate)
        await asyncio.sleep(0)
        return result

    async def find(self, collection, predicate):
        await asyncio.sleep(0)
        result = await super().find(collection, predicate)
        await asyncio.sleep(0)
        return result


class AccessCountingStore(RecordStore):
    """In-memory store counting calls and optionally failing them."""

    def __init__(self, *args: Any, fail: bool = False, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.calls: List[str] = []
        self.fail = fail

    def _touch(self, name: str) -> None:
        self.calls.append(name)
        if self.fail:
            raise StoreUnavailableError("store offline")

    async def append(self, collection, record):
        self._touch('append')
        return await super().append(collection, record)

    async def find(self, collection, predicate):
        self._touch('find')
        return await super().find(collection, predicate)

    async def scan(self, collection, predicate=None):
        self._touch('scan')
        return await super().scan(collection, predicate)

    async def count(self, collection, predicate=None):
        self._touch('count')
        return await super().count(collection, predicate)

    async def update_field(self, collection, record_id, updates):
        self._touch('update_field')
        return await super().update_field(collection, record_id, updates)


__all__ = [
    "AccessCountingStore",
    "DummyLogger",
    "FIXED_NOW",
    "RecordingEmailChannel",
    "RecordingOperatorChannel",
    "SuspendingStore",
    "fixed_clock",
    "order_fields",
    "reservation_fields",
]
