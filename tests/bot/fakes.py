"""Lightweight stand-ins for Telegram objects used by handler tests."""

from __future__ import annotations

import itertools
from dataclasses import dataclass
from typing import Any, Dict, List, Optional


class _Recorder:
    def __init__(self, records: List[Dict[str, Any]]) -> None:
        self._records = records

    def _record(self, action: str, **payload: Any) -> None:
        entry = {"action": action}
        entry.update(payload)
        self._records.append(entry)


@dataclass
class FakeUser:
    """Minimal user representation carrying the identifiers handlers expect."""

    id: int
    first_name: str = "Operator"
    username: Optional[str] = "operator"


@dataclass
class FakeChat:
    id: int


class FakeMessage(_Recorder):
    """Collect replies emitted during a scenario."""

    def __init__(self, chat_id: int, records: List[Dict[str, Any]], message_id: int = 1) -> None:
        super().__init__(records)
        self.chat = FakeChat(chat_id)
        self.chat_id = chat_id
        self.message_id = message_id

    async def reply_text(self, text: str, **kwargs: Any) -> None:
        self._record("reply_text", chat_id=self.chat_id, text=text, kwargs=kwargs)


class FakeCallbackQuery(_Recorder):
    """Simulate the subset of telegram.CallbackQuery used by the handlers."""

    def __init__(
        self,
        *,
        data: Optional[str],
        user: FakeUser,
        records: List[Dict[str, Any]],
        query_id: str = "cbq-1",
        chat_id: int = -1001,
        message_id: int = 55,
    ) -> None:
        super().__init__(records)
        self.id = query_id
        self.data = data
        self.from_user = user
        self.message = FakeMessage(chat_id=chat_id, records=records, message_id=message_id)

    async def answer(self, text: Optional[str] = None, **kwargs: Any) -> None:
        self._record("answer", data=self.data, text=text, kwargs=kwargs)


class FakeUpdate:
    """Simplified telegram.Update analogue."""

    def __init__(
        self,
        *,
        user: FakeUser,
        message: Optional[FakeMessage] = None,
        callback_query: Optional[FakeCallbackQuery] = None,
    ) -> None:
        self._effective_user = user
        self.message = message
        self.callback_query = callback_query

    @property
    def effective_user(self) -> FakeUser:
        return self._effective_user

    @property
    def effective_chat(self) -> Optional[FakeChat]:
        source = self.message or (self.callback_query.message if self.callback_query else None)
        return source.chat if source else None

    @property
    def effective_message(self) -> Optional[FakeMessage]:
        return self.message or (self.callback_query.message if self.callback_query else None)


class FakeContext:
    """Plain object mirroring the telegram.ext callback context."""

    def __init__(self, error: Optional[BaseException] = None) -> None:
        self.user_data: Dict[str, Any] = {}
        self.chat_data: Dict[str, Any] = {}
        self.bot_data: Dict[str, Any] = {}
        self.application = None
        self.error = error


@dataclass
class SentMessage:
    chat_id: int
    message_id: int


class FakeBot(_Recorder):
    """Record Bot API calls made by the Telegram operator sink."""

    def __init__(self, records: List[Dict[str, Any]]) -> None:
        super().__init__(records)
        self._ids = itertools.count(500)
        self.raise_on: Dict[str, BaseException] = {}

    def _maybe_raise(self, method: str) -> None:
        error = self.raise_on.get(method)
        if error is not None:
            raise error

    async def send_message(self, **kwargs: Any) -> SentMessage:
        self._maybe_raise("send_message")
        self._record("send_message", **kwargs)
        return SentMessage(chat_id=int(kwargs["chat_id"]), message_id=next(self._ids))

    async def edit_message_text(self, **kwargs: Any) -> None:
        self._maybe_raise("edit_message_text")
        self._record("edit_message_text", **kwargs)

    async def answer_callback_query(self, **kwargs: Any) -> None:
        self._maybe_raise("answer_callback_query")
        self._record("answer_callback_query", **kwargs)
