import pytest

from botapp.error_handler import ErrorHandler
from botapp.handlers.callback_handlers import CallbackHandler
from botapp.handlers.decision_dispatcher import DispatchResult
from reservations.models import MessageRef
from tests.bot.fakes import FakeCallbackQuery, FakeContext, FakeUpdate, FakeUser


class DummyDispatcher:
    def __init__(self, result=DispatchResult.APPLIED):
        self.events = []
        self.result = result

    async def handle(self, event):
        self.events.append(event)
        return self.result


def _update(data, records, **kwargs):
    user = FakeUser(id=7, username="maria")
    query = FakeCallbackQuery(data=data, user=user, records=records, **kwargs)
    return FakeUpdate(user=user, callback_query=query)


@pytest.mark.asyncio
async def test_callback_is_translated_into_decision_event():
    records = []
    dispatcher = DummyDispatcher()
    handler = CallbackHandler(dispatcher)

    result = await handler.handle_callback(
        _update("reservation_confirm_abc", records, query_id="q-9", chat_id=-500, message_id=77),
        FakeContext(),
    )

    assert result is DispatchResult.APPLIED
    (event,) = dispatcher.events
    assert event.event_id == "q-9"
    assert event.token == "reservation_confirm_abc"
    assert event.message_ref == MessageRef(chat_id=-500, message_id=77)
    assert event.operator == "maria"


@pytest.mark.asyncio
async def test_handler_does_not_answer_the_query_itself():
    records = []
    handler = CallbackHandler(DummyDispatcher())

    await handler.handle_callback(_update("order_decline_1", records), FakeContext())

    assert [entry for entry in records if entry["action"] == "answer"] == []


@pytest.mark.asyncio
async def test_updates_without_callback_query_are_ignored():
    dispatcher = DummyDispatcher()
    handler = CallbackHandler(dispatcher)

    result = await handler.handle_callback(FakeUpdate(user=FakeUser(id=1)), FakeContext())

    assert result is None
    assert dispatcher.events == []


@pytest.mark.asyncio
async def test_error_handler_ignores_not_modified_errors():
    context = FakeContext(error=RuntimeError("Bad Request: message is not modified"))

    await ErrorHandler.handle_telegram_error(None, context)


@pytest.mark.asyncio
async def test_error_handler_answers_callback_on_unexpected_error():
    records = []
    update = _update("reservation_confirm_abc", records)

    await ErrorHandler.handle_telegram_error(update, FakeContext(error=RuntimeError("boom")))

    answers = [entry for entry in records if entry["action"] == "answer"]
    assert answers and answers[0]["text"] == ErrorHandler.RETRY_TEXT
