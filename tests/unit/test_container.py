import pytest

from botapp.bootstrap import DependencyContainer
from botapp.config import load_bot_config
from botapp.sinks import SmtpEmailSink, TelegramOperatorSink
from infrastructure.settings import load_settings
from reservations.models import RequestKind
from reservations.store import RecordStore
from tests.bot.fakes import FakeBot
from tests.helpers import RecordingOperatorChannel


def _config(**env):
    return load_bot_config(load_settings({"CHAT_ID": "-1001", **env}))


def test_operator_channel_requires_bound_bot():
    container = DependencyContainer(_config(), overrides={"store": RecordStore()})

    with pytest.raises(RuntimeError):
        container.operator_channel


def test_bound_bot_builds_telegram_sink():
    container = DependencyContainer(_config(), overrides={"store": RecordStore()})
    container.bind_bot(FakeBot([]))

    channel = container.operator_channel

    assert isinstance(channel, TelegramOperatorSink)
    assert channel.chat_id == "-1001"


def test_dependencies_share_one_workflow():
    channel = RecordingOperatorChannel()
    container = DependencyContainer(
        _config(CAPACITY_LIMIT="3"),
        overrides={"store": RecordStore(), "operator_channel": channel},
    )

    deps = container.build_dependencies()

    assert deps.admission.workflow is deps.workflow
    assert deps.dispatcher.workflow is deps.workflow
    assert deps.callback_handler.dispatcher is deps.dispatcher
    assert deps.admission.capacity_limit == 3
    assert deps.dispatcher.email_channel is None
    assert deps.as_dict()["store"] is deps.store


def test_email_channel_built_when_configured():
    container = DependencyContainer(
        _config(SMTP_HOST="smtp.example.com", EMAIL_FROM="bot@example.com", EMAIL_NOTIFY_KINDS="reservation,order"),
        overrides={"store": RecordStore(), "operator_channel": RecordingOperatorChannel()},
    )

    dispatcher = container.dispatcher

    assert isinstance(dispatcher.email_channel, SmtpEmailSink)
    assert dispatcher.email_kinds == frozenset({RequestKind.RESERVATION, RequestKind.ORDER})
