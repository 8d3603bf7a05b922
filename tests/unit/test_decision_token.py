import pytest

from reservations.errors import MalformedDecisionTokenError
from reservations.models import (
    DecisionAction,
    DecisionToken,
    RequestKind,
    RequestStatus,
    parse_decision_token,
)


def test_parse_canonical_token():
    token = parse_decision_token("reservation_confirm_abc123")

    assert token == DecisionToken(RequestKind.RESERVATION, DecisionAction.CONFIRM, "abc123")


def test_parse_accepts_legacy_portuguese_values():
    assert parse_decision_token("reserva_confirmar_xyz") == DecisionToken(
        RequestKind.RESERVATION, DecisionAction.CONFIRM, "xyz"
    )
    assert parse_decision_token("pedido_recusar_42") == DecisionToken(
        RequestKind.ORDER, DecisionAction.DECLINE, "42"
    )


def test_encode_uses_canonical_values():
    token = DecisionToken(RequestKind.ORDER, DecisionAction.DECLINE, "f00d")

    assert token.encode() == "order_decline_f00d"
    assert parse_decision_token(token.encode()) == token


@pytest.mark.parametrize(
    "raw",
    [
        None,
        "",
        "reservation_confirm",
        "reservation_confirm_abc_extra",
        "reservation_confirm_",
        "booking_confirm_abc",
        "reservation_approve_abc",
        "reservation_confirm_" + "x" * 64,
    ],
)
def test_malformed_tokens_are_rejected(raw):
    with pytest.raises(MalformedDecisionTokenError):
        parse_decision_token(raw)


def test_malformed_token_error_is_a_value_error():
    with pytest.raises(ValueError) as excinfo:
        parse_decision_token("nonsense")

    assert excinfo.value.raw_token == "nonsense"
    assert "parts" in excinfo.value.reason


def test_action_target_status():
    assert DecisionAction.CONFIRM.target_status is RequestStatus.CONFIRMED
    assert DecisionAction.DECLINE.target_status is RequestStatus.DECLINED
