import pytest

from reservations.errors import AlreadyResolvedError, CapacityExceededError
from reservations.models import DecisionAction, Request, RequestKind, RequestStatus, SlotKey
from reservations.services.capacity import ensure_slot_capacity, occupies_slot
from reservations.services.transitions import next_status
from tests.helpers import FIXED_NOW, DummyLogger

SLOT = SlotKey("2025-05-20", "19:00")


def _record(status, date="2025-05-20", time="19:00"):
    return {"reservation_date": date, "reservation_time": time, "status": status}


def test_pending_and_confirmed_occupy_the_slot():
    predicate = occupies_slot(SLOT)

    assert predicate(_record("pending"))
    assert predicate(_record("confirmed"))
    assert not predicate(_record("declined"))


def test_other_slots_do_not_count():
    predicate = occupies_slot(SLOT)

    assert not predicate(_record("pending", time="20:00"))
    assert not predicate(_record("pending", date="2025-05-21"))


def test_ensure_capacity_allows_below_limit():
    logger = DummyLogger()

    ensure_slot_capacity(SLOT, 9, 10, logger=logger)

    assert logger.records == []


def test_ensure_capacity_rejects_at_limit():
    logger = DummyLogger()

    with pytest.raises(CapacityExceededError) as excinfo:
        ensure_slot_capacity(SLOT, 10, 10, logger=logger)

    assert excinfo.value.limit == 10
    assert excinfo.value.occupied == 10
    assert logger.levels() == ["warning"]


def test_zero_limit_rejects_everything():
    with pytest.raises(CapacityExceededError):
        ensure_slot_capacity(SLOT, 0, 0, logger=DummyLogger())


def _request(status):
    return Request(
        id="r1",
        kind=RequestKind.RESERVATION,
        status=status,
        name="Ana",
        contact_phone="1199",
        submitted_at=FIXED_NOW,
    )


def test_pending_transitions():
    assert next_status(_request(RequestStatus.PENDING), DecisionAction.CONFIRM) is RequestStatus.CONFIRMED
    assert next_status(_request(RequestStatus.PENDING), DecisionAction.DECLINE) is RequestStatus.DECLINED


@pytest.mark.parametrize("status", [RequestStatus.CONFIRMED, RequestStatus.DECLINED])
@pytest.mark.parametrize("action", list(DecisionAction))
def test_terminal_states_have_no_transitions(status, action):
    with pytest.raises(AlreadyResolvedError) as excinfo:
        next_status(_request(status), action)

    assert excinfo.value.status is status
