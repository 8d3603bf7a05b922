import asyncio

import pytest

from reservations.errors import AlreadyResolvedError, RequestNotFoundError, StoreUnavailableError
from reservations.models import DecisionAction, MessageRef, Request, RequestKind, RequestStatus
from reservations.services import WorkflowEngine
from reservations.store import RecordStore
from tests.helpers import FIXED_NOW, AccessCountingStore, DummyLogger, SuspendingStore, fixed_clock


def _pending(request_id="r1", kind=RequestKind.RESERVATION):
    return Request(
        id=request_id,
        kind=kind,
        status=RequestStatus.PENDING,
        name="Ana",
        contact_phone="11987654321",
        submitted_at=FIXED_NOW,
        reservation_date="2025-05-20",
        reservation_time="19:00",
        party_size=2,
    )


def _engine(store=None):
    return WorkflowEngine(store or RecordStore(), clock=fixed_clock, logger=DummyLogger())


@pytest.mark.asyncio
async def test_confirm_moves_pending_to_confirmed():
    engine = _engine()
    await engine.create(_pending())

    outcome = await engine.apply_decision(RequestKind.RESERVATION, "r1", DecisionAction.CONFIRM)

    assert outcome.previous_status is RequestStatus.PENDING
    assert outcome.status is RequestStatus.CONFIRMED
    assert outcome.request.resolved_at == FIXED_NOW
    stored = await engine.get(RequestKind.RESERVATION, "r1")
    assert stored.status is RequestStatus.CONFIRMED


@pytest.mark.asyncio
async def test_second_decision_is_rejected_and_state_unchanged():
    engine = _engine()
    await engine.create(_pending())
    await engine.apply_decision(RequestKind.RESERVATION, "r1", DecisionAction.DECLINE)

    for action in DecisionAction:
        with pytest.raises(AlreadyResolvedError):
            await engine.apply_decision(RequestKind.RESERVATION, "r1", action)

    assert (await engine.get(RequestKind.RESERVATION, "r1")).status is RequestStatus.DECLINED


@pytest.mark.asyncio
async def test_unknown_id_raises_not_found():
    engine = _engine()

    with pytest.raises(RequestNotFoundError):
        await engine.apply_decision(RequestKind.ORDER, "ghost", DecisionAction.CONFIRM)


@pytest.mark.asyncio
async def test_kind_selects_the_collection():
    engine = _engine()
    await engine.create(_pending("shared", kind=RequestKind.ORDER))

    with pytest.raises(RequestNotFoundError):
        await engine.apply_decision(RequestKind.RESERVATION, "shared", DecisionAction.CONFIRM)


@pytest.mark.asyncio
async def test_racing_decisions_commit_exactly_once():
    engine = _engine(SuspendingStore())
    await engine.create(_pending())

    results = await asyncio.gather(
        engine.apply_decision(RequestKind.RESERVATION, "r1", DecisionAction.CONFIRM),
        engine.apply_decision(RequestKind.RESERVATION, "r1", DecisionAction.DECLINE),
        engine.apply_decision(RequestKind.RESERVATION, "r1", DecisionAction.CONFIRM),
        return_exceptions=True,
    )

    committed = [result for result in results if not isinstance(result, Exception)]
    assert len(committed) == 1
    assert sum(isinstance(result, AlreadyResolvedError) for result in results) == 2
    stored = await engine.get(RequestKind.RESERVATION, "r1")
    assert stored.status is committed[0].status


@pytest.mark.asyncio
async def test_store_failure_leaves_request_pending():
    store = AccessCountingStore()
    engine = _engine(store)
    await engine.create(_pending())
    store.fail = True

    with pytest.raises(StoreUnavailableError):
        await engine.apply_decision(RequestKind.RESERVATION, "r1", DecisionAction.CONFIRM)

    store.fail = False
    assert (await engine.get(RequestKind.RESERVATION, "r1")).is_pending


@pytest.mark.asyncio
async def test_create_rejects_non_pending_requests():
    engine = _engine()
    resolved = _pending().with_status(RequestStatus.CONFIRMED, FIXED_NOW)

    with pytest.raises(ValueError):
        await engine.create(resolved)


@pytest.mark.asyncio
async def test_list_pending_and_attach_operator_message():
    engine = _engine()
    await engine.create(_pending("r1"))
    await engine.create(_pending("r2"))
    await engine.apply_decision(RequestKind.RESERVATION, "r2", DecisionAction.CONFIRM)

    await engine.attach_operator_message(RequestKind.RESERVATION, "r1", MessageRef(-100, 7))

    pending = await engine.list_pending(RequestKind.RESERVATION)
    assert [request.id for request in pending] == ["r1"]
    assert pending[0].operator_message == MessageRef(-100, 7)

    with pytest.raises(RequestNotFoundError):
        await engine.attach_operator_message(RequestKind.RESERVATION, "ghost", MessageRef(-100, 8))


def test_request_record_round_trip_keeps_message_ref():
    request = _pending()
    record = request.to_record()
    record["operator_message"] = {"chat_id": -100, "message_id": 9}

    restored = Request.from_record(record)

    assert restored.kind is RequestKind.RESERVATION
    assert restored.submitted_at == FIXED_NOW
    assert restored.operator_message == MessageRef(-100, 9)
