"""Slot occupancy rules for reservation admission."""

from __future__ import annotations

from typing import Any, Callable, Mapping

from tracking import t

from reservations.errors import CapacityExceededError
from reservations.models import RequestStatus, SlotKey


def occupies_slot(slot: SlotKey) -> Callable[[Mapping[str, Any]], bool]:
    """Predicate matching records that hold a place in ``slot``.

    Pending and confirmed reservations both count; declined ones free their place.
    """

    t('reservations.services.capacity.occupies_slot')

    def _predicate(record: Mapping[str, Any]) -> bool:
        return (
            record.get('reservation_date') == slot.reservation_date
            and record.get('reservation_time') == slot.reservation_time
            and record.get('status') != RequestStatus.DECLINED.value
        )

    return _predicate


def ensure_slot_capacity(slot: SlotKey, occupied: int, limit: int, *, logger: Any) -> None:
    """Raise :class:`CapacityExceededError` if ``slot`` has no free place."""

    t('reservations.services.capacity.ensure_slot_capacity')
    if occupied < limit:
        return

    logger.warning(
        """RESERVATION REJECTED - SLOT FULL
        Slot: %s
        Occupied: %s / %s
        """,
        slot,
        occupied,
        limit,
    )
    raise CapacityExceededError(slot.reservation_date, slot.reservation_time, limit, occupied)


__all__ = ["occupies_slot", "ensure_slot_capacity"]
