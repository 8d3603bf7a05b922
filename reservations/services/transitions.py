"""State transition rules for request records."""

from __future__ import annotations

from typing import Dict, Tuple

from tracking import t

from reservations.errors import AlreadyResolvedError
from reservations.models import DecisionAction, Request, RequestStatus

TRANSITIONS: Dict[Tuple[RequestStatus, DecisionAction], RequestStatus] = {
    (RequestStatus.PENDING, DecisionAction.CONFIRM): RequestStatus.CONFIRMED,
    (RequestStatus.PENDING, DecisionAction.DECLINE): RequestStatus.DECLINED,
}


def next_status(request: Request, action: DecisionAction) -> RequestStatus:
    """Return the status ``action`` moves ``request`` to.

    Raises:
        AlreadyResolvedError: no transition is defined from the current status.
    """

    t('reservations.services.transitions.next_status')
    target = TRANSITIONS.get((request.status, action))
    if target is None:
        raise AlreadyResolvedError(request.kind, request.id, request.status)
    return target


__all__ = ["TRANSITIONS", "next_status"]
