"""Error taxonomy for the admission and approval workflow."""

from __future__ import annotations

from typing import Any, Optional


class WorkflowError(Exception):
    """Base class for every error raised by the workflow core."""


class CapacityExceededError(WorkflowError):
    """The requested time slot is already at its capacity limit.

    Not retryable with the same payload: the customer has to pick another slot.
    """

    def __init__(self, reservation_date: str, reservation_time: str, limit: int, occupied: int) -> None:
        self.reservation_date = reservation_date
        self.reservation_time = reservation_time
        self.limit = limit
        self.occupied = occupied
        super().__init__(
            f"Slot {reservation_date} {reservation_time} is full "
            f"({occupied}/{limit} places taken)"
        )


class RequestNotFoundError(WorkflowError):
    """A decision targeted a request id that does not exist."""

    def __init__(self, kind: Any, request_id: str) -> None:
        self.kind = kind
        self.request_id = request_id
        super().__init__(f"No {getattr(kind, 'value', kind)} with id {request_id!r}")


class AlreadyResolvedError(WorkflowError):
    """A decision targeted a request that already reached a terminal state."""

    def __init__(self, kind: Any, request_id: str, status: Any) -> None:
        self.kind = kind
        self.request_id = request_id
        self.status = status
        super().__init__(
            f"{getattr(kind, 'value', kind)} {request_id!r} is already "
            f"{getattr(status, 'value', status)}"
        )


class MalformedDecisionTokenError(WorkflowError, ValueError):
    """Operator callback data that cannot be parsed into a decision."""

    def __init__(self, raw_token: Optional[str], reason: str) -> None:
        self.raw_token = raw_token
        self.reason = reason
        super().__init__(f"Malformed decision token {raw_token!r}: {reason}")


class StoreUnavailableError(WorkflowError):
    """The record store could not be read or written. Retryable."""


class NotificationSendError(WorkflowError):
    """A chat or email notification could not be delivered."""

    def __init__(self, channel: str, detail: str) -> None:
        self.channel = channel
        self.detail = detail
        super().__init__(f"{channel} notification failed: {detail}")


__all__ = [
    "WorkflowError",
    "CapacityExceededError",
    "RequestNotFoundError",
    "AlreadyResolvedError",
    "MalformedDecisionTokenError",
    "StoreUnavailableError",
    "NotificationSendError",
]
