"""
Workflow Engine

Owns the request lifecycle: records are created ``pending`` and move exactly
once to ``confirmed`` or ``declined``. Decisions on the same record are
serialised through a per-id lock so that only one of several racing decisions
can observe ``pending``.
"""

from __future__ import annotations
from tracking import t

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, List, Optional

import pytz

from reservations.errors import AlreadyResolvedError, RequestNotFoundError
from reservations.models import (
    DecisionAction,
    MessageRef,
    Request,
    RequestKind,
    RequestStatus,
)
from reservations.services.key_locks import KeyedLockTable
from reservations.services.transitions import next_status
from reservations.store import RecordStore


def utc_now() -> datetime:
    return datetime.now(pytz.UTC)


@dataclass(frozen=True)
class TransitionOutcome:
    """Result of a committed decision."""

    request: Request
    previous_status: RequestStatus
    action: DecisionAction

    @property
    def status(self) -> RequestStatus:
        return self.request.status


class WorkflowEngine:
    """Create requests and apply operator decisions as guarded transitions."""

    def __init__(
        self,
        store: RecordStore,
        locks: Optional[KeyedLockTable] = None,
        *,
        clock: Callable[[], datetime] = utc_now,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        t('reservations.services.workflow.WorkflowEngine.__init__')
        self.store = store
        self.locks = locks or KeyedLockTable()
        self.clock = clock
        self.logger = logger or logging.getLogger('WorkflowEngine')

    async def create(self, request: Request) -> Request:
        """Persist a new pending request."""
        t('reservations.services.workflow.WorkflowEngine.create')
        if not request.is_pending:
            raise ValueError(f"New requests must be pending, got {request.status.value}")

        await self.store.append(request.kind.collection, request.to_record())
        self.logger.info(
            "%s %s created (pending) for %s",
            request.kind.label,
            request.id,
            request.name,
        )
        return request

    async def get(self, kind: RequestKind, request_id: str) -> Optional[Request]:
        t('reservations.services.workflow.WorkflowEngine.get')
        record = await self.store.find_by_id(kind.collection, request_id)
        return Request.from_record(record) if record else None

    async def list_pending(self, kind: RequestKind) -> List[Request]:
        t('reservations.services.workflow.WorkflowEngine.list_pending')
        records = await self.store.scan(
            kind.collection,
            lambda record: record.get('status') == RequestStatus.PENDING.value,
        )
        return [Request.from_record(record) for record in records]

    async def apply_decision(
        self,
        kind: RequestKind,
        request_id: str,
        action: DecisionAction,
    ) -> TransitionOutcome:
        """Move a pending request to the status selected by ``action``.

        Raises:
            RequestNotFoundError: no such request.
            AlreadyResolvedError: the request is no longer pending.
            StoreUnavailableError: the store could not be read or written.
        """
        t('reservations.services.workflow.WorkflowEngine.apply_decision')

        async with self.locks.hold(kind.collection, 'id', request_id):
            current = await self.get(kind, request_id)
            if current is None:
                self.logger.warning("Decision %s for unknown %s %s", action.value, kind.value, request_id)
                raise RequestNotFoundError(kind, request_id)

            try:
                target = next_status(current, action)
            except AlreadyResolvedError:
                self.logger.info(
                    "Decision %s ignored: %s %s already %s",
                    action.value,
                    kind.value,
                    request_id,
                    current.status.value,
                )
                raise

            resolved_at = self.clock()
            record = await self.store.update_field(
                kind.collection,
                request_id,
                {'status': target.value, 'resolved_at': resolved_at.isoformat()},
            )

        resolved = Request.from_record(record)
        self.logger.info(
            """DECISION APPLIED
        %s: %s
        Customer: %s
        Status: %s -> %s
        """,
            kind.label,
            request_id,
            resolved.name,
            current.status.value,
            resolved.status.value,
        )
        return TransitionOutcome(request=resolved, previous_status=current.status, action=action)

    async def attach_operator_message(
        self,
        kind: RequestKind,
        request_id: str,
        ref: MessageRef,
    ) -> None:
        """Remember where the operator alert for a request was posted."""
        t('reservations.services.workflow.WorkflowEngine.attach_operator_message')
        async with self.locks.hold(kind.collection, 'id', request_id):
            try:
                await self.store.update_field(kind.collection, request_id, {'operator_message': ref.as_dict()})
            except KeyError:
                raise RequestNotFoundError(kind, request_id) from None


__all__ = ["TransitionOutcome", "WorkflowEngine", "utc_now"]
