"""
Admission Controller

Decides whether a submission may enter the workflow. Reservations are checked
against the per-slot capacity limit; the count and the append run under one
per-slot lock so two concurrent submissions cannot both take the last place.
Orders are always admitted.
"""

from __future__ import annotations
from tracking import t

import logging
import uuid
from typing import Any, Awaitable, Callable, Mapping, Optional

from reservations.errors import StoreUnavailableError
from reservations.models import Request, RequestKind, RequestStatus
from reservations.services.capacity import ensure_slot_capacity, occupies_slot
from reservations.services.workflow import WorkflowEngine

AdmissionListener = Callable[[Request], Awaitable[None]]

_COMMON_FIELDS = ('name', 'contact_phone', 'contact_email', 'notes')
_KIND_FIELDS = {
    RequestKind.RESERVATION: ('reservation_date', 'reservation_time', 'party_size'),
    RequestKind.ORDER: ('items', 'total', 'pickup_time'),
}


def new_request_id() -> str:
    return uuid.uuid4().hex


class AdmissionController:
    """Capacity check plus creation, followed by the operator alert."""

    def __init__(
        self,
        workflow: WorkflowEngine,
        *,
        capacity_limit: int,
        on_admitted: Optional[AdmissionListener] = None,
        id_factory: Callable[[], str] = new_request_id,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        t('reservations.services.admission.AdmissionController.__init__')
        self.workflow = workflow
        self.capacity_limit = capacity_limit
        self.on_admitted = on_admitted
        self.id_factory = id_factory
        self.logger = logger or logging.getLogger('AdmissionController')

    def _build_request(self, kind: RequestKind, fields: Mapping[str, Any]) -> Request:
        t('reservations.services.admission.AdmissionController._build_request')
        allowed = _COMMON_FIELDS + _KIND_FIELDS[kind]
        values = {key: fields.get(key) for key in allowed if fields.get(key) is not None}

        missing = [key for key in ('name', 'contact_phone') if not values.get(key)]
        if kind is RequestKind.RESERVATION:
            missing += [key for key in ('reservation_date', 'reservation_time') if not values.get(key)]
        if missing:
            raise ValueError(f"Missing required fields for {kind.value}: {', '.join(missing)}")

        return Request(
            id=self.id_factory(),
            kind=kind,
            status=RequestStatus.PENDING,
            submitted_at=self.workflow.clock(),
            **values,
        )

    async def try_admit(self, kind: RequestKind, fields: Mapping[str, Any]) -> Request:
        """Admit a submission and return the created pending request.

        Raises:
            CapacityExceededError: the reservation slot is full; nothing was written.
            StoreUnavailableError: the capacity check or the write failed; retryable.
            ValueError: required fields are missing.
        """
        t('reservations.services.admission.AdmissionController.try_admit')
        request = self._build_request(kind, fields)

        if kind is RequestKind.RESERVATION:
            await self._admit_reservation(request)
        else:
            await self.workflow.create(request)

        await self._announce(request)
        return request

    async def _admit_reservation(self, request: Request) -> None:
        t('reservations.services.admission.AdmissionController._admit_reservation')
        slot = request.slot_key
        collection = request.kind.collection

        async with self.workflow.locks.hold(collection, 'slot', *slot):
            occupied = await self.workflow.store.count(collection, occupies_slot(slot))
            ensure_slot_capacity(slot, occupied, self.capacity_limit, logger=self.logger)
            await self.workflow.create(request)

        self.logger.info(
            """RESERVATION ADMITTED
        Reservation ID: %s
        Customer: %s
        Slot: %s
        Party size: %s
        Places taken: %s / %s
        """,
            request.id,
            request.name,
            slot,
            request.party_size,
            occupied + 1,
            self.capacity_limit,
        )

    async def _announce(self, request: Request) -> None:
        """Notify the operator; failures are logged and never undo the admission."""
        t('reservations.services.admission.AdmissionController._announce')
        if self.on_admitted is None:
            return
        try:
            await self.on_admitted(request)
        except StoreUnavailableError as exc:
            self.logger.error("Operator alert for %s sent but not recorded: %s", request.id, exc)
        except Exception as exc:  # the request is already committed
            self.logger.error(
                "Operator alert for %s %s failed: %s",
                request.kind.value,
                request.id,
                exc,
                exc_info=True,
            )


__all__ = ["AdmissionController", "AdmissionListener", "new_request_id"]
