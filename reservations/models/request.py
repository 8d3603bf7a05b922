"""Request entity shared by reservations and pickup orders."""

from __future__ import annotations
from tracking import t

from dataclasses import asdict, dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Mapping, NamedTuple, Optional

from infrastructure.constants import ORDERS_COLLECTION, RESERVATIONS_COLLECTION


class RequestKind(Enum):
    """Entity variants. The value is the wire name used in decision tokens."""
    RESERVATION = "reservation"
    ORDER = "order"

    @property
    def collection(self) -> str:
        return RESERVATIONS_COLLECTION if self is RequestKind.RESERVATION else ORDERS_COLLECTION

    @property
    def label(self) -> str:
        return "Reservation" if self is RequestKind.RESERVATION else "Order"


class RequestStatus(Enum):
    """Lifecycle states. Confirmed and declined are terminal."""
    PENDING = "pending"
    CONFIRMED = "confirmed"
    DECLINED = "declined"


class SlotKey(NamedTuple):
    """Capacity bucket for reservations."""

    reservation_date: str
    reservation_time: str

    def __str__(self) -> str:
        return f"{self.reservation_date} {self.reservation_time}"


@dataclass(frozen=True)
class MessageRef:
    """Location of a message in the operator chat."""

    chat_id: int
    message_id: int

    def as_dict(self) -> Dict[str, int]:
        return {"chat_id": self.chat_id, "message_id": self.message_id}

    @classmethod
    def from_dict(cls, payload: Optional[Mapping[str, Any]]) -> Optional["MessageRef"]:
        if not payload:
            return None
        try:
            return cls(chat_id=int(payload["chat_id"]), message_id=int(payload["message_id"]))
        except (KeyError, TypeError, ValueError):
            return None


@dataclass(frozen=True)
class Request:
    """Immutable snapshot of a reservation or order record."""

    id: str
    kind: RequestKind
    status: RequestStatus
    name: str
    contact_phone: str
    submitted_at: datetime
    contact_email: Optional[str] = None
    notes: Optional[str] = None
    reservation_date: Optional[str] = None
    reservation_time: Optional[str] = None
    party_size: Optional[int] = None
    items: Optional[str] = None
    total: Optional[str] = None
    pickup_time: Optional[str] = None
    resolved_at: Optional[datetime] = None
    operator_message: Optional[MessageRef] = field(default=None, compare=False)

    @property
    def slot_key(self) -> Optional[SlotKey]:
        if self.kind is not RequestKind.RESERVATION:
            return None
        return SlotKey(self.reservation_date or "", self.reservation_time or "")

    @property
    def is_pending(self) -> bool:
        return self.status is RequestStatus.PENDING

    def with_status(self, status: RequestStatus, resolved_at: datetime) -> "Request":
        return replace(self, status=status, resolved_at=resolved_at)

    def to_record(self) -> Dict[str, Any]:
        """Serialize to the plain dict stored in the record store."""
        t('reservations.models.request.Request.to_record')
        record = asdict(self)
        record["kind"] = self.kind.value
        record["status"] = self.status.value
        record["submitted_at"] = self.submitted_at.isoformat()
        record["resolved_at"] = self.resolved_at.isoformat() if self.resolved_at else None
        record["operator_message"] = self.operator_message.as_dict() if self.operator_message else None
        return record

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "Request":
        """Hydrate a snapshot from a stored record."""
        t('reservations.models.request.Request.from_record')
        resolved_raw = record.get("resolved_at")
        party_size = record.get("party_size")
        return cls(
            id=str(record["id"]),
            kind=RequestKind(record["kind"]),
            status=RequestStatus(record["status"]),
            name=record.get("name", ""),
            contact_phone=record.get("contact_phone", ""),
            submitted_at=datetime.fromisoformat(record["submitted_at"]),
            contact_email=record.get("contact_email") or None,
            notes=record.get("notes"),
            reservation_date=record.get("reservation_date"),
            reservation_time=record.get("reservation_time"),
            party_size=int(party_size) if party_size is not None else None,
            items=record.get("items"),
            total=record.get("total"),
            pickup_time=record.get("pickup_time"),
            resolved_at=datetime.fromisoformat(resolved_raw) if resolved_raw else None,
            operator_message=MessageRef.from_dict(record.get("operator_message")),
        )


__all__ = ["RequestKind", "RequestStatus", "SlotKey", "MessageRef", "Request"]
