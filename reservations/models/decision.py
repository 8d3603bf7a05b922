"""Operator decision tokens carried in chat callback data."""

from __future__ import annotations
from tracking import t

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from infrastructure.constants import (
    CALLBACK_DATA_MAX_BYTES,
    DECISION_TOKEN_DELIMITER,
    DECISION_TOKEN_PARTS,
    LEGACY_ACTION_ALIASES,
    LEGACY_KIND_ALIASES,
)
from reservations.errors import MalformedDecisionTokenError
from reservations.models.request import RequestKind, RequestStatus


class DecisionAction(Enum):
    """Operator decisions and the status each one resolves to."""
    CONFIRM = "confirm"
    DECLINE = "decline"

    @property
    def target_status(self) -> RequestStatus:
        return RequestStatus.CONFIRMED if self is DecisionAction.CONFIRM else RequestStatus.DECLINED


@dataclass(frozen=True)
class DecisionToken:
    """A parsed ``<kind>_<action>_<id>`` token."""

    kind: RequestKind
    action: DecisionAction
    request_id: str

    def encode(self) -> str:
        t('reservations.models.decision.DecisionToken.encode')
        return DECISION_TOKEN_DELIMITER.join(
            (self.kind.value, self.action.value, self.request_id)
        )


def _resolve_kind(raw: str) -> Optional[RequestKind]:
    value = LEGACY_KIND_ALIASES.get(raw, raw)
    try:
        return RequestKind(value)
    except ValueError:
        return None


def _resolve_action(raw: str) -> Optional[DecisionAction]:
    value = LEGACY_ACTION_ALIASES.get(raw, raw)
    try:
        return DecisionAction(value)
    except ValueError:
        return None


def parse_decision_token(raw: Optional[str]) -> DecisionToken:
    """Parse callback data into a :class:`DecisionToken`.

    Raises:
        MalformedDecisionTokenError: wrong part count, empty part, unknown kind
            or unknown action.
    """
    t('reservations.models.decision.parse_decision_token')

    if not raw:
        raise MalformedDecisionTokenError(raw, "empty token")
    if len(raw.encode("utf-8")) > CALLBACK_DATA_MAX_BYTES:
        raise MalformedDecisionTokenError(raw, "token too long")

    parts = raw.strip().split(DECISION_TOKEN_DELIMITER)
    if len(parts) != DECISION_TOKEN_PARTS:
        raise MalformedDecisionTokenError(
            raw, f"expected {DECISION_TOKEN_PARTS} parts, found {len(parts)}"
        )

    raw_kind, raw_action, request_id = (part.strip() for part in parts)
    if not request_id:
        raise MalformedDecisionTokenError(raw, "missing request id")

    kind = _resolve_kind(raw_kind.lower())
    if kind is None:
        raise MalformedDecisionTokenError(raw, f"unknown kind {raw_kind!r}")

    action = _resolve_action(raw_action.lower())
    if action is None:
        raise MalformedDecisionTokenError(raw, f"unknown action {raw_action!r}")

    return DecisionToken(kind=kind, action=action, request_id=request_id)


__all__ = ["DecisionAction", "DecisionToken", "parse_decision_token"]
