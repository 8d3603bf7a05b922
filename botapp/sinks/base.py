"""Channel interfaces used by the workflow to reach the operator and customers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, Sequence

from reservations.models import MessageRef


@dataclass(frozen=True)
class OperatorAction:
    """A button on an operator alert; ``token`` is sent back on click."""

    label: str
    token: str


class OperatorChannel(Protocol):
    async def post_operator_alert(self, text: str, actions: Sequence[OperatorAction]) -> MessageRef:
        ...

    async def edit_operator_message(self, ref: MessageRef, text: str) -> None:
        ...

    async def acknowledge(self, event_id: str, text: str) -> None:
        ...


class EmailChannel(Protocol):
    async def send_email(self, to: str, subject: str, body: str) -> None:
        ...


__all__ = ["EmailChannel", "OperatorAction", "OperatorChannel"]
