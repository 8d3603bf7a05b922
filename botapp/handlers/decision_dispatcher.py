"""
Decision Dispatcher

Turns an operator button press into at most one committed transition and
exactly one acknowledgement. Side effects of a committed decision (editing the
alert, emailing the customer) are attempted independently: a failure in one
channel is logged and never blocks the others or the acknowledgement.
"""

from __future__ import annotations
from tracking import t

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional

from botapp.notifications import NotificationBuilder
from botapp.sinks.base import EmailChannel, OperatorChannel
from reservations.errors import (
    AlreadyResolvedError,
    MalformedDecisionTokenError,
    NotificationSendError,
    RequestNotFoundError,
    StoreUnavailableError,
)
from reservations.models import MessageRef, Request, RequestKind, parse_decision_token
from reservations.services import TransitionOutcome, WorkflowEngine


@dataclass(frozen=True)
class DecisionEvent:
    """A single button press delivered by the chat platform."""

    event_id: str
    token: Optional[str]
    message_ref: Optional[MessageRef] = None
    operator: Optional[str] = None


class DispatchResult(Enum):
    APPLIED = "applied"
    INVALID = "invalid"
    NOT_FOUND = "not_found"
    ALREADY_RESOLVED = "already_resolved"
    RETRY = "retry"


class DecisionDispatcher:
    """Parse, apply and acknowledge operator decisions."""

    def __init__(
        self,
        workflow: WorkflowEngine,
        operator_channel: OperatorChannel,
        email_channel: Optional[EmailChannel] = None,
        *,
        builder: Optional[NotificationBuilder] = None,
        email_kinds: Iterable[RequestKind] = (RequestKind.RESERVATION,),
        logger: Optional[logging.Logger] = None,
    ) -> None:
        t('botapp.handlers.decision_dispatcher.DecisionDispatcher.__init__')
        self.workflow = workflow
        self.operator_channel = operator_channel
        self.email_channel = email_channel
        self.builder = builder or NotificationBuilder()
        self.email_kinds = frozenset(email_kinds)
        self.logger = logger or logging.getLogger('DecisionDispatcher')

    async def handle(self, event: DecisionEvent) -> DispatchResult:
        t('botapp.handlers.decision_dispatcher.DecisionDispatcher.handle')
        try:
            token = parse_decision_token(event.token)
        except MalformedDecisionTokenError as exc:
            self.logger.warning("Rejected callback %s: %s", event.event_id, exc.reason)
            await self._acknowledge(event, self.builder.invalid_ack())
            return DispatchResult.INVALID

        self.logger.info(
            "Decision %s on %s %s from %s",
            token.action.value,
            token.kind.value,
            token.request_id,
            event.operator or 'unknown operator',
        )

        try:
            outcome = await self.workflow.apply_decision(token.kind, token.request_id, token.action)
        except RequestNotFoundError:
            await self._acknowledge(event, self.builder.not_found_ack(token.kind))
            return DispatchResult.NOT_FOUND
        except AlreadyResolvedError:
            await self._acknowledge(event, self.builder.already_handled_ack(token.kind))
            return DispatchResult.ALREADY_RESOLVED
        except StoreUnavailableError as exc:
            self.logger.error("Store unavailable while deciding %s: %s", token.encode(), exc)
            await self._acknowledge(event, self.builder.retry_ack())
            return DispatchResult.RETRY

        await self._update_operator_message(event, outcome)
        await self._email_customer(outcome.request)
        await self._acknowledge(event, self.builder.decision_ack(outcome.request))
        return DispatchResult.APPLIED

    async def _update_operator_message(self, event: DecisionEvent, outcome: TransitionOutcome) -> None:
        t('botapp.handlers.decision_dispatcher.DecisionDispatcher._update_operator_message')
        ref = event.message_ref or outcome.request.operator_message
        if ref is None:
            self.logger.warning("No operator message recorded for %s", outcome.request.id)
            return
        try:
            await self.operator_channel.edit_operator_message(ref, self.builder.resolved_message(outcome.request))
        except NotificationSendError as exc:
            self.logger.error("Could not update operator message %s: %s", ref.message_id, exc)

    async def _email_customer(self, request: Request) -> None:
        t('botapp.handlers.decision_dispatcher.DecisionDispatcher._email_customer')
        if self.email_channel is None or request.kind not in self.email_kinds:
            return
        if not request.contact_email:
            self.logger.info("%s %s has no email address; skipping email", request.kind.label, request.id)
            return

        subject, body = self.builder.email_message(request)
        try:
            await self.email_channel.send_email(request.contact_email, subject, body)
        except NotificationSendError as exc:
            self.logger.error("Decision email for %s not sent: %s", request.id, exc)

    async def _acknowledge(self, event: DecisionEvent, text: str) -> None:
        t('botapp.handlers.decision_dispatcher.DecisionDispatcher._acknowledge')
        try:
            await self.operator_channel.acknowledge(event.event_id, text)
        except NotificationSendError as exc:
            self.logger.error("Could not answer callback %s: %s", event.event_id, exc)


__all__ = ["DecisionDispatcher", "DecisionEvent", "DispatchResult"]
