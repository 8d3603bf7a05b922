"""Post a pending alert with decision buttons whenever a request is admitted."""

from __future__ import annotations
from tracking import t

import logging
from typing import Optional

from botapp.notifications import NotificationBuilder
from botapp.sinks.base import OperatorChannel
from reservations.models import Request
from reservations.services import WorkflowEngine


class OperatorAlerts:
    """Admission listener that alerts the operator chat."""

    def __init__(
        self,
        channel: OperatorChannel,
        workflow: WorkflowEngine,
        builder: Optional[NotificationBuilder] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        t('botapp.operator_alerts.OperatorAlerts.__init__')
        self.channel = channel
        self.workflow = workflow
        self.builder = builder or NotificationBuilder()
        self.logger = logger or logging.getLogger('OperatorAlerts')

    async def __call__(self, request: Request) -> None:
        t('botapp.operator_alerts.OperatorAlerts.__call__')
        text = self.builder.pending_alert(request)
        actions = self.builder.decision_actions(request)

        ref = await self.channel.post_operator_alert(text, actions)
        self.logger.info(
            "Operator alerted about %s %s (message %s)",
            request.kind.value,
            request.id,
            ref.message_id,
        )
        await self.workflow.attach_operator_message(request.kind, request.id, ref)


__all__ = ["OperatorAlerts"]
