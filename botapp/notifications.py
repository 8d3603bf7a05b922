"""Operator alerts, callback acknowledgements and customer messages."""

from __future__ import annotations

import re
from typing import List, Optional, Tuple
from urllib.parse import quote

from tracking import t

from botapp.sinks.base import OperatorAction
from botapp.ui.text_blocks import (
    MarkdownBlockBuilder,
    MarkdownBuilderBase,
    bold_telegram_text,
    markdown_link,
)
from infrastructure.constants import (
    DEFAULT_BUSINESS_NAME,
    DEFAULT_WHATSAPP_COUNTRY_CODE,
    WHATSAPP_BASE_URL,
)
from reservations.models import (
    DecisionAction,
    DecisionToken,
    Request,
    RequestKind,
    RequestStatus,
)

CONFIRM_BUTTON_LABEL = "✅ Confirm"
DECLINE_BUTTON_LABEL = "❌ Decline"

_NON_DIGITS = re.compile(r"\D+")
# Area code plus mobile number, e.g. 11 98765-4321
NATIONAL_NUMBER_MAX_DIGITS = 11

_STATUS_BADGES = {
    RequestStatus.PENDING: "🕒",
    RequestStatus.CONFIRMED: "✅",
    RequestStatus.DECLINED: "❌",
}


def normalize_phone(phone: Optional[str], country_code: str = DEFAULT_WHATSAPP_COUNTRY_CODE) -> str:
    """Digits-only phone with the country code prefixed when missing.

    A number is taken as international only when written with ``+`` or
    ``00``, or when it is longer than a national number. An area code equal
    to the country code (55 in Rio Grande do Sul) is still national.
    """
    t('botapp.notifications.normalize_phone')
    raw = (phone or "").strip()
    digits = _NON_DIGITS.sub("", raw)
    if not digits:
        return ""
    if raw.startswith("+"):
        return digits
    if digits.startswith("00"):
        return digits[2:]
    national = digits.lstrip("0")
    if len(national) > NATIONAL_NUMBER_MAX_DIGITS:
        return national
    return country_code + national


def whatsapp_link(phone: Optional[str], text: str, country_code: str = DEFAULT_WHATSAPP_COUNTRY_CODE) -> str:
    """Build a wa.me deep link that opens a chat with ``text`` prefilled."""
    t('botapp.notifications.whatsapp_link')
    number = normalize_phone(phone, country_code)
    return f"{WHATSAPP_BASE_URL}/{number}?text={quote(text, safe='')}"


class NotificationBuilder(MarkdownBuilderBase):
    """Build every text the workflow sends to the operator or the customer."""

    def __init__(
        self,
        builder_factory=MarkdownBlockBuilder,
        *,
        business_name: str = DEFAULT_BUSINESS_NAME,
        country_code: str = DEFAULT_WHATSAPP_COUNTRY_CODE,
    ) -> None:
        t('botapp.notifications.NotificationBuilder.__init__')
        super().__init__(builder_factory=builder_factory)
        self.business_name = business_name
        self.country_code = country_code

    # ------------------------------------------------------------------
    # Operator chat
    # ------------------------------------------------------------------
    def decision_actions(self, request: Request) -> List[OperatorAction]:
        """Confirm and decline buttons carrying the decision tokens."""
        t('botapp.notifications.NotificationBuilder.decision_actions')
        return [
            OperatorAction(
                CONFIRM_BUTTON_LABEL,
                DecisionToken(request.kind, DecisionAction.CONFIRM, request.id).encode(),
            ),
            OperatorAction(
                DECLINE_BUTTON_LABEL,
                DecisionToken(request.kind, DecisionAction.DECLINE, request.id).encode(),
            ),
        ]

    def pending_alert(self, request: Request) -> str:
        t('botapp.notifications.NotificationBuilder.pending_alert')
        if request.kind is RequestKind.RESERVATION:
            heading = f"*New Pending Reservation!* {_STATUS_BADGES[RequestStatus.PENDING]}"
        else:
            heading = "*New Pickup Order!* 🛍️"

        builder = self.create_builder().heading(heading).blank()
        self._request_fields(builder, request)
        builder.blank().line(
            markdown_link("➡️ Reply via WhatsApp", self.customer_link(request))
        )
        return builder.build()

    def resolved_message(self, request: Request) -> str:
        """Replacement text for the alert once a decision is committed."""
        t('botapp.notifications.NotificationBuilder.resolved_message')
        badge = _STATUS_BADGES[request.status]
        heading = f"*{request.kind.label.upper()} {request.status.value.upper()}!* {badge}"

        builder = self.create_builder().heading(heading).blank()
        self._request_fields(builder, request)
        builder.blank().line(
            markdown_link("➡️ Continue on WhatsApp", self.customer_link(request))
        )
        return builder.build()

    def pending_summary(self, requests: List[Request]) -> str:
        """Short listing used by the ``/pending`` command."""
        t('botapp.notifications.NotificationBuilder.pending_summary')
        if not requests:
            return "No pending requests. 🎉"

        builder = self.create_builder().heading(
            bold_telegram_text(f"Pending requests ({len(requests)})")
        ).blank()
        for request in requests:
            if request.kind is RequestKind.RESERVATION:
                detail = f"{request.reservation_date} {request.reservation_time}, {request.party_size or '?'} people"
            else:
                detail = f"pickup {request.pickup_time or 'not set'}"
            builder.field(f"{request.kind.label} {request.id}", f"{request.name} ({detail})")
        return builder.build()

    def _request_fields(self, builder: MarkdownBlockBuilder, request: Request) -> None:
        builder.field("Name", request.name).field("Phone", request.contact_phone)
        builder.field("Email", request.contact_email)
        if request.kind is RequestKind.RESERVATION:
            builder.field("Date", f"{request.reservation_date} at {request.reservation_time}")
            builder.field("People", request.party_size)
        else:
            builder.field("Items", request.items)
            builder.field("Total", request.total)
            builder.field("Pickup", request.pickup_time)
        builder.field("Notes", request.notes)

    # ------------------------------------------------------------------
    # Callback acknowledgements (plain text, shown as a toast)
    # ------------------------------------------------------------------
    def decision_ack(self, request: Request) -> str:
        t('botapp.notifications.NotificationBuilder.decision_ack')
        return f"{request.kind.label} {request.status.value}!"

    def already_handled_ack(self, kind: RequestKind) -> str:
        t('botapp.notifications.NotificationBuilder.already_handled_ack')
        return f"This {kind.value} was already handled."

    def not_found_ack(self, kind: RequestKind) -> str:
        t('botapp.notifications.NotificationBuilder.not_found_ack')
        return f"This {kind.value} does not exist or was already handled."

    def invalid_ack(self) -> str:
        return "Invalid request."

    def retry_ack(self) -> str:
        return "Could not process this action right now. Please try again."

    # ------------------------------------------------------------------
    # Customer messages
    # ------------------------------------------------------------------
    def customer_greeting(self, request: Request) -> str:
        """Prefilled WhatsApp text for the customer chat."""
        t('botapp.notifications.NotificationBuilder.customer_greeting')
        noun = request.kind.value
        if request.status is RequestStatus.PENDING:
            return f"Hello {request.name}! About your {noun} at {self.business_name}..."
        return f"Hello {request.name}! Your {noun} at {self.business_name} was {request.status.value}."

    def customer_link(self, request: Request) -> str:
        t('botapp.notifications.NotificationBuilder.customer_link')
        return whatsapp_link(request.contact_phone, self.customer_greeting(request), self.country_code)

    def email_message(self, request: Request) -> Tuple[str, str]:
        """Subject and plain-text body for the decision email."""
        t('botapp.notifications.NotificationBuilder.email_message')
        status = request.status.value
        subject = f"Your {request.kind.value} at {self.business_name} was {status}!"

        if request.kind is RequestKind.RESERVATION:
            what = f"your reservation for {request.reservation_date} at {request.reservation_time}"
        else:
            what = f"your order ({request.items})" if request.items else "your order"

        if request.status is RequestStatus.CONFIRMED:
            lines = [f"Hello {request.name}, {what} was CONFIRMED!"]
            if request.kind is RequestKind.ORDER and request.pickup_time:
                lines.append(f"Pickup time: {request.pickup_time}.")
            lines.append("We look forward to seeing you.")
        else:
            lines = [
                f"Hello {request.name}, unfortunately {what} was DECLINED.",
                "We apologise for the inconvenience.",
            ]
        lines += ["", self.business_name]
        return subject, "\n".join(lines)


__all__ = [
    "CONFIRM_BUTTON_LABEL",
    "DECLINE_BUTTON_LABEL",
    "NotificationBuilder",
    "normalize_phone",
    "whatsapp_link",
]
