"""Domain model definitions for the approval workflow."""

from .request import MessageRef, Request, RequestKind, RequestStatus, SlotKey
from .decision import DecisionAction, DecisionToken, parse_decision_token

__all__ = [
    "MessageRef",
    "Request",
    "RequestKind",
    "RequestStatus",
    "SlotKey",
    "DecisionAction",
    "DecisionToken",
    "parse_decision_token",
]
