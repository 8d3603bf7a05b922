"""Workflow services: admission, lifecycle transitions and locking."""

from .admission import AdmissionController, new_request_id
from .key_locks import KeyedLockTable
from .workflow import TransitionOutcome, WorkflowEngine

__all__ = [
    "AdmissionController",
    "KeyedLockTable",
    "TransitionOutcome",
    "WorkflowEngine",
    "new_request_id",
]
