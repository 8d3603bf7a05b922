"""Record store used by the workflow core."""

from .record_store import Predicate, RecordStore
from .repository import DocumentRepository

__all__ = ["RecordStore", "Predicate", "DocumentRepository"]
