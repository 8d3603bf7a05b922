"""
Record Store

Document-style store holding one list of records per collection, mirrored to a
JSON file. Every mutating call is durable on return: the changed collection is
built as a copy, written to disk, and only swapped into the live document once
the write succeeded, so readers never observe an uncommitted change.
"""

from __future__ import annotations
from tracking import t

import asyncio
import copy
import logging
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional

from infrastructure.constants import DEFAULT_COLLECTIONS
from reservations.errors import StoreUnavailableError
from reservations.store.repository import DocumentRepository

Predicate = Callable[[Mapping[str, Any]], bool]


def _match_all(_record: Mapping[str, Any]) -> bool:
    return True


class RecordStore:
    """Async record store over an in-memory document with JSON persistence.

    Args:
        file_path: JSON file to mirror to. ``None`` keeps data in memory only.
        collections: Collections created when missing from the file.
    """

    def __init__(
        self,
        file_path: Optional[str] = None,
        *,
        collections: Iterable[str] = DEFAULT_COLLECTIONS,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        t('reservations.store.record_store.RecordStore.__init__')
        self.logger = logger or logging.getLogger('RecordStore')
        self.file_path = file_path
        self._repository = DocumentRepository(file_path, logger=self.logger) if file_path else None
        names = tuple(collections)
        self._document: Dict[str, List[dict]] = (
            self._repository.load(names) if self._repository else {name: [] for name in names}
        )
        self._write_lock = asyncio.Lock()
        self.logger.info(
            "Record store ready (file=%s, sizes=%s)",
            self.file_path or '<memory>',
            self.sizes(),
        )

    # ------------------------------------------------------------------
    # Internal helpers
    def _collection(self, collection: str) -> List[dict]:
        try:
            return self._document[collection]
        except KeyError:
            raise StoreUnavailableError(f"Unknown collection {collection!r}") from None

    async def _commit(self, collection: str, records: List[dict]) -> None:
        """Persist ``records`` as ``collection`` and then publish them.

        Caller must hold ``_write_lock``. The live document is untouched when
        the write fails.
        """
        if self._repository is not None:
            document = dict(self._document)
            document[collection] = records
            await self._persist(document)
        self._document[collection] = records

    async def _persist(self, document: Mapping[str, List[dict]]) -> None:
        await asyncio.to_thread(self._repository.save, document)

    # ------------------------------------------------------------------
    # Store operations
    async def append(self, collection: str, record: Mapping[str, Any]) -> None:
        """Append a record; its ``id`` must not already exist in the collection."""
        t('reservations.store.record_store.RecordStore.append')
        stored = copy.deepcopy(dict(record))
        record_id = stored.get('id')
        async with self._write_lock:
            records = self._collection(collection)
            if any(existing.get('id') == record_id for existing in records):
                raise ValueError(f"Duplicate id {record_id!r} in {collection}")
            await self._commit(collection, records + [stored])
        self.logger.debug("Appended %s to %s", record_id, collection)

    async def find(self, collection: str, predicate: Predicate) -> Optional[Dict[str, Any]]:
        """Return a copy of the first record matching ``predicate``."""
        t('reservations.store.record_store.RecordStore.find')
        for record in self._collection(collection):
            if predicate(record):
                return copy.deepcopy(record)
        return None

    async def find_by_id(self, collection: str, record_id: str) -> Optional[Dict[str, Any]]:
        t('reservations.store.record_store.RecordStore.find_by_id')
        return await self.find(collection, lambda record: record.get('id') == record_id)

    async def scan(self, collection: str, predicate: Optional[Predicate] = None) -> List[Dict[str, Any]]:
        """Return copies of all records matching ``predicate`` in insertion order."""
        t('reservations.store.record_store.RecordStore.scan')
        predicate = predicate or _match_all
        return [copy.deepcopy(record) for record in self._collection(collection) if predicate(record)]

    async def count(self, collection: str, predicate: Optional[Predicate] = None) -> int:
        t('reservations.store.record_store.RecordStore.count')
        predicate = predicate or _match_all
        return sum(1 for record in self._collection(collection) if predicate(record))

    async def update_field(
        self,
        collection: str,
        record_id: str,
        updates: Mapping[str, Any],
    ) -> Dict[str, Any]:
        """Apply ``updates`` to one record and return a copy of the result.

        Raises:
            KeyError: no record with ``record_id`` exists.
            StoreUnavailableError: the change could not be persisted.
        """
        t('reservations.store.record_store.RecordStore.update_field')
        async with self._write_lock:
            records = self._collection(collection)
            index = next((i for i, item in enumerate(records) if item.get('id') == record_id), None)
            if index is None:
                raise KeyError(record_id)
            updated = copy.deepcopy(records[index])
            updated.update(copy.deepcopy(dict(updates)))
            replaced = list(records)
            replaced[index] = updated
            await self._commit(collection, replaced)
            snapshot = copy.deepcopy(updated)
        self.logger.debug("Updated %s in %s: %s", record_id, collection, sorted(updates))
        return snapshot

    def sizes(self) -> Dict[str, int]:
        """Number of records per collection."""
        return {name: len(records) for name, records in self._document.items()}


__all__ = ["RecordStore", "Predicate"]
