"""Persistence helpers for the JSON document backing the record store."""

from __future__ import annotations

import json
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Any, Dict, Iterable, List, Mapping, Optional

from tracking import t

from reservations.errors import StoreUnavailableError


class DocumentRepository:
    """Read/write ``{collection: [records]}`` to a JSON backing file."""

    def __init__(self, file_path: str, *, logger: Any) -> None:
        t('reservations.store.repository.DocumentRepository.__init__')
        self._path = Path(file_path)
        self._logger = logger

    def load(self, collections: Iterable[str]) -> Dict[str, List[dict]]:
        """Load every collection, creating empty ones that are missing.

        Raises:
            StoreUnavailableError: the file exists but cannot be read or parsed.
        """

        t('reservations.store.repository.DocumentRepository.load')
        document: Dict[str, List[dict]] = {name: [] for name in collections}
        if not self._path.exists():
            self._logger.debug("Store file %s does not exist; starting empty", self._path)
            return document

        try:
            with self._path.open('r', encoding='utf-8') as handle:
                payload = json.load(handle)
        except (OSError, ValueError) as exc:
            self._logger.error("Failed to load store from %s: %s", self._path, exc)
            raise StoreUnavailableError(f"Cannot read {self._path}: {exc}") from exc

        if not isinstance(payload, dict):
            raise StoreUnavailableError(
                f"Invalid store format in {self._path}; expected object, "
                f"received {type(payload).__name__}"
            )

        for name, records in payload.items():
            if not isinstance(records, list):
                self._logger.warning(
                    "Ignoring collection %s in %s: expected list, received %s",
                    name,
                    self._path,
                    type(records).__name__,
                )
                continue
            document[name] = [record for record in records if isinstance(record, dict)]

        self._logger.debug(
            "Loaded %s from %s",
            {name: len(records) for name, records in document.items()},
            self._path,
        )
        return document

    def save(self, document: Mapping[str, List[dict]]) -> None:
        """Atomically persist the document, ensuring parent directories exist.

        Raises:
            StoreUnavailableError: the file could not be written.
        """

        t('reservations.store.repository.DocumentRepository.save')
        tmp_path: Optional[Path] = None
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with NamedTemporaryFile(
                'w', encoding='utf-8', dir=self._path.parent, delete=False, suffix='.tmp'
            ) as handle:
                tmp_path = Path(handle.name)
                json.dump(dict(document), handle, indent=2, ensure_ascii=False)
                handle.flush()
            tmp_path.replace(self._path)
            tmp_path = None
            self._logger.debug("Store saved to %s", self._path)
        except (OSError, TypeError, ValueError) as exc:
            self._logger.error("Failed to save store to %s: %s", self._path, exc)
            raise StoreUnavailableError(f"Cannot write {self._path}: {exc}") from exc
        finally:
            if tmp_path is not None:
                try:
                    tmp_path.unlink()
                except OSError:
                    pass
