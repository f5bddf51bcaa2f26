import threading
from dataclasses import replace
from datetime import datetime
from typing import Callable, Dict, Iterable, List, Optional, Sequence

from meshsniff.core.models import FileRecord
from meshsniff.i18n.strings import Strings
from meshsniff.utils.logger import logger

Persist = Callable[[Sequence[FileRecord]], None]


class Catalog:
    """
    Deduplicated store of discovered files, keyed by URL.

    All mutations (insert, clear, restore) run under one lock, which makes
    insert an atomic insert-if-absent. `persist` receives the full record list
    after every successful mutation, still under the lock, so snapshots are
    handed over in mutation order. It should not block; see SnapshotWriter.

    Insert order and discovered_at order agree: a record stamped before the
    last insert is stored with the last insert's stamp.
    """
    def __init__(self, persist: Optional[Persist] = None):
        self._records: Dict[str, FileRecord] = {}
        self._lock = threading.Lock()
        self._persist = persist
        self._persist_failed = False
        self._last_stamp: Optional[datetime] = None

    @property
    def persists(self) -> bool:
        return self._persist is not None

    def insert(self, record: FileRecord) -> bool:
        return self.add(record) is not None

    def add(self, record: FileRecord) -> Optional[FileRecord]:
        """
        Like insert, but returns the record as stored, or None for a duplicate.
        The stored copy's discovered_at is never older than the previous insert.
        """
        with self._lock:
            if record.url in self._records:
                return None
            if self._last_stamp is not None and record.discovered_at < self._last_stamp:
                record = replace(record, discovered_at=self._last_stamp)
            self._last_stamp = record.discovered_at
            self._records[record.url] = record
            self._write_snapshot()
            return record

    def list(self) -> List[FileRecord]:
        """Insertion order. Sorting for display is up to the consumer."""
        with self._lock:
            return list(self._records.values())

    def clear(self):
        with self._lock:
            self._records.clear()
            self._write_snapshot()
        logger.info(Strings.CATALOG_CLEARED.value)

    def restore(self, snapshot: Iterable[FileRecord]) -> int:
        """Seeds the map from a persisted snapshot; first occurrence of a URL wins."""
        with self._lock:
            for record in snapshot:
                self._records.setdefault(record.url, record)
                if self._last_stamp is None or record.discovered_at > self._last_stamp:
                    self._last_stamp = record.discovered_at
            count = len(self._records)
        logger.info(Strings.CATALOG_RESTORED.value.format(count))
        return count

    def contains(self, url: str) -> bool:
        with self._lock:
            return url in self._records

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def _write_snapshot(self):
        if self._persist is None:
            return
        if self._persist_failed:
            logger.debug("Previous snapshot write failed, writing full state again.")
        try:
            self._persist(list(self._records.values()))
        except Exception as e:
            # In-memory state stays authoritative; next mutation retries
            self._persist_failed = True
            logger.warning(Strings.PERSIST_FAILED.value.format(e))
        else:
            self._persist_failed = False
