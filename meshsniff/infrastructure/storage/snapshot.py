import json
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from pathlib import Path
from typing import List, Optional, Sequence

from meshsniff.core.models import FileRecord
from meshsniff.i18n.strings import Strings
from meshsniff.utils.logger import logger


class SnapshotStore:
    """
    Whole-catalog JSON snapshot on disk.
    Structure: List of FileRecord dicts, in insertion order.
    """
    def __init__(self, snapshot_file: Path):
        self.snapshot_file = Path(snapshot_file)

    def load(self) -> List[FileRecord]:
        if not self.snapshot_file.exists():
            return []

        try:
            with open(self.snapshot_file, "r") as f:
                raw_data = json.load(f)
        except (OSError, ValueError) as e:
            logger.error(f"Failed to load catalog snapshot: {e}")
            return []

        records = []
        skipped = 0
        for entry in raw_data if isinstance(raw_data, list) else []:
            try:
                records.append(FileRecord.from_dict(entry))
            except (KeyError, TypeError, ValueError):
                skipped += 1
        if skipped:
            logger.warning(f"Skipped {skipped} unreadable catalog entries on load.")
        return records

    def save(self, records: Sequence[FileRecord]):
        """Raises OSError on I/O failure, TypeError or ValueError on unserialisable records."""
        self.snapshot_file.parent.mkdir(parents=True, exist_ok=True)
        tmp_file = self.snapshot_file.with_suffix(self.snapshot_file.suffix + ".tmp")
        with open(tmp_file, "w") as f:
            json.dump([record.to_dict() for record in records], f, indent=2)
        tmp_file.replace(self.snapshot_file)


class SnapshotWriter:
    """
    Runs snapshot writes on a single background thread so the caller never
    waits on disk. Writes execute in submission order; a failed write is
    superseded by the next one, which carries the full state.
    """
    def __init__(self, store: SnapshotStore):
        self.store = store
        self.executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="snapshot")
        self._lock = threading.Lock()
        self._last: Optional[Future] = None
        self.failed = False

    def __call__(self, records: Sequence[FileRecord]):
        with self._lock:
            self._last = self.executor.submit(self._write, list(records))

    def _write(self, records: List[FileRecord]):
        if self.failed:
            logger.info("Retrying catalog snapshot write.")
        try:
            self.store.save(records)
        except (OSError, TypeError, ValueError) as e:
            self.failed = True
            logger.warning(Strings.PERSIST_FAILED.value.format(e))
        else:
            self.failed = False

    def flush(self, timeout: float = None):
        """Blocks until every submitted write has run."""
        with self._lock:
            last = self._last
        if last is not None:
            last.result(timeout=timeout)

    def close(self):
        self.executor.shutdown(wait=True)
