from concurrent.futures import ThreadPoolExecutor, wait
from pathlib import Path
from typing import List, Optional

from meshsniff.config.settings import Settings, settings as default_settings
from meshsniff.core.events import event_broker
from meshsniff.core.models import FileRecord, ResponseDescriptor
from meshsniff.infrastructure.feed.watcher import FeedWatcher, load_descriptors
from meshsniff.infrastructure.http.download import save_file
from meshsniff.infrastructure.storage.snapshot import SnapshotStore, SnapshotWriter
from meshsniff.services.catalog import Catalog
from meshsniff.services.pipeline import DetectionPipeline
from meshsniff.utils.logger import logger


class MeshSniffController:
    """
    Wires feed -> worker pool -> pipeline -> catalog and exposes the
    query interface (list_all / clear_all) to the UI layer.

    An injected pipeline brings its own catalog, and that catalog's persist
    callback decides where snapshots go. Without one nothing is written.
    """
    def __init__(self, config: Settings = None, pipeline: DetectionPipeline = None):
        self.config = config or default_settings
        self.store = SnapshotStore(self.config.CATALOG_FILE)
        self.writer = SnapshotWriter(self.store)
        self.catalog = pipeline.catalog if pipeline else Catalog(persist=self.writer)
        if not getattr(self.catalog, "persists", False):
            logger.warning("Catalog has no persist callback; discoveries will not survive a restart.")
        self.pipeline = pipeline or DetectionPipeline(self.catalog, config=self.config)
        self.watcher = FeedWatcher(self.config)
        self.workers = ThreadPoolExecutor(max_workers=self.config.MAX_WORKERS, thread_name_prefix="detect")
        self._restored = False

    def restore(self) -> int:
        if self._restored:
            return len(self.catalog)
        self._restored = True
        return self.catalog.restore(self.store.load())

    def start(self):
        self.restore()
        event_broker.RESPONSE_RECEIVED.connect(self._on_response)
        self.watcher.start()

    def stop(self):
        event_broker.RESPONSE_RECEIVED.disconnect(self._on_response)
        self.watcher.stop()
        self.workers.shutdown(wait=True)
        self.writer.flush()
        self.writer.close()

    def submit(self, descriptor: ResponseDescriptor):
        return self.workers.submit(self._handle_safely, descriptor)

    def replay(self, path: Path) -> List[FileRecord]:
        """Runs every descriptor in a feed file through the pipeline and waits."""
        self.restore()
        futures = [self.submit(descriptor) for descriptor in load_descriptors(path)]
        wait(futures)
        return [f.result() for f in futures if f.result() is not None]

    def list_all(self) -> List[FileRecord]:
        return self.catalog.list()

    def clear_all(self):
        self.catalog.clear()
        event_broker.CATALOG_CLEARED.send(self)

    def save(self, url: str, directory: Path = None) -> Path:
        return save_file(url, directory or self.config.DOWNLOAD_DIRECTORY)

    def _on_response(self, sender, descriptor: ResponseDescriptor = None, **kwargs):
        if descriptor is not None:
            self.submit(descriptor)

    def _handle_safely(self, descriptor: ResponseDescriptor) -> Optional[FileRecord]:
        # One bad response must not take a worker down
        try:
            return self.pipeline.handle(descriptor)
        except Exception as e:
            logger.error(f"Detection failed for {getattr(descriptor, 'url', '?')}: {e}")
            event_broker.ERROR.send(self, source="pipeline", error=e)
            return None
