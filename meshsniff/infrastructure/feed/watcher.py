import json
import threading
from pathlib import Path
from typing import List

from watchfiles import watch, Change

from meshsniff.config.settings import Settings, settings as default_settings
from meshsniff.core.events import event_broker
from meshsniff.core.models import MalformedDescriptorError, ResponseDescriptor
from meshsniff.i18n.strings import Strings
from meshsniff.utils.logger import logger


def load_descriptors(path: Path) -> List[ResponseDescriptor]:
    """
    Reads a feed file holding one descriptor object or a list of them.
    Malformed entries are logged and skipped; the rest are returned.
    """
    with open(path, "r") as f:
        data = json.load(f)

    entries = data if isinstance(data, list) else [data]
    descriptors = []
    for entry in entries:
        try:
            descriptors.append(ResponseDescriptor.from_dict(entry))
        except MalformedDescriptorError as e:
            logger.warning(Strings.DESCRIPTOR_REJECTED.value.format(Path(path).name, e))
    return descriptors


class FeedWatcher:
    """
    Watches the spool directory the interception layer writes into and
    publishes every descriptor found in new *.json files.
    """
    def __init__(self, config: Settings = None):
        self.config = config or default_settings
        self.stop_event = threading.Event()
        self.watch_thread = None
        self.paused = False

    def pause(self):
        self.paused = True
        logger.info("Feed watcher paused.")

    def resume(self):
        self.paused = False
        logger.info("Feed watcher resumed.")

    def start(self):
        """Starts the feed watcher in a separate thread."""
        if self.watch_thread and self.watch_thread.is_alive():
            logger.warning("Watcher already running.")
            return

        self.config.FEED_DIRECTORY.mkdir(parents=True, exist_ok=True)
        self.stop_event.clear()
        self.watch_thread = threading.Thread(target=self._watch_loop, daemon=True)
        self.watch_thread.start()
        logger.info(Strings.WATCHER_STARTED.value.format(self.config.FEED_DIRECTORY))

    def stop(self):
        """Stops the feed watcher."""
        if self.watch_thread:
            self.stop_event.set()
            self.watch_thread.join(timeout=1.0)
            logger.info(Strings.WATCHER_STOPPED.value)

    def _watch_loop(self):
        """Internal loop to watch the feed directory."""
        try:
            for changes in watch(self.config.FEED_DIRECTORY, stop_event=self.stop_event, recursive=False):
                for change_type, path_str in changes:
                    if change_type != Change.added or self.paused:
                        continue
                    path = Path(path_str)
                    if self._should_process(path):
                        self.publish_file(path)
        except Exception as e:
            logger.error(f"Watcher error: {e}")
            event_broker.ERROR.send(self, source="feed-watcher", error=e)

    def publish_file(self, path: Path) -> int:
        try:
            descriptors = load_descriptors(path)
        except (OSError, ValueError) as e:
            logger.warning(Strings.DESCRIPTOR_REJECTED.value.format(path.name, e))
            return 0

        for descriptor in descriptors:
            event_broker.RESPONSE_RECEIVED.send(self, descriptor=descriptor)
        return len(descriptors)

    def _should_process(self, path: Path) -> bool:
        # Writers drop "name.json.tmp" first and rename when done
        if path.is_dir() or path.name.startswith("."):
            return False
        return path.suffix == ".json"
