from datetime import datetime
from typing import Optional

from meshsniff.config.settings import Settings, settings as default_settings
from meshsniff.core.classification.classifier import Classifier, classifier as default_classifier
from meshsniff.core.classification.gate import should_deep_scan
from meshsniff.core.events import EventBroker, event_broker
from meshsniff.core.models import (
    UNKNOWN_ORIGIN,
    FileRecord,
    ModelFormat,
    ResponseDescriptor,
    discovery_payload,
    format_bytes,
)
from meshsniff.i18n.strings import Strings
from meshsniff.infrastructure.http.fetcher import RangeFetcher
from meshsniff.services.catalog import Catalog
from meshsniff.services.notifier import Notifier
from meshsniff.utils.logger import logger


class DetectionPipeline:
    """
    Turns one intercepted response into at most one catalog entry.

    1. URL extension check (cheap, authoritative when it matches).
    2. Deep scan gate on declared content type and size.
    3. Ranged prefix fetch + magic byte check.
    4. Insert into the catalog; only the winning insert emits an event.

    `handle` is safe to call from several threads at once.
    """
    def __init__(self, catalog: Catalog,
                 config: Settings = None,
                 classifier: Classifier = None,
                 fetcher: RangeFetcher = None,
                 notifier: Notifier = None,
                 broker: EventBroker = None):
        self.name = self.__class__.__name__
        self.catalog = catalog
        self.config = config or default_settings
        self.classifier = classifier or default_classifier
        self.fetcher = fetcher or RangeFetcher(timeout=self.config.FETCH_TIMEOUT)
        self.notifier = notifier or Notifier(self.config)
        self.broker = broker or event_broker

    def handle(self, descriptor: ResponseDescriptor) -> Optional[FileRecord]:
        """Returns the new record, or None when nothing new was catalogued."""
        if descriptor is None or not descriptor.url or not descriptor.url.strip():
            logger.warning("Ignoring response descriptor without a URL.")
            return None

        if not self.config.MONITORING_ENABLED:
            return None

        if (descriptor.resource_type is not None
                and descriptor.resource_type not in self.config.WATCHED_RESOURCE_TYPES):
            return None

        detected = self.classifier.classify(descriptor.url)
        if detected is None:
            detected = self._deep_scan(descriptor)
        if detected is None:
            return None

        record = FileRecord(
            url=descriptor.url,
            format=detected,
            origin=descriptor.origin or UNKNOWN_ORIGIN,
            size_bytes=descriptor.content_length,
            size_formatted=format_bytes(descriptor.content_length),
            discovered_at=datetime.now(),
        )

        # The catalog may move the stamp forward; carry on with its copy
        record = self.catalog.add(record)
        if record is None:
            logger.debug(f"Already catalogued: {descriptor.url}")
            return None

        logger.info(Strings.FILE_DETECTED.value.format(record.format.value, record.url))
        self.broker.FILE_DISCOVERED.send(self, **discovery_payload(record))
        self.notifier.notify_discovery(record)
        return record

    def _deep_scan(self, descriptor: ResponseDescriptor) -> Optional[ModelFormat]:
        if not should_deep_scan(self.config, descriptor.content_type, descriptor.content_length):
            return None

        limit = self.config.PREFIX_FETCH_BYTES
        try:
            if descriptor.fetch_prefix is not None:
                prefix = descriptor.fetch_prefix(limit)
            else:
                prefix = self.fetcher.fetch_prefix(descriptor.url, limit)
            if not isinstance(prefix, (bytes, bytearray, memoryview)):
                raise TypeError(f"prefix must be bytes, got {type(prefix).__name__}")
            prefix = bytes(prefix)[:limit]
        except Exception as e:
            # PrefixFetchError from our fetcher; anything from an external fetch_prefix
            logger.debug(Strings.DEEP_SCAN_FAILED.value.format(descriptor.url, e))
            return None

        return self.classifier.classify(descriptor.url, prefix)
