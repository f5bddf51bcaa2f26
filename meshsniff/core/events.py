import logging
from blinker import signal

logger = logging.getLogger("meshsniff.events")

class EventBroker:
    """
    Central Event Bus using Blinker.
    Decouples the feed, the pipeline and the consumers (UI, notifier).
    Sending with no receivers connected is fine.
    """

    # Event Definitions
    RESPONSE_RECEIVED = signal("response-received")  # Payload: {descriptor: ResponseDescriptor}
    FILE_DISCOVERED = signal("file-discovered")      # Payload: {url, format, origin, size_formatted, discovered_at}
    CATALOG_CLEARED = signal("catalog-cleared")      # Payload: {}

    ERROR = signal("system-error")                   # Payload: {source: str, error: Exception}

    def __init__(self):
        self._setup_logging()

    def _setup_logging(self):
        self.FILE_DISCOVERED.connect(self._log_event)
        self.CATALOG_CLEARED.connect(self._log_event)
        self.ERROR.connect(self._log_error)

    def _log_event(self, sender, **kwargs):
        sender_name = getattr(sender, 'name', str(sender))
        logger.debug(f"Event from {sender_name} fired with args: {kwargs}")

    def _log_error(self, sender, **kwargs):
        logger.error(f"Error Event from {sender}: {kwargs.get('error')}")

event_broker = EventBroker()
