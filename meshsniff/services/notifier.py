from plyer import notification

from meshsniff.config.settings import Settings, settings as default_settings
from meshsniff.core.models import FileRecord
from meshsniff.i18n.strings import Strings
from meshsniff.utils.logger import logger


class Notifier:
    """Desktop alert for newly discovered files, when the user asked for them."""
    def __init__(self, config: Settings = None, backend=notification):
        self.config = config or default_settings
        self.backend = backend

    def notify_discovery(self, record: FileRecord) -> bool:
        if not self.config.NOTIFICATIONS_ENABLED:
            return False

        title = Strings.NOTIF_TITLE.value
        message = Strings.NOTIF_MESSAGE.value.format(record.format.value)
        try:
            self.backend.notify(title=title, message=message, app_name=self.config.APP_NAME)
        except Exception as e:
            # plyer raises NotImplementedError (and friends) on headless hosts
            logger.warning(f"Notification failed: {e}")
            return False
        return True
