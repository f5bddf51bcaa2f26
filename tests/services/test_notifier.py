from __future__ import annotations

from meshsniff.config.settings import Settings
from meshsniff.core.models import FileRecord, ModelFormat
from meshsniff.services.notifier import Notifier
from tests.helpers import FakeNotificationBackend

RECORD = FileRecord(url="https://x/model.fbx", format=ModelFormat.FBX)


def test_disabled_notifications_send_nothing() -> None:
    backend = FakeNotificationBackend()
    notifier = Notifier(Settings(NOTIFICATIONS_ENABLED=False), backend=backend)

    assert notifier.notify_discovery(RECORD) is False
    assert backend.sent == []


def test_enabled_notifications_name_the_format() -> None:
    backend = FakeNotificationBackend()
    notifier = Notifier(Settings(NOTIFICATIONS_ENABLED=True), backend=backend)

    assert notifier.notify_discovery(RECORD) is True
    assert backend.sent[0]["title"] == "3D File Detected!"
    assert backend.sent[0]["message"] == "Found a .fbx file."


def test_backend_failure_is_not_raised() -> None:
    class _Broken:
        def notify(self, **kwargs: object) -> None:
            raise NotImplementedError("no notification backend")

    notifier = Notifier(Settings(NOTIFICATIONS_ENABLED=True), backend=_Broken())

    assert notifier.notify_discovery(RECORD) is False
