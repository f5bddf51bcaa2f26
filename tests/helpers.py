from __future__ import annotations

from datetime import datetime, timedelta

from meshsniff.core.models import FileRecord, ModelFormat


class FakeNotificationBackend:
    def __init__(self) -> None:
        self.sent: list[dict[str, object]] = []

    def notify(self, **kwargs: object) -> None:
        self.sent.append(kwargs)


class StubFetcher:
    """Stands in for RangeFetcher; returns canned bytes or raises."""

    def __init__(self, payload: bytes = b"", error: Exception | None = None) -> None:
        self.payload = payload
        self.error = error
        self.calls: list[tuple[str, int]] = []

    def fetch_prefix(self, url: str, limit: int = 512) -> bytes:
        self.calls.append((url, limit))
        if self.error is not None:
            raise self.error
        return self.payload[:limit]


def make_record(url: str, fmt: ModelFormat = ModelFormat.GLB, minutes: int = 0) -> FileRecord:
    return FileRecord(
        url=url,
        format=fmt,
        origin="https://shop.example",
        size_bytes=2048,
        size_formatted="2 KB",
        discovered_at=datetime(2024, 5, 1, 12, 0) + timedelta(minutes=minutes),
    )
