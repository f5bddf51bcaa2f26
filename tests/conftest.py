from __future__ import annotations

from pathlib import Path

import pytest

from meshsniff.config.settings import Settings
from meshsniff.services.catalog import Catalog
from meshsniff.services.notifier import Notifier
from meshsniff.services.pipeline import DetectionPipeline
from tests.helpers import FakeNotificationBackend, StubFetcher


@pytest.fixture
def config(tmp_path: Path) -> Settings:
    return Settings(
        DEEP_SCAN_ENABLED=True,
        NOTIFICATIONS_ENABLED=False,
        CATALOG_FILE=tmp_path / "catalog.json",
        FEED_DIRECTORY=tmp_path / "feed",
        DOWNLOAD_DIRECTORY=tmp_path / "downloads",
        LOG_FILE=tmp_path / "meshsniff.log",
        CONFIG_FILE=tmp_path / "config.json",
    )


@pytest.fixture
def catalog() -> Catalog:
    return Catalog()


@pytest.fixture
def notification_backend() -> FakeNotificationBackend:
    return FakeNotificationBackend()


@pytest.fixture
def stub_fetcher() -> StubFetcher:
    return StubFetcher()


@pytest.fixture
def pipeline(
    catalog: Catalog,
    config: Settings,
    stub_fetcher: StubFetcher,
    notification_backend: FakeNotificationBackend,
) -> DetectionPipeline:
    return DetectionPipeline(
        catalog,
        config=config,
        fetcher=stub_fetcher,
        notifier=Notifier(config, backend=notification_backend),
    )
