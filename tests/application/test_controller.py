from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import pytest

from meshsniff.application.controller import MeshSniffController
from meshsniff.config.settings import Settings
from meshsniff.core.events import event_broker
from meshsniff.core.models import ModelFormat, ResponseDescriptor
from meshsniff.infrastructure.storage.snapshot import SnapshotStore, SnapshotWriter
from meshsniff.services.catalog import Catalog
from meshsniff.services.pipeline import DetectionPipeline


def _feed(tmp_path: Path) -> Path:
    feed = tmp_path / "replay.json"
    feed.write_text(
        json.dumps(
            [
                {"url": "https://x/model.glb", "content_length": 2048, "initiator": "https://shop.example"},
                {"url": "https://x/model.glb", "content_length": 2048, "initiator": "https://shop.example"},
                {"url": "https://x/page.html", "content_type": "text/html", "content_length": 500},
                {"url": "https://x/part.stl?v=1", "type": "xmlhttprequest"},
                {"origin": "https://x"},
            ]
        ),
        encoding="utf-8",
    )
    return feed


def test_replay_catalogues_each_url_once_and_persists(tmp_path: Path, config: Settings) -> None:
    controller = MeshSniffController(config)
    found = controller.replay(_feed(tmp_path))
    controller.stop()

    assert sorted(r.url for r in found) == ["https://x/model.glb", "https://x/part.stl?v=1"]

    reopened = MeshSniffController(config)
    assert reopened.restore() == 2
    by_url = {r.url: r for r in reopened.list_all()}
    assert by_url["https://x/model.glb"].format is ModelFormat.GLB
    assert by_url["https://x/model.glb"].size_formatted == "2 KB"
    assert by_url["https://x/model.glb"].origin == "https://shop.example"
    assert {r.url: r.discovered_at for r in found} == {u: r.discovered_at for u, r in by_url.items()}
    reopened.stop()


def test_clear_all_persists_empty_catalog(tmp_path: Path, config: Settings) -> None:
    controller = MeshSniffController(config)
    controller.replay(_feed(tmp_path))
    cleared: list[object] = []

    def receiver(sender: object, **kwargs: Any) -> None:
        cleared.append(sender)

    with event_broker.CATALOG_CLEARED.connected_to(receiver):
        controller.clear_all()
    controller.stop()

    assert controller.list_all() == []
    assert cleared == [controller]
    assert json.loads(config.CATALOG_FILE.read_text(encoding="utf-8")) == []


def test_response_events_are_dispatched_to_workers(tmp_path: Path, config: Settings) -> None:
    controller = MeshSniffController(config)
    controller.restore()
    event_broker.RESPONSE_RECEIVED.connect(controller._on_response)

    event_broker.RESPONSE_RECEIVED.send(object(), descriptor=ResponseDescriptor(url="https://x/scan.ply"))
    controller.stop()

    assert [r.url for r in controller.list_all()] == ["https://x/scan.ply"]


def test_pipeline_errors_do_not_escape_workers(config: Settings) -> None:
    class _Exploding:
        catalog = None

        def handle(self, descriptor: ResponseDescriptor) -> None:
            raise RuntimeError("boom")

    controller = MeshSniffController(config, pipeline=_Exploding())  # type: ignore[arg-type]

    assert controller.submit(ResponseDescriptor(url="https://x/model.glb")).result(timeout=5) is None
    controller.stop()


def test_injected_pipeline_without_persistence_is_reported(config: Settings, caplog: pytest.LogCaptureFixture) -> None:
    pipeline = DetectionPipeline(Catalog(), config=config)

    with caplog.at_level(logging.WARNING, logger="meshsniff"):
        controller = MeshSniffController(config, pipeline=pipeline)
    controller.stop()

    assert controller.catalog is pipeline.catalog
    assert "no persist callback" in caplog.text


def test_injected_pipeline_with_persistence_is_silent(config: Settings, caplog: pytest.LogCaptureFixture) -> None:
    store = SnapshotStore(config.CATALOG_FILE)
    writer = SnapshotWriter(store)
    pipeline = DetectionPipeline(Catalog(persist=writer), config=config)

    with caplog.at_level(logging.WARNING, logger="meshsniff"):
        controller = MeshSniffController(config, pipeline=pipeline)
    controller.pipeline.handle(ResponseDescriptor(url="https://x/kept.stl"))
    controller.stop()
    writer.flush(timeout=5)
    writer.close()

    assert "no persist callback" not in caplog.text
    assert [r.url for r in store.load()] == ["https://x/kept.stl"]


def test_default_controller_persists(config: Settings, caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING, logger="meshsniff"):
        controller = MeshSniffController(config)
    controller.stop()

    assert controller.catalog.persists is True
    assert "no persist callback" not in caplog.text
