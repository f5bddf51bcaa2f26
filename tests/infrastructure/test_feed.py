from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from meshsniff.config.settings import Settings
from meshsniff.core.events import event_broker
from meshsniff.infrastructure.feed.watcher import FeedWatcher, load_descriptors


def _write(path: Path, payload: Any) -> Path:
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def test_load_single_descriptor(tmp_path: Path) -> None:
    feed = _write(tmp_path / "one.json", {"url": "https://x/model.glb", "content_length": 2048})

    descriptors = load_descriptors(feed)

    assert [d.url for d in descriptors] == ["https://x/model.glb"]
    assert descriptors[0].content_length == 2048


def test_load_skips_malformed_entries(tmp_path: Path) -> None:
    feed = _write(
        tmp_path / "batch.json",
        [{"url": "https://x/a.stl"}, {"origin": "https://x"}, "nonsense", {"url": "https://x/b.bin"}],
    )

    assert [d.url for d in load_descriptors(feed)] == ["https://x/a.stl", "https://x/b.bin"]


def test_publish_file_sends_each_descriptor(tmp_path: Path, config: Settings) -> None:
    feed = _write(tmp_path / "batch.json", [{"url": "https://x/a.stl"}, {"url": "https://x/b.ply"}])
    received: list[str] = []

    def receiver(sender: object, descriptor: Any = None, **kwargs: Any) -> None:
        received.append(descriptor.url)

    with event_broker.RESPONSE_RECEIVED.connected_to(receiver):
        count = FeedWatcher(config).publish_file(feed)

    assert count == 2
    assert received == ["https://x/a.stl", "https://x/b.ply"]


def test_publish_unreadable_file_sends_nothing(tmp_path: Path, config: Settings) -> None:
    broken = tmp_path / "broken.json"
    broken.write_text("[{", encoding="utf-8")

    assert FeedWatcher(config).publish_file(broken) == 0


def test_only_finished_json_files_are_processed(tmp_path: Path, config: Settings) -> None:
    watcher = FeedWatcher(config)

    assert watcher._should_process(tmp_path / "r1.json") is True
    assert watcher._should_process(tmp_path / "r1.json.tmp") is False
    assert watcher._should_process(tmp_path / ".hidden.json") is False
