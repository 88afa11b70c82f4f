"""Shared fixtures: a throwaway vault, fake timers and a fake clock."""

from __future__ import annotations

from pathlib import Path

import pytest

from dirwatch.config import JsonConfigStore, WatchConfig
from helpers import FakeClock, FakeTimers, RecordingStore


@pytest.fixture()
def timers() -> FakeTimers:
    return FakeTimers()


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def vault(tmp_path: Path) -> Path:
    (tmp_path / "attachments").mkdir()
    (tmp_path / "Gallery.md").write_text("", encoding="utf-8")
    return tmp_path


@pytest.fixture()
def store(vault: Path) -> RecordingStore:
    return RecordingStore(vault)


@pytest.fixture()
def config_store(vault: Path) -> JsonConfigStore:
    cfg = JsonConfigStore(vault / ".dirwatch" / "data.json")
    cfg.set(WatchConfig(directory_to_watch="attachments", note_to_update="Gallery.md"))
    return cfg
