from __future__ import annotations

import json
from typing import TYPE_CHECKING

import pytest

from pixelpage.exceptions import HistoryStoreError
from pixelpage.history import InMemoryHistoryStore, JsonFileHistoryStore
from pixelpage.typing.models import HistoryEntry

if TYPE_CHECKING:
    from pathlib import Path


def test_in_memory_store_rejects_zero_cap() -> None:
    with pytest.raises(HistoryStoreError, match="history cap"):
        InMemoryHistoryStore().append(HistoryEntry(tool="t", label="l"), cap=0)


def test_json_store_persists_between_instances(tmp_path: Path) -> None:
    path = tmp_path / "state" / "history.json"
    JsonFileHistoryStore(path=path).append(HistoryEntry(tool="pdf-split", label="report.pdf"), cap=10)
    JsonFileHistoryStore(path=path).append(HistoryEntry(tool="image-blur", label="cat.png"), cap=10)

    entries = JsonFileHistoryStore(path=path).list()

    assert [entry.tool for entry in entries] == ["image-blur", "pdf-split"]
    payload = json.loads(path.read_text(encoding="utf-8"))
    assert payload["history_file_version"] == 1
    assert len(payload["entries"]) == 2


def test_json_store_caps_entries(tmp_path: Path) -> None:
    store = JsonFileHistoryStore(path=tmp_path / "history.json")
    for idx in range(5):
        store.append(HistoryEntry(tool="image-rotate", label=f"{idx}.png"), cap=3)

    assert [entry.label for entry in store.list()] == ["4.png", "3.png", "2.png"]


def test_json_store_missing_file_is_empty(tmp_path: Path) -> None:
    assert JsonFileHistoryStore(path=tmp_path / "history.json").list() == []


def test_json_store_rejects_corrupt_file(tmp_path: Path) -> None:
    path = tmp_path / "history.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(HistoryStoreError, match="Unreadable history file"):
        JsonFileHistoryStore(path=path).list()


@pytest.mark.parametrize("store_factory", ["memory", "json"])
def test_cap_applies_per_tool(tmp_path: Path, store_factory: str) -> None:
    store = InMemoryHistoryStore() if store_factory == "memory" else JsonFileHistoryStore(path=tmp_path / "h.json")
    for idx in range(3):
        store.append(HistoryEntry(tool="pdf-rotate", label=f"doc{idx}.pdf"), cap=2)
        store.append(HistoryEntry(tool="image-blur", label=f"img{idx}.png"), cap=2)

    assert [entry.label for entry in store.list()] == ["img2.png", "doc2.pdf", "img1.png", "doc1.pdf"]
    assert [entry.label for entry in store.list("pdf-rotate")] == ["doc2.pdf", "doc1.pdf"]


def test_busy_tool_does_not_evict_other_tools() -> None:
    store = InMemoryHistoryStore()
    store.append(HistoryEntry(tool="pdf-merge", label="a.pdf"), cap=10)
    for idx in range(12):
        store.append(HistoryEntry(tool="image-flip", label=f"{idx}.png"), cap=10)

    assert [entry.label for entry in store.list("pdf-merge")] == ["a.pdf"]
    assert len(store.list("image-flip")) == 10
