"""Unit tests for selection stores."""

from __future__ import annotations

from pathlib import Path

import pytest

from geoply.contracts import SelectionStoreProtocol
from geoply.infrastructure import InMemorySelectionStore, JsonFileSelectionStore

DOCUMENT = {"version": 1, "drivers": {"wallDepth": "200"}, "selection": {"windows": {"SKYLARK200_S1": 2}}}


class TestInMemorySelectionStore:
    """Tests for InMemorySelectionStore."""

    def test_round_trip(self) -> None:
        store = InMemorySelectionStore()
        store.set("a", DOCUMENT)
        assert store.get("a") == DOCUMENT
        assert store.keys() == ["a"]

    def test_missing_key(self) -> None:
        assert InMemorySelectionStore().get("nope") is None

    def test_documents_are_copied(self) -> None:
        store = InMemorySelectionStore()
        document = {"drivers": {"wallDepth": "200"}}
        store.set("a", document)
        document["drivers"]["wallDepth"] = "250"

        stored = store.get("a")
        assert stored == {"drivers": {"wallDepth": "200"}}
        stored["drivers"]["wallDepth"] = "300"  # type: ignore[index]
        assert store.get("a") == {"drivers": {"wallDepth": "200"}}

    def test_delete(self) -> None:
        store = InMemorySelectionStore()
        store.set("a", DOCUMENT)
        store.delete("a")
        store.delete("a")
        assert store.get("a") is None


class TestJsonFileSelectionStore:
    """Tests for JsonFileSelectionStore."""

    def test_missing_file_is_empty(self, tmp_path: Path) -> None:
        store = JsonFileSelectionStore(tmp_path / "selections.json")
        assert store.get("a") is None
        assert store.keys() == []

    def test_persists_across_instances(self, tmp_path: Path) -> None:
        path = tmp_path / "nested" / "selections.json"
        JsonFileSelectionStore(path).set("a", DOCUMENT)

        assert JsonFileSelectionStore(path).get("a") == DOCUMENT
        assert not path.with_suffix(".json.tmp").exists()

    def test_delete(self, tmp_path: Path) -> None:
        store = JsonFileSelectionStore(tmp_path / "selections.json")
        store.set("a", DOCUMENT)
        store.set("b", DOCUMENT)
        store.delete("a")
        assert store.keys() == ["b"]

    def test_empty_file_is_empty(self, tmp_path: Path) -> None:
        path = tmp_path / "selections.json"
        path.write_text("", encoding="utf-8")
        assert JsonFileSelectionStore(path).keys() == []

    def test_non_object_file_rejected(self, tmp_path: Path) -> None:
        path = tmp_path / "selections.json"
        path.write_text("[1, 2]", encoding="utf-8")
        with pytest.raises(ValueError, match="JSON object"):
            JsonFileSelectionStore(path).get("a")


class TestStoreProtocol:
    """Both stores satisfy SelectionStoreProtocol."""

    def test_protocol(self, tmp_path: Path) -> None:
        assert isinstance(InMemorySelectionStore(), SelectionStoreProtocol)
        assert isinstance(JsonFileSelectionStore(tmp_path / "s.json"), SelectionStoreProtocol)
