"""Selection stores implementing SelectionStoreProtocol.

Classes:
    InMemorySelectionStore: Dictionary-backed store for tests and embedding
    JsonFileSelectionStore: Single JSON file holding every saved selection
"""

from __future__ import annotations

import copy
import json
import logging
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


class InMemorySelectionStore:
    """Keep serialized selections in a dictionary.

    Stored documents are copied on the way in and out, so callers cannot
    mutate them in place.
    """

    def __init__(self) -> None:
        self._data: dict[str, dict[str, Any]] = {}

    def get(self, key: str) -> dict[str, Any] | None:
        value = self._data.get(key)
        return copy.deepcopy(value) if value is not None else None

    def set(self, key: str, value: dict[str, Any]) -> None:
        self._data[key] = copy.deepcopy(value)

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        return sorted(self._data)


class JsonFileSelectionStore:
    """Persist serialized selections in one JSON file.

    The file holds an object mapping keys to documents. It is read on every
    call and rewritten on every change; a missing file is an empty store.

    Attributes:
        path: Location of the JSON file.

    Example:
        >>> store = JsonFileSelectionStore(Path("selections.json"))
        >>> store.set("session-1", controller.serialize_selection())
    """

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    def get(self, key: str) -> dict[str, Any] | None:
        return self._read().get(key)

    def set(self, key: str, value: dict[str, Any]) -> None:
        data = self._read()
        data[key] = value
        self._write(data)

    def delete(self, key: str) -> None:
        data = self._read()
        if data.pop(key, None) is not None:
            self._write(data)

    def keys(self) -> list[str]:
        return sorted(self._read())

    def _read(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        content = self.path.read_text(encoding="utf-8")
        if not content.strip():
            return {}
        data = json.loads(content)
        if not isinstance(data, dict):
            raise ValueError(f"Selection store {self.path} does not hold a JSON object")
        return data

    def _write(self, data: dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp_path.write_text(json.dumps(data, indent=2, sort_keys=True), encoding="utf-8")
        tmp_path.replace(self.path)
        logger.debug(f"Wrote {len(data)} selection(s) to {self.path}")
