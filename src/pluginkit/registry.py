from __future__ import annotations

import hashlib
import json
import logging
from pathlib import Path
from typing import Any

from pluginkit.errors import (
    DuplicateNameError,
    PreconditionError,
    RegistryCorruptError,
    RegistryWriteError,
)

logger = logging.getLogger(__name__)

ENTRIES_KEY = "plugins"


class ManifestRegistry:
    """Read-check-append-write access to ``marketplace.json``.

    The document is held in memory between ``load()`` and ``save()``. Saving
    compares the on-disk digest against the one seen at load time and refuses
    to overwrite a file another process changed in between. The write itself
    is an in-place rewrite, so a crash mid-write can truncate the file.
    """

    def __init__(self, path: Path) -> None:
        self.path = path
        self._data: dict[str, Any] | None = None
        self._digest: str | None = None

    @property
    def entries(self) -> list[dict[str, Any]]:
        return self._document()[ENTRIES_KEY]

    def load(self) -> ManifestRegistry:
        try:
            raw = self.path.read_bytes()
        except OSError as exc:
            raise PreconditionError(f"Missing marketplace file: {self.path}") from exc
        try:
            data = json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise RegistryCorruptError(f"Invalid JSON in {self.path}: {exc}") from exc
        if not isinstance(data, dict):
            raise RegistryCorruptError(f"{self.path} must contain a JSON object")
        entries = data.setdefault(ENTRIES_KEY, [])
        if not isinstance(entries, list):
            raise RegistryCorruptError(f"'{ENTRIES_KEY}' in {self.path} must be a list")
        if not all(isinstance(e, dict) for e in entries):
            raise RegistryCorruptError(f"Every '{ENTRIES_KEY}' entry in {self.path} must be an object")
        self._data = data
        self._digest = _digest(raw)
        logger.debug("loaded %d entries from %s", len(entries), self.path)
        return self

    def exists(self, name: str) -> bool:
        return any(entry.get("name") == name for entry in self.entries)

    def append(self, entry: dict[str, Any]) -> None:
        name = str(entry.get("name", ""))
        if self.exists(name):
            raise DuplicateNameError(name)
        self.entries.append(entry)
        self.save()

    def save(self) -> None:
        data = self._document()
        try:
            current = _digest(self.path.read_bytes())
        except OSError as exc:
            raise RegistryWriteError(f"Cannot re-read {self.path} before writing: {exc}") from exc
        if current != self._digest:
            raise RegistryWriteError(f"{self.path} changed on disk since it was loaded; re-run to retry")
        payload = (json.dumps(data, indent=2, ensure_ascii=False) + "\n").encode("utf-8")
        try:
            self.path.write_bytes(payload)
        except OSError as exc:
            raise RegistryWriteError(f"Failed to write {self.path}: {exc}") from exc
        self._digest = _digest(payload)
        logger.debug("wrote %d entries to %s", len(data[ENTRIES_KEY]), self.path)

    def _document(self) -> dict[str, Any]:
        if self._data is None:
            self.load()
        assert self._data is not None
        return self._data


def _digest(raw: bytes) -> str:
    return hashlib.sha256(raw).hexdigest()
