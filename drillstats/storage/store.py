from __future__ import annotations

"""Key/value stores holding serialized drill stats.

Values are strings (JSON documents) addressed by a storage key such as
"int_cumulativeStats". The file store keeps every key in a single JSON
object on disk, the same shape browser local storage would hold.
"""

import json
import os
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Optional, Protocol, runtime_checkable

from ..app.explain import trace as xtrace


@runtime_checkable
class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...


class MemoryStore:
    """In-process store; handy for tests and for embedding in a UI."""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._data: Dict[str, str] = {k: str(v) for k, v in (initial or {}).items()}

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = str(value)

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._data.keys())

    def clear(self) -> None:
        self._data.clear()


class JsonFileStore:
    """Durable store backed by one JSON file.

    Every call re-reads the file so separate processes (CLI runs) see each
    other's writes. Writes go through a temp file in the same directory and
    `os.replace`, so a crash never leaves a half-written document.
    """

    def __init__(self, path: str | os.PathLike[str], *, indent: Optional[int] = None) -> None:
        self.path = Path(path)
        self.indent = indent

    def _read(self) -> tuple[Dict[str, str], Optional[str]]:
        """Return (data, raw_text_if_unusable)."""
        if not self.path.exists():
            return {}, None
        raw_text = self.path.read_text(encoding="utf-8")
        try:
            data = json.loads(raw_text) if raw_text.strip() else {}
        except json.JSONDecodeError:
            return {}, raw_text
        if not isinstance(data, dict):
            return {}, raw_text
        # hand-edited files may hold objects where a JSON string is expected
        return {str(k): v if isinstance(v, str) else json.dumps(v, separators=(",", ":")) for k, v in data.items()}, None

    def _backup(self, raw_text: str) -> Path:
        backup_name = f"{self.path.stem}.backup-{datetime.now(timezone.utc).strftime('%Y%m%d-%H%M%S')}{self.path.suffix}"
        backup = self.path.with_name(backup_name)
        backup.write_text(raw_text, encoding="utf-8")
        xtrace("store_backup", path=str(self.path), backup=str(backup))
        return backup

    def _write(self, data: Dict[str, str], unusable: Optional[str]) -> None:
        if unusable is not None:
            # keep the unreadable document before it is replaced
            self._backup(unusable)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(prefix=f".{self.path.name}.", suffix=".tmp", dir=str(self.path.parent))
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=self.indent)
            os.replace(tmp, self.path)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise

    def get(self, key: str) -> Optional[str]:
        data, _ = self._read()
        return data.get(key)

    def set(self, key: str, value: str) -> None:
        data, unusable = self._read()
        data[key] = str(value)
        self._write(data, unusable)

    def remove(self, key: str) -> None:
        data, unusable = self._read()
        if key not in data and unusable is None:
            return
        data.pop(key, None)
        self._write(data, unusable)

    def keys(self) -> list[str]:
        data, _ = self._read()
        return list(data.keys())
