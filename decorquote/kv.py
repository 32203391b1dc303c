# decorquote/kv.py
from __future__ import annotations

import os
from pathlib import Path
from typing import Dict, List, Optional, Protocol

from .errors import StorageError


class KeyValueBackend(Protocol):
    """Flat string -> string storage the document store is built on."""

    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...

    def keys(self) -> List[str]: ...


class MemoryBackend:
    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> List[str]:
        return list(self._data)


class JsonDirBackend:
    """
    One ``<key>.json`` file per key inside ``root``.

    Writes go to a sibling temp file first and are moved into place, so a
    crash mid-write leaves the previous content rather than a truncated file.
    """

    SUFFIX = ".json"

    def __init__(self, root: str | os.PathLike):
        self.root = Path(root)
        self.root.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        if not key or "/" in key or "\\" in key or key.startswith("."):
            raise ValueError(f"invalid storage key: {key!r}")
        return self.root / f"{key}{self.SUFFIX}"

    def get(self, key: str) -> Optional[str]:
        p = self._path(key)
        if not p.exists():
            return None
        try:
            with open(p, "r", encoding="utf-8") as f:
                return f.read()
        except OSError as exc:
            raise StorageError(key, exc) from exc

    def set(self, key: str, value: str) -> None:
        p = self._path(key)
        tmp = p.with_suffix(p.suffix + ".tmp")
        try:
            with open(tmp, "w", encoding="utf-8") as f:
                f.write(value)
            os.replace(tmp, p)
        except OSError as exc:
            raise StorageError(key, exc) from exc

    def delete(self, key: str) -> None:
        try:
            self._path(key).unlink(missing_ok=True)
        except OSError as exc:
            raise StorageError(key, exc) from exc

    def keys(self) -> List[str]:
        return sorted(p.name[: -len(self.SUFFIX)] for p in self.root.glob(f"*{self.SUFFIX}"))
