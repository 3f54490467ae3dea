"""Key-value backends holding serialized records as strings."""

import re
from pathlib import Path
from typing import Dict, List, Optional, Protocol


class KeyValueStore(Protocol):
    """Minimal string key-value interface used by the progress store."""

    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...

    def keys(self) -> List[str]: ...


class MemoryStore:
    """Dictionary-backed store, for tests and throwaway sessions."""

    def __init__(self, data: Optional[Dict[str, str]] = None):
        self.data: Dict[str, str] = dict(data or {})

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value

    def remove(self, key: str) -> None:
        self.data.pop(key, None)

    def keys(self) -> List[str]:
        return sorted(self.data)


class JsonDirectoryStore:
    """
    One JSON file per key inside a directory.

    Keys are restricted to characters that are safe in file names.
    """

    SUFFIX = ".json"
    _KEY_PATTERN = re.compile(r'^[A-Za-z0-9_.-]+$')

    def __init__(self, root: str | Path):
        self.root = Path(root)

    def _path(self, key: str) -> Path:
        if not self._KEY_PATTERN.match(key):
            raise ValueError(f"Invalid storage key: {key!r}")
        return self.root / f"{key}{self.SUFFIX}"

    def get(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not path.is_file():
            return None
        return path.read_text(encoding="utf-8")

    def set(self, key: str, value: str) -> None:
        path = self._path(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp = path.with_suffix(path.suffix + ".tmp")
        tmp.write_text(value, encoding="utf-8")
        tmp.replace(path)

    def remove(self, key: str) -> None:
        path = self._path(key)
        if path.exists():
            path.unlink()

    def keys(self) -> List[str]:
        if not self.root.is_dir():
            return []
        return sorted(p.name[:-len(self.SUFFIX)] for p in self.root.glob(f"*{self.SUFFIX}"))
