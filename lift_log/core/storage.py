"""String-keyed key-value stores backing the workout log."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Dict, Optional, Protocol

logger = logging.getLogger(__name__)


class StorageError(RuntimeError):
    """Raised when the backing store cannot be read or written."""


class CorruptStoreError(StorageError):
    """Raised when stored data cannot be parsed."""


class KeyValueStore(Protocol):
    """Synchronous get/set by string key, like browser local storage."""

    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...


class MemoryStore:
    """Dict-backed store for tests and dry runs."""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self.data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value


class JsonFileStore:
    """A JSON object file mapping keys to string values.

    Every ``set`` rewrites the whole file through a temporary file in the same
    directory. A store file that does not parse as a JSON object is never
    overwritten; both reads and writes raise :class:`CorruptStoreError`.
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    def _read(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            text = self.path.read_text(encoding="utf-8")
        except UnicodeDecodeError as exc:
            raise CorruptStoreError(f"Store file {self.path} is not valid UTF-8: {exc}") from exc
        except OSError as exc:
            raise StorageError(f"Failed to read store file {self.path}: {exc}") from exc

        if not text.strip():
            return {}
        try:
            loaded = json.loads(text)
        except json.JSONDecodeError as exc:
            raise CorruptStoreError(f"Invalid JSON in store file {self.path}: {exc}") from exc
        if not isinstance(loaded, dict):
            raise CorruptStoreError(f"Store file {self.path} must contain an object at the root")
        return {str(key): value if isinstance(value, str) else json.dumps(value) for key, value in loaded.items()}

    def get(self, key: str) -> Optional[str]:
        return self._read().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value

        payload = json.dumps(data, indent=2) + "\n"
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with NamedTemporaryFile("w", dir=self.path.parent, delete=False, encoding="utf-8") as tmp:
                tmp.write(payload)
                temp_path = Path(tmp.name)
            try:
                temp_path.replace(self.path)
            except OSError:
                temp_path.unlink(missing_ok=True)
                raise
        except OSError as exc:
            raise StorageError(f"Failed to write store file {self.path}: {exc}") from exc

        logger.debug("Wrote key %s to %s (%d bytes)", key, self.path, len(value))
