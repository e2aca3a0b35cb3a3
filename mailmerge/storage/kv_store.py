from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Protocol

"""Key-value string storage for persisted template / sent status.

Browser localStorage 相当。値は呼び出し側でシリアライズ済みの文字列。
JsonFileStore は 1 つの JSON オブジェクトとしてファイルに保存する。
"""

__all__ = [
    "KeyValueStore",
    "MemoryStore",
    "JsonFileStore",
    "StorageError",
]

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Raised when the backing store file cannot be read or written."""


class KeyValueStore(Protocol):
    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...


class MemoryStore:
    """Process-local store (tests, one-shot runs)."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value


class JsonFileStore:
    """Store persisted as a single JSON object ``{key: value}``.

    ファイルは読み書きのたびに開く (シリアル実行前提、ロックなし)。
    書き込みは一時ファイル + replace で行い、途中失敗で既存内容を壊さない。
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def _load(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8") or "{}")
        except json.JSONDecodeError as e:
            raise StorageError(f"store file is not valid JSON: {self.path}: {e}") from e
        except OSError as e:
            raise StorageError(f"cannot read store file: {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise StorageError(f"store file must contain a JSON object: {self.path}")
        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def get(self, key: str) -> str | None:
        return self._load().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp = tempfile.mkstemp(dir=self.path.parent, prefix=".store-", suffix=".json")
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False, indent=2)
            os.replace(tmp, self.path)
        except OSError as e:
            raise StorageError(f"cannot write store file: {self.path}: {e}") from e
        logger.debug(f"store: wrote key={key} path={self.path}")
