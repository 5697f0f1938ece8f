"""
Key-value storage backends - the local equivalent of browser localStorage.
"""

import contextlib
import logging
import os
import tempfile
from pathlib import Path
from typing import Dict, List, Optional
from urllib.parse import quote, unquote

from core.domain.errors import StorageError
from core.interfaces.storage import IKeyValueStorage

logger = logging.getLogger(__name__)

_SUFFIX = ".json"


class JsonFileStorage(IKeyValueStorage):
    """
    One file per key inside a directory.

    Writes go through a temp file + os.replace so a reader never sees a
    half-written value. Processes sharing the directory share the data,
    with no locking between them (last writer wins).
    """

    def __init__(self, directory: Path):
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        return self.directory / f"{quote(key, safe='')}{_SUFFIX}"

    def get_item(self, key: str) -> Optional[str]:
        path = self._path(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"[STORAGE] Cannot read {path}: {e}")
            return None

    def set_item(self, key: str, value: str) -> None:
        path = self._path(key)
        tmp_name = None
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w", encoding="utf-8", dir=self.directory,
                prefix=".tmp-", suffix=_SUFFIX, delete=False,
            ) as tmp:
                tmp_name = tmp.name
                tmp.write(value)
            os.replace(tmp_name, path)
        except OSError as e:
            if tmp_name:
                with contextlib.suppress(OSError):
                    os.unlink(tmp_name)
            raise StorageError(key, f"write failed: {e}") from e

    def remove_item(self, key: str) -> None:
        try:
            self._path(key).unlink(missing_ok=True)
        except OSError as e:
            raise StorageError(key, f"remove failed: {e}") from e

    def keys(self) -> List[str]:
        if not self.directory.is_dir():
            return []
        return sorted(
            unquote(p.name[:-len(_SUFFIX)])
            for p in self.directory.iterdir()
            if p.name.endswith(_SUFFIX) and not p.name.startswith(".tmp-")
        )


class InMemoryStorage(IKeyValueStorage):
    """Dict-backed storage for ephemeral sessions and tests"""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._items: Dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def keys(self) -> List[str]:
        return sorted(self._items)
