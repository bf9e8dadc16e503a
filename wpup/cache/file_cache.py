"""A simple file-based cache: one JSON file per key.

Each ``<key>.txt`` file holds ``{"expiration_time": <epoch seconds>,
"value": <any JSON value>}``. An entry that cannot be read or decoded is a
cache miss, never an error.
"""

import json
import logging
import os
import tempfile
import time
from pathlib import Path
from typing import Any, Optional, Union

from wpup.cache.base import Cache
from wpup.cache.fingerprints import safe_key

logger = logging.getLogger(__name__)


def _now() -> int:
    return int(time.time())


class FileCache(Cache):
    """File-backed :class:`Cache` rooted at *cache_directory*.

    The directory is created on the first write.
    """

    def __init__(self, cache_directory: Union[str, Path]):
        self.cache_directory = Path(cache_directory)

    def get(self, key: str) -> Optional[Any]:
        filename = self._filename(key)
        if not filename.is_file():
            return None

        entry = self._read(filename)
        if entry is None:
            return None
        if entry["expiration_time"] <= _now():
            # May race with a concurrent writer; last writer wins.
            self.clear(key)
            logger.debug("Cache entry %s expired", key)
            return None
        return entry["value"]

    def set(self, key: str, value: Any, expiration: int = 0) -> None:
        entry = {
            "expiration_time": _now() + expiration,
            "value": value,
        }
        payload = json.dumps(entry, sort_keys=True)
        self.cache_directory.mkdir(parents=True, exist_ok=True)
        filename = self._filename(key)

        # Readers see the old entry or the new one, never a partial write.
        fd, temp_name = tempfile.mkstemp(dir=self.cache_directory, prefix=f".{filename.stem}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(payload)
            os.replace(temp_name, filename)
        except OSError:
            Path(temp_name).unlink(missing_ok=True)
            raise

    def clear(self, key: str) -> None:
        self._filename(key).unlink(missing_ok=True)

    def purge_expired(self) -> int:
        """Delete every expired or unreadable entry. Returns how many were removed."""
        removed = 0
        now = _now()
        for filename in self.cache_directory.glob("*.txt"):
            entry = self._read(filename)
            if entry is None or entry["expiration_time"] <= now:
                filename.unlink(missing_ok=True)
                removed += 1
        return removed

    def _filename(self, key: str) -> Path:
        return self.cache_directory / f"{safe_key(key)}.txt"

    @staticmethod
    def _read(filename: Path) -> Optional[dict]:
        try:
            raw = json.loads(filename.read_text(encoding="utf-8"))
            entry = {"expiration_time": int(raw["expiration_time"]), "value": raw["value"]}
        except FileNotFoundError:
            return None
        except (OSError, ValueError, TypeError, KeyError) as exc:
            logger.warning("Ignoring unreadable cache entry %s: %s", filename.name, exc)
            return None
        return entry
