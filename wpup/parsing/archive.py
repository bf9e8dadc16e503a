"""ArchiveReader — list and read the members of a ZIP package."""

from __future__ import annotations

import logging
import os
import zipfile
import zlib
from pathlib import Path
from typing import Optional, Union

from wpup.exceptions import ArchiveUnreadable
from wpup.types import ArchiveEntry

logger = logging.getLogger(__name__)


class ArchiveReader:
    """Scoped read access to a ZIP archive.

    Use as a context manager so the file handle is released on every path::

        with ArchiveReader.open(path) as archive:
            for entry in archive.list_entries():
                data = archive.read_entry(entry, limit=8192)
    """

    def __init__(self, zip_file: zipfile.ZipFile, path: str) -> None:
        self._zip = zip_file
        self.path = path

    @classmethod
    def open(cls, path: Union[str, Path]) -> "ArchiveReader":
        """Open *path* for reading.

        Raises:
            ArchiveUnreadable: missing file, permission problem, or not a ZIP.
        """
        path = str(path)
        if not os.path.isfile(path) or not os.access(path, os.R_OK):
            raise ArchiveUnreadable(f"Archive not found or not readable: {path}", path=path)
        try:
            zip_file = zipfile.ZipFile(path)
        except (zipfile.BadZipFile, OSError) as exc:
            raise ArchiveUnreadable(f"Not a valid ZIP archive: {path} ({exc})", path=path) from exc
        return cls(zip_file, path)

    def close(self) -> None:
        self._zip.close()

    def __enter__(self) -> "ArchiveReader":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def list_entries(self) -> list[ArchiveEntry]:
        """All members in central-directory order."""
        return [
            ArchiveEntry(
                name=info.filename,
                size=info.file_size,
                is_directory=info.is_dir(),
                index=index,
            )
            for index, info in enumerate(self._zip.infolist())
        ]

    def read_entry(self, entry: ArchiveEntry, limit: Optional[int] = None) -> bytes:
        """Return the uncompressed bytes of *entry*, at most *limit* bytes.

        A member that fails to decompress is logged and read as empty, so one
        damaged file never hides the rest of the package.
        """
        info = self._zip.infolist()[entry.index]
        try:
            with self._zip.open(info) as member:
                return member.read() if limit is None else member.read(limit)
        except (zipfile.BadZipFile, zlib.error, NotImplementedError, RuntimeError, OSError) as exc:
            logger.warning("Cannot read '%s' from %s: %s", entry.name, self.path, exc)
            return b""
