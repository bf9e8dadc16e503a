"""Package — a plugin or theme ZIP plus the metadata served for it."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional, Union

from pydantic import ValidationError

from wpup.cache.base import Cache
from wpup.cache.fingerprints import package_cache_key
from wpup.core.metadata import build_metadata
from wpup.exceptions import ArchiveUnreadable
from wpup.parsing.package import parse_package
from wpup.types import Metadata

logger = logging.getLogger(__name__)

# One week
DEFAULT_CACHE_TTL = 7 * 24 * 3600


def extract_metadata(
    filename: Union[str, Path],
    modified_time: Optional[float] = None,
    apply_markdown: bool = True,
) -> Metadata:
    """Parse *filename* and map it to Metadata, bypassing any cache.

    Readme sections are served as HTML unless *apply_markdown* is False.

    Raises:
        ArchiveUnreadable: missing, unreadable, or not a ZIP.
        InvalidPackage: no plugin or theme header inside.
    """
    if modified_time is None:
        try:
            modified_time = os.stat(filename).st_mtime
        except OSError as exc:
            raise ArchiveUnreadable(f"Archive not found or not readable: {filename}", path=str(filename)) from exc
    return build_metadata(parse_package(filename, apply_markdown), modified_time)


class Package:
    """A package archive and its metadata.

    Most callers want :meth:`from_archive`. Constructing a Package directly is
    useful when metadata comes from somewhere else (a database, a config
    file) and the download lives elsewhere.
    """

    def __init__(self, slug: str, filename: Optional[Union[str, Path]] = None, metadata: Optional[Metadata] = None):
        self.slug = slug
        self.filename = str(filename) if filename is not None else None
        self.metadata = metadata or Metadata()

    def get_metadata(self) -> dict:
        """Metadata as a plain dict with ``slug`` set to this package's slug."""
        meta = self.metadata.to_dict()
        meta["slug"] = self.slug
        return meta

    @property
    def file_size(self) -> int:
        return os.stat(self.filename).st_size

    @property
    def last_modified(self) -> float:
        return os.stat(self.filename).st_mtime

    @classmethod
    def from_archive(
        cls,
        filename: Union[str, Path],
        slug: Optional[str] = None,
        cache: Optional[Cache] = None,
        cache_ttl: int = DEFAULT_CACHE_TTL,
    ) -> "Package":
        """Load a package from a ZIP, using *cache* when one is given.

        The cache key covers path, size and mtime, so replacing the archive
        invalidates the old entry without any explicit clear.

        Raises:
            ArchiveUnreadable: missing, unreadable, or not a ZIP.
            InvalidPackage: no plugin or theme header inside.
        """
        filename = str(filename)
        try:
            stat = os.stat(filename)
        except OSError as exc:
            raise ArchiveUnreadable(f"Archive not found or not readable: {filename}", path=filename) from exc

        cache_key = package_cache_key(filename, stat.st_size, stat.st_mtime, slug)
        metadata = _load_cached(cache, cache_key) if cache is not None else None

        if metadata is None:
            metadata = extract_metadata(filename, stat.st_mtime)
            if cache is not None:
                _store(cache, cache_key, metadata, cache_ttl)

        if not slug:
            slug = metadata.slug
        return cls(slug, filename, metadata)


def _store(cache: Cache, cache_key: str, metadata: Metadata, cache_ttl: int) -> None:
    # Write failures are logged, not raised; the next lookup re-parses.
    try:
        cache.set(cache_key, metadata.to_dict(), cache_ttl)
    except (OSError, TimeoutError) as exc:
        logger.warning("Could not cache metadata %s: %s", cache_key, exc)
        return
    logger.debug("Cached metadata under %s", cache_key)


def _load_cached(cache: Cache, cache_key: str) -> Optional[Metadata]:
    value = cache.get(cache_key)
    if not isinstance(value, dict):
        return None
    try:
        metadata = Metadata.model_validate(value)
    except ValidationError as exc:
        logger.warning("Discarding malformed cached metadata %s: %s", cache_key, exc)
        return None
    logger.debug("Metadata cache hit: %s", cache_key)
    return metadata
