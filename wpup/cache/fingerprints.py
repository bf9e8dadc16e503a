"""Cache keys that change whenever a package archive changes."""

import hashlib
import os
import re
from typing import Optional, Union

_SAFE_ID = re.compile(r'[^a-zA-Z0-9_.-]')


def safe_key(key: str) -> str:
    """Strip characters that are not safe in a cache file name."""
    return _SAFE_ID.sub("", key)


def archive_fingerprint(path: str, size: int, modified_time: Union[int, float]) -> str:
    """md5 of ``path|size|mtime``.

    Replacing the archive changes its size or mtime, which changes the
    fingerprint, so stale metadata is never served after an update.
    """
    raw = f"{path}|{size}|{modified_time}"
    return hashlib.md5(raw.encode("utf-8")).hexdigest()


def package_cache_key(
    path: str,
    size: int,
    modified_time: Union[int, float],
    slug: Optional[str] = None,
) -> str:
    """Cache key for the metadata of the archive at *path*.

    Args:
        path: Archive path as given by the package lookup.
        size: Archive size in bytes (``os.stat().st_size``).
        modified_time: Archive mtime (``os.stat().st_mtime``).
        slug: Requested slug, kept in the key to make cache files readable.
    """
    safe_slug = safe_key(slug or "")[:50]
    return f"metadata-{safe_slug}-{archive_fingerprint(path, size, modified_time)}"


def cache_key_for_file(path: Union[str, os.PathLike], slug: Optional[str] = None) -> str:
    """Stat *path* and build its cache key."""
    stat = os.stat(path)
    return package_cache_key(str(path), stat.st_size, stat.st_mtime, slug)
