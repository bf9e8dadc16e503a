"""Metadata cache: interface, file-backed store, cache keys."""

from wpup.cache.base import Cache
from wpup.cache.file_cache import FileCache
from wpup.cache.fingerprints import package_cache_key

__all__ = ["Cache", "FileCache", "package_cache_key"]
