"""A very basic cache interface."""

from abc import ABC, abstractmethod
from typing import Any, Optional


class Cache(ABC):
    """Key/value store with per-entry expiration."""

    @abstractmethod
    def get(self, key: str) -> Optional[Any]:
        """Return the cached value, or ``None`` if missing or expired."""

    @abstractmethod
    def set(self, key: str, value: Any, expiration: int = 0) -> None:
        """Store *value* for *expiration* seconds. ``0`` expires immediately."""

    @abstractmethod
    def clear(self, key: str) -> None:
        """Remove *key* if present."""
