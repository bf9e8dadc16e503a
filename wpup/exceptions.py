"""Typed exception hierarchy. Every error wpup can raise."""


class WpupError(Exception):
    """Base exception for all wpup errors."""
    def __init__(self, message: str, details: dict = None):
        super().__init__(message)
        self.details = details or {}


class ArchiveUnreadable(WpupError):
    """Path is missing, unreadable, or not a valid ZIP container.

    The server treats this exactly like a missing package (404).
    """
    def __init__(self, message: str, path: str = "", **kwargs):
        super().__init__(message, **kwargs)
        self.path = path


class InvalidPackage(WpupError):
    """Archive opened fine but holds no plugin header or theme stylesheet."""
    def __init__(self, message: str, path: str = "", **kwargs):
        super().__init__(message, **kwargs)
        self.path = path
