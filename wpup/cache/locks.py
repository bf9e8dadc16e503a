"""Advisory file locks for append-only files such as the request log.

Several server processes can append to the same log file at once. Writers
take an exclusive ``flock`` on the file they are writing so lines never
interleave. Cache entries do not need this: they are replaced atomically.

Typical usage:

    from wpup.cache.locks import file_lock

    with open(path, "a", encoding="utf-8") as handle, file_lock(handle):
        handle.write(line)
"""

import fcntl
import time
from contextlib import contextmanager
from typing import IO


class FileLock:
    """Exclusive advisory lock on an open file handle."""

    def __init__(
        self,
        handle: IO,
        retry_interval: float = 0.01,
        max_retries: int = 500,
    ):
        self.handle = handle
        self.retry_interval = retry_interval
        self.max_retries = max_retries

    def acquire(self) -> bool:
        """Try to acquire the lock without blocking. Returns True if acquired."""
        try:
            fcntl.flock(self.handle.fileno(), fcntl.LOCK_EX | fcntl.LOCK_NB)
        except BlockingIOError:
            return False
        return True

    def release(self) -> None:
        """Release the lock."""
        fcntl.flock(self.handle.fileno(), fcntl.LOCK_UN)

    def acquire_with_retry(self) -> bool:
        """Spin-wait until lock is acquired or max_retries exceeded."""
        for _ in range(self.max_retries):
            if self.acquire():
                return True
            time.sleep(self.retry_interval)
        return False


@contextmanager
def file_lock(handle: IO, max_retries: int = 500):
    """Hold an exclusive lock on *handle* for the duration of the block.

    Usage:
        with file_lock(handle):
            handle.write(data)
    """
    lock = FileLock(handle, max_retries=max_retries)
    if not lock.acquire_with_retry():
        raise TimeoutError(f"Could not acquire lock for {getattr(handle, 'name', handle)}")
    try:
        yield lock
    finally:
        handle.flush()
        lock.release()
