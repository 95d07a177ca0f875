"""
Cross-platform advisory lock for catalog sync runs.

- Unix/Linux/macOS: fcntl.flock
- Windows: msvcrt.locking

Usage:
    from skillcatalog.core.utils.filelock import catalog_lock

    with catalog_lock(Path(".claude-plugin/.sync.lock")):
        # ... read, rebuild and write the catalog ...
"""

from __future__ import annotations

import logging
import platform
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from skillcatalog.core.errors import CatalogError

logger = logging.getLogger(__name__)


class FileLockError(CatalogError):
    """Lock operation failed."""
    pass


class LockAcquisitionError(FileLockError):
    """Lock is held by another process."""
    pass


def acquire_lock(file_handle, non_blocking: bool = True):
    """
    Acquire an exclusive lock on an open file.

    Args:
        file_handle: Open file object
        non_blocking: Fail immediately when the lock is held (True) or wait (False)

    Raises:
        LockAcquisitionError: Lock already held by another process (non_blocking only)
        FileLockError: Any other locking failure
    """
    if platform.system() == "Windows":
        _acquire_lock_windows(file_handle, non_blocking)
    else:
        _acquire_lock_unix(file_handle, non_blocking)

    logger.debug(f"Acquired lock on {file_handle.name}")


def release_lock(file_handle):
    """Release a lock taken with :func:`acquire_lock`."""
    if platform.system() == "Windows":
        _release_lock_windows(file_handle)
    else:
        _release_lock_unix(file_handle)

    logger.debug(f"Released lock on {file_handle.name}")


@contextmanager
def catalog_lock(lock_path: Path, non_blocking: bool = True) -> Iterator[Path]:
    """Hold an exclusive lock on ``lock_path`` for the duration of the block.

    The lock file is created if needed and left in place afterwards.
    """
    lock_path.parent.mkdir(parents=True, exist_ok=True)
    with open(lock_path, "a+", encoding="utf-8") as handle:
        acquire_lock(handle, non_blocking=non_blocking)
        try:
            yield lock_path
        finally:
            release_lock(handle)


# ============================================
# Unix/Linux/macOS
# ============================================

def _acquire_lock_unix(file_handle, non_blocking: bool):
    import fcntl

    try:
        flags = fcntl.LOCK_EX
        if non_blocking:
            flags |= fcntl.LOCK_NB

        fcntl.flock(file_handle.fileno(), flags)

    except BlockingIOError as e:
        raise LockAcquisitionError(
            f"Lock is held by another process: {file_handle.name}"
        ) from e
    except OSError as e:
        raise FileLockError(f"fcntl.flock failed: {e}") from e


def _release_lock_unix(file_handle):
    import fcntl

    try:
        fcntl.flock(file_handle.fileno(), fcntl.LOCK_UN)
    except OSError as e:
        raise FileLockError(f"fcntl.flock unlock failed: {e}") from e


# ============================================
# Windows
# ============================================

def _acquire_lock_windows(file_handle, non_blocking: bool):
    import msvcrt

    try:
        # nbytes=1 locks the first byte, enough for an advisory lock file
        file_handle.seek(0)
        mode = msvcrt.LK_NBLCK if non_blocking else msvcrt.LK_LOCK
        msvcrt.locking(file_handle.fileno(), mode, 1)

    except OSError as e:
        # errno 13 (permission denied) / 36 (deadlock avoided): lock held elsewhere
        if e.errno in (13, 36):
            raise LockAcquisitionError(
                f"Lock is held by another process: {file_handle.name}"
            ) from e
        raise FileLockError(f"msvcrt.locking failed: {e}") from e


def _release_lock_windows(file_handle):
    import msvcrt

    try:
        file_handle.seek(0)
        msvcrt.locking(file_handle.fileno(), msvcrt.LK_UNLCK, 1)
    except OSError as e:
        raise FileLockError(f"msvcrt.locking unlock failed: {e}") from e
