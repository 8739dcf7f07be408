"""Exclusive locks for documentation files that are replaced by rename.

The patcher never writes a target in place: it renames a new file over it.
A lock held on the target itself would stay attached to the old inode, so
a second writer opening the path after the rename would lock the new inode
and run concurrently. Locks are therefore taken on a sidecar file next to
the target:

    README.md       <- replaced by rename
    .README.md.lock <- locked, never renamed

The holder removes the sidecar before unlocking. A waiter that acquires a
lock on a sidecar which has meanwhile been removed (or replaced) notices
that the path no longer refers to the locked file and retries, so at most
one process ever holds the lock for a given target.

Philosophy:
- Standard library only (fcntl/msvcrt are standard library)
- Exponential backoff while another process holds the lock
- Context manager for automatic release

Public API:
    acquire_file_lock: Context manager holding an exclusive lock for a file
    lock_path_for: Sidecar path locked for a target
    LockTimeoutError: Raised when the lock cannot be acquired in time

Example:
    >>> from pathlib import Path
    >>> from clidoc.file_lock_manager import acquire_file_lock
    >>> readme = Path("README.md")
    >>> with acquire_file_lock(readme, timeout=5.0, operation="docs injection"):
    ...     content = readme.read_text()
"""

import logging
import os
import platform
import time
from collections.abc import Generator
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING, TextIO

_system = platform.system()
if TYPE_CHECKING or _system == "Windows":
    import msvcrt  # type: ignore[import-not-found]
if TYPE_CHECKING or _system != "Windows":
    import fcntl  # type: ignore[import-not-found]

logger = logging.getLogger(__name__)

INITIAL_DELAY = 0.1
MAX_DELAY = 2.0
LOCK_SUFFIX = ".lock"

__all__ = ["LockTimeoutError", "acquire_file_lock", "lock_path_for"]


class LockTimeoutError(Exception):
    """Raised when a file lock cannot be acquired within the timeout."""


def lock_path_for(file_path: Path) -> Path:
    """Return the sidecar locked on behalf of file_path."""
    return file_path.with_name(f".{file_path.name}{LOCK_SUFFIX}")


@contextmanager
def acquire_file_lock(
    file_path: Path,
    timeout: float = 5.0,
    operation: str = "file operation",
) -> Generator[None, None, None]:
    """Hold the exclusive lock for an existing file.

    The lock is advisory on POSIX (fcntl.flock) and a one-byte mandatory
    lock on Windows (msvcrt.locking). The target itself is never opened;
    it may be replaced by rename while the lock is held.

    Args:
        file_path: File to lock
        timeout: Maximum seconds to wait for the lock
        operation: Description used in error messages

    Yields:
        None while the lock is held

    Raises:
        FileNotFoundError: If the file does not exist
        PermissionError: If the sidecar cannot be created or locked
        LockTimeoutError: If the lock is not acquired within timeout
    """
    if not file_path.exists():
        raise FileNotFoundError(f"File does not exist: {file_path}")

    lock_path = lock_path_for(file_path)
    handle = _acquire_lock_with_backoff(lock_path, timeout, operation)
    try:
        yield
    finally:
        _release_lock(handle, lock_path)


def _acquire_lock_with_backoff(lock_path: Path, timeout: float, operation: str) -> TextIO:
    """Retry a non-blocking lock with delays of 0.1s, 0.2s, 0.4s ... capped at 2s.

    Returns:
        Open handle of the locked sidecar

    Raises:
        LockTimeoutError: If the lock is not acquired within timeout
        PermissionError: If the first attempt fails with a permission error
    """
    start_time = time.monotonic()
    delay = INITIAL_DELAY
    attempt = 0

    while True:
        elapsed = time.monotonic() - start_time
        if elapsed >= timeout:
            raise LockTimeoutError(
                f"Failed to acquire file lock for {operation} after {timeout} seconds. "
                f"Lock: {lock_path}. Another process may be holding the lock."
            )

        handle = open(lock_path, "a")
        try:
            _lock(handle)
        except (BlockingIOError, PermissionError) as e:
            handle.close()
            # A permission error on the first try is a real permission problem
            if isinstance(e, PermissionError) and attempt == 0:
                raise

            sleep_time = min(delay, timeout - elapsed)
            if sleep_time > 0:
                time.sleep(sleep_time)

            delay = min(delay * 2, MAX_DELAY)
            attempt += 1
            continue
        except BaseException:
            handle.close()
            raise

        if _is_current(handle, lock_path):
            if attempt:
                logger.debug(f"Acquired lock {lock_path} after {attempt} retries")
            return handle

        # The previous holder removed the sidecar after we opened it
        logger.debug(f"Lock file {lock_path} was replaced while waiting, retrying")
        _unlock(handle)
        handle.close()


def _is_current(handle: TextIO, lock_path: Path) -> bool:
    """Whether lock_path still names the file behind handle."""
    try:
        on_disk = os.stat(lock_path)
    except FileNotFoundError:
        return False
    held = os.fstat(handle.fileno())
    return (held.st_dev, held.st_ino) == (on_disk.st_dev, on_disk.st_ino)


def _lock(handle: TextIO) -> None:
    if _system == "Windows":
        msvcrt.locking(handle.fileno(), msvcrt.LK_NBLCK, 1)  # type: ignore[attr-defined]
    else:
        fcntl.flock(handle.fileno(), fcntl.LOCK_EX | fcntl.LOCK_NB)


def _unlock(handle: TextIO) -> None:
    if _system == "Windows":
        msvcrt.locking(handle.fileno(), msvcrt.LK_UNLCK, 1)  # type: ignore[attr-defined]
    else:
        fcntl.flock(handle.fileno(), fcntl.LOCK_UN)


def _release_lock(handle: TextIO, lock_path: Path) -> None:
    """Remove the sidecar, then unlock and close it."""
    try:
        # Windows refuses to remove an open file; the sidecar is then kept
        lock_path.unlink(missing_ok=True)
    except OSError as e:
        logger.debug(f"Could not remove lock file {lock_path}: {e}")

    try:
        _unlock(handle)
    except OSError as e:
        logger.debug(f"Error during lock cleanup: {e}")
    finally:
        handle.close()
