"""
Lifecycle management for the Trivy vulnerability DB cache directory.

One cache directory is shared by every scan in a run. A caller-supplied
directory is used as-is and never removed. Otherwise a temporary directory
is created and removed exactly once, either when the run's context exits or
when SIGINT/SIGTERM arrives, whichever happens first.
"""

import logging
import os
import shutil
import signal
import sys
import tempfile
import threading
from typing import Optional

from constants import CACHE_DIR_PREFIX
from core.exceptions import CacheError

logger = logging.getLogger(__name__)

TERMINATION_SIGNALS = (signal.SIGINT, signal.SIGTERM)


class CacheDirectory:
    """
    Scoped vulnerability DB cache directory.

    Use as a context manager for the normal exit path and call
    install_signal_handlers() for the interrupt path. Both end up in
    cleanup(), which only removes the directory the first time it runs.
    """

    def __init__(self, path: Optional[str] = None):
        """
        Initialize the cache directory.

        Args:
            path: Explicit cache directory. If empty, a temporary directory
                  is created and owned by this instance.

        Raises:
            CacheError: If the temporary directory cannot be created
        """
        self._lock = threading.RLock()
        self.disposed = False

        if path:
            self.path = path
            self.owned = False
        else:
            try:
                self.path = tempfile.mkdtemp(prefix=CACHE_DIR_PREFIX)
            except OSError as e:
                raise CacheError(f"Could not create cache dir: {e}") from e
            self.owned = True

        logger.debug(f"Using {self.path} as cache directory for vuln db")

    def cleanup(self) -> bool:
        """
        Remove the directory if this instance owns it.

        Safe to call any number of times from either exit path.

        Returns:
            True if this call removed the directory, False otherwise
        """
        if not self.owned:
            return False

        with self._lock:
            if self.disposed:
                return False
            self._remove()
            self.disposed = True

        logger.debug(f"Removed cache directory {self.path}")
        return True

    def _remove(self) -> None:
        shutil.rmtree(self.path, ignore_errors=True)

    def install_signal_handlers(self) -> None:
        """Remove the directory and exit immediately on SIGINT or SIGTERM."""
        if not self.owned:
            return
        for signum in TERMINATION_SIGNALS:
            signal.signal(signum, self._handle_signal)

    def _handle_signal(self, signum, frame) -> None:
        # May interrupt cleanup() on this same thread, so remove without
        # taking the lock or trusting the disposed flag.
        self._remove()
        self.disposed = True
        sys.stdout.flush()
        # Skip the context manager and any in-flight scan.
        os._exit(0)

    def __enter__(self) -> "CacheDirectory":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.cleanup()
