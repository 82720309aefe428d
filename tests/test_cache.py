"""
Tests for the vulnerability DB cache directory lifecycle.
"""

import os
import shutil
import threading
import signal
import pytest
from unittest.mock import call, patch

from core.cache import CacheDirectory
from core.exceptions import CacheError


class TestCacheDirectory:
    """Tests for ownership and single-fire cleanup."""

    def test_explicit_path_used_verbatim(self, tmp_path):
        cache_dir = CacheDirectory(str(tmp_path))
        assert cache_dir.path == str(tmp_path)
        assert cache_dir.owned is False

    def test_explicit_path_never_removed(self, tmp_path):
        """Test a caller-supplied directory survives cleanup."""
        with CacheDirectory(str(tmp_path)) as cache_dir:
            pass
        assert cache_dir.cleanup() is False
        assert tmp_path.exists()

    def test_temporary_directory_created(self):
        cache_dir = CacheDirectory()
        try:
            assert cache_dir.owned is True
            assert os.path.isdir(cache_dir.path)
            assert os.path.basename(cache_dir.path).startswith("helm-trivy")
        finally:
            cache_dir.cleanup()

    def test_context_exit_removes_directory(self):
        with CacheDirectory() as cache_dir:
            path = cache_dir.path
            open(os.path.join(path, "trivy.db"), "w").close()
        assert not os.path.exists(path)

    def test_cleanup_twice_does_not_error(self):
        """Test the second cleanup is a no-op."""
        cache_dir = CacheDirectory()
        assert cache_dir.cleanup() is True
        assert cache_dir.cleanup() is False
        assert cache_dir.disposed is True

    def test_cleanup_after_external_removal(self):
        """Test cleanup tolerates a directory that is already gone."""
        cache_dir = CacheDirectory()
        os.rmdir(cache_dir.path)
        assert cache_dir.cleanup() is True

    def test_mkdtemp_failure_raises_cache_error(self):
        with patch("tempfile.mkdtemp", side_effect=OSError("no space left")):
            with pytest.raises(CacheError, match="no space left"):
                CacheDirectory()


class TestSignalHandling:
    """Tests for the interrupt cleanup path."""

    def test_install_registers_sigint_and_sigterm(self):
        cache_dir = CacheDirectory()
        try:
            with patch("signal.signal") as mock_signal:
                cache_dir.install_signal_handlers()
            mock_signal.assert_has_calls([
                call(signal.SIGINT, cache_dir._handle_signal),
                call(signal.SIGTERM, cache_dir._handle_signal),
            ])
        finally:
            cache_dir.cleanup()

    def test_install_skipped_for_explicit_path(self, tmp_path):
        with patch("signal.signal") as mock_signal:
            CacheDirectory(str(tmp_path)).install_signal_handlers()
        mock_signal.assert_not_called()

    def test_signal_removes_directory_and_exits(self):
        cache_dir = CacheDirectory()
        with patch("os._exit") as mock_exit:
            cache_dir._handle_signal(signal.SIGTERM, None)
        assert not os.path.exists(cache_dir.path)
        mock_exit.assert_called_once_with(0)

    def test_signal_then_context_exit_removes_once(self):
        """Test both exit paths racing on the same directory."""
        with patch("shutil.rmtree") as mock_rmtree, patch("os._exit"):
            with CacheDirectory() as cache_dir:
                cache_dir._handle_signal(signal.SIGINT, None)
            mock_rmtree.assert_called_once_with(cache_dir.path, ignore_errors=True)
        os.rmdir(cache_dir.path)

    def test_signal_during_context_exit_still_removes_directory(self):
        """Test a signal arriving inside the normal-exit rmtree."""
        real_rmtree = shutil.rmtree
        calls = []

        def interrupted_rmtree(path, ignore_errors=False):
            calls.append(path)
            if len(calls) == 1:
                cache_dir._handle_signal(signal.SIGTERM, None)
            real_rmtree(path, ignore_errors=ignore_errors)

        cache_dir = CacheDirectory()
        open(os.path.join(cache_dir.path, "trivy.db"), "w").close()
        with patch("shutil.rmtree", side_effect=interrupted_rmtree), \
                patch("os._exit", side_effect=SystemExit(0)):
            with pytest.raises(SystemExit):
                cache_dir.__exit__(None, None, None)

        assert not os.path.exists(cache_dir.path)

    def test_signal_while_lock_held_does_not_block(self):
        """Test the handler completes while cleanup() holds the lock."""
        cache_dir = CacheDirectory()
        with cache_dir._lock, patch("os._exit") as mock_exit:
            handler = threading.Thread(
                target=cache_dir._handle_signal, args=(signal.SIGINT, None), daemon=True
            )
            handler.start()
            handler.join(timeout=3)
            assert not handler.is_alive()

        assert not os.path.exists(cache_dir.path)
        mock_exit.assert_called_once_with(0)
        assert cache_dir.cleanup() is False

    def test_signal_reentering_cleanup_on_same_thread(self):
        """Test cleanup() re-entered from a handler on the lock-holding thread."""
        cache_dir = CacheDirectory()
        with cache_dir._lock:
            assert cache_dir.cleanup() is True
        assert not os.path.exists(cache_dir.path)
