"""Tests for pi.textbuffer.terminal."""

from __future__ import annotations

import io
import os
import sys

import pytest

import pi.textbuffer.terminal as terminal
from pi.textbuffer.terminal import StdinRawMode


class FakeTtyStream:
    """A pipe end that claims to be a terminal."""

    def __init__(self, fd: int) -> None:
        self._fd = fd

    def fileno(self) -> int:
        return self._fd

    def isatty(self) -> bool:
        return True


class TestStdinRawMode:
    """Streams that are not terminals are left alone."""

    def test_non_tty_stream_is_never_raw(self) -> None:
        assert StdinRawMode(io.StringIO()).is_raw is False

    def test_set_raw_mode_on_non_tty_is_noop(self) -> None:
        mode = StdinRawMode(io.StringIO())
        mode.set_raw_mode(True)
        mode.set_raw_mode(False)
        assert mode.is_raw is False

    def test_regular_file_is_not_a_tty(self, tmp_path) -> None:
        with open(tmp_path / "input.txt", "w+") as stream:
            mode = StdinRawMode(stream)
            mode.set_raw_mode(True)
            assert mode.is_raw is False


class TestWithoutTermios:
    """termios is only needed once a real terminal is touched."""

    def test_module_does_not_bind_termios(self) -> None:
        assert not hasattr(terminal, "termios")

    def test_non_tty_works_when_termios_is_missing(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setitem(sys.modules, "termios", None)
        mode = StdinRawMode(io.StringIO())
        mode.set_raw_mode(True)
        assert mode.is_raw is False


class TestRawModeFailures:
    """termios failures surface as OSError."""

    def test_failed_switch_raises_os_error(self) -> None:
        pytest.importorskip("termios")
        read_fd, write_fd = os.pipe()
        try:
            mode = StdinRawMode(FakeTtyStream(read_fd))  # type: ignore[arg-type]
            assert mode.is_raw is False
            with pytest.raises(OSError):
                mode.set_raw_mode(True)
            with pytest.raises(OSError):
                mode.set_raw_mode(False)
        finally:
            os.close(read_fd)
            os.close(write_fd)
