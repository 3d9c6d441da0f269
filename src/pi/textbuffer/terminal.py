"""Raw-input-mode control for the terminal the buffer reads keys from.

The external editor round trip needs to hand the terminal back in cooked
mode and restore raw mode afterwards. Hosts pass any object satisfying
:class:`RawModeController`; :class:`StdinRawMode` is the termios-backed
implementation for POSIX terminals.

``termios`` is imported only when a real TTY is touched, so the package
still imports where it does not exist.
"""

from __future__ import annotations

import logging
import sys
from typing import Protocol, TextIO

logger = logging.getLogger(__name__)


class RawModeController(Protocol):
    """Minimal interface for toggling raw input mode.

    ``set_raw_mode`` signals failure with :class:`OSError`.
    """

    @property
    def is_raw(self) -> bool: ...

    def set_raw_mode(self, enabled: bool) -> None: ...


class StdinRawMode:
    """Toggle raw mode on a TTY stream (``sys.stdin`` by default).

    The cooked attributes seen before the first switch to raw mode are
    remembered and restored when raw mode is turned off.
    """

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream if stream is not None else sys.stdin
        self._original_termios: list | None = None

    def _fileno(self) -> int | None:
        try:
            fd = self._stream.fileno()
        except (AttributeError, ValueError, OSError):
            return None
        return fd if self._stream.isatty() else None

    @property
    def is_raw(self) -> bool:
        fd = self._fileno()
        return fd is not None and _is_raw_mode(fd)

    def set_raw_mode(self, enabled: bool) -> None:
        fd = self._fileno()
        if fd is None:
            logger.debug("Stream is not a TTY; ignoring raw mode change to %s", enabled)
            return

        import termios
        import tty

        try:
            if enabled:
                if self._original_termios is None:
                    self._original_termios = termios.tcgetattr(fd)
                tty.setraw(fd)
            elif self._original_termios is not None:
                termios.tcsetattr(fd, termios.TCSADRAIN, self._original_termios)
                self._original_termios = None
            else:
                # Raw mode set by someone else: turn canonical input and echo back on.
                attrs = termios.tcgetattr(fd)
                attrs[3] |= termios.ICANON | termios.ECHO
                termios.tcsetattr(fd, termios.TCSADRAIN, attrs)
        except termios.error as e:
            raise OSError(f"Could not set raw mode to {enabled} on fd {fd}: {e}") from e


def _is_raw_mode(fd: int) -> bool:
    """Heuristic check for whether the terminal fd is already in raw mode.

    Raw mode is characterised by the absence of ICANON and ECHO in the
    local-mode flags.
    """
    import termios

    try:
        attrs = termios.tcgetattr(fd)
        lflag = attrs[3]  # c_lflag
        return not bool(lflag & (termios.ICANON | termios.ECHO))
    except termios.error:
        return False
