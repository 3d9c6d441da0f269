"""Editing buffer text in an external editor process.

The round trip writes the text to a fresh temp file, hands the terminal to
the editor (raw mode off), waits for it to exit and reads the file back.
Raw mode and the temp files are restored/removed on every exit path.
"""

from __future__ import annotations

import logging
import os
import shlex
import subprocess
import sys
import tempfile
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from pathlib import Path

from pi.textbuffer.config import TextBufferConfig
from pi.textbuffer.terminal import RawModeController
from pi.textbuffer.utils import normalize_newlines

logger = logging.getLogger(__name__)


class ExternalEditorError(RuntimeError):
    """The editor could not be started, failed, or its result was unreadable."""

    def __init__(self, message: str, *, command: str, status: int | None = None) -> None:
        super().__init__(message)
        self.command = command
        self.status = status


def resolve_editor_command(
    editor: str | None = None,
    env: Mapping[str, str] | None = None,
    platform: str | None = None,
) -> str:
    """Pick the editor: explicit, then ``$VISUAL``, then ``$EDITOR``, then a platform default."""
    if editor:
        return editor
    if env is None:
        env = os.environ
    for name in ("VISUAL", "EDITOR"):
        value = env.get(name)
        if value:
            return value
    platform = platform if platform is not None else sys.platform
    return "notepad" if platform == "win32" else "vi"


@contextmanager
def suspended_raw_mode(controller: RawModeController | None) -> Iterator[None]:
    """Leave raw mode for the duration of the block, restoring it afterwards."""
    was_raw = controller.is_raw if controller is not None else False
    try:
        if controller is not None:
            controller.set_raw_mode(False)
        yield
    finally:
        if controller is not None and was_raw:
            controller.set_raw_mode(True)


@contextmanager
def temporary_buffer_file(text: str, config: TextBufferConfig) -> Iterator[Path]:
    """Write *text* to a file in a fresh temp directory; remove both on exit."""
    tmp_dir = Path(tempfile.mkdtemp(prefix=config.temp_dir_prefix))
    file_path = tmp_dir / config.temp_file_name
    try:
        file_path.write_text(text, encoding="utf-8")
        yield file_path
    finally:
        try:
            file_path.unlink()
        except OSError as e:
            logger.debug("Could not remove %s: %s", file_path, e)
        try:
            tmp_dir.rmdir()
        except OSError as e:
            logger.debug("Could not remove %s: %s", tmp_dir, e)


def run_external_editor(
    text: str,
    *,
    editor: str | None = None,
    raw_mode: RawModeController | None = None,
    config: TextBufferConfig | None = None,
    env: Mapping[str, str] | None = None,
) -> str:
    """Let the user edit *text* in an external editor and return the result.

    Blocks until the editor exits. Line endings of the result are normalised
    to LF.

    Raises:
        ExternalEditorError: if the command cannot be parsed, the temp file
            or raw mode cannot be set up, the editor cannot be spawned or
            exits non-zero, or the edited file cannot be read back.
    """
    config = config or TextBufferConfig()
    command = resolve_editor_command(editor or config.editor, env)
    try:
        argv = shlex.split(command)
    except ValueError as e:
        raise ExternalEditorError(f"Could not parse editor command {command!r}: {e}", command=command) from e
    if not argv:
        raise ExternalEditorError("Empty editor command", command=command)

    try:
        with temporary_buffer_file(text, config) as file_path:
            edited = _edit_file(argv, command, file_path, raw_mode)
    except OSError as e:
        raise ExternalEditorError(f"External editor round trip failed: {e}", command=command) from e

    return normalize_newlines(edited)


def _edit_file(argv: list[str], command: str, file_path: Path, raw_mode: RawModeController | None) -> str:
    logger.debug("Launching external editor: %s %s", command, file_path)
    with suspended_raw_mode(raw_mode):
        try:
            result = subprocess.run([*argv, str(file_path)], check=False)
        except OSError as e:
            raise ExternalEditorError(
                f"Failed to launch external editor {command!r}: {e}", command=command
            ) from e

    if result.returncode != 0:
        raise ExternalEditorError(
            f"External editor exited with status {result.returncode}",
            command=command,
            status=result.returncode,
        )

    try:
        return file_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ExternalEditorError(
            f"Could not read back {file_path}: {e}", command=command, status=result.returncode
        ) from e
