"""Configuration for the text buffer."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass

from pi.textbuffer.undo_stack import DEFAULT_CAPACITY

logger = logging.getLogger(__name__)


@dataclass
class TextBufferConfig:
    """Buffer settings."""

    history_limit: int = DEFAULT_CAPACITY
    # Pastes at least this long are checked for being a dropped file path.
    drag_drop_min_length: int = 3
    temp_dir_prefix: str = "pi-edit-"
    temp_file_name: str = "buffer.txt"
    # Overrides $VISUAL/$EDITOR when set.
    editor: str | None = None


def _positive_int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or raw == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r: not an integer", name, raw)
        return default
    if value < 1:
        logger.warning("Ignoring %s=%r: must be positive", name, raw)
        return default
    return value


def load_config(env: Mapping[str, str] | None = None) -> TextBufferConfig:
    """Build a config from ``PI_TEXTBUFFER_*`` environment variables."""
    if env is None:
        env = os.environ
    return TextBufferConfig(
        history_limit=_positive_int(env, "PI_TEXTBUFFER_HISTORY_LIMIT", DEFAULT_CAPACITY),
        drag_drop_min_length=_positive_int(env, "PI_TEXTBUFFER_DRAG_DROP_MIN_LENGTH", 3),
        editor=env.get("PI_TEXTBUFFER_EDITOR") or None,
    )
