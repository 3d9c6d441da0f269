"""Emacs-style key bindings for the text buffer."""

from __future__ import annotations

from typing import Literal

from pi.textbuffer.keys import (
    KeyEvent,
    KeyPattern,
    any_modifiers,
    ctrl,
    ctrl_or_meta,
    meta,
    plain,
    raw,
)

EditorCommand = Literal[
    # Text input
    "newLine",
    "insertText",
    # Cursor movement
    "cursorLeft",
    "cursorRight",
    "cursorUp",
    "cursorDown",
    "cursorWordLeft",
    "cursorWordRight",
    "cursorLineStart",
    "cursorLineEnd",
    # Deletion
    "deleteWordBackward",
    "deleteWordForward",
    "deleteCharBackward",
    "deleteCharForward",
]

EditorKeybindingsConfig = dict[EditorCommand, KeyPattern | list[KeyPattern]]

# Checked in order; the first command with a matching pattern wins.
DEFAULT_EDITOR_KEYBINDINGS: dict[EditorCommand, list[KeyPattern]] = {
    "newLine": [
        any_modifiers("return"),
        raw("\r"),
        raw("\n"),
        raw("\\\r"),  # shift+enter in the VSCode terminal
    ],
    "cursorLeft": [plain("left"), ctrl("b")],
    "cursorRight": [plain("right"), ctrl("f")],
    "cursorUp": [any_modifiers("up")],
    "cursorDown": [any_modifiers("down")],
    "cursorWordLeft": [ctrl_or_meta("left"), meta("b")],
    "cursorWordRight": [ctrl_or_meta("right"), meta("f")],
    "cursorLineStart": [any_modifiers("home"), ctrl("a")],
    "cursorLineEnd": [any_modifiers("end"), ctrl("e")],
    "deleteWordBackward": [
        ctrl("w"),
        ctrl_or_meta("backspace"),
        raw("\x7f", with_ctrl_or_meta=True),
    ],
    "deleteWordForward": [ctrl_or_meta("delete")],
    "deleteCharBackward": [any_modifiers("backspace"), raw("\x7f"), ctrl("h")],
    "deleteCharForward": [any_modifiers("delete"), ctrl("d")],
}


class EditorKeybindingsManager:
    """Maps key events to editor commands."""

    def __init__(self, config: EditorKeybindingsConfig | None = None) -> None:
        self._command_to_patterns: dict[EditorCommand, list[KeyPattern]] = {}
        self._build_maps(config or {})

    def _build_maps(self, config: EditorKeybindingsConfig) -> None:
        self._command_to_patterns.clear()

        for command, patterns in DEFAULT_EDITOR_KEYBINDINGS.items():
            self._command_to_patterns[command] = list(patterns)

        # Overrides keep the command's position in the precedence order.
        for command, patterns in config.items():
            pattern_list = patterns if isinstance(patterns, list) else [patterns]
            self._command_to_patterns[command] = list(pattern_list)

    def matches(self, key: KeyEvent, command: EditorCommand) -> bool:
        """Check if *key* is bound to *command*."""
        return any(p.matches(key) for p in self._command_to_patterns.get(command, []))

    def resolve(self, key: KeyEvent) -> EditorCommand | None:
        """Return the command *key* triggers, or ``None`` to ignore it.

        Pastes always insert. A key bound to nothing inserts its sequence
        unless ctrl or meta is held.
        """
        if key.paste:
            return "insertText"
        for command, patterns in self._command_to_patterns.items():
            if any(p.matches(key) for p in patterns):
                return command
        if key.sequence and not key.ctrl and not key.meta:
            return "insertText"
        return None

    def get_patterns(self, command: EditorCommand) -> list[KeyPattern]:
        return self._command_to_patterns.get(command, [])

    def set_config(self, config: EditorKeybindingsConfig) -> None:
        self._build_maps(config)


_global_editor_keybindings: EditorKeybindingsManager | None = None


def get_editor_keybindings() -> EditorKeybindingsManager:
    global _global_editor_keybindings
    if _global_editor_keybindings is None:
        _global_editor_keybindings = EditorKeybindingsManager()
    return _global_editor_keybindings


def set_editor_keybindings(manager: EditorKeybindingsManager) -> None:
    global _global_editor_keybindings
    _global_editor_keybindings = manager
