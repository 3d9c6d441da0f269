"""pi-textbuffer: In-memory multi-line text editing engine for terminal inputs."""

# Actions
from pi.textbuffer.actions import (
    Backspace,
    CreateUndoSnapshot,
    Delete,
    DeleteWordLeft,
    DeleteWordRight,
    Direction,
    Insert,
    KillLineLeft,
    KillLineRight,
    Move,
    MoveToOffset,
    Redo,
    ReplaceRange,
    SetText,
    SetViewportWidth,
    TextBufferAction,
    Undo,
    VimAction,
    VimActionType,
    VimMovement,
)

# Façade
from pi.textbuffer.buffer import TextBuffer, Viewport, ViewportSlice

# Configuration
from pi.textbuffer.config import TextBufferConfig, load_config

# External editor
from pi.textbuffer.external_editor import (
    ExternalEditorError,
    resolve_editor_command,
    run_external_editor,
)

# Keybindings
from pi.textbuffer.keybindings import (
    DEFAULT_EDITOR_KEYBINDINGS,
    EditorCommand,
    EditorKeybindingsManager,
    get_editor_keybindings,
    set_editor_keybindings,
)

# Key events
from pi.textbuffer.keys import KeyEvent, KeyPattern

# Layout
from pi.textbuffer.layout import TextChunk, VisualLayout, calculate_visual_layout, word_wrap_line

# Offsets
from pi.textbuffer.offsets import (
    calculate_initial_cursor_position,
    get_line_range_offsets,
    get_position_from_offsets,
    logical_pos_to_offset,
    offset_to_logical_pos,
)
from pi.textbuffer.operations import push_undo, replace_range_internal

# Reducer and state
from pi.textbuffer.reducer import text_buffer_reducer
from pi.textbuffer.state import BufferState, Cursor, UndoHistoryEntry

# Terminal
from pi.textbuffer.terminal import RawModeController, StdinRawMode
from pi.textbuffer.undo_stack import UndoStack

# Text utilities
from pi.textbuffer.utils import (
    char_width,
    cp_len,
    cp_slice,
    strip_unsafe_characters,
    to_code_points,
    visible_width,
)

# Vim
from pi.textbuffer.vim import VimActionHandler, handle_vim_action

# Words
from pi.textbuffer.words import (
    find_next_word_across_lines,
    find_next_word_start_in_line,
    find_prev_word_across_lines,
    find_prev_word_start_in_line,
    find_word_end_in_line,
    is_combining_mark,
    is_script_boundary,
    is_whitespace,
    is_word_char,
    is_word_char_with_combining,
    script_of,
)

__all__ = [
    # Actions
    "Backspace",
    "CreateUndoSnapshot",
    "Delete",
    "DeleteWordLeft",
    "DeleteWordRight",
    "Direction",
    "Insert",
    "KillLineLeft",
    "KillLineRight",
    "Move",
    "MoveToOffset",
    "Redo",
    "ReplaceRange",
    "SetText",
    "SetViewportWidth",
    "TextBufferAction",
    "Undo",
    "VimAction",
    "VimActionType",
    "VimMovement",
    # Façade
    "TextBuffer",
    "Viewport",
    "ViewportSlice",
    # Configuration
    "TextBufferConfig",
    "load_config",
    # External editor
    "ExternalEditorError",
    "resolve_editor_command",
    "run_external_editor",
    # Keybindings
    "DEFAULT_EDITOR_KEYBINDINGS",
    "EditorCommand",
    "EditorKeybindingsManager",
    "get_editor_keybindings",
    "set_editor_keybindings",
    "KeyEvent",
    "KeyPattern",
    # Layout
    "TextChunk",
    "VisualLayout",
    "calculate_visual_layout",
    "word_wrap_line",
    # Offsets
    "calculate_initial_cursor_position",
    "get_line_range_offsets",
    "get_position_from_offsets",
    "logical_pos_to_offset",
    "offset_to_logical_pos",
    # Reducer and state
    "push_undo",
    "replace_range_internal",
    "text_buffer_reducer",
    "BufferState",
    "Cursor",
    "UndoHistoryEntry",
    "UndoStack",
    # Terminal
    "RawModeController",
    "StdinRawMode",
    # Text utilities
    "char_width",
    "cp_len",
    "cp_slice",
    "strip_unsafe_characters",
    "to_code_points",
    "visible_width",
    # Vim
    "VimActionHandler",
    "handle_vim_action",
    # Words
    "find_next_word_across_lines",
    "find_next_word_start_in_line",
    "find_prev_word_across_lines",
    "find_prev_word_start_in_line",
    "find_word_end_in_line",
    "is_combining_mark",
    "is_script_boundary",
    "is_whitespace",
    "is_word_char",
    "is_word_char_with_combining",
    "script_of",
]
