"""Decoded key events and the patterns bindings match them with.

Raw terminal byte sequences are decoded by the host; the buffer only sees
:class:`KeyEvent` values.
"""

from __future__ import annotations

from dataclasses import dataclass

# ---------------------------------------------------------------------------
# Key events
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class KeyEvent:
    """One decoded key press.

    ``name`` identifies non-printable keys (``"left"``, ``"return"``,
    ``"backspace"`` ...) or the letter of a control chord; ``sequence`` is
    the raw text the key produced, or the whole payload of a paste.
    """

    name: str = ""
    ctrl: bool = False
    meta: bool = False
    shift: bool = False
    paste: bool = False
    sequence: str = ""


def key_id(key: KeyEvent) -> str:
    """Render *key* as a ``"ctrl+meta+name"`` style id, for logging."""
    parts = []
    if key.ctrl:
        parts.append("ctrl")
    if key.meta:
        parts.append("meta")
    if key.shift:
        parts.append("shift")
    parts.append(key.name or repr(key.sequence))
    return "+".join(parts)


# ---------------------------------------------------------------------------
# Key patterns
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class KeyPattern:
    """Predicate over a :class:`KeyEvent`.

    ``name`` and ``sequence`` must match when given. ``ctrl``/``meta`` of
    ``None`` accept either state. ``ctrl_or_meta`` requires at least one of
    the two modifiers.
    """

    name: str | None = None
    sequence: str | None = None
    ctrl: bool | None = None
    meta: bool | None = None
    ctrl_or_meta: bool = False

    def matches(self, key: KeyEvent) -> bool:
        if self.name is not None and key.name != self.name:
            return False
        if self.sequence is not None and key.sequence != self.sequence:
            return False
        if self.ctrl is not None and key.ctrl != self.ctrl:
            return False
        if self.meta is not None and key.meta != self.meta:
            return False
        if self.ctrl_or_meta and not (key.ctrl or key.meta):
            return False
        return True


def plain(name: str) -> KeyPattern:
    """*name* with neither ctrl nor meta held."""
    return KeyPattern(name=name, ctrl=False, meta=False)


def ctrl(name: str) -> KeyPattern:
    return KeyPattern(name=name, ctrl=True)


def meta(name: str) -> KeyPattern:
    return KeyPattern(name=name, meta=True)


def ctrl_or_meta(name: str) -> KeyPattern:
    return KeyPattern(name=name, ctrl_or_meta=True)


def any_modifiers(name: str) -> KeyPattern:
    return KeyPattern(name=name)


def raw(sequence: str, *, with_ctrl_or_meta: bool = False) -> KeyPattern:
    """Match on the raw input sequence rather than the key name."""
    return KeyPattern(sequence=sequence, ctrl_or_meta=with_ctrl_or_meta)
