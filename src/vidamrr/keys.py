from __future__ import annotations

from .session import KeyIntent, KeyKind

_NAMED_KEYS = {
    "up": KeyKind.UP,
    "down": KeyKind.DOWN,
    "enter": KeyKind.SUBMIT,
    "escape": KeyKind.CANCEL,
    "backspace": KeyKind.BACKSPACE,
    "tab": KeyKind.TAB,
    "ctrl+c": KeyKind.INTERRUPT,
}


def key_intent(key: str, character: str | None) -> KeyIntent | None:
    """Map a Textual key name and character to a session intent."""
    kind = _NAMED_KEYS.get(key)
    if kind is not None:
        return KeyIntent(kind)
    if character and len(character) == 1 and character.isprintable():
        return KeyIntent.printable(character)
    return None
