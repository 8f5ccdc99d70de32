"""Console input records and key tokens.

Records mirror the Windows console model: a key event carries a key-down flag,
a virtual key code, and one UTF-16 code unit (``0`` when the key produces no
text). Byte-stream terminals synthesize the same records so one decoder
serves every platform.

Decoded keys use string tokens: a one-character string for text input and
upper-case names for everything else.
"""

from __future__ import annotations

from dataclasses import dataclass

BACKSPACE = "BACKSPACE"
ENTER = "ENTER"
ESC = "ESC"
LEFT = "LEFT"
RIGHT = "RIGHT"
UP = "UP"
DOWN = "DOWN"
TAB = "TAB"
HOME = "HOME"
END = "END"
DELETE = "DELETE"
SHIFT = "SHIFT"
ALT = "ALT"
UNKNOWN = "UNKNOWN"

VK_BACK = 0x08
VK_TAB = 0x09
VK_RETURN = 0x0D
VK_SHIFT = 0x10
VK_MENU = 0x12
VK_ESCAPE = 0x1B
VK_END = 0x23
VK_HOME = 0x24
VK_LEFT = 0x25
VK_UP = 0x26
VK_RIGHT = 0x27
VK_DOWN = 0x28
VK_DELETE = 0x2E

VIRTUAL_KEY_TOKENS: dict[int, str] = {
    VK_LEFT: LEFT,
    VK_RIGHT: RIGHT,
    VK_UP: UP,
    VK_DOWN: DOWN,
    VK_RETURN: ENTER,
    VK_ESCAPE: ESC,
    VK_BACK: BACKSPACE,
    VK_TAB: TAB,
    VK_HOME: HOME,
    VK_END: END,
    VK_DELETE: DELETE,
    VK_SHIFT: SHIFT,
    VK_MENU: ALT,
}


@dataclass(frozen=True)
class KeyEvent:
    key_down: bool
    virtual_key_code: int
    unicode_char: int = 0


@dataclass(frozen=True)
class OtherEvent:
    """Non-keyboard record such as mouse, focus, or buffer resize."""

    kind: str


def key_from_virtual_code(code: int) -> str:
    return VIRTUAL_KEY_TOKENS.get(code, UNKNOWN)


__all__ = [
    "ALT",
    "BACKSPACE",
    "DELETE",
    "DOWN",
    "END",
    "ENTER",
    "ESC",
    "HOME",
    "KeyEvent",
    "LEFT",
    "OtherEvent",
    "RIGHT",
    "SHIFT",
    "TAB",
    "UNKNOWN",
    "UP",
    "VIRTUAL_KEY_TOKENS",
    "key_from_virtual_code",
]
