"""Console input records synthesized from a POSIX terminal byte stream.

Reads raw bytes from a cbreak-mode tty and translates them into the same
key records a Windows console reports. ESC sequences become virtual key
codes; text is decoded as strict UTF-8 and re-encoded into UTF-16 code
units, one record per unit, so astral characters arrive as surrogate pairs.
"""

from __future__ import annotations

import os
import select

from .events import (
    VK_BACK,
    VK_DELETE,
    VK_DOWN,
    VK_END,
    VK_ESCAPE,
    VK_HOME,
    VK_LEFT,
    VK_MENU,
    VK_RETURN,
    VK_RIGHT,
    VK_TAB,
    VK_UP,
    KeyEvent,
    OtherEvent,
)
from ..errors import InvalidInputDataError

ESC_SEQUENCE_TIMEOUT_MS = 25
MAX_SEQUENCE_BYTES = 16

_FINAL_BYTE_CODES = {
    b"A": VK_UP,
    b"B": VK_DOWN,
    b"C": VK_RIGHT,
    b"D": VK_LEFT,
    b"H": VK_HOME,
    b"F": VK_END,
}
_TILDE_PARAM_CODES = {
    "1": VK_HOME,
    "7": VK_HOME,
    "4": VK_END,
    "8": VK_END,
    "3": VK_DELETE,
}


def _press(code: int, unit: int = 0) -> KeyEvent:
    return KeyEvent(key_down=True, virtual_key_code=code, unicode_char=unit)


def _utf8_sequence_length(lead: int) -> int:
    if lead < 0x80:
        return 1
    if 0xC2 <= lead <= 0xDF:
        return 2
    if 0xE0 <= lead <= 0xEF:
        return 3
    if 0xF0 <= lead <= 0xF4:
        return 4
    raise InvalidInputDataError(f"Read invalid utf8 lead byte {lead:#04x}")


def utf16_units(ch: str) -> list[int]:
    """Encode one character as UTF-16 code units."""
    data = ch.encode("utf-16-le", errors="surrogatepass")
    return [int.from_bytes(data[i : i + 2], "little") for i in range(0, len(data), 2)]


class PosixConsoleInput:
    """Event source over a tty file descriptor."""

    def __init__(self, fd: int, esc_timeout_ms: int = ESC_SEQUENCE_TIMEOUT_MS) -> None:
        self.fd = fd
        self.esc_timeout_ms = esc_timeout_ms
        self._events: list[KeyEvent | OtherEvent] = []
        self._pending_bytes: list[bytes] = []

    def _fd_ready(self, timeout_ms: int) -> bool:
        ready, _, _ = select.select([self.fd], [], [], max(0.0, timeout_ms / 1000.0))
        return bool(ready)

    def _read_ready_byte(self, timeout_ms: int) -> bytes | None:
        if self._pending_bytes:
            return self._pending_bytes.pop(0)
        if not self._fd_ready(timeout_ms):
            return None
        ch = os.read(self.fd, 1)
        if not ch:
            return None
        return ch

    def pending_events(self) -> int:
        if self._events:
            return len(self._events)
        if self._pending_bytes:
            return 1
        return 1 if self._fd_ready(0) else 0

    def read_event(self) -> KeyEvent | OtherEvent:
        if not self._events:
            self._events.extend(self._translate_next())
        return self._events.pop(0)

    def _translate_next(self) -> list[KeyEvent | OtherEvent]:
        ch = self._read_ready_byte(0)
        if ch is None:
            return [OtherEvent("eof")]
        if ch in {b"\x7f", b"\x08"}:
            return [_press(VK_BACK, 0x08)]
        if ch in {b"\r", b"\n"}:
            return [_press(VK_RETURN, 0x0D)]
        if ch == b"\t":
            return [_press(VK_TAB)]
        if ch == b"\x1b":
            return [self._translate_escape()]
        return [_press(0, unit) for unit in utf16_units(self._decode_utf8(ch))]

    def _decode_utf8(self, lead: bytes) -> str:
        needed = _utf8_sequence_length(lead[0])
        data = bytearray(lead)
        while len(data) < needed:
            nxt = self._read_ready_byte(self.esc_timeout_ms)
            if nxt is None:
                raise InvalidInputDataError(f"Read truncated utf8 sequence {bytes(data)!r}")
            data.extend(nxt)
        try:
            return bytes(data).decode("utf-8")
        except UnicodeDecodeError as exc:
            raise InvalidInputDataError(f"Read invalid utf8 sequence {bytes(data)!r}") from exc

    def _translate_escape(self) -> KeyEvent:
        seq = self._read_ready_byte(self.esc_timeout_ms)
        if seq is None:
            return _press(VK_ESCAPE, 0x1B)
        if seq == b"O":
            final = self._read_ready_byte(self.esc_timeout_ms)
            if final is None:
                return _press(VK_ESCAPE, 0x1B)
            return _press(_FINAL_BYTE_CODES.get(final, 0))
        if seq != b"[":
            # Meta-prefixed key: report Alt, then let the byte decode on its own.
            self._pending_bytes.append(seq)
            return _press(VK_MENU)

        params = bytearray()
        while len(params) < MAX_SEQUENCE_BYTES:
            part = self._read_ready_byte(self.esc_timeout_ms)
            if part is None:
                return _press(VK_ESCAPE, 0x1B)
            if 0x40 <= part[0] <= 0x7E:
                return self._csi_event(params.decode("ascii", errors="replace"), part)
            params.extend(part)
        return _press(0)

    @staticmethod
    def _csi_event(params: str, final: bytes) -> KeyEvent:
        if final == b"~":
            first = params.split(";", 1)[0]
            return _press(_TILDE_PARAM_CODES.get(first, 0))
        return _press(_FINAL_BYTE_CODES.get(final, 0))


__all__ = ["ESC_SEQUENCE_TIMEOUT_MS", "PosixConsoleInput", "utf16_units"]
