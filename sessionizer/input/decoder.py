"""Non-blocking key decoding over console input records."""

from __future__ import annotations

from .events import BACKSPACE, ENTER, ESC, KeyEvent, key_from_virtual_code
from ..errors import InvalidInputDataError

HIGH_SURROGATES = range(0xD800, 0xDC00)
LOW_SURROGATES = range(0xDC00, 0xE000)

_CONTROL_TOKENS = {
    "\r": ENTER,
    "\x08": BACKSPACE,
    "\x1b": ESC,
}


class KeyDecoder:
    """Turn records from an event source into key tokens.

    ``source`` provides ``pending_events() -> int`` and ``read_event()``.
    :meth:`read_key` returns ``""`` whenever no key press is available, so the
    caller never blocks.
    """

    def __init__(self, source) -> None:
        self.source = source

    def _read_key_event(self) -> KeyEvent | None:
        """Read one record, dropping key releases and non-key records."""
        event = self.source.read_event()
        if not isinstance(event, KeyEvent) or not event.key_down:
            return None
        return event

    def read_key(self) -> str:
        if self.source.pending_events() == 0:
            return ""

        event = self._read_key_event()
        if event is None:
            return ""

        unit = event.unicode_char
        if unit == 0:
            return key_from_virtual_code(event.virtual_key_code)

        if unit in LOW_SURROGATES:
            raise InvalidInputDataError(f"Read invalid utf16 {unit:#06x}: unpaired low surrogate")

        if unit in HIGH_SURROGATES:
            return self._read_surrogate_pair(unit)

        ch = chr(unit)
        return _CONTROL_TOKENS.get(ch, ch)

    def _read_surrogate_pair(self, high: int) -> str:
        if self.source.pending_events() == 0:
            raise InvalidInputDataError(f"Read invalid utf16 {high:#06x}: missing second surrogate")

        follow_up = self._read_key_event()
        if follow_up is None:
            raise InvalidInputDataError("Expected a second utf16 pair element")

        low = follow_up.unicode_char
        if low not in LOW_SURROGATES:
            raise InvalidInputDataError(f"Read invalid surrogate pair ({high:#06x}, {low:#06x})")
        return chr(0x10000 + ((high - 0xD800) << 10) + (low - 0xDC00))


__all__ = ["KeyDecoder"]
