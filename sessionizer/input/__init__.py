"""Input-layer public API: console records, the key decoder, and sources.

Platform sources are imported lazily by :func:`open_key_decoder`; the
Windows source depends on kernel32 and must not load elsewhere.
"""

from __future__ import annotations

import sys

from .decoder import KeyDecoder
from .events import KeyEvent, OtherEvent, key_from_virtual_code


def open_key_decoder(stdin_fd: int = 0) -> KeyDecoder:
    """Build a decoder over the console input source for this platform."""
    if sys.platform == "win32":
        from .windows import WindowsConsoleInput

        return KeyDecoder(WindowsConsoleInput())

    from .posix import PosixConsoleInput

    return KeyDecoder(PosixConsoleInput(stdin_fd))


__all__ = [
    "KeyDecoder",
    "KeyEvent",
    "OtherEvent",
    "key_from_virtual_code",
    "open_key_decoder",
]
