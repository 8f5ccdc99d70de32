"""Windows console input via ``ReadConsoleInputW``.

Only usable on Windows; the kernel32 handle is resolved lazily so importing
this module elsewhere stays harmless.
"""

from __future__ import annotations

import ctypes
from ctypes import wintypes

from .events import KeyEvent, OtherEvent

STD_INPUT_HANDLE = -10
STD_ERROR_HANDLE = -12
INVALID_HANDLE_VALUE = ctypes.c_void_p(-1).value
ENABLE_VIRTUAL_TERMINAL_PROCESSING = 0x0004

KEY_EVENT = 0x0001
_EVENT_KINDS = {
    0x0002: "mouse",
    0x0004: "resize",
    0x0008: "menu",
    0x0010: "focus",
}


class KEY_EVENT_RECORD(ctypes.Structure):
    # uChar is a WCHAR/CHAR union; read it as the raw UTF-16 code unit.
    _fields_ = [
        ("bKeyDown", wintypes.BOOL),
        ("wRepeatCount", wintypes.WORD),
        ("wVirtualKeyCode", wintypes.WORD),
        ("wVirtualScanCode", wintypes.WORD),
        ("uChar", wintypes.WORD),
        ("dwControlKeyState", wintypes.DWORD),
    ]


class _INPUT_EVENT(ctypes.Union):
    _fields_ = [
        ("KeyEvent", KEY_EVENT_RECORD),
        ("_raw", ctypes.c_byte * 16),
    ]


class INPUT_RECORD(ctypes.Structure):
    _fields_ = [
        ("EventType", wintypes.WORD),
        ("Event", _INPUT_EVENT),
    ]


def _kernel32():
    return ctypes.WinDLL("kernel32", use_last_error=True)


def _std_handle(kernel32, which: int):
    kernel32.GetStdHandle.restype = wintypes.HANDLE
    handle = kernel32.GetStdHandle(which)
    if handle is None or handle == INVALID_HANDLE_VALUE:
        raise ctypes.WinError(ctypes.get_last_error())
    return handle


class WindowsConsoleInput:
    """Event source over the process console input buffer."""

    def __init__(self) -> None:
        self._kernel32 = _kernel32()
        self._handle = _std_handle(self._kernel32, STD_INPUT_HANDLE)

    def pending_events(self) -> int:
        count = wintypes.DWORD(0)
        if not self._kernel32.GetNumberOfConsoleInputEvents(self._handle, ctypes.byref(count)):
            raise ctypes.WinError(ctypes.get_last_error())
        return int(count.value)

    def read_event(self) -> KeyEvent | OtherEvent:
        record = INPUT_RECORD()
        read = wintypes.DWORD(0)
        if not self._kernel32.ReadConsoleInputW(self._handle, ctypes.byref(record), 1, ctypes.byref(read)):
            raise ctypes.WinError(ctypes.get_last_error())
        if read.value == 0:
            raise OSError("ReadConsoleInput returned no events, instead of waiting for an event")
        if record.EventType != KEY_EVENT:
            return OtherEvent(_EVENT_KINDS.get(record.EventType, "unknown"))
        key = record.Event.KeyEvent
        return KeyEvent(
            key_down=bool(key.bKeyDown),
            virtual_key_code=int(key.wVirtualKeyCode),
            unicode_char=int(key.uChar),
        )


def enable_virtual_terminal_output() -> int:
    """Turn on ANSI escape processing for stderr; returns the previous mode."""
    kernel32 = _kernel32()
    handle = _std_handle(kernel32, STD_ERROR_HANDLE)
    mode = wintypes.DWORD(0)
    if not kernel32.GetConsoleMode(handle, ctypes.byref(mode)):
        raise ctypes.WinError(ctypes.get_last_error())
    previous = int(mode.value)
    if not kernel32.SetConsoleMode(handle, previous | ENABLE_VIRTUAL_TERMINAL_PROCESSING):
        raise ctypes.WinError(ctypes.get_last_error())
    return previous


def restore_output_mode(mode: int) -> None:
    kernel32 = _kernel32()
    handle = _std_handle(kernel32, STD_ERROR_HANDLE)
    if not kernel32.SetConsoleMode(handle, wintypes.DWORD(mode)):
        raise ctypes.WinError(ctypes.get_last_error())


__all__ = [
    "WindowsConsoleInput",
    "enable_virtual_terminal_output",
    "restore_output_mode",
]
