"""Terminal control helpers for the inline picker.

Owns cbreak-mode lifecycle and the small escape-sequence vocabulary the
renderer needs: styled writes, clearing the last N lines, relative cursor
moves, and cursor visibility. Output goes to stderr so stdout stays free for
the command handed back to the shell.
"""

from __future__ import annotations

import contextlib
import os
import shutil
import sys

from pygments.console import ansiformat, colorize

if sys.platform != "win32":
    import termios
    import tty

DEFAULT_COLUMNS = 80


class InlineTerminal:
    """Write-side terminal capability used by :class:`Renderer`."""

    def __init__(self, stdin_fd: int = 0, out_fd: int = 2, no_color: bool = False) -> None:
        self.stdin_fd = stdin_fd
        self.out_fd = out_fd
        self.no_color = no_color

    def write(self, text: str) -> None:
        """Write ``text`` as UTF-8 straight to the output descriptor."""
        if text:
            os.write(self.out_fd, text.encode("utf-8"))

    def write_line(self, text: str) -> None:
        self.write(text + "\r\n")

    def clear_last_lines(self, count: int) -> None:
        """Erase the current line and the ``count`` lines above it.

        Leaves the cursor in column 0 of the topmost cleared line.
        """
        if count <= 0:
            return
        self.write("\r\x1b[2K" + "\x1b[1A\x1b[2K" * count)

    def move_cursor(self, dx: int, dy: int) -> None:
        """Move the cursor by a relative offset; positive dy goes down."""
        parts: list[str] = []
        if dy < 0:
            parts.append(f"\x1b[{-dy}A")
        elif dy > 0:
            parts.append(f"\x1b[{dy}B")
        if dx < 0:
            parts.append(f"\x1b[{-dx}D")
        elif dx > 0:
            parts.append(f"\x1b[{dx}C")
        self.write("".join(parts))

    def show_cursor(self) -> None:
        self.write("\x1b[?25h")

    def hide_cursor(self) -> None:
        self.write("\x1b[?25l")

    def width(self) -> int:
        """Column count of the attached terminal, or the shutil fallback."""
        try:
            return os.get_terminal_size(self.out_fd).columns
        except OSError:
            return shutil.get_terminal_size((DEFAULT_COLUMNS, 24)).columns

    def style(self, text: str, color: str | None = None, bold: bool = False) -> str:
        """Wrap ``text`` in ANSI styling using pygments' named console colors."""
        if self.no_color or not text:
            return text
        if color is None:
            return colorize("bold", text) if bold else text
        return ansiformat(f"*{color}*" if bold else color, text)

    def enter_cbreak_mode(self) -> None:
        if sys.platform == "win32":
            from ..input.windows import enable_virtual_terminal_output

            self._saved_console_mode = enable_virtual_terminal_output()
            return
        self._saved_tty_state = termios.tcgetattr(self.stdin_fd)
        tty.setcbreak(self.stdin_fd, termios.TCSAFLUSH)

    def exit_cbreak_mode(self) -> None:
        self.show_cursor()
        if sys.platform == "win32":
            from ..input.windows import restore_output_mode

            restore_output_mode(self._saved_console_mode)
            return
        termios.tcsetattr(self.stdin_fd, termios.TCSAFLUSH, self._saved_tty_state)

    @contextlib.contextmanager
    def cbreak_mode(self):
        """Context manager that keeps keys unbuffered while signals stay live."""
        self.enter_cbreak_mode()
        try:
            yield
        finally:
            self.exit_cbreak_mode()


__all__ = ["DEFAULT_COLUMNS", "InlineTerminal"]
