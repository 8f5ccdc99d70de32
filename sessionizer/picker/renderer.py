"""Inline picker renderer with cursor-position bookkeeping.

The renderer owns a block of lines directly below where the picker started.
It remembers how many lines it wrote and where it left the cursor, so each
frame can erase exactly its previous output and position the caret with one
relative move. Bookkeeping only advances after a write succeeds; a failing
write raises before counters change.
"""

from __future__ import annotations

from dataclasses import dataclass

from .text import display_width, printable, truncate_with_ellipsis

PADDING_LEFT = 3
INPUT_WIDTH_PADDING = 5
SELECTED_MARKER = "❯"
PROMPT_MARKER = "?"
SUCCESS_MARKER = "✔"
PROGRESS_MARKER = "🕑"


@dataclass(frozen=True)
class RenderPosition:
    """Cursor cell relative to the top-left of the picker block."""

    x: int = 0
    y: int = 0

    def with_x(self, x: int) -> RenderPosition:
        return RenderPosition(x=x, y=self.y)


ORIGIN = RenderPosition()


class Renderer:
    """Draw picker frames on a terminal and track the resulting cursor."""

    def __init__(self, terminal) -> None:
        self.terminal = terminal
        self.lines_written = 0
        self.position = ORIGIN

    def width(self) -> int:
        """Terminal width in cells, never below one."""
        return max(1, self.terminal.width())

    def padding(self) -> int:
        """Left gutter holding the markers; dropped when it would fill the row."""
        return PADDING_LEFT if self.width() > PADDING_LEFT else 0

    def content_width(self) -> int:
        """Cells left for text after the gutter."""
        return max(1, self.width() - self.padding())

    def max_input_width(self) -> int:
        """Cells available for prompt plus query before input is refused."""
        return max(1, self.width() - INPUT_WIDTH_PADDING)

    def end_position(self) -> RenderPosition:
        return RenderPosition(x=0, y=self.lines_written)

    def move_cursor_to(self, target: RenderPosition) -> None:
        """Move the terminal cursor to ``target`` with one relative jump."""
        dx = target.x - self.position.x
        dy = target.y - self.position.y
        if dx or dy:
            self.terminal.move_cursor(dx, dy)
        self.position = target

    def clear(self) -> None:
        """Erase every line of the previous frame and reset to origin."""
        if self.lines_written:
            self.move_cursor_to(self.end_position())
            self.terminal.clear_last_lines(self.lines_written)
        self.lines_written = 0
        self.position = ORIGIN

    def _write(self, text: str, plain_width: int) -> None:
        self.terminal.write(text)
        self.position = self.position.with_x(self.position.x + plain_width)

    def _finish_line(self, text: str) -> None:
        self.terminal.write_line(text)
        self.lines_written += 1
        self.position = RenderPosition(x=0, y=self.position.y + 1)

    def _fit(self, text: str) -> str:
        return truncate_with_ellipsis(printable(text), self.content_width())

    def write_line(self, text: str) -> None:
        self._finish_line(text)

    def write_progress(self, progress: str) -> None:
        """Write a one-line status with a clock marker, truncated to fit."""
        shown = self._fit(progress)
        if not self.padding():
            self._finish_line(shown)
            return
        prefix = self.terminal.style(PROGRESS_MARKER, color="yellow") + " " * (PADDING_LEFT - 2)
        self._finish_line(prefix + shown)

    def write_prompt(self, label: str) -> RenderPosition:
        """Write the prompt without ending the line.

        Returns the position where query text begins.
        """
        label = truncate_with_ellipsis(printable(label), self.content_width() - 1)
        if not self.padding():
            self._write(self.terminal.style(label, bold=True), display_width(label))
            return self.position
        marker = self.terminal.style(PROMPT_MARKER, color="yellow", bold=True)
        text = " " * (PADDING_LEFT - 1) + label
        self._write(marker + self.terminal.style(text, bold=True), PADDING_LEFT + display_width(label))
        return self.position

    def write_item(self, text: str, selected: bool) -> None:
        shown = self._fit(text)
        if selected:
            shown = self.terminal.style(shown, color="cyan", bold=True)
        if not self.padding():
            self._finish_line(shown)
        elif selected:
            marker = self.terminal.style(SELECTED_MARKER, color="green", bold=True)
            self._finish_line(marker + " " * (PADDING_LEFT - 1) + shown)
        else:
            self._finish_line(" " * PADDING_LEFT + shown)

    def write_success(self, label: str, item: object) -> None:
        marker = self.terminal.style(SUCCESS_MARKER, color="yellow", bold=True)
        text = " " * (PADDING_LEFT - 1) + printable(label + str(item))
        self._finish_line(marker + self.terminal.style(text, bold=True))


__all__ = [
    "INPUT_WIDTH_PADDING",
    "ORIGIN",
    "PADDING_LEFT",
    "RenderPosition",
    "Renderer",
]
