"""Interactive fuzzy picker: state machine and event loop.

One ``interact()`` call owns the item store, the query, the ranked
predictions and the selection. Each frame drains inbound messages, rescores
when needed, repaints when anything visible changed, then polls for a key
while keeping an eye on the channel. The only suspension point is the idle
sleep between polls.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterable
from dataclasses import dataclass

from ..input.events import BACKSPACE, DOWN, ENTER, ESC, LEFT, RIGHT, UP
from .matcher import DEFAULT_MAX_PREDICTIONS, Prediction, clamp_max_predictions, same_items, top_predictions
from .messages import Finish, ForceShutdown, ItemsFound, MessageChannel, ProgressUpdate
from .renderer import RenderPosition, Renderer
from .selection import Selection, step_selection, track_selection
from .text import display_width

logger = logging.getLogger(__name__)

SELECTED = "selected"
CANCELLED = "cancelled"
SHUTDOWN = "shutdown"

DEFAULT_POLL_INTERVAL_SECONDS = 0.01


@dataclass(frozen=True)
class DialogueResult:
    """Outcome of :meth:`Dialogue.interact`.

    ``status`` is ``"selected"`` (``item`` holds the choice), ``"cancelled"``
    (user pressed Escape) or ``"shutdown"`` (a ``ForceShutdown`` arrived).
    """

    status: str
    item: object | None = None

    @property
    def is_selected(self) -> bool:
        return self.status == SELECTED


@dataclass
class QueryState:
    """Query text and caret offset, counted in characters."""

    text: str = ""
    cursor: int = 0

    def insert(self, ch: str) -> None:
        self.text = self.text[: self.cursor] + ch + self.text[self.cursor :]
        self.cursor += 1

    def delete_before_cursor(self) -> bool:
        if self.cursor <= 0:
            return False
        self.text = self.text[: self.cursor - 1] + self.text[self.cursor :]
        self.cursor -= 1
        return True

    def move(self, delta: int) -> None:
        self.cursor = max(0, min(len(self.text), self.cursor + delta))


class Dialogue:
    """Fuzzy picker fed by a :class:`MessageChannel`.

    ``terminal`` is the write-side capability used by :class:`Renderer`;
    ``keys`` exposes ``read_key() -> str`` returning ``""`` when idle.
    """

    def __init__(
        self,
        receiver: MessageChannel,
        *,
        terminal,
        keys,
        max_predictions: int = DEFAULT_MAX_PREDICTIONS,
        poll_interval: float = DEFAULT_POLL_INTERVAL_SECONDS,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.receiver = receiver
        self.terminal = terminal
        self.keys = keys
        self.max_predictions = clamp_max_predictions(max_predictions)
        self.poll_interval = max(0.0, poll_interval)
        self.sleep = sleep
        self.items: list[object] = []
        self.progress: str | None = None
        self.label = ""
        self._receiver_open = True
        self._items_changed = False
        self._shutdown_requested = False

    def prompt(self, label: str) -> Dialogue:
        self.label = label
        return self

    def add_items(self, items: Iterable[object]) -> None:
        self.items.extend(items)
        self._items_changed = True

    def prompt_text(self) -> str:
        return f"{self.label}: "

    def handle_received_messages(self) -> bool:
        """Apply every queued message; return whether anything changed.

        ``ForceShutdown`` stops processing at once; messages drained after it are dropped.
        A disconnected channel counts as a final ``Finish``.
        """
        if not self._receiver_open:
            return False

        changed = False
        for message in self.receiver.drain():
            if isinstance(message, ItemsFound):
                self.items.extend(message.items)
                self._items_changed = True
                changed = True
            elif isinstance(message, ProgressUpdate):
                self.progress = message.text
                changed = True
            elif isinstance(message, Finish):
                self.progress = None
                changed = True
            elif isinstance(message, ForceShutdown):
                self._shutdown_requested = True
                return True

        if self.receiver.disconnected:
            logger.debug("message channel disconnected; no more items expected")
            self._receiver_open = False
            self.progress = None
            changed = True
        return changed

    def interact(self) -> DialogueResult:
        """Run the picker until the user selects, cancels, or it is shut down."""
        renderer = Renderer(self.terminal)
        query = QueryState()
        predictions: list[Prediction] = []
        selected: Selection | None = None
        drawn_frame: tuple | None = None
        drawn_predictions: list[Prediction] = []
        caret = renderer.end_position()
        query_changed = True
        self._items_changed = True
        logger.info("picker started with %d seeded items", len(self.items))

        while True:
            self.handle_received_messages()
            if self._shutdown_requested:
                renderer.clear()
                logger.info("picker aborted by forced shutdown")
                return DialogueResult(status=SHUTDOWN)

            if query_changed or self._items_changed:
                predictions = top_predictions(query.text, self.items, self.max_predictions)
                selected = track_selection(selected, predictions)
                query_changed = False
                self._items_changed = False

            frame = (
                selected.index if selected is not None else None,
                self.progress,
                query.text,
                query.cursor,
                self.label,
            )
            if frame != drawn_frame or not same_items(predictions, drawn_predictions):
                caret = self._repaint(renderer, query, predictions, selected)
                drawn_frame = frame
                drawn_predictions = predictions

            key = self._wait_for_key(renderer, caret)
            if not key:
                continue

            if len(key) == 1:
                if key.isprintable() and self._fits_input(renderer, query, key):
                    query.insert(key)
                    query_changed = True
            elif key == BACKSPACE:
                query_changed = query.delete_before_cursor()
            elif key == LEFT:
                query.move(-1)
            elif key == RIGHT:
                query.move(1)
            elif key == UP:
                selected = step_selection(selected, predictions, -1)
            elif key == DOWN:
                selected = step_selection(selected, predictions, 1)
            elif key == ENTER:
                if selected is not None:
                    renderer.clear()
                    renderer.write_success(self.prompt_text(), selected.item)
                    logger.info("picker selected %s", selected.item)
                    return DialogueResult(status=SELECTED, item=selected.item)
            elif key == ESC:
                renderer.clear()
                logger.info("picker cancelled")
                return DialogueResult(status=CANCELLED)

    def _fits_input(self, renderer: Renderer, query: QueryState, ch: str) -> bool:
        used = display_width(self.prompt_text()) + display_width(query.text) + display_width(ch)
        return used <= renderer.max_input_width()

    def _repaint(
        self,
        renderer: Renderer,
        query: QueryState,
        predictions: list[Prediction],
        selected: Selection | None,
    ) -> RenderPosition:
        """Redraw the whole block and return where the caret belongs."""
        renderer.clear()
        if self.progress is not None:
            renderer.write_progress(self.progress)
        input_start = renderer.write_prompt(self.prompt_text())
        renderer.write_line(query.text)
        for idx, prediction in enumerate(predictions):
            is_selected = selected is not None and selected.index == idx
            renderer.write_item(str(prediction.item), is_selected)
        return input_start.with_x(input_start.x + display_width(query.text[: query.cursor]))

    def _wait_for_key(self, renderer: Renderer, caret: RenderPosition) -> str:
        """Poll keys and messages until one of them needs attention.

        Returns the key, or ``""`` when new messages require another frame.
        The cursor is parked at the end of the block again before returning.
        """
        renderer.move_cursor_to(caret)
        self.terminal.show_cursor()
        while True:
            key = self.keys.read_key()
            if key or self.handle_received_messages():
                break
            self.sleep(self.poll_interval)
        self.terminal.hide_cursor()
        renderer.move_cursor_to(renderer.end_position())
        return key


__all__ = [
    "CANCELLED",
    "DEFAULT_POLL_INTERVAL_SECONDS",
    "Dialogue",
    "DialogueResult",
    "QueryState",
    "SELECTED",
    "SHUTDOWN",
]
