"""Inbound message protocol and channel for the picker.

Producers own a :class:`MessageSender`; the dialogue owns the
:class:`MessageChannel` and drains it without blocking. Items cross threads
only inside messages, so the dialogue's item store needs no locking.
"""

from __future__ import annotations

import logging
import signal
import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from queue import Empty, SimpleQueue

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ItemsFound:
    """A batch of new candidates to append to the item store."""

    items: tuple[object, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "items", tuple(self.items))


@dataclass(frozen=True)
class ProgressUpdate:
    """Replace the status line shown above the prompt."""

    text: str


@dataclass(frozen=True)
class Finish:
    """Producer is done; clears the status line."""


@dataclass(frozen=True)
class ForceShutdown:
    """Abort the picker immediately, e.g. after an interrupt signal."""


PickerMessage = ItemsFound | ProgressUpdate | Finish | ForceShutdown


class MessageSender:
    """Sending end handed to one producer; close it when the producer is done."""

    def __init__(self, channel: MessageChannel) -> None:
        self._channel = channel
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def send(self, message: PickerMessage) -> None:
        if self._closed:
            raise RuntimeError("send on a closed message sender")
        self._channel._queue.put(message)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._channel._sender_closed()

    def __enter__(self) -> MessageSender:
        return self

    def __exit__(self, *_exc_info) -> None:
        self.close()


class MessageChannel:
    """Multi-producer, single-consumer FIFO with a non-blocking drain.

    The channel counts as disconnected once every sender it handed out has
    been closed and nothing is left queued.
    """

    def __init__(self) -> None:
        self._queue: SimpleQueue[PickerMessage] = SimpleQueue()
        self._lock = threading.Lock()
        self._open_senders = 0
        self._had_senders = False

    def sender(self) -> MessageSender:
        with self._lock:
            self._open_senders += 1
            self._had_senders = True
        return MessageSender(self)

    def _sender_closed(self) -> None:
        with self._lock:
            self._open_senders -= 1

    def send(self, message: PickerMessage) -> None:
        """Enqueue from the consumer side, e.g. to seed messages in tests."""
        self._queue.put(message)

    def drain(self) -> list[PickerMessage]:
        """Return every message queued right now; never blocks."""
        out: list[PickerMessage] = []
        while True:
            try:
                out.append(self._queue.get_nowait())
            except Empty:
                break
        return out

    @property
    def disconnected(self) -> bool:
        with self._lock:
            all_closed = self._had_senders and self._open_senders == 0
        return all_closed and self._queue.empty()


def install_interrupt_handler(sender: MessageSender) -> Callable[[], None]:
    """Turn SIGINT into a ``ForceShutdown`` message.

    Returns a callable restoring the previous handler. Must be called from the
    main thread.

    The handler can interrupt the main thread anywhere, including inside
    ``drain()``, so it only touches the reentrant ``SimpleQueue`` and never
    logs or takes a lock.
    """

    def _handle_interrupt(_signum, _frame) -> None:
        if not sender.closed:
            sender.send(ForceShutdown())

    previous = signal.signal(signal.SIGINT, _handle_interrupt)
    logger.debug("SIGINT now requests picker shutdown")

    def restore() -> None:
        signal.signal(signal.SIGINT, previous)
        logger.debug("previous SIGINT handler restored")

    return restore


__all__ = [
    "Finish",
    "ForceShutdown",
    "ItemsFound",
    "MessageChannel",
    "MessageSender",
    "PickerMessage",
    "ProgressUpdate",
    "install_interrupt_handler",
]
