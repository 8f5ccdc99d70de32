"""Inline fuzzy picker fed asynchronously through a message channel."""

from .dialogue import CANCELLED, SELECTED, SHUTDOWN, Dialogue, DialogueResult
from .matcher import Prediction, fuzzy_score, top_predictions
from .messages import (
    Finish,
    ForceShutdown,
    ItemsFound,
    MessageChannel,
    MessageSender,
    ProgressUpdate,
    install_interrupt_handler,
)
from .renderer import Renderer
from .selection import Selection, track_selection
from .terminal import InlineTerminal

__all__ = [
    "CANCELLED",
    "SELECTED",
    "SHUTDOWN",
    "Dialogue",
    "DialogueResult",
    "Finish",
    "ForceShutdown",
    "InlineTerminal",
    "ItemsFound",
    "MessageChannel",
    "MessageSender",
    "Prediction",
    "ProgressUpdate",
    "Renderer",
    "Selection",
    "fuzzy_score",
    "install_interrupt_handler",
    "top_predictions",
    "track_selection",
]
