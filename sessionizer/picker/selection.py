"""Selection tracking across prediction list updates."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from .matcher import Prediction


@dataclass(frozen=True)
class Selection:
    """Highlighted prediction: its row ``index`` and the ``item`` shown there."""

    index: int
    item: object


def track_selection(previous: Selection | None, predictions: Sequence[Prediction]) -> Selection | None:
    """Map ``previous`` onto a freshly ranked list.

    Prefers the same item, then the same row, then the first row. Returns
    ``None`` only when ``predictions`` is empty.
    """
    if previous is not None:
        for idx, prediction in enumerate(predictions):
            if prediction.item == previous.item:
                return Selection(index=idx, item=prediction.item)
        if previous.index < len(predictions):
            return Selection(index=previous.index, item=predictions[previous.index].item)

    if predictions:
        return Selection(index=0, item=predictions[0].item)
    return None


def step_selection(current: Selection | None, predictions: Sequence[Prediction], direction: int) -> Selection | None:
    """Move selection one row up (``-1``) or down (``+1``), wrapping at the ends."""
    if not predictions:
        return None
    last_idx = len(predictions) - 1
    if current is None:
        next_idx = last_idx if direction < 0 else 0
    elif direction < 0:
        next_idx = last_idx if current.index <= 0 else current.index - 1
    else:
        next_idx = 0 if current.index >= last_idx else current.index + 1
    return Selection(index=next_idx, item=predictions[next_idx].item)


__all__ = ["Selection", "step_selection", "track_selection"]
