"""Fuzzy scoring and bounded top-K ranking for picker items.

Scores are case-insensitive subsequence matches with skim-style bonuses.
Ranking keeps at most ``limit`` candidates in a min-heap so a keystroke
never sorts the full store.
"""

from __future__ import annotations

import heapq
from collections.abc import Sequence
from dataclasses import dataclass

DEFAULT_MAX_PREDICTIONS = 10
MAX_PREDICTIONS_LIMIT = 20
SCORE_MATCH = 16
BONUS_BOUNDARY = 8
BONUS_CAMEL = 7
BONUS_CONSECUTIVE = 6
MAX_CONSECUTIVE_BONUS = 24
PENALTY_GAP_START = 3
PENALTY_GAP_EXTENSION = 1
MAX_LEADING_PENALTY = 8
SEPARATORS = "/\\_- ."


@dataclass(frozen=True)
class Prediction:
    """One ranked item; ``index`` is its position in the item store."""

    item: object
    score: int
    index: int


def _position_bonus(candidate: str, position: int) -> int:
    if position == 0 or candidate[position - 1] in SEPARATORS:
        return BONUS_BOUNDARY
    if candidate[position].isupper() and candidate[position - 1].islower():
        return BONUS_CAMEL
    return 0


def fuzzy_score(query: str, candidate: str) -> int | None:
    """Score ``candidate`` against ``query``; ``None`` when it does not match.

    Query characters are matched left to right, ignoring case. Each hit earns
    a base score plus a bonus at word starts (after a separator, or a
    lower-to-upper camelCase step). Runs of adjacent hits earn a growing
    bonus; gaps between hits and text before the first hit cost points, as
    does candidate length. An empty query matches everything with score ``0``.
    """
    if not query:
        return 0
    pattern = query.casefold()
    folded = candidate.casefold()
    if len(folded) != len(candidate):
        # Case folding changed the length (e.g. "ß" -> "ss"); use the folded
        # text for word boundaries too.
        candidate = folded

    total = 0
    matched = 0
    streak = 0
    first_hit: int | None = None
    last_hit = -1
    for position, ch in enumerate(folded):
        if ch != pattern[matched]:
            continue
        points = SCORE_MATCH + _position_bonus(candidate, position)
        if first_hit is None:
            first_hit = position
        elif position == last_hit + 1:
            streak += 1
            points += min(MAX_CONSECUTIVE_BONUS, BONUS_CONSECUTIVE * streak)
        else:
            streak = 0
            points -= PENALTY_GAP_START + PENALTY_GAP_EXTENSION * (position - last_hit - 2)
        total += points
        last_hit = position
        matched += 1
        if matched == len(pattern):
            break

    if matched < len(pattern):
        return None
    total -= min(first_hit, MAX_LEADING_PENALTY)
    total -= len(folded) // 16
    return total


def clamp_max_predictions(value: int) -> int:
    return max(1, min(MAX_PREDICTIONS_LIMIT, int(value)))


def top_predictions(query: str, items: Sequence[object], limit: int = DEFAULT_MAX_PREDICTIONS) -> list[Prediction]:
    """Return the ``limit`` best-scoring items, best first.

    The heap holds ``(score, -index, prediction)`` so its minimum is the
    lowest score and, among equal scores, the latest item. A new item only
    evicts the minimum when its score is strictly greater, so earlier items
    win ties.
    """
    max_results = max(1, limit)
    heap: list[tuple[int, int, Prediction]] = []
    for index, item in enumerate(items):
        score = fuzzy_score(query, str(item))
        if score is None:
            continue
        entry = (score, -index, Prediction(item=item, score=score, index=index))
        if len(heap) < max_results:
            heapq.heappush(heap, entry)
        elif score > heap[0][0]:
            heapq.heapreplace(heap, entry)

    ranked = [prediction for _score, _neg_index, prediction in heap]
    ranked.sort(key=lambda prediction: (-prediction.score, prediction.index))
    return ranked


def same_items(left: Sequence[Prediction], right: Sequence[Prediction]) -> bool:
    """Return whether two prediction lists show the same items in the same order."""
    if len(left) != len(right):
        return False
    return all(a.item == b.item for a, b in zip(left, right))


__all__ = [
    "DEFAULT_MAX_PREDICTIONS",
    "MAX_PREDICTIONS_LIMIT",
    "Prediction",
    "clamp_max_predictions",
    "fuzzy_score",
    "same_items",
    "top_predictions",
]
