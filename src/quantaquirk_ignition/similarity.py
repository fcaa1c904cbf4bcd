"""Edit-distance ranking used to suggest the name a developer meant to type."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Final

# A candidate is only suggested when at most 30% of its characters (relative
# to the longer of the two names) would have to change.
SIMILARITY_THRESHOLD: Final[float] = 0.7


def levenshtein(a: str, b: str) -> int:
    """Return the Levenshtein distance between *a* and *b*.

    Insertions, deletions and substitutions all cost 1.
    """
    if a == b:
        return 0
    if len(a) < len(b):
        a, b = b, a
    if not b:
        return len(a)

    previous = list(range(len(b) + 1))
    for i, char_a in enumerate(a, start=1):
        current = [i]
        for j, char_b in enumerate(b, start=1):
            current.append(
                min(
                    previous[j] + 1,
                    current[j - 1] + 1,
                    previous[j - 1] + (char_a != char_b),
                )
            )
        previous = current
    return previous[-1]


def similarity(a: str, b: str) -> float:
    """Return ``1 - levenshtein(a, b) / max(len(a), len(b))``.

    The score lies in ``[0, 1]``; two empty strings are identical (``1.0``).
    """
    longest = max(len(a), len(b))
    if longest == 0:
        return 1.0
    return 1.0 - levenshtein(a, b) / longest


def find_closest_match(
    target: str,
    candidates: Iterable[str],
    threshold: float = SIMILARITY_THRESHOLD,
) -> str | None:
    """Return the candidate most similar to *target*, or ``None``.

    Ties keep the candidate seen first.  ``None`` is returned when there are
    no candidates or when the best score is below *threshold*.

    Example::

        find_closest_match("test.typoo", ["test.typo"])  # "test.typo"
    """
    best: str | None = None
    best_score = -1.0
    for candidate in candidates:
        score = similarity(target, candidate)
        if score > best_score:
            best, best_score = candidate, score
    if best is None or best_score < threshold:
        return None
    return best


__all__ = [
    "SIMILARITY_THRESHOLD",
    "levenshtein",
    "similarity",
    "find_closest_match",
]
