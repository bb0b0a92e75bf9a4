"""Character-level helpers shared by the manual and automatic segmenters.

WHY: Both segmenters need the same notion of a sentence terminator, a
closing mark, whitespace normalization, and phrase finalization. Keeping
them here means the two algorithms cannot drift apart on these rules.

HOW: Small pure functions over str. make_phrase() is the single place a
Phrase is built, so the "never emit empty text" rule lives in one spot.

RULES:
- Sentence terminators: ".", "!", "?"
- Closers (may trail a terminator): " ' ” ’ ) ] } »
- Whitespace always normalizes to single spaces, trimmed at both ends
- Literal newlines and the escaped two-character "\\n" count as whitespace
- Lone surrogates (undecodable input) are dropped, never raised on
"""

from __future__ import annotations

import math
from typing import Optional

from subscribe.core.ir import Phrase

SENTENCE_TERMINATORS = frozenset(".!?")
CLOSERS = frozenset("\"'”’)]}»")


def is_terminator(ch: str) -> bool:
    return ch in SENTENCE_TERMINATORS


def is_closer(ch: str) -> bool:
    return ch in CLOSERS


def drop_invalid_chars(s: str) -> str:
    """Remove lone surrogates left over from malformed input."""
    return s.encode("utf-8", errors="ignore").decode("utf-8")


def normalize_whitespace(s: str) -> str:
    """Collapse every whitespace run to one space and trim."""
    return " ".join(s.split())


def clean_segment(s: str) -> str:
    """Normalize one caption segment: newlines (real or escaped) become spaces."""
    s = s.replace("\\n", " ").replace("\n", " ")
    return normalize_whitespace(drop_invalid_chars(s))


def trim_trailing_closers(s: str) -> str:
    """Strip trailing whitespace and closing marks that hide a terminator.

    'He said "stop."' → 'He said "stop.'
    """
    s = drop_invalid_chars(s)
    while True:
        s = s.rstrip()
        if not s or not is_closer(s[-1]):
            return s
        s = s[:-1]


def last_non_space_char(s: str) -> Optional[str]:
    """Return the last non-whitespace character, or None."""
    s = drop_invalid_chars(s).rstrip()
    return s[-1] if s else None


def count_words(s: str) -> int:
    return len(s.split())


def round_half_away(x: float) -> int:
    """Round to the nearest integer, halves away from zero (2.5 → 3, -2.5 → -3).

    Python's round() uses banker's rounding, which would shift interpolated
    timestamps by a millisecond on exact halves.
    """
    if x >= 0:
        return int(math.floor(x + 0.5))
    return -int(math.floor(-x + 0.5))


def make_phrase(timestamp_ms: int, text: str) -> Optional[Phrase]:
    """Finalize accumulated text into a Phrase, or None if it is empty.

    RULES:
    - text is whitespace-normalized before anything is counted
    - rune_count / word_count are recomputed over the final text
    - empty text never produces a Phrase
    """
    final = normalize_whitespace(text)
    if not final:
        return None
    return Phrase(
        timestamp_ms=timestamp_ms,
        text=final,
        rune_count=len(final),
        word_count=count_words(final),
    )
