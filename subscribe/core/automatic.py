"""Sentence reconstruction for automatic (ASR) caption tracks.

WHY: YouTube's automatic captions are word-level fragments with their own
absolute timestamps, sometimes punctuated, often not. Readers need
sentence-like phrases; long silences and runaway unpunctuated speech must
still produce breaks.

HOW: Segments are fed one at a time into a _PhraseAccumulator. A phrase is
committed when the gap since the previous word exceeds PAUSE_THRESHOLD_MS,
when the buffer reaches MAX_WORDS_PER_PHRASE words, or when a fragment ends
with a sentence terminator (ignoring trailing closers).

RULES:
- Each segment is atomic: never split, even if it holds several terminators
- Newline-only events and empty / "\\n" segments are skipped
- Lone surrogates are dropped from a segment before anything else
- Absolute time = event tStartMs + segment tOffsetMs (missing → 0)
- Pause break happens BEFORE the new segment is appended
- Word cap is checked before the punctuation rule
- Committing empty text resets state without emitting a Phrase
"""

from __future__ import annotations

from typing import List, Optional

from subscribe.core.ir import Phrase
from subscribe.core.raw import RawCaptions
from subscribe.core.text import (
    count_words,
    drop_invalid_chars,
    is_terminator,
    last_non_space_char,
    make_phrase,
    normalize_whitespace,
    trim_trailing_closers,
)

# Silence longer than this between two words forces a phrase break.
PAUSE_THRESHOLD_MS = 2000

# Safety cap: a phrase never grows past this many words.
MAX_WORDS_PER_PHRASE = 100


class _PhraseAccumulator:
    """Buffer for the phrase under construction plus its timing state."""

    def __init__(self) -> None:
        self.phrases: List[Phrase] = []
        self._parts: List[str] = []
        self._words = 0
        self._start_ms: Optional[int] = None
        self.last_word_ms: Optional[int] = None

    @property
    def is_empty(self) -> bool:
        return not self._parts

    @property
    def word_count(self) -> int:
        return self._words

    def note_word_time(self, ts: int) -> None:
        self.last_word_ms = ts
        if self.is_empty:
            self._start_ms = ts

    def append(self, text: str) -> None:
        text = normalize_whitespace(text)
        if not text:
            return
        self._parts.append(text)
        self._words += count_words(text)

    def commit(self) -> None:
        """Emit the buffer as a Phrase (if non-empty) and reset."""
        if self._start_ms is not None:
            ts = self._start_ms
        elif self.last_word_ms is not None:
            ts = self.last_word_ms
        else:
            ts = 0
        phrase = make_phrase(ts, " ".join(self._parts))
        if phrase is not None:
            self.phrases.append(phrase)
        self._parts = []
        self._words = 0
        self._start_ms = None


def transform_automatic(raw: RawCaptions) -> List[Phrase]:
    """Build phrases from an automatic caption track.

    Args:
        raw: Decoded json3 payload of an ASR track.

    Returns:
        Phrases in input order. Empty input gives an empty list.
    """
    if not raw.events:
        return []

    acc = _PhraseAccumulator()

    for event in raw.events:
        if event.is_newline_only():
            continue

        for seg in event.segments:
            text = drop_invalid_chars(seg.text).replace("\\n", "\n")
            if not text.strip() or text == "\n":
                continue

            ts = event.absolute_ms(seg)

            if (
                acc.last_word_ms is not None
                and not acc.is_empty
                and ts - acc.last_word_ms > PAUSE_THRESHOLD_MS
            ):
                acc.commit()

            acc.note_word_time(ts)
            acc.append(text)

            if acc.word_count >= MAX_WORDS_PER_PHRASE:
                acc.commit()
                continue

            last = last_non_space_char(trim_trailing_closers(text))
            if last is not None and is_terminator(last):
                acc.commit()

    acc.commit()
    return acc.phrases
