"""Sentence segmentation for author-written (manual) subtitle tracks.

WHY: Manual subtitles arrive as caption-sized blocks of text, one block per
event, with a start and a duration but no per-word timing. A sentence may
end mid-block or run across several blocks. Readers want one sentence per
line with the time the sentence starts.

HOW: Each event's text is scanned with a two-state machine (ScanState) that
recognizes terminator runs (". ! ?" plus trailing closers) and commits a
piece only when the run is followed by whitespace. Pieces are then placed
in time by linear interpolation over the event duration and accumulated
into phrases that may span events.

RULES:
- A terminator run followed by whitespace (or end of text) ends a piece
- A terminator run followed by anything else ("2.6", "U.S") is literal text
- Ellipsis + "?" / "!" is a single run, never an extra empty piece
- per_rune_ms = duration / rune count of the event text (0 if either is 0)
- piece start = event start + round(per_rune_ms * runes consumed before it)
- The first piece of a phrase fixes the phrase timestamp
- Unterminated text at end of input is flushed as a final phrase
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List

from subscribe.core.ir import Phrase
from subscribe.core.raw import RawCaptionEvent, RawCaptions
from subscribe.core.text import (
    clean_segment,
    drop_invalid_chars,
    is_closer,
    is_terminator,
    make_phrase,
    normalize_whitespace,
    round_half_away,
)


class ScanState(Enum):
    """Scanner state: reading plain text, or holding a candidate terminator run."""

    PLAIN = "plain"
    TERMINATOR = "terminator"


@dataclass
class SplitPiece:
    """A fragment of one event's text, as cut by split_pieces().

    RULES:
    - text: whitespace-normalized, never empty
    - end_rune: characters consumed from the start of the event text,
      including the whitespace that closed the piece (exclusive end)
    - end_with_terminator: True if the piece ends a sentence
    """

    text: str
    end_rune: int
    end_with_terminator: bool


def event_text(event: RawCaptionEvent) -> str:
    """Join an event's cleaned segments with single spaces."""
    parts = [clean_segment(seg.text) for seg in event.segments]
    return " ".join(p for p in parts if p)


def _append_piece(
    pieces: List[SplitPiece],
    plain: List[str],
    pending: List[str],
    end_rune: int,
    end_with_terminator: bool,
) -> None:
    text = normalize_whitespace("".join(plain) + "".join(pending))
    if text:
        pieces.append(SplitPiece(
            text=text,
            end_rune=end_rune,
            end_with_terminator=end_with_terminator,
        ))


def split_pieces(text: str) -> List[SplitPiece]:
    """Cut one event's text into sentence pieces.

    WHY: A naive split on "." breaks decimals ("2.6 meters") and abbreviations
    glued to the next word. Only a terminator run that is followed by
    whitespace is a real sentence boundary.

    HOW: Explicit state machine over the characters of ``text``:

      PLAIN       + terminator          → push to pending, go TERMINATOR
      PLAIN       + anything else       → append to plain buffer
      TERMINATOR  + terminator / closer → push to pending
      TERMINATOR  + whitespace          → consume the whitespace run,
                                          commit plain+pending, go PLAIN
      TERMINATOR  + other character     → false positive: fold pending into
                                          the plain buffer with the character,
                                          go PLAIN

    At end of text a pending run commits as a terminated piece; leftover
    plain text commits as an unterminated piece.

    Args:
        text: The event text (already cleaned by event_text()).

    Returns:
        Ordered pieces; end_rune is non-decreasing.
    """
    pieces: List[SplitPiece] = []
    text = drop_invalid_chars(text)
    if not text:
        return pieces

    plain: List[str] = []
    pending: List[str] = []
    state = ScanState.PLAIN
    consumed = 0
    i = 0
    n = len(text)

    while i < n:
        ch = text[i]

        if state is ScanState.TERMINATOR:
            if is_terminator(ch) or is_closer(ch):
                pending.append(ch)
                i += 1
                consumed += 1
                continue

            if ch.isspace():
                j = i
                while j < n and text[j].isspace():
                    j += 1
                consumed += j - i
                _append_piece(pieces, plain, pending, consumed, True)
                plain = []
                pending = []
                state = ScanState.PLAIN
                i = j
                continue

            # False positive ("2.6"): the run was literal text.
            plain.extend(pending)
            pending = []
            plain.append(ch)
            state = ScanState.PLAIN
            i += 1
            consumed += 1
            continue

        if is_terminator(ch):
            pending.append(ch)
            state = ScanState.TERMINATOR
        else:
            plain.append(ch)
        i += 1
        consumed += 1

    if state is ScanState.TERMINATOR and pending:
        _append_piece(pieces, plain, pending, consumed, True)
    elif plain:
        _append_piece(pieces, plain, pending, consumed, False)

    return pieces


def transform_manual(raw: RawCaptions) -> List[Phrase]:
    """Build phrases from a manual subtitle track.

    WHY: Manual tracks carry whole caption blocks; sentences must be cut
    out of them and may continue into the next block.

    HOW: For each non-empty event, split its text into pieces, give each
    piece an interpolated start time, and append it to the phrase under
    construction. A terminated piece finalizes the phrase.

    Args:
        raw: Decoded json3 payload of a manual track.

    Returns:
        Phrases in input order. Empty input gives an empty list.
    """
    phrases: List[Phrase] = []

    buffer: List[str] = []
    start_ms = -1  # unset

    for event in raw.events:
        ev_start = event.start_ms or 0
        ev_duration = event.duration_ms or 0

        text = event_text(event)
        if not text.strip():
            continue

        pieces = split_pieces(text)
        if not pieces:
            pieces = [SplitPiece(
                text=normalize_whitespace(text),
                end_rune=len(text),
                end_with_terminator=False,
            )]

        runes = len(text)
        per_rune_ms = ev_duration / runes if runes > 0 and ev_duration > 0 else 0.0

        prev_end = 0
        for piece in pieces:
            piece_start = ev_start + round_half_away(per_rune_ms * prev_end)
            if not buffer:
                start_ms = piece_start
            buffer.append(piece.text)

            if piece.end_with_terminator:
                phrase = make_phrase(start_ms, " ".join(buffer))
                if phrase is not None:
                    phrases.append(phrase)
                buffer = []
                start_ms = -1
            prev_end = piece.end_rune

    if buffer:
        if start_ms == -1:
            start_ms = 0
        phrase = make_phrase(start_ms, " ".join(buffer))
        if phrase is not None:
            phrases.append(phrase)

    return phrases
