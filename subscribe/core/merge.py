"""Chapter/phrase merge engine and text layouts.

WHY: Chapter markers and phrases come from two independent sources with
independent clocks of precision (chapters in whole seconds, phrases in
milliseconds). A chapter heading that lands one word into a sentence reads
badly, so chapters inside the transcript are snapped to just before the
nearest phrase when they are close enough.

HOW: Sort private copies of both inputs, split chapters into
before / middle / after relative to the first and last phrase, snap the
middle ones, then stable-sort everything as MergeEvents and render.

  before  : chapter.start_ms <= first phrase timestamp
  after   : chapter.start_ms >  last phrase timestamp
  middle  : everything else, snapped with nearest_phrase_index()

Sort key: (timestamp, chapters before phrases, insertion order).

RULES:
- Inputs are never mutated
- threshold_ms == 0 means "always snap"; negative thresholds are rejected
- A snapped chapter sits at (nearest phrase timestamp - 1), or 0
- Equal distance to both neighbors → the later (right) phrase wins
- Same-timestamp chapters keep their input order
- Zero phrases → chapter titles concatenated with no separator
- Output is right-trimmed and ends with exactly one newline
"""

from __future__ import annotations

from bisect import bisect_left
from dataclasses import dataclass
from typing import List, Sequence, Tuple

from subscribe.core.ir import Chapter, Phrase, TextLayout


@dataclass
class MergeEvent:
    """One entry of the merged timeline (phrase or chapter heading)."""

    timestamp_ms: int
    is_chapter: bool
    text: str
    order: int


def _is_sorted(phrases: Sequence[Phrase]) -> bool:
    return all(
        phrases[i].timestamp_ms <= phrases[i + 1].timestamp_ms
        for i in range(len(phrases) - 1)
    )


def ensure_sorted_phrases(phrases: Sequence[Phrase]) -> List[Phrase]:
    """Return a copy of ``phrases`` ordered by timestamp (sorts only if needed)."""
    copied = list(phrases)
    if len(copied) > 1 and not _is_sorted(copied):
        copied.sort(key=lambda p: p.timestamp_ms)
    return copied


def sort_chapters(chapters: Sequence[Chapter]) -> List[Chapter]:
    """Return a copy of ``chapters`` stably ordered by start time."""
    return sorted(chapters, key=lambda c: c.start_ms)


def split_chapters(
    chapters: Sequence[Chapter],
    first_ts: int,
    last_ts: int,
) -> Tuple[List[Chapter], List[Chapter], List[Chapter]]:
    """Partition chapters into (before, middle, after), keeping input order."""
    before: List[Chapter] = []
    middle: List[Chapter] = []
    after: List[Chapter] = []
    for chapter in chapters:
        ts = chapter.start_ms
        if ts <= first_ts:
            before.append(chapter)
        elif ts > last_ts:
            after.append(chapter)
        else:
            middle.append(chapter)
    return before, middle, after


def nearest_phrase_index(phrases: Sequence[Phrase], ts: int) -> Tuple[int, int]:
    """Find the phrase closest in time to ``ts``.

    HOW: bisect_left gives the insertion point; an exact match there
    short-circuits with distance 0. Otherwise the right neighbor is taken
    first and the left neighbor only replaces it when strictly closer, so
    ties resolve to the later phrase.

    Args:
        phrases: Phrases sorted by timestamp.
        ts: Target time in milliseconds.

    Returns:
        (index, distance_ms); (-1, -1) when there are no phrases.
    """
    n = len(phrases)
    if n == 0:
        return -1, -1

    timestamps = [p.timestamp_ms for p in phrases]
    idx = bisect_left(timestamps, ts)
    if idx < n and timestamps[idx] == ts:
        return idx, 0

    nearest = -1
    best = -1
    if idx < n:
        nearest = idx
        best = timestamps[idx] - ts
    if idx - 1 >= 0:
        dist = ts - timestamps[idx - 1]
        if nearest == -1 or dist < best:
            nearest = idx - 1
            best = dist
    return nearest, best


def adjust_middle_chapters(
    middle: Sequence[Chapter],
    phrases: Sequence[Phrase],
    threshold_ms: int,
    base_order: int,
) -> List[MergeEvent]:
    """Turn middle chapters into MergeEvents, snapping the close ones."""
    events: List[MergeEvent] = []
    for i, chapter in enumerate(middle):
        ts = chapter.start_ms
        idx, dist = nearest_phrase_index(phrases, ts)
        adjusted = ts
        if idx >= 0 and (threshold_ms == 0 or dist <= threshold_ms):
            target = phrases[idx].timestamp_ms
            adjusted = target - 1 if target > 0 else 0
        events.append(MergeEvent(
            timestamp_ms=adjusted,
            is_chapter=True,
            text=chapter.title,
            order=base_order + i,
        ))
    return events


def phrase_events(phrases: Sequence[Phrase], base_order: int) -> List[MergeEvent]:
    return [
        MergeEvent(
            timestamp_ms=p.timestamp_ms,
            is_chapter=False,
            text=p.text,
            order=base_order + i,
        )
        for i, p in enumerate(phrases)
    ]


def _chapter_events(chapters: Sequence[Chapter], base_order: int) -> List[MergeEvent]:
    return [
        MergeEvent(
            timestamp_ms=c.start_ms,
            is_chapter=True,
            text=c.title,
            order=base_order + i,
        )
        for i, c in enumerate(chapters)
    ]


def _heading(title: str) -> str:
    return "## " + title.lstrip("# ").strip()


def render_events(events: Sequence[MergeEvent], layout: TextLayout) -> str:
    """Stable-sort merged events and render them as text.

    HOW: Two-state walk (in a content run / not). A chapter heading closes
    the current run with the layout's chapter separator, is written, and
    is followed by the same separator. Phrases join the current run with
    the layout's phrase separator.

      layout     phrase sep   chapter sep
      PLAIN      "\\n"         "\\n\\n"
      COLLAPSED  " "          "\\n"
    """
    ordered = sorted(
        events,
        key=lambda e: (e.timestamp_ms, not e.is_chapter, e.order),
    )

    if layout is TextLayout.COLLAPSED:
        phrase_sep = " "
        chapter_sep = "\n"
    else:
        phrase_sep = "\n"
        chapter_sep = "\n\n"

    parts: List[str] = []
    in_content = False
    for event in ordered:
        if event.is_chapter:
            if in_content:
                parts.append(chapter_sep)
            parts.append(_heading(event.text))
            parts.append(chapter_sep)
            in_content = False
            continue

        text = event.text.strip()
        if not text:
            continue
        if in_content:
            parts.append(phrase_sep)
        parts.append(text)
        in_content = True

    return "".join(parts).rstrip(" \t\n\r") + "\n"


def merge_and_render(
    phrases: Sequence[Phrase],
    chapters: Sequence[Chapter],
    threshold_ms: int = 0,
    layout: TextLayout = TextLayout.PLAIN,
) -> str:
    """Interleave chapters with phrases and render the result.

    Args:
        phrases: Transcript phrases, possibly unsorted.
        chapters: Chapter markers, possibly unsorted.
        threshold_ms: Snapping distance; 0 snaps every middle chapter.
        layout: PLAIN (one phrase per line) or COLLAPSED (one paragraph).

    Returns:
        The rendered document.

    Raises:
        ValueError: threshold_ms is negative.
    """
    if threshold_ms < 0:
        raise ValueError("threshold_ms must be >= 0, got {}".format(threshold_ms))

    sorted_phrases = ensure_sorted_phrases(phrases)
    sorted_chapters = sort_chapters(chapters)

    if not sorted_phrases:
        # TODO: decide on a separator for the chapter-only fallback; titles are
        # currently glued together.
        return "".join(c.title for c in sorted_chapters)

    first_ts = sorted_phrases[0].timestamp_ms
    last_ts = sorted_phrases[-1].timestamp_ms
    before, middle, after = split_chapters(sorted_chapters, first_ts, last_ts)

    events: List[MergeEvent] = _chapter_events(before, 0)
    base_phrases = len(before)
    events.extend(phrase_events(sorted_phrases, base_phrases))
    base_middle = base_phrases + len(sorted_phrases)
    events.extend(adjust_middle_chapters(middle, sorted_phrases, threshold_ms, base_middle))
    base_after = base_middle + len(middle)
    events.extend(_chapter_events(after, base_after))

    return render_events(events, layout)
