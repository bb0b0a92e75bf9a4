"""Typed model of the YouTube "json3" caption wire format.

WHY: The json3 payload is a loose JSON document with optional timing
fields and many unrelated keys (window ids, pen ids, confidence). The
segmenters only need events, their start/duration, and the text segments
with their offsets. Typed dataclasses make that subset explicit.

HOW: Three dataclasses map 1:1 to the wire objects we care about. Factory
methods (from_dict) pick out known keys and ignore everything else.

RULES:
- RawSegment  ← {"utf8": str, "tOffsetMs"?: int}
- RawCaptionEvent ← {"tStartMs"?: int, "dDurationMs"?: int, "aAppend"?: int, "segs"?: [...]}
- RawCaptions ← {"wireMagic"?: str, "events": [...]}
- Missing timing fields stay None; absolute time treats None as 0
- Unknown fields are ignored, never rejected
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class RawSegment:
    """One text fragment inside an event, optionally offset in time."""

    text: str
    offset_ms: Optional[int] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> RawSegment:
        return cls(
            text=data.get("utf8") or "",
            offset_ms=data.get("tOffsetMs"),
        )


@dataclass
class RawCaptionEvent:
    """A single timestamped block of caption segments.

    RULES:
    - start_ms / duration_ms are None when absent from the payload
    - append carries the wire "aAppend" flag; segmenters do not use it
    """

    start_ms: Optional[int] = None
    duration_ms: Optional[int] = None
    segments: List[RawSegment] = field(default_factory=list)
    append: Optional[int] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> RawCaptionEvent:
        return cls(
            start_ms=data.get("tStartMs"),
            duration_ms=data.get("dDurationMs"),
            segments=[RawSegment.from_dict(s) for s in data.get("segs") or []],
            append=data.get("aAppend"),
        )

    def is_newline_only(self) -> bool:
        """True if the event only carries line breaks.

        WHY: ASR tracks interleave word events with "\\n" events that mark
        a caption line change. They carry no words and must be skipped.

        RULES:
        - No segments at all → False (nothing to skip, nothing to read)
        - Every segment empty/whitespace, "\\n" or the escaped "\\\\n" → True
        """
        if not self.segments:
            return False
        for seg in self.segments:
            stripped = seg.text.strip()
            if stripped in ("", "\n", "\\n"):
                continue
            return False
        return True

    def absolute_ms(self, segment: RawSegment) -> int:
        """Absolute time of a segment: event start + segment offset (None → 0)."""
        base = self.start_ms or 0
        return base + (segment.offset_ms or 0)


@dataclass
class RawCaptions:
    """A decoded json3 payload."""

    events: List[RawCaptionEvent] = field(default_factory=list)
    wire_magic: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> RawCaptions:
        return cls(
            events=[RawCaptionEvent.from_dict(e) for e in data.get("events") or []],
            wire_magic=data.get("wireMagic"),
        )
