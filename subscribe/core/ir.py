"""Domain dataclasses and enums shared by the segmenters and renderers.

WHY: The segmenters, the merge engine, the formatters and the CLI all talk
about the same few things: phrases, chapters, caption tracks, output
formats and layouts. Defining them once keeps the contract between
segmentation and rendering explicit.

HOW: Plain dataclasses for values (Phrase, Chapter, SubtitleTrack) and
str-based Enums for closed sets (SubtitleSource, OutputFormat, TextLayout).
Each enum has a parse() classmethod so CLI/config strings map onto members
with one clear error.

RULES:
- Phrase.text is never empty once a Phrase exists (see text.make_phrase)
- Phrase timestamps are integer milliseconds from the start of the video
- Chapter starts are integer seconds; start_ms converts for comparison
- SubtitleSource has exactly two members; dispatch on it is exhaustive
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


@dataclass
class Phrase:
    """A sentence-like, timestamped unit of transcript text.

    RULES:
    - timestamp_ms: start of the phrase, milliseconds (>= 0 expected)
    - text: trimmed, single-spaced
    - rune_count: number of characters in text
    - word_count: number of whitespace-separated words in text
    """

    timestamp_ms: int
    text: str
    rune_count: int = 0
    word_count: int = 0


@dataclass
class Chapter:
    """A chapter marker from the video metadata."""

    start_seconds: int
    title: str

    @property
    def start_ms(self) -> int:
        return self.start_seconds * 1000

    def timestamp_hhmmss(self) -> str:
        """Format the start as "HH:MM:SS" (65 → "00:01:05")."""
        total = int(self.start_seconds)
        hours, rest = divmod(total, 3600)
        minutes, seconds = divmod(rest, 60)
        return "{:02d}:{:02d}:{:02d}".format(hours, minutes, seconds)


class SubtitleSource(str, Enum):
    """Whether a caption track is author-written or machine-generated."""

    MANUAL = "manual"
    AUTOMATIC = "automatic"

    @classmethod
    def parse(cls, value: str) -> SubtitleSource:
        """Map a CLI/config/yt-dlp string onto a source kind.

        RULES:
        - "manual" / "subtitles" → MANUAL
        - "automatic" / "auto" / "automatic_captions" → AUTOMATIC
        - Anything else → ValueError
        """
        key = (value or "").strip().lower()
        if key in ("manual", "subtitles"):
            return cls.MANUAL
        if key in ("automatic", "auto", "automatic_captions"):
            return cls.AUTOMATIC
        raise ValueError("unknown subtitle source: {!r}".format(value))

    def describe(self) -> str:
        if self is SubtitleSource.MANUAL:
            return "manual subtitles"
        return "auto captions"


class OutputFormat(str, Enum):
    """File formats known to the pipeline.

    SRT and VTT are the other caption formats yt-dlp lists per language.
    They parse so metadata can recognise and skip them, and so a saved raw
    track in one of them is refused instead of misread as JSON.
    """

    TXT = "txt"
    MD = "md"
    JSON3 = "json3"
    SRT = "srt"
    VTT = "vtt"

    @classmethod
    def parse(cls, value: str) -> OutputFormat:
        key = (value or "").strip().lower().lstrip(".")
        for member in cls:
            if member.value == key:
                return member
        raise ValueError("unknown output format: {!r}".format(value))

    @property
    def is_textual(self) -> bool:
        """True for formats a rendered Transcript can be saved as."""
        return self in (OutputFormat.TXT, OutputFormat.MD)

    @property
    def extension(self) -> str:
        return "." + self.value


class TextLayout(str, Enum):
    """Rendering layout: one phrase per line, or one running paragraph."""

    PLAIN = "plain"
    COLLAPSED = "collapsed"

    @classmethod
    def parse(cls, value: str) -> TextLayout:
        key = (value or "").strip().lower()
        for member in cls:
            if member.value == key:
                return member
        raise ValueError("unknown layout: {!r}".format(value))


@dataclass
class SubtitleTrack:
    """Metadata for one caption track (language, format, URL, source kind).

    RULES:
    - lang: the yt-dlp language key, e.g. "en" or "en-orig"
    - url: empty when the payload did not come from a URL
    """

    lang: str
    format: OutputFormat = OutputFormat.JSON3
    url: str = ""
    source: SubtitleSource = SubtitleSource.AUTOMATIC

    def __str__(self) -> str:
        return "SubtitleTrack(lang={}, format={}, source={})".format(
            self.lang, self.format.value, self.source.value,
        )
