"""Transcript facade: phrases + chapters + rendering entry points.

WHY: Callers (formatters, CLI) should not need to know about merge events
or layouts' separators. They hold a Transcript and ask for plain text,
collapsed text, or a file name.

HOW: Transcript is a dataclass owning the phrase and chapter sequences.
Rendering without chapters is a simple join; with chapters it delegates
to merge.merge_and_render().

RULES:
- plain() / collapsed() of a transcript with no phrases return ""
- Without chapters: phrases joined by "\\n" (plain) or " " (collapsed),
  plus one trailing newline
- With chapters: merge engine, threshold 0 unless the caller overrides it
- filename() only accepts textual formats (txt, md)
- Rendering never mutates the stored phrases or chapters
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Sequence

from subscribe.core.ir import Chapter, OutputFormat, Phrase, SubtitleTrack, TextLayout
from subscribe.core.merge import merge_and_render
from subscribe.fsutil import sanitize_filename


class UnsupportedFormatError(ValueError):
    """Raised when a Transcript is asked for a non-textual output format.

    WHY: Structured formats such as json3 come from the downloaded payload,
    not from a rendered Transcript. Silently writing text into a .json3
    file would produce a broken file.
    """


class EmptyResultError(ValueError):
    """Raised when output is required but the transcript has no phrases."""


@dataclass
class Transcript:
    """A rendered-on-demand transcript.

    RULES:
    - title: video title (or id), used for file naming
    - track: metadata of the caption track the phrases came from
    - phrases: chronological by construction, re-sorted defensively on merge
    - chapters: external markers, referenced as given
    """

    title: str
    track: SubtitleTrack
    phrases: List[Phrase] = field(default_factory=list)
    chapters: List[Chapter] = field(default_factory=list)

    def plain_no_chapters(self) -> str:
        """One phrase per line, trailing newline."""
        return "\n".join(p.text for p in self.phrases) + "\n"

    def collapsed_no_chapters(self) -> str:
        """All phrases in one paragraph, trailing newline."""
        return " ".join(p.text.strip() for p in self.phrases).strip() + "\n"

    def plain(self, threshold_ms: int = 0) -> str:
        if not self.phrases:
            return ""
        if not self.chapters:
            return self.plain_no_chapters()
        return merge_and_render(self.phrases, self.chapters, threshold_ms, TextLayout.PLAIN)

    def collapsed(self, threshold_ms: int = 0) -> str:
        if not self.phrases:
            return ""
        if not self.chapters:
            return self.collapsed_no_chapters()
        return merge_and_render(self.phrases, self.chapters, threshold_ms, TextLayout.COLLAPSED)

    def render(self, layout: TextLayout, threshold_ms: int = 0) -> str:
        """Render in the requested layout."""
        if layout is TextLayout.PLAIN:
            return self.plain(threshold_ms)
        if layout is TextLayout.COLLAPSED:
            return self.collapsed(threshold_ms)
        raise ValueError("unknown layout: {!r}".format(layout))

    def require_phrases(self) -> None:
        """Raise EmptyResultError if there is nothing to persist."""
        if not self.phrases:
            raise EmptyResultError(
                "transcript {!r} has no phrases ({})".format(
                    self.title, self.track.source.describe(),
                )
            )

    def filename(self, fmt: OutputFormat) -> str:
        """Sanitized title plus the format's extension.

        Raises:
            UnsupportedFormatError: fmt is not txt or md.
        """
        if not isinstance(fmt, OutputFormat) or not fmt.is_textual:
            raise UnsupportedFormatError(
                "cannot derive a transcript filename for format {!r}; "
                "only txt and md are rendered from a Transcript".format(
                    getattr(fmt, "value", fmt),
                )
            )
        return sanitize_filename(self.title.strip()) + fmt.extension


def build_transcript(
    title: str,
    track: SubtitleTrack,
    phrases: Sequence[Phrase],
    chapters: Sequence[Chapter],
) -> Transcript:
    """Assemble a Transcript from ready-made parts (no I/O, no parsing)."""
    return Transcript(
        title=title,
        track=track,
        phrases=list(phrases),
        chapters=list(chapters),
    )
