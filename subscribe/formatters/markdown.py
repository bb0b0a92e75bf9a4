"""Markdown note formatter.

WHY: Transcripts are often kept in a Markdown notes vault next to other
notes about the video. A title heading, hashtags and a clickable chapter
index make the note useful beyond the raw text.

HOW: Builds the document from three optional blocks followed by the
rendered transcript:

    # <title>

    #youtube #source #tag      (when tags are given)

    - [00:01:05](<url>?t=65s) - Chapter   (when the transcript has chapters)

    <transcript rendered in the configured layout>

RULES:
- Blocks are separated by exactly one blank line
- The chapter index links to base_url only when one is given
- Output file: "<Title>.md", media type "text/markdown"
"""

from __future__ import annotations

from typing import List, Optional, Sequence

from subscribe.config import CHAPTER_THRESHOLD_MS
from subscribe.core.ir import OutputFormat, TextLayout
from subscribe.core.merge import sort_chapters
from subscribe.core.transcript import Transcript
from subscribe.formatters.base import BaseFormatter, FormatterOutput
from subscribe.notes import format_chapters, join_hashtags


class MarkdownFormatter(BaseFormatter):
    """Formatter that writes a Markdown note with the transcript body."""

    def __init__(
        self,
        tags: Optional[Sequence[str]] = None,
        base_url: str = "",
        layout: TextLayout = TextLayout.PLAIN,
        threshold_ms: int = CHAPTER_THRESHOLD_MS,
    ) -> None:
        self.tags = list(tags or [])
        self.base_url = base_url
        self.layout = layout
        self.threshold_ms = threshold_ms

    @property
    def name(self) -> str:
        return "Markdown"

    def format(self, transcript: Transcript) -> List[FormatterOutput]:
        self._require_content(transcript)

        blocks = ["# " + (transcript.title.strip() or "Untitled")]
        hashtags = join_hashtags(self.tags)
        if hashtags:
            blocks.append(hashtags)
        if transcript.chapters:
            index = format_chapters(sort_chapters(transcript.chapters), self.base_url)
            blocks.append(index.rstrip("\n"))
        blocks.append(transcript.render(self.layout, self.threshold_ms).rstrip("\n"))

        return [
            FormatterOutput(
                filename=transcript.filename(OutputFormat.MD),
                content="\n\n".join(blocks) + "\n",
                media_type="text/markdown",
            )
        ]
