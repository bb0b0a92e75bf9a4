"""Plain text transcript formatters (line-per-phrase and collapsed).

WHY: The most common output is a readable .txt transcript for review,
archival, or pasting into another tool. Some consumers (search, LLM
prompts) prefer one running paragraph instead of one sentence per line.

HOW: Both formatters delegate to Transcript.render() with their layout
and the configured chapter snapping threshold. Chapter headings appear as
"## title" lines when the transcript has chapters.

RULES:
- PlainTextFormatter: one phrase per line, "<Title>.txt"
- CollapsedTextFormatter: one paragraph per chapter, "<Title> (collapsed).txt"
- Media type: "text/plain"
- Output ends with exactly one newline
"""

from __future__ import annotations

from typing import List, Optional

from subscribe.config import CHAPTER_THRESHOLD_MS
from subscribe.core.ir import OutputFormat, TextLayout
from subscribe.core.transcript import Transcript
from subscribe.formatters.base import BaseFormatter, FormatterOutput


class PlainTextFormatter(BaseFormatter):
    """Formatter that writes the transcript as a .txt file.

    RULES:
    - layout defaults to the class layout (PLAIN here)
    - threshold_ms defaults to CHAPTER_THRESHOLD_MS
    """

    layout = TextLayout.PLAIN

    def __init__(
        self,
        layout: Optional[TextLayout] = None,
        threshold_ms: int = CHAPTER_THRESHOLD_MS,
    ) -> None:
        if layout is not None:
            self.layout = layout
        self.threshold_ms = threshold_ms

    @property
    def name(self) -> str:
        return "Plain Text"

    def _filename(self, transcript: Transcript) -> str:
        return transcript.filename(OutputFormat.TXT)

    def format(self, transcript: Transcript) -> List[FormatterOutput]:
        self._require_content(transcript)
        return [
            FormatterOutput(
                filename=self._filename(transcript),
                content=transcript.render(self.layout, self.threshold_ms),
                media_type="text/plain",
            )
        ]


class CollapsedTextFormatter(PlainTextFormatter):
    """Same as PlainTextFormatter, with phrases joined into paragraphs."""

    layout = TextLayout.COLLAPSED

    @property
    def name(self) -> str:
        return "Collapsed Text"

    def _filename(self, transcript: Transcript) -> str:
        stem = transcript.filename(OutputFormat.TXT)[: -len(OutputFormat.TXT.extension)]
        return "{} (collapsed){}".format(stem, OutputFormat.TXT.extension)
