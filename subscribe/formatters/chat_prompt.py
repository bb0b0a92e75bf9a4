"""Chat prompt formatter: an instruction block followed by the transcript.

WHY: A common next step is pasting the transcript into a chat assistant to
get a summary or chapter list. Doing it by hand means copying two pieces
and guessing whether the result fits the assistant's input limit.

HOW: build_chat_prompt() joins the prompt text and the collapsed transcript
with a blank line. ChatPromptFormatter saves that as "<Title> (prompt).txt"
and logs a warning when the result is larger than max_bytes.

RULES:
- The transcript part always uses the collapsed layout
- Size is measured in UTF-8 bytes of the whole file
- An oversized prompt is still written; the limit only warns
"""

from __future__ import annotations

import logging
from typing import List, Optional

from subscribe.config import CHAPTER_THRESHOLD_MS, CHAT_PROMPT, PROMPT_MAX_BYTES
from subscribe.core.ir import OutputFormat
from subscribe.core.transcript import Transcript
from subscribe.formatters.base import BaseFormatter, FormatterOutput

logger = logging.getLogger(__name__)


def build_chat_prompt(prompt: str, transcript_text: str) -> str:
    """Return the prompt, a blank line, then the transcript text."""
    return "{}\n\n{}".format(prompt, transcript_text)


def prompt_size(text: str) -> int:
    return len(text.encode("utf-8"))


class ChatPromptFormatter(BaseFormatter):
    """Formatter that writes a ready-to-paste chat prompt."""

    def __init__(
        self,
        prompt: Optional[str] = None,
        max_bytes: int = PROMPT_MAX_BYTES,
        threshold_ms: int = CHAPTER_THRESHOLD_MS,
    ) -> None:
        self.prompt = CHAT_PROMPT if prompt is None else prompt
        self.max_bytes = max_bytes
        self.threshold_ms = threshold_ms

    @property
    def name(self) -> str:
        return "Chat Prompt"

    def format(self, transcript: Transcript) -> List[FormatterOutput]:
        self._require_content(transcript)
        content = build_chat_prompt(self.prompt, transcript.collapsed(self.threshold_ms))
        size = prompt_size(content)
        if size > self.max_bytes:
            logger.warning(
                "Chat prompt is %d bytes, above the %d byte limit", size, self.max_bytes
            )
        stem = transcript.filename(OutputFormat.TXT)[: -len(OutputFormat.TXT.extension)]
        return [
            FormatterOutput(
                filename="{} (prompt){}".format(stem, OutputFormat.TXT.extension),
                content=content,
                media_type="text/plain",
            )
        ]
