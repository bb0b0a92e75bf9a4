"""Formatter interface and the FormatterOutput container.

WHY: Every output file is a view of the same Transcript. This base class
enforces a consistent interface so the CLI can run any selection of
formatters generically.

HOW: BaseFormatter is an ABC with a ``name`` property and a ``format()``
method. FormatterOutput bundles a file name with its content and MIME
type. _require_content() is the shared guard against saving empty
transcripts.

RULES:
- Subclasses MUST implement ``name`` (human-readable) and ``format()``
- ``format()`` returns a list: most formatters return one item
- ``filename`` is a bare name; the caller chooses the directory and
  resolves conflicts
- A transcript without phrases raises EmptyResultError, never an empty file
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from subscribe.core.transcript import Transcript


@dataclass
class FormatterOutput:
    """A single file to be written, as returned by BaseFormatter.format().

    Attributes:
        filename: File name, e.g. ``"My video.txt"``.
        content: The file content.
        media_type: MIME type for the content, e.g. ``"text/markdown"``.
    """

    filename: str
    content: str
    media_type: str


class BaseFormatter(ABC):
    """Interface every transcript formatter implements.

    New formats subclass this in their own module under formatters/ and
    get one entry in the FORMATTERS registry. Constructor arguments are
    optional so FORMATTERS[key]() always works.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable format name, e.g. 'Plain Text'."""

    @abstractmethod
    def format(self, transcript: Transcript) -> list[FormatterOutput]:
        """Convert the Transcript into one or more output files.

        Raises:
            EmptyResultError: the transcript has no phrases.
        """

    @staticmethod
    def _require_content(transcript: Transcript) -> None:
        transcript.require_phrases()
