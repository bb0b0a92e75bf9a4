"""Registry of output formatters, keyed by their --formats name.

WHY: The CLI needs a single lookup to find the right formatter by name.
A central dict makes it trivial to add new formats: create the formatter
class, import it here, add one line.

HOW: FORMATTERS maps string keys to formatter *classes* (not instances).
Callers instantiate as needed: ``formatter = FORMATTERS["plain_text"]()``.

RULES:
- Keys are snake_case identifiers (used in CLI flags and config)
- Values are BaseFormatter subclasses (not instances)
- Every formatter listed here must be importable without side effects
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from subscribe.formatters.chat_prompt import ChatPromptFormatter
from subscribe.formatters.markdown import MarkdownFormatter
from subscribe.formatters.plain_text import CollapsedTextFormatter, PlainTextFormatter

if TYPE_CHECKING:
    from subscribe.formatters.base import BaseFormatter

FORMATTERS: dict[str, type[BaseFormatter]] = {
    "plain_text": PlainTextFormatter,
    "collapsed_text": CollapsedTextFormatter,
    "markdown": MarkdownFormatter,
    "chat_prompt": ChatPromptFormatter,
}
