"""Small Markdown helpers for note-style output: hashtags and chapter lists.

WHY: The Markdown output is meant to drop into a notes vault. Hashtags
from the video description and a clickable chapter index make the note
searchable and navigable.

HOW: Pure functions. find_hashtags() takes the text and a compiled pattern
(first group = tag without "#") and returns an ordered, de-duplicated list.

RULES:
- HTML entities are decoded before matching ("Caf&eacute;" → "Café")
- Tags are lower-cased and de-duplicated, first occurrence wins
- At most MAX_HASHTAGS tags are returned (size guard against huge descriptions)
- format_chapters() links to "<url>?t=<s>s" ("&t=" if the URL has a query)
"""

from __future__ import annotations

import html
import re
from typing import Iterable, List, Sequence

from subscribe.core.ir import Chapter

MAX_HASHTAGS = 64

BASE_TAGS = ("youtube", "source")

# "#word": letters, digits, underscore and dash, any script.
HASHTAG_RE = re.compile(r"#([\w-]+)")


def find_hashtags(
    text: str,
    pattern: re.Pattern[str] = HASHTAG_RE,
    limit: int = MAX_HASHTAGS,
) -> List[str]:
    if not text:
        return []
    text = html.unescape(text)
    tags: List[str] = []
    seen = set()
    for match in pattern.finditer(text):
        tag = match.group(1).lower()
        if tag in seen:
            continue
        seen.add(tag)
        tags.append(tag)
        if len(tags) >= limit:
            break
    return tags


def join_hashtags(tags: Iterable[str]) -> str:
    """["a", "#b", " "] → "#a #b"."""
    out = []
    for tag in tags:
        tag = tag.strip()
        if not tag:
            continue
        out.append(tag if tag.startswith("#") else "#" + tag)
    return " ".join(out)


def format_chapters(chapters: Sequence[Chapter], base_url: str = "") -> str:
    """One Markdown list line per chapter, linked when base_url is given."""
    if not chapters:
        return ""
    sep = "&" if "?" in base_url else "?"
    lines = []
    for chapter in chapters:
        ts = chapter.timestamp_hhmmss()
        title = chapter.title.replace("\n", " ").strip()
        if base_url:
            link = "{}{}t={}s".format(base_url, sep, int(chapter.start_seconds))
            lines.append("- [{}]({}) - {}\n".format(ts, link, title))
        else:
            lines.append("- {} - {}\n".format(ts, title))
    return "".join(lines)
