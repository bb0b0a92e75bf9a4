"""File-name sanitizing and output-file helpers.

WHY: Video titles contain characters that are illegal or awkward in file
names (":" "/" "?" quotes, control characters). Output files must also
never overwrite an earlier run's output, and a crash mid-write must not
leave a truncated transcript behind.

HOW: sanitize_filename() applies a fixed sequence of regex replacements.
resolve_output_path() inserts a numeric counter before the extension on
conflict. write_text_atomic() writes to a temp file in the target
directory and os.replace()s it into place.

RULES:
- ":" becomes "-"; < > " / \\ | ? * and control chars become spaces
- Whitespace is collapsed, trailing dots removed, length capped at 200
- An empty result falls back to "untitled"
- The first character is upper-cased
- Conflicts: "Title.txt" → "Title-2.txt" → "Title-3.txt" ...
"""

from __future__ import annotations

import os
import re
import tempfile
from pathlib import Path
from typing import Union

MAX_FILENAME_LENGTH = 200

_INVALID_FILE_CHARS = re.compile(r'[<>"/\\|?*\x00-\x1f]')
_MULTI_SPACE = re.compile(r"\s+")


def capitalize_first(s: str) -> str:
    """Upper-case the first character only; the rest is untouched."""
    if not s:
        return s
    return s[0].upper() + s[1:]


def sanitize_filename(name: str) -> str:
    """Turn a free-form title into a safe file name stem."""
    if not name:
        return "untitled"

    clean = name.replace(":", "-")
    clean = _INVALID_FILE_CHARS.sub(" ", clean)
    clean = _MULTI_SPACE.sub(" ", clean.strip())
    clean = clean.rstrip(".")

    if not clean:
        return "untitled"

    if len(clean) > MAX_FILENAME_LENGTH:
        clean = clean[:MAX_FILENAME_LENGTH]

    return capitalize_first(clean)


def resolve_output_path(filename: str, output_dir: Path) -> Path:
    """Return a path in output_dir that does not exist yet.

    Args:
        filename: Desired file name, e.g. "My video.txt".
        output_dir: Directory to save into.

    Returns:
        output_dir / filename, or the first free "stem-N.ext" with N >= 2.
    """
    base_path = output_dir / filename
    if not base_path.exists():
        return base_path

    stem = base_path.stem
    ext = base_path.suffix
    counter = 2
    while True:
        candidate = output_dir / "{}-{}{}".format(stem, counter, ext)
        if not candidate.exists():
            return candidate
        counter += 1


def write_text_atomic(path: Union[str, Path], content: str) -> Path:
    """Write UTF-8 text via a temp file in the same directory + os.replace()."""
    path = Path(path)
    fd, tmp_name = tempfile.mkstemp(prefix=".tmp-", suffix=path.suffix, dir=str(path.parent))
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
            f.write(content)
        os.replace(tmp_name, str(path))
    except BaseException:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise
    return path
