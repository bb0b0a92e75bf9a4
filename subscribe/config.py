"""Configuration constants and .env loading.

WHY: Centralizes all configurable values (chapter snapping threshold,
default layout and source kind, fetch limits) so they are easy to find,
update, and override without touching the pipeline code.

HOW: python-dotenv loads the .env file on import. Constants are defined
as module-level values read from the environment with explicit defaults.
env_int() gives a clear error when a numeric setting is malformed.

RULES:
- Every setting has a default and can be overridden via environment variables
- Numeric settings must be non-negative integers
- A chapter threshold of 0 means "always snap chapters to the nearest phrase"
"""

from __future__ import annotations

import os

from dotenv import load_dotenv

# Load .env from the project root (where the script is run from)
load_dotenv()


def env_int(name: str, default: int) -> int:
    """Read a non-negative integer setting from the environment.

    WHY: A typo in .env (e.g. "2s" instead of "2000") should fail loudly
    at startup, not silently fall back or crash deep in the pipeline.

    HOW: Reads os.environ, strips whitespace, parses with int().

    RULES:
    - Missing or empty variable → default
    - Non-integer or negative value → ValueError naming the variable
    """
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(
            "{} must be an integer, got {!r}".format(name, raw)
        ) from None
    if value < 0:
        raise ValueError("{} must be >= 0, got {}".format(name, value))
    return value


# ---------------------------------------------------------------------------
# Transcript rendering defaults
# ---------------------------------------------------------------------------

CHAPTER_THRESHOLD_MS = env_int("SUBSCRIBE_CHAPTER_THRESHOLD_MS", 0)
"""Max distance (ms) within which a chapter snaps onto its nearest phrase. 0 = always."""

DEFAULT_LAYOUT = os.getenv("SUBSCRIBE_LAYOUT", "plain").strip().lower()
DEFAULT_SOURCE = os.getenv("SUBSCRIBE_SOURCE", "automatic").strip().lower()
DEFAULT_FORMATS = os.getenv("SUBSCRIBE_FORMATS", "plain_text").strip()

# ---------------------------------------------------------------------------
# Chat prompt output
# ---------------------------------------------------------------------------

CHAT_PROMPT = os.getenv(
    "SUBSCRIBE_CHAT_PROMPT",
    "Summarize the following video transcript, then propose a list of "
    "chapters with their topics.",
)
PROMPT_MAX_BYTES = env_int("SUBSCRIBE_PROMPT_MAX_BYTES", 32000)
"""Prompts larger than this are still written, with a warning."""

# ---------------------------------------------------------------------------
# HTTP fetch limits
# ---------------------------------------------------------------------------

FETCH_TIMEOUT_S = env_int("SUBSCRIBE_FETCH_TIMEOUT_S", 15)
FETCH_MAX_BYTES = env_int("SUBSCRIBE_FETCH_MAX_BYTES", 10_000_000)
USER_AGENT = os.getenv("SUBSCRIBE_USER_AGENT", "SubScribe/1.0")
