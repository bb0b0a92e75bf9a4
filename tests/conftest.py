"""Shared test fixtures for the subscribe test suite.

WHY: Multiple test modules need the same small json3 payloads and yt-dlp
metadata document. Centralizing them here avoids duplication and keeps
the expected phrases in one place next to the input they come from.

HOW: Module-level constants hold the wire documents; fixtures hand out
deep copies (dicts or encoded bytes) so a test can never leak changes
into another one.

RULES:
- MANUAL_JSON3 segments into MANUAL_PHRASES exactly (timestamps included)
- AUTOMATIC_JSON3 segments into AUTOMATIC_PHRASES exactly
- YTDLP_META is a trimmed-down but realistic --dump-json document
"""

import copy
import json
from typing import Any, Dict, List, Tuple

import pytest

from subscribe.core.ir import Chapter, Phrase, SubtitleSource, SubtitleTrack
from subscribe.core.transcript import Transcript


# ---------------------------------------------------------------------------
# Manual subtitle track: caption-sized blocks, no per-word timing
# ---------------------------------------------------------------------------

MANUAL_JSON3: Dict[str, Any] = {
    "wireMagic": "pb3",
    "pens": [{}],
    "events": [
        {"tStartMs": 0, "dDurationMs": 4000, "wWinId": 1,
         "segs": [{"utf8": "Welcome to the show. Today we"}]},
        {"tStartMs": 4000, "dDurationMs": 3000, "wWinId": 1,
         "segs": [{"utf8": "measure 2.6 meters of rope."}]},
        {"tStartMs": 7000, "dDurationMs": 2000, "segs": [{"utf8": "\n"}]},
        {"tStartMs": 9000, "dDurationMs": 2000, "segs": [{"utf8": "Wait... what?"}]},
    ],
}

# (timestamp_ms, text)
MANUAL_PHRASES: List[Tuple[int, str]] = [
    (0, "Welcome to the show."),
    (2897, "Today we measure 2.6 meters of rope."),
    (9000, "Wait..."),
    (10231, "what?"),
]


# ---------------------------------------------------------------------------
# Automatic (ASR) track: word fragments with offsets, newline events
# ---------------------------------------------------------------------------

AUTOMATIC_JSON3: Dict[str, Any] = {
    "wireMagic": "pb3",
    "events": [
        {"tStartMs": 0, "dDurationMs": 5000, "wWinId": 1,
         "segs": [
             {"utf8": "hello", "acAsrConf": 0},
             {"utf8": " world", "tOffsetMs": 400, "acAsrConf": 0},
             {"utf8": " this", "tOffsetMs": 800, "acAsrConf": 0},
         ]},
        {"tStartMs": 1200, "wWinId": 1, "aAppend": 1, "segs": [{"utf8": "\n"}]},
        {"tStartMs": 1500, "dDurationMs": 3000, "wWinId": 1,
         "segs": [
             {"utf8": "is"},
             {"utf8": " great.", "tOffsetMs": 300},
         ]},
        {"tStartMs": 5000, "dDurationMs": 2000, "wWinId": 1,
         "segs": [
             {"utf8": "after"},
             {"utf8": " a", "tOffsetMs": 200},
             {"utf8": " pause", "tOffsetMs": 400},
         ]},
        {"tStartMs": 8000, "dDurationMs": 400, "segs": [{"utf8": "then more"}]},
        {"tStartMs": 8500, "dDurationMs": 400, "segs": [{"utf8": ' "quoted."'}]},
    ],
}

AUTOMATIC_PHRASES: List[Tuple[int, str]] = [
    (0, "hello world this is great."),
    (5000, "after a pause"),
    (8000, 'then more "quoted."'),
]


# ---------------------------------------------------------------------------
# yt-dlp --dump-json output (trimmed)
# ---------------------------------------------------------------------------

AUTO_TRACK_URL = "https://example.test/api/timedtext?lang=en-orig&fmt=json3"

YTDLP_META: Dict[str, Any] = {
    "id": "abc123",
    "title": "The simplest tech stack",
    "uploader": "Dev Channel",
    "description": "Great #Python &amp; #python #web-dev",
    "upload_date": "20240115",
    "webpage_url": "https://www.youtube.com/watch?v=abc123",
    "duration": 200,
    "chapters": [
        {"start_time": 0.0, "end_time": 65.4, "title": "Intro"},
        {"start_time": 65.4, "end_time": 130.6, "title": "Stack"},
        {"start": 130.6, "title": "Outro"},
    ],
    "subtitles": {
        "en": [
            {"ext": "vtt", "url": "https://example.test/en.vtt"},
            {"ext": "json3", "url": "https://example.test/en.json3"},
        ],
    },
    "automatic_captions": {
        "de": [{"ext": "json3", "url": "https://example.test/de.json3"}],
        "en-orig": [
            {"ext": "srv1", "url": "https://example.test/en-orig.srv1"},
            {"ext": "json3", "url": AUTO_TRACK_URL},
        ],
    },
}


@pytest.fixture
def manual_json3():
    """Manual track as a decoded dict."""
    return copy.deepcopy(MANUAL_JSON3)


@pytest.fixture
def manual_json3_bytes():
    """Manual track as it comes off the wire."""
    return json.dumps(MANUAL_JSON3).encode("utf-8")


@pytest.fixture
def expected_manual_phrases():
    """(timestamp_ms, text) pairs that MANUAL_JSON3 segments into."""
    return list(MANUAL_PHRASES)


@pytest.fixture
def automatic_json3():
    """Automatic track as a decoded dict."""
    return copy.deepcopy(AUTOMATIC_JSON3)


@pytest.fixture
def automatic_json3_bytes():
    """Automatic track as it comes off the wire."""
    return json.dumps(AUTOMATIC_JSON3).encode("utf-8")


@pytest.fixture
def expected_automatic_phrases():
    """(timestamp_ms, text) pairs that AUTOMATIC_JSON3 segments into."""
    return list(AUTOMATIC_PHRASES)


@pytest.fixture
def ytdlp_meta():
    """yt-dlp metadata document as a decoded dict."""
    return copy.deepcopy(YTDLP_META)


@pytest.fixture
def sample_transcript():
    """Three phrases, two chapters: one before the first phrase, one inside."""
    return Transcript(
        title="Demo talk",
        track=SubtitleTrack(lang="en", source=SubtitleSource.MANUAL),
        phrases=[
            Phrase(timestamp_ms=1000, text="A."),
            Phrase(timestamp_ms=3000, text="B."),
            Phrase(timestamp_ms=5000, text="C."),
        ],
        chapters=[
            Chapter(start_seconds=0, title="Intro"),
            Chapter(start_seconds=5, title="Two"),
        ],
    )
