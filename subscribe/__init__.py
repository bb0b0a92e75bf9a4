"""SubScribe — caption-to-transcript reconstruction for YouTube videos.

WHY: YouTube caption tracks ("json3") are either author-written blocks or
word-level ASR fragments. Neither reads like a transcript. This package
rebuilds sentence-like phrases from both kinds of track and merges them
with the video's chapter markers into one readable document.

HOW: Three-stage pipeline — ingest (parse json3, yt-dlp metadata, optional
HTTP fetch), segment (manual or automatic algorithm → Phrase list), render
(chapter merge engine + pluggable formatters). Each stage is independently
testable.

RULES:
- The core (subscribe.core) is pure: no I/O, no logging, no clocks
- All formatters consume the same Transcript
- Adding a new output format = one new formatter module, no core changes
"""

__version__ = "0.1.0"
