"""Core text-reconstruction modules.

WHY: The core package is the stable heart of SubScribe: the raw caption
model, the two segmenters, the chapter merge engine, and the Transcript
facade. Formatters and the CLI are thin I/O glue around it.

HOW: raw.py and parse.py decode json3 payloads, manual.py and automatic.py
turn raw events into phrases, segment.py picks the algorithm per source
kind, merge.py interleaves phrases with chapters, and transcript.py exposes
the rendering entry points. meta.py parses yt-dlp metadata.

RULES:
- No network, process or clock access; parse_json3_file() is the only
  filesystem read
- No logging: errors are raised for the caller to decide
- Inputs are never mutated; the merge engine sorts private copies
"""
