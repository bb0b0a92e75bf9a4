"""Decoding and validation of json3 caption payloads.

WHY: Caption payloads come from the network or from disk and may be
empty, truncated, or shaped differently than expected. The segmenters
need a well-typed RawCaptions, and callers need one typed error when the
payload is unusable.

HOW: Bytes are decoded as UTF-8 with invalid sequences dropped, the JSON
is loaded with the standard json module, then validated with jsonschema
against JSON3_SCHEMA before being mapped onto the raw dataclasses.

RULES:
- Empty input → DecodeError
- Invalid JSON or a schema violation → DecodeError (message names the path)
- Unknown fields are allowed everywhere (no additionalProperties: false)
- Invalid UTF-8 bytes are dropped, not replaced
- Never retried, never logged here: the caller decides
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Union

import jsonschema

from subscribe.core.raw import RawCaptions

_NULLABLE_INT = {"type": ["integer", "null"]}

JSON3_SCHEMA = {
    "type": "object",
    "properties": {
        "wireMagic": {"type": ["string", "null"]},
        "events": {
            "type": ["array", "null"],
            "items": {
                "type": "object",
                "properties": {
                    "tStartMs": _NULLABLE_INT,
                    "dDurationMs": _NULLABLE_INT,
                    "aAppend": _NULLABLE_INT,
                    "segs": {
                        "type": ["array", "null"],
                        "items": {
                            "type": "object",
                            "properties": {
                                "utf8": {"type": ["string", "null"]},
                                "tOffsetMs": _NULLABLE_INT,
                            },
                        },
                    },
                },
            },
        },
    },
}
"""Subset of the json3 wire schema the segmenters rely on."""


class DecodeError(ValueError):
    """Raised when a caption payload is empty, not JSON, or not json3-shaped."""


def _decode_text(data: Union[bytes, str]) -> str:
    if isinstance(data, bytes):
        text = data.decode("utf-8", errors="ignore")
    else:
        text = data
    return text.lstrip("\ufeff")


def parse_json3(data: Union[bytes, str]) -> RawCaptions:
    """Decode a json3 payload into the raw caption model.

    Args:
        data: The payload as downloaded (bytes) or already decoded (str).

    Returns:
        RawCaptions with one RawCaptionEvent per wire event.

    Raises:
        DecodeError: empty input, invalid JSON, or schema mismatch.
    """
    text = _decode_text(data) if data is not None else ""
    if not text.strip():
        raise DecodeError("parse json3: empty input")

    try:
        document = json.loads(text)
    except json.JSONDecodeError as e:
        raise DecodeError("parse json3: decode error: {}".format(e)) from e

    try:
        jsonschema.validate(instance=document, schema=JSON3_SCHEMA)
    except jsonschema.ValidationError as e:
        location = "/".join(str(p) for p in e.absolute_path) or "<root>"
        raise DecodeError(
            "parse json3: invalid payload at {}: {}".format(location, e.message)
        ) from e

    return RawCaptions.from_dict(document)


def parse_json3_file(path: Union[str, Path]) -> RawCaptions:
    """Read a json3 file from disk and decode it."""
    return parse_json3(Path(path).read_bytes())
