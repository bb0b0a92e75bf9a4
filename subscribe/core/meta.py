"""yt-dlp metadata parsing and caption track selection.

WHY: Chapter markers, the video title and the caption track URLs all come
from yt-dlp's ``--dump-json`` output. The transcript pipeline only needs a
small, typed slice of that very large document.

HOW: parse_ytdlp_meta() loads the JSON and maps the relevant keys onto
VideoMeta. select_track() picks the first usable track for a source kind.
CaptionDownload bundles a selected track with its downloaded payload and
knows how to name and pretty-print it.

RULES:
- Chapters: "start_time" wins, "start" is the fallback; rounded to whole
  seconds with halves going away from zero (2.5 → 3)
- Manual tracks: every "subtitles" entry in json3 format
- Automatic tracks: only "automatic_captions" languages ending in "-orig"
  (the untranslated ASR track), json3 format only
- Tracks are ordered by language key for deterministic selection
- A track without URL is never selected
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional, Union

from subscribe.core.ir import Chapter, OutputFormat, SubtitleSource, SubtitleTrack
from subscribe.core.text import round_half_away
from subscribe.fsutil import sanitize_filename

ORIGINAL_LANGUAGE_SUFFIX = "-orig"


class MetadataError(ValueError):
    """Raised when the yt-dlp metadata document cannot be decoded."""


class NoSubtitleError(LookupError):
    """Raised when no usable caption track exists for the requested source."""


@dataclass
class VideoMeta:
    """The subset of yt-dlp metadata the transcript pipeline uses."""

    id: str
    title: str = ""
    uploader: str = ""
    description: str = ""
    upload_date: Optional[date] = None
    webpage_url: str = ""
    chapters: List[Chapter] = field(default_factory=list)
    manual_tracks: List[SubtitleTrack] = field(default_factory=list)
    auto_tracks: List[SubtitleTrack] = field(default_factory=list)

    def title_or_id(self) -> str:
        return self.title or self.id

    def tracks_for(self, source: SubtitleSource) -> List[SubtitleTrack]:
        if source is SubtitleSource.MANUAL:
            return self.manual_tracks
        return self.auto_tracks


def _parse_upload_date(doc: Dict[str, Any]) -> Optional[date]:
    raw = doc.get("upload_date")
    if raw:
        try:
            return datetime.strptime(str(raw), "%Y%m%d").date()
        except ValueError:
            pass
    ts = doc.get("timestamp")
    if ts:
        return datetime.fromtimestamp(int(ts), tz=timezone.utc).date()
    return None


def _parse_chapters(items: Optional[List[Dict[str, Any]]]) -> List[Chapter]:
    chapters: List[Chapter] = []
    for item in items or []:
        start = item.get("start_time") or item.get("start") or 0
        chapters.append(Chapter(
            start_seconds=round_half_away(float(start)),
            title=str(item.get("title") or ""),
        ))
    return chapters


def _select_tracks(
    tracks_by_lang: Optional[Dict[str, List[Dict[str, Any]]]],
    source: SubtitleSource,
    only_original: bool,
) -> List[SubtitleTrack]:
    out: List[SubtitleTrack] = []
    for lang in sorted(tracks_by_lang or {}):
        if only_original and not lang.endswith(ORIGINAL_LANGUAGE_SUFFIX):
            continue
        for item in tracks_by_lang[lang] or []:
            try:
                fmt = OutputFormat.parse(item.get("ext", ""))
            except ValueError:
                continue
            if fmt is not OutputFormat.JSON3:
                continue
            out.append(SubtitleTrack(
                lang=lang,
                format=fmt,
                url=item.get("url") or "",
                source=source,
            ))
    return out


def parse_ytdlp_meta(data: Union[bytes, str, Dict[str, Any]]) -> VideoMeta:
    """Build VideoMeta from a yt-dlp JSON document.

    Args:
        data: Raw JSON (bytes/str) or an already-decoded dict.

    Raises:
        MetadataError: invalid JSON or a non-object document.
    """
    if isinstance(data, dict):
        doc = data
    else:
        try:
            doc = json.loads(data)
        except (TypeError, ValueError) as e:
            raise MetadataError("unmarshal yt-dlp output: {}".format(e)) from e
    if not isinstance(doc, dict):
        raise MetadataError("unmarshal yt-dlp output: expected a JSON object")

    return VideoMeta(
        id=str(doc.get("id") or ""),
        title=str(doc.get("title") or ""),
        uploader=str(doc.get("uploader") or ""),
        description=str(doc.get("description") or ""),
        upload_date=_parse_upload_date(doc),
        webpage_url=str(doc.get("webpage_url") or ""),
        chapters=_parse_chapters(doc.get("chapters")),
        manual_tracks=_select_tracks(doc.get("subtitles"), SubtitleSource.MANUAL, False),
        auto_tracks=_select_tracks(
            doc.get("automatic_captions"), SubtitleSource.AUTOMATIC, True,
        ),
    )


def select_track(meta: VideoMeta, source: SubtitleSource) -> SubtitleTrack:
    """Return the first track with a URL for the given source kind.

    Raises:
        NoSubtitleError: no such track.
    """
    for track in meta.tracks_for(source):
        if track.url:
            return track
    raise NoSubtitleError(
        "no {} available for {!r}".format(source.describe(), meta.title_or_id())
    )


@dataclass
class CaptionDownload:
    """A selected caption track together with its downloaded payload."""

    title: str
    track: SubtitleTrack
    data: bytes = b""

    def filename(self) -> str:
        """e.g. "The simplest tech stack (en).json"."""
        base = sanitize_filename(self.title.strip())
        lang = self.track.lang.strip() or "und"
        ext = self.track.format.value
        if ext == "json3":
            ext = "json"
        return "{} ({}).{}".format(base, lang, ext)

    def pretty_json(self) -> str:
        """Indented version of the payload, for saving the raw track.

        Raises:
            ValueError: no data, a non-JSON track format, or invalid JSON.
        """
        if not self.data:
            raise ValueError("no data to pretty-print")
        if self.track.format is not OutputFormat.JSON3:
            raise ValueError(
                "pretty-print not supported for format {!r}".format(self.track.format.value)
            )
        try:
            decoded = json.loads(self.data.decode("utf-8", errors="ignore"))
        except ValueError as e:
            raise ValueError("pretty json: decode error: {}".format(e)) from e
        return json.dumps(decoded, indent=2, ensure_ascii=False) + "\n"
