"""Unit tests for yt-dlp metadata parsing and caption track selection.

WHY: Title, chapters and caption URLs all come from yt-dlp's JSON dump.
Picking a translated auto track instead of the original, or losing a
chapter that only has "start", silently degrades every transcript.

HOW: Parses the ytdlp_meta fixture from conftest.py and variations of it.
"""

import json
from datetime import date

import pytest

from subscribe.core.ir import OutputFormat, SubtitleSource, SubtitleTrack
from subscribe.core.meta import (
    CaptionDownload,
    MetadataError,
    NoSubtitleError,
    VideoMeta,
    parse_ytdlp_meta,
    select_track,
)


class TestParseYtdlpMeta:

    def test_basic_fields(self, ytdlp_meta):
        meta = parse_ytdlp_meta(ytdlp_meta)
        assert meta.id == "abc123"
        assert meta.title == "The simplest tech stack"
        assert meta.uploader == "Dev Channel"
        assert meta.upload_date == date(2024, 1, 15)
        assert meta.webpage_url == "https://www.youtube.com/watch?v=abc123"

    def test_accepts_bytes_and_str(self, ytdlp_meta):
        raw = json.dumps(ytdlp_meta)
        assert parse_ytdlp_meta(raw).id == "abc123"
        assert parse_ytdlp_meta(raw.encode("utf-8")).id == "abc123"

    def test_chapters(self, ytdlp_meta):
        meta = parse_ytdlp_meta(ytdlp_meta)
        assert [(c.start_seconds, c.title) for c in meta.chapters] == [
            (0, "Intro"),
            (65, "Stack"),
            (131, "Outro"),
        ]

    def test_chapter_half_seconds_round_up(self):
        meta = parse_ytdlp_meta({"id": "x", "chapters": [
            {"start_time": 2.5, "title": "A"},
            {"start_time": 64.5, "title": "B"},
            {"start": 0.5, "title": "C"},
        ]})
        assert [c.start_seconds for c in meta.chapters] == [3, 65, 1]
        assert meta.chapters[1].timestamp_hhmmss() == "00:01:05"

    def test_manual_tracks_are_json3_only(self, ytdlp_meta):
        meta = parse_ytdlp_meta(ytdlp_meta)
        assert meta.manual_tracks == [
            SubtitleTrack(
                lang="en",
                format=OutputFormat.JSON3,
                url="https://example.test/en.json3",
                source=SubtitleSource.MANUAL,
            ),
        ]

    def test_auto_tracks_are_original_language_only(self, ytdlp_meta):
        meta = parse_ytdlp_meta(ytdlp_meta)
        assert [t.lang for t in meta.auto_tracks] == ["en-orig"]
        assert meta.auto_tracks[0].source is SubtitleSource.AUTOMATIC

    def test_upload_date_falls_back_to_timestamp(self):
        meta = parse_ytdlp_meta({"id": "x", "timestamp": 1700000000})
        assert meta.upload_date == date(2023, 11, 14)

    def test_sparse_document(self):
        meta = parse_ytdlp_meta(b'{"id": "x"}')
        assert meta.title == ""
        assert meta.title_or_id() == "x"
        assert meta.chapters == []
        assert meta.upload_date is None

    @pytest.mark.parametrize("payload", [b"not json", b"[]", b'"text"'])
    def test_invalid_documents(self, payload):
        with pytest.raises(MetadataError):
            parse_ytdlp_meta(payload)


class TestSelectTrack:

    def test_per_source(self, ytdlp_meta):
        meta = parse_ytdlp_meta(ytdlp_meta)
        assert select_track(meta, SubtitleSource.MANUAL).url == "https://example.test/en.json3"
        assert select_track(meta, SubtitleSource.AUTOMATIC).lang == "en-orig"

    def test_track_without_url_is_skipped(self, ytdlp_meta):
        ytdlp_meta["subtitles"]["en"][1]["url"] = ""
        meta = parse_ytdlp_meta(ytdlp_meta)
        with pytest.raises(NoSubtitleError, match="manual subtitles"):
            select_track(meta, SubtitleSource.MANUAL)

    def test_no_tracks(self):
        with pytest.raises(NoSubtitleError, match="auto captions"):
            select_track(VideoMeta(id="x"), SubtitleSource.AUTOMATIC)


class TestCaptionDownload:

    def test_filename(self):
        download = CaptionDownload(
            title="The simplest tech stack",
            track=SubtitleTrack(lang="en-orig"),
        )
        assert download.filename() == "The simplest tech stack (en-orig).json"

    def test_filename_without_language(self):
        download = CaptionDownload(title="a/b", track=SubtitleTrack(lang=" "))
        assert download.filename() == "A b (und).json"

    def test_pretty_json(self):
        download = CaptionDownload(
            title="t", track=SubtitleTrack(lang="en"), data=b'{"events":[],"x":"\xc3\xa9"}',
        )
        assert download.pretty_json() == '{\n  "events": [],\n  "x": "é"\n}\n'

    def test_pretty_json_errors(self):
        with pytest.raises(ValueError, match="no data"):
            CaptionDownload(title="t", track=SubtitleTrack(lang="en")).pretty_json()
        with pytest.raises(ValueError, match="not supported"):
            CaptionDownload(
                title="t",
                track=SubtitleTrack(lang="en", format=OutputFormat.VTT),
                data=b"WEBVTT",
            ).pretty_json()
        with pytest.raises(ValueError, match="decode error"):
            CaptionDownload(title="t", track=SubtitleTrack(lang="en"), data=b"{").pretty_json()
