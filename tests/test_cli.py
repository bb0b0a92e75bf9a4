"""End-to-end tests for the command-line interface.

WHY: The CLI is where every module meets: metadata, fetching, parsing,
segmentation, merging, formatters and file output. These tests run main()
exactly as the console script does, against files in tmp_path.

HOW: Caption payloads come from conftest.py. Downloads go through a
CaptionFetcher wired to httpx.MockTransport (monkeypatched into the cli
module), so no test touches the network.

RULES:
- Errors must exit 1 with "Error: ..." on stderr
- Status messages never reach stdout
"""

import json

import httpx
import pytest

from subscribe import cli
from subscribe.api.client import CaptionFetcher

MANUAL_TEXT = (
    "Welcome to the show.\n"
    "Today we measure 2.6 meters of rope.\n"
    "Wait...\n"
    "what?\n"
)


@pytest.fixture
def manual_file(tmp_path, manual_json3_bytes):
    path = tmp_path / "My talk.json3"
    path.write_bytes(manual_json3_bytes)
    return path


@pytest.fixture
def info_json(tmp_path, ytdlp_meta):
    path = tmp_path / "abc123.info.json"
    path.write_text(json.dumps(ytdlp_meta), encoding="utf-8")
    return path


@pytest.fixture
def mock_fetcher(monkeypatch, automatic_json3_bytes):
    """Serve the automatic sample payload for every download."""
    requested = []

    def handler(request):
        requested.append(str(request.url))
        return httpx.Response(200, content=automatic_json3_bytes)

    monkeypatch.setattr(
        cli, "CaptionFetcher",
        lambda: CaptionFetcher(transport=httpx.MockTransport(handler)),
    )
    return requested


class TestParser:

    def test_defaults(self):
        args = cli.build_parser().parse_args([])
        assert args.captions is None
        assert args.source == "automatic"
        assert args.layout == "plain"
        assert args.threshold_ms == 0
        assert args.formats == "plain_text"
        assert not args.stdout

    def test_all_flags(self):
        args = cli.build_parser().parse_args([
            "c.json3", "--source", "manual", "--info-json", "i.json", "--title", "T",
            "--no-chapters", "--layout", "collapsed", "--threshold-ms", "500",
            "--formats", "markdown", "--output-dir", "out", "--stdout",
            "--save-raw", "--verbose",
        ])
        assert args.threshold_ms == 500
        assert args.no_chapters and args.save_raw and args.verbose


class TestLocalFile:

    def test_writes_plain_text_next_to_input(self, manual_file, tmp_path, capsys):
        cli.main([str(manual_file), "--source", "manual"])
        out = tmp_path / "My talk.txt"
        assert out.read_text(encoding="utf-8") == MANUAL_TEXT
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "Saved: My talk.txt" in captured.err

    def test_stdout(self, manual_file, tmp_path, capsys):
        cli.main([str(manual_file), "--source", "manual", "--stdout"])
        assert capsys.readouterr().out == MANUAL_TEXT
        assert not (tmp_path / "My talk.txt").exists()

    def test_stdout_collapsed(self, manual_file, capsys):
        cli.main([str(manual_file), "--source", "manual", "--stdout", "--layout", "collapsed"])
        assert capsys.readouterr().out == (
            "Welcome to the show. Today we measure 2.6 meters of rope. Wait... what?\n"
        )

    def test_all_formats_to_output_dir(self, manual_file, tmp_path):
        out_dir = tmp_path / "out"
        out_dir.mkdir()
        cli.main([
            str(manual_file), "--source", "manual", "--title", "Custom",
            "--formats", "all", "--output-dir", str(out_dir),
        ])
        names = sorted(p.name for p in out_dir.iterdir())
        assert names == [
            "Custom (collapsed).txt", "Custom (prompt).txt", "Custom.md", "Custom.txt",
        ]
        md = (out_dir / "Custom.md").read_text(encoding="utf-8")
        assert md.startswith("# Custom\n\n#youtube #source\n\nWelcome to the show.\n")

    def test_second_run_does_not_overwrite(self, manual_file, tmp_path):
        cli.main([str(manual_file), "--source", "manual"])
        cli.main([str(manual_file), "--source", "manual"])
        assert (tmp_path / "My talk.txt").exists()
        assert (tmp_path / "My talk-2.txt").exists()

    def test_save_raw(self, manual_file, tmp_path):
        cli.main([str(manual_file), "--source", "manual", "--save-raw"])
        raw = tmp_path / "My talk (und).json"
        assert json.loads(raw.read_text(encoding="utf-8"))["wireMagic"] == "pb3"


class TestInfoJson:

    def test_track_url_from_metadata(self, info_json, tmp_path, mock_fetcher):
        cli.main([
            "--info-json", str(info_json), "--formats", "markdown",
            "--output-dir", str(tmp_path),
        ])
        assert mock_fetcher == ["https://example.test/api/timedtext?lang=en-orig&fmt=json3"]
        md = (tmp_path / "The simplest tech stack.md").read_text(encoding="utf-8")
        assert md.startswith(
            "# The simplest tech stack\n"
            "\n"
            "#youtube #source #python #web-dev\n"
            "\n"
            "- [00:00:00](https://www.youtube.com/watch?v=abc123&t=0s) - Intro\n"
        )
        assert md.endswith(
            "## Intro\n"
            "\n"
            "hello world this is great.\n"
            "after a pause\n"
            'then more "quoted."\n'
            "\n"
            "## Stack\n"
            "\n"
            "## Outro\n"
        )

    def test_no_chapters(self, info_json, mock_fetcher, capsys):
        cli.main(["--info-json", str(info_json), "--no-chapters", "--stdout"])
        assert capsys.readouterr().out == (
            "hello world this is great.\n"
            "after a pause\n"
            'then more "quoted."\n'
        )

    def test_url_positional(self, tmp_path, mock_fetcher, capsys):
        cli.main(["https://example.test/track.json3", "--stdout", "--title", "Remote"])
        assert mock_fetcher == ["https://example.test/track.json3"]
        assert capsys.readouterr().out.startswith("hello world this is great.\n")

    def test_manual_source_selects_manual_track(self, info_json, mock_fetcher, capsys):
        cli.main(["--info-json", str(info_json), "--source", "manual", "--stdout"])
        assert mock_fetcher == ["https://example.test/en.json3"]
        assert capsys.readouterr().out != ""


class TestErrors:

    def _exit_code(self, argv, capsys):
        with pytest.raises(SystemExit) as exc_info:
            cli.main(argv)
        err = capsys.readouterr().err
        assert "Error:" in err
        return exc_info.value.code

    def test_missing_file(self, tmp_path, capsys):
        assert self._exit_code([str(tmp_path / "nope.json3")], capsys) == 1

    def test_no_input_at_all(self, capsys):
        assert self._exit_code([], capsys) == 1

    def test_unknown_format(self, manual_file, capsys):
        assert self._exit_code([str(manual_file), "--formats", "pdf"], capsys) == 1

    def test_unknown_layout(self, manual_file, capsys):
        assert self._exit_code([str(manual_file), "--layout", "grid"], capsys) == 1

    def test_unknown_source(self, manual_file, capsys):
        assert self._exit_code([str(manual_file), "--source", "live"], capsys) == 1

    def test_negative_threshold(self, manual_file, capsys):
        assert self._exit_code([str(manual_file), "--threshold-ms", "-5"], capsys) == 1

    def test_invalid_payload(self, tmp_path, capsys):
        path = tmp_path / "broken.json3"
        path.write_text("{not json", encoding="utf-8")
        assert self._exit_code([str(path)], capsys) == 1

    def test_empty_transcript(self, tmp_path, capsys):
        path = tmp_path / "empty.json3"
        path.write_text('{"events": []}', encoding="utf-8")
        assert self._exit_code([str(path)], capsys) == 1

    def test_no_track_in_metadata(self, tmp_path, capsys):
        path = tmp_path / "meta.json"
        path.write_text('{"id": "x"}', encoding="utf-8")
        assert self._exit_code(["--info-json", str(path)], capsys) == 1

    def test_http_error(self, monkeypatch, capsys):
        monkeypatch.setattr(
            cli, "CaptionFetcher",
            lambda: CaptionFetcher(transport=httpx.MockTransport(lambda r: httpx.Response(403))),
        )
        assert self._exit_code(["https://example.test/x.json3"], capsys) == 1
