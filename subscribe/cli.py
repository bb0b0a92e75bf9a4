"""Command-line interface for the SubScribe transcript builder.

WHY: Users need a simple way to turn a downloaded (or downloadable)
YouTube json3 caption track into a readable transcript from the terminal.
The CLI wires together the full pipeline (metadata loading, caption
fetching, json3 parsing, segmentation into phrases, chapter merging,
pluggable formatter output, and file saving) behind a single command.

HOW: Uses argparse to accept a caption source (file path or URL), an
optional yt-dlp metadata file (title, chapters, track URLs), the caption
kind, layout and chapter snapping options, output format selection, and
output directory. Runs the async pipeline via asyncio.run(). Status
messages go to stderr; output files are saved next to the caption file
(or to --output-dir, or the CWD for URLs).

RULES:
- Positional argument: caption file path or http(s) URL; may be omitted
  when --info-json carries a track URL for the requested --source
- Title: --title, else the metadata title (or video id), else the file stem
- Chapters come from --info-json unless --no-chapters is given
- --formats: comma-separated formatter keys, or "all"
- Output naming: "<Title>.txt", numeric suffix for conflicts ("<Title>-2.txt")
- --stdout prints the rendered transcript instead of writing files
- Status output goes to stderr (not stdout)
- Errors exit 1 with "Error: ..." on stderr; Ctrl-C exits 130
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import List, Optional

from subscribe.api.client import CaptionFetcher, FetchError
from subscribe.config import (
    CHAPTER_THRESHOLD_MS,
    DEFAULT_FORMATS,
    DEFAULT_LAYOUT,
    DEFAULT_SOURCE,
)
from subscribe.core.ir import Chapter, SubtitleSource, SubtitleTrack, TextLayout
from subscribe.core.meta import (
    CaptionDownload,
    NoSubtitleError,
    VideoMeta,
    parse_ytdlp_meta,
    select_track,
)
from subscribe.core.parse import parse_json3
from subscribe.core.segment import segment
from subscribe.core.transcript import Transcript, build_transcript
from subscribe.formatters import FORMATTERS
from subscribe.formatters.base import BaseFormatter, FormatterOutput
from subscribe.formatters.markdown import MarkdownFormatter
from subscribe.fsutil import resolve_output_path, write_text_atomic
from subscribe.notes import BASE_TAGS, find_hashtags

logger = logging.getLogger(__name__)


def _status(msg: str) -> None:
    """Print a status message to stderr.

    WHY: Status output must not pollute stdout so the CLI can be piped.

    RULES:
    - All status messages go to stderr
    - Always flush after writing
    """
    print(msg, file=sys.stderr, flush=True)


def _is_url(value: str) -> bool:
    return value.startswith("http://") or value.startswith("https://")


def _parse_format_keys(value: str) -> List[str]:
    """Split and validate the --formats value.

    RULES:
    - "all" (or an empty value) selects every registered formatter
    - Unknown keys raise ValueError listing the available ones
    """
    value = (value or "").strip()
    if not value or value == "all":
        return list(FORMATTERS.keys())
    keys = [k.strip() for k in value.split(",") if k.strip()]
    for key in keys:
        if key not in FORMATTERS:
            raise ValueError(
                "Unknown format '{}'. Available formats: {}".format(
                    key, ", ".join(sorted(FORMATTERS.keys()))
                )
            )
    return keys


def _make_formatter(
    key: str,
    layout: TextLayout,
    threshold_ms: int,
    meta: Optional[VideoMeta],
) -> BaseFormatter:
    """Instantiate a registered formatter with the run's options.

    RULES:
    - plain_text follows --layout; collapsed_text is always collapsed
    - markdown gets the base tags plus hashtags from the video description,
      and links its chapter index to the video page when known
    """
    cls = FORMATTERS[key]
    if cls is MarkdownFormatter:
        tags = list(BASE_TAGS)
        base_url = ""
        if meta is not None:
            tags.extend(t for t in find_hashtags(meta.description) if t not in tags)
            base_url = meta.webpage_url
        return MarkdownFormatter(
            tags=tags, base_url=base_url, layout=layout, threshold_ms=threshold_ms,
        )
    if key == "plain_text":
        return cls(layout=layout, threshold_ms=threshold_ms)
    return cls(threshold_ms=threshold_ms)


def _save_output(output: FormatterOutput, output_dir: Path) -> Path:
    """Save one formatter output with conflict avoidance; return the path."""
    path = resolve_output_path(output.filename, output_dir)
    return write_text_atomic(path, output.content)


def _resolve_title(args: argparse.Namespace, meta: Optional[VideoMeta]) -> str:
    if args.title and args.title.strip():
        return args.title.strip()
    if meta is not None and meta.title_or_id():
        return meta.title_or_id()
    if args.captions and not _is_url(args.captions):
        stem = Path(args.captions).name
        for suffix in (".json3", ".json"):
            if stem.endswith(suffix):
                stem = stem[: -len(suffix)]
                break
        return stem
    return ""


def _resolve_track(
    args: argparse.Namespace,
    source: SubtitleSource,
    meta: Optional[VideoMeta],
) -> SubtitleTrack:
    """Pick the caption track: metadata lookup, or one described by the args.

    Raises:
        NoSubtitleError: no positional captions and no matching track URL
            in the metadata.
        ValueError: neither captions nor --info-json were given.
    """
    if not args.captions:
        if meta is None:
            raise ValueError("a caption file or URL is required without --info-json")
        return select_track(meta, source)

    lang = ""
    if meta is not None:
        known = meta.tracks_for(source)
        if known:
            lang = known[0].lang
    url = args.captions if _is_url(args.captions) else ""
    return SubtitleTrack(lang=lang, url=url, source=source)


async def _load_captions(args: argparse.Namespace, track: SubtitleTrack) -> bytes:
    """Read the caption payload from disk, or download it."""
    if args.captions and not _is_url(args.captions):
        path = Path(args.captions)
        if not path.is_file():
            raise FileNotFoundError("File not found: {}".format(path.resolve()))
        _status("Reading {}...".format(path.name))
        return path.read_bytes()

    _status("Downloading {}...".format(track))
    async with CaptionFetcher() as fetcher:
        data = await fetcher.fetch_bytes(track.url)
    _status("  Downloaded {} bytes".format(len(data)))
    return data


def _output_dir(args: argparse.Namespace) -> Path:
    if args.output_dir:
        output_dir = Path(args.output_dir).resolve()
    elif args.captions and not _is_url(args.captions):
        output_dir = Path(args.captions).resolve().parent
    else:
        output_dir = Path.cwd()
    if not output_dir.is_dir():
        raise FileNotFoundError("Output directory does not exist: {}".format(output_dir))
    return output_dir


async def _build(args: argparse.Namespace) -> tuple:
    """Run the load → parse → segment → assemble stages.

    Returns:
        Tuple of (transcript, downloaded payload, metadata or None).
    """
    source = SubtitleSource.parse(args.source)

    meta: Optional[VideoMeta] = None
    if args.info_json:
        info_path = Path(args.info_json)
        _status("Loading metadata from {}...".format(info_path.name))
        meta = parse_ytdlp_meta(info_path.read_bytes())
        _status("  {} chapters, {} manual / {} auto tracks".format(
            len(meta.chapters), len(meta.manual_tracks), len(meta.auto_tracks),
        ))

    track = _resolve_track(args, source, meta)
    data = await _load_captions(args, track)

    _status("Parsing {}...".format(source.describe()))
    raw = parse_json3(data)
    phrases = segment(raw, source)
    _status("  {} events → {} phrases".format(len(raw.events), len(phrases)))

    chapters: List[Chapter] = []
    if meta is not None and not args.no_chapters:
        chapters = meta.chapters

    transcript = build_transcript(_resolve_title(args, meta), track, phrases, chapters)
    return transcript, data, meta


def _write_outputs(
    args: argparse.Namespace,
    transcript: Transcript,
    data: bytes,
    meta: Optional[VideoMeta],
    layout: TextLayout,
) -> List[Path]:
    output_dir = _output_dir(args)
    format_keys = _parse_format_keys(args.formats)

    saved_files: List[Path] = []

    if args.save_raw:
        download = CaptionDownload(title=transcript.title, track=transcript.track, data=data)
        path = resolve_output_path(download.filename(), output_dir)
        saved_files.append(write_text_atomic(path, download.pretty_json()))
        _status("  Saved: {}".format(path.name))

    _status("Formatting output...")
    for key in format_keys:
        formatter = _make_formatter(key, layout, args.threshold_ms, meta)
        _status("  Running {} formatter...".format(formatter.name))
        for output in formatter.format(transcript):
            saved_path = _save_output(output, output_dir)
            saved_files.append(saved_path)
            _status("  Saved: {}".format(saved_path.name))

    _status("")
    _status("Done! Saved {} file(s) to {}".format(len(saved_files), output_dir))
    return saved_files


async def _run_pipeline(args: argparse.Namespace) -> None:
    """Execute the full transcript pipeline.

    WHY: This is the async core of the CLI. It orchestrates all steps
    from loading the captions through formatting and saving.

    RULES:
    - Validate options (layout, threshold, formats) before any I/O
    - Status messages to stderr at each step
    - --stdout writes only the transcript to stdout
    - Errors are reported as "Error: ..." and exit 1
    """
    try:
        layout = TextLayout.parse(args.layout)
        if args.threshold_ms < 0:
            raise ValueError("--threshold-ms must be >= 0, got {}".format(args.threshold_ms))
        if not args.stdout:
            _parse_format_keys(args.formats)

        transcript, data, meta = await _build(args)

        if args.stdout:
            transcript.require_phrases()
            sys.stdout.write(transcript.render(layout, args.threshold_ms))
            sys.stdout.flush()
            return

        _write_outputs(args, transcript, data, meta, layout)

    except (ValueError, NoSubtitleError, FetchError, OSError) as e:
        logger.debug("Pipeline failed", exc_info=True)
        print("Error: {}".format(e), file=sys.stderr)
        sys.exit(1)


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the CLI.

    WHY: Separating parser construction from main() makes the CLI
    testable: tests can inspect the parser without running the pipeline.
    """
    parser = argparse.ArgumentParser(
        prog="subscribe",
        description="Build readable transcripts (plain text, collapsed text, Markdown) "
                    "from YouTube json3 caption tracks.",
    )

    parser.add_argument(
        "captions",
        nargs="?",
        default=None,
        help="Path or http(s) URL of a json3 caption track. "
             "Optional when --info-json provides a track URL.",
    )

    parser.add_argument(
        "--source",
        default=DEFAULT_SOURCE,
        help="Caption kind: 'manual' or 'automatic' (default: %(default)s).",
    )

    parser.add_argument(
        "--info-json",
        default=None,
        help="Path to yt-dlp --dump-json output (title, chapters, track URLs).",
    )

    parser.add_argument(
        "--title",
        default=None,
        help="Title used for the output file names and Markdown heading.",
    )

    parser.add_argument(
        "--no-chapters",
        action="store_true",
        help="Ignore chapter markers from --info-json.",
    )

    parser.add_argument(
        "--layout",
        default=DEFAULT_LAYOUT,
        help="Text layout: 'plain' (one phrase per line) or 'collapsed' "
             "(one paragraph per chapter) (default: %(default)s).",
    )

    parser.add_argument(
        "--threshold-ms",
        type=int,
        default=CHAPTER_THRESHOLD_MS,
        help="Snap a chapter onto its nearest phrase only within this many "
             "milliseconds; 0 always snaps (default: %(default)s).",
    )

    parser.add_argument(
        "--formats",
        default=DEFAULT_FORMATS,
        help="Comma-separated list of output formats, or 'all'. "
             "Available: {}. Default: %(default)s.".format(", ".join(sorted(FORMATTERS.keys()))),
    )

    parser.add_argument(
        "--output-dir",
        default=None,
        help="Directory to save output files (default: next to the caption "
             "file, or the current directory for URLs).",
    )

    parser.add_argument(
        "--stdout",
        action="store_true",
        help="Print the transcript to stdout instead of writing files.",
    )

    parser.add_argument(
        "--save-raw",
        action="store_true",
        help="Also save the caption payload as pretty-printed JSON.",
    )

    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging.",
    )

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the CLI.

    WHY: This is the function that __main__.py and the ``subscribe``
    console script call.

    RULES:
    - argv=None means use sys.argv (normal CLI invocation)
    - Explicit argv is for testing
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )

    try:
        asyncio.run(_run_pipeline(args))
    except KeyboardInterrupt:
        _status("\nCancelled by user.")
        sys.exit(130)


if __name__ == "__main__":
    main()
