"""Command-line interface for the Caption Cleaner.

WHY: Users need a simple way to clean up caption files they downloaded
(yt-dlp dumps, YouTube auto-captions, transcript API JSON) from the
terminal. The CLI wires together input detection, the normalization
pipeline, and the pluggable formatters behind a single command.

HOW: Uses argparse to accept an input file, output format selection,
output directory, and normalization switches. Status messages go to
stderr; output files are saved next to the source (or to --output-dir).

RULES:
- Positional argument: caption file path (.vtt, .srt, .json) or "-" for stdin
- Validates file extension against SUPPORTED_CAPTION_FORMATS before reading
- --formats: comma-separated formatter keys (default: all registered)
- Output naming: {stem}-clean{ext}, numeric suffix for conflicts (-clean-2.srt)
- Status output goes to stderr (not stdout)
- Errors print "Error: ..." to stderr and exit with status 1
- Python 3.9 compatible: no match/case, no X | Y unions, no slots=True
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from caption_cleaner.config import SUPPORTED_CAPTION_FORMATS
from caption_cleaner.core.pipeline import (
    NormalizedTranscript,
    NoTranscriptError,
    normalize_segments,
    normalize_srt,
    normalize_vtt,
)
from caption_cleaner.formatters import FORMATTERS
from caption_cleaner.formatters.base import FormatterOutput

OUTPUT_TAG = "-clean"
STDIN_STEM = "transcript"


def _status(msg: str) -> None:
    """Print a status message to stderr.

    WHY: Status output must not pollute stdout so the CLI can be piped.
    """
    print(msg, file=sys.stderr, flush=True)


def _fail(msg: str) -> None:
    print("Error: {}".format(msg), file=sys.stderr)
    sys.exit(1)


def _detect_format(content: str) -> str:
    """Guess the caption format of stdin input: ".json", ".vtt" or ".srt"."""
    head = content.lstrip("\ufeff \t\r\n")
    if head.startswith("[") or head.startswith("{"):
        return ".json"
    if head.startswith("WEBVTT"):
        return ".vtt"
    return ".srt"


def _normalize(
    content: str,
    ext: str,
    preserve_styling: bool,
    deduplicate: bool,
) -> NormalizedTranscript:
    """Run the pipeline that matches the input format.

    Raises:
        ValueError: If JSON input is malformed or has no segment list.
        NoTranscriptError: If nothing usable is left.
    """
    if ext == ".json":
        data = json.loads(content)
        if isinstance(data, dict):
            data = data.get("segments")
        if not isinstance(data, list):
            raise ValueError("JSON input must be a list of segments or {\"segments\": [...]}")
        return normalize_segments(data)
    if ext == ".srt":
        return normalize_srt(content, deduplicate=deduplicate)
    return normalize_vtt(content, preserve_styling=preserve_styling, deduplicate=deduplicate)


def _resolve_output_path(stem: str, suffix: str, output_dir: Path) -> Path:
    """Resolve the output file path, adding a numeric suffix on conflict.

    WHY: Users may clean the same file several times. Overwriting earlier
    output would lose work.

    RULES:
    - First attempt: {stem}-clean{suffix} (e.g. talk-clean.vtt)
    - Conflict: counter before the extension (talk-clean-2.vtt), from 2 up
    """
    base_path = output_dir / "{}{}{}".format(stem, OUTPUT_TAG, suffix)
    if not base_path.exists():
        return base_path

    counter = 2
    while True:
        candidate = output_dir / "{}{}-{}{}".format(stem, OUTPUT_TAG, counter, suffix)
        if not candidate.exists():
            return candidate
        counter += 1


def _save_output(output: FormatterOutput, stem: str, output_dir: Path) -> Path:
    path = _resolve_output_path(stem, output.suffix, output_dir)
    path.write_text(output.content, encoding="utf-8")
    return path


def _run(args: argparse.Namespace) -> List[Path]:
    """Read, normalize, format and save. Returns the saved paths."""
    if args.input_file == "-":
        content = sys.stdin.read()
        ext = _detect_format(content)
        stem = STDIN_STEM
        default_dir = Path.cwd()
    else:
        input_path = Path(args.input_file).resolve()
        if not input_path.is_file():
            _fail("File not found: {}".format(input_path))
        ext = input_path.suffix.lower()
        if ext not in SUPPORTED_CAPTION_FORMATS:
            _fail("Unsupported file type '{}'. Supported formats: {}".format(
                ext, ", ".join(sorted(SUPPORTED_CAPTION_FORMATS))
            ))
        content = input_path.read_text(encoding="utf-8-sig")
        stem = input_path.stem
        default_dir = input_path.parent

    output_dir = Path(args.output_dir).resolve() if args.output_dir else default_dir
    if not output_dir.is_dir():
        _fail("Output directory does not exist: {}".format(output_dir))

    if args.formats:
        format_keys = [f.strip() for f in args.formats.split(",") if f.strip()]
        for key in format_keys:
            if key not in FORMATTERS:
                _fail("Unknown format '{}'. Available formats: {}".format(
                    key, ", ".join(sorted(FORMATTERS))
                ))
    else:
        format_keys = list(FORMATTERS)

    _status("Normalizing {} input...".format(ext.lstrip(".").upper()))
    try:
        transcript = _normalize(content, ext, args.preserve_styling, not args.no_dedup)
    except (ValueError, NoTranscriptError) as e:
        _fail(str(e))
    _status("  {} cues ({})".format(len(transcript.cues), transcript.transcript_type.value))

    saved_files: List[Path] = []
    for key in format_keys:
        formatter = FORMATTERS[key]()
        output = formatter.format(transcript.cues)
        saved_path = _save_output(output, stem, output_dir)
        saved_files.append(saved_path)
        _status("  Saved: {}".format(saved_path.name))

    _status("")
    _status("Done! Saved {} file(s) to {}".format(len(saved_files), output_dir))
    return saved_files


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the CLI.

    RULES:
    - Positional: input_file (required, "-" reads stdin)
    - Optional: --formats (comma-separated), --output-dir
    - Optional: --preserve-styling, --no-dedup, --verbose
    """
    parser = argparse.ArgumentParser(
        prog="caption_cleaner",
        description="Clean up YouTube captions (rolling auto-captions, repeated "
                    "lines, overlapping cues) and export them as VTT, SRT or text.",
    )

    parser.add_argument(
        "input_file",
        help="Caption file (.vtt, .srt, or .json segments), or '-' to read stdin.",
    )

    parser.add_argument(
        "--formats",
        default=None,
        help="Comma-separated list of output formats. "
             "Available: {}. Default: all.".format(", ".join(sorted(FORMATTERS))),
    )

    parser.add_argument(
        "--output-dir",
        default=None,
        help="Directory to save output files (default: same as input file).",
    )

    parser.add_argument(
        "--preserve-styling",
        action="store_true",
        help="Keep <b>, <i>, <u>, <em> and <strong> tags in WebVTT cue text.",
    )

    parser.add_argument(
        "--no-dedup",
        action="store_true",
        help="Skip merging of flicker cues, repeated lines and fragments.",
    )

    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log pipeline details to stderr.",
    )

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the CLI.

    RULES:
    - argv=None means use sys.argv (normal CLI invocation)
    - Explicit argv is for testing
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    _run(args)


if __name__ == "__main__":
    main()
