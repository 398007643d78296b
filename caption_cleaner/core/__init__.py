"""Core caption normalization modules.

WHY: The core package is the stable heart of the cleaner: the cue
dataclasses, the timestamp codec, the parsers, and the two normalization
algorithms. Providers, formatters, the CLI, and the HTTP API all consume it.

HOW: ir.py defines the data structures, timestamps.py converts times,
vtt_parser.py/srt_parser.py/segments.py build cue lists from raw input,
rolling.py and dedup.py clean them, pipeline.py chains the stages.

RULES:
- Pure, synchronous code only, no network or file I/O in this package
- Functions never mutate the cue lists they receive
- Malformed cues are dropped or passed through, never fatal
"""
