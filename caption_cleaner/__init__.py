"""Caption Cleaner: YouTube caption normalization and export hub.

WHY: YouTube caption tracks arrive in several shapes. Auto-generated
tracks are "rolling" WebVTT where every cue repeats the words of the
previous cue, manual tracks are plain WebVTT or SRT, and structured
transcript APIs return JSON segments. Displaying any of them as-is shows
duplicated words, overlapping timings, and inline markup.

HOW: Three-stage pipeline: fetch (transcript providers), normalize (core
parsers, rolling-cue reducer, deduplicator), export (pluggable formatters
for WebVTT, SRT, and plain text). Each stage is independently testable.

RULES:
- The core is pure and synchronous; all I/O lives in providers/storage/server
- All formatters consume the same list of normalized Cue objects
- Adding a new output format = one new formatter module, no core changes
"""

__version__ = "0.1.0"
