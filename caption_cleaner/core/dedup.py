"""Cue deduplicator/merger ("SRT Algo") for overlapping caption cues.

WHY: Caption exports from YouTube (SRT dumps, rolling-reduced VTT) still
carry artifacts after parsing: sub-150ms flicker cues that repeat the
previous text, lines that repeat the last line of the previous cue,
one- and two-word fragments split off a sentence, and cues whose times
overlap or run backwards. Transcript views and exports need clean,
disjoint cues.

HOW: An explicit left fold (functools.reduce) over the cue list with a
_MergeState accumulator (emitted cues + the pending "previous" cue).
Each step compares the incoming cue with the pending one and either
absorbs it into the pending cue, trims it, or emits the pending cue and
makes the incoming one pending. The fold is repeated until its output
stops changing, so the result is a fixed point.

RULES:
- Output: non-decreasing starts, end <= next start, end >= start,
  no empty or whitespace-only text
- Thresholds are named, tunable values (config.py / MergeThresholds)
- Never raises: on any internal failure the input is returned unchanged
- Input cues are never mutated (Cue is frozen)
"""

from __future__ import annotations

import functools
import logging
from dataclasses import dataclass, field, replace
from typing import List, Optional

from caption_cleaner import config
from caption_cleaner.core.ir import Cue

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MergeThresholds:
    """Heuristic limits used by the merge steps.

    Defaults come from config.py, which reads the environment.
    """

    flicker_max_duration_ms: int = config.FLICKER_MAX_DURATION_MS
    short_cue_max_words: int = config.SHORT_CUE_MAX_WORDS
    title_min_chars: int = config.TITLE_MIN_CHARS


@dataclass
class _MergeState:
    emitted: List[Cue] = field(default_factory=list)
    previous: Optional[Cue] = None


def _words(text: str) -> List[str]:
    return text.split()


def _joined(text: str) -> str:
    return " ".join(_words(text))


def _longest_overlap(prev_tokens: List[str], curr_tokens: List[str]) -> int:
    """Length of the longest suffix of prev_tokens that prefixes curr_tokens."""
    max_len = min(len(prev_tokens), len(curr_tokens))
    for size in range(max_len, 0, -1):
        if prev_tokens[-size:] == curr_tokens[:size]:
            return size
    return 0


def _extend(previous: Cue, current: Cue, text: Optional[str] = None) -> Cue:
    return replace(
        previous,
        end_ms=max(previous.end_ms, current.end_ms),
        text=previous.text if text is None else text,
    )


def _is_heading(cue: Cue, thresholds: MergeThresholds, max_words: int) -> bool:
    return (
        len(cue.lines) == 1
        and 0 < cue.word_count <= max_words
        and len(cue.text.strip()) > thresholds.title_min_chars
    )


def _is_repaired_boundary(previous: Cue, current: Cue) -> bool:
    """True if previous ends exactly 1 ms before current starts.

    That gap is what the overlap clamp leaves behind, so the pair was
    already split by an earlier pass (e.g. after a repeated lead was
    stripped).
    """
    return current.start_ms == previous.end_ms + 1


def _strip_repeated_lead(previous: Cue, current: Cue) -> Optional[str]:
    """Remove the words of current that repeat the end of previous.

    Returns the remaining text ("" when nothing is left), or None when
    current does not repeat previous at all.
    """
    prev_last = _words(previous.lines[-1])
    cur_lines = current.lines
    cur_first = _words(cur_lines[0])

    if cur_first and cur_first == prev_last:
        rest = [line for line in cur_lines[1:] if line.strip()]
        return "\n".join(rest)

    overlap = _longest_overlap(prev_last, cur_first)
    if overlap == 0:
        return None
    first_rest = " ".join(cur_first[overlap:])
    rest = [line for line in [first_rest] + cur_lines[1:] if line.strip()]
    return "\n".join(rest)


def _merge_step(thresholds: MergeThresholds, state: _MergeState, current: Cue) -> _MergeState:
    """Fold one cue into the accumulator."""
    if not current.text.strip():
        return state

    previous = state.previous
    if previous is None:
        state.previous = current
        return state

    # Flicker: a blink-length cue repeating text already on screen
    if (
        current.duration_ms < thresholds.flicker_max_duration_ms
        and _joined(current.text) in _joined(previous.text)
    ):
        state.previous = _extend(previous, current)
        return state

    single_word = False
    stripped = False
    prev_last = previous.lines[-1].strip()
    cur_first = current.lines[0].strip()

    if prev_last == cur_first and _is_heading(previous, thresholds, thresholds.short_cue_max_words):
        # Heading folded forward: it becomes the start of current's first line
        rest = [line.strip() for line in current.lines[1:] if line.strip()]
        current = replace(
            current,
            start_ms=min(previous.start_ms, current.start_ms),
            text=" ".join([prev_last] + rest),
        )
        single_word = True
    elif (
        current.start_ms <= previous.end_ms
        and current.word_count > thresholds.short_cue_max_words
        and _is_heading(previous, thresholds, 1)
    ):
        # A lone word running straight into a longer cue
        current = replace(
            current,
            start_ms=min(previous.start_ms, current.start_ms),
            text=prev_last + " " + current.text.strip(),
        )
        single_word = True
    else:
        remainder = _strip_repeated_lead(previous, current)
        if remainder is not None:
            if not remainder.strip():
                state.previous = _extend(previous, current)
                return state
            current = replace(current, text=remainder)
            stripped = True

    if (
        not single_word
        and not stripped
        and current.word_count <= thresholds.short_cue_max_words
        and not _is_repaired_boundary(previous, current)
    ):
        # Trailing fragment of the previous sentence
        state.previous = _extend(
            previous, current, text=previous.text + " " + _joined(current.text)
        )
        return state

    if current.end_ms < current.start_ms:
        current = replace(current, start_ms=current.end_ms, end_ms=current.start_ms)
    if current.start_ms <= previous.end_ms:
        previous = replace(
            previous, end_ms=max(previous.start_ms, current.start_ms - 1)
        )

    if not single_word:
        state.emitted.append(previous)
    state.previous = current
    return state


def _prepare(cues: List[Cue]) -> List[Cue]:
    repaired = [
        replace(cue, start_ms=cue.end_ms, end_ms=cue.start_ms)
        if cue.end_ms < cue.start_ms else cue
        for cue in cues
    ]
    return sorted(repaired, key=lambda cue: cue.start_ms)


def _merge_pass(cues: List[Cue], thresholds: MergeThresholds) -> List[Cue]:
    state = functools.reduce(
        functools.partial(_merge_step, thresholds), _prepare(cues), _MergeState()
    )
    if state.previous is not None:
        state.emitted.append(state.previous)
    return state.emitted


def deduplicate_cues(
    cues: List[Cue], thresholds: Optional[MergeThresholds] = None
) -> List[Cue]:
    """Merge flicker, repeated lines, and fragments; repair timing.

    Args:
        cues: Cues in any order, possibly overlapping or inverted.
        thresholds: Override the configured merge thresholds.

    Returns:
        A new list of disjoint, chronologically ordered cues. Running
        deduplicate_cues() on its own output returns it unchanged. If the
        merge fails for any reason, the input list is returned as-is.
    """
    thresholds = thresholds or MergeThresholds()
    try:
        result = _merge_pass(cues, thresholds)
        # Every changing pass removes a cue or a word, so this terminates
        max_passes = len(cues) + sum(cue.word_count for cue in cues) + 1
        for _ in range(max_passes):
            again = _merge_pass(result, thresholds)
            if again == result:
                break
            result = again
    except Exception:
        logger.exception("Cue merge failed; returning %d cues unchanged", len(cues))
        return cues

    logger.debug("Deduplicated %d cues into %d", len(cues), len(result))
    return result
