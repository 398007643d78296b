"""Abstract base formatter and output container.

WHY: Every export format consumes the same normalized cue list but
produces different file content. This base class gives the CLI and the
HTTP API one interface for all of them.

HOW: BaseFormatter is an ABC with a ``name`` property, a ``suffix`` and
``media_type``, and a ``format()`` method. FormatterOutput bundles the
file suffix with the content and its MIME type.

RULES:
- Subclasses MUST implement ``name`` and ``format()``
- ``suffix`` starts with a dot, e.g. ``".vtt"``
- The caller is responsible for prepending the filename stem
- Formatters never modify the cues they are given
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List

from caption_cleaner.core.ir import Cue


@dataclass
class FormatterOutput:
    """One output file produced by a formatter.

    Attributes:
        suffix: Extension appended to the filename stem, e.g. ``".srt"``.
        content: The file content.
        media_type: MIME type for the content, e.g. ``"text/vtt"``.
    """

    suffix: str
    content: str
    media_type: str


class BaseFormatter(ABC):
    """Abstract base for all transcript export formats.

    To add a new format:
    1. Create a new file in formatters/
    2. Subclass BaseFormatter, set suffix and media_type
    3. Implement format() and name
    4. Register in FORMATTERS dict in formatters/__init__.py
    """

    suffix: str = ""
    media_type: str = "text/plain"

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable format name, e.g. 'WebVTT'."""

    @abstractmethod
    def format(self, cues: List[Cue]) -> FormatterOutput:
        """Serialize normalized cues into one output file.

        Args:
            cues: Chronologically ordered, disjoint cues.

        Returns:
            FormatterOutput with this formatter's suffix and MIME type.
        """

    def _output(self, content: str) -> FormatterOutput:
        return FormatterOutput(
            suffix=self.suffix,
            content=content,
            media_type=self.media_type,
        )
