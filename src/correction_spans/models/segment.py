"""
Segment models produced by the render-time aligner.

A sequence of segments partitions a display text: joining every segment's
``text`` in order gives back the text exactly once.
"""

from dataclasses import dataclass
from typing import Any

from correction_spans.models.correction import Correction


@dataclass(frozen=True)
class LiteralSegment:
    """A slice of text shown without annotation."""

    text: str

    def to_json(self) -> str:
        return self.text


@dataclass(frozen=True)
class AnnotatedSegment:
    """A slice of text carrying a correction.

    Attributes:
        correction: The correction this slice belongs to
        text: The slice as it appears in the display text (equal to
            ``correction.original``; empty for insertions)
        start: Offset of the slice in the display text
    """

    correction: Correction
    text: str
    start: int = 0

    @property
    def end(self) -> int:
        return self.start + len(self.text)

    def to_json(self) -> dict[str, Any]:
        return {"annotation": self.correction.to_dict(), "text": self.text}


Segment = LiteralSegment | AnnotatedSegment


def segments_text(segments: list[Segment]) -> str:
    """Join segment slices back into the text they were cut from."""
    return "".join(segment.text for segment in segments)
