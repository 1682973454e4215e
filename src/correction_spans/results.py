"""
Result classes for correction extraction, reconciliation and alignment.

Each component returns a degraded but valid result instead of raising. The
report-style results here carry the diagnostics for what was degraded.
"""

from dataclasses import dataclass, field
from typing import Any

from .models.correction import Correction
from .models.segment import AnnotatedSegment, Segment, segments_text


@dataclass(frozen=True)
class ParseResult:
    """Clean text plus the corrections that index into it.

    Attributes:
        clean_text: Fully de-annotated text the spans index into
        corrections: Corrections sorted by start_index, pairwise non-overlapping
        original_text: The pre-annotation text as declared by the producer.
            Kept separate from clean_text because the two may differ in
            whitespace depending on where the text came from.
    """

    clean_text: str
    corrections: tuple[Correction, ...] = ()
    original_text: str = ""

    def __post_init__(self) -> None:
        # Accept any sequence but store an immutable tuple
        object.__setattr__(self, "corrections", tuple(self.corrections))

    def __len__(self) -> int:
        return len(self.corrections)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the boundary JSON shape."""
        return {
            "cleanText": self.clean_text,
            "originalText": self.original_text,
            "corrections": [c.to_dict() for c in self.corrections],
        }

    def __str__(self) -> str:
        count = len(self.corrections)
        return f"{count} correction{'s' if count != 1 else ''} in {len(self.clean_text)} chars"


@dataclass(frozen=True)
class ReconcileResult:
    """Reconciled corrections plus diagnostics.

    Attributes:
        corrections: Corrections re-indexed into the canonical text, input order
        unlocated: Input positions whose original text was not found
            (given the degraded default span)
        ambiguous: Input positions whose original text occurs more than once
            (resolved to the first occurrence)
    """

    corrections: list[Correction] = field(default_factory=list)
    unlocated: list[int] = field(default_factory=list)
    ambiguous: list[int] = field(default_factory=list)

    @property
    def degraded(self) -> bool:
        return bool(self.unlocated)

    def __str__(self) -> str:
        return (
            f"Reconciled {len(self.corrections)} corrections "
            f"({len(self.unlocated)} unlocated, {len(self.ambiguous)} ambiguous)"
        )


@dataclass(frozen=True)
class AlignResult:
    """Aligned segments plus the corrections that could not be placed.

    Attributes:
        segments: Literal and annotated segments covering the text
        dropped: Corrections whose original text was not found in what
            remained of the text
        drifted: Corrections placed by search because their index was stale
    """

    segments: list[Segment] = field(default_factory=list)
    dropped: list[Correction] = field(default_factory=list)
    drifted: list[Correction] = field(default_factory=list)

    @property
    def text(self) -> str:
        return segments_text(self.segments)

    def to_json(self) -> list[Any]:
        return [segment.to_json() for segment in self.segments]

    def __str__(self) -> str:
        placed = sum(1 for s in self.segments if isinstance(s, AnnotatedSegment))
        return f"Aligned {placed} corrections ({len(self.drifted)} drifted, {len(self.dropped)} dropped)"
