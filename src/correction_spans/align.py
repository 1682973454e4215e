"""
Render-time alignment of corrections against display text.

The aligner is the last line of defence against untrusted indices. It cuts
the text into literal and annotated segments, trusting each correction's
start_index only when the text at that position actually matches, and
otherwise searching forward for the correction's text.

Guarantees:
- Joining the segments gives back the input text exactly
- Segments never overlap and never go backwards
- No input makes it raise; a correction that cannot be placed is dropped
  and the text it would have covered is shown as a plain literal
"""

import logging
from collections.abc import Iterable

from .errors import require_text
from .models.correction import Correction
from .models.segment import AnnotatedSegment, LiteralSegment, Segment
from .results import AlignResult

logger = logging.getLogger(__name__)


def _matches_at(remaining: str, offset: int, original: str) -> bool:
    """Check that ``original`` sits at ``offset`` within ``remaining``."""
    if offset < 0 or offset + len(original) > len(remaining):
        return False
    return remaining[offset : offset + len(original)] == original


def align_corrections(text: str, corrections: Iterable[Correction]) -> AlignResult:
    """Cut ``text`` into segments, annotating each correction that can be placed.

    Corrections are processed in start_index order (stable for ties). For
    each one, with ``remaining`` the text after the cursor:

    1. If ``original`` is found exactly at ``start_index`` it is accepted there
    2. Otherwise the first occurrence of ``original`` in ``remaining`` is used
    3. Otherwise the correction is dropped and the cursor stays put

    Text skipped over before an accepted correction becomes a literal
    segment; whatever is left at the end becomes a final literal.

    Args:
        text: The display text
        corrections: Corrections whose indices may be stale

    Returns:
        AlignResult with segments, drifted and dropped corrections

    Raises:
        InvalidInputError: If text is not a string
    """
    require_text(text, "text")

    segments: list[Segment] = []
    dropped: list[Correction] = []
    drifted: list[Correction] = []
    cursor = 0

    for correction in sorted(corrections, key=lambda c: c.start_index):
        original = correction.original
        remaining = text[cursor:]
        offset = correction.start_index - cursor

        if not _matches_at(remaining, offset, original):
            found = remaining.find(original)
            if found == -1:
                logger.warning(
                    "Dropping correction %r -> %r: text not found after offset %d (%r...)",
                    original,
                    correction.corrected,
                    cursor,
                    remaining[:50],
                )
                dropped.append(correction)
                continue
            logger.debug(
                "Correction %r drifted: expected at %d, found at %d",
                original,
                correction.start_index,
                cursor + found,
            )
            drifted.append(correction)
            offset = found

        if offset > 0:
            segments.append(LiteralSegment(remaining[:offset]))
        segments.append(AnnotatedSegment(correction, original, start=cursor + offset))
        cursor += offset + len(original)

    if cursor < len(text):
        segments.append(LiteralSegment(text[cursor:]))

    return AlignResult(segments=segments, dropped=dropped, drifted=drifted)


def align(text: str, corrections: Iterable[Correction]) -> list[Segment]:
    """Cut ``text`` into literal and annotated segments.

    Example:
        >>> c = Correction("have went", "went", start_index=2, end_index=11)
        >>> [s.text for s in align("I have went.", [c])]
        ['I ', 'have went', '.']

    See align_corrections() for the algorithm and diagnostics.
    """
    return align_corrections(text, corrections).segments
