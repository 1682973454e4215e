"""
Value types for correction_spans.

These are immutable records created fresh per call.
"""

from correction_spans.models.correction import Correction, ErrorType
from correction_spans.models.segment import (
    AnnotatedSegment,
    LiteralSegment,
    Segment,
    segments_text,
)

__all__ = [
    "Correction",
    "ErrorType",
    "AnnotatedSegment",
    "LiteralSegment",
    "Segment",
    "segments_text",
]
