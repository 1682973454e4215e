"""
correction_spans - Turn model text corrections into precise, renderable spans.

This package converts either an (original, corrected) pair or text with
inline <correction> markup into clean text plus ordered, non-overlapping
correction spans, and re-aligns those spans against display text whose
indices may have drifted.

Example:
    >>> from correction_spans import extract, align
    >>> result = extract("He go home.", "He goes home.")
    >>> segments = align(result.clean_text, result.corrections)
    >>> [s.text for s in segments]
    ['He ', 'go', ' home.']
"""

__version__ = "0.1.0"
__all__ = [
    "Correction",
    "ErrorType",
    "ParseResult",
    "ReconcileResult",
    "AlignResult",
    "LiteralSegment",
    "AnnotatedSegment",
    "Segment",
    "classify",
    "extract",
    "extract_positional",
    "MarkupParser",
    "TreeMarkupStrategy",
    "RegexMarkupStrategy",
    "parse",
    "strip_markup",
    "render_markup",
    "reconcile",
    "reconcile_corrections",
    "align",
    "align_corrections",
    "apply_corrections",
    "render_html",
    "render_inline",
    "process",
    "CorrectionSpansError",
    "InvalidInputError",
    "MarkupParseError",
    "PositionNotFoundError",
    "AmbiguousMatchError",
]

# Import alignment
from .align import align, align_corrections

# Import classification
from .classifier import classify

# Import boundary entry point
from .engine import process
from .errors import (
    AmbiguousMatchError,
    CorrectionSpansError,
    InvalidInputError,
    MarkupParseError,
    PositionNotFoundError,
)

# Import markup parsing
from .markup import (
    MarkupParser,
    RegexMarkupStrategy,
    TreeMarkupStrategy,
    parse,
    render_markup,
    strip_markup,
)

# Import model classes
from .models import AnnotatedSegment, Correction, ErrorType, LiteralSegment, Segment

# Import reconciliation
from .reconcile import reconcile, reconcile_corrections

# Import rendering
from .rendering import apply_corrections, render_html, render_inline

# Import result types
from .results import AlignResult, ParseResult, ReconcileResult

# Import word diff
from .word_diff import extract, extract_positional
