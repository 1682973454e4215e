"""
Offset reconciliation: re-index corrections into a canonical text.

Corrections reported by a model often carry no indices, or indices computed
against a different text than the one being shown. Reconciliation throws the
old indices away and looks each correction's ``original`` up in the canonical
text.

Lookup is first-occurrence literal search. Two policies follow from that and
are kept for compatibility with existing stored results:
- a text that occurs several times always resolves to its first occurrence,
  even when each occurrence needs a different correction
- a text that does not occur at all gets the span [0, len(original))

Both are logged. ``strict=True`` turns them into exceptions instead.
"""

import logging
from collections.abc import Iterable
from typing import Any

from .errors import AmbiguousMatchError, PositionNotFoundError, require_text
from .fuzzy import fuzzy_locate, parse_fuzzy_config
from .models.correction import Correction
from .results import ReconcileResult

logger = logging.getLogger(__name__)


def _find_all(text: str, needle: str, limit: int = 2) -> list[int]:
    """Offsets of up to ``limit`` occurrences of needle, overlapping ones included."""
    positions: list[int] = []
    start = text.find(needle)
    while start != -1 and len(positions) < limit:
        positions.append(start)
        start = text.find(needle, start + 1)
    return positions


def reconcile_corrections(
    canonical_text: str,
    corrections: Iterable[Correction],
    strict: bool = False,
    fuzzy: float | dict[str, Any] | None = None,
) -> ReconcileResult:
    """Re-index corrections into ``canonical_text`` and report what degraded.

    Args:
        canonical_text: Text the returned spans must index into
        corrections: Corrections whose indices are absent or untrusted
        strict: Raise instead of degrading on a missing or repeated text
        fuzzy: Optional fuzzy fallback for texts that are not found exactly
            (threshold float or config dict, see parse_fuzzy_config)

    Returns:
        ReconcileResult with corrections in input order

    Raises:
        InvalidInputError: If canonical_text is not a string
        PositionNotFoundError: In strict mode, if a text cannot be located
        AmbiguousMatchError: In strict mode, if a text occurs more than once
        ValueError: If the fuzzy configuration is invalid
    """
    require_text(canonical_text, "canonicalText")
    fuzzy_config = parse_fuzzy_config(fuzzy)

    reconciled: list[Correction] = []
    unlocated: list[int] = []
    ambiguous: list[int] = []

    for index, correction in enumerate(corrections):
        original = correction.original
        positions = _find_all(canonical_text, original)

        if positions:
            if len(positions) > 1 and original:
                if strict:
                    raise AmbiguousMatchError(original, _find_all(canonical_text, original, limit=50))
                logger.debug(
                    "Correction %d: %r occurs more than once, using first occurrence",
                    index,
                    original,
                )
                ambiguous.append(index)
            start = positions[0]
            reconciled.append(correction.with_span(start, start + len(original)))
            continue

        if fuzzy_config is not None:
            located = fuzzy_locate(
                canonical_text,
                original,
                threshold=fuzzy_config["threshold"],
                algorithm=fuzzy_config["algorithm"],
                normalize_ws=fuzzy_config["normalize_whitespace"],
            )
            if located is not None:
                start, end, score = located
                logger.debug(
                    "Correction %d: %r located fuzzily at [%d, %d) (score %.2f)",
                    index,
                    original,
                    start,
                    end,
                    score,
                )
                reconciled.append(correction.with_span(start, end))
                continue

        if strict:
            raise PositionNotFoundError(
                original,
                suggestions=[
                    "Check that the correction was produced for this text",
                    "Pass fuzzy=0.85 to tolerate small differences",
                ],
            )

        logger.warning(
            "Correction %d: %r not found in canonical text, defaulting to [0, %d)",
            index,
            original,
            len(original),
        )
        unlocated.append(index)
        reconciled.append(correction.with_span(0, len(original)))

    return ReconcileResult(corrections=reconciled, unlocated=unlocated, ambiguous=ambiguous)


def reconcile(
    canonical_text: str,
    corrections: Iterable[Correction],
    strict: bool = False,
    fuzzy: float | dict[str, Any] | None = None,
) -> list[Correction]:
    """Re-index corrections into ``canonical_text`` by first-occurrence lookup.

    Each correction is handled independently and input order is preserved,
    so the result is not necessarily sorted, and two corrections quoting the
    same text end up on the same span.

    Example:
        >>> c = Correction("xyz", "abc")
        >>> reconcile("Hello world", [c])[0].end_index
        3

    See reconcile_corrections() for arguments and diagnostics.
    """
    return reconcile_corrections(canonical_text, corrections, strict=strict, fuzzy=fuzzy).corrections
