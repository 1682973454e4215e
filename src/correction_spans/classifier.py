"""
Heuristic labelling of word-level corrections.

The rules are a fixed table evaluated in order; the first rule that matches
wins because the classes overlap (a capitalised word with a comma added is
both a case and a punctuation change, and is reported as punctuation).
"""

from .constants import (
    GRAMMAR_PATTERNS,
    PUNCTUATION_PATTERN,
    SIMILARITY_MAX_LENGTH_DELTA,
    SIMILARITY_THRESHOLD,
)
from .models.correction import ErrorType


def classify(original: str, corrected: str) -> ErrorType:
    """Label the change from ``original`` to ``corrected``.

    Rules, first match wins:
        1. Either side contains . , ; : ! or ?  → PUNCTUATION
        2. Sides equal ignoring case             → CAPITALIZATION
        3. Sides similar ignoring case           → SPELLING
        4. Either side contains a grammar word   → GRAMMAR
        5. Otherwise                             → WORD_CHOICE

    Args:
        original: Text being replaced
        corrected: Replacement text

    Returns:
        The ErrorType label. Never raises.

    Example:
        >>> classify("recieve", "receive")
        <ErrorType.SPELLING: 'spelling'>
        >>> classify("paris", "Paris")
        <ErrorType.CAPITALIZATION: 'capitalization'>
    """
    if PUNCTUATION_PATTERN.search(original) or PUNCTUATION_PATTERN.search(corrected):
        return ErrorType.PUNCTUATION

    original_lower = original.lower()
    corrected_lower = corrected.lower()

    if original_lower == corrected_lower:
        return ErrorType.CAPITALIZATION

    if are_words_similar(original_lower, corrected_lower):
        return ErrorType.SPELLING

    if is_grammar_change(original, corrected):
        return ErrorType.GRAMMAR

    return ErrorType.WORD_CHOICE


def are_words_similar(word1: str, word2: str) -> bool:
    """Check whether two words look like spelling variants of each other.

    Compares characters position by position, so the test is sensitive to
    shifts: "form" and "from" share only two aligned characters. Lengths may
    differ by at most two, and the share of aligned matches over the shorter
    word must be strictly above the threshold.
    """
    if abs(len(word1) - len(word2)) > SIMILARITY_MAX_LENGTH_DELTA:
        return False

    min_length = min(len(word1), len(word2))
    if min_length == 0:
        return False

    common = sum(1 for a, b in zip(word1, word2) if a == b)
    return common / min_length > SIMILARITY_THRESHOLD


def is_grammar_change(original: str, corrected: str) -> bool:
    """Check whether either side contains a closed-class grammar word."""
    return any(
        pattern.search(original) or pattern.search(corrected) for pattern in GRAMMAR_PATTERNS
    )
