"""
Fuzzy location of correction text using rapidfuzz.

Used by reconciliation when a model quotes the original text slightly wrong
(smart quotes, doubled spaces, a dropped letter) and an exact search misses.
Fuzzy matching is opt-in; the default behaviour is exact search only.

Example:
    >>> from correction_spans.fuzzy import fuzzy_locate
    >>> fuzzy_locate("The recieved letter", "received", threshold=0.8)
    (4, 12, 0.875)
"""

import re
from typing import Any

from rapidfuzz import fuzz

from .constants import DEFAULT_FUZZY_ALGORITHM, DEFAULT_FUZZY_THRESHOLD, FUZZY_ALGORITHMS


def normalize_whitespace(text: str) -> str:
    """Collapse whitespace runs to single spaces and strip the ends.

    Example:
        >>> normalize_whitespace("hello    world\\n\\ttest")
        'hello world test'
    """
    return re.sub(r"\s+", " ", text).strip()


def similarity(text: str, pattern: str, algorithm: str = DEFAULT_FUZZY_ALGORITHM) -> float:
    """Score how alike two strings are, from 0.0 to 1.0.

    Raises:
        ValueError: If the algorithm is not one of FUZZY_ALGORITHMS
    """
    if algorithm == "ratio":
        return fuzz.ratio(text, pattern) / 100.0
    if algorithm == "partial_ratio":
        return fuzz.partial_ratio(text, pattern) / 100.0
    if algorithm == "token_sort_ratio":
        return fuzz.token_sort_ratio(text, pattern) / 100.0
    raise ValueError(
        f"Invalid algorithm '{algorithm}'. Must be one of: {', '.join(FUZZY_ALGORITHMS)}"
    )


def fuzzy_locate(
    text: str,
    pattern: str,
    threshold: float = DEFAULT_FUZZY_THRESHOLD,
    algorithm: str = DEFAULT_FUZZY_ALGORITHM,
    normalize_ws: bool = False,
) -> tuple[int, int, float] | None:
    """Find the best approximate occurrence of ``pattern`` in ``text``.

    rapidfuzz aligns the pattern against its best-matching window of the
    text; that window is scored with ``algorithm`` and accepted when the
    score meets the threshold.

    Args:
        text: Text to search
        pattern: Text to look for
        threshold: Minimum similarity (0.0 to 1.0)
        algorithm: Scoring algorithm, one of FUZZY_ALGORITHMS
        normalize_ws: Collapse whitespace in the pattern before matching

    Returns:
        (start, end, score) with offsets into ``text``, or None when nothing
        scores at least ``threshold``

    Raises:
        ValueError: If threshold or algorithm is invalid
    """
    if not 0 <= threshold <= 1:
        raise ValueError(f"Threshold must be between 0 and 1, got {threshold}")
    if algorithm not in FUZZY_ALGORITHMS:
        raise ValueError(
            f"Invalid algorithm '{algorithm}'. Must be one of: {', '.join(FUZZY_ALGORITHMS)}"
        )

    if normalize_ws:
        pattern = normalize_whitespace(pattern)
    if not pattern or not text:
        return None

    alignment = fuzz.partial_ratio_alignment(pattern, text)
    if alignment is None:
        return None

    start, end = alignment.dest_start, alignment.dest_end
    if end <= start:
        return None

    score = similarity(text[start:end], pattern, algorithm)
    if score < threshold:
        return None
    return start, end, score


def parse_fuzzy_config(fuzzy: float | dict[str, Any] | None) -> dict[str, Any] | None:
    """Parse a fuzzy matching option into a standardized dict.

    Accepts either:
    - None: exact matching only
    - float: a similarity threshold (e.g. 0.85)
    - dict: any of threshold, algorithm, normalize_whitespace

    Raises:
        ValueError: If the configuration is invalid

    Example:
        >>> parse_fuzzy_config(0.85)
        {'threshold': 0.85, 'algorithm': 'partial_ratio', 'normalize_whitespace': False}
    """
    if fuzzy is None:
        return None

    config: dict[str, Any] = {
        "threshold": DEFAULT_FUZZY_THRESHOLD,
        "algorithm": DEFAULT_FUZZY_ALGORITHM,
        "normalize_whitespace": False,
    }

    if isinstance(fuzzy, bool):
        raise ValueError("fuzzy must be None, a float, or a dict, got bool")

    if isinstance(fuzzy, int | float):
        if not 0 <= fuzzy <= 1:
            raise ValueError(f"Fuzzy threshold must be between 0 and 1, got {fuzzy}")
        config["threshold"] = float(fuzzy)
    elif isinstance(fuzzy, dict):
        unknown = set(fuzzy) - set(config)
        if unknown:
            raise ValueError(f"Unknown fuzzy options: {', '.join(sorted(unknown))}")

        if "threshold" in fuzzy:
            threshold = fuzzy["threshold"]
            if isinstance(threshold, bool) or not isinstance(threshold, int | float):
                raise ValueError(f"Fuzzy threshold must be a number, got {threshold!r}")
            if not 0 <= threshold <= 1:
                raise ValueError(f"Fuzzy threshold must be between 0 and 1, got {threshold}")
            config["threshold"] = float(threshold)

        if "algorithm" in fuzzy:
            if fuzzy["algorithm"] not in FUZZY_ALGORITHMS:
                raise ValueError(
                    f"Invalid algorithm '{fuzzy['algorithm']}'. "
                    f"Must be one of: {', '.join(FUZZY_ALGORITHMS)}"
                )
            config["algorithm"] = fuzzy["algorithm"]

        if "normalize_whitespace" in fuzzy:
            if not isinstance(fuzzy["normalize_whitespace"], bool):
                raise ValueError(
                    "normalize_whitespace must be a boolean, "
                    f"got {type(fuzzy['normalize_whitespace']).__name__}"
                )
            config["normalize_whitespace"] = fuzzy["normalize_whitespace"]
    else:
        raise ValueError(
            f"fuzzy must be None, a float, or a dict, got {type(fuzzy).__name__}"
        )

    return config
