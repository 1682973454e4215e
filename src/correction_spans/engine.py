"""
JSON-shaped entry points for the correction engine.

Requests are routed by the keys they carry:

    {"originalText": ..., "correctedText": ...}      → word diff
    {"markedText": ...}                               → markup parsing
    {"canonicalText": ..., "corrections": [...]}      → reconciliation

Every route answers with ``{"cleanText", "originalText", "corrections"}``.
Input types are checked here, before anything reaches the engine; inside the
engine nothing raises for imperfect model output.
"""

import json
import logging
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

import yaml

from .align import align_corrections
from .errors import InvalidInputError, require_text
from .markup import MarkupParser
from .models.correction import Correction
from .reconcile import reconcile_corrections
from .results import ParseResult
from .word_diff import extract, extract_positional

logger = logging.getLogger(__name__)

DIFF_STRATEGIES = {
    "words": extract,
    "positional": extract_positional,
}


def corrections_from_payload(items: Any) -> list[Correction]:
    """Build Correction records from a JSON list.

    Raises:
        InvalidInputError: If ``items`` is not a list of correction objects
    """
    if not isinstance(items, Sequence) or isinstance(items, str | bytes):
        raise InvalidInputError.for_field("corrections", "a list", items)
    return [Correction.from_dict(item) for item in items]


def process(payload: Mapping[str, Any], diff_strategy: str = "words") -> dict[str, Any]:
    """Route one request to the matching component and serialize the result.

    Args:
        payload: Request object (already decoded from JSON or YAML)
        diff_strategy: "words" for the edit-script diff (default) or
            "positional" for position-paired tokens

    Returns:
        ``{"cleanText", "originalText", "corrections"}``

    Raises:
        InvalidInputError: If the payload is not an object, matches no route,
            or carries a field of the wrong type
        ValueError: If diff_strategy is unknown

    Example:
        >>> process({"originalText": "He go home.", "correctedText": "He goes home."})["corrections"][0]["startIndex"]
        3
    """
    return process_request(payload, diff_strategy=diff_strategy).to_dict()


def process_request(payload: Mapping[str, Any], diff_strategy: str = "words") -> ParseResult:
    """Same as process() but returns the ParseResult itself."""
    if not isinstance(payload, Mapping):
        raise InvalidInputError.for_field("payload", "an object", payload)

    if "originalText" in payload or "correctedText" in payload:
        if diff_strategy not in DIFF_STRATEGIES:
            raise ValueError(
                f"Unknown diff strategy '{diff_strategy}'. "
                f"Must be one of: {', '.join(DIFF_STRATEGIES)}"
            )
        original = require_text(payload.get("originalText"), "originalText")
        corrected = require_text(payload.get("correctedText"), "correctedText")
        logger.debug("Routing request to %s diff", diff_strategy)
        return DIFF_STRATEGIES[diff_strategy](original, corrected)

    if "markedText" in payload:
        marked = require_text(payload["markedText"], "markedText")
        logger.debug("Routing request to markup parser")
        return MarkupParser().parse(marked)

    if "canonicalText" in payload:
        canonical = require_text(payload["canonicalText"], "canonicalText")
        corrections = corrections_from_payload(payload.get("corrections", []))
        logger.debug("Routing request to reconciliation (%d corrections)", len(corrections))
        reconciled = reconcile_corrections(canonical, corrections).corrections
        # Stable sort: corrections quoting the same text keep their input order
        ordered = sorted(reconciled, key=lambda c: c.start_index)
        return ParseResult(clean_text=canonical, corrections=ordered, original_text=canonical)

    raise InvalidInputError(
        "Request must contain originalText/correctedText, markedText, "
        "or canonicalText/corrections",
        field="payload",
    )


def align_payload(text: Any, corrections: Any) -> list[Any]:
    """Align JSON corrections against text and return JSON segments.

    Each segment is either a plain string or ``{"annotation", "text"}``.

    Raises:
        InvalidInputError: If text is not a string or corrections is not a list
    """
    require_text(text, "text")
    result = align_corrections(text, corrections_from_payload(corrections))
    return result.to_json()


def load_request_file(path: str | Path) -> Any:
    """Load a request from a YAML or JSON file.

    Files ending in .json are read as JSON; anything else as YAML (which
    also accepts JSON).

    Raises:
        FileNotFoundError: If the file does not exist
        InvalidInputError: If the file cannot be decoded
    """
    file_path = Path(path)
    if not file_path.exists():
        raise FileNotFoundError(f"Request file not found: {path}")

    try:
        with open(file_path, encoding="utf-8") as f:
            if file_path.suffix.lower() == ".json":
                return json.load(f)
            return yaml.safe_load(f)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise InvalidInputError(f"Could not decode request file {path}: {e}") from e
