"""
Correction model: one annotated span of text and what it should become.

A Correction's indices are only meaningful together with the text they index.
Producers document which text that is (the original for diff extraction, the
clean text for markup parsing).
"""

import math
from collections.abc import Mapping
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any

from correction_spans.errors import InvalidInputError


class ErrorType(str, Enum):
    """Classification labels for a correction.

    Labels are best-effort heuristics, not a grammar checker's verdict.

    Attributes:
        SPELLING: Misspelled word
        GRAMMAR: Agreement, tense, article or pronoun change
        PUNCTUATION: Change involving . , ; : ! or ?
        CAPITALIZATION: Only letter case differs
        WORD_CHOICE: Any other substitution
        INSERTION: Text added where there was none
        DELETION: Text removed with no replacement
        UNKNOWN: Label missing or not recognised
    """

    SPELLING = "spelling"
    GRAMMAR = "grammar"
    PUNCTUATION = "punctuation"
    CAPITALIZATION = "capitalization"
    WORD_CHOICE = "word-choice"
    INSERTION = "insertion"
    DELETION = "deletion"
    UNKNOWN = "unknown"

    @classmethod
    def from_label(cls, label: "str | ErrorType | None") -> "ErrorType":
        """Map a free-form label onto an ErrorType.

        Matching ignores case and treats spaces and underscores as hyphens,
        so model output such as "Word Choice" or "word_choice" resolves to
        WORD_CHOICE. Anything unrecognised becomes UNKNOWN.

        Example:
            >>> ErrorType.from_label("word choice")
            <ErrorType.WORD_CHOICE: 'word-choice'>
            >>> ErrorType.from_label("style")
            <ErrorType.UNKNOWN: 'unknown'>
        """
        if isinstance(label, ErrorType):
            return label
        if not label:
            return cls.UNKNOWN
        normalized = "-".join(label.strip().lower().replace("_", " ").split())
        try:
            return cls(normalized)
        except ValueError:
            return cls.UNKNOWN


@dataclass(frozen=True)
class Correction:
    """A single correction spanning [start_index, end_index) of a named text.

    Attributes:
        original: Exact text being replaced (empty for a pure insertion)
        corrected: Replacement text (empty for a pure deletion)
        type: Classification label
        explanation: Optional human-readable reason for the change
        start_index: Start offset, inclusive
        end_index: End offset, exclusive

    Example:
        >>> c = Correction("go", "goes", ErrorType.GRAMMAR, start_index=3, end_index=5)
        >>> c.to_dict()["startIndex"]
        3
    """

    original: str
    corrected: str
    type: ErrorType = ErrorType.UNKNOWN
    explanation: str | None = None
    start_index: int = 0
    end_index: int = 0

    def __post_init__(self) -> None:
        if not isinstance(self.type, ErrorType):
            object.__setattr__(self, "type", ErrorType.from_label(self.type))
        if self.start_index < 0 or self.end_index < self.start_index:
            raise ValueError(
                f"Invalid span [{self.start_index}, {self.end_index}) for {self.original!r}"
            )

    @property
    def is_insertion(self) -> bool:
        return not self.original

    @property
    def is_deletion(self) -> bool:
        return not self.corrected

    @property
    def length(self) -> int:
        return self.end_index - self.start_index

    def with_span(self, start: int, end: int) -> "Correction":
        """Return a copy of this correction covering [start, end)."""
        return replace(self, start_index=start, end_index=end)

    def overlaps(self, other: "Correction") -> bool:
        """Check whether two spans share at least one character."""
        return self.start_index < other.end_index and other.start_index < self.end_index

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the JSON shape used at the system boundary."""
        data: dict[str, Any] = {
            "original": self.original,
            "corrected": self.corrected,
            "type": self.type.value,
        }
        if self.explanation is not None:
            data["explanation"] = self.explanation
        data["startIndex"] = self.start_index
        data["endIndex"] = self.end_index
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Correction":
        """Build a Correction from its JSON shape.

        Indices may be absent or stale; absent indices default to 0 and
        inconsistent ones are clamped to a valid (possibly empty) span so the
        record can still be reconciled or aligned.

        Raises:
            InvalidInputError: If a field has the wrong type
        """
        if not isinstance(data, Mapping):
            raise InvalidInputError.for_field("correction", "an object", data)

        original = data.get("original", "")
        corrected = data.get("corrected", "")
        for name, value in (("original", original), ("corrected", corrected)):
            if not isinstance(value, str):
                raise InvalidInputError.for_field(name, "a string", value)

        explanation = data.get("explanation")
        if explanation is not None and not isinstance(explanation, str):
            raise InvalidInputError.for_field("explanation", "a string", explanation)

        label = data.get("type")
        if label is not None and not isinstance(label, str):
            raise InvalidInputError.for_field("type", "a string", label)

        start = _read_index(data, "startIndex")
        end = _read_index(data, "endIndex")
        start = max(0, start)
        end = max(start, end)

        return cls(
            original=original,
            corrected=corrected,
            type=ErrorType.from_label(label),
            explanation=explanation or None,
            start_index=start,
            end_index=end,
        )


def _read_index(data: Mapping[str, Any], key: str) -> int:
    value = data.get(key)
    if value is None:
        return 0
    # bool is an int subclass but never a meaningful offset
    if isinstance(value, bool) or not isinstance(value, int | float):
        raise InvalidInputError.for_field(key, "a number", value)
    # json accepts NaN and Infinity, neither converts to an offset
    if isinstance(value, float) and not math.isfinite(value):
        raise InvalidInputError(
            f"'{key}' must be a finite number, got {value}", field=key, expected="a finite number"
        )
    return int(value)
