"""
Custom exception classes for the correction_spans package.

Most failures inside the engine degrade the output instead of raising. The
exceptions below exist for the boundary (invalid input), for the typed
hand-off between markup parsing strategies, and for the opt-in strict
reconciliation mode.
"""

from typing import Any


class CorrectionSpansError(Exception):
    """Base exception for all correction_spans errors."""

    pass


class InvalidInputError(CorrectionSpansError, TypeError):
    """Raised when boundary input has the wrong shape or type.

    Attributes:
        field: Name of the offending field, if known
        expected: Human-readable description of what was expected
    """

    def __init__(self, message: str, field: str | None = None, expected: str | None = None) -> None:
        self.field = field
        self.expected = expected
        super().__init__(message)

    @classmethod
    def for_field(cls, field: str, expected: str, value: Any) -> "InvalidInputError":
        """Build an error describing a single mistyped field."""
        return cls(
            f"'{field}' must be {expected}, got {type(value).__name__}",
            field=field,
            expected=expected,
        )


def require_text(value: Any, field: str) -> str:
    """Return ``value`` if it is a string, else raise InvalidInputError."""
    if not isinstance(value, str):
        raise InvalidInputError.for_field(field, "a string", value)
    return value


class MarkupParseError(CorrectionSpansError):
    """Raised by a markup strategy that cannot handle its input.

    The parser catches this and moves on to the next strategy.

    Attributes:
        strategy: Name of the strategy that failed
        reason: Why it failed
    """

    def __init__(self, strategy: str, reason: str) -> None:
        self.strategy = strategy
        self.reason = reason
        super().__init__(f"{strategy} could not parse markup: {reason}")


class PositionNotFoundError(CorrectionSpansError):
    """Raised in strict mode when a correction's text is absent from the canonical text.

    Attributes:
        text: The text that was searched for
        suggestions: Hints for resolving the issue
    """

    def __init__(self, text: str, suggestions: list[str] | None = None) -> None:
        self.text = text
        self.suggestions = suggestions or []
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format a helpful error message with suggestions."""
        msg = f"Could not locate '{self.text}' in canonical text"
        if self.suggestions:
            msg += "\n\nSuggestions:\n"
            for suggestion in self.suggestions:
                msg += f"  • {suggestion}\n"
        return msg


class AmbiguousMatchError(CorrectionSpansError):
    """Raised in strict mode when a correction's text occurs more than once.

    Attributes:
        text: The text that was searched for
        positions: Start offsets of every occurrence
    """

    def __init__(self, text: str, positions: list[int]) -> None:
        self.text = text
        self.positions = positions
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format an error message listing every occurrence."""
        listed = ", ".join(str(p) for p in self.positions)
        msg = f"Found {len(self.positions)} occurrences of '{self.text}' at offsets {listed}\n\n"
        msg += "To disambiguate, either:\n"
        msg += "  • Provide trustworthy startIndex/endIndex values and align instead\n"
        msg += "  • Reconcile without strict=True to accept the first occurrence"
        return msg
