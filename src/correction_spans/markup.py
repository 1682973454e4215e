"""Inline correction markup parser.

Model output may mark corrections inline:

    She <correction original="dont" corrected="don't" type="grammar">dont</correction> know.

Parsing strips the tags, keeps their inner text, and reports one Correction
per tag indexed into the resulting clean text ("She dont know.", span [4, 8)).

Two strategies are tried in order:
    1. TreeMarkupStrategy - parses the text as an XML fragment with lxml and
       walks the tree. Fails on anything that is not well-formed (a bare "&",
       an unclosed tag).
    2. RegexMarkupStrategy - scans for correction tags and leaves everything
       else verbatim. Fails only when it finds no tags at all.

If every strategy fails the input is returned unchanged as clean text with no
corrections.
"""

from __future__ import annotations

import html
import logging
import re
from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping, Sequence

from lxml import etree

from .constants import (
    ATTRIBUTE_PATTERN,
    CORRECTION_TAG,
    CORRECTION_TAG_PATTERN,
    MARKUP_ROOT_TAG,
    MARKUP_TAG_PATTERN,
    QUOTED_VALUE_PATTERN,
    WHITESPACE_CHAR_REFS,
)
from .errors import MarkupParseError, require_text
from .models.correction import Correction, ErrorType
from .results import ParseResult

logger = logging.getLogger(__name__)


def _correction_from_attributes(attrs: Mapping[str, str], inner: str, start: int) -> Correction:
    """Build a Correction from tag attributes, spanning ``inner`` at ``start``.

    Missing attributes fall back to defaults: ``original`` to the inner text,
    ``corrected`` to "", ``type`` to unknown. An empty explanation is treated
    as absent.
    """
    original = attrs.get("original")
    return Correction(
        original=inner if original is None else original,
        corrected=attrs.get("corrected", ""),
        type=ErrorType.from_label(attrs.get("type")),
        explanation=attrs.get("explanation") or None,
        start_index=start,
        end_index=start + len(inner),
    )


class MarkupStrategy(ABC):
    """Base class for one way of turning marked text into a ParseResult."""

    name = "markup"

    @abstractmethod
    def parse(self, text: str) -> ParseResult:
        """Parse marked text.

        Raises:
            MarkupParseError: If this strategy cannot handle the input
        """


class TreeMarkupStrategy(MarkupStrategy):
    """Parse marked text as an XML fragment.

    The text is wrapped in a synthetic root element. Clean text is the
    concatenation of text nodes in document order, so no offset arithmetic
    is needed: each correction starts wherever the clean text has reached.
    Elements other than <correction> contribute their text and nothing else.
    A <correction> nested inside another one is read as plain text of the
    outer one.

    Whitespace is kept exactly as written: carriage returns and whitespace
    inside attribute values are passed to lxml as character references so
    XML end-of-line and attribute-value normalisation leave them alone.
    """

    name = "tree"

    def parse(self, text: str) -> ParseResult:
        # A fresh parser per call; lxml parser objects are not shared between threads
        parser = etree.XMLParser(resolve_entities=False, no_network=True, recover=False)
        protected = _protect_whitespace(text)
        try:
            root = etree.fromstring(
                f"<{MARKUP_ROOT_TAG}>{protected}</{MARKUP_ROOT_TAG}>", parser
            )
        except (etree.XMLSyntaxError, ValueError) as e:
            raise MarkupParseError(self.name, str(e)) from e

        pieces: list[str] = []
        corrections: list[Correction] = []
        self._walk(root, pieces, corrections, [0])

        clean_text = "".join(pieces)
        return ParseResult(clean_text=clean_text, corrections=corrections, original_text=clean_text)

    def _walk(
        self,
        element: etree._Element,
        pieces: list[str],
        corrections: list[Correction],
        length: list[int],
    ) -> None:
        """Append text under ``element`` to ``pieces``, recording corrections.

        ``length`` is a one-item list holding the running clean-text length.
        """
        if element.text:
            pieces.append(element.text)
            length[0] += len(element.text)

        for child in element:
            if isinstance(child.tag, str):
                if child.tag == CORRECTION_TAG:
                    inner = _text_content(child)
                    corrections.append(
                        _correction_from_attributes(dict(child.attrib), inner, length[0])
                    )
                    pieces.append(inner)
                    length[0] += len(inner)
                else:
                    self._walk(child, pieces, corrections, length)

            # Comments and processing instructions drop out but keep their tail
            if child.tail:
                pieces.append(child.tail)
                length[0] += len(child.tail)


def _protect_whitespace(text: str) -> str:
    """Replace whitespace an XML parser would normalise with character references.

    Outside tags only carriage returns are affected. Inside quoted attribute
    values tabs, newlines and carriage returns are all replaced. Whitespace
    between attributes is left as is.
    """
    pieces: list[str] = []
    last_end = 0
    for match in MARKUP_TAG_PATTERN.finditer(text):
        pieces.append(text[last_end : match.start()].replace("\r", WHITESPACE_CHAR_REFS["\r"]))
        pieces.append(QUOTED_VALUE_PATTERN.sub(_encode_value_whitespace, match.group(0)))
        last_end = match.end()
    pieces.append(text[last_end:].replace("\r", WHITESPACE_CHAR_REFS["\r"]))
    return "".join(pieces)


def _encode_value_whitespace(match: re.Match[str]) -> str:
    return "".join(WHITESPACE_CHAR_REFS.get(char, char) for char in match.group(0))


def _text_content(element: etree._Element) -> str:
    """Text of an element and its descendants, skipping comments and PIs."""
    parts = [element.text or ""]
    for child in element:
        if isinstance(child.tag, str):
            parts.append(_text_content(child))
        parts.append(child.tail or "")
    return "".join(parts)


class RegexMarkupStrategy(MarkupStrategy):
    """Scan for correction tags with a regular expression.

    Text outside tags is copied verbatim, so this strategy tolerates input
    that is not well-formed XML. Positions are tracked in raw-text
    coordinates and converted to clean-text coordinates by subtracting the
    markup stripped so far.
    """

    name = "regex"

    def parse(self, text: str) -> ParseResult:
        pieces: list[str] = []
        corrections: list[Correction] = []
        stripped = 0
        last_end = 0

        for match in CORRECTION_TAG_PATTERN.finditer(text):
            inner = match.group("inner") or ""

            # Subtract markup removed by earlier tags before recording this one
            start = match.start() - stripped

            pieces.append(text[last_end : match.start()])
            pieces.append(inner)
            corrections.append(
                _correction_from_attributes(_parse_attributes(match.group("attrs")), inner, start)
            )

            stripped += len(match.group(0)) - len(inner)
            last_end = match.end()

        if not corrections:
            raise MarkupParseError(self.name, "no correction tags found")

        pieces.append(text[last_end:])
        clean_text = "".join(pieces)
        return ParseResult(clean_text=clean_text, corrections=corrections, original_text=clean_text)


def _parse_attributes(raw: str) -> dict[str, str]:
    """Parse name="value" pairs from the inside of a start tag.

    Values are entity-decoded so they match what an XML parser would report.
    The first occurrence of a repeated attribute wins.
    """
    attrs: dict[str, str] = {}
    for match in ATTRIBUTE_PATTERN.finditer(raw):
        value = match.group("dq") if match.group("dq") is not None else match.group("sq")
        attrs.setdefault(match.group("name"), html.unescape(value))
    return attrs


DEFAULT_STRATEGIES: tuple[MarkupStrategy, ...] = (TreeMarkupStrategy(), RegexMarkupStrategy())


class MarkupParser:
    """Try a fixed sequence of strategies until one parses the input.

    Args:
        strategies: Strategies in the order they should be tried. Defaults
            to tree parsing followed by regex scanning.

    Example:
        >>> parser = MarkupParser()
        >>> result = parser.parse('I <correction original="has" corrected="have">has</correction> it')
        >>> result.clean_text
        'I has it'
        >>> result.corrections[0].start_index
        2
    """

    def __init__(self, strategies: Iterable[MarkupStrategy] | None = None) -> None:
        self.strategies: tuple[MarkupStrategy, ...] = (
            DEFAULT_STRATEGIES if strategies is None else tuple(strategies)
        )
        if not self.strategies:
            raise ValueError("MarkupParser needs at least one strategy")

    def parse(self, marked_text: str) -> ParseResult:
        """Parse marked text into clean text plus corrections.

        Never raises for malformed markup; the worst case is the input
        returned as clean text with no corrections.

        Raises:
            InvalidInputError: If marked_text is not a string
        """
        require_text(marked_text, "markedText")

        for strategy in self.strategies:
            try:
                result = strategy.parse(marked_text)
            except MarkupParseError as e:
                logger.warning("Markup strategy '%s' failed: %s", e.strategy, e.reason)
                continue
            logger.debug(
                "Parsed %d corrections with '%s' strategy", len(result.corrections), strategy.name
            )
            return result

        logger.warning("No correction markup recognised; treating input as clean text")
        return ParseResult(clean_text=marked_text, corrections=(), original_text=marked_text)


def parse(marked_text: str) -> ParseResult:
    """Parse marked text with the default strategy chain.

    Example:
        >>> result = parse(
        ...     'She <correction original="dont" corrected="don\\'t" type="grammar">'
        ...     "dont</correction> know."
        ... )
        >>> result.clean_text
        'She dont know.'
        >>> (result.corrections[0].start_index, result.corrections[0].end_index)
        (4, 8)
    """
    return MarkupParser().parse(marked_text)


def strip_markup(marked_text: str) -> str:
    """Return only the clean text of marked text."""
    return parse(marked_text).clean_text


def render_markup(clean_text: str, corrections: Sequence[Correction]) -> str:
    """Render corrections back into inline markup.

    This is the inverse of parse() for well-formed input: parsing the result
    gives back ``clean_text`` and the same corrections. Text and attribute
    values are escaped so the output is a well-formed XML fragment.

    Args:
        clean_text: Text the corrections index into
        corrections: Non-overlapping corrections over ``clean_text``

    Returns:
        Marked text

    Raises:
        ValueError: If a correction span lies outside the text or two spans overlap
    """
    ordered = sorted(corrections, key=lambda c: (c.start_index, c.end_index))

    parts: list[str] = []
    cursor = 0
    for correction in ordered:
        if correction.start_index < cursor or correction.end_index > len(clean_text):
            raise ValueError(
                f"Correction {correction.original!r} at "
                f"[{correction.start_index}, {correction.end_index}) "
                "overlaps another correction or lies outside the text"
            )
        parts.append(html.escape(clean_text[cursor : correction.start_index], quote=False))
        parts.append(_render_tag(correction, clean_text[correction.start_index : correction.end_index]))
        cursor = correction.end_index
    parts.append(html.escape(clean_text[cursor:], quote=False))

    return "".join(parts)


def _render_tag(correction: Correction, inner: str) -> str:
    attrs = [
        ("original", correction.original),
        ("corrected", correction.corrected),
        ("type", correction.type.value),
    ]
    if correction.explanation is not None:
        attrs.append(("explanation", correction.explanation))
    rendered = " ".join(f'{name}="{html.escape(value, quote=True)}"' for name, value in attrs)
    return f"<{CORRECTION_TAG} {rendered}>{html.escape(inner, quote=False)}</{CORRECTION_TAG}>"
