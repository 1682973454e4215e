"""Tests for inline correction markup parsing and rendering."""

import logging

import pytest

from correction_spans.align import align_corrections
from correction_spans.errors import InvalidInputError, MarkupParseError
from correction_spans.markup import (
    MarkupParser,
    RegexMarkupStrategy,
    TreeMarkupStrategy,
    parse,
    render_markup,
    strip_markup,
)
from correction_spans.models import Correction, ErrorType

TWO_TAGS = (
    'I <correction original="has" corrected="have" type="grammar">has</correction> two '
    '<correction original="apple" corrected="apples" type="grammar">apple</correction>.'
)


def spans(result):
    return [(c.original, c.start_index, c.end_index) for c in result.corrections]


def assert_spans_quote_inner(result):
    """Each span covers exactly the clean text the tag wrapped."""
    for c in result.corrections:
        assert result.clean_text[c.start_index : c.end_index] == c.original


class TestTreeStrategy:
    """Tests for lxml-based parsing."""

    def test_single_tag(self):
        """The worked example parses to the expected span."""
        result = TreeMarkupStrategy().parse(
            'She <correction original="dont" corrected="don\'t" type="grammar" '
            'explanation="Missing apostrophe">dont</correction> know.'
        )
        assert result.clean_text == "She dont know."
        c = result.corrections[0]
        assert (c.original, c.corrected, c.type) == ("dont", "don't", ErrorType.GRAMMAR)
        assert c.explanation == "Missing apostrophe"
        assert (c.start_index, c.end_index) == (4, 8)

    def test_two_tags(self):
        """Later spans account for markup removed before them."""
        result = TreeMarkupStrategy().parse(TWO_TAGS)
        assert result.clean_text == "I has two apple."
        assert spans(result) == [("has", 2, 5), ("apple", 10, 15)]

    def test_other_elements_contribute_text(self):
        """Non-correction elements are unwrapped and their text kept."""
        result = TreeMarkupStrategy().parse(
            'Hello <b>bold</b> <correction original="wrld" corrected="world">wrld</correction>'
        )
        assert result.clean_text == "Hello bold wrld"
        assert spans(result) == [("wrld", 11, 15)]

    def test_entities_are_decoded(self):
        """Escaped characters appear decoded in the clean text."""
        result = TreeMarkupStrategy().parse(
            'Tom &amp; Jerry <correction original="wnet" corrected="went">wnet</correction>'
        )
        assert result.clean_text == "Tom & Jerry wnet"
        assert spans(result) == [("wnet", 12, 16)]

    def test_missing_attributes_default(self):
        """original falls back to the inner text and type to unknown."""
        result = TreeMarkupStrategy().parse("a <correction>b</correction> c")
        c = result.corrections[0]
        assert c.original == "b"
        assert c.corrected == ""
        assert c.type == ErrorType.UNKNOWN
        assert c.explanation is None

    def test_comment_dropped_tail_kept(self):
        """Comments vanish but the text after them stays."""
        result = TreeMarkupStrategy().parse("a<!-- note --> <correction>b</correction>")
        assert result.clean_text == "a b"
        assert spans(result) == [("b", 2, 3)]

    def test_multiline_original_attribute_kept(self):
        """Newlines inside attribute values survive parsing."""
        result = TreeMarkupStrategy().parse(
            'I <correction original="has\nwent" corrected="went">has\nwent</correction> x'
        )
        c = result.corrections[0]
        assert c.original == "has\nwent"
        assert result.clean_text[c.start_index : c.end_index] == "has\nwent"

    def test_tab_in_attribute_kept(self):
        """Tabs inside attribute values are not turned into spaces."""
        result = TreeMarkupStrategy().parse('<correction original="a\tb" corrected="a b">a\tb</correction>')
        assert result.corrections[0].original == "a\tb"

    def test_crlf_preserved(self):
        """Carriage returns in text are not folded into newlines."""
        text = (
            "Line one.\r\nShe "
            '<correction original="dont" corrected="don\'t" type="grammar">dont</correction> know.'
        )
        result = TreeMarkupStrategy().parse(text)
        assert result.clean_text == "Line one.\r\nShe dont know."
        assert spans(result) == [("dont", 15, 19)]

    def test_whitespace_between_attributes(self):
        """Line breaks between attributes are ordinary tag whitespace."""
        result = TreeMarkupStrategy().parse('<correction\r\n  original="a"\n corrected="b">a</correction>')
        assert result.corrections[0].corrected == "b"

    def test_self_closing_tag(self):
        """A self-closing tag is a zero-width correction."""
        result = TreeMarkupStrategy().parse('x <correction original="" corrected="y"/> z')
        assert result.clean_text == "x  z"
        c = result.corrections[0]
        assert (c.start_index, c.end_index, c.corrected) == (2, 2, "y")

    def test_no_tags_is_success(self):
        """Well-formed text without corrections is valid."""
        result = TreeMarkupStrategy().parse("just text")
        assert result.clean_text == "just text"
        assert result.corrections == ()

    @pytest.mark.parametrize(
        "text",
        [
            "Tom & Jerry",
            'a <correction original="x">x',
            "a </b> c",
            "<correction original='a'>a</correction",
        ],
    )
    def test_malformed_raises(self, text):
        """Input that is not well-formed raises a typed failure."""
        with pytest.raises(MarkupParseError) as exc_info:
            TreeMarkupStrategy().parse(text)
        assert exc_info.value.strategy == "tree"

    def test_external_entities_not_resolved(self):
        """Undeclared entities are a parse failure, never a lookup."""
        with pytest.raises(MarkupParseError):
            TreeMarkupStrategy().parse("&xxe; <correction>a</correction>")


class TestRegexStrategy:
    """Tests for regex-based scanning."""

    def test_two_tags_agree_with_tree(self):
        """Both strategies agree on well-formed input."""
        regex = RegexMarkupStrategy().parse(TWO_TAGS)
        tree = TreeMarkupStrategy().parse(TWO_TAGS)
        assert regex.clean_text == tree.clean_text
        assert regex.corrections == tree.corrections

    def test_bare_ampersand(self):
        """Malformed XML outside tags is copied verbatim."""
        result = RegexMarkupStrategy().parse(
            'Tom & Jerry <correction original="wnet" corrected="went">wnet</correction> home'
        )
        assert result.clean_text == "Tom & Jerry wnet home"
        assert spans(result) == [("wnet", 12, 16)]

    def test_other_tags_kept(self):
        """Only correction tags are stripped."""
        result = RegexMarkupStrategy().parse("<b>x</b> <correction>y</correction>")
        assert result.clean_text == "<b>x</b> y"
        assert spans(result) == [("y", 9, 10)]

    def test_single_quoted_and_escaped_attributes(self):
        """Attribute values may use either quote and are entity-decoded."""
        result = RegexMarkupStrategy().parse(
            "<correction original='a &amp; b' corrected=\"a &quot;and&quot; b\">a & b</correction>"
        )
        c = result.corrections[0]
        assert c.original == "a & b"
        assert c.corrected == 'a "and" b'

    def test_multiline_inner(self):
        """Tags may span lines."""
        result = RegexMarkupStrategy().parse("x <correction>one\ntwo</correction>")
        assert spans(result) == [("one\ntwo", 2, 9)]

    def test_angle_bracket_in_attribute(self):
        """A ">" inside a quoted value does not end the start tag."""
        result = RegexMarkupStrategy().parse(
            '<correction original="a" corrected="a > b">a</correction> c'
        )
        assert result.clean_text == "a c"
        assert result.corrections[0].corrected == "a > b"
        assert spans(result) == [("a", 0, 1)]

    def test_self_closing_tag(self):
        """A self-closing tag does not swallow text up to the next close tag."""
        text = 'x <correction original="" corrected="y"/> w <correction>v</correction>'
        result = RegexMarkupStrategy().parse(text)
        assert result.clean_text == "x  w v"
        assert spans(result) == [("", 2, 2), ("v", 5, 6)]
        assert result.corrections == TreeMarkupStrategy().parse(text).corrections

    @pytest.mark.parametrize(
        "text",
        [
            'I <correction original="has\nwent" corrected="went">has\nwent</correction> x',
            "Line one.\r\nShe <correction original=\"dont\" corrected=\"don't\">dont</correction> know.",
            "a\tb <correction original='c\r\nd'>c\r\nd</correction>\r\n",
        ],
    )
    def test_whitespace_agrees_with_tree(self, text):
        """Both strategies keep whitespace as written."""
        regex = RegexMarkupStrategy().parse(text)
        tree = TreeMarkupStrategy().parse(text)
        assert regex.clean_text == tree.clean_text
        assert regex.corrections == tree.corrections
        assert_spans_quote_inner(tree)

    def test_no_tags_raises(self):
        """Finding nothing is a failure so the chain can fall through."""
        with pytest.raises(MarkupParseError) as exc_info:
            RegexMarkupStrategy().parse("plain & simple")
        assert exc_info.value.strategy == "regex"


class TestMarkupParser:
    """Tests for the strategy chain."""

    def test_tree_used_when_well_formed(self):
        """Well-formed input never reaches the fallback."""
        result = MarkupParser().parse(TWO_TAGS)
        assert spans(result) == [("has", 2, 5), ("apple", 10, 15)]

    def test_falls_back_to_regex(self, caplog):
        """Malformed input is handled by the regex strategy with a warning."""
        with caplog.at_level(logging.WARNING, logger="correction_spans.markup"):
            result = MarkupParser().parse(
                'Tom & Jerry <correction original="wnet" corrected="went">wnet</correction>'
            )
        assert result.clean_text == "Tom & Jerry wnet"
        assert spans(result) == [("wnet", 12, 16)]
        assert "tree" in caplog.text

    def test_everything_fails_returns_input(self, caplog):
        """When no strategy succeeds the input comes back unchanged."""
        text = 'Broken & <correction original="x">x'
        with caplog.at_level(logging.WARNING, logger="correction_spans.markup"):
            result = MarkupParser().parse(text)
        assert result.clean_text == text
        assert result.original_text == text
        assert result.corrections == ()
        assert "treating input as clean text" in caplog.text

    def test_multiline_correction_aligns(self):
        """A multi-line correction parsed by default can be placed by the aligner."""
        result = parse('I <correction original="has\nwent" corrected="went">has\nwent</correction> x')
        aligned = align_corrections(result.clean_text, result.corrections)
        assert aligned.dropped == []
        assert [s.text for s in aligned.segments] == ["I ", "has\nwent", " x"]

    def test_custom_strategy_order(self):
        """Callers may choose the strategies."""
        parser = MarkupParser([RegexMarkupStrategy()])
        result = parser.parse("<b>x</b> <correction>y</correction>")
        assert result.clean_text == "<b>x</b> y"

    def test_empty_strategy_list_rejected(self):
        """A parser with nothing to try is a programming error."""
        with pytest.raises(ValueError):
            MarkupParser([])

    def test_empty_input(self):
        """Empty text parses to empty clean text."""
        result = parse("")
        assert result.clean_text == ""
        assert result.corrections == ()

    def test_non_string_rejected(self):
        """Non-string input is a boundary error."""
        with pytest.raises(InvalidInputError):
            parse(42)

    def test_strip_markup(self):
        """strip_markup returns only the clean text."""
        assert strip_markup(TWO_TAGS) == "I has two apple."

    @pytest.mark.parametrize(
        "text",
        [
            TWO_TAGS,
            'a & b <correction original="c">c</correction> d <correction>e</correction>',
            "<correction>x</correction><correction>y</correction>",
        ],
    )
    def test_spans_quote_inner(self, text):
        """Spans index the clean text wherever the result came from."""
        assert_spans_quote_inner(parse(text))


class TestRenderMarkup:
    """Tests for rendering corrections back into markup."""

    def test_round_trip(self):
        """Rendering then parsing gives back the same result."""
        result = parse(TWO_TAGS)
        rendered = render_markup(result.clean_text, result.corrections)
        again = parse(rendered)
        assert again.clean_text == result.clean_text
        assert again.corrections == result.corrections

    def test_escapes_text_and_attributes(self):
        """Special characters are escaped so the output is well-formed."""
        c = Correction("<b>", 'say "hi"', ErrorType.WORD_CHOICE, "a & b", 4, 7)
        rendered = render_markup("Tom <b> & co", [c])
        assert "&lt;b&gt;" in rendered
        assert "&quot;hi&quot;" in rendered
        again = TreeMarkupStrategy().parse(rendered)
        assert again.clean_text == "Tom <b> & co"
        assert again.corrections == (c,)

    def test_unsorted_input(self):
        """Corrections are placed by position, not input order."""
        b = Correction("b", "B", ErrorType.CAPITALIZATION, start_index=2, end_index=3)
        a = Correction("a", "A", ErrorType.CAPITALIZATION, start_index=0, end_index=1)
        rendered = render_markup("a b", [b, a])
        assert rendered.index('original="a"') < rendered.index('original="b"')

    def test_overlap_rejected(self):
        """Overlapping spans cannot be expressed as markup."""
        a = Correction("abcd", "x", start_index=0, end_index=4)
        b = Correction("cdef", "y", start_index=2, end_index=6)
        with pytest.raises(ValueError):
            render_markup("abcdef", [a, b])

    def test_out_of_range_rejected(self):
        """Spans past the end of the text are rejected."""
        with pytest.raises(ValueError):
            render_markup("abc", [Correction("cd", "x", start_index=2, end_index=4)])
