"""
Centralized constants for correction extraction and alignment.

Thresholds and patterns here are part of the observable behaviour of the
classifier and parsers. Changing them changes which labels and spans callers
see, so treat edits as semantic changes rather than tuning.
"""

import re

# =============================================================================
# Classification
# =============================================================================

# Characters whose presence on either side makes a change "punctuation"
PUNCTUATION_PATTERN = re.compile(r"[.,;:!?]")

# Maximum length difference for two words to count as a spelling variant
SIMILARITY_MAX_LENGTH_DELTA = 2

# Fraction of position-aligned matching characters (over the shorter word)
# that must be exceeded, strictly, for two words to count as similar
SIMILARITY_THRESHOLD = 0.6

# Closed-class words that mark a change as grammatical
GRAMMAR_PATTERNS = (
    re.compile(r"\b(is|are|was|were|am)\b", re.IGNORECASE),  # to be
    re.compile(r"\b(a|an|the)\b", re.IGNORECASE),  # articles
    re.compile(r"\b(he|she|it|they|we|you|I)\b", re.IGNORECASE),  # pronouns
    re.compile(r"\b(has|have|had)\b", re.IGNORECASE),  # to have
    re.compile(r"\b(do|does|did)\b", re.IGNORECASE),  # to do
)


# =============================================================================
# Tokenization
# =============================================================================

# Runs of whitespace or runs of non-whitespace; joining the tokens gives back
# the input exactly
WORD_TOKEN_PATTERN = re.compile(r"\s+|\S+")


# =============================================================================
# Inline markup
# =============================================================================

CORRECTION_TAG = "correction"

# Synthetic root element wrapped around model output for tree parsing
MARKUP_ROOT_TAG = "root"

# <correction ATTRS>inner</correction> or <correction ATTRS/>. Quoted values
# may contain ">"; inner is non-greedy so adjacent tags stay apart
CORRECTION_TAG_PATTERN = re.compile(
    r"""<correction\b(?P<attrs>(?:"[^"]*"|'[^']*'|[^'">/])*)"""
    r"(?:/>|>(?P<inner>.*?)</correction\s*>)",
    re.DOTALL,
)

# Any markup construct from "<" to its closing ">", skipping over quoted values
MARKUP_TAG_PATTERN = re.compile(r"""<(?:"[^"]*"|'[^']*'|[^'"<>])*>""")

# A quoted attribute value inside a tag
QUOTED_VALUE_PATTERN = re.compile(r""""[^"]*"|'[^']*'""")

# Character references for whitespace that XML parsers would otherwise
# normalise (line ends everywhere, tabs and newlines in attribute values)
WHITESPACE_CHAR_REFS = {"\t": "&#9;", "\n": "&#10;", "\r": "&#13;"}

# name="value" or name='value' inside a start tag
ATTRIBUTE_PATTERN = re.compile(r"""(?P<name>[\w:.-]+)\s*=\s*(?:"(?P<dq>[^"]*)"|'(?P<sq>[^']*)')""")


# =============================================================================
# Fuzzy matching
# =============================================================================

DEFAULT_FUZZY_THRESHOLD = 0.9

DEFAULT_FUZZY_ALGORITHM = "partial_ratio"

FUZZY_ALGORITHMS = ("ratio", "partial_ratio", "token_sort_ratio")
