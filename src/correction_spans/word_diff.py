"""
Word-level diffing of an (original, corrected) pair into correction spans.

The key components:
1. tokenize() - splits text into whitespace runs and non-whitespace runs
2. diff_words() - computes an edit script over those tokens
3. extract() - walks the script and emits Correction spans indexed into the
   original text

Spans produced here always index into the *original* string. Insertions are
zero-width spans at the position where the new text would go.
"""

import logging
import re
from dataclasses import dataclass
from difflib import SequenceMatcher

from .classifier import classify
from .constants import WORD_TOKEN_PATTERN
from .errors import require_text
from .models.correction import Correction, ErrorType
from .results import ParseResult

logger = logging.getLogger(__name__)

_WHITESPACE_SPLIT = re.compile(r"(\s+)")


def tokenize(text: str) -> list[str]:
    """Tokenize text into whitespace runs and non-whitespace runs.

    Punctuation stays attached to its word ("home." is one token), so a
    changed full stop shows up as a changed word.

    Args:
        text: The text to tokenize

    Returns:
        List of tokens that join back to ``text`` exactly

    Example:
        >>> tokenize("He go  home.")
        ['He', ' ', 'go', '  ', 'home.']
    """
    return WORD_TOKEN_PATTERN.findall(text)


@dataclass(frozen=True)
class DiffPart:
    """One run of an edit script.

    Attributes:
        value: Joined text of the run
        added: Run exists only in the corrected text
        removed: Run exists only in the original text
    """

    value: str
    added: bool = False
    removed: bool = False

    @property
    def unchanged(self) -> bool:
        return not (self.added or self.removed)


def diff_words(original: str, corrected: str) -> list[DiffPart]:
    """Compute a token-level edit script between two texts.

    Replacements are emitted as a removed part immediately followed by an
    added part.

    Args:
        original: Text before correction
        corrected: Text after correction

    Returns:
        Ordered list of DiffPart runs
    """
    orig_tokens = tokenize(original)
    new_tokens = tokenize(corrected)

    matcher = SequenceMatcher(None, orig_tokens, new_tokens, autojunk=False)

    parts: list[DiffPart] = []
    for tag, i1, i2, j1, j2 in matcher.get_opcodes():
        removed = "".join(orig_tokens[i1:i2])
        added = "".join(new_tokens[j1:j2])

        if tag == "equal":
            parts.append(DiffPart(removed))
            continue
        if removed:
            parts.append(DiffPart(removed, removed=True))
        if added:
            parts.append(DiffPart(added, added=True))

    return parts


def extract(original: str, corrected: str) -> ParseResult:
    """Convert an (original, corrected) pair into corrections over ``original``.

    Walks the edit script with a cursor into the original text:
    - removed then added → one classified replacement over the removed text
    - removed alone     → a DELETION over the removed text
    - added alone       → a zero-width INSERTION at the cursor
    - unchanged         → cursor moves past it

    Args:
        original: Text before correction
        corrected: Text after correction

    Returns:
        ParseResult whose clean_text and original_text are both ``original``
        and whose corrections are sorted and non-overlapping

    Raises:
        InvalidInputError: If either argument is not a string

    Example:
        >>> result = extract("He go home.", "He goes home.")
        >>> c = result.corrections[0]
        >>> (c.original, c.corrected, c.start_index, c.end_index)
        ('go', 'goes', 3, 5)
    """
    require_text(original, "originalText")
    require_text(corrected, "correctedText")

    if original == corrected:
        return ParseResult(clean_text=original, corrections=(), original_text=original)

    parts = diff_words(original, corrected)

    corrections: list[Correction] = []
    cursor = 0
    i = 0
    while i < len(parts):
        part = parts[i]
        next_part = parts[i + 1] if i + 1 < len(parts) else None

        if part.removed and next_part is not None and next_part.added:
            corrections.append(
                Correction(
                    original=part.value,
                    corrected=next_part.value,
                    type=classify(part.value, next_part.value),
                    start_index=cursor,
                    end_index=cursor + len(part.value),
                )
            )
            cursor += len(part.value)
            i += 2
            continue

        if part.removed:
            corrections.append(
                Correction(
                    original=part.value,
                    corrected="",
                    type=ErrorType.DELETION,
                    start_index=cursor,
                    end_index=cursor + len(part.value),
                )
            )
            cursor += len(part.value)
        elif part.added:
            # Insertions consume no original characters
            corrections.append(
                Correction(
                    original="",
                    corrected=part.value,
                    type=ErrorType.INSERTION,
                    start_index=cursor,
                    end_index=cursor,
                )
            )
        else:
            cursor += len(part.value)
        i += 1

    logger.debug("Extracted %d corrections from %d diff parts", len(corrections), len(parts))
    return ParseResult(clean_text=original, corrections=corrections, original_text=original)


def extract_positional(original: str, corrected: str) -> ParseResult:
    """Pair tokens by position instead of computing an edit script.

    Both texts are split on whitespace (keeping the separators). Where the
    tokens at a position differ, the changed run is extended while the
    following positions also differ, and the run becomes one correction.
    Cheaper than extract() and adequate when the model only substitutes
    words in place; an inserted or removed word shifts every later pairing.

    Args:
        original: Text before correction
        corrected: Text after correction

    Returns:
        ParseResult with spans indexed into ``original``

    Raises:
        InvalidInputError: If either argument is not a string
    """
    require_text(original, "originalText")
    require_text(corrected, "correctedText")

    if original == corrected:
        return ParseResult(clean_text=original, corrections=(), original_text=original)

    orig_words = _WHITESPACE_SPLIT.split(original)
    new_words = _WHITESPACE_SPLIT.split(corrected)

    corrections: list[Correction] = []
    oi = 0
    ni = 0
    position = 0

    while oi < len(orig_words) or ni < len(new_words):
        orig_word = orig_words[oi] if oi < len(orig_words) else None
        new_word = new_words[ni] if ni < len(new_words) else None

        if orig_word == new_word:
            position += len(orig_word or "")
            oi += 1
            ni += 1
            continue

        start = position
        removed = orig_word or ""
        added = new_word or ""

        lookahead = 1
        while (
            oi + lookahead < len(orig_words)
            and ni + lookahead < len(new_words)
            and orig_words[oi + lookahead] != new_words[ni + lookahead]
        ):
            removed += orig_words[oi + lookahead]
            added += new_words[ni + lookahead]
            lookahead += 1

        if removed or added:
            corrections.append(
                Correction(
                    original=removed,
                    corrected=added,
                    type=_label(removed, added),
                    start_index=start,
                    end_index=start + len(removed),
                )
            )

        position += len(removed)
        oi += lookahead
        ni += lookahead

    return ParseResult(clean_text=original, corrections=corrections, original_text=original)


def _label(removed: str, added: str) -> ErrorType:
    if not removed:
        return ErrorType.INSERTION
    if not added:
        return ErrorType.DELETION
    return classify(removed, added)
