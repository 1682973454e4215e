"""
Rendering of aligned segments and corrections.

Provides the views the web UI draws from aligned segments, as plain strings:
an HTML fragment with highlighted corrections, an inline plain-text view for
terminals, and the fully corrected text.
"""

import html
from collections.abc import Iterable, Sequence

from .models.correction import Correction
from .models.segment import AnnotatedSegment, Segment


def apply_corrections(text: str, corrections: Sequence[Correction]) -> str:
    """Apply every correction to ``text`` and return the corrected string.

    Corrections are applied right to left so earlier offsets stay valid.
    Overlapping corrections cannot all be applied; when one overlaps a
    correction further right it is skipped.

    Args:
        text: Text the corrections index into
        corrections: Corrections with trustworthy indices into ``text``

    Returns:
        The corrected text

    Example:
        >>> c = Correction("go", "goes", start_index=3, end_index=5)
        >>> apply_corrections("He go home.", [c])
        'He goes home.'
    """
    result = text
    limit = len(text)
    # Insertions sharing a position are applied last-first so they keep input order
    ordered = sorted(
        enumerate(corrections),
        key=lambda item: (item[1].start_index, item[1].end_index, item[0]),
        reverse=True,
    )
    for _, correction in ordered:
        if correction.end_index > limit:
            continue
        result = result[: correction.start_index] + correction.corrected + result[correction.end_index :]
        limit = correction.start_index
    return result


def render_html(segments: Iterable[Segment], show_corrections: bool = False) -> str:
    """Render segments as an HTML fragment.

    Annotated segments become ``<span class="correction correction-TYPE">``
    elements with the explanation, when present, in the title attribute.
    With ``show_corrections`` the original is struck through and followed by
    the replacement.

    Args:
        segments: Output of align()
        show_corrections: Show replacements next to the marked text

    Returns:
        HTML fragment with all text escaped
    """
    parts: list[str] = []
    for segment in segments:
        if not isinstance(segment, AnnotatedSegment):
            parts.append(html.escape(segment.text))
            continue

        correction = segment.correction
        classes = f"correction correction-{correction.type.value}"
        title = ""
        if correction.explanation:
            title = f' title="{html.escape(correction.explanation)}"'

        if show_corrections:
            parts.append(
                f'<span class="{classes}"{title}>'
                f'<del>{html.escape(segment.text)}</del>'
                f'<ins>{html.escape(correction.corrected)}</ins>'
                "</span>"
            )
        else:
            parts.append(f'<span class="{classes}"{title}>{html.escape(segment.text)}</span>')

    return "".join(parts)


def render_inline(segments: Iterable[Segment]) -> str:
    """Render segments as plain text with ``[original -> corrected]`` markers.

    Example:
        "I [have went -> went]."
    """
    parts: list[str] = []
    for segment in segments:
        if isinstance(segment, AnnotatedSegment):
            parts.append(f"[{segment.text} -> {segment.correction.corrected}]")
        else:
            parts.append(segment.text)
    return "".join(parts)
