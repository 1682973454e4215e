"""
Example walking model corrections from raw output to rendered HTML.

This example shows the three ways corrections arrive and how each ends up
as aligned segments:
- An (original, corrected) pair diffed word by word
- Inline <correction> markup, including malformed markup
- A bare corrections list whose indices cannot be trusted
"""

from correction_spans import (
    Correction,
    align_corrections,
    apply_corrections,
    extract,
    parse,
    reconcile_corrections,
    render_html,
    render_inline,
)


def main():
    """Demonstrate the extract, parse, reconcile and align pipeline."""
    print("=" * 60)
    print("Correction pipeline example")
    print("=" * 60)

    # Example 1: Diff a pair
    print("\n1. Diff an (original, corrected) pair:")
    result = extract("She go to school every days.", "She goes to school every day.")
    for c in result.corrections:
        print(f"   [{c.start_index}:{c.end_index}] {c.original!r} -> {c.corrected!r} ({c.type.value})")
    print(f"   Corrected: {apply_corrections(result.clean_text, result.corrections)}")

    # Example 2: Parse inline markup
    print("\n2. Parse inline markup:")
    marked = (
        'I <correction original="has" corrected="have" type="grammar" '
        'explanation="Agreement with I">has</correction> two apple.'
    )
    result = parse(marked)
    print(f"   Clean text: {result.clean_text}")
    print(f"   {result}")

    # Example 3: Malformed markup falls back to regex scanning
    print("\n3. Malformed markup:")
    result = parse('Tom & Jerry <correction original="wnet" corrected="went">wnet</correction> home.')
    print(f"   Clean text: {result.clean_text}")
    print(f"   Span: {result.corrections[0].start_index}-{result.corrections[0].end_index}")

    # Example 4: Reconcile corrections without trustworthy indices
    print("\n4. Reconcile against canonical text:")
    canonical = "The cat sat on teh mat. The dog sat too."
    reconciled = reconcile_corrections(
        canonical,
        [Correction("teh", "the", "spelling"), Correction("The", "A", "word-choice")],
    )
    print(f"   {reconciled}")
    for c in reconciled.corrections:
        print(f"   {c.original!r} now at {c.start_index}")

    # Example 5: Align at render time
    print("\n5. Align and render:")
    aligned = align_corrections(canonical, reconciled.corrections)
    print(f"   {aligned}")
    print(f"   Inline: {render_inline(aligned.segments)}")
    print(f"   HTML:   {render_html(aligned.segments)}")

    print("\n" + "=" * 60)


if __name__ == "__main__":
    main()
