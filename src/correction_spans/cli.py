"""Command-line interface for correction-spans.

Provides commands for extracting, reconciling and aligning correction spans
from the terminal. Every command prints JSON unless asked for HTML.
"""

import json
import logging
from pathlib import Path
from typing import Annotated, Any

import typer

from . import __version__
from .align import align_corrections
from .engine import corrections_from_payload, load_request_file, process
from .markup import MarkupParser
from .models.correction import Correction
from .reconcile import reconcile_corrections
from .rendering import render_html, render_inline
from .word_diff import extract, extract_positional

app = typer.Typer(
    name="correction-spans",
    help="Extract, reconcile and align text correction spans from the command line.",
    no_args_is_help=True,
)


def _echo_json(data: Any) -> None:
    typer.echo(json.dumps(data, indent=2, ensure_ascii=False))


def _load_corrections(path: Path) -> list[Correction]:
    """Read a corrections list, either bare or under a "corrections" key."""
    data = load_request_file(path)
    if isinstance(data, dict):
        data = data.get("corrections", [])
    return corrections_from_payload(data)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"correction-spans version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-v",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
    verbose: Annotated[
        bool, typer.Option("--verbose", help="Log degraded matches to stderr.")
    ] = False,
) -> None:
    """Extract, reconcile and align text correction spans from the command line."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


@app.command()
def diff(
    original: Annotated[str, typer.Argument(help="Text before correction")],
    corrected: Annotated[str, typer.Argument(help="Text after correction")],
    positional: Annotated[
        bool, typer.Option("--positional", help="Pair words by position instead of diffing")
    ] = False,
) -> None:
    """Diff two texts into corrections indexed into the original."""
    try:
        result = extract_positional(original, corrected) if positional else extract(original, corrected)
        _echo_json(result.to_dict())
    except Exception as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


@app.command()
def parse(
    marked: Annotated[str, typer.Argument(help="Text with inline <correction> tags")],
) -> None:
    """Parse inline correction markup into clean text and corrections."""
    try:
        _echo_json(MarkupParser().parse(marked).to_dict())
    except Exception as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


@app.command()
def reconcile(
    canonical: Annotated[str, typer.Argument(help="Text the corrections should index into")],
    corrections: Annotated[
        Path, typer.Option("--corrections", "-c", help="YAML/JSON file with corrections")
    ],
    strict: Annotated[
        bool, typer.Option("--strict", help="Fail on missing or repeated texts")
    ] = False,
    fuzzy: Annotated[
        float | None, typer.Option("--fuzzy", help="Fuzzy match threshold (0.0-1.0)")
    ] = None,
) -> None:
    """Recompute correction indices against a canonical text."""
    try:
        result = reconcile_corrections(
            canonical, _load_corrections(corrections), strict=strict, fuzzy=fuzzy
        )
        _echo_json([c.to_dict() for c in result.corrections])
        if result.unlocated:
            typer.echo(f"Unlocated corrections: {result.unlocated}", err=True)
    except Exception as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


@app.command()
def align(
    text: Annotated[str, typer.Argument(help="Display text")],
    corrections: Annotated[
        Path, typer.Option("--corrections", "-c", help="YAML/JSON file with corrections")
    ],
    html: Annotated[bool, typer.Option("--html", help="Print an HTML fragment")] = False,
    inline: Annotated[
        bool, typer.Option("--inline", help="Print text with [original -> corrected] markers")
    ] = False,
    show_corrections: Annotated[
        bool, typer.Option("--show-corrections", help="Include replacements in HTML output")
    ] = False,
) -> None:
    """Align corrections against text and print the segments."""
    if html and inline:
        typer.echo("Error: Cannot specify both --html and --inline", err=True)
        raise typer.Exit(1)

    try:
        result = align_corrections(text, _load_corrections(corrections))
        if html:
            typer.echo(render_html(result.segments, show_corrections=show_corrections))
        elif inline:
            typer.echo(render_inline(result.segments))
        else:
            _echo_json(result.to_json())
        if result.dropped:
            typer.echo(f"Dropped {len(result.dropped)} corrections", err=True)
    except Exception as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


@app.command("process")
def process_file(
    request: Annotated[Path, typer.Argument(help="Path to YAML/JSON request file")],
    positional: Annotated[
        bool, typer.Option("--positional", help="Pair words by position instead of diffing")
    ] = False,
) -> None:
    """Process a request file and print the resulting corrections."""
    try:
        payload = load_request_file(request)
        _echo_json(process(payload, diff_strategy="positional" if positional else "words"))
    except Exception as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
