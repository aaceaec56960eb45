"""
jresolve resolve - Resolve every placeholder in a JSON document.
"""

import json
from pathlib import Path

import typer

from jresolve.cli.common import fail, prepare, read_input, show_stage
from jresolve.core.api import resolve_document
from jresolve.exceptions import ResolverError
from jresolve.utils.logging import get_logger

logger = get_logger("jresolve.cli.resolve")


def resolve(
    file: str = typer.Argument(..., help="JSON document to resolve ('-' for stdin)"),
    debug: bool = typer.Option(False, "--debug", "-d", help="Print all intermediary flat maps to stderr"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Resolve internal references only, run no commands"),
    allow_ambiguous: bool = typer.Option(
        False, "--allow-ambiguous", help="Use the first match when a shorthand key is ambiguous"
    ),
    config: Path | None = typer.Option(None, "--config", "-c", help="Settings file (default: ./jresolve.yaml)"),
    output: Path | None = typer.Option(None, "--output", "-o", help="Write the result here instead of stdout"),
    indent: int | None = typer.Option(None, "--indent", help="JSON indentation (default: from settings, 2)"),
) -> None:
    """
    Resolve ${key}, $(command) and $ENV placeholders and print the document.
    """
    settings = prepare(config, debug=debug, verbose=verbose, dry_run=dry_run, allow_ambiguous=allow_ambiguous)
    doc = read_input(file)

    try:
        result = resolve_document(doc, settings=settings, observer=show_stage if debug else None)
    except ResolverError as e:
        fail(e)

    text = json.dumps(result, indent=settings.indent if indent is None else indent, ensure_ascii=False)
    if output is not None:
        output.write_text(text + "\n")
        logger.info(f"Wrote resolved document to {output}")
    else:
        typer.echo(text)
