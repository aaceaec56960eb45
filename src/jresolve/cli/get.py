"""
jresolve get - Resolve a single key of a JSON document.
"""

import json
from pathlib import Path

import typer

from jresolve.cli.common import fail, prepare, read_input
from jresolve.core.api import resolve_key
from jresolve.exceptions import ResolverError


def get(
    file: str = typer.Argument(..., help="JSON document ('-' for stdin)"),
    key: str = typer.Argument(..., help="Full path, shorthand, or path.join(sep)"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
    debug: bool = typer.Option(False, "--debug", "-d", help="Debug logging"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Resolve internal references only, run no commands"),
    allow_ambiguous: bool = typer.Option(
        False, "--allow-ambiguous", help="Use the first match when a shorthand key is ambiguous"
    ),
    config: Path | None = typer.Option(None, "--config", "-c", help="Settings file (default: ./jresolve.yaml)"),
) -> None:
    """
    Print the resolved value of KEY. Strings are printed raw, other values as JSON.
    """
    settings = prepare(config, debug=debug, verbose=verbose, dry_run=dry_run, allow_ambiguous=allow_ambiguous)
    doc = read_input(file)

    try:
        value = resolve_key(doc, key, settings=settings)
    except ResolverError as e:
        fail(e)

    typer.echo(value if isinstance(value, str) else json.dumps(value))
