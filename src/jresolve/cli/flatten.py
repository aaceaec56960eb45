"""
jresolve flatten - Show the flat path map of a JSON document.
"""

import json

import typer

from jresolve.cli.common import fail, read_input
from jresolve.core.flatten import flatten as flatten_document
from jresolve.core.scanner import has_placeholder
from jresolve.exceptions import ResolverError


def flatten(
    file: str = typer.Argument(..., help="JSON document ('-' for stdin)"),
    pending: bool = typer.Option(False, "--pending", "-p", help="Only keys that contain placeholders"),
) -> None:
    """
    Print the flat map without resolving anything.
    """
    try:
        flat = flatten_document(read_input(file))
    except ResolverError as e:
        fail(e)

    if pending:
        flat = {key: value for key, value in flat.items() if has_placeholder(value)}
    typer.echo(json.dumps(flat, indent=2, ensure_ascii=False))
