"""
Shared helpers for jresolve commands: settings, input, diagnostics, errors.
"""

import logging
import sys
from pathlib import Path
from typing import Any, NoReturn

import typer
from rich.console import Console
from rich.rule import Rule

from jresolve.config.loader import Settings, load_settings
from jresolve.core.flatten import load_document
from jresolve.exceptions import ResolverError
from jresolve.utils.logging import get_logger, setup_logging_from_config

logger = get_logger("jresolve.cli")

# Diagnostics only; resolved output is written to stdout with typer.echo
err_console = Console(stderr=True)

STAGE_TITLES = {
    "flat": "Initial flat data",
    "pending": "Data to be resolved",
    "internal": "After internal reference resolution",
    "resolved": "After full resolution",
}


def prepare(
    config: Path | None,
    debug: bool = False,
    verbose: bool = False,
    dry_run: bool = False,
    allow_ambiguous: bool = False,
) -> Settings:
    """Load settings with CLI overrides applied and configure logging."""
    overrides: dict[str, Any] = {}
    if dry_run:
        overrides.setdefault("resolver", {})["external"] = False
    if allow_ambiguous:
        overrides.setdefault("resolver", {})["unique_match"] = False
    if debug:
        overrides["logging"] = {"level": "DEBUG"}
    elif verbose:
        overrides["logging"] = {"level": "INFO"}

    try:
        settings = load_settings(config, overrides)
    except ResolverError as e:
        fail(e)

    setup_logging_from_config(settings, console=err_console)
    return settings


def read_input(file: str) -> dict | list:
    """Parse the input document; ``-`` reads standard input."""
    try:
        if file == "-":
            return load_document(sys.stdin.read())
        path = Path(file)
        if not path.is_file():
            typer.echo(f"Error: Document not found: {path}", err=True)
            raise typer.Exit(3)
        return load_document(path.read_bytes())
    except ResolverError as e:
        fail(e)


def show_stage(stage: str, data: dict) -> None:
    """Print an intermediate flat map to stderr."""
    err_console.print(Rule(STAGE_TITLES.get(stage, stage), style="magenta"))
    err_console.print_json(data=data)


def fail(error: ResolverError) -> NoReturn:
    """Report a resolution failure on stderr and exit with its code."""
    logger.debug("Resolution failed", exc_info=logger.isEnabledFor(logging.DEBUG))
    typer.echo(f"Error: {error.message}", err=True)
    raise typer.Exit(error.exit_code)
