"""
Main CLI entry point.
"""

import typer

from jresolve import __version__
from jresolve.cli import flatten, get, resolve


def version_callback(value: bool):
    """Callback to display version and exit."""
    if value:
        typer.echo(f"jresolve version {__version__}")
        raise typer.Exit()


app = typer.Typer(
    name="jresolve",
    help="jresolve - resolve ${key}, $(command) and $ENV placeholders in JSON configuration",
    add_completion=False,
)

# Register subcommands
app.command(name="resolve", help="Resolve placeholders in a JSON document")(resolve.resolve)
app.command(name="get", help="Resolve a single key of a JSON document")(get.get)
app.command(name="flatten", help="Print the flattened path -> value map")(flatten.flatten)


@app.callback(invoke_without_command=True)
def entrypoint(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
):
    """
    jresolve - resolve placeholders in JSON configuration.

    Run 'jresolve <command> --help' for help on a specific command.
    """
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


def main():
    """Main CLI entry point."""
    app()


if __name__ == "__main__":
    main()
