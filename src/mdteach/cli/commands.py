"""CLI command implementations"""

import logging
from pathlib import Path
from typing import Annotated, Optional

import typer

from mdteach.config import Settings, load_config
from mdteach.core.errors import ConversionError
from mdteach.core.pipeline import run_convert


def _fail(msg: str, cause: Exception = None) -> None:
    """Print a user-friendly error to stderr and exit 1."""
    typer.echo(f"Error: {msg}", err=True)
    if cause:
        typer.echo(f"  {cause}", err=True)
    raise typer.Exit(1)


def _settings(overrides: dict = None) -> Settings:
    """Load config with standard CLI error handling."""
    try:
        return load_config(overrides=overrides)
    except ValueError as e:
        _fail(str(e))


def _configure_logging(debug: bool) -> None:
    """Diagnostic trace goes to stderr; only warnings unless -d is given."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(message)s",
        force=True,
    )


def convert_cmd(
    input: Annotated[Path, typer.Argument(exists=True, dir_okay=False, readable=True, help="Markdown file to convert")],
    output: Annotated[Path, typer.Argument(dir_okay=False, help="Teach file to create (replaced if it exists)")],
    debug: Annotated[bool, typer.Option("-d", "--debug", help="Trace parser events to stderr")] = False,
    parser: Annotated[Optional[str], typer.Option("--parser-config", help="MarkdownIt preset name")] = None,
    ):
    """Convert a markdown file into a Teach document."""
    _configure_logging(debug)
    settings = _settings(overrides={"parser_config": parser})

    try:
        result = run_convert(input, output, settings)
    except ConversionError as e:
        _fail(f"Conversion of {input} failed", e)
    except (OSError, ValueError) as e:
        _fail(f"Unable to convert {input}", e)

    typer.echo(f"  {result.source} -> {result.output}")
    typer.echo(f"Wrote {result.text_length} text byte(s) in {result.run_count} style run(s)")
