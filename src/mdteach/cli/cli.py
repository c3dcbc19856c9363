"""CLI entrypoint: Typer app definition and command registration"""

import typer

from mdteach.cli.commands import convert_cmd


app = typer.Typer(name="mdteach", add_completion=False, help="Convert CommonMark documents to Teach rich-text files")

app.command(name="convert")(convert_cmd)
