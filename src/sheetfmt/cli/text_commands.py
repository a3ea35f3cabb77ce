import typer
from pathlib import Path
from typing import Optional

from ..domain.errors import SheetfmtError
from ..tools.text import (
    remove_duplicates,
    repeat_columns,
    repeat_lines,
    replace_content,
    set_wildcard,
    split_array_formula,
)
from .common import fail, read_input

app = typer.Typer()

FILE_OPTION = typer.Option(None, "--file", "-f", help="Read input from a file instead of stdin")


@app.command("repeat-rows")
def repeat_rows_command(
    times: int = typer.Option(..., "--times", "-n", min=0, help="Number of repetitions"),
    gap: bool = typer.Option(False, "--gap", help="Insert blank lines between rows instead of repeating them"),
    file: Optional[Path] = FILE_OPTION,
):
    """repeat each line, or space lines apart with --gap."""
    typer.echo(repeat_lines(read_input(file=file), times, gap=gap))


@app.command("repeat-cols")
def repeat_cols_command(
    times: int = typer.Option(..., "--times", "-n", min=0, help="Number of repetitions"),
    gap: bool = typer.Option(False, "--gap", help="Insert blank cells between columns instead of repeating them"),
    file: Optional[Path] = FILE_OPTION,
):
    """repeat each tab separated cell, or space cells apart with --gap."""
    typer.echo(repeat_columns(read_input(file=file), times, gap=gap))


@app.command("dedupe")
def dedupe_command(
    columns: bool = typer.Option(False, "--columns", help="De-duplicate tab separated cells instead of lines"),
    file: Optional[Path] = FILE_OPTION,
):
    """remove duplicate and empty lines."""
    typer.echo(remove_duplicates(read_input(file=file), columns=columns))


@app.command("wildcard")
def wildcard_command(
    remove: bool = typer.Option(False, "--remove", help="Strip * wildcards instead of adding them"),
    file: Optional[Path] = FILE_OPTION,
):
    """wrap every cell in * wildcards."""
    typer.echo(set_wildcard(read_input(file=file), remove=remove))


@app.command("split-array")
def split_array_command(file: Optional[Path] = FILE_OPTION):
    """split a multi-line ={...} array formula into one formula per line."""
    typer.echo(split_array_formula(read_input(file=file)))


@app.command("replace")
def replace_command(
    pattern: str = typer.Argument(..., help="Regular expression to search for"),
    replacement: str = typer.Argument(..., help="Replacement text (\\1 for groups)"),
    per_line: bool = typer.Option(False, "--per-line", help="Apply the pattern to each line separately"),
    file: Optional[Path] = FILE_OPTION,
):
    """regex search and replace."""
    try:
        result = replace_content(read_input(file=file), pattern, replacement, per_line=per_line)
    except SheetfmtError as e:
        fail(str(e))
    typer.echo(result)
