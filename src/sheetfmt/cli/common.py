import sys
from pathlib import Path
from typing import NoReturn, Optional

import typer
from rich.console import Console
from rich.markup import escape

console = Console()
err_console = Console(stderr=True)


def fail(message: str) -> NoReturn:
    """print an error and exit with status 1."""
    err_console.print(f"[red]Error:[/red] {escape(message)}")
    raise typer.Exit(code=1)


def read_input(value: Optional[str] = None, file: Optional[Path] = None) -> str:
    """
    resolve command input: an explicit value, else a file, else stdin.

    one trailing newline from a file or stdin is dropped.
    """
    if value is not None:
        return value

    if file is not None:
        try:
            text = file.read_text(encoding="utf-8")
        except OSError as e:
            fail(f"could not read {file}: {e}")
    else:
        text = sys.stdin.read()

    if text.endswith("\n"):
        text = text[:-1]
    return text
