import logging
from pathlib import Path
from typing import Optional

import typer
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table
from rich.text import Text

from .. import config
from ..domain.errors import ConfigError, SheetfmtError
from ..domain.models import FormatSettings
from ..formatting import Formatter
from ..tools.sheets import convert_reference, extract_sheet_ids, sheet_url
from .common import console, err_console, fail, read_input
from .text_commands import app as text_app

app = typer.Typer(help="Format spreadsheet formulas and tidy copied sheet data.")
config_app = typer.Typer()

app.add_typer(text_app, name="text", help="Transform copied rows and columns")
app.add_typer(config_app, name="config", help="Show or change formatting defaults")

FILE_OPTION = typer.Option(None, "--file", "-f", help="Read input from a file instead of stdin")


@app.callback()
def main_callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug details to stderr"),
):
    """callback that runs before every command to set up logging."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=err_console, show_path=False)],
        )


def get_settings(strict: Optional[bool] = None, indent: Optional[int] = None) -> FormatSettings:
    """config file settings, overridden by command line options."""
    try:
        settings = config.load_settings()
    except ConfigError as e:
        fail(str(e))

    overrides = {}
    if strict is not None:
        overrides["strict"] = strict
    if indent is not None:
        overrides["indent_width"] = indent
    return settings.model_copy(update=overrides)


@app.command("format")
def format_command(
    formula: Optional[str] = typer.Argument(None, help="Formula text; read from stdin when omitted"),
    file: Optional[Path] = FILE_OPTION,
    strict: Optional[bool] = typer.Option(None, "--strict/--lenient", help="Fail on malformed formulas"),
    indent: Optional[int] = typer.Option(None, "--indent", min=1, max=16, help="Spaces per nesting level"),
):
    """re-print a formula with one argument per indented line."""
    formatter = Formatter.from_settings(get_settings(strict, indent))
    try:
        result = formatter.format(read_input(formula, file))
    except SheetfmtError as e:
        fail(str(e))
    typer.echo(result)


@app.command("tokens")
def tokens_command(
    formula: Optional[str] = typer.Argument(None, help="Formula text; read from stdin when omitted"),
    file: Optional[Path] = FILE_OPTION,
    strict: bool = typer.Option(False, "--strict", help="Fail on malformed formulas"),
):
    """show the classified tokens of a formula."""
    try:
        tokens = Formatter(strict=strict).tokens(read_input(formula, file))
    except SheetfmtError as e:
        fail(str(e))

    table = Table(title="Tokens")
    table.add_column("#", style="dim", justify="right")
    table.add_column("Type", style="cyan")
    table.add_column("Subtype", style="green")
    table.add_column("Value", style="white")

    for i, token in enumerate(tokens):
        subtype = token.subtype.value if token.subtype else ""
        table.add_row(str(i), token.type.value, subtype, Text(repr(token.value)))

    console.print(table)


@app.command("sheet-id")
def sheet_id_command(
    text: Optional[str] = typer.Argument(None, help="Spreadsheet url(s) or IMPORTRANGE formula"),
    file: Optional[Path] = FILE_OPTION,
):
    """extract spreadsheet ids from urls, one per line."""
    typer.echo(extract_sheet_ids(read_input(text, file)))


@app.command("sheet-url")
def sheet_url_command(
    text: Optional[str] = typer.Argument(None, help="Spreadsheet id or url"),
    open_browser: bool = typer.Option(False, "--open", help="Open the url in a browser"),
):
    """build the url of a spreadsheet from its id."""
    url = sheet_url(read_input(text))
    typer.echo(url)
    if open_browser:
        typer.launch(url)


@app.command("reference")
def reference_command(
    text: Optional[str] = typer.Argument(None, help="Sheet!Range reference or INDIRECT(...) formula"),
):
    """convert between Sheet!A1 and INDIRECT("Sheet!A1")."""
    try:
        result = convert_reference(read_input(text))
    except SheetfmtError as e:
        fail(str(e))
    typer.echo(result)


@config_app.command("show")
def config_show():
    """show the effective formatting settings."""
    try:
        settings = config.load_settings()
    except ConfigError as e:
        fail(str(e))

    table = Table(title=f"Config ({config.CONFIG_FILE})")
    table.add_column("Key", style="cyan")
    table.add_column("Value", style="white")
    for key, field in config.CONFIG_KEYS.items():
        table.add_row(key, str(getattr(settings, field)))
    console.print(table)


@config_app.command("set")
def config_set(key: str, value: str):
    """set a config value."""
    try:
        config.set_config_value(key, value)
    except ConfigError as e:
        fail(str(e))
    console.print(f"[green]✓ {key.upper()} set to {escape(value)}[/green]")


if __name__ == "__main__":
    app()
