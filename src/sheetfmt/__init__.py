"""sheetfmt: spreadsheet formula formatter and sheet text helpers."""
from .domain.errors import (
    ConfigError,
    InvalidPatternError,
    MalformedFormulaError,
    ReferenceFormatError,
    SheetfmtError,
)
from .formatting import Formatter, format_formula

__version__ = "0.1.0"

__all__ = [
    "ConfigError",
    "InvalidPatternError",
    "MalformedFormulaError",
    "ReferenceFormatError",
    "SheetfmtError",
    "Formatter",
    "format_formula",
]
