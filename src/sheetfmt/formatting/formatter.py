import logging
from typing import List, Optional

from ..domain.models import FormatSettings
from .classifier import classify
from .intersections import resolve_intersections
from .lexer import lex
from .printer import render
from .tokens import Token

logger = logging.getLogger(__name__)


def normalize_formula(formula: str) -> str:
    """drop embedded line breaks and the leading '=' (with surrounding whitespace)."""
    text = formula.replace("\r", "").replace("\n", "").strip()
    if text.startswith("="):
        text = text[1:].strip()
    return text


class Formatter:
    """lexes, resolves intersections, classifies and prints a formula."""

    def __init__(self, indent_width: int = 4, strict: bool = False):
        self.settings = FormatSettings(indent_width=indent_width, strict=strict)

    @classmethod
    def from_settings(cls, settings: FormatSettings) -> "Formatter":
        return cls(indent_width=settings.indent_width, strict=settings.strict)

    @property
    def strict(self) -> bool:
        return self.settings.strict

    def tokens(self, formula: str) -> List[Token]:
        """classified token sequence for a formula; empty for non-text input."""
        if not isinstance(formula, str) or not formula:
            return []
        raw = lex(normalize_formula(formula), strict=self.strict)
        return classify(resolve_intersections(raw))

    def format(self, formula: str) -> str:
        if not isinstance(formula, str) or not formula:
            return ""
        tokens = self.tokens(formula)
        logger.debug(f"formatting {len(tokens)} tokens")
        return render(tokens, indent=self.settings.indent)


def format_formula(formula: str, indent_width: int = 4, strict: bool = False) -> str:
    """
    re-print a single-line formula as indented, multi-line text.

    returns "" for empty or non-string input. unless strict is set, malformed
    input is formatted on a best-effort basis instead of raising.
    """
    return Formatter(indent_width=indent_width, strict=strict).format(formula)


def format_with_settings(formula: str, settings: Optional[FormatSettings] = None) -> str:
    settings = settings or FormatSettings()
    return Formatter.from_settings(settings).format(formula)
