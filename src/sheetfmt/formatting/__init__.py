"""formula tokenizer and structural re-printer."""
from .classifier import classify
from .formatter import Formatter, format_formula, format_with_settings, normalize_formula
from .intersections import resolve_intersections
from .lexer import FormulaLexer, LexMode, lex
from .printer import FormulaPrinter, render
from .tokens import NestingStack, Token, TokenCursor, TokenSubtype, TokenType

__all__ = [
    "classify",
    "Formatter",
    "format_formula",
    "format_with_settings",
    "normalize_formula",
    "resolve_intersections",
    "FormulaLexer",
    "LexMode",
    "lex",
    "FormulaPrinter",
    "render",
    "NestingStack",
    "Token",
    "TokenCursor",
    "TokenSubtype",
    "TokenType",
]
