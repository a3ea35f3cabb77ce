import logging
import re
from enum import Enum, auto
from typing import Callable, Dict, List, Optional

from ..domain.errors import MalformedFormulaError
from .tokens import (
    ARRAY,
    ARRAY_ROW,
    ARRAY_ROW_STOP,
    ARRAY_STOP,
    ERROR_CODES,
    NestingStack,
    Token,
    TokenSubtype,
    TokenType,
    make_token,
)

logger = logging.getLogger(__name__)

# a mantissa awaiting its exponent sign, e.g. "1.23E" in "1.23E+5"
SCIENTIFIC_PREFIX = re.compile(r"^[1-9](\.[0-9]+)?E$")
TWO_CHAR_OPERATORS = (">=", "<=", "<>")
INFIX_OPERATORS = "+-*/^&=><"


class LexMode(Enum):
    NORMAL = auto()
    TEXT = auto()
    SHEET_PATH = auto()
    BRACKET_RANGE = auto()
    ERROR_CODE = auto()


MODE_NAMES = {
    LexMode.TEXT: "string literal",
    LexMode.SHEET_PATH: "sheet name",
    LexMode.BRACKET_RANGE: "bracketed range",
    LexMode.ERROR_CODE: "error code",
}


class FormulaLexer:
    """
    modal character scanner for spreadsheet formulas.

    exactly one LexMode is active at a time. plain characters collect in a
    pending buffer that is flushed as an operand when a delimiter is reached.
    a lexer instance scans one formula; create a new one per call.
    """

    def __init__(self, formula: str, strict: bool = False):
        self.formula = formula
        self.strict = strict
        self.pos = 0
        self.buffer = ""
        self.mode = LexMode.NORMAL
        self.mode_start = 0
        self.bracket_depth = 0
        self.tokens: List[Token] = []
        self.stack = NestingStack()

        self._scanners: Dict[LexMode, Callable[[], None]] = {
            LexMode.NORMAL: self._scan_normal,
            LexMode.TEXT: self._scan_text,
            LexMode.SHEET_PATH: self._scan_sheet_path,
            LexMode.BRACKET_RANGE: self._scan_bracket_range,
            LexMode.ERROR_CODE: self._scan_error_code,
        }
        self._delimiters: Dict[str, Callable[[str], None]] = {
            '"': self._open_text,
            "'": self._open_sheet_path,
            "[": self._open_bracket_range,
            "#": self._open_error_code,
            "{": self._open_array,
            ";": self._row_separator,
            "}": self._close_array,
            " ": self._whitespace,
            "%": self._postfix,
            "(": self._open_paren,
            ",": self._comma,
            ")": self._close_paren,
        }
        for op in INFIX_OPERATORS:
            self._delimiters[op] = self._infix

    def tokenize(self) -> List[Token]:
        while self.pos < len(self.formula):
            self._scanners[self.mode]()
        self._finish()
        return self.tokens

    # helpers

    def _char(self, ahead: int = 0) -> str:
        start = self.pos + ahead
        return self.formula[start:start + 1]

    def _emit(self, type: TokenType, value: str, subtype: Optional[TokenSubtype] = None) -> Token:
        token = make_token(type, value, subtype)
        self.tokens.append(token)
        return token

    def _flush(self, type: TokenType = TokenType.OPERAND):
        if self.buffer:
            self._emit(type, self.buffer)
            self.buffer = ""

    def _enter(self, mode: LexMode):
        self.mode = mode
        self.mode_start = self.pos

    def _spurious(self, char: str):
        if self.strict:
            raise MalformedFormulaError(f"unbalanced '{char}'", self.pos)
        logger.debug(f"unbalanced '{char}' at position {self.pos}, keeping it as an unknown token")
        self._emit(TokenType.UNKNOWN, char)
        self.pos += 1

    @staticmethod
    def _is_array_row(token: Optional[Token]) -> bool:
        return token is not None and token.type is TokenType.FUNCTION and token.value == ARRAY_ROW

    # literal modes

    def _scan_text(self):
        char = self._char()
        if char == '"':
            if self._char(1) == '"':
                self.buffer += '"'
                self.pos += 2
                return
            self._emit(TokenType.OPERAND, self.buffer, TokenSubtype.TEXT)
            self.buffer = ""
            self.mode = LexMode.NORMAL
        else:
            self.buffer += char
        self.pos += 1

    def _scan_sheet_path(self):
        # the enclosing quotes stay in the value, doubled quotes inside collapse to one
        char = self._char()
        if char == "'":
            if self._char(1) == "'":
                self.buffer += "'"
                self.pos += 2
                return
            self.mode = LexMode.NORMAL
        self.buffer += char
        self.pos += 1

    def _scan_bracket_range(self):
        char = self._char()
        self.buffer += char
        self.pos += 1
        if char == "[":
            self.bracket_depth += 1
        elif char == "]":
            self.bracket_depth -= 1
            if self.bracket_depth == 0:
                self.mode = LexMode.NORMAL

    def _scan_error_code(self):
        self.buffer += self._char()
        self.pos += 1
        if self.buffer in ERROR_CODES:
            self._emit(TokenType.OPERAND, self.buffer, TokenSubtype.ERROR)
            self.buffer = ""
            self.mode = LexMode.NORMAL

    # normal mode

    def _scan_normal(self):
        char = self._char()

        if char in "+-" and SCIENTIFIC_PREFIX.match(self.buffer):
            self.buffer += char
            self.pos += 1
            return

        pair = self.formula[self.pos:self.pos + 2]
        if pair in TWO_CHAR_OPERATORS:
            self._flush()
            self._emit(TokenType.OPERATOR_INFIX, pair, TokenSubtype.LOGICAL)
            self.pos += 2
            return

        handler = self._delimiters.get(char)
        if handler is None:
            self.buffer += char
            self.pos += 1
            return
        handler(char)

    def _open_text(self, char: str):
        self._flush(TokenType.UNKNOWN)
        self._enter(LexMode.TEXT)
        self.pos += 1

    def _open_sheet_path(self, char: str):
        self._flush(TokenType.UNKNOWN)
        self._enter(LexMode.SHEET_PATH)
        self.buffer = char
        self.pos += 1

    def _open_bracket_range(self, char: str):
        # "Table1[Col]" stays a single operand, so the buffer is not flushed
        self._enter(LexMode.BRACKET_RANGE)
        self.bracket_depth = 1
        self.buffer += char
        self.pos += 1

    def _open_error_code(self, char: str):
        self._flush(TokenType.UNKNOWN)
        self._enter(LexMode.ERROR_CODE)
        self.buffer = char
        self.pos += 1

    def _open_array(self, char: str):
        self._flush(TokenType.UNKNOWN)
        self.stack.push(self._emit(TokenType.FUNCTION, ARRAY, TokenSubtype.START))
        self.stack.push(self._emit(TokenType.FUNCTION, ARRAY_ROW, TokenSubtype.START))
        self.pos += 1

    def _row_separator(self, char: str):
        self._flush()
        self._emit(TokenType.ARGUMENT, char)
        self.pos += 1

    def _close_array(self, char: str):
        self._flush()
        if not self._is_array_row(self.stack.top()):
            self._spurious(char)
            return
        self.tokens.append(self.stack.close_matching(ARRAY_ROW_STOP))
        self.tokens.append(self.stack.close_matching(ARRAY_STOP))
        self.pos += 1

    def _whitespace(self, char: str):
        self._flush()
        self._emit(TokenType.WHITESPACE, " ")
        while self._char() == " ":
            self.pos += 1

    def _infix(self, char: str):
        self._flush()
        self._emit(TokenType.OPERATOR_INFIX, char)
        self.pos += 1

    def _postfix(self, char: str):
        self._flush()
        self._emit(TokenType.OPERATOR_POSTFIX, char)
        self.pos += 1

    def _open_paren(self, char: str):
        if self.buffer:
            opener = self._emit(TokenType.FUNCTION, self.buffer, TokenSubtype.START)
            self.buffer = ""
        else:
            opener = self._emit(TokenType.SUBEXPRESSION, "", TokenSubtype.START)
        self.stack.push(opener)
        self.pos += 1

    def _comma(self, char: str):
        self._flush()
        if self.stack.top_type() is TokenType.FUNCTION:
            self._emit(TokenType.ARGUMENT, char)
        else:
            self._emit(TokenType.OPERATOR_INFIX, char, TokenSubtype.UNION)
        self.pos += 1

    def _close_paren(self, char: str):
        self._flush()
        top = self.stack.top()
        if top is None or self._is_array_row(top):
            self._spurious(char)
            return
        self.tokens.append(self.stack.close_matching())
        self.pos += 1

    def _finish(self):
        if self.mode is not LexMode.NORMAL:
            if self.strict:
                raise MalformedFormulaError(f"unterminated {MODE_NAMES[self.mode]}", self.mode_start)
            if self.mode in (LexMode.TEXT, LexMode.SHEET_PATH):
                # quoted content was un-escaped while scanning; keep the source text instead
                value = self.formula[self.mode_start:]
            else:
                value = self.buffer
            logger.debug(f"unterminated {MODE_NAMES[self.mode]} at position {self.mode_start}: {value!r}")
            self._emit(TokenType.UNKNOWN, value)
            self.buffer = ""
            self.mode = LexMode.NORMAL
        else:
            self._flush()

        if len(self.stack):
            if self.strict:
                raise MalformedFormulaError(f"{len(self.stack)} unclosed group(s)", len(self.formula))
            logger.debug(f"{len(self.stack)} group(s) left open at end of formula")


def lex(text: str, strict: bool = False) -> List[Token]:
    """scan formula text (without the leading '=') into raw tokens."""
    return FormulaLexer(text, strict=strict).tokenize()
