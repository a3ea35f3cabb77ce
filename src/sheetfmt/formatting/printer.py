from typing import Optional, Sequence

from .tokens import (
    ARRAY,
    ARRAY_ROW,
    ARRAY_ROW_STOP,
    ARRAY_STOP,
    Token,
    TokenCursor,
    TokenSubtype,
    TokenType,
)

DEFAULT_INDENT = "    "

# a token of one of these kinds coming next requests a line break after the current one
AUTO_BREAK_TYPES = frozenset({TokenType.FUNCTION, TokenType.ARGUMENT, TokenType.OPERATOR_INFIX})
AUTO_BREAK_SUBTYPES = frozenset({TokenSubtype.LOGICAL})


def _wants_break(token: Optional[Token]) -> bool:
    if token is None:
        return False
    return token.type in AUTO_BREAK_TYPES or token.subtype in AUTO_BREAK_SUBTYPES


def _attaches(token: Optional[Token]) -> bool:
    """operators that bind directly to the token after them, without a space or break."""
    if token is None:
        return False
    if token.type is TokenType.OPERATOR_PREFIX:
        return True
    return token.type is TokenType.OPERATOR_INFIX and token.subtype in (
        TokenSubtype.CONCATENATE,
        TokenSubtype.INTERSECT,
    )


def _quote_sheet_name(value: str) -> str:
    """re-double quotes inside a leading 'Sheet Name' prefix."""
    if not value.startswith("'"):
        return value
    # sheet names cannot contain "[", so a quote inside a table bracket is not the closing one
    end = value.split("[", 1)[0].rfind("'")
    if end == 0:
        return value
    return "'" + value[1:end].replace("'", "''") + value[end:]


def _is_array_wrapper(token: Token) -> bool:
    return token.type is TokenType.FUNCTION and token.value in (ARRAY, ARRAY_STOP)


class FormulaPrinter:
    """
    lays out a classified token sequence as indented, multi-line text.

    state is a nesting depth, an "inside array row" flag, a start-of-line
    flag and the previously printed token. a printer instance renders one
    sequence; create a new one per call.
    """

    def __init__(self, tokens: Sequence[Token], indent: str = DEFAULT_INDENT):
        self.cursor = TokenCursor(tokens)
        self.indent_unit = indent
        self.depth = 0
        self.in_array = False
        self.new_line = True
        self.last: Optional[Token] = None
        self.output = ""

    def render(self) -> str:
        while self.cursor.move_next():
            token = self.cursor.current()
            following = self.cursor.next()
            opens_empty_pair = following is not None and following.closes(token)
            closes_empty_pair = token.closes(self.cursor.previous())

            if token.is_stop and not closes_empty_pair and not _is_array_wrapper(token):
                self.depth = max(self.depth - 1, 0)

            if token.type is TokenType.FUNCTION and token.value == ARRAY_ROW and token.is_start:
                self.in_array = True
            elif token.type is TokenType.FUNCTION and token.value == ARRAY_ROW_STOP:
                self.in_array = False

            in_row_separator = self.in_array and token.type is TokenType.ARGUMENT
            if opens_empty_pair or in_row_separator or _attaches(token):
                line_break = False
            else:
                line_break = _wants_break(following)

            if opens_empty_pair:
                self.output += self._open_empty_pair(token)
            elif closes_empty_pair:
                self.output += "}" if token.value == ARRAY_ROW_STOP else ")"
            else:
                self.output += self._apply_template(token, "\n" if line_break else "")

            if token.is_start and not opens_empty_pair and not _is_array_wrapper(token):
                self.depth += 1

            self.new_line = line_break or self.output.endswith("\n")
            self.last = token

        return "=" + self.output.strip()

    def _indent(self) -> str:
        return self.indent_unit * self.depth

    def _lead(self) -> str:
        """separator printed before a token: indent at line start, else one space."""
        if _attaches(self.last):
            return ""
        if self.new_line:
            return self._indent()
        return " "

    @staticmethod
    def _name(token: Token) -> str:
        return token.value.replace(" ", "")

    def _open_empty_pair(self, token: Token) -> str:
        if token.type is TokenType.FUNCTION and token.value == ARRAY_ROW:
            return self._lead() + "{"
        return self._lead() + self._name(token) + "("

    def _apply_template(self, token: Token, line_break: str) -> str:
        if self.in_array and token.type is TokenType.ARGUMENT:
            # the next value supplies the space after a comma
            return "," if token.value == "," else ";\n"

        if token.type in (TokenType.FUNCTION, TokenType.SUBEXPRESSION):
            if _is_array_wrapper(token):
                return ""
            if token.is_start:
                if token.value == ARRAY_ROW:
                    return self._lead() + "{\n"
                return self._lead() + self._name(token) + "(\n"
            if token.is_stop:
                closer = "}" if token.value == ARRAY_ROW_STOP else ")"
                return "\n" + self._indent() + closer
            return ""

        if token.type is TokenType.OPERAND:
            if token.subtype is TokenSubtype.TEXT:
                return self._lead() + '"' + token.value.replace('"', '""') + '"'
            if token.subtype is TokenSubtype.ERROR:
                return ("" if _attaches(self.last) else " ") + token.value
            return self._lead() + _quote_sheet_name(token.value)

        if token.type is TokenType.OPERATOR_INFIX:
            if token.subtype is TokenSubtype.CONCATENATE:
                self.output = self.output.rstrip()
                return token.value
            if token.subtype is TokenSubtype.INTERSECT:
                return " "
            return " " + self._name(token) + line_break

        if token.type is TokenType.ARGUMENT:
            if self.last is not None and self.last.type is not TokenType.ARGUMENT:
                return token.value + "\n"
            return self._lead() + token.value + "\n"

        if token.type is TokenType.OPERATOR_POSTFIX:
            return token.value

        if token.type in (TokenType.OPERATOR_PREFIX, TokenType.UNKNOWN):
            return self._lead() + token.value

        return ""


def render(tokens: Sequence[Token], indent: str = DEFAULT_INDENT) -> str:
    """print classified tokens as an indented formula, prefixed with '='."""
    return FormulaPrinter(tokens, indent=indent).render()
