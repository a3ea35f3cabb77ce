import re
from typing import List, Optional, Sequence

from .tokens import Token, TokenCursor, TokenSubtype, TokenType

# numeric literal as written in a formula: 1, 1.5, .5, 1E+5
NUMBER_PATTERN = re.compile(r"^(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?$")
IMPLICIT_INTERSECTION = "@"


def _is_value(token: Optional[Token]) -> bool:
    """true if token ends a value, so a following +/- is binary."""
    if token is None:
        return False
    if token.type in (TokenType.OPERAND, TokenType.OPERATOR_POSTFIX):
        return True
    return token.is_stop and token.type in (TokenType.FUNCTION, TokenType.SUBEXPRESSION)


def _operand_subtype(value: str) -> TokenSubtype:
    if NUMBER_PATTERN.match(value):
        return TokenSubtype.NUMBER
    if value in ("TRUE", "FALSE"):
        return TokenSubtype.LOGICAL
    return TokenSubtype.RANGE


def _infix_subtype(value: str) -> TokenSubtype:
    if value[:1] in ("<", ">", "="):
        return TokenSubtype.LOGICAL
    if value == "&":
        return TokenSubtype.CONCATENATE
    return TokenSubtype.MATH


def classify(tokens: Sequence[Token]) -> List[Token]:
    """
    resolve prefix/infix roles for + and -, fill in missing subtypes,
    strip the implicit-intersection marker from function names, and
    drop unary plus.
    """
    cursor = TokenCursor(tokens)
    classified: List[Token] = []

    while cursor.move_next():
        token = cursor.current()
        binary = not cursor.bof() and _is_value(cursor.previous())

        if token.type is TokenType.OPERATOR_INFIX and token.value == "-":
            if binary:
                token = token._replace(subtype=TokenSubtype.MATH)
            else:
                token = token._replace(type=TokenType.OPERATOR_PREFIX, subtype=None)
        elif token.type is TokenType.OPERATOR_INFIX and token.value == "+":
            if binary:
                token = token._replace(subtype=TokenSubtype.MATH)
            else:
                token = token._replace(type=TokenType.NOOP, subtype=None)
        elif token.type is TokenType.OPERATOR_INFIX and token.subtype is None:
            token = token._replace(subtype=_infix_subtype(token.value))
        elif token.type is TokenType.OPERAND and token.subtype is None:
            token = token._replace(subtype=_operand_subtype(token.value))
        elif token.type is TokenType.FUNCTION and token.is_start and token.value.startswith(IMPLICIT_INTERSECTION):
            token = token._replace(value=token.value[1:])

        if token.type is not TokenType.NOOP:
            classified.append(token)

    return classified
