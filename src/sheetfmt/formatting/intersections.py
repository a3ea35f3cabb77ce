from typing import List, Optional, Sequence

from .tokens import Token, TokenCursor, TokenSubtype, TokenType


def _ends_range(token: Optional[Token]) -> bool:
    if token is None:
        return False
    if token.type is TokenType.OPERAND:
        return True
    return token.is_stop and token.type in (TokenType.FUNCTION, TokenType.SUBEXPRESSION)


def _starts_range(token: Optional[Token]) -> bool:
    if token is None:
        return False
    if token.type is TokenType.OPERAND:
        return True
    return token.is_start and token.type in (TokenType.FUNCTION, TokenType.SUBEXPRESSION)


def _neighbor(tokens: Sequence[Token], index: int, step: int) -> Optional[Token]:
    """nearest non-whitespace token from index in the given direction."""
    index += step
    while 0 <= index < len(tokens):
        if tokens[index].type is not TokenType.WHITESPACE:
            return tokens[index]
        index += step
    return None


def resolve_intersections(tokens: Sequence[Token]) -> List[Token]:
    """
    drop whitespace tokens, except where a space sits between two range-like
    expressions: there it is the intersection operator.
    """
    cursor = TokenCursor(tokens)
    resolved: List[Token] = []

    while cursor.move_next():
        token = cursor.current()
        if token.type is not TokenType.WHITESPACE:
            resolved.append(token)
            continue

        if cursor.bof() or cursor.eof():
            continue
        left = _neighbor(cursor.tokens, cursor.index, -1)
        right = _neighbor(cursor.tokens, cursor.index, 1)
        if _ends_range(left) and _starts_range(right):
            resolved.append(Token(TokenType.OPERATOR_INFIX, token.value, TokenSubtype.INTERSECT))

    return resolved
