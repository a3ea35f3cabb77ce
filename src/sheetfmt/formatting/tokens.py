from enum import Enum
from typing import Dict, FrozenSet, List, NamedTuple, Optional, Sequence


class TokenType(Enum):
    OPERAND = "operand"
    OPERATOR_INFIX = "operator-infix"
    OPERATOR_PREFIX = "operator-prefix"
    OPERATOR_POSTFIX = "operator-postfix"
    FUNCTION = "function"
    SUBEXPRESSION = "subexpression"
    ARGUMENT = "argument"
    OPERATOR_UNION = "operator-union"
    WHITESPACE = "white-space"
    NOOP = "no-op"
    UNKNOWN = "unknown"


class TokenSubtype(Enum):
    # operand
    TEXT = "text"
    NUMBER = "number"
    LOGICAL = "logical"
    RANGE = "range"
    ERROR = "error"
    # operator-infix
    MATH = "math"
    CONCATENATE = "concatenate"
    INTERSECT = "intersect"
    UNION = "union"
    # function / subexpression
    START = "start"
    STOP = "stop"


VALID_SUBTYPES: Dict[TokenType, FrozenSet[TokenSubtype]] = {
    TokenType.OPERAND: frozenset({
        TokenSubtype.TEXT,
        TokenSubtype.NUMBER,
        TokenSubtype.LOGICAL,
        TokenSubtype.RANGE,
        TokenSubtype.ERROR,
    }),
    TokenType.OPERATOR_INFIX: frozenset({
        TokenSubtype.MATH,
        TokenSubtype.LOGICAL,
        TokenSubtype.CONCATENATE,
        TokenSubtype.INTERSECT,
        TokenSubtype.UNION,
    }),
    TokenType.FUNCTION: frozenset({TokenSubtype.START, TokenSubtype.STOP}),
    TokenType.SUBEXPRESSION: frozenset({TokenSubtype.START, TokenSubtype.STOP}),
}

# synthetic names used to desugar array literals
ARRAY = "ARRAY"
ARRAY_ROW = "ARRAYROW"
ARRAY_ROW_STOP = "ARRAYROWSTOP"
ARRAY_STOP = "ARRAYSTOP"

ERROR_CODES = ("#NULL!", "#DIV/0!", "#VALUE!", "#REF!", "#NAME?", "#NUM!", "#N/A")


class Token(NamedTuple):
    type: TokenType
    value: str
    subtype: Optional[TokenSubtype] = None

    def check(self) -> "Token":
        """raise ValueError if the subtype does not belong to the type."""
        if self.subtype is None:
            return self
        allowed = VALID_SUBTYPES.get(self.type, frozenset())
        if self.subtype not in allowed:
            raise ValueError(f"subtype {self.subtype.value!r} is not valid for {self.type.value!r}")
        return self

    @property
    def is_start(self) -> bool:
        return self.subtype is TokenSubtype.START

    @property
    def is_stop(self) -> bool:
        return self.subtype is TokenSubtype.STOP

    def closes(self, other: Optional["Token"]) -> bool:
        """true if this is the stop token matching the start token ``other``."""
        return other is not None and self.is_stop and other.is_start and self.type is other.type

    def __repr__(self):
        subtype = f"/{self.subtype.value}" if self.subtype else ""
        return f"Token({self.type.value}{subtype}, {self.value!r})"


def make_token(type: TokenType, value: str, subtype: Optional[TokenSubtype] = None) -> Token:
    return Token(type, value, subtype).check()


class TokenCursor:
    """
    single-pass, forward-only view over a finished token sequence.

    the index starts before the first token; call move_next() to advance.
    """

    def __init__(self, tokens: Sequence[Token]):
        self.tokens = tuple(tokens)
        self.index = -1

    def bof(self) -> bool:
        return self.index <= 0

    def eof(self) -> bool:
        return self.index >= len(self.tokens) - 1

    def move_next(self) -> bool:
        if self.eof():
            return False
        self.index += 1
        return True

    def current(self) -> Optional[Token]:
        if self.index == -1:
            return None
        return self.tokens[self.index]

    def next(self) -> Optional[Token]:
        if self.eof():
            return None
        return self.tokens[self.index + 1]

    def previous(self) -> Optional[Token]:
        if self.index < 1:
            return None
        return self.tokens[self.index - 1]


class NestingStack:
    """LIFO of opening tokens, used while lexing to manufacture stop tokens."""

    def __init__(self):
        self._items: List[Token] = []

    def __len__(self):
        return len(self._items)

    def push(self, token: Token) -> Token:
        self._items.append(token)
        return token

    def top(self) -> Optional[Token]:
        return self._items[-1] if self._items else None

    def top_type(self) -> Optional[TokenType]:
        token = self.top()
        return token.type if token else None

    def close_matching(self, value: str = "") -> Optional[Token]:
        """pop the innermost opener and return its stop token, or None if nothing is open."""
        if not self._items:
            return None
        opener = self._items.pop()
        return Token(opener.type, value, TokenSubtype.STOP)
