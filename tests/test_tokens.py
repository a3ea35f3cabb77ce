"""test suite for token types, the cursor and the nesting stack."""
import pytest
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from sheetfmt.formatting.tokens import (
    NestingStack,
    Token,
    TokenCursor,
    TokenSubtype,
    TokenType,
    make_token,
)


class TestToken:
    def test_valid_subtype(self):
        token = make_token(TokenType.OPERAND, "1", TokenSubtype.NUMBER)
        assert token.subtype is TokenSubtype.NUMBER

    def test_invalid_subtype_rejected(self):
        with pytest.raises(ValueError):
            make_token(TokenType.OPERAND, "SUM", TokenSubtype.START)

    def test_argument_has_no_subtypes(self):
        with pytest.raises(ValueError):
            make_token(TokenType.ARGUMENT, ",", TokenSubtype.MATH)

    def test_tokens_are_immutable(self):
        token = Token(TokenType.OPERAND, "A1")
        with pytest.raises(AttributeError):
            token.value = "B1"

    def test_closes(self):
        start = Token(TokenType.FUNCTION, "SUM", TokenSubtype.START)
        stop = Token(TokenType.FUNCTION, "", TokenSubtype.STOP)
        other = Token(TokenType.SUBEXPRESSION, "", TokenSubtype.STOP)
        assert stop.closes(start)
        assert not other.closes(start)
        assert not stop.closes(None)


class TestTokenCursor:
    def setup_method(self):
        self.tokens = [Token(TokenType.OPERAND, v) for v in ("a", "b", "c")]

    def test_starts_before_first_token(self):
        cursor = TokenCursor(self.tokens)
        assert cursor.current() is None
        assert cursor.bof()

    def test_walk(self):
        cursor = TokenCursor(self.tokens)
        seen = []
        while cursor.move_next():
            seen.append(cursor.current().value)
        assert seen == ["a", "b", "c"]
        assert cursor.eof()
        assert not cursor.move_next()

    def test_lookahead_and_lookbehind(self):
        cursor = TokenCursor(self.tokens)
        cursor.move_next()
        assert cursor.previous() is None
        assert cursor.next().value == "b"
        cursor.move_next()
        assert cursor.previous().value == "a"
        assert not cursor.bof()
        cursor.move_next()
        assert cursor.next() is None

    def test_empty(self):
        cursor = TokenCursor([])
        assert not cursor.move_next()
        assert cursor.current() is None


class TestNestingStack:
    def test_close_matching_returns_stop_of_same_type(self):
        stack = NestingStack()
        stack.push(Token(TokenType.FUNCTION, "SUM", TokenSubtype.START))
        stack.push(Token(TokenType.SUBEXPRESSION, "", TokenSubtype.START))

        assert stack.top_type() is TokenType.SUBEXPRESSION
        assert stack.close_matching() == Token(TokenType.SUBEXPRESSION, "", TokenSubtype.STOP)
        assert stack.close_matching("END") == Token(TokenType.FUNCTION, "END", TokenSubtype.STOP)
        assert len(stack) == 0

    def test_close_on_empty_stack(self):
        stack = NestingStack()
        assert stack.close_matching() is None
        assert stack.top() is None
        assert stack.top_type() is None


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
