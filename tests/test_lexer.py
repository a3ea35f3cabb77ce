"""test suite for the formula lexer."""
import pytest
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from sheetfmt.domain.errors import MalformedFormulaError
from sheetfmt.formatting.lexer import FormulaLexer, lex
from sheetfmt.formatting.tokens import Token, TokenSubtype, TokenType


def kinds(tokens):
    return [(t.type, t.value, t.subtype) for t in tokens]


class TestOperandsAndOperators:
    def test_simple_infix(self):
        tokens = lex("A1+B1")
        assert kinds(tokens) == [
            (TokenType.OPERAND, "A1", None),
            (TokenType.OPERATOR_INFIX, "+", None),
            (TokenType.OPERAND, "B1", None),
        ]

    def test_two_char_operators_are_logical(self):
        for op in (">=", "<=", "<>"):
            tokens = lex(f"A1{op}1")
            assert tokens[1] == Token(TokenType.OPERATOR_INFIX, op, TokenSubtype.LOGICAL)

    def test_postfix_percent(self):
        tokens = lex("50%")
        assert kinds(tokens) == [
            (TokenType.OPERAND, "50", None),
            (TokenType.OPERATOR_POSTFIX, "%", None),
        ]

    def test_scientific_notation_sign_stays_in_number(self):
        tokens = lex("1.5E+3*2")
        assert tokens[0] == Token(TokenType.OPERAND, "1.5E+3")
        assert tokens[1].value == "*"

    def test_sign_after_non_exponent_is_operator(self):
        tokens = lex("E-1")
        assert [t.value for t in tokens] == ["E", "-", "1"]

    def test_space_run_collapses_to_one_token(self):
        tokens = lex("A1    B1")
        assert kinds(tokens) == [
            (TokenType.OPERAND, "A1", None),
            (TokenType.WHITESPACE, " ", None),
            (TokenType.OPERAND, "B1", None),
        ]


class TestLiterals:
    def test_text_literal(self):
        tokens = lex('"hello world"')
        assert tokens == [Token(TokenType.OPERAND, "hello world", TokenSubtype.TEXT)]

    def test_doubled_quote_is_unescaped(self):
        tokens = lex('"say ""hi"""')
        assert tokens == [Token(TokenType.OPERAND, 'say "hi"', TokenSubtype.TEXT)]

    def test_empty_text_literal(self):
        assert lex('""') == [Token(TokenType.OPERAND, "", TokenSubtype.TEXT)]

    def test_sheet_path_keeps_quotes(self):
        tokens = lex("'My Sheet'!A1:B2")
        assert tokens == [Token(TokenType.OPERAND, "'My Sheet'!A1:B2")]

    def test_sheet_path_doubled_quote_is_unescaped(self):
        tokens = lex("'it''s'!A1")
        assert tokens == [Token(TokenType.OPERAND, "'it's'!A1")]

    def test_bracket_range_is_copied_verbatim(self):
        tokens = lex("Table1[Amount]*2")
        assert tokens[0] == Token(TokenType.OPERAND, "Table1[Amount]")

    def test_nested_brackets_stay_one_operand(self):
        tokens = lex("Table1[[#Headers],[Amount]]")
        assert tokens == [Token(TokenType.OPERAND, "Table1[[#Headers],[Amount]]")]

    @pytest.mark.parametrize("code", ["#NULL!", "#DIV/0!", "#VALUE!", "#REF!", "#NAME?", "#NUM!", "#N/A"])
    def test_error_codes(self, code):
        assert lex(code) == [Token(TokenType.OPERAND, code, TokenSubtype.ERROR)]

    def test_error_code_inside_call(self):
        tokens = lex("IFERROR(A1,#N/A)")
        assert Token(TokenType.OPERAND, "#N/A", TokenSubtype.ERROR) in tokens

    def test_pending_text_before_quote_is_unknown(self):
        tokens = lex('abc"x"')
        assert tokens[0] == Token(TokenType.UNKNOWN, "abc")
        assert tokens[1] == Token(TokenType.OPERAND, "x", TokenSubtype.TEXT)


class TestNesting:
    def test_function_call(self):
        tokens = lex("SUM(A1,B1)")
        assert kinds(tokens) == [
            (TokenType.FUNCTION, "SUM", TokenSubtype.START),
            (TokenType.OPERAND, "A1", None),
            (TokenType.ARGUMENT, ",", None),
            (TokenType.OPERAND, "B1", None),
            (TokenType.FUNCTION, "", TokenSubtype.STOP),
        ]

    def test_subexpression(self):
        tokens = lex("(1)")
        assert tokens[0] == Token(TokenType.SUBEXPRESSION, "", TokenSubtype.START)
        assert tokens[-1] == Token(TokenType.SUBEXPRESSION, "", TokenSubtype.STOP)

    def test_comma_outside_function_is_union(self):
        tokens = lex("(A1,B1)")
        assert tokens[2] == Token(TokenType.OPERATOR_INFIX, ",", TokenSubtype.UNION)

    def test_stops_match_their_starts(self):
        tokens = lex("IF((A1),SUM(B1),C1)")
        starts = [t.type for t in tokens if t.is_start]
        stops = [t.type for t in tokens if t.is_stop]
        assert stops == [TokenType.SUBEXPRESSION, TokenType.FUNCTION, TokenType.FUNCTION]
        assert len(starts) == len(stops)

    def test_array_literal_desugars(self):
        values = [(t.type, t.value) for t in lex("{1,2;3,4}")]
        assert values == [
            (TokenType.FUNCTION, "ARRAY"),
            (TokenType.FUNCTION, "ARRAYROW"),
            (TokenType.OPERAND, "1"),
            (TokenType.ARGUMENT, ","),
            (TokenType.OPERAND, "2"),
            (TokenType.ARGUMENT, ";"),
            (TokenType.OPERAND, "3"),
            (TokenType.ARGUMENT, ","),
            (TokenType.OPERAND, "4"),
            (TokenType.FUNCTION, "ARRAYROWSTOP"),
            (TokenType.FUNCTION, "ARRAYSTOP"),
        ]


class TestMalformedInput:
    def test_unterminated_string_is_unknown(self):
        assert lex('"abc') == [Token(TokenType.UNKNOWN, '"abc')]

    def test_unterminated_sheet_path_has_one_quote(self):
        assert lex("'Sheet") == [Token(TokenType.UNKNOWN, "'Sheet")]

    def test_unterminated_literals_keep_source_text(self):
        assert lex("'Bob''s") == [Token(TokenType.UNKNOWN, "'Bob''s")]
        assert lex('"say ""hi') == [Token(TokenType.UNKNOWN, '"say ""hi')]

    def test_unterminated_bracket_range(self):
        assert lex("T[col") == [Token(TokenType.UNKNOWN, "T[col")]

    def test_unterminated_error_code(self):
        assert lex("#OOPS") == [Token(TokenType.UNKNOWN, "#OOPS")]

    def test_spurious_close_paren_is_unknown(self):
        tokens = lex("A1)")
        assert tokens == [Token(TokenType.OPERAND, "A1"), Token(TokenType.UNKNOWN, ")")]

    def test_spurious_close_brace_is_unknown(self):
        tokens = lex("(1})")
        assert Token(TokenType.UNKNOWN, "}") in tokens
        assert tokens[-1] == Token(TokenType.SUBEXPRESSION, "", TokenSubtype.STOP)

    def test_unclosed_group_is_left_open(self):
        tokens = lex("SUM(A1")
        assert [t.subtype for t in tokens] == [TokenSubtype.START, None]

    def test_strict_unterminated_string(self):
        with pytest.raises(MalformedFormulaError) as exc:
            lex('A1&"abc', strict=True)
        assert exc.value.position == 3

    def test_strict_spurious_close(self):
        with pytest.raises(MalformedFormulaError):
            lex("A1)", strict=True)

    def test_strict_unclosed_group(self):
        with pytest.raises(MalformedFormulaError):
            FormulaLexer("SUM(A1", strict=True).tokenize()

    def test_empty_input(self):
        assert lex("") == []


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
