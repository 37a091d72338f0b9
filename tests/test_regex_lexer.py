import pytest

from adapters.lexer.regex_lexer import RegexLexer
from contracts import LexError, TokenKind
from ports.lexer import Lexer


def _kinds(text: str) -> list[TokenKind]:
    return [t.kind for t in RegexLexer().tokenize(text)]


def test_regex_lexer_implements_port():
    assert isinstance(RegexLexer(), Lexer)


def test_tokenize_full_clause_drops_whitespace():
    kinds = _kinds("IF (x >= 10)\n  RETURN 1\nELSE RETURN 0")

    assert kinds == [
        TokenKind.IF, TokenKind.LPAREN, TokenKind.IDENTIFIER, TokenKind.GTE,
        TokenKind.NUMBER, TokenKind.RPAREN, TokenKind.RETURN, TokenKind.NUMBER,
        TokenKind.ELSE, TokenKind.RETURN, TokenKind.NUMBER,
    ]


def test_two_char_operators_win_over_single_char():
    assert _kinds("a >= 1 b <= 2 c > 3 d < 4 e == 5")[1::3] == [
        TokenKind.GTE, TokenKind.LTE, TokenKind.GT, TokenKind.LT, TokenKind.EQ,
    ]


def test_keywords_take_priority_over_identifier():
    assert _kinds("IF ELSE AND OR RETURN IS-MISSING") == [
        TokenKind.IF, TokenKind.ELSE, TokenKind.AND, TokenKind.OR,
        TokenKind.RETURN, TokenKind.IS_MISSING,
    ]


def test_words_containing_keywords_stay_identifiers():
    tokens = RegexLexer().tokenize("IFFY ORDER ELSEWHERE AND_x")

    assert [t.kind for t in tokens] == [TokenKind.IDENTIFIER] * 4
    assert [t.text for t in tokens] == ["IFFY", "ORDER", "ELSEWHERE", "AND_x"]


def test_identifier_pattern_allows_underscore_and_digits_after_letters():
    tokens = RegexLexer().tokenize("age_2 x1")

    assert [(t.kind, t.text) for t in tokens] == [
        (TokenKind.IDENTIFIER, "age_2"),
        (TokenKind.IDENTIFIER, "x1"),
    ]


def test_no_whitespace_needed_around_punctuation():
    assert _kinds("IS-MISSING(x)") == [
        TokenKind.IS_MISSING, TokenKind.LPAREN, TokenKind.IDENTIFIER, TokenKind.RPAREN,
    ]


def test_tokens_carry_offset_line_and_column():
    tokens = RegexLexer().tokenize("IF (x > 1)\n  RETURN 5")

    ret = tokens[-2]
    assert ret.kind == TokenKind.RETURN
    assert ret.offset == 13
    assert (ret.line, ret.col) == (2, 3)


def test_empty_input_yields_no_tokens():
    assert RegexLexer().tokenize("  \n\t ") == []


@pytest.mark.parametrize("text, position", [
    ("IF (x = 1)", 6),
    ("IF (x > 1.5)", 9),
    ("IF (x > -1)", 8),
    ("@", 0),
])
def test_unrecognized_character_raises_lex_error(text, position):
    with pytest.raises(LexError) as exc:
        RegexLexer().tokenize(text)

    assert exc.value.position == position
    assert exc.value.char == text[position]


def test_lex_error_reports_line_and_column():
    with pytest.raises(LexError) as exc:
        RegexLexer().tokenize("IF (x > 1)\nRETURN $")

    assert (exc.value.line, exc.value.col) == (2, 8)
    assert exc.value.to_detail()["error"] == "lex_error"


def test_is_missing_must_end_at_word_boundary():
    with pytest.raises(LexError) as exc:
        RegexLexer().tokenize("IF (IS-MISSINGS(x)) RETURN 1 ELSE RETURN 0")

    assert exc.value.position == 6
    assert exc.value.char == "-"


def test_igualque_is_an_equality_operator():
    tokens = RegexLexer().tokenize("x IGUALQUE 5 y IGUALQUEX")

    assert [(t.kind, t.text) for t in tokens] == [
        (TokenKind.IDENTIFIER, "x"),
        (TokenKind.EQ, "IGUALQUE"),
        (TokenKind.NUMBER, "5"),
        (TokenKind.IDENTIFIER, "y"),
        (TokenKind.IDENTIFIER, "IGUALQUEX"),
    ]


def test_whitespace_has_no_token_kind():
    assert "WS" not in TokenKind.__members__
    assert {t.kind for t in RegexLexer().tokenize(" \tIF\r\n(x>1) ")} == {
        TokenKind.IF, TokenKind.LPAREN, TokenKind.IDENTIFIER, TokenKind.GT,
        TokenKind.NUMBER, TokenKind.RPAREN,
    }
