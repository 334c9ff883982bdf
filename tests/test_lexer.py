"""
Tests for the tokenizer.
"""

from datetime import date, datetime, timedelta, timezone

import pytest

from tomltree.errors import LexError, UnexpectedEofError
from tomltree.lexer import Lexer, TokenType, tokenize


def types_of(source: str) -> list[TokenType]:
    return [token.type for token in tokenize(source)]


def value_of(source: str):
    """Tokenize 'x = <source>' and return the value token."""
    tokens = tokenize(f"x = {source}")
    assert tokens[1].type == TokenType.EQUALS
    return tokens[2]


def test_key_value_tokens() -> None:
    assert types_of('name = "value"') == [
        TokenType.IDENTIFIER,
        TokenType.EQUALS,
        TokenType.STRING,
        TokenType.EOF,
    ]


def test_comments_and_blank_lines_are_skipped() -> None:
    source = "# heading\n\n  a = 1 # trailing\n\n# footer"
    assert types_of(source) == [
        TokenType.IDENTIFIER,
        TokenType.EQUALS,
        TokenType.INTEGER,
        TokenType.EOF,
    ]


def test_token_positions() -> None:
    tokens = tokenize("a = 1\n  b = 2\n")

    assert (tokens[0].line, tokens[0].column) == (1, 1)
    assert (tokens[3].line, tokens[3].column) == (2, 3)
    assert tokens[5].raw == "2"


def test_table_header_tokens() -> None:
    assert types_of("[ a . b ]") == [
        TokenType.LBRACKET,
        TokenType.IDENTIFIER,
        TokenType.DOT,
        TokenType.IDENTIFIER,
        TokenType.RBRACKET,
        TokenType.EOF,
    ]


def test_table_array_header_tokens() -> None:
    assert types_of("[[products]]") == [
        TokenType.DOUBLE_LBRACKET,
        TokenType.IDENTIFIER,
        TokenType.DOUBLE_RBRACKET,
        TokenType.EOF,
    ]


def test_nested_array_value_uses_single_brackets() -> None:
    assert types_of("a = [[1], [2]]") == [
        TokenType.IDENTIFIER,
        TokenType.EQUALS,
        TokenType.LBRACKET,
        TokenType.LBRACKET,
        TokenType.INTEGER,
        TokenType.RBRACKET,
        TokenType.COMMA,
        TokenType.LBRACKET,
        TokenType.INTEGER,
        TokenType.RBRACKET,
        TokenType.RBRACKET,
        TokenType.EOF,
    ]


def test_keys_that_look_like_literals_are_identifiers() -> None:
    tokens = tokenize("true = 1\n1234 = 2\n")

    assert tokens[0].type == TokenType.IDENTIFIER
    assert tokens[0].value == "true"
    assert tokens[3].type == TokenType.IDENTIFIER
    assert tokens[3].value == "1234"


@pytest.mark.parametrize(
    "source, expected",
    [
        ("42", 42),
        ("-17", -17),
        ("+3", 3),
        ("0", 0),
        ("1_000_000", 1000000),
        ("0xDEAD_beef", 0xDEADBEEF),
        ("0o755", 0o755),
        ("0b1101", 13),
        ("9223372036854775807", 2**63 - 1),
        ("-9223372036854775808", -(2**63)),
    ],
)
def test_integers(source: str, expected: int) -> None:
    token = value_of(source)
    assert token.type == TokenType.INTEGER
    assert token.value == expected
    assert token.raw == source


@pytest.mark.parametrize(
    "source, expected",
    [
        ("3.14", 3.14),
        ("-0.5", -0.5),
        ("1e6", 1e6),
        ("6.626e-34", 6.626e-34),
        ("9_224.5", 9224.5),
        ("inf", float("inf")),
        ("-inf", float("-inf")),
    ],
)
def test_floats(source: str, expected: float) -> None:
    token = value_of(source)
    assert token.type == TokenType.FLOAT
    assert token.value == expected


def test_nan() -> None:
    token = value_of("nan")
    assert token.type == TokenType.FLOAT
    assert token.value != token.value


@pytest.mark.parametrize("source", ["1.", "007", "1__0", "1e", "0x", "9223372036854775808", "1.2.3"])
def test_malformed_numbers(source: str) -> None:
    with pytest.raises(LexError):
        tokenize(f"x = {source}")


def test_booleans() -> None:
    assert value_of("true").value is True
    assert value_of("false").value is False
    assert value_of("false").type == TokenType.BOOLEAN


def test_bare_word_value_is_rejected() -> None:
    with pytest.raises(LexError) as exc_info:
        tokenize("x = maybe")

    assert exc_info.value.line == 1
    assert exc_info.value.column == 5


def test_datetimes() -> None:
    token = value_of("1979-05-27T07:32:00Z")
    assert token.type == TokenType.DATETIME
    assert token.value == datetime(1979, 5, 27, 7, 32, 0, tzinfo=timezone.utc)
    assert token.raw == "1979-05-27T07:32:00Z"

    token = value_of("1979-05-27T00:32:00.999999-07:00")
    assert token.value == datetime(
        1979, 5, 27, 0, 32, 0, 999999, tzinfo=timezone(-timedelta(hours=7))
    )

    token = value_of("1979-05-27T07:32:00")
    assert token.value == datetime(1979, 5, 27, 7, 32, 0)
    assert token.value.tzinfo is None

    token = value_of("1979-05-27")
    assert token.value == date(1979, 5, 27)


def test_invalid_datetime_range() -> None:
    with pytest.raises(LexError, match="Invalid datetime"):
        tokenize("x = 1979-13-27T07:32:00Z")


def test_basic_string_escapes() -> None:
    token = value_of(r'"tab\there \"quoted\" \\ \u00e9 \U0001F600 \/"')
    assert token.value == 'tab\there "quoted" \\ \u00e9 \U0001F600 /'


def test_literal_string_keeps_backslashes() -> None:
    assert value_of(r"'C:\Users\nodejs'").value == r"C:\Users\nodejs"


def test_multiline_basic_string() -> None:
    token = value_of('"""\nRoses are red\nViolets are blue"""')
    assert token.value == "Roses are red\nViolets are blue"


def test_multiline_line_ending_backslash() -> None:
    token = value_of('"""\nThe quick \\\n    brown fox."""')
    assert token.value == "The quick brown fox."


def test_multiline_literal_string() -> None:
    token = value_of("'''\nfirst\\n\n  second'''")
    assert token.value == "first\\n\n  second"


def test_multiline_string_with_trailing_quotes() -> None:
    assert value_of('"""say ""hi"""""').value == 'say ""hi""'


def test_invalid_escape() -> None:
    with pytest.raises(LexError, match="Invalid escape"):
        tokenize(r'x = "bad \q"')


def test_string_broken_by_newline() -> None:
    with pytest.raises(LexError, match="Unterminated"):
        tokenize('x = "no end\ny = 1')


def test_string_running_into_end_of_input() -> None:
    with pytest.raises(UnexpectedEofError):
        tokenize('x = "no end')

    with pytest.raises(UnexpectedEofError):
        tokenize('x = """no end\n')


def test_unexpected_character() -> None:
    with pytest.raises(LexError) as exc_info:
        tokenize("a = 1\n{")

    assert exc_info.value.line == 2
    assert "Unexpected character" in str(exc_info.value)


def test_lexer_is_lazy_and_restartable() -> None:
    lexer = Lexer("a = 1\nb = @")
    tokens = iter(lexer)

    # Tokens before the bad character are produced without error
    assert next(tokens).value == "a"
    assert next(tokens).type == TokenType.EQUALS

    first = [token.type for token in Lexer("a = 1\nb = 2")]
    restartable = Lexer("a = 1\nb = 2")
    list(restartable)
    assert [token.type for token in restartable] == first


def test_error_message_includes_position_and_filename() -> None:
    with pytest.raises(LexError) as exc_info:
        tokenize("a = @", filename="conf.toml")

    assert str(exc_info.value).startswith("conf.toml:1:5:")
