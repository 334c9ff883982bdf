"""
Lexer (tokenizer) for TOML-style configuration documents.

Supports:
- Bare and quoted keys
- Basic ("...") and literal ('...') strings, single- and multi-line
- Integers (decimal, 0x, 0o, 0b, with underscores), floats, inf/nan
- Booleans and RFC 3339 dates/datetimes
- Punctuation: = . , [ ] [[ ]]
- Single-line (#) comments

Whitespace and newlines between tokens are skipped unconditionally; the
parser decides whether the token order makes sense. The only state the lexer
keeps is whether it is reading a key or a value, which decides how words and
brackets are tokenized.
"""

from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from enum import Enum, auto
from typing import Iterator
import re

from .errors import LexError, UnexpectedEofError


class TokenType(Enum):
    """Token types for the TOML-style syntax."""

    # Literals
    IDENTIFIER = auto()       # bare key
    STRING = auto()           # "basic", 'literal', multi-line variants
    INTEGER = auto()          # 42, -17, 0xff
    FLOAT = auto()            # 3.14, 1e6, inf
    BOOLEAN = auto()          # true, false
    DATETIME = auto()         # 1979-05-27T07:32:00Z

    # Punctuation
    EQUALS = auto()           # =
    DOT = auto()              # .
    COMMA = auto()            # ,
    LBRACKET = auto()         # [
    RBRACKET = auto()         # ]
    DOUBLE_LBRACKET = auto()  # [[
    DOUBLE_RBRACKET = auto()  # ]]

    # Special
    EOF = auto()              # end of input


@dataclass
class Token:
    """A single token from the lexer."""

    type: TokenType
    value: str | int | float | bool | date | datetime
    line: int
    column: int
    raw: str = ""  # Original text representation

    def __repr__(self) -> str:
        return f"Token({self.type.name}, {self.value!r}, {self.line}:{self.column})"


BARE_KEY_CHARS = frozenset(
    "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789_-"
)

WORD_CHARS = BARE_KEY_CHARS | {".", "+", ":"}

DATETIME_RE = re.compile(
    r"(?P<year>\d{4})-(?P<month>\d{2})-(?P<day>\d{2})"
    r"(?:[Tt](?P<hour>\d{2}):(?P<minute>\d{2}):(?P<second>\d{2})"
    r"(?:\.(?P<fraction>\d+))?"
    r"(?P<offset>[Zz]|[+-]\d{2}:\d{2})?)?"
)
SPECIAL_FLOAT_RE = re.compile(r"[+-]?(?:inf|nan)")
PREFIXED_INT_RE = re.compile(
    r"0x[0-9A-Fa-f](?:_?[0-9A-Fa-f])*|0o[0-7](?:_?[0-7])*|0b[01](?:_?[01])*"
)
FLOAT_RE = re.compile(
    r"[+-]?(?:0|[1-9](?:_?\d)*)"
    r"(?:\.\d(?:_?\d)*(?:[eE][+-]?\d(?:_?\d)*)?|[eE][+-]?\d(?:_?\d)*)"
)
DECIMAL_INT_RE = re.compile(r"[+-]?(?:0|[1-9](?:_?\d)*)")

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

PUNCTUATION = {
    "=": TokenType.EQUALS,
    ".": TokenType.DOT,
    ",": TokenType.COMMA,
}

BASIC_ESCAPES = {
    "b": "\b",
    "t": "\t",
    "n": "\n",
    "f": "\f",
    "r": "\r",
    '"': '"',
    "\\": "\\",
    "/": "/",
}


class Lexer:
    """
    Tokenizer for TOML-style documents.

    Example document:
        title = "example"   # comment

        [server]
        ports = [8001, 8002]

        [[products]]
        name = "Hammer"

    Iterating a Lexer always starts again from the beginning of the source.
    """

    def __init__(self, source: str, filename: str = "<string>"):
        self.source = source
        self.filename = filename
        self._reset()

    def _reset(self) -> None:
        self.pos = 0
        self.line = 1
        self.column = 1
        # Nesting depth of array values; brackets inside are never headers
        self.array_depth = 0
        # Set after '=' until the value's first token has been read
        self.after_equals = False
        # Set between '[[' and its closing ']]'
        self.in_table_array_header = False

    @property
    def in_value(self) -> bool:
        """True while the lexer is reading a value rather than a key."""
        return self.after_equals or self.array_depth > 0

    def _error(self, message: str, line: int, column: int) -> LexError:
        return LexError(message, line, column, self.filename)

    def _eof_error(self, message: str, line: int, column: int) -> UnexpectedEofError:
        return UnexpectedEofError(message, line, column, self.filename)

    def _current(self) -> str:
        """Get current character or empty string if at end."""
        if self.pos >= len(self.source):
            return ""
        return self.source[self.pos]

    def _peek(self, offset: int = 1) -> str:
        """Peek at character at offset from current position."""
        pos = self.pos + offset
        if pos >= len(self.source):
            return ""
        return self.source[pos]

    def _startswith(self, text: str) -> bool:
        return self.source.startswith(text, self.pos)

    def _advance(self, count: int = 1) -> str:
        """Advance position by count characters and return the text passed over."""
        start = self.pos
        for _ in range(count):
            if self.pos >= len(self.source):
                break

            char = self.source[self.pos]
            self.pos += 1

            if char == "\n":
                self.line += 1
                self.column = 1
            else:
                self.column += 1

        return self.source[start:self.pos]

    def _skip_whitespace_and_comments(self) -> None:
        """Skip whitespace, newlines and # comments."""
        while True:
            char = self._current()
            if char and char in " \t\r\n":
                self._advance()
            elif char == "#":
                while self._current() and self._current() != "\n":
                    self._advance()
            else:
                break

    def _read_string(self) -> Token:
        """Read a basic or literal string, single- or multi-line."""
        start_line = self.line
        start_col = self.column
        start_pos = self.pos
        quote = self._current()
        literal = quote == "'"
        multiline = self._startswith(quote * 3)

        if multiline:
            self._advance(3)
            # A newline immediately after the opening delimiter is trimmed
            if self._startswith("\r\n"):
                self._advance(2)
            elif self._current() == "\n":
                self._advance()
        else:
            self._advance()

        result: list[str] = []

        while True:
            char = self._current()

            if not char:
                raise self._eof_error("Unterminated string literal", start_line, start_col)

            if char == quote:
                if not multiline:
                    self._advance()
                    break
                if self._startswith(quote * 3):
                    # Up to two quotes may directly precede the closing delimiter
                    run = 3
                    while run < 5 and self._peek(run) == quote:
                        run += 1
                    result.append(quote * (run - 3))
                    self._advance(run)
                    break
                result.append(self._advance())
            elif char == "\\" and not literal:
                result.append(self._read_escape(multiline))
            elif char == "\n" and not multiline:
                raise self._error("Unterminated string literal", start_line, start_col)
            else:
                result.append(self._advance())

        return Token(
            type=TokenType.STRING,
            value="".join(result),
            line=start_line,
            column=start_col,
            raw=self.source[start_pos:self.pos],
        )

    def _read_escape(self, multiline: bool) -> str:
        """Read an escape sequence starting at a backslash."""
        line = self.line
        column = self.column
        self._advance()  # skip backslash
        escape_char = self._current()

        if not escape_char:
            raise self._eof_error("Unterminated string literal", line, column)

        if escape_char in BASIC_ESCAPES:
            self._advance()
            return BASIC_ESCAPES[escape_char]

        if escape_char in "uU":
            width = 4 if escape_char == "u" else 8
            self._advance()
            digits = self.source[self.pos:self.pos + width]
            if len(digits) != width or any(c not in "0123456789abcdefABCDEF" for c in digits):
                raise self._error(f"Invalid unicode escape: \\{escape_char}{digits}", line, column)
            code = int(digits, 16)
            if code > 0x10FFFF or 0xD800 <= code <= 0xDFFF:
                raise self._error(f"Invalid unicode scalar value: U+{code:X}", line, column)
            self._advance(width)
            return chr(code)

        if multiline and escape_char in " \t\r\n":
            # Line-ending backslash: trim whitespace up to the next content
            rest = self.pos
            while rest < len(self.source) and self.source[rest] in " \t\r":
                rest += 1
            if rest < len(self.source) and self.source[rest] == "\n":
                while self._current() and self._current() in " \t\r\n":
                    self._advance()
                return ""

        raise self._error(f"Invalid escape sequence: \\{escape_char}", line, column)

    def _read_bare_key(self) -> Token:
        """Read a bare key such as server, 1234 or bare-key_1."""
        start_line = self.line
        start_col = self.column
        start_pos = self.pos

        while self._current() and self._current() in BARE_KEY_CHARS:
            self._advance()

        raw = self.source[start_pos:self.pos]
        if not raw:
            raise self._error(f"Unexpected character: {self._current()!r}", start_line, start_col)

        return Token(TokenType.IDENTIFIER, raw, start_line, start_col, raw)

    def _ends_cleanly(self, end: int) -> bool:
        """Check that a literal ending at end is not glued to more key characters."""
        if end >= len(self.source):
            return True
        return self.source[end] not in BARE_KEY_CHARS and self.source[end] != "."

    def _read_scalar(self) -> Token:
        """Read a number, boolean or datetime in value position."""
        start_line = self.line
        start_col = self.column

        match = DATETIME_RE.match(self.source, self.pos)
        if match and self._ends_cleanly(match.end()):
            value = self._convert_datetime(match, start_line, start_col)
            raw = self._advance(match.end() - self.pos)
            return Token(TokenType.DATETIME, value, start_line, start_col, raw)

        match = SPECIAL_FLOAT_RE.match(self.source, self.pos)
        if match and self._ends_cleanly(match.end()):
            raw = self._advance(match.end() - self.pos)
            return Token(TokenType.FLOAT, float(raw), start_line, start_col, raw)

        match = PREFIXED_INT_RE.match(self.source, self.pos)
        if match and self._ends_cleanly(match.end()):
            raw = self._advance(match.end() - self.pos)
            base = {"x": 16, "o": 8, "b": 2}[raw[1]]
            value = int(raw[2:].replace("_", ""), base)
            return self._integer_token(value, raw, start_line, start_col)

        match = FLOAT_RE.match(self.source, self.pos)
        if match and self._ends_cleanly(match.end()):
            raw = self._advance(match.end() - self.pos)
            return Token(TokenType.FLOAT, float(raw.replace("_", "")), start_line, start_col, raw)

        match = DECIMAL_INT_RE.match(self.source, self.pos)
        if match and self._ends_cleanly(match.end()):
            raw = self._advance(match.end() - self.pos)
            return self._integer_token(int(raw.replace("_", "")), raw, start_line, start_col)

        # Not a number: the only bare words allowed as values are booleans
        end = self.pos
        while end < len(self.source) and self.source[end] in WORD_CHARS:
            end += 1
        word = self.source[self.pos:end]

        if word in ("true", "false"):
            self._advance(len(word))
            return Token(TokenType.BOOLEAN, word == "true", start_line, start_col, word)

        if word[:1] in "0123456789+-":
            raise self._error(f"Invalid number: {word}", start_line, start_col)
        raise self._error(f"Expected a value, got bare word: {word}", start_line, start_col)

    def _integer_token(self, value: int, raw: str, line: int, column: int) -> Token:
        if not INT64_MIN <= value <= INT64_MAX:
            raise self._error(f"Integer out of 64-bit range: {raw}", line, column)
        return Token(TokenType.INTEGER, value, line, column, raw)

    def _convert_datetime(self, match: re.Match, line: int, column: int) -> date | datetime:
        """Convert a matched date or datetime into a date/datetime object."""
        parts = match.groupdict()
        try:
            if parts["hour"] is None:
                return date(int(parts["year"]), int(parts["month"]), int(parts["day"]))

            tzinfo = None
            offset = parts["offset"]
            if offset in ("Z", "z"):
                tzinfo = timezone.utc
            elif offset:
                sign = -1 if offset[0] == "-" else 1
                delta = timedelta(hours=int(offset[1:3]), minutes=int(offset[4:6]))
                tzinfo = timezone(sign * delta)

            fraction = parts["fraction"] or ""
            microsecond = int(fraction[:6].ljust(6, "0"))

            return datetime(
                int(parts["year"]),
                int(parts["month"]),
                int(parts["day"]),
                int(parts["hour"]),
                int(parts["minute"]),
                int(parts["second"]),
                microsecond,
                tzinfo=tzinfo,
            )
        except ValueError as e:
            raise self._error(f"Invalid datetime {match.group(0)}: {e}", line, column) from e

    def _read_open_bracket(self) -> Token:
        start_line = self.line
        start_col = self.column

        if self.in_value:
            self.after_equals = False
            self.array_depth += 1
            self._advance()
            return Token(TokenType.LBRACKET, "[", start_line, start_col, "[")

        if self._peek() == "[":
            self.in_table_array_header = True
            self._advance(2)
            return Token(TokenType.DOUBLE_LBRACKET, "[[", start_line, start_col, "[[")

        self._advance()
        return Token(TokenType.LBRACKET, "[", start_line, start_col, "[")

    def _read_close_bracket(self) -> Token:
        start_line = self.line
        start_col = self.column

        if self.array_depth > 0:
            self.array_depth -= 1
        elif self.in_table_array_header and self._peek() == "]":
            self.in_table_array_header = False
            self._advance(2)
            return Token(TokenType.DOUBLE_RBRACKET, "]]", start_line, start_col, "]]")

        self._advance()
        return Token(TokenType.RBRACKET, "]", start_line, start_col, "]")

    def next_token(self) -> Token:
        """Get the next token from the source."""
        self._skip_whitespace_and_comments()

        if self.pos >= len(self.source):
            return Token(
                type=TokenType.EOF,
                value="",
                line=self.line,
                column=self.column,
            )

        char = self._current()
        start_line = self.line
        start_col = self.column

        if char == "[":
            return self._read_open_bracket()

        if char == "]":
            return self._read_close_bracket()

        if char in PUNCTUATION:
            self._advance()
            token_type = PUNCTUATION[char]
            # A stray '=' inside a value is left for the parser to reject
            if token_type == TokenType.EQUALS and self.array_depth == 0:
                self.after_equals = True
            return Token(token_type, char, start_line, start_col, char)

        if char == '"' or char == "'":
            token = self._read_string()
            self.after_equals = False
            return token

        if self.in_value and (char in BARE_KEY_CHARS or char == "+"):
            token = self._read_scalar()
            self.after_equals = False
            return token

        if char in BARE_KEY_CHARS:
            return self._read_bare_key()

        raise self._error(f"Unexpected character: {char!r}", start_line, start_col)

    def tokenize(self) -> Iterator[Token]:
        """Generate all tokens from the start of the source."""
        self._reset()
        while True:
            token = self.next_token()
            yield token
            if token.type == TokenType.EOF:
                break

    def __iter__(self) -> Iterator[Token]:
        """Allow iteration over tokens."""
        return self.tokenize()


def tokenize(source: str, filename: str = "<string>") -> list[Token]:
    """Convenience function to tokenize a source string."""
    return list(Lexer(source, filename))
