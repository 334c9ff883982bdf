"""
Recursive descent parser for TOML-style documents.

Consumes tokens from the lexer and builds a root Table. Key/value pairs are
inserted into a "current table" cursor that [table] and [[table-array]]
headers move around.
"""

from typing import Iterable, Iterator

from .errors import (
    DuplicateKeyError,
    MixedArrayError,
    ParseError,
    TypeConflictError,
    UnexpectedEofError,
)
from .lexer import Lexer, Token, TokenType
from .logging import get_logger
from .values import Array, Boolean, Datetime, Float, Integer, String, Table, Value, same_kind


logger = get_logger("parser")


# Token types that begin a value
SCALAR_TOKENS = {
    TokenType.STRING: String,
    TokenType.INTEGER: Integer,
    TokenType.FLOAT: Float,
    TokenType.BOOLEAN: Boolean,
}


class Parser:
    """
    Recursive descent parser for TOML-style documents.

    Grammar (newlines are not significant):
        document    := (header | keyval)*
        header      := '[' key ']' | '[[' key ']]'
        keyval      := key '=' value
        key         := simple_key ('.' simple_key)*
        simple_key  := IDENTIFIER | STRING
        value       := STRING | INTEGER | FLOAT | BOOLEAN | DATETIME | array
        array       := '[' (value (',' value)* ','?)? ']'
    """

    def __init__(
        self,
        tokens: Iterable[Token],
        filename: str = "<string>",
        allow_mixed_arrays: bool = False,
    ):
        self.tokens: Iterator[Token] = iter(tokens)
        self.filename = filename
        self.allow_mixed_arrays = allow_mixed_arrays

        self.current_token: Token | None = None
        self.peek_token: Token | None = None

        self.root = Table()
        self.current_table = self.root
        # Tables created by an explicit [header] or a dotted key
        self._defined: set[int] = set()

        # Prime the parser with first two tokens
        self._advance()
        self._advance()

    @classmethod
    def from_source(
        cls, source: str, filename: str = "<string>", allow_mixed_arrays: bool = False
    ) -> "Parser":
        return cls(Lexer(source, filename), filename, allow_mixed_arrays)

    def _next(self) -> Token | None:
        return next(self.tokens, None)

    def _advance(self) -> Token | None:
        """Advance to next token and return previous."""
        previous = self.current_token
        self.current_token = self.peek_token
        self.peek_token = self._next()
        return previous

    def _error(self, cls: type[ParseError], message: str, token: Token | None) -> ParseError:
        if token is None:
            return cls(message, filename=self.filename)
        return cls(message, token.line, token.column, self.filename)

    def _check(self, token_type: TokenType) -> bool:
        """Check if current token is of given type."""
        return self.current_token is not None and self.current_token.type == token_type

    def _expect(self, token_type: TokenType, message: str = "") -> Token:
        """Expect current token to be of given type, advance and return it."""
        token = self.current_token
        if token is None or token.type == TokenType.EOF:
            msg = message or f"Expected {token_type.name}, got end of input"
            raise self._error(UnexpectedEofError, msg, token)

        if token.type != token_type:
            msg = message or f"Expected {token_type.name}, got {token.type.name}"
            raise self._error(ParseError, f"{msg} ({token.raw!r})", token)

        return self._advance()  # type: ignore

    def parse(self) -> Table:
        """Parse the entire document."""
        while not self._check(TokenType.EOF):
            if self.current_token is None:
                raise self._error(UnexpectedEofError, "Unexpected end of token stream", None)

            if self._check(TokenType.LBRACKET):
                self._parse_table_header()
            elif self._check(TokenType.DOUBLE_LBRACKET):
                self._parse_table_array_header()
            else:
                self._parse_keyval()

        return self.root

    def _parse_simple_key(self) -> str:
        token = self.current_token
        if token is None or token.type == TokenType.EOF:
            raise self._error(UnexpectedEofError, "Expected a key, got end of input", token)

        if token.type == TokenType.IDENTIFIER:
            self._advance()
            return str(token.value)

        if token.type == TokenType.STRING:
            if token.raw.startswith(('"""', "'''")):
                raise self._error(ParseError, "Multi-line strings cannot be used as keys", token)
            self._advance()
            return str(token.value)

        raise self._error(ParseError, f"Expected a key, got {token.type.name} ({token.raw!r})", token)

    def _parse_key(self) -> tuple[list[str], Token]:
        """Parse a possibly dotted key and return its segments and first token."""
        first = self.current_token
        segments = [self._parse_simple_key()]

        while self._check(TokenType.DOT):
            self._advance()
            segments.append(self._parse_simple_key())

        return segments, first  # type: ignore[return-value]

    def _parse_table_header(self) -> None:
        """Parse a [table] header and move the cursor to that table."""
        self._expect(TokenType.LBRACKET)
        segments, token = self._parse_key()
        self._expect(TokenType.RBRACKET, "Expected ']' to close table header")

        logger.debug("Table header [%s] at line %d", ".".join(segments), token.line)

        parent = self._ensure_table(self.root, segments[:-1], token)
        existing = parent.get(segments[-1])
        if isinstance(existing, Array) and existing.table_array:
            raise self._error(
                TypeConflictError,
                f"Cannot define [{'.'.join(segments)}]: key '{segments[-1]}' is an array of tables",
                token,
            )

        table = self._ensure_table(parent, segments[-1:], token)
        if id(table) in self._defined:
            raise self._error(
                DuplicateKeyError, f"Table [{'.'.join(segments)}] is defined more than once", token
            )
        self._defined.add(id(table))
        self.current_table = table

    def _parse_table_array_header(self) -> None:
        """Parse a [[table-array]] header and append a new table to it."""
        self._expect(TokenType.DOUBLE_LBRACKET)
        segments, token = self._parse_key()
        self._expect(TokenType.DOUBLE_RBRACKET, "Expected ']]' to close table array header")

        logger.debug("Table array header [[%s]] at line %d", ".".join(segments), token.line)

        parent = self._ensure_table(self.root, segments[:-1], token)
        key = segments[-1]
        existing = parent.get(key)

        if existing is None:
            array = Array(table_array=True)
            parent._set(key, array)
        elif isinstance(existing, Array) and existing.table_array:
            array = existing
        else:
            raise self._error(
                TypeConflictError,
                f"Cannot define [[{'.'.join(segments)}]]: key '{key}' already holds "
                f"a value of type {existing.kind.value}",
                token,
            )

        table = Table()
        array._append(table)
        self._defined.add(id(table))
        self.current_table = table

    def _ensure_table(self, table: Table, segments: list[str], token: Token) -> Table:
        """
        Walk segments down from table, creating missing tables on the way.

        An existing array of tables is entered through its last element.
        Returns the table named by the final segment.
        """
        if not segments:
            return table

        key, rest = segments[0], segments[1:]
        existing = table.get(key)

        if existing is None:
            child = Table()
            table._set(key, child)
        elif isinstance(existing, Table):
            child = existing
        elif isinstance(existing, Array) and existing.table_array:
            child = existing[-1]
        else:
            raise self._error(
                TypeConflictError,
                f"Key '{key}' already holds a value of type {existing.kind.value}, not a table",
                token,
            )

        return self._ensure_table(child, rest, token)

    def _parse_keyval(self) -> None:
        """Parse key = value and insert it into the current table."""
        segments, token = self._parse_key()
        self._expect(TokenType.EQUALS, f"Expected '=' after key '{'.'.join(segments)}'")
        value = self._parse_value()

        table = self.current_table
        if len(segments) > 1:
            table = self._ensure_table(table, segments[:-1], token)
            self._defined.add(id(table))

        key = segments[-1]
        if key in table:
            raise self._error(DuplicateKeyError, f"Duplicate key '{'.'.join(segments)}'", token)

        table._set(key, value)

    def _parse_value(self) -> Value:
        """Parse a scalar or array value."""
        token = self.current_token
        if token is None or token.type == TokenType.EOF:
            raise self._error(UnexpectedEofError, "Expected a value, got end of input", token)

        if token.type in SCALAR_TOKENS:
            self._advance()
            return SCALAR_TOKENS[token.type](token.value)

        if token.type == TokenType.DATETIME:
            self._advance()
            return Datetime(token.value, token.raw)  # type: ignore[arg-type]

        if token.type == TokenType.LBRACKET:
            return self._parse_array()

        raise self._error(ParseError, f"Expected a value, got {token.type.name} ({token.raw!r})", token)

    def _parse_array(self) -> Array:
        """Parse a bracketed, comma separated array value."""
        start = self._expect(TokenType.LBRACKET)
        items: list[Value] = []

        while not self._check(TokenType.RBRACKET):
            if self._check(TokenType.EOF) or self.current_token is None:
                raise self._error(
                    UnexpectedEofError,
                    f"Unterminated array starting at line {start.line}",
                    self.current_token,
                )

            item_token = self.current_token
            item = self._parse_value()
            if items and not self.allow_mixed_arrays and not same_kind(items[0], item):
                raise self._error(
                    MixedArrayError,
                    f"Array mixes {items[0].kind.value} and {item.kind.value} values",
                    item_token,
                )
            items.append(item)

            if self._check(TokenType.COMMA):
                self._advance()
            elif not self._check(TokenType.RBRACKET) and not self._check(TokenType.EOF):
                raise self._error(
                    ParseError,
                    "Expected ',' or ']' in array",
                    self.current_token,
                )

        self._expect(TokenType.RBRACKET)
        return Array(items)


def parse(source: str, filename: str = "<string>", allow_mixed_arrays: bool = False) -> Table:
    """
    Parse a document string into its root Table.

    Args:
        source: Document text
        filename: Filename for error messages
        allow_mixed_arrays: Accept arrays whose elements differ in kind

    Returns:
        Root Table of the document tree

    Raises:
        ParseError: If the document is malformed (LexError, DuplicateKeyError,
            TypeConflictError, UnexpectedEofError and MixedArrayError are
            all subclasses)
    """
    parser = Parser.from_source(source, filename, allow_mixed_arrays)
    return parser.parse()
