"""
Error taxonomy for lexing and parsing.

Every failure raised while turning text into a document tree derives from
ParseError, so callers can catch a single exception type. Lookup never raises
for a missing path; it returns None instead.
"""

from enum import Enum


class ParseErrorKind(Enum):
    """Category of a parse failure."""

    LEX = "lex"                        # malformed token
    SYNTAX = "syntax"                  # unexpected token
    DUPLICATE_KEY = "duplicate_key"    # key or [table] declared twice
    TYPE_CONFLICT = "type_conflict"    # header walks through a non-table value
    UNEXPECTED_EOF = "unexpected_eof"  # input ended mid-construct
    MIXED_ARRAY = "mixed_array"        # heterogeneous array in strict mode


class ParseError(Exception):
    """Exception raised for malformed documents."""

    kind = ParseErrorKind.SYNTAX

    def __init__(
        self,
        message: str,
        line: int | None = None,
        column: int | None = None,
        filename: str = "<string>",
    ):
        self.message = message
        self.line = line
        self.column = column
        self.filename = filename
        if line is not None:
            super().__init__(f"{filename}:{line}:{column}: {message}")
        else:
            super().__init__(f"{filename}: {message}")


class LexError(ParseError):
    """Exception raised when a character sequence matches no token."""

    kind = ParseErrorKind.LEX


class DuplicateKeyError(ParseError):
    """A key is assigned twice in one table, or a [table] is declared twice."""

    kind = ParseErrorKind.DUPLICATE_KEY


class TypeConflictError(ParseError):
    """A header or dotted key addresses an existing value of the wrong type."""

    kind = ParseErrorKind.TYPE_CONFLICT


class UnexpectedEofError(ParseError):
    """Input ended inside an array, string, header or assignment."""

    kind = ParseErrorKind.UNEXPECTED_EOF


class MixedArrayError(ParseError):
    """An array mixes values of different kinds."""

    kind = ParseErrorKind.MIXED_ARRAY
