"""
TOML-style configuration parser with dotted-path lookup.

    from tomltree import parse, lookup

    root = parse('a = 1\n[b]\nc = 2\n')
    lookup(root, "b.c")      # Integer(value=2)
    root.get_int("a")        # 1
"""

from .const import APP_VERSION
from .errors import (
    DuplicateKeyError,
    LexError,
    MixedArrayError,
    ParseError,
    ParseErrorKind,
    TypeConflictError,
    UnexpectedEofError,
)
from .lexer import Lexer, Token, TokenType
from .loader import DocumentLoader, LoadError, load_file, load_string
from .lookup import (
    get_array,
    get_bool,
    get_datetime,
    get_float,
    get_int,
    get_string,
    get_table,
    lookup,
)
from .parser import Parser, parse
from .schema import DecodeError, decode
from .values import Array, Boolean, Datetime, Float, Integer, String, Table, Value, ValueKind

__version__ = APP_VERSION

__all__ = [
    "Array",
    "Boolean",
    "Datetime",
    "DecodeError",
    "DocumentLoader",
    "DuplicateKeyError",
    "Float",
    "Integer",
    "LexError",
    "Lexer",
    "LoadError",
    "MixedArrayError",
    "ParseError",
    "ParseErrorKind",
    "Parser",
    "String",
    "Table",
    "Token",
    "TokenType",
    "TypeConflictError",
    "UnexpectedEofError",
    "Value",
    "ValueKind",
    "decode",
    "get_array",
    "get_bool",
    "get_datetime",
    "get_float",
    "get_int",
    "get_string",
    "get_table",
    "load_file",
    "load_string",
    "lookup",
    "parse",
]
