"""Parser combinators shared by text commands and component payloads."""

from .combinators import (
    Parser,
    integer,
    literal,
    remaining,
    token,
    whitespace,
    word,
)
from .reader import StringReader
from .results import ParseError, ParseFailure, ParseResult, ParseSuccess

__all__ = [
    "ParseError",
    "ParseFailure",
    "ParseResult",
    "ParseSuccess",
    "Parser",
    "StringReader",
    "integer",
    "literal",
    "remaining",
    "token",
    "whitespace",
    "word",
]
