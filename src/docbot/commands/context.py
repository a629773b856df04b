from __future__ import annotations

from typing import Any, Optional, TypeVar, Union

from ..parsers import ParseError, Parser, StringReader, whitespace

T = TypeVar("T")

_SKIP_WHITESPACE = whitespace()


class CommandParseError(ParseError):
    """A required argument could not be parsed; aborts the whole dispatch."""


class CommandContext:
    """Sequential argument consumer for a single dispatch.

    The cursor only moves forward, and only when a parser succeeds. Leading
    whitespace before each argument is consumed as part of that argument.
    """

    def __init__(self, source: Union[StringReader, str], *, match: Any = None) -> None:
        self._reader = StringReader(source) if isinstance(source, str) else source
        self.match = match

    @property
    def position(self) -> int:
        return self._reader.position

    @property
    def remaining_text(self) -> str:
        return self._reader.remaining

    def shift(self, parser: Parser[T]) -> T:
        result = parser.parse(_SKIP_WHITESPACE.parse(self._reader).reader)
        if not result.ok:
            raise CommandParseError(result.reason, position=result.position)
        self._reader = result.reader
        return result.value

    def try_shift(self, parser: Parser[T]) -> Optional[T]:
        result = parser.parse(_SKIP_WHITESPACE.parse(self._reader).reader)
        if not result.ok:
            return None
        self._reader = result.reader
        return result.value
