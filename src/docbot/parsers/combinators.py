"""Small parser combinators over :class:`StringReader`.

Every parser is a pure function from a reader to a :data:`ParseResult`.
Failures are values; nothing here raises on bad input.
"""

from __future__ import annotations

from typing import Any, Callable, Generic, Optional, TypeVar, Union

from .reader import StringReader
from .results import ParseFailure, ParseResult, ParseSuccess

T = TypeVar("T")
U = TypeVar("U")

# Numbers outside a signed 32-bit int are rejected like any other bad input.
INTEGER_MAX = 2**31 - 1


def _is_ascii_digit(ch: str) -> bool:
    return "0" <= ch <= "9"


class Parser(Generic[T]):
    def __init__(
        self,
        parse_fn: Callable[[StringReader], ParseResult[T]],
        *,
        name: Optional[str] = None,
    ) -> None:
        self._parse_fn = parse_fn
        self.name = name or getattr(parse_fn, "__name__", "parser")

    def __repr__(self) -> str:
        return f"Parser({self.name})"

    def parse(self, source: Union[StringReader, str]) -> ParseResult[T]:
        reader = StringReader(source) if isinstance(source, str) else source
        return self._parse_fn(reader)

    def or_(self, other: "Parser[U]") -> "Parser[Union[T, U]]":
        def _either(reader: StringReader) -> ParseResult[Any]:
            first = self.parse(reader)
            if first.ok:
                return first
            second = other.parse(reader)
            if second.ok:
                return second
            return ParseFailure(
                reason=f"{first.reason} or {second.reason}",
                position=reader.position,
            )

        return Parser(_either, name=f"{self.name} | {other.name}")

    __or__ = or_

    def map(self, fn: Callable[[T], U]) -> "Parser[U]":
        def _mapped(reader: StringReader) -> ParseResult[U]:
            result = self.parse(reader)
            if not result.ok:
                return result
            return ParseSuccess(fn(result.value), result.reader)

        return Parser(_mapped, name=f"{self.name}.map")

    def then(self, other: "Parser[U]") -> "Parser[tuple[T, U]]":
        def _sequence(reader: StringReader) -> ParseResult[tuple[T, U]]:
            first = self.parse(reader)
            if not first.ok:
                return first
            second = other.parse(first.reader)
            if not second.ok:
                return second
            return ParseSuccess((first.value, second.value), second.reader)

        return Parser(_sequence, name=f"{self.name} then {other.name}")


def literal(text: str) -> Parser[str]:
    def _literal(reader: StringReader) -> ParseResult[str]:
        if reader.startswith(text):
            return ParseSuccess(text, reader.advance(len(text)))
        return ParseFailure(reason=f"expected '{text}'", position=reader.position)

    return Parser(_literal, name=f"literal({text!r})")


def token(text: str) -> Parser[str]:
    """Like :func:`literal`, but only where ``text`` ends at a word boundary."""

    def _token(reader: StringReader) -> ParseResult[str]:
        rest = reader.advance(len(text))
        if reader.startswith(text) and (rest.at_end() or rest.peek().isspace()):
            return ParseSuccess(text, rest)
        return ParseFailure(reason=f"expected '{text}'", position=reader.position)

    return Parser(_token, name=f"token({text!r})")


def word() -> Parser[str]:
    def _word(reader: StringReader) -> ParseResult[str]:
        value, rest = reader.read_while(lambda ch: not ch.isspace())
        if not value:
            return ParseFailure(reason="expected a word", position=reader.position)
        return ParseSuccess(value, rest)

    return Parser(_word, name="word")


def integer() -> Parser[int]:
    def _integer(reader: StringReader) -> ParseResult[int]:
        digits, rest = reader.read_while(_is_ascii_digit)
        if not digits:
            return ParseFailure(reason="expected a number", position=reader.position)
        value = int(digits)
        if value > INTEGER_MAX:
            return ParseFailure(
                reason=f"number '{digits}' is too large", position=reader.position
            )
        return ParseSuccess(value, rest)

    return Parser(_integer, name="integer")


def remaining(min_length: int = 1) -> Parser[str]:
    """Consume the rest of the input; fewer than ``min_length`` chars fails."""

    def _remaining(reader: StringReader) -> ParseResult[str]:
        if reader.remaining_length < min_length:
            return ParseFailure(
                reason=f"expected at least {min_length} characters",
                position=reader.position,
            )
        return ParseSuccess(reader.remaining, reader.advance(reader.remaining_length))

    return Parser(_remaining, name=f"remaining({min_length})")


def whitespace() -> Parser[str]:
    def _whitespace(reader: StringReader) -> ParseResult[str]:
        value, rest = reader.read_while(str.isspace)
        return ParseSuccess(value, rest)

    return Parser(_whitespace, name="whitespace")
