from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, NoReturn, TypeVar, Union

from ..core.exceptions import DocbotError
from .reader import StringReader

T = TypeVar("T")


class ParseError(DocbotError):
    """A parse failure that escaped into control flow."""

    def __init__(self, reason: str, *, position: int) -> None:
        super().__init__(f"{reason} (at position {position})", user_message=reason)
        self.reason = reason
        self.position = position


@dataclass(frozen=True)
class ParseSuccess(Generic[T]):
    value: T
    reader: StringReader

    @property
    def ok(self) -> bool:
        return True

    def get_or_raise(self) -> T:
        return self.value


@dataclass(frozen=True)
class ParseFailure:
    reason: str
    position: int

    @property
    def ok(self) -> bool:
        return False

    def get_or_raise(self) -> NoReturn:
        raise ParseError(self.reason, position=self.position)


ParseResult = Union[ParseSuccess[T], ParseFailure]
