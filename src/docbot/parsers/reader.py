from __future__ import annotations

from dataclasses import dataclass
from typing import Callable


@dataclass(frozen=True)
class StringReader:
    """Immutable cursor into a text buffer.

    Advancing returns a new reader, so a parser can never corrupt the input
    another branch is about to read.
    """

    text: str
    position: int = 0

    def __post_init__(self) -> None:
        if self.position < 0 or self.position > len(self.text):
            raise ValueError(
                f"position {self.position} outside of text of length {len(self.text)}"
            )

    @property
    def remaining(self) -> str:
        return self.text[self.position :]

    @property
    def remaining_length(self) -> int:
        return len(self.text) - self.position

    def at_end(self) -> bool:
        return self.position >= len(self.text)

    def peek(self) -> str:
        if self.at_end():
            return ""
        return self.text[self.position]

    def startswith(self, prefix: str) -> bool:
        return self.text.startswith(prefix, self.position)

    def advance(self, count: int) -> "StringReader":
        return StringReader(self.text, min(self.position + count, len(self.text)))

    def read_while(
        self, predicate: Callable[[str], bool]
    ) -> tuple[str, "StringReader"]:
        end = self.position
        while end < len(self.text) and predicate(self.text[end]):
            end += 1
        return self.text[self.position : end], StringReader(self.text, end)
