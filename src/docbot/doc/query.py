"""Contracts for the Javadoc query engine and element loader.

Both are provided by the embedding application; the bot only consumes them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Collection, Iterable, Optional, Protocol


@dataclass(frozen=True)
class FuzzyQueryResult:
    """One candidate from a fuzzy query; equal fields mean the same result."""

    qualified_name: str
    exact: bool = False
    case_sensitive_exact: bool = False


@dataclass(frozen=True)
class DocElement:
    qualified_name: str
    declaration: str = ""
    summary: str = ""
    description: str = ""
    tags: tuple[tuple[str, str], ...] = ()
    url: Optional[str] = None


@dataclass(frozen=True)
class LoadResult:
    element: DocElement
    loader: Any = field(default=None, compare=False)


class ElementLoader(Protocol):
    def find_by_qualified_name(self, name: str) -> Collection[LoadResult]: ...


class QueryApi(Protocol):
    def query(
        self, loader: ElementLoader, text: str
    ) -> Iterable[FuzzyQueryResult]: ...
