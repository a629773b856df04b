"""Javadoc query handling."""

from .query import DocElement, ElementLoader, FuzzyQueryResult, LoadResult, QueryApi
from .rendering import DocResultSender, TextDocResultSender
from .resolver import DisambiguationResolver, Resolution, select_candidate

__all__ = [
    "DisambiguationResolver",
    "DocElement",
    "DocResultSender",
    "ElementLoader",
    "FuzzyQueryResult",
    "LoadResult",
    "QueryApi",
    "Resolution",
    "TextDocResultSender",
    "select_candidate",
]
