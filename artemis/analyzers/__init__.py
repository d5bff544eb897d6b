"""Resolvers that turn audience queries into ranked targeting pathways."""

from artemis.analyzers.pathway_resolver import PathwayResolver, resolve_columns
from artemis.analyzers.keyword_resolver import KeywordResolver

__all__ = [
    "PathwayResolver",
    "KeywordResolver",
    "resolve_columns",
]
