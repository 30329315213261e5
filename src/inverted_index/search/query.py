"""Query term resolution and execution.

Queries may be passed as plain strings or as arbitrarily nested lists,
tuples and mappings of strings. :func:`resolve_terms` flattens them
depth-first, then :class:`QueryExecutor` splits every term into words,
normalizes each word and looks it up in an index.

The two store-level entry points treat unknown words differently:
``search_recent`` keeps one slot per word (``""`` for a miss) while
``search_named`` drops misses. Both behaviors are kept on purpose and are
selected through :class:`MissingTermPolicy`.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from enum import Enum
import logging
from typing import Any, TypeAlias

from inverted_index.search.analyzers import FieldAnalyzer
from inverted_index.search.models import Index
from inverted_index.search.storage import IndexNotFoundError, IndexStore


logger = logging.getLogger(__name__)

QueryTerm: TypeAlias = str | Iterable["QueryTerm"] | Mapping[Any, "QueryTerm"]

PLACEHOLDER = ""


class MissingTermPolicy(str, Enum):
    """What to emit for a query word that is not in the index."""

    PLACEHOLDER = "placeholder"
    SKIP = "skip"


def resolve_terms(*args: Any) -> list[Any]:
    """Flatten nested query arguments into an ordered list of raw terms.

    Strings and bytes are scalars. Mappings contribute their values and any
    other iterable its elements, recursively and in iteration order. Anything
    else is appended unchanged. A container that contains itself raises
    ``ValueError``.

    >>> resolve_terms([["a", "b"], "c"])
    ['a', 'b', 'c']
    """
    resolved: list[Any] = []
    for arg in args:
        resolved.extend(_descend(arg, set()))
    return resolved


def _descend(node: Any, open_containers: set[int]) -> Iterator[Any]:
    if isinstance(node, (str, bytes)) or not isinstance(node, Iterable):
        yield node
        return

    node_id = id(node)
    if node_id in open_containers:
        raise ValueError("Query terms contain a reference cycle")
    open_containers.add(node_id)
    try:
        children = node.values() if isinstance(node, Mapping) else node
        for child in children:
            yield from _descend(child, open_containers)
    finally:
        open_containers.discard(node_id)


class QueryExecutor:
    """Run resolved query terms against an index."""

    def __init__(self, analyzer: FieldAnalyzer | None = None) -> None:
        self.analyzer = analyzer or FieldAnalyzer()

    def execute(self, index: Index, terms: Iterable[Any], policy: MissingTermPolicy) -> list[str]:
        """Look up every word of every term in ``index``.

        Each hit contributes the first doc-id recorded for the word's term.
        Misses contribute ``""`` or nothing, depending on ``policy``.
        """
        results: list[str] = []
        for raw in terms:
            text = raw.decode("utf-8") if isinstance(raw, bytes) else str(raw)
            for term in self.analyzer.terms(text):
                doc_id = index.first_document(term)
                if doc_id is not None:
                    results.append(doc_id)
                elif policy is MissingTermPolicy.PLACEHOLDER:
                    results.append(PLACEHOLDER)
        return results

    def search_recent(self, store: IndexStore, *args: QueryTerm) -> list[str]:
        """Search the most recently stored index; one entry per query word."""
        index = store.recent()
        terms = resolve_terms(*args)
        return self.execute(index, terms, MissingTermPolicy.PLACEHOLDER)

    def search_named(self, store: IndexStore, terms: QueryTerm, source_id: str) -> list[str]:
        """Search the index stored under ``source_id``; unknown words are skipped.

        Raises:
            IndexNotFoundError: Nothing is stored under ``source_id``.
        """
        index = store.get(source_id)
        if index is None:
            raise IndexNotFoundError(f"No index exists for '{source_id}'")
        return self.execute(index, resolve_terms(terms), MissingTermPolicy.SKIP)
