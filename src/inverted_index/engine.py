"""Inverted index engine: build, keep and query indexes of JSON documents.

Usage:
    engine = InvertedIndex()
    await engine.create_index("books.json")
    engine.search_index("alice", ["wonderland", "rabbit"])
    engine.search_specific_index(["alice"], "books.json")
"""

from __future__ import annotations

import logging
from typing import overload

from inverted_index.config import Settings
from inverted_index.observability import (
    INDEX_BUILD_LATENCY,
    INDEX_BUILDS,
    SEARCH_LATENCY,
    forget_index,
    record_index_size,
    source_context,
    track_latency,
)
from inverted_index.search.indexer import IndexBuilder, InvalidInputError
from inverted_index.search.models import Index
from inverted_index.search.query import QueryExecutor, QueryTerm
from inverted_index.search.storage import IndexStore
from inverted_index.utils.document_source import (
    DocumentSource,
    DocumentSourceError,
    LocalDocumentSource,
    RemoteDocumentSource,
    select_document_source,
)


logger = logging.getLogger(__name__)


class InvertedIndex:
    """Builds indexes from document sources and answers term queries.

    Each ``create_index`` call builds into its own scratch structure, so
    overlapping builds on one engine never share intermediate state. A build
    for a location that is already indexed replaces the stored index.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        store: IndexStore | None = None,
        builder: IndexBuilder | None = None,
        executor: QueryExecutor | None = None,
        local_source: DocumentSource | None = None,
        remote_source: DocumentSource | None = None,
    ) -> None:
        self.settings = settings or Settings()
        self.store = store or IndexStore()
        self.builder = builder or IndexBuilder()
        self.executor = executor or QueryExecutor()
        self.local_source = local_source or LocalDocumentSource()
        self.remote_source = remote_source or RemoteDocumentSource(self.settings)

    async def create_index(self, location: str) -> InvertedIndex:
        """Fetch, validate and index the documents at ``location``.

        Returns the engine itself so calls can be chained.

        Raises:
            DocumentNotFoundError: Local file is missing.
            NetworkError: Remote fetch failed.
            InvalidJSONError: Payload is not a JSON object.
            InvalidInputError: No entry carries both ``title`` and ``text``.
        """
        with source_context(location), track_latency(INDEX_BUILD_LATENCY):
            source = select_document_source(location, self.local_source, self.remote_source)
            try:
                documents = await source.fetch(location)
                result = self.builder.build_report(documents, source=location)
            except (DocumentSourceError, InvalidInputError) as exc:
                INDEX_BUILDS.labels(status="failed").inc()
                logger.error("Unable to index %s: %s", location, exc)
                raise

            self.store.put(location, result.index)
            INDEX_BUILDS.labels(status="success").inc()
            record_index_size(location, result.documents_indexed, len(result.index))
            logger.info(
                "Indexed %d documents (%d skipped) from %s",
                result.documents_indexed,
                result.documents_skipped,
                location,
            )
        return self

    @overload
    def get_index(self) -> dict[str, Index]: ...

    @overload
    def get_index(self, location: str) -> Index | None: ...

    def get_index(self, location: str | None = None) -> Index | dict[str, Index] | None:
        """Return the index built from ``location``, or every index when omitted."""
        if not location:
            return self.store.get_all()
        return self.store.get(location)

    def recent_index(self) -> Index:
        """Return the most recently built index (``IndexNotFoundError`` if none)."""
        return self.store.recent()

    def search_index(self, *query_terms: QueryTerm) -> list[str]:
        """Search the most recent index.

        Returns one entry per query word: the first matching doc-id, or ``""``
        when the word is not indexed.

        Raises:
            IndexNotFoundError: No index has been built yet.
        """
        with source_context(self.store.recent_source()), track_latency(SEARCH_LATENCY, entry_point="recent"):
            return self.executor.search_recent(self.store, *query_terms)

    def search_specific_index(self, terms: QueryTerm, location: str) -> list[str]:
        """Search the index built from ``location``; unindexed words are omitted.

        Raises:
            IndexNotFoundError: No index exists for ``location``.
        """
        with source_context(location), track_latency(SEARCH_LATENCY, entry_point="named"):
            return self.executor.search_named(self.store, terms, location)

    def remove_index(self, location: str) -> None:
        """Delete the index built from ``location``; unknown locations are ignored."""
        self.store.remove(location)
        forget_index(location)

