"""Inverted index over JSON document collections."""

from inverted_index.config import Settings
from inverted_index.engine import InvertedIndex
from inverted_index.search.indexer import IndexBuilder, IndexBuildResult, InvalidInputError
from inverted_index.search.models import Document, Index, Posting
from inverted_index.search.query import MissingTermPolicy, QueryExecutor, resolve_terms
from inverted_index.search.storage import IndexNotFoundError, IndexStore
from inverted_index.utils.document_source import (
    DocumentNotFoundError,
    DocumentSource,
    DocumentSourceError,
    InvalidJSONError,
    LocalDocumentSource,
    NetworkError,
    RemoteDocumentSource,
    is_remote,
)


__all__ = [
    "Document",
    "DocumentNotFoundError",
    "DocumentSource",
    "DocumentSourceError",
    "Index",
    "IndexBuildResult",
    "IndexBuilder",
    "IndexNotFoundError",
    "IndexStore",
    "InvalidInputError",
    "InvalidJSONError",
    "InvertedIndex",
    "LocalDocumentSource",
    "MissingTermPolicy",
    "NetworkError",
    "Posting",
    "QueryExecutor",
    "RemoteDocumentSource",
    "Settings",
    "is_remote",
    "resolve_terms",
]
