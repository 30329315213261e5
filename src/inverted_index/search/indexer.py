"""Index building for document collections.

The builder turns a mapping of ``doc-id -> {"title": ..., "text": ...}`` into
an immutable :class:`~inverted_index.search.models.Index`. All bookkeeping
happens in a scratch value owned by a single ``build`` call, so one builder
can serve any number of sequential or concurrent builds.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
import logging
from typing import Any

from pydantic import ValidationError

from inverted_index.search.analyzers import FieldAnalyzer
from inverted_index.search.models import INDEXED_FIELDS, Document, FieldName, Index, Posting


logger = logging.getLogger(__name__)

INVALID_INPUT_MESSAGE = "Unable to build index, json is empty or not valid"


class InvalidInputError(ValueError):
    """Raised when a document mapping is empty or holds no indexable entry."""


@dataclass(frozen=True)
class IndexBuildResult:
    """Outcome of an indexing run."""

    index: Index
    documents_indexed: int
    documents_skipped: int
    errors: tuple[str, ...]


@dataclass
class _MutablePosting:
    field: FieldName
    frequency: int
    positions: list[int]

    def freeze(self) -> Posting:
        return Posting(field=self.field, frequency=self.frequency, positions=tuple(self.positions))


@dataclass
class _BuildScratch:
    """Working structure for one build: term -> doc-id -> postings."""

    terms: dict[str, dict[str, list[_MutablePosting]]] = field(default_factory=dict)

    def record(self, term: str, doc_id: str, field_name: FieldName, position: int) -> None:
        docs = self.terms.setdefault(term, {})
        postings = docs.get(doc_id)
        if postings is None:
            docs[doc_id] = [_MutablePosting(field_name, 1, [position])]
            return

        for posting in postings:
            if posting.field == field_name:
                posting.frequency += 1
                posting.positions.append(position)
                return
        postings.append(_MutablePosting(field_name, 1, [position]))

    def freeze(self, source: str | None) -> Index:
        terms = {
            term: {doc_id: tuple(posting.freeze() for posting in postings) for doc_id, postings in docs.items()}
            for term, docs in self.terms.items()
        }
        return Index(terms=terms, source=source)


class IndexBuilder:
    """Builds :class:`Index` values from parsed document collections."""

    def __init__(self, analyzer: FieldAnalyzer | None = None) -> None:
        self.analyzer = analyzer or FieldAnalyzer()

    def build(self, documents: Any, *, source: str | None = None) -> Index:
        """Build an index, raising :class:`InvalidInputError` for unusable input."""
        return self.build_report(documents, source=source).index

    def build_report(self, documents: Any, *, source: str | None = None) -> IndexBuildResult:
        """Build an index and report how many entries were indexed or skipped.

        Args:
            documents: Mapping of doc-id to an object with ``title`` and ``text``.
            source: Location the documents were read from, recorded on the index.

        Raises:
            InvalidInputError: ``documents`` is not a non-empty mapping, or none
                of its entries carries both a ``title`` and a ``text`` string.
        """
        if not isinstance(documents, Mapping) or not documents:
            raise InvalidInputError(INVALID_INPUT_MESSAGE)

        valid: list[tuple[str, Document]] = []
        errors: list[str] = []
        for doc_id, entry in documents.items():
            try:
                valid.append((str(doc_id), Document.model_validate(entry)))
            except ValidationError as exc:
                reason = _summarize(exc)
                logger.warning("Skipping document %r: %s", doc_id, reason)
                errors.append(f"{doc_id}: {reason}")

        if not valid:
            raise InvalidInputError(INVALID_INPUT_MESSAGE)

        scratch = _BuildScratch()
        for doc_id, document in valid:
            for field_name in INDEXED_FIELDS:
                for token in self.analyzer(getattr(document, field_name)):
                    scratch.record(token.text, doc_id, field_name, token.position)

        index = scratch.freeze(source)
        logger.debug(
            "Built index with %d terms from %d documents (%d skipped)",
            len(index),
            len(valid),
            len(errors),
        )
        return IndexBuildResult(
            index=index,
            documents_indexed=len(valid),
            documents_skipped=len(errors),
            errors=tuple(errors),
        )


def _summarize(exc: ValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"]) or "entry"
        parts.append(f"{location}: {error['msg']}")
    return "; ".join(parts)
