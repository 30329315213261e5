"""Search data models."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict


FieldName = Literal["title", "text"]
INDEXED_FIELDS: tuple[FieldName, ...] = ("title", "text")


class Document(BaseModel):
    """A single entry of a document collection.

    Extra keys in the source JSON are ignored; only ``title`` and ``text`` are
    indexed.
    """

    model_config = ConfigDict(frozen=True, extra="ignore", strict=True)

    title: str
    text: str


@dataclass(frozen=True, slots=True)
class Posting:
    """Occurrences of one term inside one field of one document."""

    field: FieldName
    frequency: int
    positions: tuple[int, ...]

    def to_dict(self) -> dict[str, Any]:
        return {
            "field": self.field,
            "frequency": self.frequency,
            "positions": list(self.positions),
        }


PostingMap = Mapping[str, tuple[Posting, ...]]


@dataclass(frozen=True, eq=False)
class Index:
    """Immutable inverted index built from one document collection.

    Maps term -> doc-id -> postings (one per field the term occurs in). Term
    and doc-id order follow first appearance during the build.
    Indexes compare and hash by identity.
    """

    terms: Mapping[str, PostingMap]
    source: str | None = None
    built_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __post_init__(self) -> None:
        frozen = {term: MappingProxyType(dict(docs)) for term, docs in self.terms.items()}
        object.__setattr__(self, "terms", MappingProxyType(frozen))

    def __contains__(self, term: object) -> bool:
        return term in self.terms

    def __getitem__(self, term: str) -> PostingMap:
        return self.terms[term]

    def __iter__(self) -> Iterator[str]:
        return iter(self.terms)

    def __len__(self) -> int:
        return len(self.terms)

    def get(self, term: str) -> PostingMap | None:
        return self.terms.get(term)

    def postings(self, term: str, doc_id: str) -> tuple[Posting, ...]:
        """Return the postings of ``term`` for ``doc_id`` (empty when absent)."""
        docs = self.terms.get(term)
        if docs is None:
            return ()
        return docs.get(doc_id, ())

    def first_document(self, term: str) -> str | None:
        """Return the first doc-id recorded for ``term``."""
        docs = self.terms.get(term)
        if not docs:
            return None
        return next(iter(docs))

    @property
    def doc_ids(self) -> list[str]:
        seen: dict[str, None] = {}
        for docs in self.terms.values():
            for doc_id in docs:
                seen.setdefault(doc_id, None)
        return list(seen)

    @property
    def doc_count(self) -> int:
        return len(self.doc_ids)

    def to_dict(self) -> dict[str, dict[str, list[dict[str, Any]]]]:
        return {
            term: {doc_id: [posting.to_dict() for posting in postings] for doc_id, postings in docs.items()}
            for term, docs in self.terms.items()
        }
