"""Unit tests for the InvertedIndex engine facade."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any

import pytest

from inverted_index import InvertedIndex
from inverted_index.observability import get_trace_context
from inverted_index.search.indexer import InvalidInputError
from inverted_index.search.models import Index
from inverted_index.search.query import QueryExecutor
from inverted_index.search.storage import IndexNotFoundError
from inverted_index.utils.document_source import DocumentNotFoundError, InvalidJSONError, NetworkError


class FakeSource:
    """DocumentSource stub replaying canned payloads per location."""

    def __init__(self, payloads: dict[str, Any] | None = None, *, delay: float = 0.0) -> None:
        self.payloads = payloads or {}
        self.delay = delay
        self.calls: list[str] = []

    async def fetch(self, location: str) -> dict[str, Any]:
        self.calls.append(location)
        if self.delay:
            await asyncio.sleep(self.delay)
        payload = self.payloads[location]
        if isinstance(payload, Exception):
            raise payload
        return payload


@pytest.fixture
def engine() -> InvertedIndex:
    return InvertedIndex()


def _write(tmp_path: Path, name: str, documents: Any) -> str:
    path = tmp_path / name
    path.write_text(json.dumps(documents), encoding="utf-8")
    return str(path)


@pytest.mark.asyncio
async def test_create_index_from_local_file(engine: InvertedIndex, documents_file: Path) -> None:
    result = await engine.create_index(str(documents_file))

    assert result is engine
    index = engine.get_index(str(documents_file))
    assert isinstance(index, Index)
    assert index.source == str(documents_file)
    assert index.doc_count == 3


@pytest.mark.asyncio
async def test_hello_world_scenario(engine: InvertedIndex, tmp_path: Path) -> None:
    location = _write(tmp_path, "doc1", {"doc1": {"title": "Hello World", "text": "a quick test"}})
    await engine.create_index(location)

    assert engine.search_index("hello") == ["doc1"]
    assert engine.search_index("missingword") == [""]

    engine.remove_index(location)
    assert engine.get_index(location) is None


@pytest.mark.asyncio
async def test_remote_locations_use_remote_source(sample_documents) -> None:
    local = FakeSource()
    remote = FakeSource({"https://example.com/books.json": sample_documents})
    engine = InvertedIndex(local_source=local, remote_source=remote)

    await engine.create_index("https://example.com/books.json")

    assert remote.calls == ["https://example.com/books.json"]
    assert local.calls == []
    assert engine.search_index("wonderland") == ["doc2"]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "error",
    [
        DocumentNotFoundError("Sorry, the file 'x.json' does not exist!"),
        NetworkError("Request for 'x.json' failed"),
        InvalidJSONError("JSON file is not valid"),
    ],
)
async def test_source_errors_propagate_unchanged(error: Exception) -> None:
    engine = InvertedIndex(local_source=FakeSource({"x.json": error}))

    with pytest.raises(type(error)) as exc_info:
        await engine.create_index("x.json")

    assert exc_info.value is error
    assert engine.get_index() == {}


@pytest.mark.asyncio
async def test_missing_local_file(engine: InvertedIndex, tmp_path: Path) -> None:
    with pytest.raises(DocumentNotFoundError):
        await engine.create_index(str(tmp_path / "nowhere.json"))


@pytest.mark.asyncio
async def test_empty_collection_is_invalid_input(engine: InvertedIndex, tmp_path: Path) -> None:
    location = _write(tmp_path, "empty.json", {})

    with pytest.raises(InvalidInputError, match="json is empty or not valid"):
        await engine.create_index(location)

    assert engine.get_index(location) is None


@pytest.mark.asyncio
async def test_get_index_without_location_returns_all(engine: InvertedIndex, tmp_path: Path) -> None:
    first = _write(tmp_path, "first.json", {"a": {"title": "one", "text": "two"}})
    second = _write(tmp_path, "second.json", {"b": {"title": "three", "text": "four"}})
    await engine.create_index(first)
    await engine.create_index(second)

    indexes = engine.get_index()

    assert list(indexes) == [first, second]
    assert engine.recent_index() is indexes[second]


@pytest.mark.asyncio
async def test_search_index_targets_most_recent(engine: InvertedIndex, tmp_path: Path) -> None:
    first = _write(tmp_path, "first.json", {"a": {"title": "shared one", "text": ""}})
    second = _write(tmp_path, "second.json", {"b": {"title": "shared two", "text": ""}})
    await engine.create_index(first)
    await engine.create_index(second)

    assert engine.search_index("shared", ["one"]) == ["b", ""]
    assert engine.search_specific_index(["shared", "one"], first) == ["a", "a"]


@pytest.mark.asyncio
async def test_rebuild_replaces_index(engine: InvertedIndex, tmp_path: Path) -> None:
    location = _write(tmp_path, "books.json", {"old": {"title": "stale", "text": ""}})
    await engine.create_index(location)
    _write(tmp_path, "books.json", {"new": {"title": "fresh", "text": ""}})
    await engine.create_index(location)

    assert engine.search_specific_index(["stale", "fresh"], location) == ["new"]
    assert len(engine.get_index()) == 1


@pytest.mark.asyncio
async def test_rebuilding_an_older_location_keeps_recent_unchanged(engine: InvertedIndex, tmp_path: Path) -> None:
    first = _write(tmp_path, "a.json", {"a": {"title": "shared", "text": ""}})
    second = _write(tmp_path, "b.json", {"b": {"title": "shared", "text": ""}})
    await engine.create_index(first)
    await engine.create_index(second)
    await engine.create_index(first)

    assert list(engine.get_index()) == [first, second]
    assert engine.search_index("shared") == ["b"]


@pytest.mark.asyncio
async def test_nested_query_terms(engine: InvertedIndex, documents_file: Path) -> None:
    await engine.create_index(str(documents_file))

    result = engine.search_index(["alice", ["hobbit ring"]], {"q": "nothing here"})

    assert result == ["doc2", "doc3", "doc3", "", ""]


def test_search_before_any_build_raises(engine: InvertedIndex) -> None:
    with pytest.raises(IndexNotFoundError):
        engine.search_index("anything")
    with pytest.raises(IndexNotFoundError):
        engine.search_specific_index(["anything"], "never-built.json")


def test_remove_unknown_index_is_noop(engine: InvertedIndex) -> None:
    engine.remove_index("never-built.json")

    assert engine.get_index() == {}


@pytest.mark.asyncio
async def test_concurrent_builds_stay_isolated() -> None:
    source = FakeSource(
        {
            "a.json": {"a1": {"title": "alpha", "text": "common"}},
            "b.json": {"b1": {"title": "beta", "text": "common"}},
        },
        delay=0.01,
    )
    engine = InvertedIndex(local_source=source)

    await asyncio.gather(engine.create_index("a.json"), engine.create_index("b.json"))

    index_a = engine.get_index("a.json")
    index_b = engine.get_index("b.json")
    assert "beta" not in index_a
    assert "alpha" not in index_b
    assert list(index_a["common"]) == ["a1"]
    assert list(index_b["common"]) == ["b1"]


class ContextRecordingExecutor(QueryExecutor):
    def __init__(self) -> None:
        super().__init__()
        self.contexts: list[dict[str, str]] = []

    def execute(self, index, terms, policy):
        self.contexts.append(get_trace_context())
        return super().execute(index, terms, policy)


@pytest.mark.asyncio
async def test_searches_run_under_their_source_context(documents_file: Path) -> None:
    executor = ContextRecordingExecutor()
    engine = InvertedIndex(executor=executor)
    location = str(documents_file)
    await engine.create_index(location)

    engine.search_index("alice")
    engine.search_specific_index(["alice"], location)

    assert [ctx["source"] for ctx in executor.contexts] == [location, location]
    assert executor.contexts[0]["trace_id"] != executor.contexts[1]["trace_id"]
    assert get_trace_context() == {}
