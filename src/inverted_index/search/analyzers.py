"""Analyzer utilities for the inverted index.

Text is split on whitespace into words and every word is reduced to a
canonical term by :func:`normalize`. The same pipeline runs at index time and
at query time, so a query word matches an indexed word exactly when both
normalize to the same term.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass
import re
from typing import Protocol


_NON_TERM_CHARS = re.compile(r"[^a-z0-9 ]+")
_WORD_PATTERN = re.compile(r"\S+")


def normalize(word: str) -> str:
    """Lower-case ``word`` and drop everything outside ``[a-z0-9 ]``.

    The result may be the empty string (for example ``"!!"``); that is still a
    valid term and is indexed like any other.
    """

    return _NON_TERM_CHARS.sub("", word.lower())


def split_words(text: str) -> list[str]:
    """Split raw text on runs of whitespace."""

    return text.split()


@dataclass
class Token:
    """Represents a token emitted by analyzers."""

    text: str
    position: int
    start_char: int
    end_char: int

    def copy_with(self, *, text: str) -> Token:
        return Token(text=text, position=self.position, start_char=self.start_char, end_char=self.end_char)


class Tokenizer(Protocol):
    """Protocol implemented by tokenizers."""

    def __call__(self, text: str) -> Iterator[Token]:  # pragma: no cover - interface definition
        ...


class TokenFilter(Protocol):
    """Protocol implemented by token filters."""

    def __call__(self, tokens: Iterable[Token]) -> Iterator[Token]:  # pragma: no cover - interface definition
        ...


class WhitespaceTokenizer:
    """Yields one token per whitespace-separated word.

    ``position`` is the zero-based word offset inside the analyzed text.
    """

    def __call__(self, text: str) -> Iterator[Token]:
        for position, match in enumerate(_WORD_PATTERN.finditer(text)):
            yield Token(
                text=match.group(0),
                position=position,
                start_char=match.start(),
                end_char=match.end(),
            )


class NormalizeFilter:
    """Filter that rewrites token text into its normalized term."""

    def __call__(self, tokens: Iterable[Token]) -> Iterator[Token]:
        for token in tokens:
            term = normalize(token.text)
            if term == token.text:
                yield token
            else:
                yield token.copy_with(text=term)


class AnalyzerPipeline:
    """Composable analyzer pipeline (tokenizer + filters)."""

    def __init__(self, tokenizer: Tokenizer, filters: Sequence[TokenFilter] | None = None) -> None:
        self.tokenizer = tokenizer
        self.filters = list(filters or [])

    def __call__(self, text: str) -> list[Token]:
        stream: Iterable[Token] = self.tokenizer(text)
        for token_filter in self.filters:
            stream = token_filter(stream)
        return list(stream)


class FieldAnalyzer:
    """Default analyzer for document fields and query terms.

    Filters never drop tokens, so positions stay equal to raw word offsets.
    """

    def __init__(self) -> None:
        self.pipeline = AnalyzerPipeline(WhitespaceTokenizer(), [NormalizeFilter()])

    def __call__(self, text: str) -> list[Token]:
        return self.pipeline(text)

    def terms(self, text: str) -> list[str]:
        return [token.text for token in self(text)]
