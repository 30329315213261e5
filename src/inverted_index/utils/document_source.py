"""Document sources: fetch and parse JSON document collections.

A location is either a local filesystem path or a URL with a host. Each kind
is served by its own :class:`DocumentSource` implementation;
:func:`is_remote` decides which one a location needs.
"""

from __future__ import annotations

from collections.abc import Callable
import logging
from pathlib import Path
from typing import Any, Protocol
from urllib.parse import urlparse

from anyio import to_thread
import httpx
import orjson

from ..config import Settings


logger = logging.getLogger(__name__)

INVALID_JSON_MESSAGE = "JSON file is not valid"


class DocumentSourceError(RuntimeError):
    """Raised when a document collection cannot be retrieved."""


class DocumentNotFoundError(DocumentSourceError):
    """Raised when a local document file does not exist."""


class NetworkError(DocumentSourceError):
    """Raised when a remote document collection cannot be downloaded."""


class InvalidJSONError(DocumentSourceError):
    """Raised when a payload is not a JSON object."""


class DocumentSource(Protocol):
    """Capability for retrieving a parsed document mapping."""

    async def fetch(self, location: str) -> dict[str, Any]:  # pragma: no cover - interface definition
        ...


def is_remote(location: str) -> bool:
    """Return True when ``location`` parses as a URL with a host."""
    try:
        return bool(urlparse(location).netloc)
    except ValueError:
        return False


def parse_documents(payload: bytes, location: str) -> dict[str, Any]:
    """Decode ``payload`` and require a top-level JSON object."""
    try:
        parsed = orjson.loads(payload)
    except orjson.JSONDecodeError as exc:
        logger.debug("Invalid JSON from %s: %s", location, exc)
        raise InvalidJSONError(INVALID_JSON_MESSAGE) from exc

    if not isinstance(parsed, dict):
        raise InvalidJSONError(INVALID_JSON_MESSAGE)
    return parsed


class LocalDocumentSource:
    """Reads document collections from the local filesystem."""

    async def fetch(self, location: str) -> dict[str, Any]:
        path = Path(location).expanduser()
        try:
            payload = await to_thread.run_sync(path.read_bytes)
        except FileNotFoundError as exc:
            raise DocumentNotFoundError(f"Sorry, the file '{location}' does not exist!") from exc
        except OSError as exc:
            raise DocumentSourceError(f"Unable to read '{location}': {exc}") from exc

        logger.debug("Read %d bytes from %s", len(payload), path)
        return parse_documents(payload, location)


class RemoteDocumentSource:
    """Downloads document collections over HTTP(S)."""

    def __init__(
        self,
        settings: Settings | None = None,
        client_factory: Callable[[], httpx.AsyncClient] | None = None,
    ) -> None:
        self.settings = settings or Settings()
        self._client_factory = client_factory or self._create_client

    def _create_client(self) -> httpx.AsyncClient:
        timeout = httpx.Timeout(self.settings.http_timeout, connect=self.settings.http_connect_timeout)
        return httpx.AsyncClient(
            timeout=timeout,
            follow_redirects=self.settings.follow_redirects,
            headers=self.settings.get_http_headers(),
        )

    async def fetch(self, location: str) -> dict[str, Any]:
        async with self._client_factory() as client:
            try:
                resp = await client.get(location)
                resp.raise_for_status()
            except httpx.HTTPStatusError as exc:
                raise NetworkError(f"Request for '{location}' failed with status {exc.response.status_code}") from exc
            except httpx.HTTPError as exc:
                raise NetworkError(f"Request for '{location}' failed: {exc}") from exc

        logger.debug("Fetched %d bytes from %s", len(resp.content), location)
        return parse_documents(resp.content, location)


def select_document_source(
    location: str,
    local: DocumentSource,
    remote: DocumentSource,
) -> DocumentSource:
    """Pick the source able to serve ``location``."""
    return remote if is_remote(location) else local
