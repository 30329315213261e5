"""Shared test fixtures and configuration."""

import json
import os
from pathlib import Path

import pytest


# Complete test environment that overrides every config value
TEST_ENV = {
    "HTTP_TIMEOUT": "5",
    "HTTP_CONNECT_TIMEOUT": "2",
    "FOLLOW_REDIRECTS": "true",
    "USER_AGENT": "inverted-index-tests",
    "LOG_LEVEL": "debug",
    "LOG_JSON": "false",
    # Proxy settings - ensure they're cleared for tests
    "http_proxy": "",
    "https_proxy": "",
    "all_proxy": "",
    "no_proxy": "",
}


# Set environment variables immediately when conftest.py is loaded
for key, value in TEST_ENV.items():
    os.environ[key] = value


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Reset environment variables to test defaults before each test."""
    for key, value in TEST_ENV.items():
        monkeypatch.setenv(key, value)


@pytest.fixture
def sample_documents() -> dict[str, dict[str, str]]:
    """Small document collection shared across tests."""
    return {
        "doc1": {"title": "Hello World", "text": "a quick test"},
        "doc2": {
            "title": "Alice in Wonderland",
            "text": "Alice falls into a rabbit hole and enters a world full of imagination.",
        },
        "doc3": {
            "title": "The Lord of the Rings",
            "text": "An unusual alliance of man, elf, dwarf, wizard and hobbit seek to destroy a powerful ring.",
        },
    }


@pytest.fixture
def documents_file(tmp_path: Path, sample_documents) -> Path:
    """Write ``sample_documents`` to a JSON file and return its path."""
    path = tmp_path / "books.json"
    path.write_text(json.dumps(sample_documents), encoding="utf-8")
    return path
