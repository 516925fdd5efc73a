"""Pytest configuration and fixtures."""
import email.message
import sqlite3

import pytest

from modlists.errors import FetchError, IndexQueryError
from modlists.index import SCHEMA


class FakeFetcher:
    """Serves canned pages and records every URL requested."""

    def __init__(self, pages=None, failures=None):
        self.pages = pages or {}
        self.failures = failures or {}
        self.calls = []

    def get(self, url):
        self.calls.append(url)
        if url in self.failures:
            raise FetchError(url, self.failures[url])
        return self.pages.get(url, f"<html><body>{url}</body></html>")


class FakeExtractor:
    """Returns preset names per page content, recording the options it was given."""

    def __init__(self, names_by_content=None, default=None):
        self.names_by_content = names_by_content or {}
        self.default = default or []
        self.calls = []

    def extract(self, html, **opts):
        self.calls.append((html, opts))
        return list(self.names_by_content.get(html, self.default))


class FakeIndex:
    """Index lookup over a fixed set of names."""

    def __init__(self, indexed=(), error=None):
        self.indexed = set(indexed)
        self.error = error
        self.queries = []

    def lookup(self, names):
        self.queries.append(list(names))
        if self.error is not None:
            raise self.error
        return {n for n in names if n in self.indexed}


class FakeResponse:
    """Stands in for the object `urllib.request.urlopen` returns."""

    def __init__(self, body, content_type="text/html; charset=utf-8"):
        self.body = body
        self.headers = email.message.Message()
        self.headers["Content-Type"] = content_type

    def read(self):
        return self.body

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False


@pytest.fixture
def fake_fetcher():
    return FakeFetcher()


@pytest.fixture
def failing_index():
    return FakeIndex(error=IndexQueryError("Can't list modules in local index: boom", code=503))


@pytest.fixture
def index_db(tmp_path):
    """Small SQLite index holding three modules."""
    db_path = tmp_path / "index.db"
    conn = sqlite3.connect(db_path)
    conn.execute(SCHEMA)
    conn.executemany(
        "INSERT INTO modules VALUES (?, ?, ?)",
        [
            ("Moose", "2.2206", "E/ET/ETHER/Moose-2.2206.tar.gz"),
            ("Moo::Role", "2.005005", "H/HA/HAARG/Moo-2.005005.tar.gz"),
            ("Try::Tiny", "0.31", "E/ET/ETHER/Try-Tiny-0.31.tar.gz"),
        ],
    )
    conn.commit()
    conn.close()
    return db_path
