"""Shared fixtures: an offline query client that records the SQL it receives."""

import pytest

from amoid.db.base import QueryClient
from amoid.models import QueryResult


class StubClient(QueryClient):
    def __init__(self, rows=None, columns=None):
        super().__init__()
        self.rows = rows or []
        self.columns = columns or []
        self.queries = []

    def run_query(self, query):
        self.queries.append(query)
        return QueryResult(columns=self.columns, rows=self.rows)


@pytest.fixture
def stub_client():
    return StubClient()


@pytest.fixture
def amorc(tmp_path, monkeypatch):
    """Write a config file and point $AMORC at it."""

    def _write(text):
        path = tmp_path / "amorc"
        path.write_text(text, encoding="utf-8")
        monkeypatch.setenv("AMORC", str(path))
        return path

    return _write
