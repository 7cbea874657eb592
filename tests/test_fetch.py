"""Unit tests for paginated component retrieval."""

import pytest

from nexus_prune.components import extract_components
from nexus_prune.errors import FetchError, PageCeilingExceeded
from nexus_prune.fetch import fetch_all

from .conftest import EndlessClient, FakeClient, entry


def test_follows_continuation_tokens_in_page_order():
    client = FakeClient([
        {"items": [entry("1", "1", "a/x/1", 1)], "continuationToken": "t1"},
        {"items": [entry("2", "2", "a/y/2", 2), entry("3", "3", "a/x/3", 3)], "continuationToken": "t2"},
        {"items": [entry("4", "4", "a/z/4", 4)], "continuationToken": None},
    ])

    entries = fetch_all(client, "repo")

    assert [e["id"] for e in entries] == ["1", "2", "3", "4"]
    assert client.list_calls == [None, "t1", "t2"]

    components, groups = extract_components(entries, 2)
    assert [c.id for c in components] == ["1", "2", "3", "4"]
    assert groups == ("a/x", "a/y", "a/z")


def test_empty_pages_contribute_nothing():
    client = FakeClient([
        {"items": [], "continuationToken": "t1"},
        {"items": [entry("1", "1", "a/1")]},
    ])

    assert [e["id"] for e in fetch_all(client, "repo")] == ["1"]


def test_request_failure_returns_partial_results(caplog):
    client = FakeClient([
        {"items": [entry("1", "1", "a/1")], "continuationToken": "t1"},
        FetchError("connection refused"),
    ])

    entries = fetch_all(client, "repo")

    assert [e["id"] for e in entries] == ["1"]
    assert len(client.list_calls) == 2
    assert "connection refused" in caplog.text


def test_page_ceiling_aborts():
    client = EndlessClient()

    with pytest.raises(PageCeilingExceeded):
        fetch_all(client, "repo")

    assert len(client.list_calls) == 30


def test_custom_page_ceiling():
    client = EndlessClient()

    with pytest.raises(PageCeilingExceeded):
        fetch_all(client, "repo", max_pages=3)

    assert len(client.list_calls) == 3
