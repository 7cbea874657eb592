"""Shared fixtures and fakes for the cleanup tests."""

from typing import Any, Dict, List, Optional
import logging

import pytest

from nexus_prune.errors import DeleteError

ENV_VARS = (
    "NEXUS_URL",
    "NEXUS_USERNAME",
    "NEXUS_PASSWORD",
    "NEXUS_TIMEOUT",
    "REPO_NAME",
    "KEEP_ITEMS",
    "PATH_DEPTH",
    "EXECUTE_DELETE",
    "LOG_LEVEL",
    "KEEP_COMPONENT_PATHS",
    "DOTENV_PATH",
)


def ts(seconds: int) -> str:
    return f"2024-05-01T10:00:{seconds:02d}.000+00:00"


def entry(component_id: str, version: str, path: Optional[str], seconds: int = 0) -> Dict[str, Any]:
    asset: Dict[str, Any] = {"lastModified": ts(seconds)}
    if path is not None:
        asset["path"] = path
    return {"id": component_id, "version": version, "assets": [asset]}


class FakeClient:
    """Stands in for NexusClient; serves canned pages and records deletes."""

    def __init__(self, pages: Optional[List[Any]] = None, failing_ids=()):
        self.pages = list(pages or [])
        self.failing_ids = set(failing_ids)
        self.list_calls: List[Optional[str]] = []
        self.deleted: List[str] = []
        self.delete_calls: List[str] = []

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        return None

    def list_components(self, repository: str, continuation_token: Optional[str] = None):
        self.list_calls.append(continuation_token)
        page = self.pages[len(self.list_calls) - 1]
        if isinstance(page, Exception):
            raise page
        return page

    def delete_component(self, component_id: str) -> None:
        self.delete_calls.append(component_id)
        if component_id in self.failing_ids:
            raise DeleteError(component_id, "500 Server Error")
        self.deleted.append(component_id)


class EndlessClient(FakeClient):
    def list_components(self, repository: str, continuation_token: Optional[str] = None):
        self.list_calls.append(continuation_token)
        n = len(self.list_calls)
        return {"items": [entry(f"id-{n}", f"1.{n}", f"a/b/1.{n}", n % 60)], "continuationToken": f"tok-{n}"}


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("DOTENV_PATH", str(tmp_path / "missing.env"))
    yield
    root = logging.getLogger()
    for handler in root.handlers[:]:
        if getattr(handler, "nexus_prune", False):
            root.removeHandler(handler)
    root.setLevel(logging.WARNING)


@pytest.fixture
def nexus_env(monkeypatch):
    monkeypatch.setenv("NEXUS_URL", "https://nexus.example.com/")
    monkeypatch.setenv("NEXUS_USERNAME", "admin")
    monkeypatch.setenv("NEXUS_PASSWORD", "secret")
    monkeypatch.setenv("REPO_NAME", "maven-releases")
    monkeypatch.setenv("KEEP_ITEMS", "2")
    monkeypatch.setenv("PATH_DEPTH", "2")


@pytest.fixture
def scenario_entries():
    return [
        entry("c-10", "1.0", "a/b/1.0/app-1.0.jar", 5),
        entry("c-11", "1.1", "a/b/1.1/app-1.1.jar", 10),
        entry("c-12", "1.2", "a/b/1.2/app-1.2.jar", 8),
        entry("c-20", "2.0", "a/c/2.0/lib-2.0.jar", 1),
    ]
