"""Shared test fixtures for the confstore test suite."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable

import pytest

from confstore import ConfigStore, default, settings


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line("markers", "unit: fast, isolated tests")
    config.addinivalue_line("markers", "integration: tests that spawn subprocesses")


@pytest.fixture(autouse=True)
def _isolate_globals(monkeypatch: pytest.MonkeyPatch) -> Any:
    """Reset module-level caches so tests never share a default store."""
    monkeypatch.delenv("ENVIRONMENT", raising=False)
    settings._reset()
    default.set_filename(None)
    yield
    default.set_filename(None)


@pytest.fixture
def sample_document() -> dict[str, Any]:
    """A document touching every value kind the accessors handle."""
    return {
        "host": "google.com",
        "port": 8080,
        "ratio": 3.7,
        "negative": -3.7,
        "debug": True,
        "nothing": None,
        "tags": ["a", "b"],
        "links": {
            "google": "https://google.com",
            "retries": 3,
            "timeout": 1.5,
            "secure": False,
            "nested": {"deep": 1},
        },
        "notAMap": "links",
    }


@pytest.fixture
def write_config(tmp_path: Path) -> Callable[..., Path]:
    """Factory writing a JSON document (or raw text) to a file under tmp_path."""

    def _write(
        content: dict[str, Any] | str,
        name: str = "config.json",
        directory: Path | None = None,
    ) -> Path:
        target_dir = directory if directory is not None else tmp_path
        target_dir.mkdir(parents=True, exist_ok=True)
        path = target_dir / name
        if isinstance(content, str):
            path.write_text(content, encoding="utf-8")
        else:
            path.write_text(json.dumps(content), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def store(sample_document: dict[str, Any]) -> ConfigStore:
    """A store holding sample_document, with no file behind it."""
    s = ConfigStore()
    s.set_config(sample_document)
    return s
