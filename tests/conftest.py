"""
Pytest configuration and fixtures.
"""

import logging
import os
from pathlib import Path
from typing import Callable, Generator

import pytest
import structlog

from docs_auditor.core.config import Settings
from docs_auditor.models.document import StubDocument
from docs_auditor.rules.base import AuditContext
from docs_auditor.services.document_loader import DocumentLoader

COMPLETE_DOC = """\
---
sidebar_position: 2
title: Audit Logging
---

# Audit Logging

## Overview

Audit logging records every agent action with the acting user and target.

---

## Key Components

- Event collector
- Tamper-evident log store

---

## Detailed Design and Specifications

Events are written as append-only JSON lines and signed in batches.

```python
def sign(batch):
    return hmac(batch)
```
"""


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Generator[None, None, None]:
    """Keep DOCS_AUDITOR_* variables, stray config files and CLI logging setup out of tests."""
    for key in list(os.environ):
        if key.startswith("DOCS_AUDITOR_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)
    yield
    logging.getLogger().handlers.clear()
    logging.getLogger().setLevel(logging.WARNING)
    structlog.reset_defaults()


@pytest.fixture
def settings() -> Settings:
    """Default settings."""
    return Settings()


@pytest.fixture
def context(settings: Settings) -> AuditContext:
    """Audit context without a sidebar."""
    return AuditContext(settings=settings)


@pytest.fixture
def complete_doc_text() -> str:
    """A page that satisfies every document rule."""
    return COMPLETE_DOC


@pytest.fixture
def docs_dir(tmp_path: Path) -> Path:
    """Empty docs root."""
    path = tmp_path / "docs"
    path.mkdir()
    return path


@pytest.fixture
def write_doc(docs_dir: Path) -> Callable[[str, str], Path]:
    """Write a document under the docs root, creating parent directories."""

    def _write(rel_path: str, text: str) -> Path:
        path = docs_dir / rel_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def parse_doc(settings: Settings) -> Callable[..., StubDocument]:
    """Parse document text without touching the filesystem."""
    loader = DocumentLoader(Path("docs"), settings)

    def _parse(text: str, rel_path: str = "guide.md") -> StubDocument:
        return loader.parse(text, rel_path)

    return _parse


@pytest.fixture
def make_doc() -> Callable[..., str]:
    """Build a page with front-matter, the template headings and a body for each section."""

    def _make(title: str, position: int, body: str = "") -> str:
        filler = body or f"{title} is described here in enough detail to be useful."
        return (
            f"---\nsidebar_position: {position}\ntitle: {title}\n---\n\n"
            f"# {title}\n\n"
            f"## Overview\n\n{filler}\n\n---\n\n"
            f"## Key Components\n\n{filler}\n\n---\n\n"
            f"## Detailed Design and Specifications\n\n{filler}\n"
        )

    return _make
