"""Shared test fixtures for the docbundle test suite.

Documentation trees are written under ``tmp_path`` so every test gets an
isolated MkDocs monorepo. ``make_tree`` takes a ``{relative path: text}``
mapping; ``monorepo`` builds a small two-site layout used across modules.
"""

import os

# Keep a developer's .env or environment out of the tests.
os.environ["DOCBUNDLE_LOG_FORMAT"] = "text"
os.environ["DOCBUNDLE_LOG_LEVEL"] = "INFO"

import sqlite3
from pathlib import Path
from typing import Dict

import pytest


def write_tree(root: Path, files: Dict[str, str]) -> Path:
    for rel, text in files.items():
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    return root


@pytest.fixture()
def make_tree(tmp_path):
    """Factory writing a documentation tree under a fresh directory."""

    def _make(files: Dict[str, str], name: str = "repo") -> Path:
        return write_tree(tmp_path / name, files)

    return _make


# Root site with one included sub-site plus an orphan disambiguation page.
MONOREPO_FILES = {
    "mkdocs.yml": (
        "site_name: Dyalog Documentation\n"
        "nav:\n"
        "  - index.md\n"
        "  - Release Notes: release-notes.md\n"
        "  - Language Reference Guide: '!include ./language-reference-guide/mkdocs.yml'\n"
        "  - GitHub: https://github.com/Dyalog/documentation\n"
    ),
    "docs/index.md": "# Welcome\n\nStart here.\n",
    "docs/release-notes.md": "---\ntitle: notes\n---\n\n# Release Notes\n\nNew things.\n",
    "language-reference-guide/mkdocs.yml": (
        "site_name: Language Reference Guide\n"
        "nav:\n"
        "  - About: index.md\n"
        "  - Primitive Functions:\n"
        "    - Iota: symbols/iota.md\n"
        "    - Index Generator: primitive-functions/index-generator.md\n"
    ),
    "language-reference-guide/docs/index.md": "# Language Reference\n",
    "language-reference-guide/docs/symbols/iota.md": (
        '<h1 class="heading"><span class="name">Iota</span> <span class="command">⍳</span></h1>\n'
        '<div style="display: none;">\n  ⍳ iota\n</div>\n'
        "Monadic iota is <strong>Index Generator</strong>.\n"
    ),
    "language-reference-guide/docs/primitive-functions/index-generator.md": (
        "# Index Generator\n\nR←⍳Y\n"
    ),
    # Not in any nav
    "language-reference-guide/docs/symbols/rho.md": "# Rho\n\nShape or reshape.\n",
}


@pytest.fixture()
def monorepo(make_tree) -> Path:
    return make_tree(MONOREPO_FILES)


@pytest.fixture()
def fts5():
    """Skip when the interpreter's SQLite lacks FTS5."""
    conn = sqlite3.connect(":memory:")
    try:
        conn.execute("CREATE VIRTUAL TABLE t USING fts5(x)")
    except sqlite3.OperationalError:
        pytest.skip("SQLite built without FTS5")
    finally:
        conn.close()
