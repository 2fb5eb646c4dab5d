"""Tests for lesson document reading and front matter splitting."""

from __future__ import annotations

import typing as typ

import pytest

from learn_pages.documents import read_lesson_document, split_front_matter

if typ.TYPE_CHECKING:
    from pathlib import Path


def test_front_matter_split_from_body() -> None:
    meta, body = split_front_matter("---\nauthor: Docs Team\ntags: [a, b]\n---\n# Title\n")
    assert meta == {"author": "Docs Team", "tags": ["a", "b"]}
    assert body == "# Title\n"


def test_document_without_front_matter_is_unchanged() -> None:
    text = "# Title\n\n---\n\nA rule above.\n"
    assert split_front_matter(text) == ({}, text)


def test_unclosed_front_matter_is_treated_as_body() -> None:
    text = "---\nauthor: nobody\n# Title\n"
    assert split_front_matter(text) == ({}, text)


def test_empty_front_matter_yields_empty_mapping() -> None:
    assert split_front_matter("---\n---\nBody\n") == ({}, "Body\n")


def test_non_mapping_front_matter_is_rejected() -> None:
    with pytest.raises(TypeError, match="mapping"):
        split_front_matter("---\n- one\n- two\n---\nBody\n")


def test_read_lesson_document(tmp_path: Path) -> None:
    path = tmp_path / "login.md"
    path.write_text("---\ntitle: Log in\n---\n## Steps\n", encoding="utf-8")
    document = read_lesson_document(path)
    assert document.path == path
    assert document.front_matter == {"title": "Log in"}
    assert document.body == "## Steps\n"
