"""Shared fixtures for the learn_pages test suite.

The fixtures build a small lesson library (an ``auth`` section with three
lessons and a ``testing`` section whose last lesson is a draft) both as an
in-memory manifest and as an on-disk site tree with a ``learn.yaml`` build
config, so unit, generation, and CLI tests exercise the same content.
"""

from __future__ import annotations

import typing as typ

import pytest

from learn_pages.content import ContentGraph, load_content_graph
from learn_pages.progress import MemoryBackend, ProgressStore

if typ.TYPE_CHECKING:
    from pathlib import Path

LESSON_DOCUMENTS: dict[str, str] = {
    "auth/login": (
        "---\n"
        "author: Docs Team\n"
        "---\n"
        "# Logging in\n\n"
        "## Overview\n\n"
        "Logging in comes first.\n\n"
        "## Filling the form\n\n"
        "### Typing credentials\n\n"
        "```js\n"
        "# not a heading\n"
        'cy.get("[data-test=username]").type("katharina")\n'
        "```\n\n"
        "### Submitting\n\n"
        "Press the button.\n\n"
        "## Overview\n\n"
        "Repeated heading text.\n"
    ),
    "auth/logout": "# Logging out\n\n## Clearing the session\n\nVisit home.\n",
    "auth/sso": "# Single sign-on\n\n## Stubbing the provider\n\nReturn a token.\n",
    "testing/first-test": "# First test\n\n## Create a spec\n\n## Run it\n",
    "testing/fixtures": "# Fixtures\n\n## Loading data\n",
}


@pytest.fixture
def manifest() -> dict[str, typ.Any]:
    """Return a representative manifest mapping."""
    return {
        "auth": {
            "title": "Authentication",
            "lessons": [
                {
                    "slug": "login",
                    "title": "Logging in",
                    "description": "Drive the login form.",
                    "videoURL": "https://example.com/videos/login",
                    "challenges": [
                        {
                            "challengeType": "multiple-choice",
                            "question": "Which command types into an input?",
                            "answers": ["`cy.click()`", "`cy.type()`", "`cy.get()`"],
                            "correctAnswerIndex": 1,
                        }
                    ],
                },
                {"slug": "logout", "title": "Logging out"},
                {
                    "slug": "sso",
                    "title": "Single sign-on",
                    "challenges": [
                        {
                            "challengeType": "freeform",
                            "question": "Why stub the provider?",
                            "answer": "Cross-origin visits are slow.",
                        }
                    ],
                },
            ],
        },
        "testing": {
            "title": "Testing Basics",
            "lessons": [
                {"slug": "first-test", "title": "Writing your first test"},
                {"slug": "fixtures", "title": "Fixtures", "status": "draft"},
            ],
        },
    }


@pytest.fixture
def graph(manifest: dict[str, typ.Any]) -> ContentGraph:
    return load_content_graph(manifest)


@pytest.fixture
def backend() -> MemoryBackend:
    return MemoryBackend()


@pytest.fixture
def store(backend: MemoryBackend) -> ProgressStore:
    """Return a ready store backed by memory."""
    progress = ProgressStore(backend)
    progress.initialize()
    return progress


MANIFEST_YAML = """
auth:
  title: Authentication
  lessons:
    - slug: login
      title: Logging in
      description: Drive the login form.
      videoURL: https://example.com/videos/login
      challenges:
        - challengeType: multiple-choice
          question: Which command types into an input?
          answers: ["`cy.click()`", "`cy.type()`", "`cy.get()`"]
          correctAnswerIndex: 1
    - slug: logout
      title: Logging out
    - slug: sso
      title: Single sign-on
testing:
  title: Testing Basics
  lessons:
    - slug: first-test
      title: Writing your first test
    - slug: fixtures
      title: Fixtures
      status: draft
""".lstrip()


@pytest.fixture
def site_tree(tmp_path: Path) -> dict[str, Path]:
    """Write a manifest, lesson documents, and build config under ``tmp_path``.

    Returns
    -------
    dict[str, Path]
        Paths keyed by ``config``, ``manifest``, ``content``, ``output``, and
        ``progress``.
    """
    content = tmp_path / "content"
    for path_key, text in LESSON_DOCUMENTS.items():
        document = content / f"{path_key}.md"
        document.parent.mkdir(parents=True, exist_ok=True)
        document.write_text(text, encoding="utf-8")
    manifest_path = content / "lessons.yaml"
    manifest_path.write_text(MANIFEST_YAML, encoding="utf-8")

    config_dir = tmp_path / "config"
    config_dir.mkdir()
    config_path = config_dir / "learn.yaml"
    config_path.write_text(
        "defaults:\n"
        "  manifest: ../content/lessons.yaml\n"
        "  content_dir: ../content\n"
        "  output_dir: ../public\n"
        "  progress_file: ../state/progress.json\n"
        "  site_name: Test Academy\n",
        encoding="utf-8",
    )
    return {
        "config": config_path,
        "manifest": manifest_path,
        "content": content,
        "output": config_dir / ".." / "public",
        "progress": config_dir / ".." / "state" / "progress.json",
    }
