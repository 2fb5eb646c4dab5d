"""Load and query the section → lesson → challenge content graph.

This subpackage parses the authored lesson manifest (``lessons.yaml``),
validates it, and produces an immutable :class:`ContentGraph` that answers
ordering and lookup questions for the site generator, the navigation
resolver, and the CLI. The primary entry points are :func:`load_manifest`
for files and :func:`load_content_graph` for already-parsed mappings.

Examples
--------
>>> from pathlib import Path
>>> from learn_pages.content import load_manifest
>>> graph = load_manifest(Path("content/lessons.yaml"))  # doctest: +SKIP
>>> graph.next_lesson("auth", "login").slug  # doctest: +SKIP
'logout'
"""

from .graph import ContentGraph, LessonPaths
from .loader import load_content_graph, load_manifest
from .models import (
    Challenge,
    ContentError,
    FreeFormChallenge,
    Lesson,
    MultipleChoiceChallenge,
    NotFoundError,
    Section,
    ValidationError,
)

__all__ = [
    "Challenge",
    "ContentError",
    "ContentGraph",
    "FreeFormChallenge",
    "Lesson",
    "LessonPaths",
    "MultipleChoiceChallenge",
    "NotFoundError",
    "Section",
    "ValidationError",
    "load_content_graph",
    "load_manifest",
]
