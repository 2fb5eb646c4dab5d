"""Answer navigation and completion questions for lesson pages.

:class:`NavigationResolver` holds no state of its own. It asks the
:class:`~learn_pages.content.ContentGraph` for ordering and the
:class:`~learn_pages.progress.ProgressStore` for completion, and is used both
by the static site generator and by the ``learn`` CLI.

Example
-------
>>> from learn_pages.content import load_content_graph
>>> from learn_pages.navigation import END_OF_SECTION, NavigationResolver
>>> from learn_pages.progress import ProgressStore
>>> graph = load_content_graph({"auth": {"title": "Auth", "lessons": [
...     {"slug": "login", "title": "Log in"}, {"slug": "sso", "title": "SSO"}]}})
>>> store = ProgressStore()
>>> _ = store.initialize()
>>> resolver = NavigationResolver(graph, store)
>>> resolver.resolve_next("auth", "sso") is END_OF_SECTION
True
>>> _ = store.mark_lesson_complete("auth/login")
>>> resolver.completion_badge("auth")
CompletionBadge(completed=1, total=2)
"""

from __future__ import annotations

import dataclasses as dc
import enum
import typing as typ

from ._constants import PATH_KEY_SEPARATOR, PATH_KEY_TEMPLATE

if typ.TYPE_CHECKING:
    from .content import ContentGraph, Lesson
    from .progress import ProgressStore


class _EndOfSection(enum.Enum):
    END_OF_SECTION = "end-of-section"

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "END_OF_SECTION"


END_OF_SECTION: typ.Final = _EndOfSection.END_OF_SECTION
"""Returned instead of a lesson when the section has nothing further."""

NextLesson = typ.Union["Lesson", typ.Literal[_EndOfSection.END_OF_SECTION]]


def lesson_path_key(section_slug: str, lesson_slug: str) -> str:
    """Return the canonical ``section/slug`` progress key."""
    return PATH_KEY_TEMPLATE.format(section=section_slug, lesson=lesson_slug)


def split_path_key(path_key: str) -> tuple[str, str]:
    """Split a ``section/slug`` key into its parts.

    Raises
    ------
    ValueError
        If ``path_key`` does not contain exactly one separator with text on
        both sides.
    """
    section, sep, lesson = path_key.partition(PATH_KEY_SEPARATOR)
    if not sep or not section or not lesson or PATH_KEY_SEPARATOR in lesson:
        msg = f"'{path_key}' is not a section/lesson path."
        raise ValueError(msg)
    return section, lesson


@dc.dataclass(frozen=True, slots=True)
class CompletionBadge:
    """Completed and total lesson counts for one section."""

    completed: int
    total: int

    @property
    def fraction(self) -> float:
        return self.completed / self.total

    @property
    def percent(self) -> int:
        """Return the completion rounded down to a whole percentage."""
        return (self.completed * 100) // self.total

    @property
    def is_complete(self) -> bool:
        return self.completed == self.total

    def __str__(self) -> str:
        return f"{self.completed}/{self.total}"


class NavigationResolver:
    """Compose content ordering with learner progress."""

    def __init__(self, graph: ContentGraph, store: ProgressStore) -> None:
        self.graph = graph
        self.store = store

    def resolve_next(self, section_slug: str, lesson_slug: str) -> NextLesson:
        """Return the following lesson or :data:`END_OF_SECTION`.

        Raises
        ------
        NotFoundError
            If the section or lesson is unknown.
        """
        following = self.graph.next_lesson(section_slug, lesson_slug)
        return END_OF_SECTION if following is None else following

    def is_completed(self, section_slug: str, lesson_slug: str) -> bool:
        return self.store.is_lesson_complete(lesson_path_key(section_slug, lesson_slug))

    def is_section_complete(self, section_slug: str) -> bool:
        return self.store.is_section_complete(
            section_slug, self.graph.lesson_paths(section_slug)
        )

    def completion_badge(self, section_slug: str) -> CompletionBadge:
        """Return how many lessons of ``section_slug`` are complete.

        Raises
        ------
        NotFoundError
            If the section is unknown.
        """
        paths = self.graph.lesson_paths(section_slug)
        completed = sum(1 for path in paths if self.store.is_lesson_complete(path))
        return CompletionBadge(completed=completed, total=len(paths))

    def next_incomplete(self, section_slug: str) -> NextLesson:
        """Return the first lesson of the section not yet completed."""
        for lesson in self.graph.lessons_of(section_slug):
            if not self.store.is_lesson_complete(lesson.path):
                return lesson
        return END_OF_SECTION


__all__ = [
    "END_OF_SECTION",
    "CompletionBadge",
    "NavigationResolver",
    "NextLesson",
    "lesson_path_key",
    "split_path_key",
]
