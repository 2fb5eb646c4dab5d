"""Ordered, validated section → lesson graph with constant-time lookups.

A :class:`ContentGraph` is built once from authored sections and is read-only
afterwards, so one instance can be shared freely between the static site
generator, the navigation resolver, and the CLI.

Example
-------
>>> from learn_pages.content import load_content_graph
>>> graph = load_content_graph(
...     {"auth": {"title": "Auth", "lessons": [
...         {"slug": "login", "title": "Log in"},
...         {"slug": "logout", "title": "Log out"},
...     ]}}
... )
>>> graph.next_lesson("auth", "login").slug
'logout'
>>> graph.next_lesson("auth", "logout") is None
True
>>> list(graph.all_lesson_paths())
[('auth', 'login'), ('auth', 'logout')]
"""

from __future__ import annotations

import logging
import typing as typ

from learn_pages._constants import PATH_KEY_SEPARATOR

from .models import Lesson, NotFoundError, Section, ValidationError

if typ.TYPE_CHECKING:
    import collections.abc as cabc

logger = logging.getLogger(__name__)


class LessonPaths:
    """Restartable view over every ``(section, lesson)`` pair of a graph.

    Each call to :func:`iter` walks the sections afresh, so static-path
    generation can traverse the view as many times as it needs.
    """

    __slots__ = ("_sections",)

    def __init__(self, sections: tuple[Section, ...]) -> None:
        self._sections = sections

    def __iter__(self) -> cabc.Iterator[tuple[str, str]]:
        for section in self._sections:
            for lesson in section.lessons:
                yield section.slug, lesson.slug

    def __len__(self) -> int:
        return sum(len(section.lessons) for section in self._sections)

    def __repr__(self) -> str:
        return f"LessonPaths(count={len(self)})"


class ContentGraph:
    """Sections and their lessons in authoring order."""

    def __init__(self, sections: cabc.Iterable[Section]) -> None:
        """Validate ``sections`` and precompute the lookup tables.

        Parameters
        ----------
        sections : Iterable[Section]
            Sections in the order they should be presented.

        Raises
        ------
        ValidationError
            If a section slug repeats, a section has no lessons, a lesson slug
            repeats within a section, or a lesson claims a different section.
        """
        ordered = tuple(sections)
        by_slug: dict[str, Section] = {}
        positions: dict[tuple[str, str], int] = {}
        for section in ordered:
            if section.slug in by_slug:
                msg = f"Section '{section.slug}' is declared more than once."
                raise ValidationError(msg)
            if not section.lessons:
                msg = f"Section '{section.slug}' declares no lessons."
                raise ValidationError(msg)
            for index, lesson in enumerate(section.lessons):
                if lesson.section != section.slug:
                    msg = (
                        f"Lesson '{lesson.slug}' belongs to '{lesson.section}' "
                        f"but is listed under '{section.slug}'."
                    )
                    raise ValidationError(msg)
                key = (section.slug, lesson.slug)
                if key in positions:
                    msg = (
                        f"Lesson slug '{lesson.slug}' appears more than once in "
                        f"section '{section.slug}'."
                    )
                    raise ValidationError(msg)
                positions[key] = index
            by_slug[section.slug] = section
        self._sections = ordered
        self._by_slug = by_slug
        self._positions = positions
        logger.debug(
            "Built content graph with %d sections and %d lessons",
            len(ordered),
            len(positions),
        )

    def __len__(self) -> int:
        return len(self._positions)

    def __contains__(self, path: object) -> bool:
        return path in self._positions

    def __repr__(self) -> str:
        return f"ContentGraph(sections={list(self._by_slug)!r})"

    def section_slugs(self) -> tuple[str, ...]:
        """Return section identifiers in manifest order."""
        return tuple(section.slug for section in self._sections)

    def sections(self) -> tuple[Section, ...]:
        return self._sections

    def section(self, section_slug: str) -> Section:
        """Return the section named ``section_slug``.

        Raises
        ------
        NotFoundError
            If the section is not part of the graph.
        """
        try:
            return self._by_slug[section_slug]
        except KeyError as exc:
            raise NotFoundError(section_slug) from exc

    def lessons_of(self, section_slug: str) -> tuple[Lesson, ...]:
        """Return the lessons of ``section_slug`` in authoring order."""
        return self.section(section_slug).lessons

    def lesson_paths(self, section_slug: str) -> tuple[str, ...]:
        """Return the ``section/slug`` path keys of one section, in order."""
        return tuple(lesson.path for lesson in self.lessons_of(section_slug))

    def lesson_by_path(self, section_slug: str, lesson_slug: str) -> Lesson:
        """Return the lesson at ``section_slug/lesson_slug``.

        Raises
        ------
        NotFoundError
            If either the section or the lesson is unknown.
        """
        section = self.section(section_slug)
        return section.lessons[self._index_of(section_slug, lesson_slug)]

    def lesson_by_key(self, path_key: str) -> Lesson:
        """Return the lesson addressed by a ``section/slug`` path key."""
        section_slug, sep, lesson_slug = path_key.partition(PATH_KEY_SEPARATOR)
        if not sep:
            raise NotFoundError(section_slug, "")
        return self.lesson_by_path(section_slug, lesson_slug)

    def next_lesson(self, section_slug: str, lesson_slug: str) -> Lesson | None:
        """Return the lesson after ``lesson_slug``, or None at the section end.

        Navigation never crosses into the following section; the last lesson
        of a section has no successor.
        """
        lessons = self.lessons_of(section_slug)
        index = self._index_of(section_slug, lesson_slug) + 1
        return lessons[index] if index < len(lessons) else None

    def previous_lesson(self, section_slug: str, lesson_slug: str) -> Lesson | None:
        """Return the lesson before ``lesson_slug``, or None for the first one."""
        lessons = self.lessons_of(section_slug)
        index = self._index_of(section_slug, lesson_slug) - 1
        return lessons[index] if index >= 0 else None

    def all_lesson_paths(self) -> LessonPaths:
        """Return every ``(section, lesson)`` pair in section-then-lesson order."""
        return LessonPaths(self._sections)

    def _index_of(self, section_slug: str, lesson_slug: str) -> int:
        try:
            return self._positions[(section_slug, lesson_slug)]
        except KeyError as exc:
            if section_slug not in self._by_slug:
                raise NotFoundError(section_slug) from exc
            raise NotFoundError(section_slug, lesson_slug) from exc


__all__ = ["ContentGraph", "LessonPaths"]
