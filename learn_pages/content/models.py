"""Typed dataclasses describing sections, lessons, and challenges."""

from __future__ import annotations

import dataclasses as dc
import typing as typ

from learn_pages._constants import DEFAULT_STATUS, DRAFT_STATUS, PATH_KEY_TEMPLATE


class ContentError(Exception):
    """Base class for problems with authored lesson content."""


class ValidationError(ContentError, ValueError):
    """Raised when a manifest is malformed and no graph can be built."""


class NotFoundError(ContentError, LookupError):
    """Raised when a section or lesson path is not part of the graph."""

    def __init__(self, section: str, lesson: str | None = None) -> None:
        self.section = section
        self.lesson = lesson
        if lesson is None:
            msg = f"Unknown section '{section}'."
        else:
            msg = f"Unknown lesson '{lesson}' in section '{section}'."
        super().__init__(msg)


@dc.dataclass(frozen=True, slots=True)
class MultipleChoiceChallenge:
    """Question answered by picking one or more of the listed options."""

    prompt: str
    options: tuple[str, ...]
    correct: frozenset[int]
    challenge_type: typ.ClassVar[str] = "multiple-choice"


@dc.dataclass(frozen=True, slots=True)
class FreeFormChallenge:
    """Question answered in the learner's own words."""

    prompt: str
    reference_answer: str | None = None
    challenge_type: typ.ClassVar[str] = "freeform"


Challenge = MultipleChoiceChallenge | FreeFormChallenge


@dc.dataclass(frozen=True, slots=True)
class Lesson:
    """A single lesson as authored in the manifest.

    Attributes
    ----------
    section : str
        Slug of the owning section.
    slug : str
        Identifier unique within the section; also the document file stem.
    title : str
        Display title.
    description : str
        Short summary used for page metadata and section cards.
    video_url : str or None
        Optional video that accompanies the lesson.
    challenges : tuple[Challenge, ...]
        Challenges in authoring order.
    status : str
        Publication status such as ``"published"`` or ``"draft"``.
    """

    section: str
    slug: str
    title: str
    description: str = ""
    video_url: str | None = None
    challenges: tuple[Challenge, ...] = ()
    status: str = DEFAULT_STATUS

    @property
    def path(self) -> str:
        """Return the canonical ``section/slug`` path key."""
        return PATH_KEY_TEMPLATE.format(section=self.section, lesson=self.slug)

    @property
    def is_draft(self) -> bool:
        return self.status == DRAFT_STATUS


@dc.dataclass(frozen=True, slots=True)
class Section:
    """A titled, ordered group of lessons."""

    slug: str
    title: str
    lessons: tuple[Lesson, ...]

    def lesson_slugs(self) -> tuple[str, ...]:
        """Return the lesson slugs in authoring order."""
        return tuple(lesson.slug for lesson in self.lessons)


__all__ = [
    "Challenge",
    "ContentError",
    "FreeFormChallenge",
    "Lesson",
    "MultipleChoiceChallenge",
    "NotFoundError",
    "Section",
    "ValidationError",
]
