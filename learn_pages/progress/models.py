"""Immutable progress snapshots, store states, and progress errors."""

from __future__ import annotations

import dataclasses as dc
import enum
import types
import typing as typ


class ProgressError(RuntimeError):
    """Base class for progress tracking failures."""


class PersistenceError(ProgressError):
    """Raised when the progress record cannot be loaded or saved."""


class ProgressState(enum.Enum):
    """Lifecycle of a :class:`~learn_pages.progress.ProgressStore`."""

    UNINITIALIZED = "uninitialized"
    READY = "ready"


@dc.dataclass(frozen=True, slots=True)
class ProgressRecord:
    """Completion facts for one learner, keyed by ``section/slug`` path keys.

    Attributes
    ----------
    lessons : frozenset[str]
        Path keys of completed lessons.
    challenges : Mapping[str, frozenset[int]]
        Indices of completed challenges per lesson path key. Lessons without
        completed challenges are absent.
    """

    lessons: frozenset[str] = frozenset()
    challenges: typ.Mapping[str, frozenset[int]] = dc.field(
        default_factory=lambda: types.MappingProxyType({})
    )

    def __post_init__(self) -> None:
        object.__setattr__(self, "lessons", frozenset(self.lessons))
        frozen = {
            path: frozenset(indices)
            for path, indices in self.challenges.items()
            if indices
        }
        object.__setattr__(self, "challenges", types.MappingProxyType(frozen))

    def is_lesson_complete(self, path: str) -> bool:
        return path in self.lessons

    def completed_challenges(self, path: str) -> frozenset[int]:
        """Return the completed challenge indices recorded for ``path``."""
        return self.challenges.get(path, frozenset())

    def with_lesson(self, path: str) -> ProgressRecord:
        """Return a copy with ``path`` marked complete."""
        if path in self.lessons:
            return self
        return dc.replace(self, lessons=self.lessons | {path})

    def with_challenge(self, path: str, index: int) -> ProgressRecord:
        """Return a copy with challenge ``index`` of ``path`` marked complete."""
        done = self.completed_challenges(path)
        if index in done:
            return self
        challenges = dict(self.challenges)
        challenges[path] = done | {index}
        return dc.replace(self, challenges=challenges)


__all__ = [
    "PersistenceError",
    "ProgressError",
    "ProgressRecord",
    "ProgressState",
]
