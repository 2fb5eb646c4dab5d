"""Persisted, observable record of which lessons a learner has completed.

:class:`ProgressStore` is a small state machine. It starts
``UNINITIALIZED``; :meth:`ProgressStore.initialize` loads the record from its
backend (or starts empty) and moves it to ``READY``. Mutations requested
before that are queued and applied, in order, during initialization.

Every successful mutation is saved through the backend before the call
returns and then announced to subscribers with the full record snapshot. When
the backend fails, the in-memory record keeps its previous value, nobody is
notified, and :class:`~learn_pages.progress.PersistenceError` reaches the
caller.

The store serializes its own writers with a re-entrant lock. Several
processes sharing one progress file are not coordinated.

Example
-------
>>> from learn_pages.progress import MemoryBackend, ProgressStore
>>> store = ProgressStore(MemoryBackend())
>>> store.initialize().lessons
frozenset()
>>> seen = []
>>> unsubscribe = store.subscribe(lambda record: seen.append(sorted(record.lessons)))
>>> store.mark_lesson_complete("auth/login")
True
>>> store.mark_lesson_complete("auth/login")
False
>>> seen
[['auth/login']]
"""

from __future__ import annotations

import itertools
import logging
import threading
import typing as typ

from .backends import MemoryBackend
from .models import PersistenceError, ProgressRecord, ProgressState

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from .backends import ProgressBackend

logger = logging.getLogger(__name__)

Listener = typ.Callable[[ProgressRecord], None]
Mutation = typ.Callable[[ProgressRecord], ProgressRecord]


class ProgressStore:
    """Track lesson and challenge completion for one learner."""

    def __init__(self, backend: ProgressBackend | None = None) -> None:
        """Create an uninitialized store.

        Parameters
        ----------
        backend : ProgressBackend, optional
            Where the record is loaded from and saved to. Defaults to a
            :class:`~learn_pages.progress.MemoryBackend`.
        """
        self._backend: ProgressBackend = backend or MemoryBackend()
        self._lock = threading.RLock()
        self._state = ProgressState.UNINITIALIZED
        self._record = ProgressRecord()
        self._pending: list[tuple[Mutation, bool]] = []
        self._listeners: dict[int, Listener] = {}
        self._tokens = itertools.count()

    @property
    def state(self) -> ProgressState:
        return self._state

    @property
    def is_ready(self) -> bool:
        return self._state is ProgressState.READY

    def initialize(self) -> ProgressRecord:
        """Load the persisted record and move to ``READY``.

        Calling this on a ready store does nothing and returns the current
        record.

        Returns
        -------
        ProgressRecord
            The record after any queued mutations were applied.

        Raises
        ------
        PersistenceError
            If the backend cannot load the record (the store stays
            uninitialized) or the queued mutations cannot be saved (the store
            is ready with the loaded record and the queue is discarded).
        """
        with self._lock:
            if self.is_ready:
                return self._record
            loaded = self._guard(self._backend.load, "load")
            self._record = loaded if loaded is not None else ProgressRecord()
            self._state = ProgressState.READY
            pending, self._pending = self._pending, []
            logger.debug(
                "Progress store ready with %d completed lessons, %d queued mutations",
                len(self._record.lessons),
                len(pending),
            )
            if pending:
                self._apply_batch(pending)
            return self._record

    def snapshot(self) -> ProgressRecord:
        """Return the current record."""
        with self._lock:
            return self._record

    def mark_lesson_complete(self, path: str) -> bool:
        """Record ``path`` as complete.

        Returns
        -------
        bool
            True when the record changed and was saved; False when the lesson
            was already complete or the store is not ready yet (the mark is
            then queued).
        """
        return self._mutate(lambda record: record.with_lesson(path))

    def mark_challenge_complete(self, path: str, index: int) -> bool:
        """Record challenge ``index`` of lesson ``path`` as complete."""
        return self._mutate(lambda record: record.with_challenge(path, index))

    def reset(self) -> bool:
        """Clear every completion fact and save the empty record."""
        return self._mutate(lambda _record: ProgressRecord(), force=True)

    def is_lesson_complete(self, path: str) -> bool:
        """Return whether ``path`` is complete; unknown paths are incomplete."""
        with self._lock:
            return self._record.is_lesson_complete(path)

    def is_challenge_complete(self, path: str, index: int) -> bool:
        with self._lock:
            return index in self._record.completed_challenges(path)

    def is_section_complete(
        self, section_slug: str, lesson_paths: cabc.Iterable[str]
    ) -> bool:
        """Return True when every path in ``lesson_paths`` is complete.

        An empty ``lesson_paths`` is vacuously complete. ``section_slug`` only
        labels the query in debug logs.
        """
        with self._lock:
            record = self._record
        complete = all(record.is_lesson_complete(path) for path in lesson_paths)
        logger.debug("Section %s complete: %s", section_slug, complete)
        return complete

    def subscribe(self, listener: Listener) -> cabc.Callable[[], None]:
        """Call ``listener`` with the record after every successful mutation.

        Listeners run in subscription order. An exception raised by one
        listener is logged and the remaining listeners are still called; the
        mutation itself has already been saved by then.

        Returns
        -------
        Callable[[], None]
            Function that removes the listener; calling it again is harmless.
        """
        with self._lock:
            token = next(self._tokens)
            self._listeners[token] = listener

        def unsubscribe() -> None:
            with self._lock:
                self._listeners.pop(token, None)

        return unsubscribe

    def _mutate(self, mutation: Mutation, *, force: bool = False) -> bool:
        with self._lock:
            if not self.is_ready:
                logger.warning("Progress store not ready; queueing mutation")
                self._pending.append((mutation, force))
                return False
            updated = mutation(self._record)
            if updated == self._record and not force:
                return False
            self._guard(lambda: self._backend.save(updated), "save")
            self._record = updated
            self._notify(updated)
            return True

    def _apply_batch(self, pending: list[tuple[Mutation, bool]]) -> None:
        """Apply queued mutations, save once, then notify per change."""
        record = self._record
        snapshots: list[ProgressRecord] = []
        for mutation, force in pending:
            updated = mutation(record)
            if updated != record or force:
                snapshots.append(updated)
            record = updated
        if not snapshots:
            return
        self._guard(lambda: self._backend.save(record), "save")
        self._record = record
        for snapshot in snapshots:
            self._notify(snapshot)

    def _notify(self, record: ProgressRecord) -> None:
        """Call every listener; one failing listener does not stop the rest."""
        for listener in list(self._listeners.values()):
            try:
                listener(record)
            except Exception:
                logger.exception("Progress listener %r failed", listener)

    @staticmethod
    def _guard(
        operation: cabc.Callable[[], ProgressRecord | None], action: str
    ) -> ProgressRecord | None:
        """Run a backend call, wrapping OS-level failures in PersistenceError."""
        try:
            return operation()
        except OSError as exc:
            msg = f"Progress backend failed to {action}: {exc}"
            raise PersistenceError(msg) from exc


__all__ = ["Listener", "ProgressStore"]
