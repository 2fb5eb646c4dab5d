"""Record, persist, and observe learner progress.

The :class:`ProgressStore` owns the only mutable state in learn_pages. It is
constructed with a backend (:class:`JsonFileBackend` for the CLI,
:class:`MemoryBackend` for previews and tests), initialized once, and then
queried by every page or command that shows completion.

Examples
--------
>>> from pathlib import Path
>>> from learn_pages.progress import JsonFileBackend, ProgressStore
>>> store = ProgressStore(JsonFileBackend(Path("progress.json")))  # doctest: +SKIP
>>> store.initialize()  # doctest: +SKIP
>>> store.mark_lesson_complete("auth/login")  # doctest: +SKIP
True
"""

from .backends import STORAGE_VERSION, JsonFileBackend, MemoryBackend, ProgressBackend
from .models import PersistenceError, ProgressError, ProgressRecord, ProgressState
from .store import Listener, ProgressStore

__all__ = [
    "STORAGE_VERSION",
    "JsonFileBackend",
    "Listener",
    "MemoryBackend",
    "PersistenceError",
    "ProgressBackend",
    "ProgressError",
    "ProgressRecord",
    "ProgressState",
    "ProgressStore",
]
