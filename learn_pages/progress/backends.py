"""Persistence backends for the progress store.

A backend only has to expose ``load()`` and ``save(record)``; the store never
depends on where the record lives. :class:`JsonFileBackend` writes a small,
versioned JSON document with ``msgspec`` and replaces the file atomically so a
crash mid-write leaves the previous record intact.

Example
-------
>>> from learn_pages.progress import MemoryBackend, ProgressRecord
>>> backend = MemoryBackend()
>>> backend.load() is None
True
>>> backend.save(ProgressRecord(lessons=frozenset({"auth/login"})))
>>> sorted(backend.load().lessons)
['auth/login']
"""

from __future__ import annotations

import contextlib
import os
import tempfile
import typing as typ
from pathlib import Path

import msgspec
import msgspec.json as msgspec_json

from .models import PersistenceError, ProgressRecord

STORAGE_VERSION = 1


class ProgressBackend(typ.Protocol):
    """Storage used by :class:`~learn_pages.progress.ProgressStore`."""

    def load(self) -> ProgressRecord | None:
        """Return the stored record, or None when nothing has been saved."""
        ...

    def save(self, record: ProgressRecord) -> None:
        """Persist ``record`` durably before returning."""
        ...


class _StoredProgress(msgspec.Struct, kw_only=True):
    """On-disk layout of a progress record."""

    version: int = STORAGE_VERSION
    lessons: list[str] = []
    challenges: dict[str, list[int]] = {}


class MemoryBackend:
    """Keep the record in memory; useful for previews and tests."""

    def __init__(self, record: ProgressRecord | None = None) -> None:
        self.record = record
        self.save_count = 0

    def load(self) -> ProgressRecord | None:
        return self.record

    def save(self, record: ProgressRecord) -> None:
        self.record = record
        self.save_count += 1


class JsonFileBackend:
    """Store the record as JSON at ``path``."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def load(self) -> ProgressRecord | None:
        """Read the stored record.

        Returns
        -------
        ProgressRecord or None
            The decoded record, or ``None`` when the file does not exist yet.

        Raises
        ------
        PersistenceError
            If the file cannot be read, is not valid progress JSON, or was
            written by a newer storage version.
        """
        if not self.path.exists():
            return None
        try:
            stored = msgspec_json.decode(self.path.read_bytes(), type=_StoredProgress)
        except (OSError, msgspec.DecodeError) as exc:
            msg = f"Unable to read progress from '{self.path}': {exc}"
            raise PersistenceError(msg) from exc
        if stored.version > STORAGE_VERSION:
            msg = (
                f"Progress file '{self.path}' uses storage version {stored.version}, "
                f"newer than supported {STORAGE_VERSION}."
            )
            raise PersistenceError(msg)
        return ProgressRecord(
            lessons=frozenset(stored.lessons),
            challenges={path: frozenset(idx) for path, idx in stored.challenges.items()},
        )

    def save(self, record: ProgressRecord) -> None:
        """Atomically replace the stored record with ``record``.

        Raises
        ------
        PersistenceError
            If the directory cannot be created or the file cannot be written.
        """
        payload = msgspec_json.format(msgspec_json.encode(_to_stored(record)), indent=2)
        tmp_name: str | None = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                mode="wb",
                dir=self.path.parent,
                prefix=f".{self.path.name}-",
                suffix=".tmp",
                delete=False,
            ) as handle:
                tmp_name = handle.name
                handle.write(payload)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_name, self.path)
        except OSError as exc:
            if tmp_name is not None:
                with contextlib.suppress(OSError):
                    Path(tmp_name).unlink()
            msg = f"Unable to save progress to '{self.path}': {exc}"
            raise PersistenceError(msg) from exc


def _to_stored(record: ProgressRecord) -> _StoredProgress:
    """Return the wire form of ``record`` with deterministic ordering."""
    return _StoredProgress(
        lessons=sorted(record.lessons),
        challenges={
            path: sorted(indices) for path, indices in sorted(record.challenges.items())
        },
    )


__all__ = ["STORAGE_VERSION", "JsonFileBackend", "MemoryBackend", "ProgressBackend"]
