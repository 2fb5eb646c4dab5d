r"""Read lesson documents and split off their YAML front matter.

Example
-------
>>> from learn_pages.documents import split_front_matter
>>> meta, body = split_front_matter("---\ntitle: Intro\n---\n## Start\n")
>>> meta["title"], body
('Intro', '## Start\n')
"""

from __future__ import annotations

import dataclasses as dc
import io
import typing as typ

from ruamel.yaml import YAML

if typ.TYPE_CHECKING:
    from pathlib import Path

FRONT_MATTER_DELIMITER = "---"


@dc.dataclass(frozen=True, slots=True)
class LessonDocument:
    """Markdown body of a lesson together with its front matter."""

    path: Path
    front_matter: dict[str, typ.Any]
    body: str


def split_front_matter(text: str) -> tuple[dict[str, typ.Any], str]:
    """Return ``(front_matter, body)`` for a Markdown document.

    Documents without a leading ``---`` block, or whose block is never
    closed, return an empty mapping and the text unchanged.

    Raises
    ------
    TypeError
        If the front matter parses to something other than a mapping.
    YAMLError
        If the front matter is not valid YAML.
    """
    lines = text.splitlines(keepends=True)
    if not lines or lines[0].strip() != FRONT_MATTER_DELIMITER:
        return {}, text
    for idx, line in enumerate(lines[1:], start=1):
        if line.strip() == FRONT_MATTER_DELIMITER:
            raw = "".join(lines[1:idx])
            body = "".join(lines[idx + 1 :])
            break
    else:
        return {}, text

    loader = YAML(typ="safe")
    loader.version = (1, 2)
    loaded = loader.load(io.StringIO(raw)) or {}
    if not isinstance(loaded, dict):
        msg = "Front matter must be a YAML mapping."
        raise TypeError(msg)
    return dict(loaded), body


def read_lesson_document(path: Path) -> LessonDocument:
    """Read the lesson document stored at ``path``."""
    front_matter, body = split_front_matter(path.read_text(encoding="utf-8"))
    return LessonDocument(path=path, front_matter=front_matter, body=body)


__all__ = ["LessonDocument", "read_lesson_document", "split_front_matter"]
