"""Load lesson manifests into a validated :class:`ContentGraph`."""

from __future__ import annotations

import typing as typ

from ruamel.yaml import YAML

from .graph import ContentGraph
from .helpers import _as_mapping, _build_lesson, _check_slug, _required_str
from .models import Section, ValidationError

if typ.TYPE_CHECKING:
    from pathlib import Path


def load_content_graph(manifest: typ.Mapping[str, typ.Any]) -> ContentGraph:
    """Build a content graph from an authored manifest mapping.

    Parameters
    ----------
    manifest : Mapping[str, Any]
        Mapping of section slug to ``{"title": ..., "lessons": [...]}``. Each
        lesson entry carries ``slug``, ``title``, and optionally
        ``description``, ``status``, ``video_url`` (or ``videoURL``), and
        ``challenges``. Section order follows the mapping's iteration order.

    Returns
    -------
    ContentGraph
        The fully validated graph.

    Raises
    ------
    ValidationError
        If the manifest is not a mapping, a section or lesson entry is
        malformed, a section has no lessons, or a lesson slug repeats within a
        section. No partial graph is produced.

    Examples
    --------
    >>> graph = load_content_graph(
    ...     {"intro": {"title": "Intro", "lessons": [{"slug": "a", "title": "A"}]}}
    ... )
    >>> graph.section_slugs()
    ('intro',)
    """
    root = _as_mapping(manifest, where="Manifest")
    sections: list[Section] = []
    for raw_slug, payload in root.items():
        slug = str(raw_slug).strip()
        where = f"Section '{slug}'"
        if not slug:
            msg = "Manifest contains a section with an empty slug."
            raise ValidationError(msg)
        _check_slug(slug, where=where)
        data = _as_mapping(payload, where=where)
        raw_lessons = data.get("lessons")
        if raw_lessons is None:
            raw_lessons = data.get("children") or []
        if not isinstance(raw_lessons, list | tuple):
            msg = f"{where} must list its lessons as a sequence."
            raise ValidationError(msg)
        lessons = tuple(
            _build_lesson(slug, entry, position=idx)
            for idx, entry in enumerate(raw_lessons, start=1)
        )
        sections.append(
            Section(
                slug=slug,
                title=_required_str(data, "title", where=where),
                lessons=lessons,
            )
        )
    return ContentGraph(sections)


def load_manifest(path: Path) -> ContentGraph:
    """Load a YAML or JSON manifest file and build its content graph.

    Raises
    ------
    FileNotFoundError
        If ``path`` does not exist.
    ValidationError
        If the manifest content is malformed.
    YAMLError
        If the file cannot be parsed.
    """
    if not path.exists():
        msg = f"Manifest file '{path}' not found."
        raise FileNotFoundError(msg)

    loader = YAML(typ="safe")
    loader.version = (1, 2)
    with path.open("r", encoding="utf-8") as handle:
        loaded = loader.load(handle)
    if loaded is None:
        msg = f"Manifest file '{path}' is empty."
        raise ValidationError(msg)
    return load_content_graph(loaded)


__all__ = ["load_content_graph", "load_manifest"]
