r"""Derive a nested table of contents from a lesson's Markdown headings.

The outline powers the "On this page" sidebar of every lesson. Heading levels
and anchors are read from the same Markdown conversion that
:class:`~learn_pages.renderer.LessonRenderer` uses to write heading ``id``
attributes, so every generated link resolves to a rendered heading. That
covers ATX and setext headings, headings inside block quotes and list items,
and headings whose text carries inline markup, HTML, or entities.

Example
-------
>>> from learn_pages.toc import extract_toc
>>> forest = extract_toc("# Title\n## Setup\n### Install\n## Usage\n")
>>> [node.text for node in forest]
['Setup', 'Usage']
>>> forest[0].children[0].anchor
'install'
"""

from __future__ import annotations

import dataclasses as dc
import typing as typ

from .renderer import LessonRenderer

if typ.TYPE_CHECKING:
    import collections.abc as cabc

FRONT_MATTER_DELIMITER = "---"


@dc.dataclass(frozen=True, slots=True)
class HeadingNode:
    """One heading in a lesson outline.

    Attributes
    ----------
    level : int
        Markdown heading level, between 2 and 6.
    anchor : str
        Fragment identifier matching the rendered heading's ``id``.
    text : str
        Heading text as a reader sees it, without markup.
    children : tuple[HeadingNode, ...]
        Deeper headings that follow this one before the next heading of the
        same or a shallower level.
    """

    level: int
    anchor: str
    text: str
    children: tuple[HeadingNode, ...] = ()


@dc.dataclass(slots=True)
class _OpenHeading:
    level: int
    anchor: str
    text: str
    children: list[_OpenHeading] = dc.field(default_factory=list)

    def freeze(self) -> HeadingNode:
        return HeadingNode(
            level=self.level,
            anchor=self.anchor,
            text=self.text,
            children=tuple(child.freeze() for child in self.children),
        )


def extract_toc(
    document_text: str, renderer: LessonRenderer | None = None
) -> list[HeadingNode]:
    """Return the ordered heading forest for ``document_text``.

    Parameters
    ----------
    document_text : str
        Raw Markdown for one lesson, optionally starting with YAML front
        matter.
    renderer : LessonRenderer, optional
        Renderer whose heading ids the anchors must match. A default
        renderer is used when omitted.

    Returns
    -------
    list[HeadingNode]
        Root headings in document order. Level-one headings never appear in
        the outline; a level-one heading closes every open branch so later
        headings start new roots. Returns an empty list when the document has
        no headings of level two or deeper.

    Notes
    -----
    Nesting depends on heading levels only. A heading nests under the nearest
    preceding heading with a smaller level, so a jump from ``##`` straight to
    ``####`` still nests the deeper heading under the ``##`` one. Level-one
    headings still count when repeated anchors are numbered, exactly as they
    do in the rendered page.
    """
    renderer = renderer or LessonRenderer()
    roots: list[_OpenHeading] = []
    stack: list[_OpenHeading] = []
    for level, anchor, text in renderer.headings(_strip_front_matter(document_text)):
        if level == 1:
            stack.clear()
            continue
        node = _OpenHeading(level=level, anchor=anchor, text=text)
        while stack and stack[-1].level >= level:
            stack.pop()
        siblings = stack[-1].children if stack else roots
        siblings.append(node)
        stack.append(node)
    return [root.freeze() for root in roots]


def flatten_toc(
    nodes: cabc.Iterable[HeadingNode], depth: int = 0
) -> cabc.Iterator[tuple[int, HeadingNode]]:
    """Yield ``(depth, node)`` pairs in document order."""
    for node in nodes:
        yield depth, node
        yield from flatten_toc(node.children, depth + 1)


def _strip_front_matter(text: str) -> str:
    """Drop a leading ``---`` delimited YAML block, if present."""
    lines = text.splitlines()
    if not lines or lines[0].strip() != FRONT_MATTER_DELIMITER:
        return text
    for idx, line in enumerate(lines[1:], start=1):
        if line.strip() == FRONT_MATTER_DELIMITER:
            return "\n".join(lines[idx + 1 :])
    return text


__all__ = ["HeadingNode", "extract_toc", "flatten_toc"]
