"""Generate the static lesson site from a content graph.

:class:`LessonSiteGenerator` walks :meth:`ContentGraph.all_lesson_paths`,
reads each lesson document from ``<content_dir>/<section>/<lesson><suffix>``,
renders it with :class:`~learn_pages.renderer.LessonRenderer`, and writes one
HTML page per lesson, one index per section, and a site index listing every
section. Navigation links and completion badges come from a
:class:`~learn_pages.navigation.NavigationResolver`.

Example
-------
>>> from pathlib import Path
>>> from learn_pages.content import load_manifest
>>> from learn_pages.generator import LessonSiteGenerator
>>> graph = load_manifest(Path("content/lessons.yaml"))  # doctest: +SKIP
>>> generator = LessonSiteGenerator(
...     graph, content_dir=Path("content"), output_dir=Path("public")
... )  # doctest: +SKIP
>>> generator.run()  # doctest: +SKIP
[PosixPath('public/auth/login.html'), ...]
"""

from __future__ import annotations

import datetime as dt
import logging
import typing as typ
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from ._constants import DEFAULT_DOCUMENT_SUFFIX, DEFAULT_PYGMENTS_STYLE
from .documents import read_lesson_document
from .navigation import END_OF_SECTION, NavigationResolver
from .progress import ProgressStore
from .renderer import LessonRenderer
from .toc import extract_toc, flatten_toc

if typ.TYPE_CHECKING:
    from .content import ContentGraph, Lesson, Section

logger = logging.getLogger(__name__)

INDEX_FILENAME = "index.html"


class LessonSiteGenerator:
    """Render every lesson and section of a content graph to HTML."""

    def __init__(
        self,
        graph: ContentGraph,
        *,
        content_dir: Path,
        output_dir: Path,
        pygments_style: str = DEFAULT_PYGMENTS_STYLE,
        site_name: str = "Learn",
        document_suffix: str = DEFAULT_DOCUMENT_SUFFIX,
        include_drafts: bool = False,
        store: ProgressStore | None = None,
        templates_dir: Path | None = None,
    ) -> None:
        """Initialize the generator.

        Parameters
        ----------
        graph : ContentGraph
            Sections and lessons to render.
        content_dir : Path
            Root directory of the lesson documents.
        output_dir : Path
            Directory that receives the generated HTML.
        pygments_style : str, optional
            Syntax highlighting style for code blocks.
        site_name : str, optional
            Name shown in page titles and headers.
        document_suffix : str, optional
            Extension of lesson documents; defaults to ``".md"``.
        include_drafts : bool, optional
            Render lessons whose status is ``"draft"``. Drafts are skipped by
            default and never linked from published pages.
        store : ProgressStore, optional
            Progress used for completion badges. Defaults to an empty
            in-memory store, which renders every lesson as incomplete.
        templates_dir : Path, optional
            Directory containing Jinja templates; defaults to the package
            templates.
        """
        self.graph = graph
        self.content_dir = content_dir
        self.output_dir = output_dir
        self.site_name = site_name
        self.document_suffix = document_suffix
        self.include_drafts = include_drafts
        if store is None:
            store = ProgressStore()
        store.initialize()
        self.resolver = NavigationResolver(graph, store)
        self.renderer = LessonRenderer(pygments_style)
        self.templates_dir = templates_dir or Path(__file__).parent / "templates"
        self.env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            autoescape=select_autoescape(["html", "xml"]),
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.env.filters["inline_markdown"] = self.renderer.inline

    def run(self) -> list[Path]:
        """Write the site index, section indexes, and lesson pages.

        Returns
        -------
        list[Path]
            Written files: the site index first, then for each section its
            index followed by its lessons in authoring order.

        Raises
        ------
        FileNotFoundError
            If a lesson's document is missing from ``content_dir``.
        """
        generated_at = dt.datetime.now(dt.UTC)
        written = [self._write_site_index(generated_at)]
        current_section: str | None = None
        for section_slug, lesson_slug in self.graph.all_lesson_paths():
            if section_slug != current_section:
                current_section = section_slug
                section = self.graph.section(section_slug)
                written.append(self._write_section_index(section, generated_at))
            lesson = self.graph.lesson_by_path(section_slug, lesson_slug)
            if not self._is_visible(lesson):
                logger.debug("Skipping draft lesson %s", lesson.path)
                continue
            written.append(self._write_lesson(lesson, generated_at))
        return written

    def lesson_output_path(self, lesson: Lesson) -> Path:
        return self.output_dir / lesson.section / f"{lesson.slug}.html"

    def document_path(self, lesson: Lesson) -> Path:
        """Return where the document for ``lesson`` is expected on disk."""
        return self.content_dir / lesson.section / f"{lesson.slug}{self.document_suffix}"

    def _is_visible(self, lesson: Lesson) -> bool:
        return self.include_drafts or not lesson.is_draft

    def _visible_lessons(self, section: Section) -> list[Lesson]:
        return [lesson for lesson in section.lessons if self._is_visible(lesson)]

    def _next_up(self, section: Section) -> Lesson | None:
        """Return the first rendered lesson of ``section`` not yet completed."""
        for lesson in self._visible_lessons(section):
            if not self.resolver.is_completed(section.slug, lesson.slug):
                return lesson
        return None

    def _next_visible(self, lesson: Lesson) -> Lesson | None:
        """Return the next lesson that will actually be rendered, if any."""
        candidate = self.resolver.resolve_next(lesson.section, lesson.slug)
        while candidate is not END_OF_SECTION and not self._is_visible(candidate):
            candidate = self.resolver.resolve_next(candidate.section, candidate.slug)
        return None if candidate is END_OF_SECTION else candidate

    def _write_lesson(self, lesson: Lesson, generated_at: dt.datetime) -> Path:
        source = self.document_path(lesson)
        if not source.exists():
            msg = f"Document for lesson '{lesson.path}' not found at '{source}'."
            raise FileNotFoundError(msg)
        document = read_lesson_document(source)
        section = self.graph.section(lesson.section)
        toc_entries = [
            {"depth": depth, "label": node.text, "anchor": node.anchor}
            for depth, node in flatten_toc(extract_toc(document.body, self.renderer))
        ]
        context = {
            "site_name": self.site_name,
            "html_title": f"{lesson.title} | {section.title} | {self.site_name}",
            "section": section,
            "section_lessons": self._lesson_entries(section, current=lesson),
            "lesson": lesson,
            "meta": document.front_matter,
            "content_html": self.renderer.markdown(document.body),
            "toc": toc_entries,
            "next_lesson": self._next_visible(lesson),
            "is_completed": self.resolver.is_completed(lesson.section, lesson.slug),
            "pygments_css": self.renderer.stylesheet,
            "generated_at": generated_at,
        }
        return self._render("lesson_page.jinja", self.lesson_output_path(lesson), context)

    def _write_section_index(self, section: Section, generated_at: dt.datetime) -> Path:
        badge = self.resolver.completion_badge(section.slug)
        context = {
            "site_name": self.site_name,
            "html_title": f"{section.title} | {self.site_name}",
            "section": section,
            "section_lessons": self._lesson_entries(section),
            "badge": badge,
            "next_up": self._next_up(section),
            "generated_at": generated_at,
        }
        target = self.output_dir / section.slug / INDEX_FILENAME
        return self._render("section_page.jinja", target, context)

    def _write_site_index(self, generated_at: dt.datetime) -> Path:
        entries = [
            {
                "slug": section.slug,
                "title": section.title,
                "href": f"{section.slug}/{INDEX_FILENAME}",
                "badge": self.resolver.completion_badge(section.slug),
                "lesson_count": len(self._visible_lessons(section)),
            }
            for section in self.graph.sections()
        ]
        context = {
            "site_name": self.site_name,
            "html_title": self.site_name,
            "sections": entries,
            "generated_at": generated_at,
        }
        return self._render("site_index.jinja", self.output_dir / INDEX_FILENAME, context)

    def _lesson_entries(
        self, section: Section, current: Lesson | None = None
    ) -> list[dict[str, typ.Any]]:
        """Return sidebar entries for the visible lessons of ``section``."""
        return [
            {
                "slug": lesson.slug,
                "title": lesson.title,
                "description": lesson.description,
                "href": f"{lesson.slug}.html",
                "is_current": current is not None and lesson.slug == current.slug,
                "is_completed": self.resolver.is_completed(section.slug, lesson.slug),
                "is_draft": lesson.is_draft,
            }
            for lesson in self._visible_lessons(section)
        ]

    def _render(
        self, template_name: str, target: Path, context: dict[str, typ.Any]
    ) -> Path:
        html = self.env.get_template(template_name).render(**context)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(html, encoding="utf-8")
        return target


__all__ = ["INDEX_FILENAME", "LessonSiteGenerator"]
