"""Render lesson Markdown into HTML with highlighted code and heading anchors."""

from __future__ import annotations

import re
import typing as typ
from html import escape, unescape

from markdown import Markdown
from markdown.extensions.toc import slugify
from pygments.formatters.html import HtmlFormatter

from ._constants import ANCHOR_SEPARATOR, DEFAULT_PYGMENTS_STYLE

if typ.TYPE_CHECKING:
    import collections.abc as cabc

CODE_BLOCK_PATTERN = re.compile(r"```([A-Za-z0-9_+#.-]+)?[^\n]*\n(.*?)```", re.DOTALL)
FENCED_INDENT_PATTERN = re.compile(r"^[ ]{1,3}([`~]{3,})", re.MULTILINE)
FENCE_LABEL_PATTERN = re.compile(
    r"^([`~]{3,})([A-Za-z0-9_+#.-]+)?(,[^\r\n]+)$", re.MULTILINE
)
CODEHILITE_OPEN_TAG = re.compile(r'<div class="codehilite">')
TAG_PATTERN = re.compile(r"<[^>]*>")


class LessonRenderer:
    """Render lesson Markdown with consistent styling."""

    def __init__(self, pygments_style: str = DEFAULT_PYGMENTS_STYLE) -> None:
        """Initialize a renderer with the given Pygments style.

        Parameters
        ----------
        pygments_style : str, optional
            Name of the Pygments style used for syntax highlighting. Defaults
            to ``"monokai"``.
        """
        self.pygments_style = pygments_style
        self._formatter = HtmlFormatter(style=pygments_style, cssclass="codehilite")

    @property
    def stylesheet(self) -> str:
        """Return the CSS used for highlighted code blocks."""
        return self._formatter.get_style_defs(".codehilite")

    def markdown(self, text: str) -> str:
        """Render markdown into HTML.

        Every heading receives an ``id``; :meth:`headings` reports the same
        ids for the same text.
        """
        normalized = self._normalize_fenced_blocks(text)
        if not normalized.strip():
            return ""
        html = self._converter().convert(normalized)
        return self._annotate_codehilite(html, normalized)

    def headings(self, text: str) -> list[tuple[int, str, str]]:
        """Return ``(level, anchor, label)`` for each heading :meth:`markdown` renders.

        Headings are reported in document order, including setext headings
        and headings nested in block quotes or list items. Anchors are taken
        from the conversion that assigns the rendered ``id`` attributes, and
        labels are the heading text with tags removed and entities decoded.
        """
        normalized = self._normalize_fenced_blocks(text)
        if not normalized.strip():
            return []
        md = self._converter()
        md.convert(normalized)
        tokens = md.toc_tokens  # type: ignore[attr-defined]
        return [
            (int(token["level"]), str(token["id"]), _plain_label(token["name"]))
            for token in _walk_tokens(tokens)
        ]

    def inline(self, text: str) -> str:
        """Render a short snippet such as a challenge prompt."""
        html = Markdown(extensions=["sane_lists"]).convert(text or "")
        if html.startswith("<p>") and html.endswith("</p>") and html.count("<p>") == 1:
            return html[3:-4]
        return html

    def _converter(self) -> Markdown:
        return Markdown(
            extensions=["fenced_code", "codehilite", "tables", "sane_lists", "toc"],
            extension_configs={
                "codehilite": {
                    "linenums": False,
                    "guess_lang": False,
                    "css_class": "codehilite",
                    "pygments_style": self.pygments_style,
                },
                "toc": {
                    "slugify": slugify,
                    "separator": ANCHOR_SEPARATOR,
                },
            },
        )

    def _annotate_codehilite(self, html: str, source_markdown: str) -> str:
        """Attach language metadata to each highlighted block in converted markdown."""
        languages = [
            match.group(1) or "text"
            for match in CODE_BLOCK_PATTERN.finditer(source_markdown)
        ]
        if not languages:
            return html
        lang_iter = iter(languages)

        def _repl(match: re.Match[str]) -> str:
            lang = next(lang_iter, "text")
            return (
                f'<div class="codehilite" data-language="{escape(lang, quote=True)}">'
            )

        return CODEHILITE_OPEN_TAG.sub(_repl, html, len(languages))

    @staticmethod
    def _normalize_fenced_blocks(text: str) -> str:
        """Unindent fences and drop extra fence labels such as ``rust,ignore``."""
        without_indent = FENCED_INDENT_PATTERN.sub(r"\1", text)

        def _strip_labels(match: re.Match[str]) -> str:
            fence, language, _extras = match.groups()
            return f"{fence}{language or ''}"

        return FENCE_LABEL_PATTERN.sub(_strip_labels, without_indent)


def _walk_tokens(
    tokens: cabc.Iterable[dict[str, typ.Any]],
) -> cabc.Iterator[dict[str, typ.Any]]:
    """Yield nested Markdown TOC tokens depth-first, in document order."""
    for token in tokens:
        yield token
        yield from _walk_tokens(token.get("children", ()))


def _plain_label(name: str) -> str:
    return unescape(" ".join(TAG_PATTERN.sub("", name).split()))


__all__ = ["CODE_BLOCK_PATTERN", "LessonRenderer"]
