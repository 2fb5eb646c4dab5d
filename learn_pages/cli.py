"""Cyclopts CLI entrypoint for building lesson sites and tracking progress.

The ``learn`` console script renders the static lesson site from the lesson
manifest and Markdown documents, and lets a learner record and inspect their
local progress. Progress lives in a JSON file (``LEARN_PROGRESS_FILE`` or
``~/.config/learn-pages/progress.json`` unless the build config or
``--progress-file`` names another).

Examples
--------
Build the site described by ``config/learn.yaml``:

>>> from learn_pages.cli import main
>>> main()  # doctest: +SKIP

Mark a lesson complete and ask what comes next:

>>> from learn_pages.cli import app
>>> app(["complete", "auth/login"])  # doctest: +SKIP
>>> app(["next", "auth", "login"])  # doctest: +SKIP
"""

from __future__ import annotations

import logging
import os
import sys
import typing as typ
from pathlib import Path

import cyclopts
from cyclopts import App, Parameter

from .config import BuildConfig, load_build_config
from .content import ContentGraph, NotFoundError, load_manifest
from .generator import LessonSiteGenerator
from .navigation import END_OF_SECTION, NavigationResolver, split_path_key
from .progress import JsonFileBackend, PersistenceError, ProgressStore

DEFAULT_CONFIG = Path("config/learn.yaml")
LOG_LEVEL_ENV = "LEARN_LOG_LEVEL"

app = App(name="learn", config=cyclopts.config.Env("INPUT_", command=False))  # type: ignore[unknown-argument]

ConfigOption = typ.Annotated[
    Path, Parameter(help="Path to build config", env_var="INPUT_CONFIG")
]
ProgressOption = typ.Annotated[
    Path | None,
    Parameter(help="Override the progress file", env_var="INPUT_PROGRESS_FILE"),
]


def _format_path(path: Path) -> str:
    """Return a cwd-relative path when possible, otherwise the absolute path."""
    if path.is_absolute():
        try:
            return str(path.relative_to(Path.cwd()))
        except ValueError:  # pragma: no cover - fallback for different roots
            return str(path)
    return str(path)


def _fail(message: str) -> typ.NoReturn:
    print(message, file=sys.stderr)
    raise SystemExit(1)


def _open_store(settings: BuildConfig, override: Path | None) -> ProgressStore:
    """Return a ready progress store for the configured progress file.

    An unreadable progress file ends the command with exit status 1.
    """
    store = ProgressStore(JsonFileBackend(override or settings.progress_file))
    try:
        store.initialize()
    except PersistenceError as exc:
        _fail(str(exc))
    return store


def _load(config: Path) -> tuple[BuildConfig, ContentGraph]:
    settings = load_build_config(config)
    return settings, load_manifest(settings.manifest)


@app.command(help="Render every lesson and section page to static HTML.")
def build(
    *,
    config: ConfigOption = DEFAULT_CONFIG,
    output_dir: typ.Annotated[
        Path | None,
        Parameter(help="Override the output folder", env_var="INPUT_OUTPUT_DIR"),
    ] = None,
    include_drafts: typ.Annotated[
        bool | None, Parameter(help="Render draft lessons too")
    ] = None,
    with_progress: typ.Annotated[
        bool, Parameter(help="Show the local learner's completion badges")
    ] = False,
    progress_file: ProgressOption = None,
) -> None:
    """Generate the lesson site described by ``config``.

    Parameters
    ----------
    config : Path, optional
        Path to the ``learn.yaml`` build configuration.
    output_dir : Path or None, optional
        Override for the configured output directory.
    include_drafts : bool or None, optional
        Override for the configured draft handling.
    with_progress : bool, optional
        Render completion badges from the local progress file instead of
        showing every lesson as incomplete.
    progress_file : Path or None, optional
        Progress file used when ``with_progress`` is set.

    Raises
    ------
    ValidationError
        If the manifest is malformed.
    FileNotFoundError
        If the config, manifest, or a lesson document is missing.
    """
    settings, graph = _load(config)
    store = _open_store(settings, progress_file) if with_progress else None
    generator = LessonSiteGenerator(
        graph,
        content_dir=settings.content_dir,
        output_dir=output_dir or settings.output_dir,
        pygments_style=settings.pygments_style,
        site_name=settings.site_name,
        document_suffix=settings.document_suffix,
        include_drafts=(
            settings.include_drafts if include_drafts is None else include_drafts
        ),
        store=store,
    )
    for path in generator.run():
        print(f"wrote {_format_path(path)}")


@app.command(help="Mark a lesson (or one of its challenges) complete.")
def complete(
    path: typ.Annotated[str, Parameter(help="Lesson path such as auth/login")],
    *,
    challenge: typ.Annotated[
        int | None, Parameter(help="Challenge index within the lesson")
    ] = None,
    config: ConfigOption = DEFAULT_CONFIG,
    progress_file: ProgressOption = None,
) -> None:
    """Record completion of ``path`` in the local progress file."""
    settings, graph = _load(config)
    try:
        section_slug, lesson_slug = split_path_key(path)
        lesson = graph.lesson_by_path(section_slug, lesson_slug)
    except (ValueError, NotFoundError) as exc:
        _fail(str(exc))
    if challenge is not None and not 0 <= challenge < len(lesson.challenges):
        _fail(f"Lesson '{lesson.path}' has no challenge #{challenge}.")
    store = _open_store(settings, progress_file)
    try:
        if challenge is None:
            changed = store.mark_lesson_complete(lesson.path)
        else:
            changed = store.mark_challenge_complete(lesson.path, challenge)
    except PersistenceError as exc:
        _fail(str(exc))
    subject = (
        lesson.path if challenge is None else f"{lesson.path} challenge #{challenge}"
    )
    print(f"completed {subject}" if changed else f"{subject} already complete")


@app.command(help="Show completion per section, or per lesson of one section.")
def status(
    section: typ.Annotated[
        str | None, Parameter(help="Section slug to list lesson by lesson")
    ] = None,
    *,
    config: ConfigOption = DEFAULT_CONFIG,
    progress_file: ProgressOption = None,
) -> None:
    """Print completion badges for the whole library or one section."""
    settings, graph = _load(config)
    resolver = NavigationResolver(graph, _open_store(settings, progress_file))
    if section is None:
        for slug in graph.section_slugs():
            print(f"{slug}: {resolver.completion_badge(slug)}")
        return
    try:
        lessons = graph.lessons_of(section)
    except NotFoundError as exc:
        _fail(str(exc))
    print(f"{section}: {resolver.completion_badge(section)}")
    for lesson in lessons:
        mark = "x" if resolver.is_completed(section, lesson.slug) else " "
        print(f"[{mark}] {lesson.path}")


@app.command(name="next", help="Show the lesson that follows SECTION LESSON.")
def next_lesson(
    section: str,
    lesson: str,
    *,
    config: ConfigOption = DEFAULT_CONFIG,
) -> None:
    """Print the following lesson path or ``end of section``.

    Lesson order alone decides the answer, so the progress file is not read.
    """
    _settings, graph = _load(config)
    resolver = NavigationResolver(graph, ProgressStore())
    try:
        following = resolver.resolve_next(section, lesson)
    except NotFoundError as exc:
        _fail(str(exc))
    if following is END_OF_SECTION:
        print(f"end of section {section}")
    else:
        print(following.path)


@app.command(help="Forget every recorded completion.")
def reset(
    *,
    config: ConfigOption = DEFAULT_CONFIG,
    progress_file: ProgressOption = None,
) -> None:
    """Clear the local progress file."""
    settings = load_build_config(config)
    store = _open_store(settings, progress_file)
    try:
        store.reset()
    except PersistenceError as exc:
        _fail(str(exc))
    print("progress reset")


def main() -> None:
    """Invoke the Cyclopts application that powers the ``learn`` console command."""
    logging.basicConfig(
        level=os.getenv(LOG_LEVEL_ENV, "WARNING").upper(),
        format="%(levelname)s %(name)s: %(message)s",
    )
    app()


if __name__ == "__main__":  # pragma: no cover - manual invocation helper
    main()
