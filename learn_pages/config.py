"""Load the ``learn.yaml`` build configuration into a typed dataclass.

The file holds a single ``defaults`` table. Relative paths are resolved
against the directory containing the configuration file so builds behave the
same regardless of the working directory.

Example
-------
>>> from pathlib import Path
>>> from learn_pages.config import load_build_config
>>> config = load_build_config(Path("config/learn.yaml"))  # doctest: +SKIP
>>> config.manifest  # doctest: +SKIP
PosixPath('/srv/site/content/lessons.yaml')
"""

from __future__ import annotations

import dataclasses as dc
import os
import typing as typ
from pathlib import Path

from ruamel.yaml import YAML

from ._constants import (
    DEFAULT_DOCUMENT_SUFFIX,
    DEFAULT_PROGRESS_FILE,
    DEFAULT_PYGMENTS_STYLE,
    PROGRESS_FILE_ENV,
)


class BuildConfigError(ValueError):
    """Raised when the build configuration is invalid or incomplete."""


def default_progress_file() -> Path:
    """Return the progress file named by ``LEARN_PROGRESS_FILE`` or the default."""
    override = os.getenv(PROGRESS_FILE_ENV)
    return Path(override).expanduser() if override else DEFAULT_PROGRESS_FILE


@dc.dataclass(slots=True)
class BuildConfig:
    """Resolved build settings.

    Attributes
    ----------
    manifest : Path
        Lesson manifest (YAML or JSON).
    content_dir : Path
        Directory holding ``<section>/<lesson><suffix>`` documents.
    output_dir : Path
        Destination for generated HTML.
    progress_file : Path
        JSON file used by the progress commands.
    pygments_style : str
        Syntax highlighting style.
    site_name : str
        Name shown in page titles and headers.
    document_suffix : str
        File extension of lesson documents.
    include_drafts : bool
        Whether draft lessons are rendered.
    """

    manifest: Path = Path("content/lessons.yaml")
    content_dir: Path = Path("content")
    output_dir: Path = Path("public")
    progress_file: Path = dc.field(default_factory=default_progress_file)
    pygments_style: str = DEFAULT_PYGMENTS_STYLE
    site_name: str = "Learn"
    document_suffix: str = DEFAULT_DOCUMENT_SUFFIX
    include_drafts: bool = False


def load_build_config(path: Path) -> BuildConfig:
    """Load build settings from ``path``.

    Raises
    ------
    FileNotFoundError
        If the configuration file does not exist.
    BuildConfigError
        If the file is not a mapping, ``defaults`` is not a mapping, or a
        value has the wrong type.
    YAMLError
        If the YAML content cannot be parsed.
    """
    if not path.exists():
        msg = f"Configuration file '{path}' not found."
        raise FileNotFoundError(msg)

    loader = YAML(typ="safe")
    loader.version = (1, 2)
    with path.open("r", encoding="utf-8") as handle:
        loaded = loader.load(handle) or {}
    if not isinstance(loaded, dict):
        msg = "Top-level YAML structure must be a mapping."
        raise BuildConfigError(msg)
    defaults = loaded.get("defaults", {}) or {}
    if not isinstance(defaults, dict):
        msg = "'defaults' must be a mapping."
        raise BuildConfigError(msg)

    base = path.parent
    config = BuildConfig()
    return BuildConfig(
        manifest=_resolve_path(base, defaults.get("manifest"), config.manifest),
        content_dir=_resolve_path(base, defaults.get("content_dir"), config.content_dir),
        output_dir=_resolve_path(base, defaults.get("output_dir"), config.output_dir),
        progress_file=_resolve_progress_file(base, defaults.get("progress_file")),
        pygments_style=_as_str(defaults, "pygments_style", config.pygments_style),
        site_name=_as_str(defaults, "site_name", config.site_name),
        document_suffix=_as_str(defaults, "document_suffix", config.document_suffix),
        include_drafts=_as_bool(defaults, "include_drafts", config.include_drafts),
    )


def _resolve_path(base: Path, value: object, fallback: Path) -> Path:
    """Return ``value`` (or ``fallback``) resolved against ``base``."""
    if value is not None and not isinstance(value, str):
        msg = f"Expected a path string, got {value!r}."
        raise BuildConfigError(msg)
    candidate = Path(value).expanduser() if value else fallback
    return candidate if candidate.is_absolute() else base / candidate


def _resolve_progress_file(base: Path, value: object) -> Path:
    """Return the configured progress file, else the environment default."""
    if not value:
        return default_progress_file()
    return _resolve_path(base, value, DEFAULT_PROGRESS_FILE)


def _as_str(payload: typ.Mapping[str, typ.Any], key: str, fallback: str) -> str:
    value = payload.get(key, fallback)
    if not isinstance(value, str) or not value.strip():
        msg = f"'{key}' must be a non-empty string."
        raise BuildConfigError(msg)
    return value.strip()


def _as_bool(payload: typ.Mapping[str, typ.Any], key: str, fallback: bool) -> bool:
    value = payload.get(key, fallback)
    if not isinstance(value, bool):
        msg = f"'{key}' must be true or false."
        raise BuildConfigError(msg)
    return value


__all__ = [
    "BuildConfig",
    "BuildConfigError",
    "default_progress_file",
    "load_build_config",
]
