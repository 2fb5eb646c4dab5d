"""Common literal values used across learn_pages.

These constants keep path-key formatting, default locations, and environment
variable names centralized so the store, the resolver, the generator, and the
CLI agree on them. Intended for internal use within the learn_pages package.

Examples
--------
>>> from learn_pages import _constants
>>> _constants.PATH_KEY_TEMPLATE.format(section="auth", lesson="login")
'auth/login'
"""

from __future__ import annotations

from pathlib import Path

PATH_KEY_SEPARATOR = "/"
PATH_KEY_TEMPLATE = "{section}" + PATH_KEY_SEPARATOR + "{lesson}"

ANCHOR_SEPARATOR = "-"

PROGRESS_FILE_ENV = "LEARN_PROGRESS_FILE"
DEFAULT_PROGRESS_FILE = Path.home() / ".config" / "learn-pages" / "progress.json"

DEFAULT_DOCUMENT_SUFFIX = ".md"
DEFAULT_PYGMENTS_STYLE = "monokai"
DEFAULT_STATUS = "published"
DRAFT_STATUS = "draft"
