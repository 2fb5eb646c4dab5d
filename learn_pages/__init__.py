"""Build lesson libraries into static sites and track learner progress.

This package turns an authored lesson manifest into a navigable content graph,
derives per-lesson tables of contents, records completion in a persisted
progress store, and exposes the ``learn`` CLI that renders the site.

Exports
-------
- ``app``: Cyclopts application entry for subcommands.
- ``main``: Convenience function that invokes the Cyclopts app.

Examples
--------
>>> from learn_pages import main
>>> main()  # doctest: +SKIP
"""

from __future__ import annotations

from .cli import app, main

__all__ = ["app", "main"]
