"""Mapping between filesystem paths and remote asset keys."""

from __future__ import annotations

import os
import posixpath
from pathlib import Path
from typing import Sequence

# Most specific first: "templates/customers" must be tried before
# "templates", which is a prefix of it.
ASSET_LOCATIONS: tuple[str, ...] = (
    "templates/customers",
    "assets",
    "config",
    "layout",
    "snippets",
    "templates",
    "locales",
    "sections",
)


def _normalize(root: str | Path, path: str | Path) -> str:
    """Clean ``path``, strip ``root`` from its front and use forward slashes."""
    cleaned = os.path.normpath(str(path)).replace(os.sep, "/")
    prefix = os.path.normpath(str(root)).replace(os.sep, "/").rstrip("/") + "/"
    if cleaned.startswith(prefix):
        cleaned = cleaned[len(prefix) :]
    return cleaned


class PathResolver:
    """Resolve paths under a project root to canonical asset keys.

    Args:
        locations: Recognized top-level directories, in the order they are
            tried. Keep more specific entries ahead of their prefixes.
    """

    def __init__(self, locations: Sequence[str] = ASSET_LOCATIONS):
        self.locations = tuple(locations)

    def is_project_directory(self, root: str | Path, path: str | Path) -> bool:
        return _normalize(root, path) in self.locations

    def path_to_project(self, root: str | Path, path: str | Path) -> str:
        """Return the asset key for ``path``, or "" if it is not a theme asset.

        Examples:
            >>> PathResolver().path_to_project("/p", "/p/templates/customers/a.liquid")
            'templates/customers/a.liquid'
        """
        filename = _normalize(root, path)
        for location in self.locations:
            if filename.startswith(location + "/"):
                remainder = filename[len(location) + 1 :]
                return posixpath.join(location, remainder)
        return ""

    def path_in_project(self, root: str | Path, path: str | Path) -> bool:
        return self.path_to_project(root, path) != "" or self.is_project_directory(
            root, path
        )


_default_resolver = PathResolver()


def is_project_directory(root: str | Path, path: str | Path) -> bool:
    """Check whether ``path`` is exactly one of the recognized directories."""
    return _default_resolver.is_project_directory(root, path)


def path_to_project(root: str | Path, path: str | Path) -> str:
    """Map ``path`` to its asset key using the default directory table."""
    return _default_resolver.path_to_project(root, path)


def path_in_project(root: str | Path, path: str | Path) -> bool:
    """Check whether ``path`` is an asset or a recognized directory."""
    return _default_resolver.path_in_project(root, path)
