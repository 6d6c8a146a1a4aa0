"""Path helpers shared by the linking components."""

from __future__ import annotations

import os
from typing import Union

_SEPARATORS = os.sep + (os.altsep or "")


def home_dir() -> str:
    """Return the current user's home directory."""
    return os.path.expanduser("~")


def expand_path(path: Union[str, "os.PathLike[str]"]) -> str:
    """Expand a leading ``~`` and make the path absolute.

    ``~`` alone maps to the home directory and ``~/rest`` to ``home/rest``
    (extra separators after the tilde are dropped). Anything else is made
    absolute against the current working directory. Symlinks are not
    followed.

    Args:
        path: Path as written in the configuration.

    Returns:
        Absolute path string.
    """
    path = os.fspath(path)
    if path == "~":
        return home_dir()
    if len(path) > 1 and path[0] == "~" and path[1] in _SEPARATORS:
        rest = path[1:].lstrip(_SEPARATORS)
        return os.path.join(home_dir(), rest) if rest else home_dir()
    return os.path.abspath(path)


def canonicalize(path: Union[str, "os.PathLike[str]"]) -> str:
    """Lexically normalise ``path`` to an absolute path."""
    return os.path.abspath(os.fspath(path))


def source_path(repo_root: Union[str, "os.PathLike[str]"], source: str) -> str:
    """Path a link should point at, exactly as it is written into the link."""
    return os.path.join(os.fspath(repo_root), source)


def resolve_link_value(link_path: str, link_value: str) -> str:
    """Resolve a raw link value against the directory holding the link."""
    return canonicalize(os.path.join(os.path.dirname(link_path), link_value))
