"""Path helpers: suffix stripping and root-relative resolution."""
import os
from typing import Iterable, Optional


def canonicalize(path: str, suffixes: Iterable[str]) -> Optional[str]:
    """
    Strip the first matching suffix from a path.

    (foo/bar/baz.gpg, (.gpg, .pattern, .description)) -> foo/bar/baz

    Args:
        path: Filesystem path as given by the caller
        suffixes: Candidate suffixes, tried in order

    Returns:
        The canonical identifier, or None if no suffix matches
    """
    for suffix in suffixes:
        if suffix and path.endswith(suffix):
            return path[:-len(suffix)]
    return None


def resolve(root_dir: str, path: str) -> str:
    """Resolve a path relative to root_dir; an empty root leaves it untouched."""
    if not root_dir:
        return path
    # Paths always stay under the root, even when given with a leading separator
    return os.path.normpath(os.path.join(root_dir, path.lstrip(os.sep)))
