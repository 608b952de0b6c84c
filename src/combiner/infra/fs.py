from __future__ import annotations

"""
FileSystem Infrastructure Layer.

Path normalisation and directory helpers shared by the pipeline and the
CLI. Keeps path handling uniform across Windows and Unix-like systems.
"""

import os
from typing import Optional, Tuple

# -----------------------------------------------------------------------------
# PATH RESOLUTION API
# -----------------------------------------------------------------------------

def normalize_path(path: Optional[str], fallback: str) -> str:
    """
    Normalize a path string into an absolute filesystem path.

    Handles environment variable expansion ($VAR/%VAR%) and user home
    shortcuts (~/). Reverts to fallback if the input is empty.

    Args:
        path: Raw input path string.
        fallback: Default path to use if the input is empty.

    Returns:
        str: Normalized absolute path.
    """
    p = (path or "").strip()
    if not p:
        p = fallback
    p = os.path.expandvars(os.path.expanduser(p))
    return os.path.abspath(p)


def relative_to_root(path: str, root: str) -> str:
    """
    Express `path` relative to `root` with '/' separators.

    Returns an empty string when `path` lies outside `root` (or on another
    drive), since such a path can never be reached by the traversal.
    """
    path_abs = os.path.abspath(path)
    root_abs = os.path.abspath(root)
    try:
        common = os.path.commonpath([path_abs, root_abs])
    except ValueError:
        return ""
    if common != root_abs or path_abs == root_abs:
        return ""
    return os.path.relpath(path_abs, root_abs).replace(os.sep, "/")


# -----------------------------------------------------------------------------
# FILESYSTEM MUTATION API
# -----------------------------------------------------------------------------

def safe_mkdir(path: str) -> Tuple[bool, Optional[str]]:
    """
    Attempt to recursively create a directory structure safely.

    Args:
        path: Target directory path.

    Returns:
        Tuple[bool, Optional[str]]: (Success flag, Error message if applicable).
    """
    try:
        os.makedirs(path, exist_ok=True)
        return True, None
    except OSError as e:
        return False, str(e)


# -----------------------------------------------------------------------------
# PRESENTATION
# -----------------------------------------------------------------------------

def display_path(path: str) -> str:
    """
    Return a printable form of a path.

    Names that are not valid UTF-8 carry surrogate escapes, which a strict
    UTF-8 stream refuses to write; those bytes are shown as U+FFFD instead.
    """
    return path.encode("utf-8", "surrogateescape").decode("utf-8", "replace")
