"""
Path helpers for content file areas.

Paths handled here are fsspec paths, which always use '/' as separator.
"""

import posixpath

from h5p_store.core.errors import PathTraversalError


def is_within(path: str, directory: str) -> bool:
    """
    Check whether a normalised path lies inside (or equals) a directory.

    Args:
        path: Path to check
        directory: Directory that should contain the path

    Returns:
        True if path is directory or one of its descendants
    """
    path = posixpath.normpath(path)
    directory = posixpath.normpath(directory)
    return path == directory or path.startswith(directory.rstrip("/") + "/")


def resolve_content_path(base_dir: str, relative_path: str, boundary_dir: str = None) -> str:
    """
    Resolve a relative file path against a content directory.

    Args:
        base_dir: Directory the relative path is relative to
        relative_path: Caller supplied path (may use '/' or '\\')
        boundary_dir: Directory the result must stay in (defaults to base_dir)

    Returns:
        Normalised absolute path

    Raises:
        ValueError: If the relative path is empty
        PathTraversalError: If the path is absolute or escapes boundary_dir
    """
    if not relative_path:
        raise ValueError("File path must not be empty")

    cleaned = relative_path.replace("\\", "/")
    if cleaned.startswith("/"):
        raise PathTraversalError(f"Absolute file paths are not allowed: {relative_path}")

    full_path = posixpath.normpath(posixpath.join(base_dir, cleaned))
    if not is_within(full_path, boundary_dir or base_dir):
        raise PathTraversalError(f"File path {relative_path} leaves its content directory")

    return full_path


def to_relative_path(path: str, base_dir: str) -> str:
    """Return path relative to base_dir, using '/' separators."""
    return posixpath.relpath(posixpath.normpath(path), posixpath.normpath(base_dir))
