"""
Error types raised by H5P-Store.
"""


class ContentStoreError(Exception):
    """Base class for all content storage errors."""


class NotFoundError(ContentStoreError):
    """A content id or file path does not exist."""


class PathTraversalError(NotFoundError):
    """
    A relative file path resolves outside its content directory.

    Subclasses NotFoundError so callers that only map "not found" still
    refuse the request.
    """


class IdExhaustionError(ContentStoreError):
    """No free content id was found within the allowed number of attempts."""


class ContentCreationError(ContentStoreError):
    """
    Creating a content object failed.

    The partially created directory has been rolled back. The underlying
    fault is available as ``__cause__``.
    """


class StorageIOError(ContentStoreError):
    """Underlying filesystem fault (permission denied, disk full, stream error)."""
