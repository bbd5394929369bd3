"""
H5P-Store: directory-backed storage for H5P content.
"""

from h5p_store.core import (
    ContentStorage,
    PermissionProvider,
    AllowAllPermissionProvider,
    ContentStoreError,
    NotFoundError,
    PathTraversalError,
    IdExhaustionError,
    ContentCreationError,
    StorageIOError,
    ContentFileStats,
    Permission,
    User
)
from h5p_store.storage import FileContentStorage, FileSystem

__version__ = "0.1.0"

__all__ = [
    "FileContentStorage",
    "FileSystem",
    "ContentStorage",
    "PermissionProvider",
    "AllowAllPermissionProvider",
    "ContentStoreError",
    "NotFoundError",
    "PathTraversalError",
    "IdExhaustionError",
    "ContentCreationError",
    "StorageIOError",
    "ContentFileStats",
    "Permission",
    "User"
]
