"""
Core abstractions and interfaces for H5P-Store
"""

from .base import ContentStorage, PermissionProvider
from .errors import (
    ContentStoreError,
    NotFoundError,
    PathTraversalError,
    IdExhaustionError,
    ContentCreationError,
    StorageIOError
)
from .models import ContentId, ContentFileStats, Permission, User
from .permissions import AllowAllPermissionProvider

__all__ = [
    "ContentStorage",
    "PermissionProvider",
    "AllowAllPermissionProvider",
    "ContentStoreError",
    "NotFoundError",
    "PathTraversalError",
    "IdExhaustionError",
    "ContentCreationError",
    "StorageIOError",
    "ContentId",
    "ContentFileStats",
    "Permission",
    "User"
]
