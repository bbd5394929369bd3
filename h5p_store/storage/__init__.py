"""
Storage implementations for H5P-Store.
"""

from .filesystem import FileSystem
from .file_content_storage import FileContentStorage

__all__ = [
    "FileSystem",
    "FileContentStorage"
]
