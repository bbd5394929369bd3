"""
Utility functions for H5P-Store.
"""

from .hash_utils import compute_content_hash, compute_stream_hash
from .path_utils import resolve_content_path, to_relative_path

__all__ = [
    "compute_content_hash",
    "compute_stream_hash",
    "resolve_content_path",
    "to_relative_path"
]
