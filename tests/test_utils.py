"""
Tests for utility functions.
"""

import io
import unittest

from h5p_store.core.errors import NotFoundError, PathTraversalError
from h5p_store.utils.hash_utils import compute_content_hash, compute_stream_hash
from h5p_store.utils.path_utils import (
    is_within,
    resolve_content_path,
    to_relative_path
)


class TestHashUtils(unittest.TestCase):
    """Tests for hash utility functions."""

    def test_compute_content_hash(self):
        """Test compute_content_hash function."""
        # Empty content
        self.assertEqual(compute_content_hash(""), "empty")
        self.assertEqual(compute_content_hash(b""), "empty")

        # Same content should have same hash
        hash1 = compute_content_hash("Hello, world!")
        hash2 = compute_content_hash("Hello, world!")
        self.assertEqual(hash1, hash2)

        # str is hashed as its UTF-8 bytes
        self.assertEqual(hash1, compute_content_hash(b"Hello, world!"))

        # Different content should have different hash
        hash3 = compute_content_hash("Hello, World!")  # Capital 'W'
        self.assertNotEqual(hash1, hash3)

        # Test different methods
        sha256_hash = compute_content_hash("Hello, world!", method="sha256")
        murmur_hash = compute_content_hash("Hello, world!", method="murmur3")
        self.assertNotEqual(sha256_hash, murmur_hash)
        self.assertEqual(
            sha256_hash,
            "315f5bdb76d078c43b8ac0064e4a0164612b1fce77c869345bfc94c75894edd3"
        )

        # Test seed affects murmur hash
        hash_seed1 = compute_content_hash("Hello, world!", method="murmur3", seed=1)
        hash_seed2 = compute_content_hash("Hello, world!", method="murmur3", seed=2)
        self.assertNotEqual(hash_seed1, hash_seed2)

    def test_unsupported_method(self):
        with self.assertRaises(ValueError):
            compute_content_hash("data", method="md5")

    def test_stream_hash_matches_content_hash(self):
        """Chunked hashing of a stream gives the same value as hashing the bytes."""
        data = bytes(range(256)) * 100
        for method in ("murmur3", "sha256"):
            stream_hash = compute_stream_hash(io.BytesIO(data), method=method, chunk_size=7)
            self.assertEqual(stream_hash, compute_content_hash(data, method=method))

    def test_stream_hash_consumes_stream(self):
        stream = io.BytesIO(b"0123456789")
        compute_stream_hash(stream)
        self.assertEqual(stream.read(), b"")


class TestPathUtils(unittest.TestCase):
    """Tests for content path resolution."""

    def test_resolve_simple_path(self):
        self.assertEqual(
            resolve_content_path("/store/42/content", "images/a.png"),
            "/store/42/content/images/a.png"
        )

    def test_resolve_normalizes_segments(self):
        self.assertEqual(
            resolve_content_path("/store/42/content", "images/./thumbs/../a.png"),
            "/store/42/content/images/a.png"
        )

    def test_backslashes_are_separators(self):
        self.assertEqual(
            resolve_content_path("/store/42/content", "images\\a.png"),
            "/store/42/content/images/a.png"
        )

    def test_traversal_is_rejected(self):
        with self.assertRaises(PathTraversalError):
            resolve_content_path("/store/42/content", "../../etc/passwd")

        with self.assertRaises(PathTraversalError):
            resolve_content_path("/store/42/content", "..\\..\\43\\h5p.json")

    def test_traversal_error_is_not_found(self):
        with self.assertRaises(NotFoundError):
            resolve_content_path("/store/42/content", "../../43/content/a.png")

    def test_absolute_path_is_rejected(self):
        with self.assertRaises(PathTraversalError):
            resolve_content_path("/store/42/content", "/etc/passwd")

    def test_empty_path_is_rejected(self):
        with self.assertRaises(ValueError):
            resolve_content_path("/store/42/content", "")

    def test_boundary_allows_parent_inside_boundary(self):
        """A path may climb out of base_dir as long as it stays in boundary_dir."""
        self.assertEqual(
            resolve_content_path("/store/42/content", "../h5p.json", boundary_dir="/store/42"),
            "/store/42/h5p.json"
        )
        with self.assertRaises(PathTraversalError):
            resolve_content_path("/store/42/content", "../../h5p.json", boundary_dir="/store/42")

    def test_is_within(self):
        self.assertTrue(is_within("/store/42", "/store/42"))
        self.assertTrue(is_within("/store/42/content/a.png", "/store/42"))
        # Sibling with a common prefix is outside
        self.assertFalse(is_within("/store/420/h5p.json", "/store/42"))
        self.assertFalse(is_within("/store", "/store/42"))

    def test_to_relative_path(self):
        self.assertEqual(
            to_relative_path("/store/42/content/images/a.png", "/store/42/content"),
            "images/a.png"
        )


if __name__ == "__main__":
    unittest.main()
