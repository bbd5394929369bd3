"""
Tests for the fsspec filesystem wrapper.
"""

import io
import os
import shutil
import tempfile
import unittest
import uuid
from unittest import mock

from h5p_store.core.errors import NotFoundError, StorageIOError
from h5p_store.storage.filesystem import FileSystem


class TestLocalFileSystem(unittest.TestCase):
    """Tests against a temporary local directory."""

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()
        self.fs = FileSystem(self.temp_dir)

    def tearDown(self):
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def test_join_is_below_root(self):
        self.assertEqual(self.fs.join("42", "h5p.json"), f"{self.fs.root}/42/h5p.json")

    def test_write_and_read_document(self):
        path = self.fs.join("doc.json")
        self.fs.write_document(path, {"title": "x", "tags": [1, 2]})

        self.assertTrue(os.path.exists(os.path.join(self.temp_dir, "doc.json")))
        self.assertEqual(self.fs.read_document(path), {"title": "x", "tags": [1, 2]})

    def test_unserializable_document_leaves_no_file(self):
        path = self.fs.join("bad.json")
        with self.assertRaises(TypeError):
            self.fs.write_document(path, {"value": object()})
        self.assertFalse(self.fs.exists(path))

    def test_read_missing_document(self):
        with self.assertRaises(NotFoundError):
            self.fs.read_document(self.fs.join("missing.json"))

    def test_read_invalid_document(self):
        with open(os.path.join(self.temp_dir, "broken.json"), "w") as f:
            f.write("{not json")
        with self.assertRaises(StorageIOError):
            self.fs.read_document(self.fs.join("broken.json"))

    def test_streams(self):
        self.fs.ensure_dir(self.fs.join("a", "b"))
        path = self.fs.join("a", "b", "data.bin")
        with self.fs.open_write_stream(path) as out:
            out.write(b"\x00\x01\x02")
        with self.fs.open_read_stream(path) as f:
            self.assertEqual(f.read(), b"\x00\x01\x02")

    def test_open_missing_stream(self):
        with self.assertRaises(NotFoundError):
            self.fs.open_read_stream(self.fs.join("nope.bin"))

    def test_list_files_matching(self):
        self.fs.ensure_dir(self.fs.join("content", "images"))
        for name in ("content.json", "images/a.png", "images/content.json", "README"):
            with self.fs.open_write_stream(self.fs.join("content", name)) as out:
                out.write(b"x")

        directory = self.fs.join("content")
        self.assertEqual(
            sorted(self.fs.list_files_matching(directory, excludes=["content.json"])),
            ["README", "images/a.png", "images/content.json"]
        )
        self.assertEqual(
            sorted(self.fs.list_files_matching(directory, pattern="*.png")),
            ["images/a.png"]
        )

    def test_list_files_excludes_directories(self):
        self.fs.ensure_dir(self.fs.join("content", "empty", "nested"))
        self.assertEqual(self.fs.list_files_matching(self.fs.join("content")), [])

    def test_list_dirs(self):
        self.fs.ensure_dir(self.fs.join("1"))
        self.fs.ensure_dir(self.fs.join("22"))
        with self.fs.open_write_stream(self.fs.join("file.txt")) as out:
            out.write(b"x")

        self.assertEqual(sorted(self.fs.list_dirs(self.fs.root)), ["1", "22"])

    def test_remove_recursive(self):
        self.fs.ensure_dir(self.fs.join("7", "content", "deep"))
        self.fs.write_document(self.fs.join("7", "content", "deep", "x.json"), {})

        self.fs.remove_recursive(self.fs.join("7"))

        self.assertFalse(os.path.exists(os.path.join(self.temp_dir, "7")))

    def test_remove_missing_file(self):
        with self.assertRaises(NotFoundError):
            self.fs.remove(self.fs.join("missing.bin"))

    def test_os_errors_become_storage_errors(self):
        with mock.patch.object(self.fs.fs, "makedirs", side_effect=PermissionError("denied")):
            with self.assertRaises(StorageIOError):
                self.fs.ensure_dir(self.fs.join("locked"))

    def test_existence_checks(self):
        self.fs.ensure_dir(self.fs.join("dir"))
        self.fs.write_document(self.fs.join("dir", "doc.json"), {})

        self.assertTrue(self.fs.exists(self.fs.join("dir")))
        self.assertTrue(self.fs.is_dir(self.fs.join("dir")))
        self.assertFalse(self.fs.is_file(self.fs.join("dir")))
        self.assertTrue(self.fs.is_file(self.fs.join("dir", "doc.json")))
        self.assertFalse(self.fs.exists(self.fs.join("missing")))
        # A file used as a directory component is simply missing
        self.assertFalse(self.fs.exists(self.fs.join("dir", "doc.json", "child")))

    def test_existence_check_faults_are_not_hidden(self):
        """A permission fault while checking a path is an error, not "missing"."""
        path = self.fs.join("locked")
        real_stat = os.stat

        def failing_stat(target, *args, **kwargs):
            if str(target).rstrip("/") == path:
                raise PermissionError(13, "Permission denied", target)
            return real_stat(target, *args, **kwargs)

        with mock.patch("os.stat", side_effect=failing_stat):
            with self.assertRaises(StorageIOError):
                self.fs.exists(path)
            with self.assertRaises(StorageIOError):
                self.fs.is_file(path)
            with self.assertRaises(StorageIOError):
                self.fs.is_dir(path)

        with mock.patch.object(self.fs.fs, "info", side_effect=OSError("I/O error")):
            with self.assertRaises(StorageIOError):
                self.fs.exists(self.fs.join("anything"))


class TestMemoryFileSystem(unittest.TestCase):
    """The wrapper works with any fsspec URL."""

    def setUp(self):
        self.fs = FileSystem(f"memory://h5p-store-test-{uuid.uuid4().hex}")
        self.fs.ensure_dir(self.fs.root)

    def tearDown(self):
        self.fs.remove_recursive(self.fs.root)

    def test_documents_and_listing(self):
        self.fs.ensure_dir(self.fs.join("5", "content"))
        self.fs.write_document(self.fs.join("5", "content", "content.json"), {"body": "y"})
        with self.fs.open_write_stream(self.fs.join("5", "content", "a.txt")) as out:
            out.write(b"hello")

        self.assertEqual(
            self.fs.read_document(self.fs.join("5", "content", "content.json")),
            {"body": "y"}
        )
        self.assertEqual(
            self.fs.list_files_matching(self.fs.join("5", "content"), excludes=["content.json"]),
            ["a.txt"]
        )


if __name__ == "__main__":
    unittest.main()
