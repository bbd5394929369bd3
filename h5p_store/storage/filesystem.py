"""
Filesystem abstraction used by the content storage.

Wraps an fsspec filesystem so the store works the same on a local
directory, in memory or on an object store. Every OSError coming from
fsspec is translated into the H5P-Store error types.
"""

import json
import fnmatch
import logging
import posixpath
from typing import Any, BinaryIO, Dict, Iterable, List, Optional

from fsspec.core import url_to_fs

from h5p_store.core.errors import NotFoundError, StorageIOError
from h5p_store.utils.path_utils import to_relative_path


logger = logging.getLogger(__name__)


class FileSystem:
    """
    Thin wrapper around an fsspec filesystem.

    All paths passed to the methods are fsspec paths (no protocol prefix,
    '/' separated), as returned by join().
    """

    def __init__(
        self,
        root_url: str,
        storage_options: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize the filesystem wrapper.

        Args:
            root_url: Local directory or fsspec URL (e.g. 'memory://store', 's3://bucket/h5p')
            storage_options: Options passed to the fsspec filesystem constructor
        """
        self.fs, self.root = url_to_fs(root_url, **(storage_options or {}))
        self.root = self.root.rstrip("/") or "/"

    def join(self, *parts: str) -> str:
        """Join path segments below the root."""
        return posixpath.join(self.root, *parts)

    def _wrap_error(self, error: OSError, action: str, path: str) -> Exception:
        if isinstance(error, FileNotFoundError):
            return NotFoundError(f"Cannot {action} {path}: it does not exist")
        return StorageIOError(f"Cannot {action} {path}: {error}")

    def _entry_type(self, path: str) -> Optional[str]:
        """
        Return the fsspec entry type of path, or None if nothing is there.

        fsspec's own exists/isfile/isdir report I/O faults as "missing",
        so the check goes through info() and only a missing path is False.
        """
        try:
            return self.fs.info(path).get("type")
        except (FileNotFoundError, NotADirectoryError):
            return None
        except OSError as e:
            raise StorageIOError(f"Cannot check {path}: {e}") from e

    def exists(self, path: str) -> bool:
        return self._entry_type(path) is not None

    def is_dir(self, path: str) -> bool:
        return self._entry_type(path) == "directory"

    def is_file(self, path: str) -> bool:
        return self._entry_type(path) == "file"

    def ensure_dir(self, path: str) -> None:
        """Create a directory and its parents if they do not exist."""
        try:
            self.fs.makedirs(path, exist_ok=True)
        except OSError as e:
            raise StorageIOError(f"Cannot create directory {path}: {e}") from e

    def write_document(self, path: str, document: Any, indent: Optional[int] = None) -> None:
        """
        Serialize a document as JSON and write it to path.

        Serialization happens before the file is opened, so a document that
        cannot be encoded raises TypeError/ValueError and leaves no file.

        Args:
            path: Destination path
            document: JSON serializable value
            indent: Optional indentation passed to json.dumps
        """
        data = json.dumps(document, indent=indent).encode("utf-8")
        try:
            with self.fs.open(path, "wb") as f:
                f.write(data)
        except OSError as e:
            raise self._wrap_error(e, "write", path) from e

    def read_document(self, path: str) -> Any:
        """
        Read and parse a JSON document.

        Raises:
            NotFoundError: If the document does not exist
            StorageIOError: If it cannot be read or is not valid JSON
        """
        try:
            with self.fs.open(path, "rb") as f:
                raw = f.read()
        except OSError as e:
            raise self._wrap_error(e, "read", path) from e

        try:
            return json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise StorageIOError(f"Document {path} is not valid JSON: {e}") from e

    def open_read_stream(self, path: str) -> BinaryIO:
        try:
            return self.fs.open(path, "rb")
        except OSError as e:
            raise self._wrap_error(e, "open", path) from e

    def open_write_stream(self, path: str) -> BinaryIO:
        """Open path for writing, truncating any existing file."""
        try:
            return self.fs.open(path, "wb")
        except OSError as e:
            raise self._wrap_error(e, "open", path) from e

    def remove(self, path: str) -> None:
        """Remove a single file."""
        try:
            self.fs.rm_file(path)
        except OSError as e:
            raise self._wrap_error(e, "remove", path) from e

    def remove_recursive(self, path: str) -> None:
        """Remove a directory and everything below it."""
        try:
            self.fs.rm(path, recursive=True)
        except OSError as e:
            raise self._wrap_error(e, "remove", path) from e

    def info(self, path: str) -> Dict[str, Any]:
        try:
            return self.fs.info(path)
        except OSError as e:
            raise self._wrap_error(e, "stat", path) from e

    def list_dirs(self, path: str) -> List[str]:
        """
        List the names of the immediate subdirectories of path.

        Args:
            path: Directory to list

        Returns:
            Directory names (not full paths)
        """
        try:
            entries = self.fs.ls(path, detail=True)
        except OSError as e:
            raise self._wrap_error(e, "list", path) from e

        return [
            posixpath.basename(entry["name"].rstrip("/"))
            for entry in entries
            if entry.get("type") == "directory"
        ]

    def list_files_matching(
        self,
        directory: str,
        pattern: str = "*",
        excludes: Iterable[str] = ()
    ) -> List[str]:
        """
        List leaf files below a directory.

        Patterns are fnmatch patterns matched against the path relative to
        directory; '*' also matches '/'.

        Args:
            directory: Directory to search recursively
            pattern: Pattern a file must match
            excludes: Patterns of files to leave out

        Returns:
            Matching paths relative to directory
        """
        try:
            paths = self.fs.find(directory)
        except OSError as e:
            raise self._wrap_error(e, "list", directory) from e

        excludes = list(excludes)
        results = []
        for path in paths:
            relative = to_relative_path(path, directory)
            if not fnmatch.fnmatchcase(relative, pattern):
                continue
            if any(fnmatch.fnmatchcase(relative, exclude) for exclude in excludes):
                continue
            results.append(relative)

        logger.debug(f"Found {len(results)} files below {directory}")
        return results
