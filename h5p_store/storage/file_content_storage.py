"""
Directory-backed content storage.

Layout below the storage root::

    <root>/<content_id>/h5p.json                 metadata
    <root>/<content_id>/content/content.json     content parameters
    <root>/<content_id>/content/<...>            attached files

The store assumes a single writer per content id. Concurrent create,
delete or add_content_file calls on the same id race at the filesystem
level and must be serialized by the caller.
"""

import datetime
import logging
import posixpath
import random
import shutil
from contextlib import contextmanager
from typing import Any, BinaryIO, Dict, Iterator, List, Optional

from h5p_store.core.base import ContentStorage, PermissionProvider
from h5p_store.core.errors import (
    ContentCreationError,
    ContentStoreError,
    IdExhaustionError,
    NotFoundError,
    StorageIOError,
)
from h5p_store.core.models import (
    CONTENT_DIRNAME,
    CONTENT_FILENAME,
    METADATA_FILENAME,
    ContentFileStats,
    ContentId,
    Permission,
    User,
)
from h5p_store.core.permissions import AllowAllPermissionProvider
from h5p_store.storage.filesystem import FileSystem
from h5p_store.utils.hash_utils import DEFAULT_CHUNK_SIZE, compute_stream_hash
from h5p_store.utils.path_utils import resolve_content_path


logger = logging.getLogger(__name__)

MAX_CONTENT_ID = 2 ** 32
DEFAULT_MAX_ID_ATTEMPTS = 5


def _user_id(user: Optional[User]) -> str:
    return getattr(user, "id", None) or "anonymous"


class FileContentStorage(ContentStorage):
    """
    Persists H5P content in a directory tree.

    Content ids are random integers checked for clashes against the
    existing directories, so no counter or shared state is needed.
    Creation is all-or-nothing: if writing the documents fails, the content
    directory is removed again before the error is raised.
    """

    def __init__(
        self,
        storage_path: str,
        storage_options: Optional[Dict[str, Any]] = None,
        permission_provider: Optional[PermissionProvider] = None,
        rng: Optional[random.Random] = None,
        max_id_attempts: int = DEFAULT_MAX_ID_ATTEMPTS,
        max_content_id: int = MAX_CONTENT_ID,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        json_indent: Optional[int] = None,
        filesystem: Optional[FileSystem] = None
    ):
        """
        Initialize the content storage.

        Args:
            storage_path: Directory (or fsspec URL) where content is stored
            storage_options: Options for the fsspec filesystem (e.g. S3 credentials)
            permission_provider: Decides user permissions (defaults to allow-all)
            rng: Random number source for content ids
            max_id_attempts: Number of random ids tried before giving up
            max_content_id: Largest content id that is generated
            chunk_size: Bytes copied per read when adding files
            json_indent: Indentation of the written JSON documents
            filesystem: Ready-made FileSystem; storage_path and storage_options are then ignored
        """
        if max_id_attempts < 1:
            raise ValueError("max_id_attempts must be at least 1")
        if max_content_id < 1:
            raise ValueError("max_content_id must be at least 1")

        self.fs = filesystem or FileSystem(storage_path, storage_options)
        self.permission_provider = permission_provider or AllowAllPermissionProvider()
        self.rng = rng or random.SystemRandom()
        self.max_id_attempts = max_id_attempts
        self.max_content_id = max_content_id
        self.chunk_size = chunk_size
        self.json_indent = json_indent

        self.fs.ensure_dir(self.fs.root)

    # Paths

    def _content_key(self, content_id: ContentId) -> str:
        """Return the directory name of an id; only ints and decimal digit strings are accepted."""
        if isinstance(content_id, str) and content_id.isascii() and content_id.isdigit():
            return str(int(content_id))
        if isinstance(content_id, int) and not isinstance(content_id, bool) and content_id >= 0:
            return str(content_id)
        raise ValueError(f"Invalid content id: {content_id!r}")

    def _content_path(self, content_id: ContentId) -> str:
        return self.fs.join(self._content_key(content_id))

    def _files_path(self, content_id: ContentId) -> str:
        return self.fs.join(self._content_key(content_id), CONTENT_DIRNAME)

    def _file_path(self, content_id: ContentId, filename: str, writable: bool = False) -> str:
        """
        Resolve filename relative to the file area.

        Reads may reach anything inside the content directory, writes only
        the file area itself.
        """
        files_path = self._files_path(content_id)
        return resolve_content_path(
            files_path,
            filename,
            boundary_dir=files_path if writable else self._content_path(content_id)
        )

    def _check_not_reserved(self, content_id: ContentId, path: str) -> None:
        if path == self.fs.join(self._content_key(content_id), CONTENT_DIRNAME, CONTENT_FILENAME):
            raise ValueError(f"{CONTENT_FILENAME} is reserved for the content parameters")

    def _require_content(self, content_id: ContentId, action: str) -> None:
        if not self.fs.exists(self._content_path(content_id)):
            raise NotFoundError(
                f"Cannot {action} content with id {content_id}: it does not exist."
            )

    # Ids

    def create_content_id(self) -> ContentId:
        """
        Generate a random content id that is not in use.

        Returns:
            A free content id

        Raises:
            IdExhaustionError: If all attempts hit existing content
        """
        for attempt in range(1, self.max_id_attempts + 1):
            content_id = self.rng.randint(1, self.max_content_id)
            if not self.fs.exists(self._content_path(content_id)):
                return content_id
            logger.warning(
                f"Content id {content_id} already in use "
                f"(attempt {attempt}/{self.max_id_attempts})"
            )

        raise IdExhaustionError(
            f"Could not generate id for new content after {self.max_id_attempts} attempts."
        )

    # Content objects

    @contextmanager
    def _rollback_on_error(self, content_id: ContentId) -> Iterator[None]:
        """Remove the content directory if the wrapped block fails."""
        try:
            yield
        except BaseException as e:
            content_path = self._content_path(content_id)
            try:
                if self.fs.exists(content_path):
                    self.fs.remove_recursive(content_path)
            except ContentStoreError as cleanup_error:
                logger.error(
                    f"Rollback of content {content_id} failed, {content_path} may be left behind: "
                    f"{cleanup_error}"
                )
            if not isinstance(e, Exception):
                raise
            raise ContentCreationError(f"Could not create content: {e}") from e

    def create_content(
        self,
        metadata: Dict[str, Any],
        content: Any,
        user: Optional[User],
        content_id: Optional[ContentId] = None
    ) -> ContentId:
        """
        Create a content object. Add files to it later with add_content_file.

        If anything goes wrong no trace of the content is left in storage.

        Args:
            metadata: Metadata of the content (h5p.json)
            content: Content parameters (content/content.json)
            user: User who owns the content
            content_id: Optional id to use; its uniqueness is not checked

        Returns:
            The id of the created content

        Raises:
            IdExhaustionError: If no free id could be generated
            ContentCreationError: If writing the content failed
        """
        if content_id is None:
            content_id = self.create_content_id()
        else:
            content_id = int(self._content_key(content_id))

        with self._rollback_on_error(content_id):
            self.fs.ensure_dir(self._content_path(content_id))
            self.fs.ensure_dir(self._files_path(content_id))
            self.fs.write_document(
                self.fs.join(self._content_key(content_id), METADATA_FILENAME),
                metadata,
                indent=self.json_indent
            )
            self.fs.write_document(
                self.fs.join(self._content_key(content_id), CONTENT_DIRNAME, CONTENT_FILENAME),
                content,
                indent=self.json_indent
            )

        logger.info(f"Created content {content_id} for user {_user_id(user)}")
        return content_id

    def content_exists(self, content_id: ContentId) -> bool:
        return self.fs.exists(self._content_path(content_id))

    def delete_content(self, content_id: ContentId, user: Optional[User] = None) -> None:
        """
        Delete a content object and all of its files.

        Deletion is not atomic: if removal fails halfway the content
        directory may be left partially deleted.

        Raises:
            NotFoundError: If the content does not exist
            StorageIOError: If removing the files failed
        """
        self._require_content(content_id, "delete")
        self.fs.remove_recursive(self._content_path(content_id))
        logger.info(f"Deleted content {content_id} for user {_user_id(user)}")

    def list_content(self, user: Optional[User] = None) -> List[ContentId]:
        """
        List the ids of all stored content objects.

        Returns:
            Content ids in ascending order
        """
        return sorted(
            int(name) for name in self.fs.list_dirs(self.fs.root) if name.isdigit()
        )

    def get_metadata(self, content_id: ContentId, user: Optional[User] = None) -> Dict[str, Any]:
        """Return the parsed h5p.json of a content object."""
        self._require_content(content_id, "read metadata of")
        return self.fs.read_document(
            self.fs.join(self._content_key(content_id), METADATA_FILENAME)
        )

    def get_parameters(self, content_id: ContentId, user: Optional[User] = None) -> Any:
        """Return the parsed content/content.json of a content object."""
        self._require_content(content_id, "read parameters of")
        return self.fs.read_document(
            self.fs.join(self._content_key(content_id), CONTENT_DIRNAME, CONTENT_FILENAME)
        )

    # Files

    def add_content_file(
        self,
        content_id: ContentId,
        filename: str,
        stream: BinaryIO,
        user: Optional[User]
    ) -> None:
        """
        Add a file to an existing content object, replacing any file at that path.

        The content has to be created with create_content first.

        Args:
            content_id: Content id to add the file to
            filename: Path of the file INSIDE the content directory
            stream: Readable binary stream; it is read to the end
            user: User who adds the file

        Raises:
            NotFoundError: If the content does not exist
            PathTraversalError: If filename leaves the content directory
            ValueError: If filename is the reserved content.json
            StorageIOError: If copying the data failed
        """
        file_path = self._file_path(content_id, filename, writable=True)
        if not self.fs.exists(self._content_path(content_id)):
            raise NotFoundError(
                f"Cannot add file {filename} to content with id {content_id}: "
                f"Content with this id does not exist."
            )
        self._check_not_reserved(content_id, file_path)

        self.fs.ensure_dir(posixpath.dirname(file_path))
        try:
            with self.fs.open_write_stream(file_path) as out:
                shutil.copyfileobj(stream, out, self.chunk_size)
        except Exception as e:
            try:
                if self.fs.exists(file_path):
                    self.fs.remove(file_path)
            except ContentStoreError as cleanup_error:
                logger.error(f"Could not remove partial file {file_path}: {cleanup_error}")
            raise StorageIOError(
                f"Could not add file {filename} to content {content_id}: {e}"
            ) from e

        logger.debug(f"Added file {filename} to content {content_id}")

    def get_content_files(self, content_id: ContentId, user: Optional[User] = None) -> List[str]:
        """
        List the files added to a content object (images, videos, ...).

        Returns:
            Paths relative to the content directory, e.g. ['images/a.png'];
            content.json is never included

        Raises:
            NotFoundError: If the content does not exist
        """
        self._require_content(content_id, "list files of")
        return self.fs.list_files_matching(
            self._files_path(content_id),
            excludes=[CONTENT_FILENAME]
        )

    def content_file_exists(self, content_id: ContentId, filename: str) -> bool:
        return self.fs.is_file(self._file_path(content_id, filename))

    def get_content_file_stream(
        self,
        content_id: ContentId,
        filename: str,
        user: Optional[User] = None
    ) -> BinaryIO:
        """
        Open a file of a content object for reading.

        The returned stream must be closed by the caller; it can be used as
        a context manager.

        Args:
            content_id: Content id the file belongs to
            filename: Path of the file inside the content directory
            user: User who wants to read the file

        Returns:
            Readable binary stream

        Raises:
            PathTraversalError: If filename leaves the content directory
            NotFoundError: If the file does not exist
        """
        file_path = self._file_path(content_id, filename)
        if not self.fs.is_file(file_path):
            raise NotFoundError(
                f"File {filename} of content {content_id} does not exist."
            )
        return self.fs.open_read_stream(file_path)

    def get_content_file_stats(
        self,
        content_id: ContentId,
        filename: str,
        user: Optional[User] = None,
        with_checksum: bool = False
    ) -> ContentFileStats:
        """
        Get size, modification time and optionally a checksum of a file.

        Args:
            content_id: Content id the file belongs to
            filename: Path of the file inside the content directory
            user: User who wants the stats
            with_checksum: Whether to read the file and compute a murmur3 checksum

        Returns:
            ContentFileStats for the file
        """
        file_path = self._file_path(content_id, filename)
        if not self.fs.is_file(file_path):
            raise NotFoundError(
                f"File {filename} of content {content_id} does not exist."
            )

        info = self.fs.info(file_path)
        modified = info.get("mtime") or info.get("LastModified") or info.get("created")
        if isinstance(modified, (int, float)):
            modified = datetime.datetime.fromtimestamp(modified)

        checksum = None
        if with_checksum:
            with self.fs.open_read_stream(file_path) as f:
                checksum = compute_stream_hash(f, chunk_size=self.chunk_size)

        return ContentFileStats(
            path=filename,
            size=info.get("size", 0),
            modified=modified if isinstance(modified, datetime.datetime) else None,
            checksum=checksum
        )

    def delete_content_file(
        self,
        content_id: ContentId,
        filename: str,
        user: Optional[User] = None
    ) -> None:
        """
        Delete a single file of a content object.

        Raises:
            NotFoundError: If the file does not exist
            ValueError: If filename is the reserved content.json
        """
        file_path = self._file_path(content_id, filename, writable=True)
        self._check_not_reserved(content_id, file_path)
        if not self.fs.is_file(file_path):
            raise NotFoundError(
                f"Cannot delete file {filename} of content {content_id}: it does not exist."
            )
        self.fs.remove(file_path)
        logger.debug(f"Deleted file {filename} of content {content_id}")

    # Permissions

    def get_user_permissions(
        self,
        content_id: ContentId,
        user: Optional[User]
    ) -> List[Permission]:
        return self.permission_provider.get_user_permissions(content_id, user)
