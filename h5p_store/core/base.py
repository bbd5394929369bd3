"""
Base abstractions for the H5P-Store system.
"""

from abc import ABC, abstractmethod
from typing import BinaryIO, Dict, List, Optional, Any

from h5p_store.core.models import ContentId, Permission, User


class PermissionProvider(ABC):
    """
    Abstract base class for permission decisions.

    Storage backends ask a provider which capabilities a user holds on a
    piece of content. They report the answer but do not enforce it.
    """

    @abstractmethod
    def get_user_permissions(
        self,
        content_id: ContentId,
        user: Optional[User]
    ) -> List[Permission]:
        """
        Get the permissions a user has on a piece of content.

        Args:
            content_id: Content id to check
            user: User who wants to access the content

        Returns:
            List of permissions
        """
        pass


class ContentStorage(ABC):
    """Abstract base class for H5P content storage backends."""

    @abstractmethod
    def create_content_id(self) -> ContentId:
        """
        Generate a content id that is not used by any stored content.

        Returns:
            A free content id
        """
        pass

    @abstractmethod
    def create_content(
        self,
        metadata: Dict[str, Any],
        content: Any,
        user: Optional[User],
        content_id: Optional[ContentId] = None
    ) -> ContentId:
        """
        Create a content object. Files are added later with add_content_file.

        Args:
            metadata: Metadata of the content (h5p.json)
            content: Content parameters (content/content.json)
            user: User who owns the content
            content_id: Optional content id to use instead of a generated one

        Returns:
            The id of the created content
        """
        pass

    @abstractmethod
    def content_exists(self, content_id: ContentId) -> bool:
        """
        Check if a content object exists.

        Args:
            content_id: Content id to check

        Returns:
            True if the content exists, False otherwise
        """
        pass

    @abstractmethod
    def delete_content(
        self,
        content_id: ContentId,
        user: Optional[User] = None
    ) -> None:
        """
        Delete a content object and all of its files.

        Args:
            content_id: Content id to delete
            user: User who wants to delete the content
        """
        pass

    @abstractmethod
    def add_content_file(
        self,
        content_id: ContentId,
        filename: str,
        stream: BinaryIO,
        user: Optional[User]
    ) -> None:
        """
        Add a file to an existing content object.

        Args:
            content_id: Content id to add the file to
            filename: Path of the file inside the content file area
            stream: Readable binary stream with the file data
            user: User who adds the file
        """
        pass

    @abstractmethod
    def get_content_files(
        self,
        content_id: ContentId,
        user: Optional[User]
    ) -> List[str]:
        """
        List the files added to a content object.

        Args:
            content_id: Content id to list
            user: User who wants to access the content

        Returns:
            Paths relative to the content file area, without content.json
        """
        pass

    @abstractmethod
    def get_content_file_stream(
        self,
        content_id: ContentId,
        filename: str,
        user: Optional[User]
    ) -> BinaryIO:
        """
        Open a file of a content object for reading.

        Args:
            content_id: Content id the file belongs to
            filename: Path of the file inside the content file area
            user: User who wants to read the file

        Returns:
            Readable binary stream; close it (or use it as a context manager)
        """
        pass

    @abstractmethod
    def get_user_permissions(
        self,
        content_id: ContentId,
        user: Optional[User]
    ) -> List[Permission]:
        """
        Get the permissions a user has on a content object.

        Args:
            content_id: Content id to check
            user: User who wants to access the content

        Returns:
            List of permissions
        """
        pass
