"""
Data models for H5P-Store.
"""

import datetime
from enum import Enum
from typing import Dict, Optional, Any
from dataclasses import dataclass


# Content ids are plain integers; the directory name is their decimal form.
ContentId = int

METADATA_FILENAME = "h5p.json"
CONTENT_DIRNAME = "content"
CONTENT_FILENAME = "content.json"


class Permission(Enum):
    """Capabilities a user can hold on a piece of content."""

    DELETE = "delete"
    DOWNLOAD = "download"
    EDIT = "edit"
    EMBED = "embed"
    VIEW = "view"


@dataclass
class User:
    """
    A user acting on stored content.

    The store does not authenticate users. It passes them on to the
    permission provider and uses the id in log messages.

    Attributes:
        id: Unique user identifier
        name: Display name
        email: E-mail address
        type: Account type (e.g. 'local')
    """
    id: str
    name: str = ""
    email: str = ""
    type: str = "local"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "type": self.type
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "User":
        """Create from dictionary."""
        return cls(
            id=data["id"],
            name=data.get("name", ""),
            email=data.get("email", ""),
            type=data.get("type", "local")
        )


@dataclass
class ContentFileStats:
    """
    Statistics of a file attached to a content object.

    Attributes:
        path: Path relative to the content file area
        size: Size of the file in bytes
        modified: Last modification time, if the filesystem reports one
        checksum: Murmur3 checksum of the file contents, if requested
    """
    path: str
    size: int
    modified: Optional[datetime.datetime] = None
    checksum: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert to dictionary.

        Returns:
            Dictionary representation of these stats
        """
        result = {
            "path": self.path,
            "size": self.size,
        }

        if self.modified:
            result["modified"] = self.modified.timestamp()

        if self.checksum:
            result["checksum"] = self.checksum

        return result
