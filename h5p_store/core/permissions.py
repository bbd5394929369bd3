"""
Reference permission policy.
"""

from typing import List, Optional

from h5p_store.core.base import PermissionProvider
from h5p_store.core.models import ContentId, Permission, User


class AllowAllPermissionProvider(PermissionProvider):
    """Grants every permission to every user. Replace it to enforce a real policy."""

    def get_user_permissions(
        self,
        content_id: ContentId,
        user: Optional[User]
    ) -> List[Permission]:
        return [
            Permission.DELETE,
            Permission.DOWNLOAD,
            Permission.EDIT,
            Permission.EMBED,
            Permission.VIEW
        ]
