"""Workspace domain service."""

from typing import Optional

from finkeep.database.base import Database
from finkeep.domain.entities import User, Workspace
from finkeep.domain.errors import NotFoundError, workspace_not_found
from finkeep.domain.validation import require_text


class WorkspaceService:
    """Service for creating workspaces and their members."""

    def __init__(self, db: Database):
        self.db = db

    def create_workspace(
        self, name: str, user_name: str, user_email: Optional[str] = None
    ) -> tuple[int, int]:
        """Create a workspace together with its first user.

        Args:
            name: Workspace name
            user_name: Name of the first member
            user_email: Optional e-mail of the first member

        Returns:
            Tuple of (workspace ID, user ID)
        """
        name = require_text(name, "Name")
        user_name = require_text(user_name, "User name")

        with self.db.atomic():
            workspace_id = self.db.create_workspace(name)
            user_id = self.db.create_user(workspace_id, user_name, user_email)
        return workspace_id, user_id

    def add_user(self, workspace_id: int, name: str, email: Optional[str] = None) -> int:
        """Add a member to an existing workspace.

        Raises:
            NotFoundError: If workspace doesn't exist
        """
        name = require_text(name, "User name")
        if self.db.get_workspace(workspace_id) is None:
            raise NotFoundError(workspace_not_found(workspace_id))
        return self.db.create_user(workspace_id, name, email)

    def get_workspace(self, workspace_id: int) -> Optional[Workspace]:
        return self.db.get_workspace(workspace_id)

    def get_default_user(self, workspace_id: int) -> Optional[User]:
        """Return the first member of a workspace, used for system writes."""
        return self.db.get_first_user(workspace_id)
