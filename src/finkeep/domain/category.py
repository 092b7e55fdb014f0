"""Category domain service."""

from typing import Optional

from finkeep.database.base import Database
from finkeep.domain.entities import Category as CategoryEntity, TransactionType
from finkeep.domain.errors import NotFoundError, category_not_found
from finkeep.domain.validation import parse_transaction_type, require_text


class CategoryService:
    """Service for managing categories."""

    def __init__(self, db: Database):
        """Initialize category service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_category(
        self,
        workspace_id: int,
        name: str,
        type: TransactionType | str,
        color: Optional[str] = None,
        icon: Optional[str] = None,
    ) -> int:
        """Create a category.

        Args:
            workspace_id: Workspace scope
            name: Category name (at least 2 characters)
            type: INCOME or EXPENSE
            color: Optional display color
            icon: Optional display icon

        Returns:
            Category ID

        Raises:
            ValidationError: If name or type is invalid
        """
        return self.db.create_category(
            workspace_id=workspace_id,
            name=require_text(name, "Name"),
            type=parse_transaction_type(type),
            color=color,
            icon=icon,
        )

    def get_category(self, workspace_id: int, category_id: int) -> Optional[CategoryEntity]:
        """Get category by ID.

        Args:
            workspace_id: Workspace scope
            category_id: Category ID

        Returns:
            Category entity or None if not found
        """
        return self.db.get_category(workspace_id, category_id)

    def list_categories(self, workspace_id: int) -> list[CategoryEntity]:
        """List categories ordered by type, then name."""
        return self.db.list_categories(workspace_id)

    def update_category(
        self,
        workspace_id: int,
        category_id: int,
        name: str,
        type: TransactionType | str,
        color: Optional[str] = None,
        icon: Optional[str] = None,
    ) -> None:
        """Update a category.

        Raises:
            NotFoundError: If category doesn't exist
            ValidationError: If name or type is invalid
        """
        name = require_text(name, "Name")
        category_type = parse_transaction_type(type)
        if self.db.get_category(workspace_id, category_id) is None:
            raise NotFoundError(category_not_found(category_id))

        self.db.update_category(
            workspace_id=workspace_id,
            category_id=category_id,
            name=name,
            type=category_type,
            color=color,
            icon=icon,
        )

    def delete_category(self, workspace_id: int, category_id: int) -> None:
        """Delete a category.

        Transactions that used it are kept, with the category cleared.

        Raises:
            NotFoundError: If category doesn't exist
        """
        if self.db.get_category(workspace_id, category_id) is None:
            raise NotFoundError(category_not_found(category_id))
        self.db.delete_category(workspace_id, category_id)
