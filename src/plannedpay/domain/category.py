"""Category domain service."""

from typing import Optional
from plannedpay.database.base import Database
from plannedpay.domain.entities import Category as CategoryEntity
from plannedpay.domain.errors import NotFoundError


class CategoryService:
    """Service for managing categories."""

    def __init__(self, db: Database):
        """Initialize category service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_category(self, user_id: str, name: str, parent_name: Optional[str] = None) -> int:
        """Create a category.

        Args:
            user_id: Owner of the category
            name: Category name
            parent_name: Optional name of the parent category

        Returns:
            Category ID

        Raises:
            NotFoundError: If parent category doesn't exist
        """
        parent_id = None
        if parent_name is not None:
            parent = self.get_category_by_name(user_id, parent_name)
            if parent is None:
                raise NotFoundError(f"Parent category '{parent_name}' not found")
            parent_id = parent.id

        return self.db.create_category(user_id=user_id, name=name, parent_id=parent_id)

    def get_category(self, category_id: int) -> Optional[CategoryEntity]:
        """Get category by ID."""
        return self.db.get_category(category_id)

    def get_category_by_name(self, user_id: str, name: str) -> Optional[CategoryEntity]:
        """Get a user's category by name, or None if not found."""
        for category in self.db.list_categories(user_id):
            if category.name == name:
                return category
        return None

    def list_categories(self, user_id: str) -> list[CategoryEntity]:
        """List a user's categories."""
        return self.db.list_categories(user_id)
