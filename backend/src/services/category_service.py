"""
Category service for managing event categories.

Provides creation and lookup of the categories events are filed under.

Design:
- Category names are unique (case-insensitive)
- Events reference categories with RESTRICT on delete
"""

from typing import List

from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from sqlalchemy import func

from backend.src.models import Category
from backend.src.utils.logging_config import get_logger
from backend.src.utils.pagination import page_bounds
from backend.src.services.exceptions import NotFoundError, ConflictError, ValidationError


logger = get_logger("services")


class CategoryService:
    """
    Service for managing event categories.

    Usage:
        >>> service = CategoryService(db_session)
        >>> category = service.create(name="Concerts")
    """

    def __init__(self, db: Session):
        """
        Initialize category service.

        Args:
            db: SQLAlchemy database session
        """
        self.db = db

    def create(self, name: str) -> Category:
        """
        Create a new category.

        Args:
            name: Category name (must be unique, case-insensitive)

        Returns:
            Created Category instance

        Raises:
            ConflictError: If name already exists
            ValidationError: If name is blank
        """
        if not name or not name.strip():
            raise ValidationError("Category name cannot be empty", field="name")
        name = name.strip()

        # Case-insensitive uniqueness
        existing = (
            self.db.query(Category)
            .filter(func.lower(Category.name) == func.lower(name))
            .first()
        )
        if existing:
            raise ConflictError(f"Category with name '{name}' already exists")

        try:
            category = Category(name=name)
            self.db.add(category)
            self.db.commit()
            self.db.refresh(category)

            logger.info(f"Created category: {category.name} (id={category.id})")
            return category

        except IntegrityError as e:
            self.db.rollback()
            logger.error(f"Failed to create category '{name}': {e}")
            raise ConflictError(f"Category with name '{name}' already exists")

    def get_by_id(self, category_id: int) -> Category:
        """
        Get a category by ID.

        Args:
            category_id: Internal database ID

        Returns:
            Category instance

        Raises:
            NotFoundError: If category not found
        """
        category = self.db.query(Category).filter(Category.id == category_id).first()
        if not category:
            raise NotFoundError("Category", category_id)
        return category

    def list(self, from_: int = 0, size: int = 10) -> List[Category]:
        """List categories ordered by id, one page at a time."""
        offset, limit = page_bounds(from_, size)
        return (
            self.db.query(Category)
            .order_by(Category.id.asc())
            .offset(offset)
            .limit(limit)
            .all()
        )
