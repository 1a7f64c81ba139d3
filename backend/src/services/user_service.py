"""
User service for managing platform users.

Provides the admin operations on users (create, list, delete) and the
lookup used by the event and participation-request services.

Design:
- Email is globally unique
- Users are referenced by events and requests by id only
- Deleting a user removes their events and requests (database CASCADE)
"""

from typing import List, Optional

from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError

from backend.src.models import User
from backend.src.utils.logging_config import get_logger
from backend.src.utils.pagination import page_bounds
from backend.src.services.exceptions import NotFoundError, ConflictError, ValidationError


logger = get_logger("services")


class UserService:
    """
    Service for managing users.

    Usage:
        >>> service = UserService(db_session)
        >>> user = service.create(name="Jane Doe", email="jane@example.com")
        >>> service.get_by_id(user.id).email
        'jane@example.com'
    """

    def __init__(self, db: Session):
        """
        Initialize user service.

        Args:
            db: SQLAlchemy database session
        """
        self.db = db

    def create(self, name: str, email: str) -> User:
        """
        Create a new user.

        Args:
            name: Display name
            email: Email address (must be globally unique)

        Returns:
            Created User instance

        Raises:
            ConflictError: If email already exists
            ValidationError: If name or email is blank or malformed
        """
        if not name or not name.strip():
            raise ValidationError("Name cannot be empty", field="name")

        if not email or not email.strip():
            raise ValidationError("Email cannot be empty", field="email")

        email = email.strip().lower()
        if not self._is_valid_email(email):
            raise ValidationError(f"Invalid email format: {email}", field="email")

        existing = self.db.query(User).filter(User.email == email).first()
        if existing:
            raise ConflictError(f"User with email '{email}' already exists")

        try:
            user = User(name=name.strip(), email=email)
            self.db.add(user)
            self.db.commit()
            self.db.refresh(user)

            logger.info(f"Created user: {user.email} (id={user.id})")
            return user

        except IntegrityError as e:
            self.db.rollback()
            logger.error(f"Failed to create user '{email}': {e}")
            raise ConflictError(f"User with email '{email}' already exists")

    def get_by_id(self, user_id: int) -> User:
        """
        Get a user by ID.

        Raises:
            NotFoundError: If user not found
        """
        user = self.db.query(User).filter(User.id == user_id).first()
        if not user:
            raise NotFoundError("User", user_id)
        return user

    def list(
        self,
        ids: Optional[List[int]] = None,
        from_: int = 0,
        size: int = 10,
    ) -> List[User]:
        """
        List users ordered by id.

        Args:
            ids: Restrict to these user ids (all users when None or empty)
            from_: Item offset
            size: Page length

        Returns:
            List of User instances
        """
        offset, limit = page_bounds(from_, size)

        query = self.db.query(User)
        if ids:
            query = query.filter(User.id.in_(ids))

        return query.order_by(User.id.asc()).offset(offset).limit(limit).all()

    def delete(self, user_id: int) -> None:
        """
        Delete a user.

        Raises:
            NotFoundError: If user not found
        """
        user = self.get_by_id(user_id)

        email = user.email
        self.db.delete(user)
        self.db.commit()
        logger.info(f"Deleted user: {email} (id={user_id})")

    def _is_valid_email(self, email: str) -> bool:
        """Basic validation: one local part, a domain with a dot."""
        if "@" not in email:
            return False

        local, domain = email.rsplit("@", 1)
        if not local or not domain:
            return False

        return "." in domain and not domain.startswith(".") and not domain.endswith(".")
