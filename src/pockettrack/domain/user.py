"""User domain service."""

from datetime import datetime, UTC
from typing import Optional
from pockettrack.database.base import RecordStore
from pockettrack.domain.category import CategoryService
from pockettrack.domain.entities import EntityKind, User as UserEntity
from pockettrack.domain.errors import ConflictError, NotFoundError, ValidationError, required_field, user_not_found

GUEST_NAME = "Guest"


class UserService:
    """Service for managing local user records."""

    def __init__(self, db: RecordStore):
        """Initialize user service.

        Args:
            db: Record store instance
        """
        self.db = db
        self.categories = CategoryService(db)

    def create_user(self, name: str, email: str) -> UserEntity:
        """Create a user and seed the default categories.

        Args:
            name: Display name
            email: Email address, unique among users

        Returns:
            The created user

        Raises:
            ValidationError: If name or email is empty
            ConflictError: If a user with this email already exists
        """
        name = (name or "").strip()
        email = (email or "").strip()
        if not name:
            raise ValidationError(required_field("name"))
        if not email:
            raise ValidationError(required_field("email"))
        if self.find_by_email(email) is not None:
            raise ConflictError(f"User with email '{email}' already exists")

        return self._create(name=name, email=email, is_guest=False)

    def create_guest_user(self) -> UserEntity:
        """Create a guest user without an email and seed the default categories."""
        return self._create(name=GUEST_NAME, email="", is_guest=True)

    def get_user(self, user_id: str) -> Optional[UserEntity]:
        """Get user by ID."""
        return self.db.get(EntityKind.USERS, user_id)

    def find_by_email(self, email: str) -> Optional[UserEntity]:
        """Find a user by email, ignoring case."""
        wanted = email.strip().lower()
        if not wanted:
            return None
        for user in self.db.list_all(EntityKind.USERS):
            if user.email.lower() == wanted:
                return user
        return None

    def list_users(self) -> list[UserEntity]:
        """List all users in creation order."""
        return self.db.list_all(EntityKind.USERS)

    def resolve_user(self, user: str) -> UserEntity:
        """Resolve a user ID or email to a user.

        Raises:
            NotFoundError: If no user matches
        """
        found = self.get_user(user) or self.find_by_email(user)
        if found is None:
            raise NotFoundError(user_not_found(user))
        return found

    def _create(self, name: str, email: str, is_guest: bool) -> UserEntity:
        user = self.db.insert(
            EntityKind.USERS,
            {"name": name, "email": email, "is_guest": is_guest, "created_at": datetime.now(UTC)},
        )
        self.categories.seed_defaults(user.id)
        return user
