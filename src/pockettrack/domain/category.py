"""Category domain service."""

from typing import Optional
from pockettrack.database.base import RecordStore
from pockettrack.domain.entities import Category, EntityKind, TransactionType
from pockettrack.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    category_not_found,
    required_field,
)

DEFAULT_CATEGORIES: list[tuple[str, TransactionType]] = [
    ("Salary", TransactionType.INCOME),
    ("Freelance", TransactionType.INCOME),
    ("Investments", TransactionType.INCOME),
    ("Other Income", TransactionType.INCOME),
    ("Food", TransactionType.EXPENSE),
    ("Transport", TransactionType.EXPENSE),
    ("Housing", TransactionType.EXPENSE),
    ("Health", TransactionType.EXPENSE),
    ("Education", TransactionType.EXPENSE),
    ("Leisure", TransactionType.EXPENSE),
    ("Clothing", TransactionType.EXPENSE),
    ("Bills", TransactionType.EXPENSE),
    ("Other Expenses", TransactionType.EXPENSE),
]


class CategoryService:
    """Service for managing per-user categories."""

    def __init__(self, db: RecordStore):
        """Initialize category service.

        Args:
            db: Record store instance
        """
        self.db = db

    def create_category(self, user_id: str, name: str, type: TransactionType) -> Category:
        """Create a category.

        Args:
            user_id: Owner of the category
            name: Category name
            type: Income or expense

        Returns:
            The created category

        Raises:
            ValidationError: If the name is empty or the type unknown
            ConflictError: If the user already has a category with this name and type
        """
        name = (name or "").strip()
        if not name:
            raise ValidationError(required_field("name"))
        try:
            type = TransactionType(type)
        except ValueError:
            raise ValidationError(f"Unknown category type '{type}'")

        self._check_unique(user_id, name, type)
        return self.db.insert(
            EntityKind.CATEGORIES, {"user_id": user_id, "name": name, "type": type}
        )

    def seed_defaults(self, user_id: str) -> list[Category]:
        """Create the default category set for a new user."""
        return [
            self.db.insert(EntityKind.CATEGORIES, {"user_id": user_id, "name": name, "type": type})
            for name, type in DEFAULT_CATEGORIES
        ]

    def get_category(self, category_id: str) -> Optional[Category]:
        """Get category by ID.

        Args:
            category_id: Category ID

        Returns:
            Category entity or None if not found
        """
        return self.db.get(EntityKind.CATEGORIES, category_id)

    def require_category(self, user_id: str, category_id: str) -> Category:
        """Get one of the user's categories by ID or raise NotFoundError."""
        category = self.get_category(category_id)
        if category is None or category.user_id != user_id:
            raise NotFoundError(category_not_found(category_id))
        return category

    def find_category(
        self, user_id: str, name_or_id: str, type: Optional[TransactionType] = None
    ) -> Optional[Category]:
        """Find one of the user's categories by ID or case-insensitive name.

        The same name may exist once per type; pass ``type`` to pick the
        income or expense one. An exact ID match is returned whatever its type.
        """
        category = self.get_category(name_or_id)
        if category is not None and category.user_id == user_id:
            return category
        wanted = name_or_id.strip().lower()
        for category in self.list_categories(user_id, type=type):
            if category.name.lower() == wanted:
                return category
        return None

    def list_categories(
        self, user_id: str, type: Optional[TransactionType] = None
    ) -> list[Category]:
        """List a user's categories.

        Args:
            user_id: Owner of the categories
            type: Optional income/expense filter

        Returns:
            List of categories sorted by type then name
        """
        categories = self.db.query_by_field(EntityKind.CATEGORIES, "user_id", user_id)
        if type is not None:
            categories = [c for c in categories if c.type == TransactionType(type)]
        return sorted(categories, key=lambda c: (c.type.value, c.name.lower()))

    def rename_category(self, user_id: str, category_id: str, name: str) -> Category:
        """Rename a category.

        Raises:
            NotFoundError: If the category does not exist for the user
            ValidationError: If the name is empty
            ConflictError: If the new name is taken
        """
        category = self.require_category(user_id, category_id)
        name = (name or "").strip()
        if not name:
            raise ValidationError(required_field("name"))
        self._check_unique(user_id, name, category.type, exclude_id=category_id)
        self.db.update(EntityKind.CATEGORIES, category_id, {"name": name})
        return self.require_category(user_id, category_id)

    def delete_category(self, user_id: str, category_id: str) -> None:
        """Delete a category.

        Transactions and bills that reference it keep their category ID and
        show as uncategorized.

        Raises:
            NotFoundError: If the category does not exist for the user
        """
        self.require_category(user_id, category_id)
        self.db.delete(EntityKind.CATEGORIES, category_id)

    def _check_unique(
        self, user_id: str, name: str, type: TransactionType, exclude_id: Optional[str] = None
    ) -> None:
        for existing in self.db.query_by_field(EntityKind.CATEGORIES, "user_id", user_id):
            if (
                existing.id != exclude_id
                and existing.type == type
                and existing.name.lower() == name.lower()
            ):
                raise ConflictError(f"Category '{name}' ({type.value}) already exists")
