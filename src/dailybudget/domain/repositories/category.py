"""Category repository protocol."""

from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable

from ...models.category import Category


@runtime_checkable
class CategoryRepository(Protocol):
    """Repository for managing category entities."""

    def get_by_id(self, category_id: int) -> Optional[Category]:
        """Retrieve a category by ID regardless of owner."""
        ...

    def list_for_client(self, client_id: int) -> list[Category]:
        """List a client's categories."""
        ...

    def create(self, category: Category) -> Category:
        """Create a new category."""
        ...
