"""SQLModel implementation of Category repository."""

from __future__ import annotations

from typing import Optional

from sqlmodel import Session, select

from ...models.category import Category


class SQLModelCategoryRepository:
    """Category repository bound to one unit-of-work session."""

    def __init__(self, session: Session):
        self.session = session

    def get_by_id(self, category_id: int) -> Optional[Category]:
        """Retrieve a category by ID.

        Ownership is not filtered here so callers can tell a missing category
        apart from one that belongs to another client.
        """
        return self.session.get(Category, category_id)

    def list_for_client(self, client_id: int) -> list[Category]:
        statement = (
            select(Category)
            .where(Category.client_id == client_id)
            .order_by(Category.name)  # type: ignore
        )
        return list(self.session.exec(statement).all())

    def create(self, category: Category) -> Category:
        self.session.add(category)
        self.session.flush()
        self.session.refresh(category)
        return category
