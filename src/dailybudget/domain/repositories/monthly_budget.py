"""Monthly budget repository protocol."""

from __future__ import annotations

from decimal import Decimal
from typing import Optional, Protocol, runtime_checkable

from ...models.monthly_budget import MonthlyBudget


@runtime_checkable
class MonthlyBudgetRepository(Protocol):
    """Repository for managing monthly budget entities."""

    def get_by_id(self, budget_id: int, *, for_update: bool = False) -> Optional[MonthlyBudget]:
        """Retrieve a budget by ID, optionally locking the row."""
        ...

    def get_for_month(
        self, client_id: int, year: int, month: int, *, for_update: bool = False
    ) -> Optional[MonthlyBudget]:
        """Get the budget for a client's (year, month)."""
        ...

    def list_for_client(self, client_id: int) -> list[MonthlyBudget]:
        """List a client's budgets, newest period first."""
        ...

    def create(self, budget: MonthlyBudget) -> MonthlyBudget:
        """Insert a new budget."""
        ...

    def update(self, budget: MonthlyBudget) -> MonthlyBudget:
        """Save a full budget row."""
        ...

    def add_to_remaining_balance(self, budget_id: int, delta: Decimal) -> Optional[MonthlyBudget]:
        """Atomically shift the remaining balance by ``delta``."""
        ...

    def delete(self, budget: MonthlyBudget) -> None:
        """Delete a budget and its transactions."""
        ...
