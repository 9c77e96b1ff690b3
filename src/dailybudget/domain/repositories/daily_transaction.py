"""Daily transaction repository protocol."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional, Protocol, runtime_checkable

from ...models.daily_transaction import DailyTransaction


@runtime_checkable
class DailyTransactionRepository(Protocol):
    """Repository for managing daily transaction entities."""

    def get_by_id(self, transaction_id: int) -> Optional[DailyTransaction]:
        """Retrieve a transaction by ID."""
        ...

    def list_for_client(
        self, client_id: int, *, limit: int = 100, offset: int = 0
    ) -> list[DailyTransaction]:
        """List a client's transactions, newest first."""
        ...

    def filter_by_date_range(
        self, client_id: int, start_date: date, end_date: date
    ) -> list[DailyTransaction]:
        """Get a client's transactions within an inclusive date range."""
        ...

    def list_for_budget(self, budget_id: int) -> list[DailyTransaction]:
        """Get all transactions booked against a budget."""
        ...

    def create(self, transaction: DailyTransaction) -> DailyTransaction:
        """Insert a new transaction."""
        ...

    def update(self, transaction: DailyTransaction) -> DailyTransaction:
        """Save a full transaction row."""
        ...

    def delete(self, transaction: DailyTransaction) -> None:
        """Delete a transaction."""
        ...

    def sum_expenses(self, client_id: int, start_date: date, end_date: date) -> Decimal:
        """Sum expense amounts within an inclusive date range."""
        ...

    def get_period_totals(
        self, client_id: int, start_date: date, end_date: date
    ) -> dict[str, Decimal]:
        """Get income and expense totals within an inclusive date range."""
        ...
