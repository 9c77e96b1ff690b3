"""Concrete repository implementations using SQLModel."""

from .category import SQLModelCategoryRepository
from .client import SQLModelClientRepository
from .daily_transaction import SQLModelDailyTransactionRepository
from .monthly_budget import SQLModelMonthlyBudgetRepository

__all__ = [
    "SQLModelCategoryRepository",
    "SQLModelClientRepository",
    "SQLModelDailyTransactionRepository",
    "SQLModelMonthlyBudgetRepository",
]
