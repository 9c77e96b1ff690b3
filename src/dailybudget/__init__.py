"""DailyBudget: monthly budget and daily transaction balance tracking."""

from __future__ import annotations

from .config import BaseConfig, DevConfig
from .services import DailyTransactionService, ExpenseAggregator, MonthlyBudgetService

__all__ = [
    "BaseConfig",
    "DailyTransactionService",
    "DevConfig",
    "ExpenseAggregator",
    "MonthlyBudgetService",
]
