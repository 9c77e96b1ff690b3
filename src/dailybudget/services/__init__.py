"""Service module exports."""

from . import aggregates, budget_policy, daily_transactions, monthly_budgets
from .aggregates import ExpenseAggregator, MonthlySummary
from .daily_transactions import DailyTransactionService
from .monthly_budgets import MonthlyBudgetService

__all__ = [
    "aggregates",
    "budget_policy",
    "daily_transactions",
    "monthly_budgets",
    "DailyTransactionService",
    "ExpenseAggregator",
    "MonthlyBudgetService",
    "MonthlySummary",
]
