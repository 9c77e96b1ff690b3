"""Daily transaction ledger.

Each mutation and its budget adjustments commit together: a transaction row
never exists without its balance effect, and a cross-month move never leaves
the effect half-migrated.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Optional, Union

from sqlmodel import Session

from ..domain.repositories import CategoryRepository, DailyTransactionRepository
from ..errors import ForbiddenError, NotFoundError, ValidationError
from ..infra.database import SessionFactory
from ..infra.repositories import SQLModelCategoryRepository, SQLModelDailyTransactionRepository
from ..logging_config import get_logger
from ..models.category import Category
from ..models.daily_transaction import DailyTransaction, TransactionType
from .budget_policy import MoneyLike, month_bounds, parse_date, to_money, to_positive_money
from .monthly_budgets import MonthlyBudgetService
from .unit_of_work import DEFAULT_RETRY_ATTEMPTS, run_unit_of_work

DateLike = Union[date, datetime, str]


def coerce_transaction_type(value: Union[TransactionType, str]) -> TransactionType:
    """Accept the enum or its string value ("income" / "expense")."""

    if isinstance(value, TransactionType):
        return value
    try:
        return TransactionType(str(value).strip().lower())
    except ValueError as exc:
        raise ValidationError(f"Invalid transaction type: {value!r}") from exc


def _clean_description(value: str) -> str:
    text = (value or "").strip()
    if not text:
        raise ValidationError("Description cannot be empty")
    return text


class DailyTransactionService:
    """Create, edit and delete daily transactions while keeping budgets balanced."""

    def __init__(
        self,
        session_factory: SessionFactory,
        *,
        budgets: Optional[MonthlyBudgetService] = None,
        logger: Optional[logging.Logger] = None,
        retry_attempts: int = DEFAULT_RETRY_ATTEMPTS,
    ):
        self.session_factory = session_factory
        self.logger = logger or get_logger("services.daily_transactions")
        self.retry_attempts = retry_attempts
        self.budgets = budgets or MonthlyBudgetService(
            session_factory, logger=self.logger, retry_attempts=retry_attempts
        )

    def _run(self, operation: str, work):
        return run_unit_of_work(
            self.session_factory,
            work,
            logger=self.logger,
            operation=operation,
            attempts=self.retry_attempts,
        )

    def _require_transaction(self, session: Session, transaction_id: int) -> DailyTransaction:
        repo: DailyTransactionRepository = SQLModelDailyTransactionRepository(session)
        txn = repo.get_by_id(transaction_id)
        if txn is None:
            raise NotFoundError("Daily transaction", transaction_id)
        return txn

    def _require_category(self, session: Session, category_id: int, client_id: int) -> Category:
        categories: CategoryRepository = SQLModelCategoryRepository(session)
        category = categories.get_by_id(category_id)
        if category is None:
            raise NotFoundError("Category", category_id)
        if category.client_id != client_id:
            raise ForbiddenError(f"Category {category_id} does not belong to client {client_id}")
        return category

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def create(
        self,
        *,
        description: str,
        amount: MoneyLike,
        txn_type: Union[TransactionType, str],
        occurred_on: DateLike,
        client_id: int,
        category_id: Optional[int] = None,
    ) -> DailyTransaction:
        """Book a transaction against the month of ``occurred_on``.

        The month's budget is created on first use. The stored snapshot is the
        budget's remaining balance right after this transaction was applied.
        """

        description = _clean_description(description)
        amount = to_positive_money(amount)
        kind = coerce_transaction_type(txn_type)
        day = parse_date(occurred_on)

        def work(session: Session) -> DailyTransaction:
            self.budgets.require_client_in(session, client_id)
            if category_id is not None:
                self._require_category(session, category_id, client_id)

            budget = self.budgets.get_or_create_in(session, client_id, day.year, day.month)
            budget = self.budgets.apply_delta_in(
                session, budget.id, amount, is_income=kind == TransactionType.INCOME
            )
            txn = DailyTransaction(
                description=description,
                amount=amount,
                txn_type=kind,
                occurred_on=day,
                remaining_balance_after_transaction=to_money(budget.remaining_balance),
                client_id=client_id,
                category_id=category_id,
                monthly_budget_id=budget.id,
            )
            return SQLModelDailyTransactionRepository(session).create(txn)

        txn = self._run("create_daily_transaction", work)
        self.logger.info(
            "Daily transaction created",
            extra={
                "transaction_id": txn.id,
                "client_id": client_id,
                "budget_id": txn.monthly_budget_id,
                "txn_type": kind.value,
                "amount": str(amount),
            },
        )
        return txn

    def update(
        self,
        transaction_id: int,
        *,
        description: Optional[str] = None,
        amount: Optional[MoneyLike] = None,
        txn_type: Optional[Union[TransactionType, str]] = None,
        occurred_on: Optional[DateLike] = None,
        category_id: Optional[int] = None,
    ) -> DailyTransaction:
        """Apply a partial edit; ``None`` leaves a field unchanged.

        When the amount or type changes, or the date moves to another month,
        the original effect is reversed on the original budget and the new one
        applied to the target budget (created if the month is new). Edits that
        leave all three balance-relevant fields where they were skip the
        balance math and keep the existing snapshot.
        """

        new_description = _clean_description(description) if description is not None else None
        new_amount = to_positive_money(amount) if amount is not None else None
        new_type = coerce_transaction_type(txn_type) if txn_type is not None else None
        new_day = parse_date(occurred_on) if occurred_on is not None else None

        def work(session: Session) -> tuple[DailyTransaction, bool]:
            txn = self._require_transaction(session, transaction_id)

            if category_id is not None and category_id != txn.category_id:
                self._require_category(session, category_id, txn.client_id)
                txn.category_id = category_id
            if new_description is not None:
                txn.description = new_description

            original_amount = to_money(txn.amount)
            original_type = coerce_transaction_type(txn.txn_type)
            original_day = txn.occurred_on

            target_amount = new_amount if new_amount is not None else original_amount
            target_type = new_type if new_type is not None else original_type
            target_day = new_day if new_day is not None else original_day
            month_changed = (target_day.year, target_day.month) != (
                original_day.year,
                original_day.month,
            )

            rebalanced = (
                target_amount != original_amount
                or target_type != original_type
                or month_changed
            )
            if rebalanced:
                self.budgets.get_in(session, txn.monthly_budget_id, for_update=True)
                # reverse exactly what was applied before
                self.budgets.apply_delta_in(
                    session,
                    txn.monthly_budget_id,
                    original_amount,
                    is_income=original_type != TransactionType.INCOME,
                )
                target_budget_id = txn.monthly_budget_id
                if month_changed:
                    target_budget_id = self.budgets.get_or_create_in(
                        session, txn.client_id, target_day.year, target_day.month
                    ).id
                target_budget = self.budgets.apply_delta_in(
                    session,
                    target_budget_id,
                    target_amount,
                    is_income=target_type == TransactionType.INCOME,
                )
                txn.monthly_budget_id = target_budget_id
                txn.remaining_balance_after_transaction = to_money(target_budget.remaining_balance)

            txn.amount = target_amount
            txn.txn_type = target_type
            txn.occurred_on = target_day
            return SQLModelDailyTransactionRepository(session).update(txn), rebalanced

        txn, rebalanced = self._run("update_daily_transaction", work)
        self.logger.info(
            "Daily transaction updated",
            extra={
                "transaction_id": transaction_id,
                "budget_id": txn.monthly_budget_id,
                "rebalanced": rebalanced,
            },
        )
        return txn

    def delete(self, transaction_id: int) -> None:
        """Reverse the transaction's effect on its budget, then remove it."""

        def work(session: Session) -> int:
            txn = self._require_transaction(session, transaction_id)
            budget_id = txn.monthly_budget_id
            self.budgets.get_in(session, budget_id, for_update=True)
            self.budgets.apply_delta_in(
                session, budget_id, txn.amount, is_income=not txn.is_income
            )
            SQLModelDailyTransactionRepository(session).delete(txn)
            return budget_id

        budget_id = self._run("delete_daily_transaction", work)
        self.logger.info(
            "Daily transaction deleted",
            extra={"transaction_id": transaction_id, "budget_id": budget_id},
        )

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get(self, transaction_id: int) -> DailyTransaction:
        return self._run(
            "get_daily_transaction",
            lambda session: self._require_transaction(session, transaction_id),
        )

    def list_for_client(
        self, client_id: int, *, limit: int = 100, offset: int = 0
    ) -> list[DailyTransaction]:
        def work(session: Session) -> list[DailyTransaction]:
            self.budgets.require_client_in(session, client_id)
            return SQLModelDailyTransactionRepository(session).list_for_client(
                client_id, limit=max(1, limit), offset=max(0, offset)
            )

        return self._run("list_daily_transactions", work)

    def list_by_date(self, client_id: int, day: DateLike) -> list[DailyTransaction]:
        target = parse_date(day)
        return self._list_range(client_id, target, target)

    def list_by_month(self, client_id: int, year: int, month: int) -> list[DailyTransaction]:
        start, end = month_bounds(year, month)
        return self._list_range(client_id, start, end)

    def _list_range(self, client_id: int, start: date, end: date) -> list[DailyTransaction]:
        def work(session: Session) -> list[DailyTransaction]:
            self.budgets.require_client_in(session, client_id)
            return SQLModelDailyTransactionRepository(session).filter_by_date_range(
                client_id, start, end
            )

        return self._run("list_daily_transactions", work)

    def list_for_budget(self, budget_id: int) -> list[DailyTransaction]:
        def work(session: Session) -> list[DailyTransaction]:
            self.budgets.get_in(session, budget_id)
            return SQLModelDailyTransactionRepository(session).list_for_budget(budget_id)

        return self._run("list_budget_transactions", work)
