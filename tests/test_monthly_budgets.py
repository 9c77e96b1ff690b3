"""Tests for the monthly budget store."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from dailybudget.errors import InvalidAmountError, InvalidDateError, InvalidRangeError, NotFoundError


def test_get_or_create_seeds_blank_budget_from_client_salary(budgets, client):
    budget = budgets.get_or_create(client.id, 2024, 6)

    assert budget.id is not None
    assert budget.client_id == client.id
    assert (budget.year, budget.month) == (2024, 6)
    assert budget.monthly_salary == Decimal("5000.00")
    assert budget.budget_amount == Decimal("0.00")
    assert budget.is_percentage is False
    assert budget.daily_budget == Decimal("0.00")
    assert budget.remaining_balance == Decimal("0.00")
    assert budget.days_in_month == 30


def test_get_or_create_is_idempotent(budgets, client, count_budgets):
    first = budgets.get_or_create(client.id, 2024, 6)
    second = budgets.get_or_create(client.id, 2024, 6)

    assert first.id == second.id
    assert count_budgets(client.id) == 1


def test_get_or_create_honours_salary_override(budgets, client):
    budget = budgets.get_or_create(client.id, 2024, 7, salary="4200")
    assert budget.monthly_salary == Decimal("4200.00")

    # an explicit zero is a real salary, not a request for the default
    unpaid = budgets.get_or_create(client.id, 2024, 8, salary=0)
    assert unpaid.monthly_salary == Decimal("0.00")


def test_override_is_ignored_for_existing_period(budgets, client):
    budgets.get_or_create(client.id, 2024, 6)
    again = budgets.get_or_create(client.id, 2024, 6, salary="100")

    assert again.monthly_salary == Decimal("5000.00")


def test_get_or_create_leap_february(budgets, client):
    assert budgets.get_or_create(client.id, 2024, 2).days_in_month == 29
    assert budgets.get_or_create(client.id, 2023, 2).days_in_month == 28


def test_get_or_create_validation(budgets, client, count_budgets):
    with pytest.raises(InvalidDateError):
        budgets.get_or_create(client.id, 2024, 13)
    with pytest.raises(InvalidAmountError):
        budgets.get_or_create(client.id, 2024, 6, salary="-1")
    with pytest.raises(NotFoundError):
        budgets.get_or_create(999_999, 2024, 6)

    assert count_budgets(client.id) == 0


def test_inactive_client_still_gets_a_budget(budgets, client_factory):
    dormant = client_factory(name="Dormant", is_active=False)

    assert budgets.get_or_create(dormant.id, 2024, 6).client_id == dormant.id


def test_percentage_budget_amount(funded_budget):
    assert funded_budget.budget_amount == Decimal("60.00")
    assert funded_budget.is_percentage is True
    assert funded_budget.remaining_balance == Decimal("3000.00")
    assert funded_budget.daily_budget == Decimal("100.00")


def test_fixed_budget_amount(budgets, client):
    budget = budgets.get_or_create(client.id, 2024, 6)
    budget = budgets.update_budget_amount(budget.id, "750", False)

    assert budget.is_percentage is False
    assert budget.budget_amount == Decimal("750.00")
    assert budget.remaining_balance == Decimal("750.00")
    assert budget.daily_budget == Decimal("25.00")


def test_update_budget_amount_rejects_bad_input(budgets, funded_budget):
    with pytest.raises(InvalidRangeError):
        budgets.update_budget_amount(funded_budget.id, "120", True)
    with pytest.raises(InvalidAmountError):
        budgets.update_budget_amount(funded_budget.id, "-5", False)
    with pytest.raises(NotFoundError):
        budgets.update_budget_amount(999_999, "10", True)

    assert budgets.get(funded_budget.id).remaining_balance == Decimal("3000.00")


def test_negative_fixed_budget_is_rejected(budgets, client):
    budget = budgets.get_or_create(client.id, 2024, 6)
    budgets.update_budget_amount(budget.id, "400", False)

    with pytest.raises(InvalidAmountError):
        budgets.update_budget_amount(budget.id, "-400", False)

    stored = budgets.get(budget.id)
    assert stored.budget_amount == Decimal("400.00")
    assert stored.remaining_balance == Decimal("400.00")


def test_update_budget_amount_resets_remaining_balance(budgets, ledger, client, funded_budget):
    ledger.create(
        description="Groceries",
        amount="200",
        txn_type="expense",
        occurred_on=date(2024, 6, 3),
        client_id=client.id,
    )
    assert budgets.get(funded_budget.id).remaining_balance == Decimal("2800.00")

    budget = budgets.update_budget_amount(funded_budget.id, "50", True)

    # booked transactions are discarded from the balance on a policy change
    assert budget.remaining_balance == Decimal("2500.00")
    assert budget.daily_budget == Decimal("83.33")


def test_update_salary_recomputes_percentage_budget(budgets, funded_budget):
    budget = budgets.update_salary(funded_budget.id, "6000")

    assert budget.monthly_salary == Decimal("6000.00")
    assert budget.remaining_balance == Decimal("3600.00")
    assert budget.daily_budget == Decimal("120.00")


def test_update_salary_leaves_fixed_budget_alone(budgets, client):
    budget = budgets.get_or_create(client.id, 2024, 6)
    budgets.update_budget_amount(budget.id, "900", False)
    budgets.apply_delta(budget.id, "100", False)

    updated = budgets.update_salary(budget.id, "7000")

    assert updated.monthly_salary == Decimal("7000.00")
    assert updated.remaining_balance == Decimal("800.00")
    assert updated.daily_budget == Decimal("30.00")


def test_update_salary_validation(budgets, funded_budget):
    with pytest.raises(InvalidAmountError):
        budgets.update_salary(funded_budget.id, "-10")
    with pytest.raises(NotFoundError):
        budgets.update_salary(999_999, "10")


def test_apply_delta_moves_remaining_balance(budgets, funded_budget):
    after_expense = budgets.apply_delta(funded_budget.id, "100", False)
    assert after_expense.remaining_balance == Decimal("2900.00")

    after_income = budgets.apply_delta(funded_budget.id, "50.25", True)
    assert after_income.remaining_balance == Decimal("2950.25")

    assert budgets.get(funded_budget.id).remaining_balance == Decimal("2950.25")


def test_apply_delta_can_go_negative(budgets, funded_budget):
    budget = budgets.apply_delta(funded_budget.id, "3500", False)

    assert budget.remaining_balance == Decimal("-500.00")


def test_apply_delta_unknown_budget(budgets):
    with pytest.raises(NotFoundError):
        budgets.apply_delta(999_999, "1", False)


def test_find_does_not_create(budgets, client, count_budgets):
    assert budgets.find(client.id, 2024, 6) is None
    assert count_budgets(client.id) == 0

    created = budgets.get_or_create(client.id, 2024, 6)
    assert budgets.find(client.id, 2024, 6).id == created.id


def test_list_for_client_newest_first(budgets, client, client_factory):
    other = client_factory(name="Other")
    budgets.get_or_create(client.id, 2024, 5)
    budgets.get_or_create(client.id, 2024, 7)
    budgets.get_or_create(client.id, 2023, 12)
    budgets.get_or_create(other.id, 2024, 6)

    periods = [(b.year, b.month) for b in budgets.list_for_client(client.id)]

    assert periods == [(2024, 7), (2024, 5), (2023, 12)]


def test_delete_budget_removes_its_transactions(budgets, ledger, client, funded_budget):
    txn = ledger.create(
        description="Taxi",
        amount="30",
        txn_type="expense",
        occurred_on="2024-06-12",
        client_id=client.id,
    )

    budgets.delete(funded_budget.id)

    assert budgets.find(client.id, 2024, 6) is None
    with pytest.raises(NotFoundError):
        ledger.get(txn.id)
    with pytest.raises(NotFoundError):
        budgets.delete(funded_budget.id)
