"""Reductions of a resolved transaction set into totals and series.

All functions are pure. Aggregating an empty set yields the identity value:
zero for sums and an all-zero sequence for series.
"""
from __future__ import annotations

from collections import defaultdict
from decimal import Decimal
from typing import AbstractSet, Iterable, Optional

from .models import ZERO, AnnualSeries, SettlementSplit, Transaction, TransactionType
from .periods import Period, months_of
from .resolver import DASHBOARD_VIEW


def sum_by_type(transactions: Iterable[Transaction], type_: TransactionType) -> Decimal:
    return sum((t.amount for t in transactions if t.type is type_), ZERO)


def settlement_split(transactions: Iterable[Transaction]) -> SettlementSplit:
    total = ZERO
    settled = ZERO
    for transaction in transactions:
        total += transaction.amount
        if transaction.is_paid:
            settled += transaction.amount
    return SettlementSplit(total=total, settled=settled, pending=total - settled)


def net_balance(transactions: Iterable[Transaction]) -> Decimal:
    """Cash left after income, expenses and investment contributions."""

    balance = ZERO
    for transaction in transactions:
        if transaction.type is TransactionType.INCOME:
            balance += transaction.amount
        else:
            balance -= transaction.amount
    return balance


def category_totals(
    transactions: Iterable[Transaction],
    types: Optional[AbstractSet[TransactionType]] = None,
) -> dict[str, Decimal]:
    totals: dict[str, Decimal] = defaultdict(lambda: ZERO)
    for transaction in transactions:
        if types is not None and transaction.type not in types:
            continue
        totals[transaction.category] += transaction.amount
    return dict(totals)


def daily_cumulative_balance(period: Period, transactions: Iterable[Transaction]) -> tuple[Decimal, ...]:
    """Running balance at the end of each day of ``period``.

    Transactions are bucketed by day-of-month, so a fixed transaction lands on
    the same day every month. A day the month does not have (the 31st in
    February) matches no bucket. Investments do not move this balance.
    """

    movements = [ZERO] * period.days_in_month
    for transaction in transactions:
        index = transaction.date.day - 1
        if index >= period.days_in_month:
            continue
        if transaction.type is TransactionType.INCOME:
            movements[index] += transaction.amount
        elif transaction.type is TransactionType.EXPENSE:
            movements[index] -= transaction.amount

    balances = []
    running = ZERO
    for movement in movements:
        running += movement
        balances.append(running)
    return tuple(balances)


def annual_series(transactions: Iterable[Transaction], year: int) -> AnnualSeries:
    """Income and expense per month of ``year``.

    Each month is resolved on its own since fixed-transaction eligibility
    depends on the month being evaluated.
    """

    snapshot = tuple(transactions)
    incomes = []
    expenses = []
    for period in months_of(year):
        members = DASHBOARD_VIEW.apply(snapshot, period)
        incomes.append(sum_by_type(members, TransactionType.INCOME))
        expenses.append(sum_by_type(members, TransactionType.EXPENSE))

    total_income = sum(incomes, ZERO)
    total_expense = sum(expenses, ZERO)
    return AnnualSeries(
        year=year,
        income_by_month=tuple(incomes),
        expense_by_month=tuple(expenses),
        total_income=total_income,
        total_expense=total_expense,
        result=total_income - total_expense,
    )
