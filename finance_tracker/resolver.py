"""Period resolution: which transactions are active in a given month.

Membership rules, evaluated per transaction against a :class:`Period`:

* a type filter, when given, excludes every other transaction type;
* a fixed transaction is active from its own month onward, forever;
* any other transaction is active only in the month of its date;
* with ``carry_overdue`` an unpaid, non-fixed expense dated before the period
  is carried into it until it is paid or deleted.

Every function here is pure and returns new tuples; caller-owned sequences are
never reordered or mutated.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import AbstractSet, Iterable, Optional

from .models import Transaction, TransactionType
from .periods import Period


@dataclass(frozen=True, slots=True)
class ViewPolicy:
    """Resolution rules used by one screen."""

    types: frozenset[TransactionType]
    carry_overdue: bool = False

    def apply(self, transactions: Iterable[Transaction], period: Period) -> tuple[Transaction, ...]:
        return resolve(transactions, period, self.types, carry_overdue=self.carry_overdue)


DASHBOARD_VIEW = ViewPolicy(frozenset({TransactionType.INCOME, TransactionType.EXPENSE}))
INCOME_VIEW = ViewPolicy(frozenset({TransactionType.INCOME}))
EXPENSE_VIEW = ViewPolicy(frozenset({TransactionType.EXPENSE}), carry_overdue=True)
CONTRIBUTIONS_VIEW = ViewPolicy(frozenset({TransactionType.INVESTMENT}))


def is_member(
    transaction: Transaction,
    period: Period,
    types: Optional[AbstractSet[TransactionType]] = None,
    *,
    carry_overdue: bool = False,
) -> bool:
    if types is not None and transaction.type not in types:
        return False
    if transaction.is_fixed:
        return transaction.date <= period.last_day
    if period.contains(transaction.date):
        return True
    return carry_overdue and is_overdue(transaction, period)


def is_overdue(transaction: Transaction, period: Period) -> bool:
    """An unpaid one-off expense dated before ``period`` starts."""

    return (
        transaction.type is TransactionType.EXPENSE
        and not transaction.is_fixed
        and not transaction.is_paid
        and transaction.date < period.first_day
    )


def resolve(
    transactions: Iterable[Transaction],
    period: Period,
    types: Optional[AbstractSet[TransactionType]] = None,
    *,
    carry_overdue: bool = False,
) -> tuple[Transaction, ...]:
    """Return the members of ``period`` in input order."""

    return tuple(
        transaction
        for transaction in transactions
        if is_member(transaction, period, types, carry_overdue=carry_overdue)
    )


def investment_history(transactions: Iterable[Transaction]) -> tuple[Transaction, ...]:
    """All investment contributions regardless of period."""

    return tuple(transaction for transaction in transactions if transaction.is_investment)


def sorted_by_date(transactions: Iterable[Transaction], *, newest_first: bool = False) -> tuple[Transaction, ...]:
    """Return a date-ordered copy for display; ties keep their input order."""

    return tuple(sorted(transactions, key=lambda transaction: transaction.date, reverse=newest_first))
