"""Calendar-month periods and the date helpers shared by the engine."""
from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date
from typing import Iterable

MONTHS_PER_YEAR = 12


@dataclass(frozen=True, order=True, slots=True)
class Period:
    """A calendar month, i.e. the half-open window ``[first_day, next.first_day)``."""

    year: int
    month: int

    def __post_init__(self) -> None:
        if not 1 <= self.month <= MONTHS_PER_YEAR:
            raise ValueError(f"month must be in 1..12, got {self.month}")
        if not 1 <= self.year <= 9999:
            raise ValueError(f"year must be in 1..9999, got {self.year}")

    @classmethod
    def of(cls, value: date) -> Period:
        return cls(value.year, value.month)

    @classmethod
    def parse(cls, text: str) -> Period:
        """Parse ``YYYY-MM`` into a :class:`Period`."""

        year, _, month = text.strip().partition("-")
        if not month:
            raise ValueError(f"expected YYYY-MM, got {text!r}")
        return cls(int(year), int(month))

    @property
    def first_day(self) -> date:
        return date(self.year, self.month, 1)

    @property
    def days_in_month(self) -> int:
        return calendar.monthrange(self.year, self.month)[1]

    @property
    def last_day(self) -> date:
        return date(self.year, self.month, self.days_in_month)

    def contains(self, value: date) -> bool:
        return value.year == self.year and value.month == self.month

    def shift(self, months: int) -> Period:
        index = self.year * MONTHS_PER_YEAR + (self.month - 1) + months
        year, month_index = divmod(index, MONTHS_PER_YEAR)
        return Period(year, month_index + 1)

    def previous(self) -> Period:
        return self.shift(-1)

    def next(self) -> Period:
        return self.shift(1)

    def __str__(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"


def months_of(year: int) -> list[Period]:
    """Return the twelve periods of ``year`` in calendar order."""

    return [Period(year, month) for month in range(1, MONTHS_PER_YEAR + 1)]


def available_years(dates: Iterable[date], today: date) -> list[int]:
    """Years worth offering in a year picker, newest first.

    The current and the previous year are always present so a comparison is
    possible even on an empty ledger.
    """

    years = {value.year for value in dates}
    years.add(today.year)
    years.add(today.year - 1)
    return sorted(years, reverse=True)


def default_comparison_years(years: list[int]) -> tuple[int, int]:
    """Pick ``(year1, year2)`` for the comparative report from :func:`available_years`."""

    if len(years) >= 2:
        return years[1], years[0]
    current = years[0] if years else date.today().year
    return current - 1, current
