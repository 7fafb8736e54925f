"""Parse-and-validate helpers turning raw input into domain values.

Form fields and imported rows arrive as loosely typed values. Instead of
coercing them (which lets invalid amounts poison every later sum) the helpers
here return a :class:`ParseResult` holding either the parsed value or the list
of field errors. Nothing in this module raises for bad input, so batch callers
can collect every failure.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Generic, Mapping, Optional, TypeVar

from dateutil import parser as date_parser

from .models import Transaction, TransactionType

T = TypeVar("T")

_TRUE_VALUES = {"1", "true", "yes", "y", "on", "sim", "x"}
_FALSE_VALUES = {"", "0", "false", "no", "n", "off", "nao", "não", "none", "nan"}

# Accepted amounts: magnitude below 10**15, at most two decimal places.
MAX_AMOUNT = Decimal("1e15")
CENTS = Decimal("0.01")


@dataclass(frozen=True, slots=True)
class FieldError:
    field: str
    message: str


@dataclass(frozen=True, slots=True)
class ParseResult(Generic[T]):
    """Either a parsed ``value`` or one or more :class:`FieldError`."""

    value: Optional[T] = None
    errors: tuple[FieldError, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.errors

    @classmethod
    def success(cls, value: T) -> ParseResult[T]:
        return cls(value=value)

    @classmethod
    def failure(cls, *errors: FieldError) -> ParseResult[T]:
        return cls(errors=tuple(errors))


def parse_transaction(
    raw: Mapping[str, object],
    *,
    type_: Optional[TransactionType] = None,
    transaction_id: Optional[int] = None,
) -> ParseResult[Transaction]:
    """Build a :class:`Transaction` from raw field values.

    Args:
        raw: Mapping with ``title``, ``amount``, ``date``, ``category`` and,
            unless ``type_`` is given, ``type``. ``is_fixed``/``is_paid`` are
            optional and default to ``False``.
        type_: Forces the transaction type, as the income/expense/investment
            screens each only create their own kind.
        transaction_id: Identifier of the record being edited, if any. Falls
            back to ``raw["id"]``.

    Investments are always stored as settled, non-recurring contributions, so
    their ``is_fixed``/``is_paid`` inputs are ignored.
    """

    errors: list[FieldError] = []

    title = _clean_string(raw.get("title"))
    if not title:
        errors.append(FieldError("title", "Title is required."))

    category = _clean_string(raw.get("category"))
    if not category:
        errors.append(FieldError("category", "Category is required."))

    amount = parse_amount(raw.get("amount"))
    if amount is None:
        errors.append(FieldError("amount", "Amount must be a number."))
    elif amount < 0:
        errors.append(FieldError("amount", "Amount must not be negative."))
    else:
        range_error = _amount_range_error("amount", amount)
        if range_error:
            errors.append(range_error)

    occurred_on = parse_date(raw.get("date"))
    if occurred_on is None:
        errors.append(FieldError("date", "Date must be a valid calendar date (YYYY-MM-DD)."))

    resolved_type = type_ or _parse_type(raw.get("type"))
    if resolved_type is None:
        errors.append(FieldError("type", "Type must be one of: income, expense, investment."))

    is_fixed = _parse_bool(raw.get("is_fixed"))
    if is_fixed is None:
        errors.append(FieldError("is_fixed", "Expected a boolean value."))
    is_paid = _parse_bool(raw.get("is_paid"))
    if is_paid is None:
        errors.append(FieldError("is_paid", "Expected a boolean value."))

    if transaction_id is None:
        transaction_id, id_error = _parse_id(raw.get("id"))
        if id_error:
            errors.append(id_error)

    if errors:
        return ParseResult.failure(*errors)

    if resolved_type is TransactionType.INVESTMENT:
        is_fixed, is_paid = False, True

    return ParseResult.success(
        Transaction(
            id=transaction_id,
            title=title,
            amount=amount,
            date=occurred_on,
            category=category,
            type=resolved_type,
            is_fixed=is_fixed,
            is_paid=is_paid,
        )
    )


def parse_portfolio_value(raw: object) -> ParseResult[Decimal]:
    """Validate a manually entered portfolio value."""

    if not _clean_string(raw):
        return ParseResult.failure(FieldError("value", "Portfolio value is required."))
    value = parse_amount(raw)
    if value is None:
        return ParseResult.failure(FieldError("value", "Portfolio value must be a number."))
    range_error = _amount_range_error("value", value)
    if range_error:
        return ParseResult.failure(range_error)
    return ParseResult.success(value)


def parse_amount(value: object) -> Optional[Decimal]:
    """Parse a finite decimal, accepting ``'`` and spaces as thousands separators.

    When both separators appear the last one marks the decimals, so
    ``1.234,56`` and ``1,234.56`` parse alike.
    Returns ``None`` when the input is not a finite number.
    """

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        parsed = value
    elif isinstance(value, (int, float)):
        parsed = Decimal(repr(value)) if isinstance(value, float) else Decimal(value)
    else:
        stringified = str(value).strip()
        if not stringified:
            return None
        normalised = stringified.replace("'", "").replace(" ", "")
        if "," in normalised and normalised.rfind(",") > normalised.rfind("."):
            normalised = normalised.replace(".", "").replace(",", ".")
        else:
            normalised = normalised.replace(",", "")
        try:
            parsed = Decimal(normalised)
        except (InvalidOperation, ValueError):
            return None
    if not parsed.is_finite():
        return None
    return parsed


def parse_date(value: object) -> Optional[date]:
    """Parse an ISO date, falling back to day-first formats such as ``31/01/2024``."""

    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    stringified = str(value).strip()
    if not stringified or stringified in {"NaT", "nan"}:
        return None
    try:
        return date_parser.isoparse(stringified).date()
    except (ValueError, OverflowError):
        pass
    try:
        return date_parser.parse(stringified, dayfirst=True).date()
    except (ValueError, OverflowError):
        return None


def _amount_range_error(field: str, amount: Decimal) -> Optional[FieldError]:
    if amount.copy_abs() >= MAX_AMOUNT:
        return FieldError(field, "Amount is too large.")
    if amount.quantize(CENTS) != amount:
        return FieldError(field, "Amount must have at most two decimal places.")
    return None


def _parse_type(value: object) -> Optional[TransactionType]:
    if isinstance(value, TransactionType):
        return value
    try:
        return TransactionType(_clean_string(value).lower())
    except ValueError:
        return None


def _parse_bool(value: object) -> Optional[bool]:
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    lowered = _clean_string(value).lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    return None


def _parse_id(value: object) -> tuple[Optional[int], Optional[FieldError]]:
    text = _clean_string(value)
    if not text or text.lower() in {"none", "null", "nan"}:
        return None, None
    try:
        return int(text), None
    except ValueError:
        return None, FieldError("id", "Identifier must be an integer.")


def _clean_string(value: object) -> str:
    if value is None:
        return ""
    return str(value).strip()
