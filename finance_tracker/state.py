"""Explicit navigation and edit state for the month-based screens."""
from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date
from typing import Optional

from .periods import Period


@dataclass(frozen=True, slots=True)
class ViewState:
    """Selected month plus the transaction being edited, if any.

    Handlers receive a state and return a new one instead of mutating
    module-level variables.
    """

    selected_period: Period
    edit_target_id: Optional[int] = None

    @classmethod
    def initial(cls, today: Optional[date] = None) -> ViewState:
        return cls(Period.of(today or date.today()))

    def navigate(self, delta: int) -> ViewState:
        return replace(self, selected_period=self.selected_period.shift(delta))

    def begin_edit(self, transaction_id: int) -> ViewState:
        return replace(self, edit_target_id=transaction_id)

    def end_edit(self) -> ViewState:
        return replace(self, edit_target_id=None)

    @property
    def is_editing(self) -> bool:
        return self.edit_target_id is not None
