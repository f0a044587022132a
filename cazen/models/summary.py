"""
Summary Models

Values produced by the aggregation functions and shown on the dashboard
and the budget overview. They carry no identity and are never stored.
"""

import math
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


class CategoryTotal(BaseModel):
    """One slice of the category breakdown."""
    model_config = ConfigDict(frozen=True)

    name: str
    value: Decimal


class GuestCounts(BaseModel):
    """RSVP tally."""
    model_config = ConfigDict(frozen=True)

    confirmed: int = Field(ge=0)
    total: int = Field(ge=0)


class TaskCounts(BaseModel):
    """Checklist tally."""
    model_config = ConfigDict(frozen=True)

    completed: int = Field(ge=0)
    total: int = Field(ge=0)


class BudgetSummary(BaseModel):
    """
    Everything the budget overview shows.

    NOTE: `percentage_spent` is NaN or infinite when the budget used as the
    denominator is zero. Use `progress_value` for anything that needs a
    bounded number.
    """
    model_config = ConfigDict(frozen=True)

    total_estimated: Decimal
    total_spent: Decimal
    budget: Decimal = Field(description="Explicit total budget, or total estimated")
    remaining: Decimal
    percentage_spent: float
    categories: list[CategoryTotal] = Field(default_factory=list)

    @property
    def is_over_budget(self) -> bool:
        return self.remaining < 0

    @property
    def progress_value(self) -> float:
        """Percentage spent clamped to [0, 100] for progress bars."""
        if not math.isfinite(self.percentage_spent):
            return 0.0
        return min(max(self.percentage_spent, 0.0), 100.0)


class DashboardStats(BaseModel):
    """The cards on the home dashboard."""
    model_config = ConfigDict(frozen=True)

    tasks_completed: int = 0
    tasks_total: int = 0
    guests_confirmed: int = 0
    guests_total: int = 0
    budget_spent: Decimal = Decimal("0")
    budget_total: Decimal = Decimal("0")
    progress_percentage: int = Field(default=0, ge=0, le=100)
