"""
Dashboard Aggregation

Pure functions that turn expense, task and guest records into the
numbers shown on the dashboard and the budget overview.

GUARANTEES:
- No I/O, no state. Same input, same output.
- Records are never modified.
- Input is not validated. Whatever the store returned is summed as-is.

Amounts are summed as Decimal. Missing amounts count as zero.
"""

import math
from decimal import Decimal
from typing import Iterable, Optional, Sequence, Union

from cazen.models.planning import Expense, Guest, GuestStatus, Task, TaskStatus
from cazen.models.summary import (
    BudgetSummary,
    CategoryTotal,
    DashboardStats,
    GuestCounts,
    TaskCounts,
)

Amount = Union[Decimal, int, float]

ZERO = Decimal("0")


def _to_decimal(value: Optional[Amount]) -> Decimal:
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    # str() keeps 0.1 as 0.1 instead of its binary expansion
    return Decimal(str(value))


# =============================================================================
# BUDGET
# =============================================================================

def total_estimated(expenses: Iterable[Expense]) -> Decimal:
    """Sum of estimated amounts."""
    return sum((_to_decimal(e.estimated_amount) for e in expenses), ZERO)


def total_spent(expenses: Iterable[Expense]) -> Decimal:
    """Sum of actual amounts."""
    return sum((_to_decimal(e.actual_amount) for e in expenses), ZERO)


def _budget(expenses: Sequence[Expense], total_budget: Optional[Amount]) -> Decimal:
    if total_budget is not None:
        return _to_decimal(total_budget)
    return total_estimated(expenses)


def remaining(
    expenses: Sequence[Expense],
    total_budget: Optional[Amount] = None,
) -> Decimal:
    """
    Budget left to spend.

    Compares against `total_budget` when given, otherwise against the sum
    of estimates. Negative means over budget.
    """
    return _budget(expenses, total_budget) - total_spent(expenses)


def percentage_spent(
    expenses: Sequence[Expense],
    total_budget: Optional[Amount] = None,
) -> float:
    """
    Share of the budget already spent, in percent.

    A zero budget is not an error: 0/0 gives NaN and x/0 gives an
    infinity with the sign of x, as float division would.
    """
    budget = _budget(expenses, total_budget)
    spent = total_spent(expenses)

    if budget == 0:
        if spent == 0:
            return math.nan
        return math.inf if spent > 0 else -math.inf

    return float(spent / budget * 100)


def category_breakdown(expenses: Iterable[Expense]) -> list[CategoryTotal]:
    """
    Group expenses by category label.

    Each expense contributes its actual amount if it has one, otherwise its
    estimate, otherwise nothing. Labels are compared exactly (case matters)
    and the result keeps the order in which categories first appear.
    """
    groups: dict[str, Decimal] = {}

    for expense in expenses:
        if expense.actual_amount is not None:
            amount = _to_decimal(expense.actual_amount)
        else:
            amount = _to_decimal(expense.estimated_amount)

        groups[expense.category] = groups.get(expense.category, ZERO) + amount

    return [CategoryTotal(name=name, value=value) for name, value in groups.items()]


def summarize_budget(
    expenses: Sequence[Expense],
    total_budget: Optional[Amount] = None,
) -> BudgetSummary:
    """Everything the budget overview needs in one pass over the rows."""
    estimated = total_estimated(expenses)
    spent = total_spent(expenses)
    budget = _to_decimal(total_budget) if total_budget is not None else estimated

    return BudgetSummary(
        total_estimated=estimated,
        total_spent=spent,
        budget=budget,
        remaining=remaining(expenses, total_budget),
        percentage_spent=percentage_spent(expenses, total_budget),
        categories=category_breakdown(expenses),
    )


# =============================================================================
# PROGRESS
# =============================================================================

def task_completion_counts(tasks: Iterable[Task]) -> TaskCounts:
    completed = 0
    total = 0
    for task in tasks:
        total += 1
        if task.status == TaskStatus.COMPLETED:
            completed += 1
    return TaskCounts(completed=completed, total=total)


def task_completion_ratio(tasks: Iterable[Task]) -> float:
    """Fraction of tasks completed. An empty checklist is 0, not an error."""
    counts = task_completion_counts(tasks)
    if counts.total == 0:
        return 0.0
    return counts.completed / counts.total


def task_completion_percentage(tasks: Iterable[Task]) -> int:
    """Completion in whole percent, rounding halves up."""
    counts = task_completion_counts(tasks)
    if counts.total == 0:
        return 0
    return _round_half_up(counts.completed / counts.total * 100)


def split_tasks(tasks: Iterable[Task]) -> tuple[list[Task], list[Task]]:
    """Split into (open, completed), keeping the input order within each."""
    open_tasks: list[Task] = []
    completed: list[Task] = []
    for task in tasks:
        if task.status == TaskStatus.COMPLETED:
            completed.append(task)
        else:
            open_tasks.append(task)
    return open_tasks, completed


def guest_confirmation_counts(guests: Iterable[Guest]) -> GuestCounts:
    confirmed = 0
    total = 0
    for guest in guests:
        total += 1
        if guest.status == GuestStatus.CONFIRMED:
            confirmed += 1
    return GuestCounts(confirmed=confirmed, total=total)


def build_dashboard_stats(
    tasks: Sequence[Task],
    guests: Sequence[Guest],
    expenses: Sequence[Expense],
) -> DashboardStats:
    """Numbers for the dashboard cards."""
    task_counts = task_completion_counts(tasks)
    guest_counts = guest_confirmation_counts(guests)

    return DashboardStats(
        tasks_completed=task_counts.completed,
        tasks_total=task_counts.total,
        guests_confirmed=guest_counts.confirmed,
        guests_total=guest_counts.total,
        budget_spent=total_spent(expenses),
        budget_total=total_estimated(expenses),
        progress_percentage=task_completion_percentage(tasks),
    )


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))
