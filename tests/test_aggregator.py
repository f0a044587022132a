"""
Tests for the dashboard aggregation functions.

All inputs are plain in-memory records; nothing here touches storage.
"""

import math
from decimal import Decimal
from typing import Optional
from uuid import uuid4

import pytest

from cazen.dashboard import aggregator
from cazen.models.planning import (
    Expense,
    Guest,
    GuestStatus,
    Task,
    TaskStatus,
)

ORG_ID = uuid4()


def expense(
    category: str = "Venue",
    estimated: Optional[str] = None,
    actual: Optional[str] = None,
) -> Expense:
    return Expense(
        organization_id=ORG_ID,
        category=category,
        estimated_amount=Decimal(estimated) if estimated is not None else None,
        actual_amount=Decimal(actual) if actual is not None else None,
    )


def task(status: TaskStatus = TaskStatus.PENDING, title: str = "") -> Task:
    return Task(organization_id=ORG_ID, status=status, title=title)


def guest(status: GuestStatus) -> Guest:
    return Guest(organization_id=ORG_ID, name="Guest", status=status)


class TestBudgetTotals:
    """Tests for total_estimated and total_spent."""

    def test_empty_collection_is_zero(self):
        """Test that no expenses sum to zero."""
        assert aggregator.total_spent([]) == Decimal("0")
        assert aggregator.total_estimated([]) == Decimal("0")

    def test_missing_amounts_count_as_zero(self):
        """Test that null amounts are treated as 0."""
        expenses = [
            expense(estimated="100.50", actual="90"),
            expense(estimated=None, actual="10.25"),
            expense(estimated="200", actual=None),
        ]
        assert aggregator.total_estimated(expenses) == Decimal("300.50")
        assert aggregator.total_spent(expenses) == Decimal("100.25")

    def test_cents_do_not_drift(self):
        """Test that repeated cents add up exactly."""
        expenses = [expense(actual="0.10") for _ in range(10)]
        assert aggregator.total_spent(expenses) == Decimal("1.00")


class TestRemaining:
    """Tests for remaining budget."""

    def test_defaults_to_total_estimated(self):
        """Test that without a budget the estimate is the reference."""
        expenses = [expense(estimated="500", actual="300"), expense(estimated="250")]
        assert aggregator.remaining(expenses) == Decimal("450")

    def test_explicit_budget_over_spent(self):
        """Test a negative remaining amount when over budget."""
        expenses = [expense(estimated="800", actual="1200")]
        assert aggregator.remaining(expenses, Decimal("1000")) == Decimal("-200")

    def test_explicit_zero_budget_is_used(self):
        """Test that a budget of 0 is not replaced by the estimate."""
        expenses = [expense(estimated="800", actual="100")]
        assert aggregator.remaining(expenses, 0) == Decimal("-100")

    def test_accepts_plain_numbers(self):
        """Test an int or float budget is converted exactly."""
        expenses = [expense(actual="0.30")]
        assert aggregator.remaining(expenses, 1000) == Decimal("999.70")
        assert aggregator.remaining(expenses, 0.5) == Decimal("0.20")


class TestPercentageSpent:
    """Tests for percentage_spent."""

    def test_against_estimate(self):
        """Test the share of the estimate already spent."""
        expenses = [expense(estimated="1000", actual="250")]
        assert aggregator.percentage_spent(expenses) == 25.0

    def test_against_explicit_budget(self):
        """Test the share of an explicit budget already spent."""
        expenses = [expense(estimated="1000", actual="1200")]
        assert aggregator.percentage_spent(expenses, Decimal("1000")) == 120.0

    def test_zero_over_zero_is_nan(self):
        """Test nothing spent against nothing budgeted gives NaN."""
        assert math.isnan(aggregator.percentage_spent([]))
        assert math.isnan(aggregator.percentage_spent([expense(category="Venue")]))

    def test_spent_against_zero_budget_is_infinite(self):
        """Test spending against a zero budget gives +inf."""
        expenses = [expense(actual="50")]
        assert aggregator.percentage_spent(expenses) == math.inf
        assert aggregator.percentage_spent(expenses, 0) == math.inf

    def test_does_not_raise(self):
        """Test that a zero denominator never raises."""
        aggregator.percentage_spent([], total_budget=Decimal("0"))


class TestCategoryBreakdown:
    """Tests for category_breakdown."""

    def test_actual_then_estimate(self):
        """Test each expense contributes actual, else estimate."""
        expenses = [
            expense(category="A", actual="100"),
            expense(category="B", estimated="50"),
            expense(category="A", estimated="20"),
        ]
        result = aggregator.category_breakdown(expenses)
        assert [(c.name, c.value) for c in result] == [
            ("A", Decimal("120")),
            ("B", Decimal("50")),
        ]

    def test_first_seen_order(self):
        """Test categories keep the order of first appearance."""
        expenses = [
            expense(category="Venue", actual="500"),
            expense(category="Catering", estimated="300"),
            expense(category="Flowers", estimated="80"),
            expense(category="Venue", estimated="100"),
        ]
        names = [c.name for c in aggregator.category_breakdown(expenses)]
        assert names == ["Venue", "Catering", "Flowers"]

    def test_case_sensitive(self):
        """Test labels differing in case are separate categories."""
        expenses = [
            expense(category="venue", actual="10"),
            expense(category="Venue", actual="20"),
        ]
        assert len(aggregator.category_breakdown(expenses)) == 2

    def test_actual_zero_wins_over_estimate(self):
        """Test an actual amount of 0 is used rather than the estimate."""
        expenses = [expense(category="DJ", estimated="900", actual="0")]
        assert aggregator.category_breakdown(expenses)[0].value == Decimal("0")

    def test_no_amounts_contributes_zero(self):
        """Test an expense with no amounts still creates its category."""
        result = aggregator.category_breakdown([expense(category="Cake")])
        assert result[0].name == "Cake"
        assert result[0].value == Decimal("0")

    def test_empty(self):
        assert aggregator.category_breakdown([]) == []


class TestSummarizeBudget:
    """Tests for summarize_budget."""

    def test_summary_fields(self):
        """Test the summary matches the individual functions."""
        expenses = [
            expense(category="Venue", estimated="1000", actual="1200"),
            expense(category="Music", estimated="500"),
        ]
        summary = aggregator.summarize_budget(expenses)

        assert summary.total_estimated == Decimal("1500")
        assert summary.total_spent == Decimal("1200")
        assert summary.budget == Decimal("1500")
        assert summary.remaining == Decimal("300")
        assert summary.percentage_spent == pytest.approx(80.0)
        assert [c.name for c in summary.categories] == ["Venue", "Music"]
        assert summary.is_over_budget is False

    def test_explicit_budget(self):
        """Test an explicit budget replaces the estimate everywhere."""
        summary = aggregator.summarize_budget(
            [expense(estimated="800", actual="1200")],
            total_budget=Decimal("1000"),
        )
        assert summary.budget == Decimal("1000")
        assert summary.remaining == Decimal("-200")
        assert summary.is_over_budget is True
        assert summary.progress_value == 100.0


class TestTaskProgress:
    """Tests for the task completion functions."""

    def test_ratio_empty_is_zero(self):
        """Test that an empty checklist does not divide by zero."""
        assert aggregator.task_completion_ratio([]) == 0

    def test_ratio_half(self):
        """Test one of two tasks completed."""
        tasks = [task(TaskStatus.COMPLETED), task(TaskStatus.PENDING)]
        assert aggregator.task_completion_ratio(tasks) == 0.5

    def test_in_progress_is_not_completed(self):
        """Test only the completed status counts."""
        tasks = [task(TaskStatus.IN_PROGRESS), task(TaskStatus.COMPLETED)]
        counts = aggregator.task_completion_counts(tasks)
        assert counts.completed == 1
        assert counts.total == 2

    def test_percentage_rounds_half_up(self):
        """Test whole-percent rounding."""
        one_of_three = [task(TaskStatus.COMPLETED), task(), task()]
        two_of_three = [task(TaskStatus.COMPLETED), task(TaskStatus.COMPLETED), task()]
        one_of_eight = [task(TaskStatus.COMPLETED)] + [task() for _ in range(7)]

        assert aggregator.task_completion_percentage(one_of_three) == 33
        assert aggregator.task_completion_percentage(two_of_three) == 67
        # 12.5 rounds up
        assert aggregator.task_completion_percentage(one_of_eight) == 13
        assert aggregator.task_completion_percentage([]) == 0

    def test_split_tasks_keeps_order(self):
        """Test open and completed tasks keep input order."""
        tasks = [
            task(TaskStatus.PENDING, "a"),
            task(TaskStatus.COMPLETED, "b"),
            task(TaskStatus.IN_PROGRESS, "c"),
            task(TaskStatus.COMPLETED, "d"),
        ]
        open_tasks, completed = aggregator.split_tasks(tasks)
        assert [t.title for t in open_tasks] == ["a", "c"]
        assert [t.title for t in completed] == ["b", "d"]


class TestGuestCounts:
    """Tests for guest_confirmation_counts."""

    def test_mixed_statuses(self):
        """Test 3 confirmed, 2 declined and 1 pending."""
        guests = (
            [guest(GuestStatus.CONFIRMED) for _ in range(3)]
            + [guest(GuestStatus.DECLINED) for _ in range(2)]
            + [guest(GuestStatus.PENDING)]
        )
        counts = aggregator.guest_confirmation_counts(guests)
        assert counts.confirmed == 3
        assert counts.total == 6

    def test_accepts_generators(self):
        """Test any iterable works, not only lists."""
        counts = aggregator.guest_confirmation_counts(
            guest(GuestStatus.CONFIRMED) for _ in range(2)
        )
        assert (counts.confirmed, counts.total) == (2, 2)


class TestDashboardStats:
    """Tests for build_dashboard_stats."""

    def test_stats(self):
        """Test the dashboard cards."""
        tasks = [task(TaskStatus.COMPLETED), task(), task(), task()]
        guests = [guest(GuestStatus.CONFIRMED), guest(GuestStatus.PENDING)]
        expenses = [
            expense(estimated="1000", actual="400"),
            expense(estimated="500"),
        ]
        stats = aggregator.build_dashboard_stats(tasks, guests, expenses)

        assert stats.tasks_completed == 1
        assert stats.tasks_total == 4
        assert stats.guests_confirmed == 1
        assert stats.guests_total == 2
        assert stats.budget_spent == Decimal("400")
        assert stats.budget_total == Decimal("1500")
        assert stats.progress_percentage == 25

    def test_empty_plan(self):
        """Test a brand-new wedding has all zeros."""
        stats = aggregator.build_dashboard_stats([], [], [])
        assert stats.tasks_total == 0
        assert stats.progress_percentage == 0
        assert stats.budget_total == Decimal("0")


class TestPurity:
    """Aggregation has no side effects."""

    def test_same_input_same_output(self):
        """Test calling twice gives identical results."""
        expenses = [
            expense(category="A", estimated="10", actual="5"),
            expense(category="B", estimated="7"),
        ]
        tasks = [task(TaskStatus.COMPLETED), task()]
        guests = [guest(GuestStatus.CONFIRMED)]

        assert aggregator.summarize_budget(expenses) == aggregator.summarize_budget(expenses)
        assert aggregator.category_breakdown(expenses) == aggregator.category_breakdown(expenses)
        assert aggregator.task_completion_ratio(tasks) == aggregator.task_completion_ratio(tasks)
        assert aggregator.build_dashboard_stats(tasks, guests, expenses) == (
            aggregator.build_dashboard_stats(tasks, guests, expenses)
        )

    def test_records_unchanged(self):
        """Test the input records are not modified."""
        expenses = [expense(category="A", estimated="10")]
        before = [e.model_dump() for e in expenses]
        aggregator.summarize_budget(expenses, Decimal("100"))
        assert [e.model_dump() for e in expenses] == before

    def test_empty_summary_repeats_with_nan(self):
        """Test an empty budget gives the same summary twice, NaN included."""
        first = aggregator.summarize_budget([])
        second = aggregator.summarize_budget([])

        assert math.isnan(first.percentage_spent)
        assert math.isnan(second.percentage_spent)
        assert first.model_dump(exclude={"percentage_spent"}) == (
            second.model_dump(exclude={"percentage_spent"})
        )
        assert first.total_estimated == Decimal("0")
        assert first.categories == []

    def test_zero_budget_repeats_with_infinity(self):
        """Test spending against a zero budget is stable across calls."""
        expenses = [expense(category="A", actual="10")]
        first = aggregator.summarize_budget(expenses, Decimal("0"))
        second = aggregator.summarize_budget(expenses, Decimal("0"))

        assert first == second
        assert math.isinf(first.percentage_spent)
