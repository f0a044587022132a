"""Dashboard aggregation package."""

from cazen.dashboard.aggregator import (
    build_dashboard_stats,
    category_breakdown,
    guest_confirmation_counts,
    percentage_spent,
    remaining,
    split_tasks,
    summarize_budget,
    task_completion_counts,
    task_completion_percentage,
    task_completion_ratio,
    total_estimated,
    total_spent,
)

__all__ = [
    "build_dashboard_stats",
    "category_breakdown",
    "guest_confirmation_counts",
    "percentage_spent",
    "remaining",
    "split_tasks",
    "summarize_budget",
    "task_completion_counts",
    "task_completion_percentage",
    "task_completion_ratio",
    "total_estimated",
    "total_spent",
]
