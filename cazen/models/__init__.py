"""
Data Models Package

This package contains all Pydantic models used by CaZen.
All data flowing through the planner must conform to these schemas.
"""

from cazen.models.planning import (
    Expense,
    ExpenseDraft,
    ExpenseStatus,
    Guest,
    GuestDraft,
    GuestStatus,
    Organization,
    OrganizationDraft,
    Profile,
    Task,
    TaskCategory,
    TaskDraft,
    TaskPriority,
    TaskStatus,
    Theme,
)
from cazen.models.summary import (
    BudgetSummary,
    CategoryTotal,
    DashboardStats,
    GuestCounts,
    TaskCounts,
)
from cazen.models.activity import (
    ActivityEvent,
    ActivityEventBuilder,
    ActivityEventType,
    ActivitySeverity,
)

__all__ = [
    # Planning records and drafts
    "Expense",
    "ExpenseDraft",
    "ExpenseStatus",
    "Guest",
    "GuestDraft",
    "GuestStatus",
    "Organization",
    "OrganizationDraft",
    "Profile",
    "Task",
    "TaskCategory",
    "TaskDraft",
    "TaskPriority",
    "TaskStatus",
    "Theme",
    # Summaries
    "BudgetSummary",
    "CategoryTotal",
    "DashboardStats",
    "GuestCounts",
    "TaskCounts",
    # Activity models
    "ActivityEvent",
    "ActivityEventBuilder",
    "ActivityEventType",
    "ActivitySeverity",
]
