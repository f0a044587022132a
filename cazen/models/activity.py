"""
Activity Models for CaZen

Every change the couple makes to their plan is recorded as an activity
event. This gives:
1. A history the couple can scroll back through
2. Debugging information when a save goes wrong

DESIGN DECISION: The activity log is append-only. Events are never edited
or deleted.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

from cazen.models.planning import Expense, Guest, GuestStatus, Organization, Task, Theme


class ActivityEventType(str, Enum):
    """Types of events we record."""
    # Wedding setup
    ORGANIZATION_CREATED = "organization_created"

    # Budget
    EXPENSE_CREATED = "expense_created"
    EXPENSE_UPDATED = "expense_updated"
    EXPENSE_DELETED = "expense_deleted"

    # Checklist
    TASK_CREATED = "task_created"
    TASK_UPDATED = "task_updated"
    TASK_COMPLETED = "task_completed"
    TASK_REOPENED = "task_reopened"
    TASK_DELETED = "task_deleted"

    # Guest list
    GUEST_CREATED = "guest_created"
    GUEST_UPDATED = "guest_updated"
    GUEST_STATUS_CHANGED = "guest_status_changed"
    GUEST_DELETED = "guest_deleted"

    # Settings
    THEME_CHANGED = "theme_changed"

    # Reads
    DASHBOARD_LOADED = "dashboard_loaded"

    # System events
    STORAGE_ERROR = "storage_error"


class ActivitySeverity(str, Enum):
    """Severity level for activity events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class ActivityEvent(BaseModel):
    """A single entry in the activity log."""

    event_id: UUID = Field(default_factory=uuid4)
    timestamp: datetime = Field(
        default_factory=datetime.utcnow,
        description="When the event occurred (UTC)"
    )

    event_type: ActivityEventType
    severity: ActivitySeverity = ActivitySeverity.INFO

    # What the event is about
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'expense', 'task', 'guest')"
    )
    entity_id: Optional[UUID] = None
    organization_id: Optional[UUID] = None

    description: str = Field(..., max_length=500)
    details: dict[str, Any] = Field(default_factory=dict)
    error_message: Optional[str] = None

    is_user_action: bool = False

    def to_log_dict(self) -> dict:
        """Convert to a dictionary suitable for structured logging."""
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": str(self.entity_id) if self.entity_id else None,
            "organization_id": str(self.organization_id) if self.organization_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class ActivityEventBuilder:
    """
    Helper class to build activity events for each planning action.

    Usage:
        event = ActivityEventBuilder.expense_created(expense)
        event = ActivityEventBuilder.task_toggled(task)
    """

    @staticmethod
    def organization_created(organization: Organization) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.ORGANIZATION_CREATED,
            entity_type="organization",
            entity_id=organization.id,
            organization_id=organization.id,
            description=f"Wedding created with {organization.partner_name}",
            details={
                "wedding_date": (
                    organization.wedding_date.isoformat()
                    if organization.wedding_date else None
                ),
                "venue": organization.venue,
            },
            is_user_action=True,
        )

    @staticmethod
    def expense_saved(expense: Expense, created: bool) -> ActivityEvent:
        event_type = (
            ActivityEventType.EXPENSE_CREATED
            if created
            else ActivityEventType.EXPENSE_UPDATED
        )
        return ActivityEvent(
            event_type=event_type,
            entity_type="expense",
            entity_id=expense.id,
            organization_id=expense.organization_id,
            description=f"Expense {'created' if created else 'updated'}: {expense.category}",
            details={
                "category": expense.category,
                "estimated_amount": (
                    str(expense.estimated_amount)
                    if expense.estimated_amount is not None else None
                ),
                "actual_amount": (
                    str(expense.actual_amount)
                    if expense.actual_amount is not None else None
                ),
                "status": expense.status.value,
            },
            is_user_action=True,
        )

    @staticmethod
    def expense_deleted(expense: Expense) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.EXPENSE_DELETED,
            entity_type="expense",
            entity_id=expense.id,
            organization_id=expense.organization_id,
            description=f"Expense deleted: {expense.category}",
            is_user_action=True,
        )

    @staticmethod
    def task_saved(task: Task, created: bool) -> ActivityEvent:
        event_type = (
            ActivityEventType.TASK_CREATED
            if created
            else ActivityEventType.TASK_UPDATED
        )
        return ActivityEvent(
            event_type=event_type,
            entity_type="task",
            entity_id=task.id,
            organization_id=task.organization_id,
            description=f"Task {'created' if created else 'updated'}: {task.title}",
            details={
                "category": task.category.value,
                "priority": task.priority,
                "due_date": task.due_date.isoformat() if task.due_date else None,
            },
            is_user_action=True,
        )

    @staticmethod
    def task_toggled(task: Task) -> ActivityEvent:
        """`task` is the record after the toggle."""
        completed = task.completed_at is not None
        return ActivityEvent(
            event_type=(
                ActivityEventType.TASK_COMPLETED
                if completed
                else ActivityEventType.TASK_REOPENED
            ),
            entity_type="task",
            entity_id=task.id,
            organization_id=task.organization_id,
            description=f"Task {'completed' if completed else 'reopened'}: {task.title}",
            is_user_action=True,
        )

    @staticmethod
    def task_deleted(task: Task) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.TASK_DELETED,
            entity_type="task",
            entity_id=task.id,
            organization_id=task.organization_id,
            description=f"Task deleted: {task.title}",
            is_user_action=True,
        )

    @staticmethod
    def guest_saved(guest: Guest, created: bool) -> ActivityEvent:
        event_type = (
            ActivityEventType.GUEST_CREATED
            if created
            else ActivityEventType.GUEST_UPDATED
        )
        return ActivityEvent(
            event_type=event_type,
            entity_type="guest",
            entity_id=guest.id,
            organization_id=guest.organization_id,
            description=f"Guest {'added' if created else 'updated'}: {guest.name}",
            details={"status": guest.status.value, "plus_one": guest.plus_one},
            is_user_action=True,
        )

    @staticmethod
    def guest_status_changed(guest: Guest, previous: GuestStatus) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.GUEST_STATUS_CHANGED,
            entity_type="guest",
            entity_id=guest.id,
            organization_id=guest.organization_id,
            description=f"{guest.name}: {previous.value} -> {guest.status.value}",
            details={"from": previous.value, "to": guest.status.value},
            is_user_action=True,
        )

    @staticmethod
    def guest_deleted(guest: Guest) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.GUEST_DELETED,
            entity_type="guest",
            entity_id=guest.id,
            organization_id=guest.organization_id,
            description=f"Guest removed: {guest.name}",
            is_user_action=True,
        )

    @staticmethod
    def theme_changed(user_id: Optional[str], theme: Theme) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.THEME_CHANGED,
            entity_type="profile",
            description=f"Theme changed to {theme.value}",
            details={"user_id": user_id, "theme": theme.value},
            is_user_action=True,
        )

    @staticmethod
    def dashboard_loaded(
        organization_id: UUID,
        tasks: int,
        guests: int,
        expenses: int,
    ) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.DASHBOARD_LOADED,
            severity=ActivitySeverity.DEBUG,
            entity_type="organization",
            entity_id=organization_id,
            organization_id=organization_id,
            description="Dashboard loaded",
            details={"tasks": tasks, "guests": guests, "expenses": expenses},
        )

    @staticmethod
    def storage_error(
        operation: str,
        error_message: str,
        organization_id: Optional[UUID] = None,
    ) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.STORAGE_ERROR,
            severity=ActivitySeverity.ERROR,
            organization_id=organization_id,
            description=f"Storage error during {operation}",
            error_message=error_message,
            details={"operation": operation},
        )
