"""
Tests for CaZen models

Test strategy:
1. Unit tests for records, drafts and summaries (pydantic validation)
2. Pure aggregation and service tests against in-memory storage
3. No real API calls in tests (fake worksheets stand in for Google Sheets)
"""

import math
from datetime import date, datetime
from decimal import Decimal
from uuid import uuid4

import pytest
from pydantic import ValidationError

from cazen.models.activity import (
    ActivityEvent,
    ActivityEventBuilder,
    ActivityEventType,
    ActivitySeverity,
)
from cazen.models.planning import (
    Expense,
    ExpenseDraft,
    ExpenseStatus,
    Guest,
    GuestDraft,
    GuestStatus,
    Organization,
    OrganizationDraft,
    Task,
    TaskCategory,
    TaskDraft,
    TaskPriority,
    TaskStatus,
    Theme,
)
from cazen.models.summary import BudgetSummary


class TestRecordModels:
    """Tests for the stored record models."""

    def test_expense_defaults(self):
        """Test Expense defaults to pending with no amounts."""
        expense = Expense(organization_id=uuid4(), category="Venue")
        assert expense.status == ExpenseStatus.PENDING
        assert expense.estimated_amount is None
        assert expense.actual_amount is None
        assert expense.paid_at is None

    def test_expense_accepts_stored_text_amounts(self):
        """Test amounts read back as text become Decimals."""
        expense = Expense(
            organization_id=uuid4(),
            category="Catering",
            estimated_amount="1500.50",
        )
        assert expense.estimated_amount == Decimal("1500.50")

    def test_records_are_frozen(self):
        """Test that records cannot be modified in place."""
        task = Task(organization_id=uuid4(), title="Book DJ")
        with pytest.raises(ValidationError):
            task.title = "Book band"

    def test_task_high_priority(self):
        """Test is_high_priority for normal and high tasks."""
        org_id = uuid4()
        assert Task(organization_id=org_id, priority=0).is_high_priority is False
        assert Task(organization_id=org_id, priority=1).is_high_priority is True
        assert Task(organization_id=org_id, priority=5).is_high_priority is True

    def test_task_defaults(self):
        """Test Task defaults."""
        task = Task(organization_id=uuid4())
        assert task.status == TaskStatus.PENDING
        assert task.category == TaskCategory.OTHER
        assert task.completed_at is None

    def test_guest_bool_from_sheet_text(self):
        """Test plus_one parses the text a spreadsheet cell holds."""
        guest = Guest(organization_id=uuid4(), name="Ana", plus_one="True")
        assert guest.plus_one is True

    def test_organization_strips_whitespace(self):
        """Test that whitespace is stripped from text fields."""
        organization = Organization(owner_id="user-1", partner_name="  Maria  ")
        assert organization.partner_name == "Maria"


class TestDraftModels:
    """Tests for form input validation."""

    def test_expense_draft_rejects_negative_amount(self):
        """Test that negative amounts are rejected."""
        with pytest.raises(ValidationError):
            ExpenseDraft(category="Venue", estimated_amount=Decimal("-1"))

    def test_expense_draft_rejects_three_decimals(self):
        """Test amounts are limited to cents."""
        with pytest.raises(ValidationError):
            ExpenseDraft(category="Venue", actual_amount=Decimal("10.001"))

    def test_expense_draft_requires_category(self):
        """Test a blank category is rejected."""
        with pytest.raises(ValidationError):
            ExpenseDraft(category="   ")

    def test_expense_draft_blank_description_is_none(self):
        """Test an empty description becomes None."""
        draft = ExpenseDraft(category="Venue", description="")
        assert draft.description is None

    def test_task_draft_requires_title(self):
        """Test a task needs a title."""
        with pytest.raises(ValidationError):
            TaskDraft(title="")

    def test_task_draft_priority(self):
        """Test priority parses from its integer value."""
        draft = TaskDraft(title="Send invites", priority=1)
        assert draft.priority == TaskPriority.HIGH

    def test_guest_draft_table_number_positive(self):
        """Test table numbers start at 1."""
        with pytest.raises(ValidationError):
            GuestDraft(name="Ana", table_number=0)

    def test_organization_draft_requires_date(self):
        """Test the wedding date is mandatory."""
        with pytest.raises(ValidationError):
            OrganizationDraft(partner_name="Maria")

    def test_organization_draft_creation(self):
        """Test OrganizationDraft creation."""
        draft = OrganizationDraft(
            partner_name="Maria",
            wedding_date=date(2026, 11, 21),
            venue="Chácara Flores",
        )
        assert draft.wedding_date == date(2026, 11, 21)


class TestBudgetSummaryModel:
    """Tests for BudgetSummary helpers."""

    def _summary(self, remaining: str, percentage: float) -> BudgetSummary:
        return BudgetSummary(
            total_estimated=Decimal("100"),
            total_spent=Decimal("100"),
            budget=Decimal("100"),
            remaining=Decimal(remaining),
            percentage_spent=percentage,
        )

    def test_over_budget(self):
        """Test is_over_budget follows the sign of remaining."""
        assert self._summary("-200", 120.0).is_over_budget is True
        assert self._summary("0", 100.0).is_over_budget is False

    def test_progress_value_clamped(self):
        """Test the progress bar value stays within 0..100."""
        assert self._summary("-200", 120.0).progress_value == 100.0
        assert self._summary("50", 50.0).progress_value == 50.0

    def test_progress_value_non_finite(self):
        """Test NaN and infinity give an empty progress bar."""
        assert self._summary("0", math.nan).progress_value == 0.0
        assert self._summary("0", math.inf).progress_value == 0.0


class TestActivityModels:
    """Tests for activity-related models."""

    def test_activity_event_creation(self):
        """Test ActivityEvent model creation."""
        event = ActivityEvent(
            event_type=ActivityEventType.EXPENSE_CREATED,
            description="Expense created",
        )
        assert event.event_type == ActivityEventType.EXPENSE_CREATED
        assert event.severity == ActivitySeverity.INFO

    def test_activity_event_to_log_dict(self):
        """Test conversion to log dictionary."""
        event = ActivityEvent(
            event_type=ActivityEventType.GUEST_CREATED,
            description="Guest added",
            details={"status": "pending"},
        )
        log_dict = event.to_log_dict()
        assert "event_id" in log_dict
        assert log_dict["event_type"] == "guest_created"
        assert log_dict["details"]["status"] == "pending"
        assert log_dict["entity_id"] is None

    def test_builder_expense_saved(self):
        """Test ActivityEventBuilder.expense_saved for create and update."""
        expense = Expense(
            organization_id=uuid4(),
            category="Venue",
            estimated_amount=Decimal("500"),
        )
        created = ActivityEventBuilder.expense_saved(expense, created=True)
        updated = ActivityEventBuilder.expense_saved(expense, created=False)

        assert created.event_type == ActivityEventType.EXPENSE_CREATED
        assert updated.event_type == ActivityEventType.EXPENSE_UPDATED
        assert created.entity_id == expense.id
        assert created.organization_id == expense.organization_id
        assert created.details["estimated_amount"] == "500"
        assert created.details["actual_amount"] is None
        assert created.is_user_action is True

    def test_builder_task_toggled(self):
        """Test task_toggled picks completed or reopened from completed_at."""
        task = Task(organization_id=uuid4(), title="Book DJ")
        done = task.model_copy(
            update={"status": TaskStatus.COMPLETED, "completed_at": datetime.utcnow()}
        )
        assert ActivityEventBuilder.task_toggled(done).event_type == ActivityEventType.TASK_COMPLETED
        assert ActivityEventBuilder.task_toggled(task).event_type == ActivityEventType.TASK_REOPENED

    def test_builder_guest_status_changed(self):
        """Test the RSVP change event records both statuses."""
        guest = Guest(organization_id=uuid4(), name="Ana", status=GuestStatus.CONFIRMED)
        event = ActivityEventBuilder.guest_status_changed(guest, previous=GuestStatus.PENDING)
        assert event.details == {"from": "pending", "to": "confirmed"}

    def test_builder_storage_error(self):
        """Test storage errors are logged at error severity."""
        event = ActivityEventBuilder.storage_error("task_create", "quota exceeded")
        assert event.event_type == ActivityEventType.STORAGE_ERROR
        assert event.severity == ActivitySeverity.ERROR
        assert event.error_message == "quota exceeded"
        assert event.is_user_action is False

    def test_builder_theme_changed(self):
        """Test theme events carry the user id in details."""
        event = ActivityEventBuilder.theme_changed("user-1", Theme.DARK)
        assert event.details == {"user_id": "user-1", "theme": "dark"}


class TestEnums:
    """Tests for enum values as stored in the sheets."""

    def test_task_category_values(self):
        """Test that expected categories exist."""
        expected = ["ceremony", "reception", "guests", "vendors", "financial", "other"]
        for cat in expected:
            assert TaskCategory(cat) is not None

    def test_status_values(self):
        """Test status string values."""
        assert ExpenseStatus.OVERDUE.value == "overdue"
        assert TaskStatus.IN_PROGRESS.value == "in_progress"
        assert GuestStatus.DECLINED.value == "declined"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
